"""Transport interface for executing HTTP requests."""

from abc import ABC, abstractmethod

import httpx

from keyorchestrator.domain.models.http import ApiRequest


class Transport(ABC):
    """Abstract interface for the HTTP layer.

    A transport owns the service URL, default headers, compression and
    retry policy. It returns the successful ``httpx.Response``; anything
    else is raised as TransportError after retries are used up.
    """

    @abstractmethod
    def send(self, request: ApiRequest) -> httpx.Response:
        """Execute a request.

        Args:
            request: Request assembled by an endpoint operation.

        Returns:
            Response with a 2xx status code.

        Raises:
            TransportError: If the request fails or the status is not 2xx.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release connections held by the transport."""
        pass

    @property
    @abstractmethod
    def service_url(self) -> str:
        """Base URL requests are sent to."""
        pass
