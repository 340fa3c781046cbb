"""Authenticator interface for injecting credentials into requests."""

from abc import ABC, abstractmethod


class Authenticator(ABC):
    """Abstract interface for request authentication.

    The transport calls :meth:`authenticate` on the outgoing headers of
    every request, including retries.

    Example:
        ```python
        class StaticHeaderAuthenticator(Authenticator):
            AUTH_TYPE = "static"

            def authenticate(self, headers: dict[str, str]) -> None:
                headers["X-Api-Key"] = self._key

            def validate(self) -> None:
                if not self._key:
                    raise ValueError("key is required")
        ```
    """

    AUTH_TYPE: str = ""
    """Name of the authentication scheme, e.g. "iam" or "bearertoken"."""

    @abstractmethod
    def authenticate(self, headers: dict[str, str]) -> None:
        """Add credentials to the outgoing request headers in place.

        Args:
            headers: Mutable request headers.

        Raises:
            AuthenticationError: If credentials cannot be obtained.
        """
        pass

    @abstractmethod
    def validate(self) -> None:
        """Check the authenticator configuration.

        Raises:
            ValueError: If the configuration is incomplete.
        """
        pass
