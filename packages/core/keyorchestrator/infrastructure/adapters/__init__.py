"""Transport adapters."""

from keyorchestrator.infrastructure.adapters.httpx_transport import HttpxTransport

__all__ = ["HttpxTransport"]
