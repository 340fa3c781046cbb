"""Pytest configuration and shared fixtures."""
import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dotenv import load_dotenv

from fixtures.test_data import (  # noqa: F401
    SERVICE_URL,
    MockService,
    mock_service,
    observability_manager,
    sample_managed_key_payload,
    sample_vault_payload,
)
from keyorchestrator.client import KeyOrchestratorClient

# Load .env file from project root before running tests
project_root = Path(__file__).parent.parent.parent.parent
env_path = project_root / ".env"
if env_path.exists():
    load_dotenv(env_path)
else:
    # Fallback: try loading from packages/core
    core_env_path = project_root / "packages" / "core" / ".env"
    if core_env_path.exists():
        load_dotenv(core_env_path)


@pytest.fixture(autouse=True)
def clean_uko_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove UKO_* variables so settings only see what a test sets."""
    for name in list(os.environ):
        if name.upper().startswith("UKO_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def client(
    mock_service: MockService, observability_manager: MagicMock
) -> Iterator[KeyOrchestratorClient]:
    """Create a KeyOrchestratorClient talking to the mock service.

    Returns:
        Client without authentication and with retries disabled.
    """
    client = KeyOrchestratorClient(
        config={"url": SERVICE_URL, "auth_type": "noauth"},
        observability_manager=observability_manager,
        http_client=mock_service.http_client(),
    )
    yield client
    client.close()
