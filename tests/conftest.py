"""
Pytest configuration and fixtures for the test suite.

This module contains shared fixtures used across all tests.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import httpx
import pytest
import structlog
from pydantic import SecretStr

from core.config import TaxServiceSettings, get_settings
from services.tax_service import TaxServiceClient

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

SANDBOX_URL = "https://sandbox.example/api"

# Settings fields read from unprefixed environment variables
APP_ENV_VARS = ("ENVIRONMENT", "LOG_LEVEL", "JSON_LOGS")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep tax service and logging variables from the host out of every test."""
    for key in list(os.environ.keys()):
        if key.startswith("TAX_SERVICE_") or key in APP_ENV_VARS:
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo logging configuration so no test logs to another test's captured stdout."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def settings() -> TaxServiceSettings:
    """Return settings for the sandbox account."""
    return TaxServiceSettings(
        url=SANDBOX_URL,
        account_number="1001",
        license_key=SecretStr("abc"),
        company_code="ACME",
    )


@pytest.fixture()
def sent_requests() -> list[httpx.Request]:
    """Collect the requests that reached the mock transport."""
    return []


@pytest.fixture()
def make_client(
    settings: TaxServiceSettings,
    sent_requests: list[httpx.Request],
) -> Callable[..., TaxServiceClient]:
    """
    Return a factory for clients backed by httpx.MockTransport.

    The transport answers every request with ``status_code`` and the given
    ``json`` or raw ``content``, or raises ``raises``.
    """

    def _make(
        *,
        status_code: int = 200,
        json: Any = None,
        content: bytes = b"",
        raises: Exception | None = None,
        client_settings: TaxServiceSettings | None = None,
    ) -> TaxServiceClient:
        def handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            if raises is not None:
                raise raises
            if json is not None:
                return httpx.Response(status_code, json=json)
            return httpx.Response(status_code, content=content)

        return TaxServiceClient(
            client_settings or settings,
            transport=httpx.MockTransport(handler),
        )

    return _make
