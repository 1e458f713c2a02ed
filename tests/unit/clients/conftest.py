"""Shared fixtures for HTTP client tests."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest


@pytest.fixture
def mock_http():
    """Patch ``httpx.AsyncClient`` and expose the inner client's ``get`` mock."""
    with patch("httpx.AsyncClient") as client_cls:
        inner = MagicMock()
        inner.get = AsyncMock()
        client_cls.return_value.__aenter__.return_value = inner
        client_cls.return_value.__aexit__.return_value = False
        yield inner.get


def _response(status_code: int = 200, json=None, text: str | None = None) -> httpx.Response:
    request = httpx.Request("GET", "https://example.test/")
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=json, request=request)


@pytest.fixture
def make_response():
    """Build a real ``httpx.Response`` bound to a dummy request."""
    return _response
