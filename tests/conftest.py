"""Shared pytest fixtures."""

# Clear settings cache before any imports to prevent stale values with coverage
from src.config import get_settings

get_settings.cache_clear()

import pytest
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock


# Database mocking fixtures


@pytest.fixture
def mock_async_session():
    """Create a mock AsyncSession for repository and service tests."""
    session = AsyncMock()

    # Mock result object for execute
    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalar_one = Mock(return_value=0)
    mock_result.scalars = Mock(return_value=Mock(all=Mock(return_value=[])))
    mock_result.fetchall = Mock(return_value=[])
    mock_result.rowcount = 0

    session.execute = AsyncMock(return_value=mock_result)
    session.scalar = AsyncMock(return_value=0)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = Mock()
    session.close = AsyncMock()

    return session


@pytest.fixture
def session_factory(mock_async_session):
    """An async_sessionmaker stand-in that always yields ``mock_async_session``."""

    @asynccontextmanager
    async def _factory():
        yield mock_async_session

    return _factory


@pytest.fixture
def make_record():
    """Factory for raw contaminant record dicts as the provider sends them."""

    def _make(**overrides):
        record = {
            "name": "Arsenic",
            "type": "Inorganic",
            "unit": "PPB",
            "median": None,
            "max": None,
            "detection_rate": None,
            "slr": None,
            "fed_mcl": None,
            "health_effects": None,
            "sources": None,
            "body_effects": None,
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def make_report():
    """Factory for Report-like objects as repositories return them."""

    def _make(**overrides):
        fields = {
            "id": "a1b2c3d4e5f6",
            "client_name": "Jane Smith",
            "address": "123 Main St",
            "city": "Farragut",
            "state": "TN",
            "zip": "37934",
            "phone": "8655551234",
            "lat": 35.88,
            "lng": -84.15,
            "viewed": False,
            "created_at": None,
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return _make
