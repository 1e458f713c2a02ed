"""Shared pytest fixtures for service tests."""

import pytest
from unittest.mock import AsyncMock, Mock

from src.schemas.reviews import ReviewSelection
from src.schemas.water import UtilityEntry, UtilityListPayload, UtilityResultsPayload


@pytest.fixture
def mock_water_client():
    """Create a mock WaterDataClient with one utility and no results."""
    client = AsyncMock()
    client.api_key = "test-water-key"
    client.list_utilities = AsyncMock(
        return_value=UtilityListPayload(
            result="OK", data=[UtilityEntry(pwsid="TN0000123", name="First Utility District")]
        )
    )
    client.get_results = AsyncMock(return_value=UtilityResultsPayload(result="OK", data=[]))
    return client


@pytest.fixture
def mock_geocoding_service():
    service = AsyncMock()
    service.geocode = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_contaminant_service():
    service = AsyncMock()
    service.get_contaminants = AsyncMock(return_value=[])
    return service


@pytest.fixture
def mock_customer_finder():
    finder = AsyncMock()
    finder.find = AsyncMock(return_value=[])
    return finder


@pytest.fixture
def mock_review_selector():
    selector = AsyncMock()
    selector.select = AsyncMock(return_value=ReviewSelection())
    return selector


@pytest.fixture
def mock_report_repository():
    """Create a mock ReportRepository."""
    repo = AsyncMock()
    repo.create = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_and_mark_viewed = AsyncMock(return_value=None)
    repo.mark_viewed = AsyncMock(return_value=False)
    return repo


@pytest.fixture
def repository_factory():
    """Build a repository_factory that hands back a prepared mock repository."""

    def _make(repo):
        return Mock(return_value=repo)

    return _make
