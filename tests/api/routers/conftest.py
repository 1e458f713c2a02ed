"""Shared pytest fixtures for router integration tests."""

import pytest
from contextlib import ExitStack
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock, patch

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings

API_SECRET = "test-secret"


# Mock database before the app starts to avoid connection issues
@pytest.fixture(autouse=True)
def mock_database_init():
    """Mock database initialization for all router tests."""
    with ExitStack() as stack:
        stack.enter_context(patch("src.main.init_db", new_callable=AsyncMock))
        mock_engine = stack.enter_context(patch("src.main.engine"))
        mock_engine.dispose = AsyncMock()
        yield


@pytest.fixture
def mock_db_session():
    """Create a mock AsyncSession for router tests."""
    session = AsyncMock(spec=AsyncSession)

    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.rowcount = 0

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def test_settings():
    """Real settings with a known secret and water API key."""
    return Settings(
        _env_file=None,
        api_secret=API_SECRET,
        water_api_key="test-water-key",
        cta_url="https://example.com/claim",
        cta_phone="(555) 010-0100",
    )


@pytest.fixture
def mock_report_service():
    """Create a mock ReportService."""
    service = AsyncMock()
    service.create_report = AsyncMock()
    service.build_page = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_diagnostics_service():
    """Create a mock WaterDiagnosticsService."""
    service = AsyncMock()
    service.check = AsyncMock()
    return service


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {API_SECRET}"}


@pytest.fixture
def client(mock_db_session, test_settings, mock_report_service, mock_diagnostics_service):
    """TestClient with infra dependencies overridden; auth runs for real."""
    from src.main import app
    from src.database import get_db
    from src.config import get_settings
    from src.dependencies import get_report_service_dep
    from src.factories.service_factories import get_water_diagnostics_service

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_report_service_dep] = lambda: mock_report_service
    app.dependency_overrides[get_water_diagnostics_service] = lambda: mock_diagnostics_service

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_page():
    """A fully assembled ReportPage."""
    from src.schemas.reports import Coordinates, ReportPage, ReportSummary
    from src.schemas.water import ContaminantView

    return ReportPage(
        report=ReportSummary(
            id="a1b2c3d4e5f6",
            client_name="Jane Smith",
            address="123 Main St",
            city="Farragut",
            state="TN",
            zip="37934",
            viewed=True,
        ),
        first_name="Jane",
        full_address="123 Main St, Farragut, TN 37934",
        center=Coordinates(lat=35.88, lng=-84.15),
        contaminants=[
            ContaminantView(
                name="Chromium (hexavalent)",
                description="Increases cancer risk",
                detected_level=0.4,
                unit="PPB",
                ewg_guideline=0.02,
                times_above_guideline=20,
                status="exceeds",
            )
        ],
        flagged_count=1,
    )
