"""Operator probe of the water data provider, step by step."""

from src.clients.water_data_client import WaterDataClient
from src.exceptions import UpstreamError
from src.schemas.ops import SampleContaminant, WaterCheckResponse
from src.schemas.water import parse_contaminant_records
from src.utils.logger import get_logger

log = get_logger(__name__)


class WaterDiagnosticsService:
    """Explains why a city gets no contaminant data, without filtering anything."""

    def __init__(self, client: WaterDataClient, sample_size: int = 3):
        self.client = client
        self.sample_size = sample_size

    async def check(self, city: str, state: str) -> WaterCheckResponse:
        key = self.client.api_key or ""
        report = WaterCheckResponse(
            city=city,
            state=state,
            has_api_key=bool(key),
            key_length=len(key),
            key_preview=f"{key[:5]}..." if key else "MISSING",
        )

        try:
            utilities = await self.client.list_utilities(city, state)
        except UpstreamError as e:
            report.utility_status = e.status_code
            report.error = f"{e.step}: {e.message}"
            log.warning("water check failed", step=e.step, status_code=e.status_code)
            return report

        report.utility_status = 200
        report.utility_result = utilities.result
        report.utility_count = len(utilities.data or [])
        if not utilities.data:
            return report

        report.pwsid = utilities.data[0].pwsid
        try:
            results = await self.client.get_results(report.pwsid)
        except UpstreamError as e:
            report.results_status = e.status_code
            report.error = f"{e.step}: {e.message}"
            log.warning("water check failed", step=e.step, status_code=e.status_code)
            return report

        report.results_status = 200
        report.results_result = results.result
        raw = results.data or []
        report.contaminant_count = len(raw)
        records, _ = parse_contaminant_records(raw)
        report.sample_contaminants = [
            SampleContaminant(
                name=r.name, median=r.median, unit=r.unit, fed_mcl=r.fed_mcl, slr=r.slr
            )
            for r in records[: self.sample_size]
        ]
        log.info(
            "water check complete",
            city=city,
            pwsid=report.pwsid,
            contaminant_count=report.contaminant_count,
        )
        return report
