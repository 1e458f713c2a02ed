"""Client for the water data provider's utility directory and results API."""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.exceptions import UpstreamError
from src.schemas.water import UtilityListPayload, UtilityResultsPayload
from src.utils.logger import get_logger, truncate

log = get_logger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class WaterDataClient:
    """Client for utility lookup and published contaminant results.

    Methods raise ``UpstreamError`` for transport failures, non-2xx statuses
    and payloads that do not match the expected schema. They do not judge the
    payload's ``result`` code; callers decide what a non-"OK" answer means.
    """

    def __init__(self, api_key: str, base_url: str, timeout: float = 15.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _get(
        self, path: str, params: dict[str, Any], step: str, schema: type[PayloadT]
    ) -> PayloadT:
        url = f"{self.base_url}{path}"
        log.debug("water api request", step=step, url=url, params=params)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise UpstreamError(step=step, message=f"{type(e).__name__}: {e}")

        if not response.is_success:
            raise UpstreamError(
                step=step,
                message=f"unexpected status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return schema.model_validate_json(response.content)
        except ValidationError as e:
            log.warning(
                "water api payload rejected",
                step=step,
                body_len=len(response.content),
                body=truncate(response.text, 300),
            )
            raise UpstreamError(
                step=f"{step}_parse",
                message=f"malformed payload ({e.error_count()} errors, len={len(response.content)})",
                status_code=response.status_code,
            )

    async def list_utilities(self, city: str | None, state: str | None) -> UtilityListPayload:
        """Look up public water systems serving a city/state."""
        params: dict[str, Any] = {}
        if city:
            params["city"] = city
        if state:
            params["state_code"] = state
        return await self._get("/utilities/list", params, "utility_lookup", UtilityListPayload)

    async def get_results(self, pwsid: str) -> UtilityResultsPayload:
        """Fetch aggregated contaminant results for one water system."""
        params = {"pws_id": pwsid, "result_type": "pws"}
        return await self._get(
            "/utilities/results", params, "results_fetch", UtilityResultsPayload
        )
