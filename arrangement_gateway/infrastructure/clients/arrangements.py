"""Arrangement options API HTTP client for storing and reading plans"""

import httpx
from typing import Any, Dict, List
from pydantic import ValidationError

from arrangement_gateway.config import settings
from arrangement_gateway.domain.exceptions import ArrangementsAPIError
from arrangement_gateway.infrastructure.clients.schemas import CreatePlanRequest, StoredPlanRecord
from arrangement_gateway.infrastructure.observability.metrics import (
    arrangements_api_failures_counter,
    arrangements_api_latency_histogram,
)

OPTIONS_PATH = "/api/arrangement-options"


class ArrangementsClient:
    """
    Client for the agency's arrangement options API.

    The API owns persistence and scopes every call to the tenant in the
    bearer token; this client only speaks its request/response contract.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.arrangements_api_base
        self.token = token or settings.arrangements_api_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response | None:
        """
        Send one request; returns None for 404 so callers can decide what missing means.

        Raises:
            ArrangementsAPIError: On timeout, network failure, or HTTP errors
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self.transport,
        ) as client:
            try:
                with arrangements_api_latency_histogram.labels(operation=operation).time():
                    response = await client.request(method, path, **kwargs)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                return response

            except httpx.TimeoutException as e:
                arrangements_api_failures_counter.labels(operation=operation).inc()
                raise ArrangementsAPIError(f"Arrangements API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                arrangements_api_failures_counter.labels(operation=operation).inc()
                raise ArrangementsAPIError(f"Arrangements API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                arrangements_api_failures_counter.labels(operation=operation).inc()
                raise ArrangementsAPIError(f"Arrangements API unreachable: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ArrangementsAPIError("Arrangements API returned a non-JSON body") from e

    @staticmethod
    def _parse_record(data: Any) -> StoredPlanRecord:
        try:
            return StoredPlanRecord.model_validate(data)
        except ValidationError as e:
            raise ArrangementsAPIError(f"Invalid plan data from arrangements API: {e}") from e

    async def create_plan(self, request: CreatePlanRequest) -> StoredPlanRecord:
        """Persist a new plan and return the stored record (with id and createdAt)"""
        response = await self._request("create", "POST", OPTIONS_PATH, json=request.to_payload())
        if response is None:
            raise ArrangementsAPIError("Arrangements API error: 404")
        return self._parse_record(self._json(response))

    async def list_plans(self) -> List[StoredPlanRecord]:
        """Fetch every plan stored for the token's tenant"""
        response = await self._request("list", "GET", OPTIONS_PATH)
        if response is None:
            raise ArrangementsAPIError("Arrangements API error: 404")

        data = self._json(response)
        if not isinstance(data, list):
            raise ArrangementsAPIError("Invalid plan list from arrangements API")
        return [self._parse_record(item) for item in data]

    async def get_plan(self, plan_id: str) -> StoredPlanRecord | None:
        response = await self._request("get", "GET", f"{OPTIONS_PATH}/{plan_id}")
        if response is None:
            return None
        return self._parse_record(self._json(response))

    async def delete_plan(self, plan_id: str) -> bool:
        """Delete a plan; False if it was already gone"""
        response = await self._request("delete", "DELETE", f"{OPTIONS_PATH}/{plan_id}")
        return response is not None
