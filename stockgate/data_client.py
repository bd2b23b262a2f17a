"""
Async client for the Twelve Data REST API.

Endpoints used:
  /symbol_search  -> {"data": [...matches], "status": "ok"}
  /stocks         -> {"data": [{symbol, name, ...}, ...]}
  /quote          -> {symbol, name, open, high, low, close, ...}
  /time_series    -> {"meta": {...}, "values": [...], "status": "ok"}

Notes / Pitfalls:
- Every failure (network, timeout, non-2xx, body that is not JSON) is raised as
  UpstreamError. Callers do not get to tell them apart.
- Twelve Data sometimes answers 200 with {"status": "error", ...}. That body is
  passed through as-is, like any other 200.
- No retries. One request per call.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from stockgate.config import Settings
from stockgate.observability import UPSTREAM_REQUESTS

logger = logging.getLogger("stockgate.data_client")

HISTORY_OUTPUT_SIZE = 30


class UpstreamError(Exception):
    """Raised for any failed call to the market data provider."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"{endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class TwelveDataClient:
    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.twelvedata.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._http = httpx.AsyncClient(
            base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> TwelveDataClient:
        return cls(
            api_key=settings.twelve_data_api_key,
            base_url=settings.twelve_data_base_url,
            timeout=settings.upstream_timeout_sec,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    # ----------------------------------------------------------------------------------
    # Transport
    # ----------------------------------------------------------------------------------
    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        query = dict(params or {})
        if self._api_key:
            query["apikey"] = self._api_key
        try:
            r = await self._http.get(endpoint, params=query)
            r.raise_for_status()
            body = r.json()
        except httpx.HTTPStatusError as e:
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="http_error").inc()
            raise UpstreamError(endpoint, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="network_error").inc()
            raise UpstreamError(endpoint, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            # body was not JSON
            UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="bad_body").inc()
            raise UpstreamError(endpoint, "invalid JSON body") from e

        UPSTREAM_REQUESTS.labels(endpoint=endpoint, outcome="ok").inc()
        return body

    # ----------------------------------------------------------------------------------
    # Public API
    # ----------------------------------------------------------------------------------
    async def symbol_search(self, query: str) -> Any:
        return await self._get("/symbol_search", {"symbol": query})

    async def stocks(self) -> Any:
        return await self._get("/stocks")

    async def quote(self, symbol: str) -> Any:
        return await self._get("/quote", {"symbol": symbol})

    async def time_series(self, symbol: str, interval: str) -> Any:
        return await self._get(
            "/time_series",
            {
                "symbol": symbol,
                "interval": interval,
                "format": "JSON",
                "outputsize": HISTORY_OUTPUT_SIZE,
            },
        )
