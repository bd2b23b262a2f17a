# stockgate/market.py
# One method per API route: derive the cache key, consult the cache, call upstream on a miss.
from __future__ import annotations

from typing import Any

from stockgate import cache as keys
from stockgate.cache import DEFAULT_INTERVAL, ResponseCache, get_or_fetch
from stockgate.data_client import TwelveDataClient
from stockgate.schemas import CompanyInfo, TopPerformer

TOP_PERFORMERS_LIMIT = 10


def _data_list(body: Any) -> list[Any]:
    """Pull the `data` array out of a Twelve Data list response ([] if absent or not a list)."""
    if isinstance(body, dict):
        data = body.get("data")
        if isinstance(data, list):
            return data
    return []


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class MarketService:
    def __init__(self, cache: ResponseCache, client: TwelveDataClient):
        self.cache = cache
        self.client = client

    async def search(self, query: str) -> list[Any]:
        async def fetch():
            return _data_list(await self.client.symbol_search(query))

        return await get_or_fetch(self.cache, keys.search_key(query), fetch, route="search")

    async def top_performers(self) -> list[dict[str, Any]]:
        """
        STUB: Twelve Data has no gainers endpoint on the free tier. We list the first
        ten symbols from /stocks and report changePercent as 0.
        """

        async def fetch():
            symbols = [s for s in _data_list(await self.client.stocks()) if isinstance(s, dict)]
            return [
                TopPerformer(
                    symbol=_text(s.get("symbol")), name=_text(s.get("name")), changePercent=0
                ).model_dump()
                for s in symbols[:TOP_PERFORMERS_LIMIT]
            ]

        return await get_or_fetch(
            self.cache, keys.top_performers_key(), fetch, route="top_performers"
        )

    async def quote(self, symbol: str) -> Any:
        async def fetch():
            return await self.client.quote(symbol)

        return await get_or_fetch(self.cache, keys.quote_key(symbol), fetch, route="quote")

    async def company_info(self, symbol: str) -> dict[str, Any]:
        """STUB: fixed placeholder fundamentals, no upstream call."""

        async def fetch():
            return CompanyInfo(symbol=symbol).model_dump()

        return await get_or_fetch(
            self.cache, keys.company_info_key(symbol), fetch, route="company_info"
        )

    async def historical_data(self, symbol: str, interval: str | None = None) -> Any:
        interval = interval or DEFAULT_INTERVAL

        async def fetch():
            return await self.client.time_series(symbol, interval)

        return await get_or_fetch(
            self.cache,
            keys.historical_data_key(symbol, interval),
            fetch,
            route="historical_data",
        )
