# stockgate/routers/market.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status

from stockgate.data_client import UpstreamError
from stockgate.errors import http_error
from stockgate.market import MarketService
from stockgate.schemas import CompanyInfo, ErrorResponse, TopPerformer

logger = logging.getLogger("stockgate.routers.market")

router = APIRouter(
    prefix="/api",
    tags=["market"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

QUERY_REQUIRED = "Query parameter is required"
SYMBOL_REQUIRED = "Symbol parameter is required"


def get_market(request: Request) -> MarketService:
    return request.app.state.market


def _require(value: str | None, message: str) -> str:
    # Empty strings count as missing
    if not value:
        raise http_error(message)
    return value


def _upstream_failed(message: str, exc: Exception):
    logger.exception("%s: %s", message, exc)
    return http_error(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/search")
async def search(
    query: str | None = Query(None, description="Symbol or company name fragment"),
    market: MarketService = Depends(get_market),
) -> list[Any]:
    """Symbol search, proxied to Twelve Data /symbol_search."""
    q = _require(query, QUERY_REQUIRED)
    try:
        return await market.search(q)
    except UpstreamError as e:
        raise _upstream_failed("Failed to fetch stock search", e)


@router.get("/top-performers", response_model=list[TopPerformer])
async def top_performers(market: MarketService = Depends(get_market)):
    """Placeholder: first ten listed symbols with changePercent fixed at 0."""
    try:
        return await market.top_performers()
    except UpstreamError as e:
        raise _upstream_failed("Failed to fetch top performers", e)


@router.get("/quote")
async def quote(
    symbol: str | None = Query(None, description="Ticker (e.g., AAPL)"),
    market: MarketService = Depends(get_market),
) -> Any:
    """Live quote, returned exactly as Twelve Data sends it."""
    sym = _require(symbol, SYMBOL_REQUIRED)
    try:
        return await market.quote(sym)
    except UpstreamError as e:
        raise _upstream_failed("Failed to fetch stock quote", e)


@router.get("/company-info", response_model=CompanyInfo)
async def company_info(
    symbol: str | None = Query(None, description="Ticker (e.g., AAPL)"),
    market: MarketService = Depends(get_market),
):
    """Placeholder: the same mock fundamentals for every symbol."""
    sym = _require(symbol, SYMBOL_REQUIRED)
    try:
        return await market.company_info(sym)
    except UpstreamError as e:
        raise _upstream_failed("Failed to fetch company info", e)


@router.get("/historical-data")
async def historical_data(
    symbol: str | None = Query(None, description="Ticker (e.g., AAPL)"),
    interval: str | None = Query(None, description="Bar interval (e.g., 1min, 1h, 1day); default 1day"),
    market: MarketService = Depends(get_market),
) -> Any:
    """Last 30 points of the Twelve Data time series for symbol/interval."""
    sym = _require(symbol, SYMBOL_REQUIRED)
    try:
        return await market.historical_data(sym, interval)
    except UpstreamError as e:
        raise _upstream_failed("Failed to fetch historical data", e)
