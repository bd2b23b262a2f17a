from typing import Literal

from pydantic import BaseModel


# --- Root payload ---
class RootResponse(BaseModel):
    message: str


# --- Health payload ---
class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    as_of: str
    service: str = "stockgate"
    cache_entries: int
    upstream_configured: bool


# --- Version payload ---
class VersionResponse(BaseModel):
    service: str  # "stockgate-api:1.0.0"
    service_version: str


# --- Errors: every failure renders as {"error": "<message>"} ---
class ErrorResponse(BaseModel):
    error: str


# --- Market payloads ---
class TopPerformer(BaseModel):
    symbol: str
    name: str
    changePercent: float = 0  # placeholder, never computed


class CompanyInfo(BaseModel):
    """Placeholder fundamentals; identical for every symbol."""

    symbol: str
    sector: str = "Technology"
    marketCap: str = "1.5T"
    peRatio: float = 30.5
    dividendYield: float = 1.2
