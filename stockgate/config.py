# stockgate/config.py
# Process settings, read once from the environment (and a local .env if present).
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://api.twelvedata.com"


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    port: int = 5000
    twelve_data_api_key: str | None = None
    twelve_data_base_url: str = DEFAULT_BASE_URL
    upstream_timeout_sec: float = 10.0
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def upstream_configured(self) -> bool:
        return bool(self.twelve_data_api_key)


def load_settings() -> Settings:
    """Build Settings from env vars. Values already in the environment win over .env."""
    load_dotenv()
    return Settings(
        port=int(os.getenv("PORT", "5000")),
        twelve_data_api_key=os.getenv("TWELVE_DATA_API_KEY") or None,
        twelve_data_base_url=os.getenv("TWELVE_DATA_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        upstream_timeout_sec=float(os.getenv("UPSTREAM_TIMEOUT_SEC", "10")),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")) or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
