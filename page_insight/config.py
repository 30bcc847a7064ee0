"""Runtime settings for the Page Insight service and CLI.

Three groups, each read from the environment (or a `.env` file in the
project root) when :class:`Settings` is instantiated:

- the HTTP server: bind address, CORS origins, graceful-shutdown window
- the page fetch: timeout, body cap, User-Agent
- link checks: per-probe timeout, redirect cap, concurrent probes
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(
        default_factory=lambda: os.environ.get("PAGE_INSIGHT_HOST", "0.0.0.0")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PAGE_INSIGHT_PORT", "8080"))
    )
    cors_origins: list[str] = field(
        default_factory=lambda: _split_csv(os.environ.get("CORS_ORIGINS", "*"))
    )
    shutdown_timeout: int = field(
        default_factory=lambda: int(os.environ.get("SHUTDOWN_TIMEOUT", "5"))
    )

    # ------------------------------------------------------------------
    # Page fetch
    # ------------------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "10.0"))
    )
    fetch_max_bytes: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_MAX_BYTES", str(10 << 20)))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "PAGE_INSIGHT_USER_AGENT", "Mozilla/5.0 (compatible; PageInsight/1.0)"
        )
    )

    # ------------------------------------------------------------------
    # Link reachability checks
    # ------------------------------------------------------------------
    link_check_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LINK_CHECK_TIMEOUT", "5.0"))
    )
    link_check_max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("LINK_CHECK_MAX_REDIRECTS", "10"))
    )
    link_check_workers: int = field(
        default_factory=lambda: int(os.environ.get("LINK_CHECK_WORKERS", "10"))
    )


# Module-level singleton, import this everywhere:
#   from page_insight.config import settings
settings = Settings()
