# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration - all env-driven.
Single source of truth for every tunable parameter.
"""

import os
from typing import Optional


def _parse_users(raw: str) -> dict[str, dict[str, str]]:
    """Parse ``email:password[:name]`` pairs separated by commas."""
    users: dict[str, dict[str, str]] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if ":" not in entry:
            continue
        parts = entry.split(":", 2)
        email = parts[0].strip().lower()
        if not email:
            continue
        users[email] = {
            "password": parts[1].strip(),
            "name": parts[2].strip() if len(parts) > 2 else "",
        }
    return users


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "courtdesk")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8000"))

    # ── eCourts provider ──
    ECOURTS_PROVIDER: str = "third_party"
    COURT_API_BASE: str = os.getenv("COURT_API_BASE", "https://court-api.kleopatra.io")
    ECOURTS_TIMEOUT: float = float(os.getenv("ECOURTS_TIMEOUT", "120"))
    ECOURTS_SEARCH_TIMEOUT: float = float(os.getenv("ECOURTS_SEARCH_TIMEOUT", "30"))
    API_KEY_ENV_VARS: tuple[str, ...] = ("KLEOPATRA_API_KEY", "ECOURTS_API_KEY")

    # ── Team roster ──
    TEAM_ROSTER_URL: str = os.getenv("TEAM_ROSTER_URL", "")
    TEAM_ROSTER_TIMEOUT: float = float(os.getenv("TEAM_ROSTER_TIMEOUT", "10"))

    # ── Auth ──
    USER_CREDENTIALS: dict[str, dict[str, str]] = _parse_users(os.getenv("AUTH_USERS", ""))
    SESSION_TTL_MINUTES: int = int(os.getenv("SESSION_TTL_MINUTES", "720"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    SEED_DEMO_DATA: bool = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"

    def ecourts_api_key(self) -> Optional[str]:
        """First non-empty key in the fallback chain, or None.

        Read at call time so a rotated key is picked up without a restart.
        """
        for var in self.API_KEY_ENV_VARS:
            value = os.getenv(var, "").strip()
            if value:
                return value
        return None


settings = Settings()
