"""
Purpose: Provider configuration (single source of truth for the routing adapter).
What it does:

Stores everything the OpenRouteService adapter needs:

- API key (secret, read from the environment)
- base URL + per-call timeout
- depot coordinate (the fixed origin of every lorry route)

Rule: No HTTP here. Settings are built once at startup and passed in,
never read ad hoc from os.environ deep inside the call path.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]

DEFAULT_BASE_URL = "https://api.openrouteservice.org"

# Fleet depot (QL Kitchen, Klang Valley)
DEFAULT_DEPOT: LatLon = (3.0738, 101.5183)

DEFAULT_TIMEOUT_S = 5.0


@dataclass(frozen=True)
class ProviderSettings:
    """
    Configuration for the OpenRouteService directions adapter.

    Notes:
    - api_key may be None. A missing key is not a startup error: every
      query short-circuits to the zero fallback instead.
    - timeout_s bounds a single call so a provider hang cannot stall a batch.
    """

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    depot: LatLon = DEFAULT_DEPOT

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def validate(self) -> None:
        """
        Basic sanity checks. Raises ValueError on programmer/config mistakes.
        """
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")

        if not self.base_url:
            raise ValueError("base_url must not be empty")

        lat, lon = self.depot
        if not -90.0 <= lat <= 90.0:
            raise ValueError("depot latitude must be within [-90, 90]")
        if not -180.0 <= lon <= 180.0:
            raise ValueError("depot longitude must be within [-180, 180]")

    @classmethod
    def from_env(cls) -> ProviderSettings:
        """
        Build settings from the process environment (and a .env file if present).

        Example .env:
            OPENROUTESERVICE_API_KEY=...
            DEPOT_LATITUDE=3.0738
            DEPOT_LONGITUDE=101.5183
        """
        load_dotenv()

        api_key = (os.getenv("OPENROUTESERVICE_API_KEY") or "").strip() or None
        base_url = os.getenv("ORS_BASE_URL") or DEFAULT_BASE_URL
        timeout_s = _env_float("ORS_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_S)
        depot = (
            _env_float("DEPOT_LATITUDE", DEFAULT_DEPOT[0]),
            _env_float("DEPOT_LONGITUDE", DEFAULT_DEPOT[1]),
        )

        settings = cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            timeout_s=timeout_s,
            depot=depot,
        )
        settings.validate()
        return settings


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def default_settings() -> ProviderSettings:
    return ProviderSettings.from_env()
