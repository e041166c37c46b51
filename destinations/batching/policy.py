"""
Purpose: Central configuration for batch pacing (single source of truth).
What it does:

Stores the provider's rate-limit ceiling and derives the inter-call delay:

REQUESTS_PER_MINUTE = 40   (OpenRouteService free tier, also 2000/day)

delay_seconds = 60 / requests_per_minute  -> 1.5 s

Rule: No logic here beyond the derivation, so the ceiling can be renegotiated
without touching the engine. Never hard-code the delay separately.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

ORS_FREE_TIER_REQUESTS_PER_MINUTE = 40

SECONDS_PER_MINUTE = 60.0


@dataclass(frozen=True)
class PacingPolicy:
    """
    Pacing for sequential batch processing.

    Notes:
    - One call, then a fixed delay, then the next call. With n destinations the
      batch sleeps exactly n - 1 times and never exceeds requests_per_minute.
    - The delay is re-derived from the ceiling; change the ceiling, not the delay.
    """

    requests_per_minute: int = ORS_FREE_TIER_REQUESTS_PER_MINUTE

    @property
    def delay_seconds(self) -> float:
        return SECONDS_PER_MINUTE / self.requests_per_minute

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if self.requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be > 0")

    @classmethod
    def from_env(cls) -> PacingPolicy:
        load_dotenv()
        raw = os.getenv("ORS_REQUESTS_PER_MINUTE")
        if raw is None or raw.strip() == "":
            return default_policy()
        try:
            policy = cls(requests_per_minute=int(raw))
        except ValueError:
            raise ValueError(f"ORS_REQUESTS_PER_MINUTE must be an integer, got {raw!r}") from None
        policy.validate()
        return policy


def default_policy() -> PacingPolicy:
    return PacingPolicy()
