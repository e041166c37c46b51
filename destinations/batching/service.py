"""
Purpose: Caller-facing function surface (what the route table UI / API calls).
What it does:
- calculate_route_for_lorry: one destination -> RouteResult
- calculate_routes_for_destinations: many destinations -> BatchResult
- legacy toll-only wrappers kept for older callers (deprecated)

None of these raise for provider/input failures; the zero fallback plus
RouteResult.outcome carry the diagnosis.
"""

from __future__ import annotations

import time
import warnings
from functools import lru_cache
from typing import Callable, Dict, Optional, Sequence

from routing.ors_client import ORSClient
from routing.route_query import RouteQuery
from routing.settings import ProviderSettings, default_settings

from ..models import BatchResult, Destination, RouteResult
from .engine import CancelSignal, RouteBatcher
from .policy import PacingPolicy


@lru_cache(maxsize=1)
def _env_settings() -> ProviderSettings:
    return default_settings()


@lru_cache(maxsize=1)
def _env_policy() -> PacingPolicy:
    return PacingPolicy.from_env()


def calculate_route_for_lorry(
    destination: Destination,
    *,
    settings: Optional[ProviderSettings] = None,
    client: Optional[ORSClient] = None,
) -> RouteResult:
    """
    Lorry (HGV) route distance from the depot to one destination.
    Toll price is always 0: ORS does not report tolls.
    """
    with RouteQuery(settings or _env_settings(), client=client) as query:
        return query.run(destination)


def calculate_routes_for_destinations(
    destinations: Sequence[Destination],
    *,
    settings: Optional[ProviderSettings] = None,
    client: Optional[ORSClient] = None,
    policy: Optional[PacingPolicy] = None,
    cancel: Optional[CancelSignal] = None,
    deadline: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """
    Distances and toll prices for every destination, one provider call at a time.
    The whole batch shares one HTTP session. deadline is an absolute time.monotonic() value.
    """
    with RouteQuery(settings or _env_settings(), client=client) as query:
        batcher = RouteBatcher(query, policy or _env_policy(), sleep=sleep)
        return batcher.run(destinations, cancel=cancel, deadline=deadline)


def calculate_toll_price(destination: Destination, **kwargs) -> float:
    """Deprecated: use calculate_route_for_lorry(...).toll_price."""
    warnings.warn(
        "calculate_toll_price is deprecated, use calculate_route_for_lorry instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return calculate_route_for_lorry(destination, **kwargs).toll_price


def calculate_toll_prices_for_destinations(destinations: Sequence[Destination], **kwargs) -> Dict[str, float]:
    """Deprecated: use calculate_routes_for_destinations(...).toll_prices."""
    warnings.warn(
        "calculate_toll_prices_for_destinations is deprecated, use calculate_routes_for_destinations instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return calculate_routes_for_destinations(destinations, **kwargs).toll_prices
