"""
Purpose: Domain models for the Destinations capability.
What it does:
- Defines core data structures:
- Destination (id, location label, raw latitude/longitude from the route table)
- RouteResult (distance_km, toll_price + outcome side channel)
- BatchResult (distances, toll_prices, outcomes keyed by destination id)

Defines enums/constants:
- RouteOutcome = OK | MISSING_API_KEY | MISSING_COORDINATES | RATE_LIMITED | ...

Rule: No HTTP calls, no batching logic. Models only.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

LatLon = Tuple[float, float]


class RouteOutcome(str, Enum):
    """
    Why a RouteResult holds the values it holds.
    Everything except OK carries the zero fallback.
    """
    OK = "ok"
    MISSING_API_KEY = "missing_api_key"
    MISSING_COORDINATES = "missing_coordinates"
    RATE_LIMITED = "rate_limited"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"
    NO_ROUTE = "no_route"
    MALFORMED_RESPONSE = "malformed_response"
    UNEXPECTED_ERROR = "unexpected_error"
    CANCELLED = "cancelled"


def parse_coordinate(value: Any) -> Optional[float]:
    """
    Lenient parse of a route-table coordinate cell.
    None, blanks, non-numeric text, NaN and infinities all mean "no coordinate".
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True)
class Destination:
    """
    Immutable view of one route-table row.
    latitude/longitude are kept as found in the row; use coordinates() to read them.
    """

    id: str
    location: str = ""
    latitude: Any = None
    longitude: Any = None

    @property
    def label(self) -> str:
        return self.location or self.id

    def coordinates(self) -> Optional[LatLon]:
        """(lat, lon) in decimal degrees, or None when unusable."""
        lat = parse_coordinate(self.latitude)
        lon = parse_coordinate(self.longitude)
        if lat is None or lon is None:
            return None
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
            return None
        return (lat, lon)

    @staticmethod
    def from_row(row: Mapping[str, Any]) -> Destination:
        row_id = str(row["id"])
        return Destination(
            id=row_id,
            location=str(row.get("location") or row_id),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
        )


@dataclass(frozen=True)
class RouteResult:
    """
    Output of a single route query.
    Failures are never absent: they are the (0, 0) fallback tagged with an outcome.
    """

    distance_km: float = 0.0
    toll_price: float = 0.0
    outcome: RouteOutcome = RouteOutcome.OK
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is RouteOutcome.OK

    @staticmethod
    def fallback(outcome: RouteOutcome, detail: Optional[str] = None) -> RouteResult:
        return RouteResult(distance_km=0.0, toll_price=0.0, outcome=outcome, detail=detail)


@dataclass(frozen=True)
class BatchResult:
    """
    Output of a batch run: one entry per input destination id in every mapping.
    complete is False when the batch was cancelled before every destination was queried.
    """

    distances: Dict[str, float] = field(default_factory=dict)
    toll_prices: Dict[str, float] = field(default_factory=dict)
    outcomes: Dict[str, RouteResult] = field(default_factory=dict)
    complete: bool = True

    def failed_ids(self) -> List[str]:
        return [dest_id for dest_id, result in self.outcomes.items() if not result.ok]
