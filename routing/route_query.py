#Purpose: Single-destination lorry route computation (depot -> destination).
#Turns one Destination into one RouteResult:
#precondition checks (API key, coordinates) before any network call
#one ORS directions call, no retries
#response validation + metres -> km conversion
#every failure mode absorbed into the (0, 0) fallback tagged with a RouteOutcome
#Pacing and batching live in destinations.batching, not here.

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

from destinations.models import Destination, RouteOutcome, RouteResult

from .ors_client import (
    ORSClient,
    ORSError,
    ORSHTTPError,
    ORSRateLimitError,
    ORSResponseError,
    ORSTransportError,
)
from .settings import ProviderSettings

logger = logging.getLogger(__name__)

# ORS does not report tolls; every successful route carries this price.
TOLL_PRICE_UNSUPPORTED = 0.0


def metres_to_km(metres: float) -> float:
    """Metres -> kilometres rounded half up to one decimal (12345 -> 12.3, 12350 -> 12.4)."""
    return math.floor(metres / 100 + 0.5) / 10


def parse_directions_response(data: Dict[str, Any]) -> RouteResult:
    """
    Normalize an ORS directions JSON body into a RouteResult.
    Only the first route's summary distance is used.
    """
    routes = data.get("routes")
    if not routes:
        return RouteResult.fallback(RouteOutcome.NO_ROUTE, "provider returned no route")

    if not isinstance(routes, list) or not isinstance(routes[0], dict):
        return RouteResult.fallback(RouteOutcome.MALFORMED_RESPONSE, "routes is not a list of objects")

    summary = routes[0].get("summary")
    if not isinstance(summary, dict):
        return RouteResult.fallback(RouteOutcome.MALFORMED_RESPONSE, "route has no summary")

    # ORS drops zero-valued summary fields (origin == destination)
    metres = summary.get("distance", 0)

    if isinstance(metres, bool) or not isinstance(metres, (int, float)) or not math.isfinite(metres) or metres < 0:
        return RouteResult.fallback(RouteOutcome.MALFORMED_RESPONSE, f"invalid summary distance {metres!r}")

    return RouteResult(distance_km=metres_to_km(metres), toll_price=TOLL_PRICE_UNSUPPORTED)


class RouteQuery:
    """
    Depot -> destination lorry route for one Destination.

    run() never raises for ordinary failures: configuration, input, transport
    and empty-route problems all come back as RouteResult.fallback(...).
    """

    def __init__(self, settings: ProviderSettings, client: Optional[ORSClient] = None):
        settings.validate()
        self.settings = settings
        self._client = client
        # only a client built here is closed here; an injected one belongs to the caller
        self._owns_client = client is None

    @property
    def client(self) -> ORSClient:
        # built lazily so a missing API key never fails construction
        if self._client is None:
            self._client = ORSClient.from_settings(self.settings)
        return self._client

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> RouteQuery:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __call__(self, destination: Destination) -> RouteResult:
        return self.run(destination)

    def run(self, destination: Destination) -> RouteResult:
        if not self.settings.has_api_key:
            logger.warning("OpenRouteService API key not configured")
            return RouteResult.fallback(RouteOutcome.MISSING_API_KEY, "OPENROUTESERVICE_API_KEY is not set")

        point = destination.coordinates()
        if point is None:
            logger.warning(f"No coordinates for destination: {destination.label}")
            return RouteResult.fallback(
                RouteOutcome.MISSING_COORDINATES,
                f"unusable coordinates ({destination.latitude!r}, {destination.longitude!r})",
            )

        try:
            data = self.client.directions(self.settings.depot, point)
        except ORSRateLimitError:
            logger.warning(
                f"OpenRouteService rate limit exceeded for {destination.label}. Please wait before retrying."
            )
            return RouteResult.fallback(RouteOutcome.RATE_LIMITED, "HTTP 429")
        except ORSHTTPError as e:
            logger.error(f"OpenRouteService API error: {e.status_code} - {e.body}")
            return RouteResult.fallback(RouteOutcome.HTTP_ERROR, f"HTTP {e.status_code}")
        except ORSTransportError as e:
            logger.error(f"Error calculating route for {destination.label}: {e}")
            return RouteResult.fallback(RouteOutcome.TRANSPORT_ERROR, str(e))
        except ORSResponseError as e:
            logger.error(f"Unreadable OpenRouteService response for {destination.label}: {e}")
            return RouteResult.fallback(RouteOutcome.MALFORMED_RESPONSE, str(e))
        except ORSError as e:
            logger.error(f"Error calculating route for {destination.label}: {e}")
            return RouteResult.fallback(RouteOutcome.HTTP_ERROR, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error calculating route for {destination.label}")
            return RouteResult.fallback(RouteOutcome.UNEXPECTED_ERROR, repr(e))

        result = parse_directions_response(data)
        if result.outcome is RouteOutcome.NO_ROUTE:
            logger.warning(f"No route found for destination: {destination.label}")
        elif not result.ok:
            logger.error(f"Unreadable OpenRouteService response for {destination.label}: {result.detail}")
        else:
            logger.debug(f"{destination.label}: {result.distance_km} km")
        return result
