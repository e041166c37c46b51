#Purpose: The OpenRouteService "adapter/client".
#Sole responsibility: talk to ORS via HTTP and return the decoded JSON.
#Encapsulates ORS-specific details:
#coordinate formatting ([lon, lat])
#URL construction (/v2/directions/{profile}/json)
#auth header, timeouts, status code classification
#It should not contain fallback rules or batching.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from .settings import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, ProviderSettings

logger = logging.getLogger(__name__)

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]

# ORS positions are [longitude, latitude] (GeoJSON order, opposite of Google Maps).
ORS_AXIS_ORDER = ("lon", "lat")

HGV_PROFILE = "driving-hgv"

ACCEPT_HEADER = "application/json, application/geo+json, application/gpx+xml, img/png; charset=utf-8"


class ORSError(Exception):
    """Custom exception for ORS client errors."""
    pass


class ORSRateLimitError(ORSError):
    """The provider answered 429 (requests-per-minute or daily quota exceeded)."""
    pass


class ORSHTTPError(ORSError):
    """The provider answered with a non-success status other than 429."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"ORS error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class ORSTransportError(ORSError):
    """Network failure or timeout before a response arrived."""
    pass


class ORSResponseError(ORSError):
    """A success status with a body that is not usable JSON."""
    pass


def to_ors_position(point: LatLon) -> List[float]:
    """Convert an internal (lat, lon) pair to an ORS [lon, lat] position."""
    lat, lon = point
    axes = {"lat": float(lat), "lon": float(lon)}
    return [axes[axis] for axis in ORS_AXIS_ORDER]


def build_directions_body(origin: LatLon, destination: LatLon) -> Dict[str, Any]:
    """
    Request body for a single lorry route origin -> destination.

    Shortest (not fastest) path, no ferries, and no geometry/instructions/elevation:
    only the summary distance is consumed.
    """
    return {
        "coordinates": [to_ors_position(origin), to_ors_position(destination)],
        "preference": "shortest",
        "units": "m",
        "language": "en",
        "geometry": False,
        "instructions": False,
        "elevation": False,
        "extra_info": [],
        "options": {
            "vehicle_type": "hgv",
            "avoid_features": ["ferries"],
        },
    }


class ORSClient:
    """
    ORS Adapter / Client

    Sole responsibility:
    - Talk to ORS via HTTP (one reusable session)
    - Convert internal (lat, lon) -> ORS [lon, lat]
    - Raise an ORSError subclass for every failure mode

    """
    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        profile: str = HGV_PROFILE,
        timeout: float = DEFAULT_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ):
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("ORS API key not set. Please set OPENROUTESERVICE_API_KEY in the .env file.")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.profile = profile #the ORS routing profile (driving-hgv for lorries)
        self.timeout = timeout #the time to wait for ORS before giving up
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: ProviderSettings, session: Optional[requests.Session] = None) -> ORSClient:
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout_s,
            session=session,
        )

    @property
    def directions_url(self) -> str:
        return f"{self.base_url}/v2/directions/{self.profile}/json"

    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": self.api_key,
            "Accept": ACCEPT_HEADER,
        }

    def directions(self, origin: LatLon, destination: LatLon) -> Dict[str, Any]:
        """
        Calls the ORS directions endpoint once and returns the decoded JSON.

        Raises:
            ORSRateLimitError: status 429
            ORSHTTPError: any other non-2xx status
            ORSTransportError: connection error / timeout
            ORSResponseError: 2xx with a body that is not a JSON object
        """
        body = build_directions_body(origin, destination)
        logger.debug(f"POST {self.directions_url} coordinates={body['coordinates']}")

        try:
            response = self.session.post(
                self.directions_url,
                json=body,
                headers=self.headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ORSTransportError(f"ORS request failed: {e}") from e

        if response.status_code == 429:
            raise ORSRateLimitError("ORS rate limit exceeded")

        if not 200 <= response.status_code < 300:
            raise ORSHTTPError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise ORSResponseError(f"ORS returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ORSResponseError("ORS returned a non-object JSON body")

        return data

    def close(self) -> None:
        self.session.close()
