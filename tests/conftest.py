import pytest

from destinations.models import Destination
from routing.ors_client import ORSHTTPError, ORSRateLimitError
from routing.settings import ProviderSettings


class MockORS:
    """
    Stands in for routing.ors_client.ORSClient.
    Returns a canned directions body per destination (keyed by (lat, lon)),
    or raises the exception registered for it.
    """
    def __init__(self, distances=None, errors=None, default_metres=1000.0):
        self.distances = distances or {}
        self.errors = errors or {}
        self.default_metres = default_metres
        self.calls = []

    def directions(self, origin, destination):
        self.calls.append((origin, destination))
        if destination in self.errors:
            raise self.errors[destination]
        metres = self.distances.get(destination, self.default_metres)
        if metres is None:
            return {"routes": []}
        return {"routes": [{"summary": {"distance": metres, "duration": metres / 10}}]}


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""
    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def settings():
    return ProviderSettings(api_key="test-key", depot=(3.0738, 101.5183))


@pytest.fixture
def mock_ors():
    return MockORS()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def destinations():
    return [
        Destination("r-001", "Shah Alam", 3.0733, 101.5185),
        Destination("r-002", "Petaling Jaya", "3.1181", "101.6224"),
        Destination("r-003", "Kajang", 2.9927, 101.7909),
    ]


@pytest.fixture
def rate_limited():
    return ORSRateLimitError("ORS rate limit exceeded")


@pytest.fixture
def server_error():
    return ORSHTTPError(503, "Service Unavailable")


class RecordingSession:
    """Stands in for requests.Session: answers every POST with one fixed route and records close()."""
    instances = []

    def __init__(self, metres=4200):
        self.metres = metres
        self.posts = 0
        self.closed = False
        RecordingSession.instances.append(self)

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts += 1
        return _RouteResponse(self.metres)

    def close(self):
        self.closed = True


class _RouteResponse:
    status_code = 200
    text = ""

    def __init__(self, metres):
        self.metres = metres

    def json(self):
        return {"routes": [{"summary": {"distance": self.metres}}]}


@pytest.fixture
def recording_sessions(monkeypatch):
    RecordingSession.instances = []
    monkeypatch.setattr("routing.ors_client.requests.Session", RecordingSession)
    return RecordingSession.instances
