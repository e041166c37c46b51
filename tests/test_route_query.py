import pytest

from destinations.models import Destination, RouteOutcome, RouteResult
from routing.ors_client import ORSResponseError, ORSTransportError
from routing.route_query import RouteQuery, metres_to_km, parse_directions_response
from routing.settings import ProviderSettings

from conftest import MockORS


def test_missing_api_key_skips_network_call(mock_ors):
    query = RouteQuery(ProviderSettings(api_key=None), client=mock_ors)

    result = query.run(Destination("r-1", "Shah Alam", 3.07, 101.51))

    assert (result.distance_km, result.toll_price) == (0.0, 0.0)
    assert result.outcome is RouteOutcome.MISSING_API_KEY
    assert mock_ors.calls == []


def test_blank_api_key_counts_as_missing(mock_ors):
    query = RouteQuery(ProviderSettings(api_key="   "), client=mock_ors)

    assert query.run(Destination("r-1", "x", 3.07, 101.51)).outcome is RouteOutcome.MISSING_API_KEY
    assert mock_ors.calls == []


@pytest.mark.parametrize(
    "latitude, longitude",
    [
        (None, None),
        ("", ""),
        (3.07, None),
        ("not-a-number", 101.5),
        (float("nan"), 101.5),
        (95.0, 101.5),
        (3.07, 200.0),
    ],
)
def test_missing_coordinates_skip_network_call(settings, mock_ors, latitude, longitude):
    query = RouteQuery(settings, client=mock_ors)

    result = query.run(Destination("r-1", "Nowhere", latitude, longitude))

    assert (result.distance_km, result.toll_price) == (0.0, 0.0)
    assert result.outcome is RouteOutcome.MISSING_COORDINATES
    assert len(mock_ors.calls) == 0


def test_successful_route_converts_metres_to_km(settings):
    ors = MockORS(distances={(2.9927, 101.7909): 12345})
    query = RouteQuery(settings, client=ors)

    result = query.run(Destination("r-3", "Kajang", 2.9927, 101.7909))

    assert result == RouteResult(distance_km=12.3, toll_price=0.0)
    assert result.ok
    assert ors.calls == [((3.0738, 101.5183), (2.9927, 101.7909))]


def test_zero_zero_is_a_valid_coordinate(settings):
    ors = MockORS()
    query = RouteQuery(settings, client=ors)

    result = query.run(Destination("null-island", "Null Island", 0, 0))

    assert result.ok
    assert ors.calls == [((3.0738, 101.5183), (0.0, 0.0))]


def test_string_coordinates_are_parsed(settings):
    ors = MockORS()
    query = RouteQuery(settings, client=ors)

    query.run(Destination("r-2", "PJ", " 3.1181 ", "101.6224"))

    assert ors.calls[0][1] == (3.1181, 101.6224)


def test_empty_route_list_falls_back(settings):
    ors = MockORS(distances={(1.0, 2.0): None})
    query = RouteQuery(settings, client=ors)

    result = query.run(Destination("r-1", "Island", 1.0, 2.0))

    assert (result.distance_km, result.toll_price) == (0.0, 0.0)
    assert result.outcome is RouteOutcome.NO_ROUTE


def test_rate_limit_and_server_error_give_same_values(settings, rate_limited, server_error):
    ors = MockORS(errors={(1.0, 1.0): rate_limited, (2.0, 2.0): server_error})
    query = RouteQuery(settings, client=ors)

    limited = query.run(Destination("a", "A", 1.0, 1.0))
    failed = query.run(Destination("b", "B", 2.0, 2.0))

    assert (limited.distance_km, limited.toll_price) == (failed.distance_km, failed.toll_price) == (0.0, 0.0)
    assert limited.outcome is RouteOutcome.RATE_LIMITED
    assert failed.outcome is RouteOutcome.HTTP_ERROR
    assert failed.detail == "HTTP 503"


@pytest.mark.parametrize(
    "error, outcome",
    [
        (ORSTransportError("connection reset"), RouteOutcome.TRANSPORT_ERROR),
        (ORSResponseError("bad json"), RouteOutcome.MALFORMED_RESPONSE),
        (KeyError("surprise"), RouteOutcome.UNEXPECTED_ERROR),
    ],
)
def test_client_failures_never_raise(settings, error, outcome):
    ors = MockORS(errors={(1.0, 1.0): error})
    query = RouteQuery(settings, client=ors)

    result = query.run(Destination("a", "A", 1.0, 1.0))

    assert result == RouteResult.fallback(outcome, result.detail)
    assert len(ors.calls) == 1


def test_query_is_callable(settings, mock_ors):
    query = RouteQuery(settings, client=mock_ors)

    assert query(Destination("a", "A", 1.0, 1.0)).distance_km == 1.0


@pytest.mark.parametrize(
    "metres, km",
    [(12345, 12.3), (12350, 12.4), (12349.9, 12.3), (0, 0.0), (49, 0.0), (50, 0.1), (1000, 1.0)],
)
def test_metres_to_km_rounds_half_up(metres, km):
    assert metres_to_km(metres) == km


def test_parse_response_uses_first_route():
    data = {"routes": [{"summary": {"distance": 2000}}, {"summary": {"distance": 9000}}]}

    assert parse_directions_response(data).distance_km == 2.0


def test_parse_response_zero_length_route():
    # ORS omits zero-valued summary fields
    result = parse_directions_response({"routes": [{"summary": {}}]})

    assert result.ok
    assert result.distance_km == 0.0


@pytest.mark.parametrize(
    "data",
    [
        {"routes": [{"segments": []}]},
        {"routes": [{"summary": {"distance": -5}}]},
        {"routes": [{"summary": {"distance": "far"}}]},
        {"routes": {"0": {"summary": {"distance": 10}}}},
        {"routes": ["route"]},
    ],
)
def test_parse_response_malformed(data):
    assert parse_directions_response(data).outcome is RouteOutcome.MALFORMED_RESPONSE


def test_parse_response_missing_routes_key():
    assert parse_directions_response({"error": "nothing"}).outcome is RouteOutcome.NO_ROUTE


def test_context_manager_closes_a_client_it_built(recording_sessions):
    with RouteQuery(ProviderSettings(api_key="k")) as query:
        query.run(Destination("a", "A", 1.0, 1.0))
        query.run(Destination("b", "B", 2.0, 2.0))

    assert len(recording_sessions) == 1
    assert recording_sessions[0].posts == 2
    assert recording_sessions[0].closed


def test_close_without_any_call_builds_no_client(recording_sessions):
    with RouteQuery(ProviderSettings(api_key="k")):
        pass

    assert recording_sessions == []
