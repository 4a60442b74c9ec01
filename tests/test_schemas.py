import pytest

from helpers import edge, station
from src.api.schemas import RouteRequest, RouteResult, validate_payload
from src.routing.errors import InvalidPayload


def test_valid_payload_parses(corridor_payload):
    request = validate_payload(corridor_payload)
    assert isinstance(request, RouteRequest)
    assert request.start == 1
    assert request.destination == 4
    assert request.hybrid_weight is None
    assert request.station_records()[1]["charge_rate_kw"] == pytest.approx(7.0)
    assert request.segment_records()[0]["from"] == 1


def test_wire_shape_keeps_json_keys(corridor_payload):
    wire = validate_payload(corridor_payload).to_wire()
    assert wire["edges"][0]["from"] == 1
    assert "charge_rate_kW" in wire["nodes"][0]
    assert "hybrid_weight" not in wire


def test_legacy_speed_key_accepted(corridor_payload):
    node = corridor_payload["nodes"][1]
    node["speed_kW"] = node.pop("charge_rate_kW")
    assert validate_payload(corridor_payload).nodes[1].charge_rate_kw == pytest.approx(7.0)


@pytest.mark.parametrize("field", ["battery_kwh", "initial_soc_pct", "consumption_kwh_per_km"])
def test_missing_vehicle_field_rejected(two_node_payload, field):
    del two_node_payload["vehicle"][field]
    with pytest.raises(InvalidPayload, match=field):
        validate_payload(two_node_payload)


def test_missing_vehicle_rejected(two_node_payload):
    del two_node_payload["vehicle"]
    with pytest.raises(InvalidPayload, match="vehicle"):
        validate_payload(two_node_payload)


def test_missing_station_price_not_defaulted(two_node_payload):
    del two_node_payload["nodes"][0]["cost_per_kwh"]
    with pytest.raises(InvalidPayload, match="cost_per_kwh"):
        validate_payload(two_node_payload)


@pytest.mark.parametrize("value", ["distance", "", None, 3])
def test_unknown_optimization_rejected(two_node_payload, value):
    two_node_payload["optimization"] = value
    with pytest.raises(InvalidPayload, match="optimization"):
        validate_payload(two_node_payload)


def test_missing_optimization_rejected(two_node_payload):
    del two_node_payload["optimization"]
    with pytest.raises(InvalidPayload, match="optimization"):
        validate_payload(two_node_payload)


def test_single_node_rejected(two_node_payload):
    two_node_payload["nodes"] = two_node_payload["nodes"][:1]
    two_node_payload["edges"] = []
    with pytest.raises(InvalidPayload, match="two nodes"):
        validate_payload(two_node_payload)


def test_unknown_edge_node_rejected(two_node_payload):
    two_node_payload["edges"].append(edge(2, 7, 3.0))
    with pytest.raises(InvalidPayload, match="unknown node 7"):
        validate_payload(two_node_payload)


def test_duplicate_node_ids_rejected(two_node_payload):
    two_node_payload["nodes"].append(station(1))
    with pytest.raises(InvalidPayload, match="unique"):
        validate_payload(two_node_payload)


@pytest.mark.parametrize("weight", [-0.1, 1.5])
def test_hybrid_weight_out_of_range(two_node_payload, weight):
    two_node_payload["hybrid_weight"] = weight
    with pytest.raises(InvalidPayload, match="hybrid_weight"):
        validate_payload(two_node_payload)


@pytest.mark.parametrize("distance", [0.0, -4.0])
def test_non_positive_distance_rejected(two_node_payload, distance):
    two_node_payload["edges"][0]["distance_km"] = distance
    with pytest.raises(InvalidPayload, match="distance_km"):
        validate_payload(two_node_payload)


def test_initial_soc_above_100_rejected(two_node_payload):
    two_node_payload["vehicle"]["initial_soc_pct"] = 120
    with pytest.raises(InvalidPayload, match="initial_soc_pct"):
        validate_payload(two_node_payload)


def test_same_start_and_destination_rejected(two_node_payload):
    two_node_payload["destination_id"] = 1
    with pytest.raises(InvalidPayload, match="differ"):
        validate_payload(two_node_payload)


@pytest.mark.parametrize("payload", [None, [], "nodes"])
def test_non_object_payload_rejected(payload):
    with pytest.raises(InvalidPayload):
        validate_payload(payload)


def test_route_result_requires_a_real_path():
    with pytest.raises(ValueError):
        RouteResult.model_validate({"optimal_path": [1], "total_cost": 0.0})
    ok = RouteResult.model_validate({"optimal_path": [1, 2], "total_cost": 1.25, "extra": "kept"})
    assert ok.model_dump()["extra"] == "kept"
