import copy

import pytest

from helpers import core_records, edge, station
from src.routing.graph_model import StationGraph
from src.utils.logger import setup_logger


@pytest.fixture(autouse=True, scope="session")
def quiet_logger():
    setup_logger(log_level="WARNING", enable_console=True, enable_file=False, log_format="simple")


@pytest.fixture
def two_node_payload():
    return {
        "nodes": [station(1), station(2)],
        "edges": [edge(1, 2, 10.0)],
        "vehicle": {"battery_kwh": 20.0, "initial_soc_pct": 100.0, "consumption_kwh_per_km": 0.2},
        "optimization": "cost",
        "hybrid_weight": 0.5,
    }


@pytest.fixture
def low_soc_payload(two_node_payload):
    payload = copy.deepcopy(two_node_payload)
    payload["nodes"][0] = station(1, price=10.0, rate=50.0)
    payload["vehicle"]["initial_soc_pct"] = 5.0
    return payload


@pytest.fixture
def corridor_payload():
    """
    1 -> 2 -> 4 and 1 -> 3 -> 4. Station 2 is cheap but slow, station 3 is
    expensive but fast. The battery cannot cover either corridor unaided.
    """
    return {
        "nodes": [
            station(1),
            station(2, price=0.20, rate=7.0),
            station(3, price=0.60, rate=150.0),
            station(4),
        ],
        "edges": [
            edge(1, 2, 20.0, 20.0),
            edge(2, 4, 20.0, 20.0),
            edge(1, 3, 20.0, 20.0),
            edge(3, 4, 20.0, 20.0),
        ],
        "vehicle": {"battery_kwh": 10.0, "initial_soc_pct": 50.0, "consumption_kwh_per_km": 0.25},
        "optimization": "cost",
    }


@pytest.fixture
def corridor_graph(corridor_payload):
    stations, segments = core_records(corridor_payload)
    return StationGraph(stations, segments)
