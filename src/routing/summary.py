from __future__ import annotations

import math
from typing import Any, Dict, List

from src.routing.graph_model import StationGraph
from src.routing.search import SearchOutcome
from src.routing.state_space import SOCQuantizer


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def build_soc_timeline(outcome: SearchOutcome, quantizer: SOCQuantizer) -> List[Dict[str, Any]]:
    """
    One entry per node visit in the coalesced path. ``soc`` is the SOC in
    percent when leaving the node (after any charging there), ``charged_kwh``
    is present only where energy was added.
    """
    timeline: List[Dict[str, Any]] = []
    charged = 0.0
    for i, (node, bucket) in enumerate(outcome.states):
        if i > 0 and outcome.steps[i - 1].kind == "charge":
            charged += outcome.steps[i - 1].energy_kwh
        is_last_of_visit = i == len(outcome.states) - 1 or outcome.states[i + 1][0] != node
        if not is_last_of_visit:
            continue
        entry: Dict[str, Any] = {
            "node": node,
            "soc": round(quantizer.to_pct(bucket), 2),
            "soc_kwh": round(quantizer.to_kwh(bucket), 2),
        }
        if charged > 0:
            entry["charged_kwh"] = round(charged, 2)
        timeline.append(entry)
        charged = 0.0
    return timeline


def path_geojson(graph: StationGraph, path: List[Any]) -> Dict[str, Any]:
    coords = []
    for node in path:
        lat, lon = graph.coordinates(node)
        coords.append([lon, lat])
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": coords},
        "properties": {},
    }


def summarize_route(
    graph: StationGraph,
    quantizer: SOCQuantizer,
    outcome: SearchOutcome,
    include_debug_steps: bool = True,
) -> Dict[str, Any]:
    """
    Derive route-level figures from a search outcome.

    Distance and travel time use the exact segment each travel step relaxed
    over (by edge key), so parallel segments are never confused. Money is the
    sum over charging steps of kWh times the node price.
    """
    total_distance_km = 0.0
    travel_time_min = 0.0
    charging_time_min = 0.0
    total_cost = 0.0
    energy_kwh = 0.0
    for (node, _), step in zip(outcome.states, outcome.steps):
        if step.kind == "travel":
            seg = graph.segment(node, step.node, step.edge_key)
            total_distance_km += seg["distance_km"]
            travel_time_min += seg["time_min"]
            energy_kwh += step.energy_kwh
        else:
            total_cost += step.energy_kwh * graph.station(node)["cost_per_kwh"]
            charging_time_min += step.time_min

    path = outcome.node_path
    timeline = build_soc_timeline(outcome, quantizer)
    return {
        "status": "ok",
        "optimal_path": path,
        "total_cost": round(total_cost, 2),
        "total_distance_km": round(total_distance_km, 2),
        "total_time_min": _round_half_up(travel_time_min),
        "total_charging_time_min": round(charging_time_min, 2),
        "total_energy_kwh": round(energy_kwh, 3),
        "num_charging_stops": sum(1 for e in timeline if "charged_kwh" in e),
        "objective_value": round(outcome.objective_value, 4),
        "soc_timeline": timeline,
        "visual_path_geojson": path_geojson(graph, path),
        "debug_steps": outcome.debug_steps if include_debug_steps else [],
    }
