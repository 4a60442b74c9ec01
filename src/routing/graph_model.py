from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

import networkx as nx

from config.routing_config import ROUTING_CONFIG
from src.routing.errors import InvalidGraph
from src.utils.logger import debug


def _segment_time_min(seg: Mapping[str, Any], average_speed_kmh: float) -> float:
    """Nominal travel time, derived from distance when the segment carries none."""
    time_min = seg.get("time_min")
    if time_min is not None:
        return float(time_min)
    return float(seg["distance_km"]) / average_speed_kmh * 60.0


class StationGraph:
    """
    Read-only station network backed by a frozen ``networkx.MultiDiGraph``.

    Nodes carry the station attributes (name, lat, lon, cost_per_kwh, max_kwh,
    charge_rate_kw). Edges carry distance_km and time_min. Parallel segments
    between the same pair are kept as separate edges, each with its own key.
    """

    def __init__(
        self,
        stations: Iterable[Mapping[str, Any]],
        segments: Iterable[Mapping[str, Any]],
        average_speed_kmh: Optional[float] = None,
    ) -> None:
        if average_speed_kmh is None:
            average_speed_kmh = float(ROUTING_CONFIG["average_speed_kmh"])
        stations = list(stations)
        if len(stations) < 2:
            raise InvalidGraph(f"At least two stations required, got {len(stations)}")

        G = nx.MultiDiGraph()
        for st in stations:
            node_id = st["id"]
            if node_id in G:
                raise InvalidGraph(f"Duplicate station id {node_id}")
            G.add_node(
                node_id,
                name=st.get("name") or f"Station {node_id}",
                lat=float(st["lat"]),
                lon=float(st["lon"]),
                cost_per_kwh=float(st["cost_per_kwh"]),
                max_kwh=float(st["max_kwh"]),
                charge_rate_kw=float(st["charge_rate_kw"]),
            )

        for idx, seg in enumerate(segments):
            u, v = seg["from"], seg["to"]
            for end in (u, v):
                if end not in G:
                    raise InvalidGraph(f"Segment #{idx} ({u}->{v}) references unknown node {end}")
            G.add_edge(
                u,
                v,
                distance_km=float(seg["distance_km"]),
                time_min=_segment_time_min(seg, average_speed_kmh),
                segment_index=idx,
            )

        self.graph = nx.freeze(G)
        self.start_id = stations[0]["id"]
        self.end_id = stations[-1]["id"]
        debug(
            f"Station graph built: nodes={G.number_of_nodes()}, segments={G.number_of_edges()}",
            "graph",
        )

    def __contains__(self, node_id: Any) -> bool:
        return node_id in self.graph

    def station(self, node_id: Any) -> Dict[str, Any]:
        return self.graph.nodes[node_id]

    def out_segments(self, node_id: Any) -> Iterator[Tuple[Any, int, Dict[str, Any]]]:
        """Yield (to_node, key, data) for every outgoing segment, parallel ones included."""
        for _, v, key, data in self.graph.out_edges(node_id, keys=True, data=True):
            yield v, key, data

    def segment(self, u: Any, v: Any, key: int) -> Dict[str, Any]:
        return self.graph.edges[u, v, key]

    def coordinates(self, node_id: Any) -> Tuple[float, float]:
        """Return (lat, lon) of a station."""
        st = self.graph.nodes[node_id]
        return st["lat"], st["lon"]

    def is_charger(self, node_id: Any) -> bool:
        st = self.graph.nodes[node_id]
        return st["max_kwh"] > 0 and st["charge_rate_kw"] > 0 and st["cost_per_kwh"] > 0
