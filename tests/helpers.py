"""Shared builders and a brute-force reference solver for the routing tests."""

import itertools
import math


def station(node_id, price=0.0, rate=0.0, max_kwh=None, lat=None, lon=None):
    return {
        "id": node_id,
        "name": f"S{node_id}",
        "lat": 12.9 + node_id * 0.01 if lat is None else lat,
        "lon": 77.5 + node_id * 0.01 if lon is None else lon,
        "cost_per_kwh": price,
        "max_kwh": (50.0 if rate > 0 else 0.0) if max_kwh is None else max_kwh,
        "charge_rate_kW": rate,
    }


def edge(u, v, km, minutes=None):
    e = {"from": u, "to": v, "distance_km": km}
    if minutes is not None:
        e["time_min"] = minutes
    return e


def core_records(payload):
    """Stations/segments in the shape StationGraph takes (python field names)."""
    stations = []
    for n in payload["nodes"]:
        n = dict(n)
        n["charge_rate_kw"] = n.pop("charge_rate_kW")
        stations.append(n)
    return stations, [dict(e) for e in payload["edges"]]


def _edge_paths(edges, node, destination, visited):
    if node == destination:
        yield []
        return
    for e in edges:
        if e["from"] == node and e["to"] not in visited:
            for rest in _edge_paths(edges, e["to"], destination, visited | {e["to"]}):
                yield [e] + rest


def brute_force_best(payload, step=0.5, speed_kmh=60.0):
    """
    Enumerate every simple edge path and every whole-step charging plan along
    it. Energies are assumed to be whole multiples of ``step``. Returns the
    minimum objective value, or None when nothing is feasible.
    """
    nodes = {n["id"]: n for n in payload["nodes"]}
    edges = payload["edges"]
    vehicle = payload["vehicle"]
    mode = payload["optimization"]
    w = payload.get("hybrid_weight", 0.5)
    start, destination = payload["nodes"][0]["id"], payload["nodes"][-1]["id"]
    max_b = int(math.floor(vehicle["battery_kwh"] / step + 1e-9))
    init_b = int(math.floor(vehicle["initial_soc_pct"] / 100.0 * vehicle["battery_kwh"] / step + 1e-9))

    def is_charger(n):
        return n["max_kwh"] > 0 and n["charge_rate_kW"] > 0 and n["cost_per_kwh"] > 0

    best = None
    for path in _edge_paths(edges, start, destination, {start}):
        need = [int(round(e["distance_km"] * vehicle["consumption_kwh_per_km"] / step)) for e in path]
        stops = [nodes[e["from"]] for e in path]
        options = [range(max_b + 1) if is_charger(st) else range(1) for st in stops]
        travel = [e.get("time_min", e["distance_km"] / speed_kmh * 60.0) for e in path]
        for plan in itertools.product(*options):
            soc = init_b
            ok = True
            value = 0.0
            for st, add, used, minutes in zip(stops, plan, need, travel):
                soc += add
                if soc > max_b or soc < used:
                    ok = False
                    break
                soc -= used
                money = add * step * st["cost_per_kwh"]
                charge_min = add * step / st["charge_rate_kW"] * 60.0 if add else 0.0
                if mode == "cost":
                    value += money
                elif mode == "time":
                    value += minutes + charge_min
                else:
                    value += w * (minutes + charge_min) + (1 - w) * money
            if ok and (best is None or value < best):
                best = value
    return best
