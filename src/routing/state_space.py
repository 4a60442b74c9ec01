"""
State-space expansion for SOC-aware routing.

A search state is the tuple ``(node_id, soc_bucket)``. SOC is quantized into
fixed energy steps so the state space stays finite:
``|nodes| x (floor(capacity / step) + 1)`` states at most.

Two kinds of transitions leave a state:

- travel: follow an outgoing segment if the battery holds enough energy for
  it. The remaining SOC is quantized *downward*, so a state never claims more
  energy than physically remains.
- charge: stay on the node and gain exactly one SOC step, provided the node is
  a charger (positive price, rate and capacity) and the battery is not full.
  Longer sessions are chains of single steps, which keeps partial charging
  reachable and lets cheap/fast stations be compared step by step.

Economic model: money is only spent while charging. Travel is free under the
``cost`` objective; its price is realized when the energy is bought back.
"""

from __future__ import annotations

import math
from typing import Any, Iterator, NamedTuple, Optional, Tuple

import numpy as np

from config.routing_config import OBJECTIVE_MODES, ROUTING_CONFIG
from src.routing.errors import InvalidPayload
from src.routing.graph_model import StationGraph


State = Tuple[Any, int]


class Transition(NamedTuple):
    kind: str  # 'travel' | 'charge'
    node: Any
    bucket: int
    objective: float  # incremental objective value
    time_min: float
    money: float
    energy_kwh: float  # consumed when travelling, added when charging
    edge_key: Optional[int] = None


class SOCQuantizer:
    """Maps kWh values to integer buckets and back."""

    def __init__(self, capacity_kwh: float, step_kwh: float, tolerance_kwh: float = 1e-6) -> None:
        if step_kwh <= 0:
            raise InvalidPayload(f"SOC step must be positive, got {step_kwh}")
        self.capacity_kwh = float(capacity_kwh)
        self.step_kwh = float(step_kwh)
        self.tolerance_kwh = float(tolerance_kwh)
        self.max_bucket = int(math.floor((self.capacity_kwh + self.tolerance_kwh) / self.step_kwh))

    def to_bucket(self, soc_kwh: float) -> int:
        # round down, tolerance absorbs float noise such as 17.9999999
        raw = np.floor((soc_kwh + self.tolerance_kwh) / self.step_kwh)
        return int(np.clip(raw, 0, self.max_bucket))

    def to_kwh(self, bucket: int) -> float:
        return float(np.clip(bucket * self.step_kwh, 0.0, self.capacity_kwh))

    def to_pct(self, bucket: int) -> float:
        return self.to_kwh(bucket) / self.capacity_kwh * 100.0


class StateSpaceExpander:
    """Produces the transitions leaving a search state under one objective mode."""

    def __init__(
        self,
        graph: StationGraph,
        battery_kwh: float,
        consumption_kwh_per_km: float,
        objective: str = "cost",
        hybrid_weight: Optional[float] = None,
        soc_step_kwh: Optional[float] = None,
        tolerance_kwh: Optional[float] = None,
    ) -> None:
        if objective not in OBJECTIVE_MODES:
            raise InvalidPayload(f"optimization must be one of {'|'.join(OBJECTIVE_MODES)}, got {objective!r}")
        if hybrid_weight is None:
            hybrid_weight = float(ROUTING_CONFIG["default_hybrid_weight"])
        if not 0.0 <= hybrid_weight <= 1.0:
            raise InvalidPayload(f"hybrid_weight must be in [0, 1], got {hybrid_weight}")

        self.graph = graph
        self.consumption_kwh_per_km = float(consumption_kwh_per_km)
        self.objective = objective
        self.hybrid_weight = float(hybrid_weight)
        self.quantizer = SOCQuantizer(
            battery_kwh,
            soc_step_kwh if soc_step_kwh is not None else float(ROUTING_CONFIG["soc_step_kwh"]),
            tolerance_kwh if tolerance_kwh is not None else float(ROUTING_CONFIG["soc_tolerance_kwh"]),
        )

    def initial_state(self, node_id: Any, initial_soc_pct: float) -> State:
        soc_kwh = float(np.clip(initial_soc_pct, 0.0, 100.0)) / 100.0 * self.quantizer.capacity_kwh
        return node_id, self.quantizer.to_bucket(soc_kwh)

    def successors(self, state: State) -> Iterator[Transition]:
        yield from self.travel_transitions(state)
        yield from self.charge_transitions(state)

    def travel_transitions(self, state: State) -> Iterator[Transition]:
        node, bucket = state
        soc_kwh = self.quantizer.to_kwh(bucket)
        for v, key, seg in self.graph.out_segments(node):
            energy_kwh = seg["distance_km"] * self.consumption_kwh_per_km
            if soc_kwh + self.quantizer.tolerance_kwh < energy_kwh:
                continue
            time_min = seg["time_min"]
            if self.objective == "cost":
                edge_cost = 0.0
            elif self.objective == "time":
                edge_cost = time_min
            else:
                edge_cost = self.hybrid_weight * time_min
            yield Transition(
                kind="travel",
                node=v,
                bucket=self.quantizer.to_bucket(soc_kwh - energy_kwh),
                objective=edge_cost,
                time_min=time_min,
                money=0.0,
                energy_kwh=energy_kwh,
                edge_key=key,
            )

    def charge_transitions(self, state: State) -> Iterator[Transition]:
        node, bucket = state
        if bucket + 1 > self.quantizer.max_bucket or not self.graph.is_charger(node):
            return
        st = self.graph.station(node)
        added_kwh = self.quantizer.step_kwh
        money = added_kwh * st["cost_per_kwh"]
        minutes = added_kwh / st["charge_rate_kw"] * 60.0
        if self.objective == "cost":
            charge_cost = money
        elif self.objective == "time":
            charge_cost = minutes
        else:
            charge_cost = self.hybrid_weight * minutes + (1.0 - self.hybrid_weight) * money
        yield Transition(
            kind="charge",
            node=node,
            bucket=bucket + 1,
            objective=charge_cost,
            time_min=minutes,
            money=money,
            energy_kwh=added_kwh,
        )
