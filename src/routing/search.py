from __future__ import annotations

import heapq
import itertools
from typing import Any, Dict, List, Optional, Tuple

from config.routing_config import ROUTING_CONFIG
from src.routing.errors import InvalidGraph, NoFeasibleRoute
from src.routing.state_space import State, StateSpaceExpander, Transition
from src.utils.logger import debug, info, warning


class SearchOutcome:
    """
    Result of one search: the chosen state path and the transitions between
    consecutive states (``steps[i]`` leads from ``states[i]`` to ``states[i + 1]``).
    """

    def __init__(
        self,
        states: List[State],
        steps: List[Transition],
        objective_value: float,
        debug_steps: List[Dict[str, Any]],
    ) -> None:
        self.states = states
        self.steps = steps
        self.objective_value = objective_value
        self.debug_steps = debug_steps

    @property
    def node_path(self) -> List[Any]:
        """Node ids with consecutive repeats (charging steps) coalesced."""
        path: List[Any] = []
        for node, _ in self.states:
            if not path or path[-1] != node:
                path.append(node)
        return path


class SOCRouteSearch:
    """
    Label-correcting best-first search over (node, SOC bucket) states.

    The frontier is a binary heap of ``(objective, sequence, state)`` entries.
    Duplicate entries are allowed; a popped state that is already settled is
    skipped. The sequence number makes ties resolve to the entry pushed first,
    so identical inputs always give identical routes.

    Every settled state on the destination node is a candidate. By default the
    frontier is exhausted before the cheapest candidate is chosen; with
    ``early_exit`` the loop stops as soon as the popped objective exceeds the
    best candidate, which cannot change the answer because objective values
    never decrease along a path.
    """

    def __init__(
        self,
        expander: StateSpaceExpander,
        early_exit: Optional[bool] = None,
        record_debug: Optional[bool] = None,
    ) -> None:
        self.expander = expander
        self.early_exit = bool(ROUTING_CONFIG["early_exit"] if early_exit is None else early_exit)
        self.record_debug = bool(ROUTING_CONFIG["include_debug_steps"] if record_debug is None else record_debug)

    def run(self, start: Any, destination: Any, initial_soc_pct: float) -> SearchOutcome:
        graph = self.expander.graph
        for node in (start, destination):
            if node not in graph:
                raise InvalidGraph(f"Unknown node {node}")

        quantizer = self.expander.quantizer
        start_state = self.expander.initial_state(start, initial_soc_pct)
        info(
            f"SOC routing init: start={start}, destination={destination}, "
            f"init_soc_kwh={quantizer.to_kwh(start_state[1]):.2f}, step_kwh={quantizer.step_kwh}, "
            f"objective={self.expander.objective}, hybrid_weight={self.expander.hybrid_weight}",
            "search",
        )

        seq = itertools.count()
        pq: List[Tuple[float, int, State]] = [(0.0, next(seq), start_state)]
        best_cost: Dict[State, float] = {start_state: 0.0}
        best_time: Dict[State, float] = {start_state: 0.0}
        parent: Dict[State, Tuple[State, Transition]] = {}
        settled: set = set()
        debug_steps: List[Dict[str, Any]] = []

        best_final: Optional[State] = None
        best_final_cost = float("inf")
        relax_travel = 0
        relax_charge = 0

        while pq:
            cost, _, state = heapq.heappop(pq)
            if state in settled:
                continue
            if self.early_exit and cost > best_final_cost:
                debug(f"Early exit at objective {cost:.4f} > best {best_final_cost:.4f}", "search")
                break
            settled.add(state)

            if state[0] == destination and cost < best_final_cost:
                best_final = state
                best_final_cost = cost

            for tr in self.expander.successors(state):
                next_state = (tr.node, tr.bucket)
                new_cost = cost + tr.objective
                if new_cost + 1e-12 >= best_cost.get(next_state, float("inf")):
                    continue
                new_time = best_time[state] + tr.time_min
                best_cost[next_state] = new_cost
                best_time[next_state] = new_time
                parent[next_state] = (state, tr)
                heapq.heappush(pq, (new_cost, next(seq), next_state))
                if tr.kind == "travel":
                    relax_travel += 1
                else:
                    relax_charge += 1
                if self.record_debug:
                    debug_steps.append(self._debug_event(state, next_state, tr, new_cost, new_time))

        if best_final is None:
            warning(
                f"SOC routing infeasible: destination {destination} unreachable from {start} "
                f"(settled={len(settled)})",
                "search",
            )
            raise NoFeasibleRoute(
                f"No feasible path from {start} to {destination} with the given SOC/constraints"
            )

        states: List[State] = [best_final]
        steps: List[Transition] = []
        s = best_final
        while s in parent:
            prev, tr = parent[s]
            steps.append(tr)
            states.append(prev)
            s = prev
        states.reverse()
        steps.reverse()

        info(
            f"SOC routing done: states={len(states)}, settled={len(settled)}, travels={relax_travel}, "
            f"charges={relax_charge}, objective={best_final_cost:.4f}",
            "search",
        )
        return SearchOutcome(
            states=states,
            steps=steps,
            objective_value=best_final_cost,
            debug_steps=debug_steps,
        )

    def _debug_event(
        self, src: State, dst: State, tr: Transition, cost: float, time_min: float
    ) -> Dict[str, Any]:
        q = self.expander.quantizer
        event: Dict[str, Any] = {
            "type": "relax_travel" if tr.kind == "travel" else "relax_charge",
            "from": {"node": src[0], "soc_kwh": q.to_kwh(src[1])},
            "to": {"node": dst[0], "soc_kwh": q.to_kwh(dst[1])},
            "cost": round(cost, 4),
            "time": round(time_min, 4),
        }
        if tr.kind == "travel":
            event["edge"] = {"from": src[0], "to": dst[0], "key": tr.edge_key}
        else:
            event["charged_kwh"] = tr.energy_kwh
        return event
