from __future__ import annotations

from typing import Any, Dict, Optional

from config.routing_config import ROUTING_CONFIG
from src.api.alternate_solver import AlternateSolver
from src.api.schemas import RouteRequest, validate_payload
from src.routing.errors import AlternateSolverUnavailable, ChargeRouteError
from src.routing.graph_model import StationGraph
from src.routing.search import SOCRouteSearch
from src.routing.state_space import StateSpaceExpander
from src.routing.summary import summarize_route
from src.utils.logger import debug, error, info, log_route_failure, warning


def solve_route(request: RouteRequest, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Run the Python core on a validated request.

    Raises InvalidGraph / NoFeasibleRoute; compute_route_ev turns them into
    error values.
    """
    cfg = {**ROUTING_CONFIG, **(config or {})}
    graph = StationGraph(request.station_records(), request.segment_records(), cfg["average_speed_kmh"])
    hybrid_weight = request.hybrid_weight
    if hybrid_weight is None:
        hybrid_weight = cfg["default_hybrid_weight"]
    expander = StateSpaceExpander(
        graph,
        battery_kwh=request.vehicle.battery_kwh,
        consumption_kwh_per_km=request.vehicle.consumption_kwh_per_km,
        objective=request.optimization,
        hybrid_weight=hybrid_weight,
        soc_step_kwh=cfg["soc_step_kwh"],
        tolerance_kwh=cfg["soc_tolerance_kwh"],
    )
    search = SOCRouteSearch(
        expander,
        early_exit=cfg["early_exit"],
        record_debug=cfg["include_debug_steps"],
    )
    outcome = search.run(request.start, request.destination, request.vehicle.initial_soc_pct)
    return summarize_route(graph, expander.quantizer, outcome, cfg["include_debug_steps"])


def compute_route_ev(
    payload: Any,
    config: Optional[Dict[str, Any]] = None,
    use_native: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Compute an EV route for one request.

    Tries the external solver first when configured, otherwise (or on any of
    its failures) runs the Python core. Always returns a dict: either the route
    with ``status='ok'`` plus ``used`` / ``fallback_reason`` tags, or
    ``{'status': 'error', 'kind': ..., 'message': ...}``.
    """
    cfg = {**ROUTING_CONFIG, **(config or {})}
    if use_native is not None:
        cfg["use_native_solver"] = use_native

    try:
        request = validate_payload(payload)
    except ChargeRouteError as exc:
        error(f"Rejected request: {exc.message}", "api")
        return exc.to_result()

    solver = AlternateSolver(
        executable=cfg["native_solver_path"],
        timeout_ms=cfg["native_timeout_ms"],
        enabled=cfg["use_native_solver"],
    )
    try:
        result = solver.solve(request.to_wire())
        info("Using native algorithm", "api")
        return result
    except AlternateSolverUnavailable as exc:
        fallback_reason = exc.reason
        debug(f"Native solver not used ({fallback_reason}), using Python core", "api")

    try:
        result = solve_route(request, cfg)
    except ChargeRouteError as exc:
        warning(f"Route computation failed: {exc.kind}: {exc.message}", "api")
        log_route_failure(request.start, request.destination, exc.kind, exc.message)
        out = exc.to_result()
    except Exception as exc:
        error(f"Algorithm computation failed: {exc!r}", "api")
        out = {"status": "error", "kind": "InternalError", "message": f"Algorithm computation failed: {exc}"}
    else:
        info(
            f"Optimal path computed: {result['optimal_path']} "
            f"(cost={result['total_cost']}, distance_km={result['total_distance_km']})",
            "api",
        )
        out = result

    out["used"] = "python"
    out["fallback_reason"] = fallback_reason
    return out
