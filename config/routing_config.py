"""
Centralized configuration for SOC-aware route computation.

Only routing knobs live here; logging modes are in config/logging_config.py.
Runtime overrides (YAML file, environment) are merged on top of these defaults
by app/services/config_service.py.
"""

ROUTING_CONFIG = {
    # SOC discretization step in kWh. Smaller steps are more precise but the
    # state space grows as capacity / step.
    "soc_step_kwh": 0.5,

    # Numerical slack when checking whether the battery holds enough energy
    # for a segment, and when quantizing SOC downward.
    "soc_tolerance_kwh": 1e-6,

    # Used to derive travel time for segments that do not carry time_min
    "average_speed_kmh": 60.0,

    # Weight of time vs money for the 'hybrid' objective when the request omits it
    "default_hybrid_weight": 0.5,

    # Stop the search once the best frontier objective exceeds the best
    # destination candidate. Off means the frontier is always exhausted.
    "early_exit": False,

    # Emit relaxation events in the result for visualization/tracing
    "include_debug_steps": True,

    # Optional out-of-process solver with the same input/output contract.
    # Called as: <native_solver_path> <input.json> <output.json>
    "use_native_solver": True,
    "native_solver_path": "algo/compute_route",
    "native_timeout_ms": 1500,
}

OBJECTIVE_MODES = ("cost", "time", "hybrid")

__all__ = ["ROUTING_CONFIG", "OBJECTIVE_MODES"]
