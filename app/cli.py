"""
Command-line entry point: compute one route from a request JSON file.

    chargeroute-solve request.json --output result.json
    cat request.json | chargeroute-solve --optimization time --no-native
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from app.services.config_service import merged_runtime_config
from config.logging_config import get_logging_config
from config.routing_config import OBJECTIVE_MODES
from src.api.compute_route import compute_route_ev
from src.routing.errors import ChargeRouteError, InvalidConfig, InvalidPayload
from src.utils.logger import error, print_summary, setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute an SOC-aware EV route over a station graph")
    parser.add_argument("request", nargs="?", help="Request JSON file (default: stdin)")
    parser.add_argument("--output", "-o", help="Write result JSON here instead of stdout")
    parser.add_argument("--optimization", choices=OBJECTIVE_MODES, help="Override the request objective")
    parser.add_argument("--hybrid-weight", type=float, help="Override the request hybrid_weight")
    parser.add_argument("--no-native", action="store_true", help="Never try the external solver")
    parser.add_argument("--no-debug-steps", action="store_true", help="Omit relaxation events from the result")
    parser.add_argument("--config", help="YAML routing overrides file")
    parser.add_argument("--log-mode", default="PRODUCTION",
                        help="PRODUCTION, DEVELOPMENT, DEBUG, SILENT or TESTING")
    parser.add_argument("--summary", action="store_true", help="Print a short route summary to stderr")
    return parser


def _read_request(path: Optional[str]) -> Any:
    try:
        raw = Path(path).read_text(encoding="utf-8") if path else sys.stdin.read()
    except OSError as exc:
        raise InvalidPayload(f"Cannot read request: {exc}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidPayload(f"Request is not valid JSON: {exc}")


def _runtime_config(path: Optional[str]) -> Dict[str, Any]:
    try:
        return merged_runtime_config(path)
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
        raise InvalidConfig(f"Invalid routing config: {problems}")
    except (OSError, yaml.YAMLError) as exc:
        raise InvalidConfig(f"Cannot load routing overrides: {exc}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(**get_logging_config(args.log_mode))

    try:
        payload = _read_request(args.request)
        config = _runtime_config(args.config)
    except ChargeRouteError as exc:
        error(f"{exc.kind}: {exc.message}", "cli")
        result = exc.to_result()
    else:
        if isinstance(payload, dict):
            if args.optimization:
                payload["optimization"] = args.optimization
            if args.hybrid_weight is not None:
                payload["hybrid_weight"] = args.hybrid_weight
        if args.no_debug_steps:
            config["include_debug_steps"] = False
        result = compute_route_ev(payload, config=config, use_native=False if args.no_native else None)

    text = json.dumps(result, indent=2)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)

    if args.summary and result.get("status") == "ok":
        print_summary("ROUTE SUMMARY", {
            "path": " -> ".join(str(n) for n in result["optimal_path"]),
            "total_cost": result["total_cost"],
            "total_distance_km": result["total_distance_km"],
            "total_time_min": result["total_time_min"],
            "used": result.get("used"),
            "fallback_reason": result.get("fallback_reason"),
        })
    return 0 if result.get("status") == "ok" else 1


if __name__ == "__main__":
    sys.exit(main())
