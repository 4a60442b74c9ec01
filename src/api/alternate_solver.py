"""
Caller side of the optional out-of-process route solver.

The external executable implements the same request/response contract as the
Python core. It is invoked as ``<exe> <input.json> <output.json>``; any failure
(missing binary, spawn error, timeout, non-zero exit, unparsable output or a
path that does not join the requested start and destination) raises
AlternateSolverUnavailable with a stable reason tag so the caller can fall back.
Temporary files live in a per-call directory that is removed on every exit
path, and ``subprocess.run`` kills the child when the timeout expires.
"""

from __future__ import annotations

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from config.routing_config import ROUTING_CONFIG
from src.api.schemas import RouteResult
from src.routing.errors import AlternateSolverUnavailable
from src.utils.logger import debug


class AlternateSolver:
    def __init__(
        self,
        executable: Optional[str] = None,
        timeout_ms: Optional[float] = None,
        enabled: Optional[bool] = None,
    ) -> None:
        self.executable = executable if executable is not None else ROUTING_CONFIG["native_solver_path"]
        self.timeout_ms = float(timeout_ms if timeout_ms is not None else ROUTING_CONFIG["native_timeout_ms"])
        self.enabled = bool(ROUTING_CONFIG["use_native_solver"] if enabled is None else enabled)

    def solve(self, request_wire: Dict[str, Any]) -> Dict[str, Any]:
        if not self.enabled:
            raise AlternateSolverUnavailable("native-disabled")
        exe = Path(self.executable) if self.executable else None
        if exe is None or not exe.is_file():
            raise AlternateSolverUnavailable("native-binary-missing")

        with tempfile.TemporaryDirectory(prefix="chargeroute_") as tmp:
            in_path = Path(tmp) / "input.json"
            out_path = Path(tmp) / "output.json"
            in_path.write_text(json.dumps(request_wire), encoding="utf-8")
            try:
                proc = subprocess.run(
                    [str(exe), str(in_path), str(out_path)],
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                    timeout=self.timeout_ms / 1000.0,
                    check=False,
                )
            except subprocess.TimeoutExpired:
                raise AlternateSolverUnavailable("native-timeout")
            except OSError as exc:
                debug(f"Native solver spawn failed: {exc}", "native")
                raise AlternateSolverUnavailable("native-spawn-error")

            if proc.returncode != 0 or not out_path.exists():
                stderr = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
                debug(f"Native solver exit code {proc.returncode}: {stderr[:200]}", "native")
                raise AlternateSolverUnavailable("native-exit-nonzero")

            try:
                data = json.loads(out_path.read_text(encoding="utf-8"))
                result = RouteResult.model_validate(data)
            except (ValueError, ValidationError) as exc:
                debug(f"Native solver output rejected: {exc}", "native")
                raise AlternateSolverUnavailable("native-output-parse-failed")

            path = result.optimal_path
            start, destination = _endpoints(request_wire)
            if (path[0], path[-1]) != (start, destination):
                debug(f"Native solver path {path} does not join {start} -> {destination}", "native")
                raise AlternateSolverUnavailable("native-output-parse-failed")

        out = result.model_dump(exclude_none=True)
        out["used"] = "native"
        out["fallback_reason"] = "none"
        return out


def _endpoints(request_wire: Dict[str, Any]) -> Tuple[Any, Any]:
    """Start and destination of a wire request: explicit ids, else first and last node."""
    nodes = request_wire.get("nodes") or [{}]
    return (
        request_wire.get("start_id", nodes[0].get("id")),
        request_wire.get("destination_id", nodes[-1].get("id")),
    )
