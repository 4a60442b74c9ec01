"""
Error taxonomy for route computation.

Errors are raised inside the routing core and converted into plain result
values at the request boundary (see src.api.compute_route), so a caller always
receives a dict with a stable machine-readable ``kind``.
"""

from __future__ import annotations

from typing import Any, Dict


class ChargeRouteError(Exception):
    """Base class for all routing errors."""

    kind = "ChargeRouteError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_result(self) -> Dict[str, Any]:
        return {"status": "error", "kind": self.kind, "message": self.message}


class InvalidPayload(ChargeRouteError):
    """Malformed or incomplete request. Caller error, never retried."""

    kind = "InvalidPayload"


class InvalidGraph(ChargeRouteError):
    """Structural inconsistency between stations and segments."""

    kind = "InvalidGraph"


class NoFeasibleRoute(ChargeRouteError):
    """The destination cannot be reached under any travel/charging plan."""

    kind = "NoFeasibleRoute"


class InvalidConfig(ChargeRouteError):
    """Routing overrides (YAML file or environment) failed validation."""

    kind = "InvalidConfig"


class AlternateSolverUnavailable(ChargeRouteError):
    """Informational only: the native solver could not be used."""

    kind = "AlternateSolverUnavailable"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Alternate solver unavailable: {reason}")
        self.reason = reason


__all__ = [
    "ChargeRouteError",
    "InvalidPayload",
    "InvalidGraph",
    "NoFeasibleRoute",
    "InvalidConfig",
    "AlternateSolverUnavailable",
]
