"""
Request/response records for route computation.

The request is validated exactly once, at the boundary, before anything reaches
the routing core. Required numeric fields are never defaulted: a missing
battery size or price is an InvalidPayload, not a zero.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    confloat,
    model_validator,
)

from src.routing.errors import InvalidPayload


class StationSchema(BaseModel):
    id: int
    name: Optional[str] = None
    lat: confloat(ge=-90, le=90, allow_inf_nan=False)
    lon: confloat(ge=-180, le=180, allow_inf_nan=False)
    cost_per_kwh: confloat(ge=0, allow_inf_nan=False)
    max_kwh: confloat(ge=0, allow_inf_nan=False)
    # older clients send speed_kW
    charge_rate_kw: confloat(ge=0, allow_inf_nan=False) = Field(
        validation_alias=AliasChoices("charge_rate_kW", "charge_rate_kw", "speed_kW"),
        serialization_alias="charge_rate_kW",
    )


class SegmentSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: int = Field(alias="from")
    to: int
    distance_km: confloat(gt=0, allow_inf_nan=False)
    time_min: Optional[confloat(ge=0, allow_inf_nan=False)] = None


class VehicleSchema(BaseModel):
    battery_kwh: confloat(gt=0, allow_inf_nan=False)
    initial_soc_pct: confloat(ge=0, le=100, allow_inf_nan=False)
    consumption_kwh_per_km: confloat(gt=0, allow_inf_nan=False)


class RouteRequest(BaseModel):
    nodes: List[StationSchema]
    edges: List[SegmentSchema]
    vehicle: VehicleSchema
    optimization: Literal["cost", "time", "hybrid"]
    hybrid_weight: Optional[confloat(ge=0, le=1, allow_inf_nan=False)] = None
    start_id: Optional[int] = None
    destination_id: Optional[int] = None

    @model_validator(mode="after")
    def check_topology(self) -> "RouteRequest":
        if len(self.nodes) < 2:
            raise ValueError(f"At least two nodes required, got {len(self.nodes)}")
        ids = [n.id for n in self.nodes]
        if len(set(ids)) != len(ids):
            raise ValueError("Node ids must be unique")
        known = set(ids)
        for i, e in enumerate(self.edges):
            for end in (e.from_, e.to):
                if end not in known:
                    raise ValueError(f"edges[{i}] references unknown node {end}")
        for label, node in (("start_id", self.start_id), ("destination_id", self.destination_id)):
            if node is not None and node not in known:
                raise ValueError(f"{label} references unknown node {node}")
        if self.start == self.destination:
            raise ValueError("Start and destination must differ")
        return self

    @property
    def start(self) -> int:
        return self.start_id if self.start_id is not None else self.nodes[0].id

    @property
    def destination(self) -> int:
        return self.destination_id if self.destination_id is not None else self.nodes[-1].id

    def station_records(self) -> List[Dict[str, Any]]:
        return [n.model_dump() for n in self.nodes]

    def segment_records(self) -> List[Dict[str, Any]]:
        return [e.model_dump(by_alias=True) for e in self.edges]

    def to_wire(self) -> Dict[str, Any]:
        """Request in its JSON wire shape, as an external solver expects it."""
        return self.model_dump(by_alias=True, exclude_none=True)


class SocTimelineEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    node: int
    soc: float
    soc_kwh: Optional[float] = None
    charged_kwh: Optional[float] = None


class RouteResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Literal["ok"] = "ok"
    optimal_path: List[int] = Field(min_length=2)
    total_cost: float
    total_distance_km: float = 0.0
    total_time_min: float = 0.0
    soc_timeline: List[SocTimelineEntry] = Field(default_factory=list)
    visual_path_geojson: Optional[Dict[str, Any]] = None
    debug_steps: List[Dict[str, Any]] = Field(default_factory=list)
    used: Literal["native", "python"] = "python"
    fallback_reason: Optional[str] = None


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "payload"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def validate_payload(payload: Any) -> RouteRequest:
    """Validate a raw JSON-compatible payload, raising InvalidPayload on any problem."""
    if not isinstance(payload, dict):
        raise InvalidPayload(f"Payload must be a JSON object, got {type(payload).__name__}")
    try:
        return RouteRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidPayload(f"Invalid payload: {_format_errors(exc)}") from exc
