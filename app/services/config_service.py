import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, confloat, conint

from config.routing_config import ROUTING_CONFIG


OVERRIDES_PATH = Path("config/routing_overrides.yaml")

# environment variable -> routing config key
ENV_OVERRIDES = {
    "CHARGEROUTE_SOC_STEP_KWH": "soc_step_kwh",
    "CHARGEROUTE_AVERAGE_SPEED_KMH": "average_speed_kmh",
    "CHARGEROUTE_EARLY_EXIT": "early_exit",
    "CHARGEROUTE_USE_NATIVE": "use_native_solver",
    "CHARGEROUTE_NATIVE_SOLVER": "native_solver_path",
    "CHARGEROUTE_NATIVE_TIMEOUT_MS": "native_timeout_ms",
}


class RoutingConfigSchema(BaseModel):
    soc_step_kwh: confloat(gt=0, le=10) = ROUTING_CONFIG["soc_step_kwh"]
    soc_tolerance_kwh: confloat(ge=0, le=0.01) = ROUTING_CONFIG["soc_tolerance_kwh"]
    average_speed_kmh: confloat(gt=0, le=200) = ROUTING_CONFIG["average_speed_kmh"]
    default_hybrid_weight: confloat(ge=0, le=1) = ROUTING_CONFIG["default_hybrid_weight"]
    early_exit: bool = ROUTING_CONFIG["early_exit"]
    include_debug_steps: bool = ROUTING_CONFIG["include_debug_steps"]
    use_native_solver: bool = ROUTING_CONFIG["use_native_solver"]
    native_solver_path: str = ROUTING_CONFIG["native_solver_path"]
    native_timeout_ms: conint(ge=1, le=600000) = ROUTING_CONFIG["native_timeout_ms"]


def load_overrides(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Read the YAML overrides file; missing file means no overrides."""
    path = Path(path) if path is not None else OVERRIDES_PATH
    if path.exists():
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return {}


def env_overrides() -> Dict[str, Any]:
    load_dotenv()
    # raw strings; pydantic coerces "true"/"0.25"/"2000"
    return {key: os.environ[var] for var, key in ENV_OVERRIDES.items() if os.environ.get(var)}


def merged_runtime_config(overrides_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Defaults, then YAML file, then environment; validated as a whole."""
    data = {**ROUTING_CONFIG, **load_overrides(overrides_path), **env_overrides()}
    return RoutingConfigSchema(**data).model_dump()
