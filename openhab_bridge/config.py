from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_REFRESH_INTERVAL_S = 60.0
DEFAULT_HTTP_TIMEOUT_S = 10.0


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    host: str = "0.0.0.0"
    port: int = 8000


def _opt_float(name: str, default: float) -> float:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _opt_int(name: str, default: int) -> int:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def load_bridge_config() -> BridgeConfig:
    refresh_interval_s = _opt_float("OPENHAB_REFRESH_INTERVAL_S", DEFAULT_REFRESH_INTERVAL_S)
    if refresh_interval_s <= 0:
        raise ValueError(f"OPENHAB_REFRESH_INTERVAL_S must be positive, got {refresh_interval_s!r}")

    return BridgeConfig(
        refresh_interval_s=refresh_interval_s,
        http_timeout_s=_opt_float("OPENHAB_HTTP_TIMEOUT_S", DEFAULT_HTTP_TIMEOUT_S),
        host=os.environ.get("OPENHAB_HOST", "0.0.0.0"),
        port=_opt_int("OPENHAB_PORT", 8000),
    )
