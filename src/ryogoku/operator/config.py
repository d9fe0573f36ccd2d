"""
Operator-wide configuration.

Values are read from the environment once, at import time, and are immutable
afterwards. Handlers import the module-level `config` object.
"""
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..crds.const import CRD_PLURAL_DEVNET, CRD_GROUP
from ..utils.time import parse_duration

DEFAULT_IMAGE = "shardlabs/starknet-devnet:latest"
DEFAULT_FIELD_MANAGER = "ryogoku"
DEVNET_FINALIZER = f"{CRD_PLURAL_DEVNET}.{CRD_GROUP}"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_seconds(value: str) -> float:
    """Accepts either plain seconds ('300', '2.5') or a duration ('5m')."""
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        return parse_duration(value).total_seconds()
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"Invalid number of seconds: {value}")
    return seconds


@dataclass(frozen=True)
class OperatorConfig:
    finalizer: str = DEVNET_FINALIZER
    default_image: str = DEFAULT_IMAGE
    field_manager: str = DEFAULT_FIELD_MANAGER
    # How long to wait before re-checking a devnet that just left `Created`
    # or is `Errored`.
    requeue_interval: float = 5 * 60
    retry_delay: float = 10
    retry_max_delay: float = 5 * 60
    retry_backoff: bool = True
    worker_limit: int = 5
    posting_enabled: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OperatorConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            default_image=env.get("RYOGOKU_DEFAULT_IMAGE", defaults.default_image),
            field_manager=env.get("RYOGOKU_FIELD_MANAGER", defaults.field_manager),
            requeue_interval=_env_seconds(
                env.get("RYOGOKU_REQUEUE_INTERVAL", str(int(defaults.requeue_interval)))
            ),
            retry_delay=_env_seconds(
                env.get("RYOGOKU_RETRY_DELAY", str(int(defaults.retry_delay)))
            ),
            retry_max_delay=_env_seconds(
                env.get("RYOGOKU_RETRY_MAX_DELAY", str(int(defaults.retry_max_delay)))
            ),
            retry_backoff=_env_bool(env.get("RYOGOKU_RETRY_BACKOFF", "true")),
            worker_limit=int(env.get("RYOGOKU_WORKER_LIMIT", defaults.worker_limit)),
            posting_enabled=_env_bool(env.get("RYOGOKU_POSTING_ENABLED", "false")),
        )


config = OperatorConfig.from_env()
