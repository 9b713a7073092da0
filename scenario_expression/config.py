"""
config.py

Engine settings read from the environment.

    SCENARIO_EXPRESSION_DEBUG        "1" enables per-tick debug logging
    SCENARIO_EXPRESSION_LOG_LEVEL    DEBUG | INFO | WARNING | ERROR
    SCENARIO_EXPRESSION_LOG_FORMAT   "json" | "console"
    SCENARIO_EXPRESSION_PLUGINS      entry-point group scanned for plugins
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "SCENARIO_EXPRESSION_"

DEFAULT_ENTRY_POINT_GROUP = "scenario_expression.plugins"


@dataclass(frozen=True)
class EngineConfig:
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "console"
    entry_point_group: str = DEFAULT_ENTRY_POINT_GROUP

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        return cls(
            debug=env.get(ENV_PREFIX + "DEBUG", "0") == "1",
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
            log_format=env.get(ENV_PREFIX + "LOG_FORMAT", "console").lower(),
            entry_point_group=env.get(ENV_PREFIX + "PLUGINS", DEFAULT_ENTRY_POINT_GROUP),
        )
