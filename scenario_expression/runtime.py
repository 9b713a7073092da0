"""
runtime.py

Scenario Runtime
----------------

ScenarioEvaluator is the entrypoint a simulation driver calls once per tick.

It connects:
    - document loading (YAML/JSON)
    - the parser (document -> Success / Failure expression trees)
    - per-tick evaluation of both trees
    - the diagnostic report of both trees

A scenario document carries two condition sections:

    Success:
      All:
        - Type: ReachPosition
          ...
    Failure:
      Any:
        - Type: Collision
          ...

A section given as a plain sequence is read as All over its items. A missing
section is an empty expression: it never holds.

Both trees are evaluated on every tick. Failure wins over success.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import EngineConfig
from .context import Context
from .document import load_document
from .errors import ScenarioSyntaxError
from .expression import All, Expression
from .log import get_logger
from .parser import read
from .report import children_of, is_named

logger = get_logger(__name__)


class SimulationStatus(enum.Enum):
    ONGOING = "ongoing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class TickResult:
    """Outcome of one ScenarioEvaluator.update() call."""
    tick: int
    status: SimulationStatus
    success: bool
    failure: bool


def read_section(context: Context, node: Any) -> Expression:
    if node is None:
        return Expression()
    if isinstance(node, list):
        return Expression.make(All, [read(context, each) for each in node])
    return read(context, node)


class ScenarioEvaluator:
    """
    Holds the parsed Success / Failure trees of one scenario run. The trees
    are built once and re-evaluated on every update().
    """

    def __init__(
        self,
        context: Context,
        document: Mapping[str, Any],
        *,
        config: Optional[EngineConfig] = None,
    ):
        if not isinstance(document, Mapping):
            raise ScenarioSyntaxError(
                "Syntax error: scenario conditions must be a mapping", fragment=document
            )

        self.context = context
        self.config = config or EngineConfig.from_env()
        self.success = read_section(context, document.get("Success"))
        self.failure = read_section(context, document.get("Failure"))
        self.tick = 0
        self.status = SimulationStatus.ONGOING

    @classmethod
    def from_file(
        cls,
        context: Context,
        path: Union[str, os.PathLike],
        *,
        config: Optional[EngineConfig] = None,
    ) -> "ScenarioEvaluator":
        return cls(context, load_document(path), config=config)

    def update(self) -> TickResult:
        success = self.success.evaluate(self.context).as_boolean()
        failure = self.failure.evaluate(self.context).as_boolean()

        if failure:
            status = SimulationStatus.FAILED
        elif success:
            status = SimulationStatus.SUCCEEDED
        else:
            status = SimulationStatus.ONGOING

        if status is not self.status:
            logger.info("scenario_status_changed", tick=self.tick, previous=self.status.value, status=status.value)
        elif self.config.debug:
            logger.debug("scenario_tick", tick=self.tick, success=success, failure=failure)

        result = TickResult(tick=self.tick, status=status, success=success, failure=failure)
        self.status = status
        self.tick += 1
        return result

    def report(self) -> Dict[str, List[Any]]:
        return {
            "Success": _section_report(self.success, "Success"),
            "Failure": _section_report(self.failure, "Failure"),
        }


def _section_report(expression: Expression, name: str) -> List[Any]:
    entry = expression.report(f"{name}/", 0)
    if is_named(entry):
        return [entry]
    return children_of(entry)
