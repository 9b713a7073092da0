"""
Scenario Expression - pass/fail condition engine for driving-simulation scenarios.

Public API:
- read: Parse a document node into an Expression tree
- Expression: Value-semantic handle over an expression node
- Context: Shared collaborators (simulator, entities, intersections)
- ConditionBase / ActionBase: Plugin bases for leaf procedures
- conditions / actions: Plugin registries
- ScenarioEvaluator: Per-tick driver for Success / Failure condition sets
"""

from .context import Context
from .errors import (
    ConfigurationError,
    MissingBindingError,
    PluginLoadError,
    ScenarioExpressionError,
    ScenarioSyntaxError,
)
from .expression import Expression
from .parser import read
from .plugins import actions, conditions
from .procedure import ActionBase, ConditionBase
from .runtime import ScenarioEvaluator, SimulationStatus

# Derive version from package metadata
try:
    from importlib.metadata import version
    __version__ = version("scenario-expression")
except Exception:
    __version__ = "0.1.0"

__all__ = [
    "Context",
    "Expression",
    "read",
    "conditions",
    "actions",
    "ConditionBase",
    "ActionBase",
    "ScenarioEvaluator",
    "SimulationStatus",
    "ScenarioExpressionError",
    "ScenarioSyntaxError",
    "PluginLoadError",
    "ConfigurationError",
    "MissingBindingError",
]
