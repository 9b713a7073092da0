"""
procedure.py

Procedure calls: leaf expressions backed by plugins.

A plugin implements the capability set

    configure(node, simulator) -> bool
    update(...)                -> bool
    get_type() / get_name() / rename(name)
    property()                 -> report entry (mapping with "Name")

Predicate plugins (ConditionBase) are read-only checks and receive the
intersection registry on update(). Action plugins (ActionBase) may mutate the
simulation and additionally receive the simulator, which must be bound.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError, ScenarioExpressionError, ScenarioSyntaxError
from .expression import Expression, Node, boolean
from .plugins import PluginRegistry, actions, conditions
from .report import ReportEntry

# -------------------------------------------------------------------------
# Plugin bases
# -------------------------------------------------------------------------


class PluginBase(abc.ABC):
    """Shared state of condition and action plugins."""

    def __init__(self, type_: Optional[str] = None):
        self._type = type_ or ""
        self._name = ""
        self.configured = False
        self.result = False

    @abc.abstractmethod
    def configure(self, node: Mapping[str, Any], simulator: Any) -> bool:
        ...

    def get_type(self) -> str:
        return self._type or type(self).__name__

    def declare_type(self, name: str) -> None:
        """Adopt the registered name unless a type was given explicitly."""
        if not self._type:
            self._type = name

    def get_name(self) -> str:
        return self._name

    def rename(self, name: str) -> str:
        self._name = name
        return self._name

    def get_result(self) -> bool:
        return self.result

    def property(self) -> Dict[str, Any]:
        return {"Name": self._name, "Type": self.get_type(), "Value": self.result}


class ConditionBase(PluginBase):
    @abc.abstractmethod
    def update(self, intersections: Any) -> bool:
        ...


class ActionBase(PluginBase):
    @abc.abstractmethod
    def update(self, simulator: Any, intersections: Any) -> bool:
        ...


# -------------------------------------------------------------------------
# Procedure nodes
# -------------------------------------------------------------------------


class Procedure(Node):
    """
    Leaf node holding one plugin instance. Evaluation returns a fresh Boolean
    literal; the plugin may keep its own state for the next call.
    """

    registry: PluginRegistry
    suffix = ""

    def __init__(self, plugin: PluginBase, declared_type: str = ""):
        self.plugin = plugin
        self.declared_type = declared_type or plugin.get_type()
        self.result = False

    @classmethod
    def load(cls, name: str) -> PluginBase:
        return cls.registry.load(name)

    @classmethod
    def from_document(cls, context, node: Mapping[str, Any]) -> "Procedure":
        """Load, instantiate and configure the plugin a document node declares."""
        try:
            if not isinstance(node, Mapping) or "Type" not in node:
                raise ScenarioSyntaxError(f"Syntax error: {cls.__name__.lower()} requires field 'Type'")
            declared_type = node["Type"]
            if not isinstance(declared_type, str) or not declared_type:
                raise ScenarioSyntaxError("Syntax error: field 'Type' must be a non-empty string")

            plugin = cls.load(declared_type + cls.suffix)
            if isinstance(plugin, PluginBase):
                plugin.declare_type(declared_type + cls.suffix)

            try:
                accepted = plugin.configure(node, context.simulator_pointer())
            except ScenarioExpressionError:
                raise
            except Exception as e:
                raise ConfigurationError(
                    f"Failed to configure {cls.__name__.lower()} of type {declared_type}: {e}"
                ) from e
            if accepted is False:
                raise ConfigurationError(
                    f"Failed to configure {cls.__name__.lower()} of type {declared_type}"
                )
            if isinstance(plugin, PluginBase):
                plugin.configured = True
        except ScenarioExpressionError as e:
            e.annotate(node)
            raise

        return cls(plugin, declared_type)

    def type(self) -> str:
        return self.plugin.get_type()

    def as_boolean(self) -> bool:
        return self.result

    def update(self, context) -> bool:
        raise NotImplementedError

    def evaluate(self, context) -> Expression:
        self.result = bool(self.update(context))
        if isinstance(self.plugin, PluginBase):
            self.plugin.result = self.result
        return boolean(self.result)

    def report(self, prefix: str, occurrence: int) -> ReportEntry:
        if not self.plugin.get_name():
            self.plugin.rename(f"{prefix}{self.plugin.get_type()}({occurrence})")
        return self.plugin.property()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.declared_type!r})"


class Predicate(Procedure):
    registry = conditions
    suffix = "Condition"

    def update(self, context) -> bool:
        return self.plugin.update(context.intersections_pointer())


class Action(Procedure):
    registry = actions
    suffix = "Action"

    def update(self, context) -> bool:
        return self.plugin.update(context.simulator(), context.intersections_pointer())
