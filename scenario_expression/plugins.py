"""
plugins.py

Name-keyed plugin registries for leaf procedures.

Two namespaces exist, one per procedure kind:

    conditions : read-only checks, declared as "<Type>Condition"
    actions    : state-mutating calls, declared as "<Type>Action"

Plugins are registered explicitly (usually with the decorator form at import
time of the module that defines them) or discovered from installed packages
through importlib.metadata entry points. The expression core never imports a
concrete plugin.

    from scenario_expression.plugins import conditions

    @conditions.register("SpeedCondition")
    class SpeedCondition(ConditionBase):
        ...
"""

from __future__ import annotations

from importlib.metadata import entry_points
from typing import Callable, Dict, List, Optional

from .config import EngineConfig
from .errors import PluginLoadError
from .log import get_logger

logger = get_logger(__name__)

Factory = Callable[[], object]


class PluginRegistry:
    """
    Maps declared plugin names to factories. Every load() produces a fresh
    instance, so two procedures of the same Type never share plugin state.
    """

    def __init__(self, namespace: str):
        self.namespace = namespace
        self._factories: Dict[str, Factory] = {}

    def register(self, name: str, factory: Optional[Factory] = None):
        """
        Declare `factory` under `name`. Without a factory, returns a
        decorator so classes can register themselves.
        """
        if factory is None:
            def decorator(cls):
                self.register(name, cls)
                return cls
            return decorator

        if not callable(factory):
            raise TypeError(f"Plugin factory for '{name}' is not callable")
        if name in self._factories and self._factories[name] is not factory:
            logger.warning("plugin_redeclared", namespace=self.namespace, name=name)
        self._factories[name] = factory
        return factory

    def unregister(self, name: str) -> None:
        self._factories.pop(name, None)

    def declared_classes(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def load(self, name: str):
        for declaration in self.declared_classes():
            if declaration == name:
                logger.debug("plugin_loaded", namespace=self.namespace, name=name)
                return self._factories[declaration]()

        raise PluginLoadError(f"Failed to load {self.namespace} plugin '{name}'")

    def load_entry_points(self, group: str) -> int:
        """
        Register every entry point of `group` whose name ends with this
        registry's suffix. Returns the number of plugins registered.
        """
        suffix = self.namespace
        count = 0
        for ep in entry_points(group=group):
            if not ep.name.endswith(suffix):
                continue
            try:
                factory = ep.load()
            except Exception as e:
                raise PluginLoadError(
                    f"Failed to load {self.namespace} plugin '{ep.name}' from entry point group '{group}': {e}"
                ) from e
            self.register(ep.name, factory)
            count += 1
        logger.info("plugins_discovered", namespace=self.namespace, group=group, count=count)
        return count

    def clear(self) -> None:
        self._factories.clear()


conditions = PluginRegistry("Condition")
actions = PluginRegistry("Action")


def discover(group: Optional[str] = None) -> int:
    """Populate both registries from installed entry points."""
    if group is None:
        group = EngineConfig.from_env().entry_point_group
    return conditions.load_entry_points(group) + actions.load_entry_points(group)
