"""
context.py

Context: registry of the collaborators shared by every expression of a
scenario run.

    simulator      : handle used by actions and by plugin configuration
    entities       : entity registry (vehicles, pedestrians, ...)
    intersections  : intersection registry (traffic-light state machines)

Each binding is optional. `<name>()` fetches it or raises
MissingBindingError; `<name>_pointer()` fetches it or returns None, for
collaborators that tolerate absence.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .errors import MissingBindingError

BINDINGS = ("simulator", "entities", "intersections")


class Context:
    """
    Bindings are installed once during setup and read-only afterwards from
    the engine's point of view.
    """

    def __init__(self, **bindings: Any):
        self._bindings: Dict[str, Any] = {name: None for name in BINDINGS}
        if bindings:
            self.define(**bindings)

    def define(self, **bindings: Any) -> "Context":
        for name, value in bindings.items():
            if name not in self._bindings:
                raise TypeError(
                    f"Unknown context binding '{name}' (expected one of {', '.join(BINDINGS)})"
                )
            self._bindings[name] = value
        return self

    def _require(self, name: str) -> Any:
        value = self._bindings[name]
        if value is None:
            raise MissingBindingError(
                f"No {name} defined, but scenario execution requires this.",
                binding=name,
            )
        return value

    def is_defined(self, name: str) -> bool:
        return self._bindings.get(name) is not None

    # --- fetch-or-raise ---

    def simulator(self) -> Any:
        return self._require("simulator")

    def entities(self) -> Any:
        return self._require("entities")

    def intersections(self) -> Any:
        return self._require("intersections")

    # --- fetch-or-None ---

    def simulator_pointer(self) -> Optional[Any]:
        return self._bindings["simulator"]

    def entities_pointer(self) -> Optional[Any]:
        return self._bindings["entities"]

    def intersections_pointer(self) -> Optional[Any]:
        return self._bindings["intersections"]

    def __repr__(self) -> str:
        bound = [name for name in BINDINGS if self._bindings[name] is not None]
        return f"Context(bound={bound})"
