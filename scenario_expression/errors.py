"""
errors.py

Exception hierarchy for the scenario expression engine.

    ScenarioExpressionError
        ScenarioSyntaxError    : malformed or ungrammatical document fragment
        PluginLoadError        : declared Type has no registered implementation
        ConfigurationError     : a plugin's configure() rejected its parameters
        MissingBindingError    : a Context binding was required but never defined

Parse-time errors carry the offending document fragment so the loader can
print it next to the message.
"""

from __future__ import annotations

from typing import Any, Optional

import yaml


# -------------------------------------------------------------------------
# Exceptions
# -------------------------------------------------------------------------


class ScenarioExpressionError(Exception):
    """Base class for scenario expression errors."""

    def __init__(self, message: str, fragment: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.fragment = fragment

    def annotate(self, fragment: Any) -> "ScenarioExpressionError":
        """
        Attach the document fragment that was being read when this error was
        raised. The innermost fragment wins: an error that already carries
        one keeps it.
        """
        if self.fragment is None:
            self.fragment = fragment
        return self

    def __str__(self) -> str:
        if self.fragment is None:
            return self.message
        return f"{self.message}\n\n{_render(self.fragment)}\n"


class ScenarioSyntaxError(ScenarioExpressionError):
    """Raised when a document node does not match the expression grammar."""


class PluginLoadError(ScenarioExpressionError):
    """Raised when no plugin is declared under the requested name."""


class ConfigurationError(ScenarioExpressionError):
    """Raised when a plugin refuses the parameters it was configured with."""


class MissingBindingError(ScenarioExpressionError):
    """
    Raised when evaluation needs a Context collaborator that was never
    installed with Context.define().
    """

    def __init__(self, message: str, fragment: Optional[Any] = None, binding: str = ""):
        super().__init__(message, fragment)
        self.binding = binding


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------


def _render(fragment: Any) -> str:
    from .document import dump

    if isinstance(fragment, str):
        return fragment
    try:
        return dump(fragment).rstrip()
    except yaml.YAMLError:
        # Hand-built nodes may hold objects with no YAML representation.
        return repr(fragment)
