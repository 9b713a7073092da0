"""
report.py

Diagnostic report entries
-------------------------

A report is a JSON-shaped tree:

    named leaf   : a mapping carrying a "Name" field (one procedure verdict,
                   plus whatever properties the plugin exposes)
    container    : anything else (a list, or a mapping without "Name");
                   its children splice into the parent's child list

Composite expressions flatten their children through is_named() /
children_of(), so the final report is a flat forest of named verdicts whose
logical nesting survives only in the generated names:

    All(0)/Any(0)/SpeedCondition(1)

A mapping that happens to contain "Name" is always treated as a named leaf,
whatever else it holds.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Union

ReportEntry = Union[Dict[str, Any], List[Any]]

NAME = "Name"


def placeholder() -> Dict[str, Any]:
    """The empty entry produced by nodes with nothing to report."""
    return {}


def is_named(entry: Any) -> bool:
    return isinstance(entry, dict) and NAME in entry


def children_of(entry: Any) -> List[Any]:
    """Children of a transparent container, in order."""
    if isinstance(entry, dict):
        return list(entry.values())
    if isinstance(entry, (list, tuple)):
        return list(entry)
    return []


def leaves(entry: Any) -> Iterator[Dict[str, Any]]:
    """Yield every named leaf of a report, depth first."""
    if is_named(entry):
        yield entry
        return
    for each in children_of(entry):
        yield from leaves(each)


def names(entry: Any) -> List[str]:
    return [each[NAME] for each in leaves(entry)]


def to_json(entry: ReportEntry, *, indent: Union[int, None] = 2) -> str:
    """
    Serialize a report. Keys keep the order plugins emitted them in;
    non-JSON values (enums, numpy scalars, ...) fall back to str().
    """
    return json.dumps(entry, indent=indent, default=str)
