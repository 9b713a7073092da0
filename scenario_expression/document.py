"""
document.py

Loading scenario documents. YAML is the authoring format; JSON documents load
through the same path since JSON is a YAML subset.
"""

from __future__ import annotations

import os
from typing import Any, Union

import yaml

from .errors import ScenarioSyntaxError


def load_text(text: str) -> Any:
    """Parse a YAML/JSON document from a string."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ScenarioSyntaxError(f"Syntax error: document is not valid YAML: {e}") from e


def load_document(path: Union[str, os.PathLike]) -> Any:
    """Parse a YAML/JSON document from a file."""
    with open(path, "r", encoding="utf-8") as f:
        return load_text(f.read())


def dump(document: Any) -> str:
    return yaml.safe_dump(document, default_flow_style=False, sort_keys=False)
