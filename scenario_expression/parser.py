"""
parser.py

read(context, node) -> Expression

Recursive descent over a generic document tree (the output of yaml.safe_load
or json.load). Dispatch is by node shape:

    true / false / 1.5           Literal
    "true" / "no" / "1e3"        Literal (scalar grammar below)
    {All: [<Test>*]}             All
    {Any: [<Test>*]}             Any
    {Not: <Test>}                Not
    {Sequential: [<Test>*]}      Sequential
    {Parallel: [<Test>*]}        Parallel
    {Action: {Type: T, ...}}     Action  (plugin "<T>Action")
    {Type: T, ...}               Predicate (plugin "<T>Condition")

Anything else is a ScenarioSyntaxError carrying the offending fragment. No
partial tree is ever returned: the first error aborts the whole read.

Deprecated shapes are accepted with a warning:

    {All: {Type: ...}}           single test instead of a sequence
    {Not: [<Test>]}              one-element sequence instead of a test
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, List, Optional

from arpeggio import EOF, NoMatch, ParserPython, PTNodeVisitor, visit_parse_tree
from arpeggio import RegExMatch as _

from .errors import ScenarioSyntaxError
from .expression import All, Any as AnyOf, Expression, Literal, Not, Parallel, Sequential
from .log import get_logger
from .procedure import Action, Predicate

logger = get_logger(__name__)

# ==========================================
# 1. SCALAR LITERAL GRAMMAR
# ==========================================


def boolean_word():
    return _(r'(true|false|yes|no|on|off)\b', ignore_case=True)


def number():
    return _(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def scalar():
    return [boolean_word, number], EOF


class ScalarVisitor(PTNodeVisitor):
    def visit_boolean_word(self, node, children):
        return node.value.lower() in ("true", "yes", "on")

    def visit_number(self, node, children):
        return float(node.value)

    def visit_scalar(self, node, children):
        return children[0]


_SCALAR_PARSER: Optional[ParserPython] = None


def _scalar_parser() -> ParserPython:
    global _SCALAR_PARSER
    if _SCALAR_PARSER is None:
        _SCALAR_PARSER = ParserPython(scalar)
    return _SCALAR_PARSER


def parse_literal(text: str):
    """Parse a scalar string into a bool or a float, or None if it is neither."""
    try:
        tree = _scalar_parser().parse(text)
    except NoMatch:
        return None
    return visit_parse_tree(tree, ScalarVisitor())


# ==========================================
# 2. EXPRESSION READER
# ==========================================


def _deprecated(keyword: str, hint: str, node: Any) -> None:
    logger.warning("deprecated_syntax", keyword=keyword, hint=hint, fragment=node)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _tests(keyword: str, value: Any, node: Any) -> List[Any]:
    if _is_sequence(value):
        return list(value)
    if isinstance(value, Mapping):
        _deprecated(keyword, f"'{keyword}: <Test>' is deprecated. Use '{keyword}: [<Test>*]'", node)
        return [value]
    raise ScenarioSyntaxError(
        f"Syntax error: {keyword} requires a sequence of tests", fragment=node
    )


def _read_n_ary(node_type: Callable[..., Any]) -> Callable[[Any, str, Any, Any], Expression]:
    def reader(context, keyword: str, value: Any, node: Any) -> Expression:
        return Expression.make(node_type, [read(context, each) for each in _tests(keyword, value, node)])
    return reader


def _read_not(context, keyword: str, value: Any, node: Any) -> Expression:
    if _is_sequence(value):
        if len(value) != 1:
            raise ScenarioSyntaxError(
                f"Syntax error: {keyword} requires exactly one test", fragment=node
            )
        _deprecated(keyword, f"'{keyword}: [<Test>]' is deprecated. Use '{keyword}: <Test>'", node)
        value = value[0]
    if value is None:
        raise ScenarioSyntaxError(f"Syntax error: {keyword} requires a test", fragment=node)
    return Expression.make(Not, read(context, value))


def _read_action(context, keyword: str, value: Any, node: Any) -> Expression:
    if not isinstance(value, Mapping):
        raise ScenarioSyntaxError(
            f"Syntax error: {keyword} requires a procedure call with field 'Type'", fragment=node
        )
    return Expression(Action.from_document(context, value))


_KEYWORDS: Dict[str, Callable[[Any, str, Any, Any], Expression]] = {
    "All": _read_n_ary(All),
    "Any": _read_n_ary(AnyOf),
    "Not": _read_not,
    "Sequential": _read_n_ary(Sequential),
    "Parallel": _read_n_ary(Parallel),
    "Action": _read_action,
}


def read(context, node: Any) -> Expression:
    """Build the expression tree described by a document node."""
    if isinstance(node, bool):
        return Expression.make(Literal, node)

    if isinstance(node, (int, float)):
        return Expression.make(Literal, node)

    if isinstance(node, str):
        value = parse_literal(node)
        if value is None:
            raise ScenarioSyntaxError(
                "Syntax error: expected a Boolean or a Number", fragment=node
            )
        return Expression.make(Literal, value)

    if isinstance(node, Mapping):
        # Other keys of a procedure call belong to its plugin.
        if "Type" in node:
            return Expression(Predicate.from_document(context, node))

        keywords = [key for key in node if key in _KEYWORDS]
        if keywords:
            if len(node) != 1:
                raise ScenarioSyntaxError(
                    f"Syntax error: operator {keywords[0]} must be the only key of its node",
                    fragment=node,
                )
            keyword = keywords[0]
            return _KEYWORDS[keyword](context, keyword, node[keyword], node)

        raise ScenarioSyntaxError(
            "Syntax error: expected a logical operator or a procedure call", fragment=node
        )

    raise ScenarioSyntaxError(
        "Syntax error: malformed expression", fragment=node if node is not None else "null"
    )
