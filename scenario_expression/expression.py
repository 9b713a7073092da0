"""
expression.py

Expression tree for scenario conditions
---------------------------------------

    <Expression> = <Literal>
                 | <Logical>
                 | <Procedure Call>
                 | <Sequential>
                 | <Parallel>

    <Literal>    = <Boolean> | <Number>

    <Logical>    = <N-Ary Logical Operator> [ <Test>* ]
                 | <Unary Logical Operator> { <Test> }

    <N-Ary Logical Operator> = All | Any
    <Unary Logical Operator> = Not

The value of a test is Boolean: whether the value of the expression is
different from false. The value of an expression itself is not necessarily
Boolean (a Number literal is truthy when non-zero).

An Expression is a handle. Copying a handle shares the node it points to;
assign() re-seats one handle without touching the others. Node lifetime is
whatever Python's reference counting makes it: the node lives as long as its
longest holder.
"""

from __future__ import annotations

import operator
from collections import Counter
from typing import Callable, Iterable, List, Optional

from .report import ReportEntry, children_of, is_named, placeholder


class Expression:
    """Value-semantic handle over a shared expression node."""

    __slots__ = ("_node",)

    def __init__(self, node: Optional["Node"] = None):
        self._node = node

    @classmethod
    def make(cls, node_type: Callable[..., "Node"], *args, **kwargs) -> "Expression":
        """Build a node of the given variant and wrap it in a fresh handle."""
        return cls(node_type(*args, **kwargs))

    # --- handle semantics ---

    @property
    def node(self) -> Optional["Node"]:
        return self._node

    def is_empty(self) -> bool:
        return self._node is None

    def copy(self) -> "Expression":
        return Expression(self._node)

    def __copy__(self) -> "Expression":
        return self.copy()

    def __deepcopy__(self, memo) -> "Expression":
        # Handles share structure; a deep copy would duplicate plugin state.
        return self.copy()

    def assign(self, other: "Expression") -> "Expression":
        self._node = other._node
        return self

    def shares(self, other: "Expression") -> bool:
        return self._node is not None and self._node is other._node

    # --- evaluation ---

    def type(self) -> str:
        return self._node.type() if self._node is not None else "Expression"

    def evaluate(self, context) -> "Expression":
        if self._node is None:
            return self
        return self._node.evaluate(context)

    def as_boolean(self) -> bool:
        return self._node.as_boolean() if self._node is not None else False

    def __bool__(self) -> bool:
        return self.as_boolean()

    def report(self, prefix: str = "", occurrence: int = 0) -> ReportEntry:
        if self._node is None:
            return [placeholder()]
        return self._node.report(prefix, occurrence)

    def __repr__(self) -> str:
        if self._node is None:
            return "Expression()"
        return f"Expression({self._node!r})"


# -------------------------------------------------------------------------
# Nodes
# -------------------------------------------------------------------------


class Node:
    """
    Base of every expression node. The set of node kinds is closed
    (Literal, Fold, Not, Sequential, Parallel, Procedure); leaf behaviour is
    opened up only through procedure plugins.
    """

    def type(self) -> str:
        raise NotImplementedError

    def evaluate(self, context) -> Expression:
        raise NotImplementedError

    def as_boolean(self) -> bool:
        raise NotImplementedError

    def report(self, prefix: str, occurrence: int) -> ReportEntry:
        return [placeholder()]


class Literal(Node):
    """A closed value. Evaluates to itself and never has children."""

    def __init__(self, value):
        if isinstance(value, bool):
            self.value = value
        elif isinstance(value, (int, float)):
            self.value = float(value)
        else:
            raise TypeError(f"Literal must hold a Boolean or a Number, not {type(value).__name__}")

    def type(self) -> str:
        return "Literal"

    def evaluate(self, context) -> Expression:
        return Expression(self)

    def as_boolean(self) -> bool:
        return bool(self.value)

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"


def boolean(value: bool) -> Expression:
    return Expression.make(Literal, bool(value))


class Composite(Node):
    """Node holding an ordered sequence of child expressions."""

    name = "Composite"

    def __init__(self, operands: Iterable[Expression] = ()):
        self.operands: List[Expression] = list(operands)

    def type(self) -> str:
        return self.name

    def report(self, prefix: str, occurrence: int) -> ReportEntry:
        if not self.operands:
            return [placeholder()]

        occurrences: Counter = Counter()
        scope = f"{prefix}{self.type()}({occurrence})/"

        result: list = []
        for each in self.operands:
            kind = each.type()
            entry = each.report(scope, occurrences[kind])
            occurrences[kind] += 1

            if is_named(entry):
                result.append(entry)
            else:
                result.extend(children_of(entry))
        return result

    def __repr__(self) -> str:
        return f"{self.name}({self.operands!r})"


class Fold(Composite):
    """
    N-ary logical combinator: folds every child's result with `combine`,
    starting from `seed`. Every child is evaluated on every call, in
    document order, so that side-effecting children (actions) always run.
    """

    seed: bool = True
    combine: Callable[[bool, bool], bool] = operator.and_

    def _fold(self, values: Iterable[bool]) -> bool:
        result = self.seed
        for value in values:
            result = type(self).combine(result, value)
        return result

    def evaluate(self, context) -> Expression:
        return boolean(self._fold(each.evaluate(context).as_boolean() for each in self.operands))

    def as_boolean(self) -> bool:
        # Current results of the children; nothing is evaluated.
        return self._fold(each.as_boolean() for each in self.operands)


def fold(name: str, seed: bool, combine: Callable[[bool, bool], bool]) -> type:
    """Define a Fold variant from its display name, seed and operator."""
    return type(name, (Fold,), {
        "name": name,
        "seed": seed,
        "combine": staticmethod(combine),
        "__doc__": f"{name}: fold children with {combine.__name__}, seed {seed}.",
    })


All = fold("All", True, operator.and_)
Any = fold("Any", False, operator.or_)


class Not(Composite):
    """Unary negation of a single child."""

    name = "Not"

    def __init__(self, operand: Expression):
        super().__init__([operand])

    @property
    def operand(self) -> Expression:
        return self.operands[0]

    def evaluate(self, context) -> Expression:
        return boolean(not self.operand.evaluate(context).as_boolean())

    def as_boolean(self) -> bool:
        return not self.operand.as_boolean()


class Sequential(Composite):
    """
    Runs children one after the other: only the current child is evaluated,
    and the cursor advances on the tick it yields true. True once every child
    has completed.
    """

    name = "Sequential"

    def __init__(self, operands: Iterable[Expression] = ()):
        super().__init__(operands)
        self.cursor = 0

    def done(self) -> bool:
        return self.cursor >= len(self.operands)

    def evaluate(self, context) -> Expression:
        if not self.done():
            if self.operands[self.cursor].evaluate(context).as_boolean():
                self.cursor += 1
        return boolean(self.done())

    def as_boolean(self) -> bool:
        return self.done()


class Parallel(Composite):
    """
    Evaluates every child that has not yet completed on each tick, latching
    the ones that yield true. True once every child is latched.
    """

    name = "Parallel"

    def __init__(self, operands: Iterable[Expression] = ()):
        super().__init__(operands)
        self.completed = [False] * len(self.operands)

    def done(self) -> bool:
        return all(self.completed)

    def evaluate(self, context) -> Expression:
        for index, each in enumerate(self.operands):
            if not self.completed[index]:
                self.completed[index] = each.evaluate(context).as_boolean()
        return boolean(self.done())

    def as_boolean(self) -> bool:
        return self.done()
