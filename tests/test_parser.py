import textwrap

import pytest
from structlog.testing import capture_logs

from conftest import CountingCondition

from scenario_expression.document import load_text
from scenario_expression.errors import (
    ConfigurationError,
    PluginLoadError,
    ScenarioSyntaxError,
)
from scenario_expression.expression import All, Any, Expression, Literal, Not
from scenario_expression.parser import parse_literal, read
from scenario_expression.procedure import Action, Predicate


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text, expected", [
    ("true", True),
    ("False", False),
    (" yes ", True),
    ("off", False),
    ("42", 42.0),
    ("-1.5", -1.5),
    ("1e3", 1000.0),
    (".5", 0.5),
])
def test_parse_literal(text, expected):
    assert parse_literal(text) == expected
    assert type(parse_literal(text)) is type(expected)


@pytest.mark.parametrize("text", ["maybe", "truely", "1.2.3", "", "12 apples"])
def test_parse_literal_rejects(text):
    assert parse_literal(text) is None


def test_read_literals(context):
    assert read(context, True).type() == "Literal"
    assert read(context, True).as_boolean() is True
    assert read(context, 0).as_boolean() is False
    assert read(context, 2.5).node.value == 2.5
    assert read(context, "no").as_boolean() is False


# ---------------------------------------------------------------------------
# Logical operators
# ---------------------------------------------------------------------------


def test_read_logical_tree(context):
    e = read(context, load_text(textwrap.dedent("""
        All:
          - Type: Counting
          - Any:
              - false
              - Type: Counting
                Value: false
          - Not:
              Type: Counting
              Value: false
    """)))
    assert isinstance(e.node, All)
    kinds = [each.node for each in e.node.operands]
    assert isinstance(kinds[0], Predicate)
    assert isinstance(kinds[1], Any)
    assert isinstance(kinds[2], Not)
    assert e.evaluate(context).as_boolean() is False


def test_read_empty_operators(context):
    assert read(context, {"All": []}).evaluate(context).as_boolean() is True
    assert read(context, {"Any": []}).evaluate(context).as_boolean() is False


def test_read_accepts_any_sequence_of_tests(context):
    assert read(context, {"All": (True, False)}).evaluate(context).as_boolean() is False
    assert read(context, {"Any": (True, False)}).evaluate(context).as_boolean() is True
    with capture_logs():
        assert read(context, {"Not": (True,)}).evaluate(context).as_boolean() is False


def test_read_not_literal(context):
    assert read(context, {"Not": False}).evaluate(context).as_boolean() is True


@pytest.mark.parametrize("node", [
    {"All": 3},
    {"All": "x"},
    {"Any": None},
    {"Sequential": True},
    {"Not": [True, False]},
    {"Not": []},
    {"Not": None},
    {"All": [], "Any": []},
    {"Speed": 10},
    {},
    [True],
    None,
    "maybe",
])
def test_malformed_nodes(context, node):
    with pytest.raises(ScenarioSyntaxError) as info:
        read(context, node)
    assert info.value.fragment is not None


def test_syntax_error_carries_fragment(context):
    node = {"All": 3}
    with pytest.raises(ScenarioSyntaxError) as info:
        read(context, node)
    assert info.value.fragment is node
    assert "All: 3" in str(info.value)


def test_error_with_unrepresentable_fragment_still_renders(context):
    entity = object()
    with pytest.raises(ConfigurationError) as info:
        read(context, {"Type": "Exploding", "Entity": entity})
    message = str(info.value)
    assert "Threshold must be positive" in message
    assert repr(entity) in message


def test_nested_error_reports_innermost_fragment(context):
    inner = {"Any": "nope"}
    with pytest.raises(ScenarioSyntaxError) as info:
        read(context, {"All": [True, inner]})
    assert info.value.fragment is inner


# ---------------------------------------------------------------------------
# Deprecated shapes
# ---------------------------------------------------------------------------


def test_single_test_instead_of_sequence_is_deprecated(context):
    with capture_logs() as logs:
        e = read(context, {"All": {"Type": "Counting"}})
    assert len(e.node.operands) == 1
    warnings = [each for each in logs if each["event"] == "deprecated_syntax"]
    assert len(warnings) == 1
    assert warnings[0]["log_level"] == "warning"
    assert warnings[0]["keyword"] == "All"


def test_singleton_sequence_under_not_is_deprecated(context):
    with capture_logs() as logs:
        e = read(context, {"Not": [True]})
    assert e.evaluate(context).as_boolean() is False
    assert [each["keyword"] for each in logs if each["event"] == "deprecated_syntax"] == ["Not"]


def test_canonical_shapes_do_not_warn(context):
    with capture_logs() as logs:
        read(context, {"All": [{"Not": True}, {"Any": [{"Type": "Counting"}]}]})
    assert not [each for each in logs if each["event"] == "deprecated_syntax"]


# ---------------------------------------------------------------------------
# Procedure calls
# ---------------------------------------------------------------------------


def test_predicate_is_configured_from_its_node(context):
    e = read(context, {"Type": "Counting", "Value": False})
    assert isinstance(e.node, Predicate)
    assert isinstance(e.node.plugin, CountingCondition)
    assert e.node.plugin.configured is True
    assert e.node.declared_type == "Counting"
    assert e.evaluate(context).as_boolean() is False


def test_procedure_keys_are_opaque(context):
    """Plugin parameters may reuse operator keywords."""
    e = read(context, {"Type": "Counting", "Any": [1, 2], "Not": "x"})
    assert isinstance(e.node, Predicate)


def test_each_predicate_gets_its_own_plugin(context):
    e = read(context, {"All": [{"Type": "Counting"}, {"Type": "Counting"}]})
    first, second = e.node.operands
    assert first.node.plugin is not second.node.plugin


def test_unknown_type_is_a_plugin_load_error(context):
    node = {"Type": "NoSuchCheck"}
    with pytest.raises(PluginLoadError) as info:
        read(context, node)
    assert "NoSuchCheckCondition" in str(info.value)
    assert info.value.fragment is node


@pytest.mark.parametrize("node", [{"Type": 3}, {"Type": ""}])
def test_bad_type_field(context, node):
    with pytest.raises(ScenarioSyntaxError):
        read(context, node)


def test_configure_returning_false(context):
    with pytest.raises(ConfigurationError) as info:
        read(context, {"Type": "Rejecting"})
    assert "Rejecting" in str(info.value)


def test_configure_raising_is_wrapped(context):
    node = {"Type": "Exploding", "Threshold": -1}
    with pytest.raises(ConfigurationError) as info:
        read(context, node)
    assert isinstance(info.value.__cause__, ValueError)
    assert info.value.fragment is node
    assert "Threshold must be positive" in str(info.value)


def test_no_partial_tree_on_failure(context):
    with pytest.raises(PluginLoadError):
        read(context, {"All": [{"Type": "Counting"}, {"Type": "Missing"}]})


def test_read_action(context):
    e = read(context, {"Action": {"Type": "SetColor", "Color": "Red"}})
    assert isinstance(e.node, Action)
    assert e.node.plugin.color == "Red"


@pytest.mark.parametrize("node", [{"Action": "SetColor"}, {"Action": {"Color": "Red"}}])
def test_malformed_action(context, node):
    with pytest.raises(ScenarioSyntaxError):
        read(context, node)


def test_action_namespace_is_separate(context):
    with pytest.raises(PluginLoadError):
        read(context, {"Action": {"Type": "Counting"}})
    with pytest.raises(PluginLoadError):
        read(context, {"Type": "SetColor", "Color": "Red"})


# ---------------------------------------------------------------------------
# Determinism / round trip
# ---------------------------------------------------------------------------

DOCUMENT = """
Any:
  - All:
      - Type: Counting
        Value: true
      - Type: Counting
        Value: false
  - Not:
      Type: Counting
      Value: true
  - 0
"""


def test_read_is_deterministic(context):
    document = load_text(DOCUMENT)
    first, second = read(context, document), read(context, document)
    for _ in range(3):
        assert first.evaluate(context).as_boolean() == second.evaluate(context).as_boolean()
    assert first.report() == second.report()


def test_round_trip_against_hand_built_tree(context):
    def leaf(value):
        plugin = CountingCondition()
        plugin.configure({"Value": value}, None)
        return Expression.make(Predicate, plugin)

    by_hand = Expression.make(Any, [
        Expression.make(All, [leaf(True), leaf(False)]),
        Expression.make(Not, leaf(True)),
        Expression.make(Literal, 0),
    ])
    parsed = read(context, load_text(DOCUMENT))
    assert parsed.evaluate(context).as_boolean() == by_hand.evaluate(context).as_boolean() is False
