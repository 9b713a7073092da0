"""
Stub plugins shared by the test suite.

    CountingCondition  : returns node["Value"] (default true), counts update() calls
    ScriptedCondition  : returns node["Script"][i] on the i-th call, repeating the last
    RejectingCondition : configure() returns False
    ExplodingCondition : configure() raises ValueError
    SetColorAction     : records node["Color"] on the bound simulator
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from scenario_expression.context import Context
from scenario_expression.plugins import actions, conditions
from scenario_expression.procedure import ActionBase, ConditionBase


class CountingCondition(ConditionBase):
    def configure(self, node, simulator):
        self.value = node.get("Value", True)
        self.calls = 0
        return True

    def update(self, intersections):
        self.calls += 1
        self.result = bool(self.value)
        return self.result


class ScriptedCondition(ConditionBase):
    def configure(self, node, simulator):
        self.script = list(node.get("Script", [False]))
        self.calls = 0
        return bool(self.script)

    def update(self, intersections):
        index = min(self.calls, len(self.script) - 1)
        self.calls += 1
        self.result = bool(self.script[index])
        return self.result

    def property(self):
        entry = super().property()
        entry["Calls"] = self.calls
        return entry


class RejectingCondition(ConditionBase):
    def configure(self, node, simulator):
        return False

    def update(self, intersections):
        return False


class ExplodingCondition(ConditionBase):
    def configure(self, node, simulator):
        raise ValueError("Threshold must be positive")

    def update(self, intersections):
        return False


class SetColorAction(ActionBase):
    def configure(self, node, simulator):
        self.color = node["Color"]
        return True

    def update(self, simulator, intersections):
        simulator.colors.append(self.color)
        self.result = True
        return True


class FakeSimulator:
    def __init__(self):
        self.colors = []


STUB_CONDITIONS = {
    "CountingCondition": CountingCondition,
    "ScriptedCondition": ScriptedCondition,
    "RejectingCondition": RejectingCondition,
    "ExplodingCondition": ExplodingCondition,
}

STUB_ACTIONS = {
    "SetColorAction": SetColorAction,
}


@pytest.fixture(autouse=True)
def stub_plugins():
    for name, cls in STUB_CONDITIONS.items():
        conditions.register(name, cls)
    for name, cls in STUB_ACTIONS.items():
        actions.register(name, cls)
    yield
    for name in STUB_CONDITIONS:
        conditions.unregister(name)
    for name in STUB_ACTIONS:
        actions.unregister(name)


@pytest.fixture
def context():
    return Context()


@pytest.fixture
def simulator():
    return FakeSimulator()
