"""
intersection_demo.py - Scenario conditions over a toy simulation loop

Demonstrates the expression engine driving a scenario to a verdict:

- Plugin registration: two leaf conditions and one action, declared by name
- Parsing: the Success / Failure document below becomes two expression trees
- Tick loop: both trees are re-evaluated every step without re-parsing
- Reporting: flattened per-condition verdicts, printed as JSON at the end

The "simulator" is a single vehicle approaching a stop line at constant
speed; nothing here talks to a real simulator.
"""

import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from scenario_expression import ActionBase, ConditionBase, Context, ScenarioEvaluator, SimulationStatus
from scenario_expression import actions, conditions
from scenario_expression.document import load_text
from scenario_expression.log import configure_logging
from scenario_expression.report import to_json

# ==========================================
# SCENARIO
# ==========================================
SCENARIO = """
Success:
  All:
    - Action:
        Type: SetTrafficLight
        Id: 34802
        Color: Red
    - Type: ReachPosition
      Entity: ego
      Position: 48.0
      Tolerance: 1.0
    - Not:
        Type: SpeedAbove
        Entity: ego
        Speed: 0.1
Failure:
  Any:
    - Type: SpeedAbove
      Entity: ego
      Speed: 16.0
"""


# ==========================================
# TOY SIMULATOR
# ==========================================
class ToySimulator:
    def __init__(self):
        self.position = 0.0
        self.speed = 12.0
        self.traffic_lights = {}

    def step(self, dt=0.5):
        self.position += self.speed * dt
        if self.position >= 47.5:
            self.position = 48.0
            self.speed = 0.0


# ==========================================
# PLUGINS
# ==========================================
@conditions.register("ReachPositionCondition")
class ReachPositionCondition(ConditionBase):
    def configure(self, node, simulator):
        self.simulator = simulator
        self.target = float(node["Position"])
        self.tolerance = float(node.get("Tolerance", 0.5))
        return simulator is not None

    def update(self, intersections):
        self.observed = self.simulator.position
        self.result = abs(self.observed - self.target) <= self.tolerance
        return self.result

    def property(self):
        entry = super().property()
        entry["Observed"] = getattr(self, "observed", None)
        return entry


@conditions.register("SpeedAboveCondition")
class SpeedAboveCondition(ConditionBase):
    def configure(self, node, simulator):
        self.simulator = simulator
        self.threshold = float(node["Speed"])
        return simulator is not None

    def update(self, intersections):
        self.result = self.simulator.speed > self.threshold
        return self.result


@actions.register("SetTrafficLightAction")
class SetTrafficLightAction(ActionBase):
    def configure(self, node, simulator):
        self.id = int(node["Id"])
        self.color = node["Color"]
        return True

    def update(self, simulator, intersections):
        simulator.traffic_lights[self.id] = self.color
        self.result = True
        return True


def main():
    configure_logging()

    simulator = ToySimulator()
    context = Context(simulator=simulator)
    evaluator = ScenarioEvaluator(context, load_text(SCENARIO))

    for _ in range(20):
        simulator.step()
        result = evaluator.update()
        print(f"tick {result.tick:2d}  position {simulator.position:5.1f}  {result.status.value}")
        if result.status is not SimulationStatus.ONGOING:
            break

    print(to_json(evaluator.report()))


if __name__ == "__main__":
    main()
