# src/stepgraph/registry.py
from __future__ import annotations

from typing import Dict, Iterator, List, Union

from .model import Step, StepBody


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

class StepRegistry:
    """
    Owns every step of one configuration pass.

    Looking up a name that was never declared creates an empty step
    instead of failing, so configuration code can reference steps
    before (or without) defining them.
    """

    def __init__(self):
        self._steps: Dict[str, Step] = {}

    def get_or_create(self, name: str) -> Step:
        step = self._steps.get(name)
        if step is None:
            step = Step(name=name)
            self._steps[name] = step
        return step

    def depends_on(self, name: str, *other_names: str) -> Step:
        step = self.get_or_create(name)
        step.dependencies.extend(other_names)
        return step

    def override(self, name: str, new_body: StepBody) -> Step:
        step = self.get_or_create(name)
        step.body = new_body
        step.replaced = True
        return step

    def define(self, name: str, body: StepBody, description: str | None = None) -> Step:
        step = self.get_or_create(name)
        if step.body is not None:
            raise ValueError(f"Step '{name}' already has a body; use override() to replace it")
        step.body = body
        if description is not None:
            step.description = description
        return step

    # ---- lookup ----

    def __getitem__(self, name: str) -> "StepHandle":
        self.get_or_create(name)
        return StepHandle(self, name)

    def __contains__(self, name: object) -> bool:
        return name in self._steps

    def __iter__(self) -> Iterator[Step]:
        return iter(list(self._steps.values()))

    def __len__(self) -> int:
        return len(self._steps)

    def names(self) -> List[str]:
        return list(self._steps)

    def steps(self) -> List[Step]:
        return list(self._steps.values())

    def to_debug_display(self) -> str:
        inner = ", ".join(s.to_debug_display() for s in self._steps.values())
        return f"StepRegistry([{inner}])"


# ---------------------------------------------------------------------
# Fluent handle
# ---------------------------------------------------------------------

StepRef = Union[str, "StepHandle"]


class StepHandle:
    """
    Chained configuration for a single step:

        steps["publish"].override(push).depends_on("pack")
    """

    def __init__(self, registry: StepRegistry, name: str):
        self._registry = registry
        self.name = name

    @property
    def step(self) -> Step:
        return self._registry.get_or_create(self.name)

    def depends_on(self, *others: StepRef):
        names = [o.name if isinstance(o, StepHandle) else o for o in others]
        self._registry.depends_on(self.name, *names)
        return self

    def override(self, body: StepBody):
        self._registry.override(self.name, body)
        return self

    def define(self, body: StepBody, description: str | None = None):
        self._registry.define(self.name, body, description)
        return self

    def __repr__(self) -> str:
        return f"StepHandle({self.name!r})"
