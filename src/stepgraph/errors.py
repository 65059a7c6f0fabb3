# errors.py
from __future__ import annotations

from dataclasses import dataclass, field


class PipelineError(Exception):
    """Base class for everything the runner reports back to its caller."""


@dataclass(eq=False)
class CyclicDependencyError(PipelineError):
    cycle: list[str]

    def __str__(self) -> str:
        return f"dependency cycle: {' -> '.join(self.cycle)}"


@dataclass(eq=False)
class StepExecutionError(PipelineError):
    """
    A step body failed.

    exit_code is set when the failure came from an external process,
    command holds the rendered command line in that case.
    """
    step: str
    message: str
    exit_code: int | None = None
    command: str | None = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"step '{self.step}' failed: {self.message}"]
        if self.exit_code is not None:
            lines.append(f"exit={self.exit_code}")
        if self.command:
            lines.append(f"cmd={self.command}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


@dataclass(eq=False)
class PipelineFileError(PipelineError):
    """The pipeline definition file could not be located."""
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nhint={self.hint}"
        return self.message


@dataclass(eq=False)
class MissingConfigurationError(PipelineError):
    key: str
    step: str | None = None

    def __str__(self) -> str:
        if self.step:
            return f"[{self.step}] missing required configuration value: {self.key}"
        return f"missing required configuration value: {self.key}"
