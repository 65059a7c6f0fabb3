# model.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from .errors import MissingConfigurationError, StepExecutionError
from .process import Executor, format_command, run_process


StepBody = Callable[["StepScope"], None]


@dataclass
class Step:
    """
    A named unit of build work.

    Dependencies are kept by name only and resolved when the runner
    plans a target, so a step may depend on one declared later.
    """
    name: str
    dependencies: list[str] = field(default_factory=list)
    body: Optional[StepBody] = None     # None runs as a no-op
    replaced: bool = False              # set once override() was called
    description: str | None = None

    @property
    def is_noop(self) -> bool:
        return self.body is None

    def to_debug_display(self) -> str:
        deps = ", ".join(self.dependencies) or "-"
        if self.body is None:
            body = "noop"
        else:
            body = getattr(self.body, "__qualname__", type(self.body).__name__)
        flags = " replaced" if self.replaced else ""
        return f"Step({self.name!r} deps=[{deps}] body={body}{flags})"


@dataclass(frozen=True)
class ArtifactVersion:
    """Identifies the package a pipeline produces."""
    artifact: str
    version: str

    def package_file_name(self, extension: str) -> str:
        return f"{self.artifact}.{self.version}.{extension}"


@dataclass(frozen=True)
class ExecutionContext:
    """
    Process-wide values a run reads from. Built once before any step
    executes and never mutated afterwards.
    """
    project_dir: Path
    version: ArtifactVersion | None = None
    env: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    executor: Executor = run_process

    def require_env(self, name: str, *, step: str | None = None) -> str:
        value = self.env.get(name)
        if not value:
            raise MissingConfigurationError(key=name, step=step)
        return value

    def require_version(self, *, step: str | None = None) -> ArtifactVersion:
        if self.version is None:
            raise MissingConfigurationError(key="version", step=step)
        return self.version


class StepScope:
    """What a step body gets to work with while it runs."""

    def __init__(self, step: Step, context: ExecutionContext):
        self.step = step
        self.context = context

    @property
    def name(self) -> str:
        return self.step.name

    def env(self, name: str) -> str:
        return self.context.require_env(name, step=self.name)

    def version(self) -> ArtifactVersion:
        return self.context.require_version(step=self.name)

    def exec(
        self,
        program: str,
        args: Sequence[str] = (),
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Run a command; a non-zero exit fails the step."""
        workdir = Path(cwd) if cwd is not None else self.context.project_dir
        if not workdir.is_absolute():
            workdir = self.context.project_dir / workdir

        status = self.context.executor(program, list(args), workdir, env)
        if status != 0:
            raise StepExecutionError(
                step=self.name,
                message=f"{program} exited with status {status}",
                exit_code=status,
                command=format_command(program, args),
            )
