from __future__ import annotations

from pathlib import Path

import pytest

from stepgraph.model import ArtifactVersion, ExecutionContext
from stepgraph.registry import StepRegistry
from stepgraph.ui.console import Console


class RecordingExecutor:
    """Stands in for run_process: records every command, returns canned statuses."""

    def __init__(self, statuses: dict[str, int] | None = None):
        self.calls: list[tuple[str, list[str], Path]] = []
        self.statuses = statuses or {}

    def __call__(self, program, args, cwd, env=None) -> int:
        self.calls.append((program, list(args), Path(cwd)))
        key = " ".join([program, *args[:1]])
        return self.statuses.get(key, 0)

    @property
    def commands(self) -> list[str]:
        return [" ".join([p, *a]) for p, a, _ in self.calls]


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def context(tmp_path: Path, executor: RecordingExecutor) -> ExecutionContext:
    return ExecutionContext(
        project_dir=tmp_path,
        version=ArtifactVersion(artifact="Acme.Lib", version="1.2.3"),
        env={"NUGET_LOCAL_REPO": "/feeds/local"},
        executor=executor,
    )


@pytest.fixture
def registry() -> StepRegistry:
    return StepRegistry()


@pytest.fixture
def console() -> Console:
    return Console(debug=False)
