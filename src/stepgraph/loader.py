# loader.py
from __future__ import annotations

import os
import runpy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict

from .errors import PipelineFileError
from .model import ArtifactVersion, ExecutionContext
from .process import Executor, run_process
from .registry import StepRegistry


DEFAULT_PIPELINE_FILE = "stepgraph_pipeline.py"

ConfigureFn = Callable[[StepRegistry, ExecutionContext], Any]


@dataclass
class PipelineFile:
    path: Path
    configure: ConfigureFn
    project: Dict[str, str]


# ----------------------------------------------------------------------
# Loading
# ----------------------------------------------------------------------

def load_pipeline(path: str | Path) -> PipelineFile:
    """
    Load a pipeline definition from a python file path.

    The file must define either:
      - configure(registry, context)
      - pipeline(registry, context)

    and may define PROJECT = {"artifact": ..., "version": ...}.
    """
    pl_path = Path(path).expanduser().resolve()
    if not pl_path.exists():
        raise FileNotFoundError(f"Pipeline file not found: {pl_path}")
    if pl_path.suffix != ".py":
        raise ValueError(f"Pipeline must be a .py file, got: {pl_path.name}")

    module_name = f"stepgraph_pipeline_{pl_path.stem}"
    globals_dict = runpy.run_path(str(pl_path), run_name=module_name)

    configure = globals_dict.get("configure") or globals_dict.get("pipeline")
    if not callable(configure):
        raise TypeError(
            "Pipeline file must define configure(registry, context) "
            "or pipeline(registry, context)."
        )

    project = globals_dict.get("PROJECT") or {}
    if not isinstance(project, dict):
        raise TypeError("PROJECT must be a dict like {'artifact': ..., 'version': ...}")

    return PipelineFile(path=pl_path, configure=configure, project=project)


def locate_pipeline(explicit: str | None = None, directory: str | Path = ".") -> Path:
    """
    Pick the pipeline file to load.

    An explicit path may omit the .py suffix. Without one, `directory` must
    hold exactly one *_pipeline.py (stepgraph_pipeline.py matches too).
    """
    base = Path(directory)

    if explicit:
        for candidate in (Path(explicit), Path(f"{explicit}.py")):
            path = candidate if candidate.is_absolute() else base / candidate
            if path.is_file():
                return path
        raise PipelineFileError(f"Pipeline file not found: {explicit}")

    found = sorted(base.glob("*_pipeline.py"))
    if not found:
        raise PipelineFileError(
            f"No pipeline file found in {base.resolve()}",
            hint=f"create {DEFAULT_PIPELINE_FILE} or pass --pipeline",
        )
    if len(found) > 1:
        raise PipelineFileError(
            "Multiple pipeline files found: " + ", ".join(p.name for p in found),
            hint="choose one with --pipeline",
        )
    return found[0]


# ----------------------------------------------------------------------
# Configuration pass
# ----------------------------------------------------------------------

def build_context(
    pipeline: PipelineFile,
    *,
    project_dir: str | Path | None = None,
    artifact: str | None = None,
    version: str | None = None,
    executor: Executor = run_process,
) -> ExecutionContext:
    """Command-line values win over PROJECT from the pipeline file."""
    project_dir_p = Path(project_dir).resolve() if project_dir else pipeline.path.parent

    artifact = artifact or pipeline.project.get("artifact")
    version = version or pipeline.project.get("version")
    if bool(artifact) != bool(version):
        raise ValueError("artifact and version must be given together")
    av = ArtifactVersion(artifact=str(artifact), version=str(version)) if artifact else None

    return ExecutionContext(
        project_dir=project_dir_p,
        version=av,
        env=dict(os.environ),
        executor=executor,
    )


def configure_registry(pipeline: PipelineFile, context: ExecutionContext) -> StepRegistry:
    registry = StepRegistry()
    pipeline.configure(registry, context)
    return registry
