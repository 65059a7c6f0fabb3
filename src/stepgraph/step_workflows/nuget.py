# step_workflows/nuget.py
from __future__ import annotations

from pathlib import Path

from ..model import ExecutionContext, StepScope
from ..registry import StepRegistry


NUGET_PUBLIC_SOURCE = "https://api.nuget.org/v3/index.json"
NUGET_LOCAL_REPO_ENV = "NUGET_LOCAL_REPO"


def nuget_output_dir(context: ExecutionContext) -> Path:
    return context.project_dir / "bin" / "nuget"


def _package_path(step: StepScope) -> Path:
    version = step.version()
    return nuget_output_dir(step.context) / version.package_file_name("nupkg")


# ---------------------------------------------------------------------
# Step bodies
# ---------------------------------------------------------------------

def pack(step: StepScope) -> None:
    """dotnet pack into bin/nuget."""
    step.exec("dotnet", ["pack", "--output", str(nuget_output_dir(step.context))])


def publish_local(step: StepScope) -> None:
    """Push the package to the feed named by $NUGET_LOCAL_REPO."""
    source = step.env(NUGET_LOCAL_REPO_ENV)
    step.exec("dotnet", ["nuget", "push", str(_package_path(step)), "--source", source])


def publish(step: StepScope) -> None:
    step.exec("dotnet", ["nuget", "push", str(_package_path(step)), "--source", NUGET_PUBLIC_SOURCE])


# ---------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------

def configure_nuget(steps: StepRegistry) -> StepRegistry:
    """
    Register the NuGet packaging steps:

        pack
        publish_local  <- pack
        publish        <- pack   (replaces whatever body publish had)
    """
    steps.define("pack", pack, description="Build the .nupkg")
    steps.define("publish_local", publish_local, description="Push to the local feed")
    steps["publish_local"].depends_on("pack")

    steps["publish"].override(publish)
    steps["publish"].depends_on("pack")
    return steps
