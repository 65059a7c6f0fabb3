# stepgraph_pipeline.py
# Pipeline for packaging a .NET library: pack, then publish to a local or public feed.
from __future__ import annotations

from stepgraph.step_workflows.nuget import configure_nuget

PROJECT = {
    "artifact": "StarCruiseStudios.Phx.Lib",
    "version": "0.1.0",
}


def configure(steps, context):
    configure_nuget(steps)

    # Umbrella step: nothing of its own, only pulls in pack.
    steps["build"].depends_on("pack")
