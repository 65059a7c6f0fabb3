# cli.py
from __future__ import annotations

import sys

import click

from stepgraph.devtools import debug_display
from stepgraph.errors import (
    CyclicDependencyError,
    MissingConfigurationError,
    PipelineFileError,
    StepExecutionError,
)
from stepgraph.loader import (
    DEFAULT_PIPELINE_FILE,
    build_context,
    configure_registry,
    load_pipeline,
    locate_pipeline,
)
from stepgraph.process import run_process
from stepgraph.runner import PipelineRunner
from stepgraph.ui.console import Console, set_console, get_console


def exit_status(code: int | None) -> int:
    """Shell exit code for a failed process status: signal N maps to 128+N, unusable values to 1."""
    if code is None:
        return 1
    if code < 0:
        code = 128 + abs(code)
    if not 1 <= code <= 255:
        return 1
    return code


def _prepare(ctx, pipeline, project_dir, artifact, version):
    try:
        pipeline_path = locate_pipeline(pipeline)
    except PipelineFileError as e:
        get_console().print_error("Pipeline file", e.message, suggestion=e.hint)
        sys.exit(1)
    loaded = load_pipeline(pipeline_path)
    context = build_context(
        loaded,
        project_dir=project_dir,
        artifact=artifact,
        version=version,
        executor=ctx.obj.get("executor", run_process),
    )
    registry = configure_registry(loaded, context)
    return loaded, context, registry


def _fail(exc: BaseException, code: int = 1):
    get_console().print_exception(exc)
    sys.exit(code)


def pipeline_options(fn):
    fn = click.option("--version", "version", default=None, help="Artifact version (overrides PROJECT)")(fn)
    fn = click.option("--artifact", default=None, help="Artifact name (overrides PROJECT)")(fn)
    fn = click.option("--project-dir", default=None, help="Project directory (defaults to the pipeline file's directory)")(fn)
    fn = click.option(
        "--pipeline",
        default=None,
        help=f"Pipeline file path (defaults to {DEFAULT_PIPELINE_FILE} if present)",
    )(fn)
    return fn


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """stepgraph: run build steps in dependency order."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("target")
@pipeline_options
@click.pass_context
def run(ctx, target, pipeline, project_dir, artifact, version):
    """Run TARGET after every step it depends on."""
    console = get_console()

    try:
        loaded, context, registry = _prepare(ctx, pipeline, project_dir, artifact, version)

        console.print_run_started(
            project=context.project_dir.name,
            target=target,
            step_count=len(registry),
        )

        runner = PipelineRunner(registry, context, console=console)
        result = runner.run(target)
        console.print_results(target, result.order)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except (StepExecutionError, MissingConfigurationError) as e:
        # the runner already reported the failing step
        if console.debug:
            console.print_exception(e)
        sys.exit(exit_status(getattr(e, "exit_code", None)))
    except CyclicDependencyError as e:
        console.print_error("Dependency cycle", str(e))
        sys.exit(1)
    except Exception as e:
        _fail(e)


@cli.command()
@click.argument("target")
@pipeline_options
@click.pass_context
def plan(ctx, target, pipeline, project_dir, artifact, version):
    """Show the order TARGET would run in, without running anything."""
    console = get_console()

    try:
        loaded, context, registry = _prepare(ctx, pipeline, project_dir, artifact, version)
        order = PipelineRunner(registry, context, console=console).plan(target)
        console.print_plan(target, order)
    except CyclicDependencyError as e:
        console.print_error("Dependency cycle", str(e))
        sys.exit(1)
    except Exception as e:
        _fail(e)


@cli.command(name="list")
@pipeline_options
@click.pass_context
def list_steps(ctx, pipeline, project_dir, artifact, version):
    """List the steps the pipeline declares."""
    console = get_console()

    try:
        loaded, context, registry = _prepare(ctx, pipeline, project_dir, artifact, version)
    except Exception as e:
        _fail(e)

    console.print_header(f"STEPS ({loaded.path.name})")
    for step in registry.steps():
        deps = ", ".join(step.dependencies) or "-"
        suffix = f"  {step.description}" if step.description else ""
        console.print_info(f"  {step.name} <- {deps}{suffix}")
        console.print_debug(debug_display(step))


if __name__ == "__main__":
    cli()
