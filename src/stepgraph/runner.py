# runner.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Set, Tuple

from .devtools import debug_display
from .errors import CyclicDependencyError, MissingConfigurationError, PipelineError, StepExecutionError
from .model import ExecutionContext, Step, StepScope
from .registry import StepRegistry
from .ui.console import Console, get_console


@dataclass
class RunResult:
    target: str
    order: List[str] = field(default_factory=list)     # every step visited, in run order
    skipped: List[str] = field(default_factory=list)   # steps without a body


# ----------------------------------------------------------------------
# Resolution
# ----------------------------------------------------------------------

def resolve_order(registry: StepRegistry, target: str) -> List[str]:
    """
    Depth-first resolution from `target`.

    Dependencies come first, in the order they were declared; every step
    appears once no matter how many dependents reach it. Names nobody
    declared resolve to empty steps.
    """
    order: List[str] = []
    done: Set[str] = set()
    path: List[str] = []        # active DFS path, for cycle reporting
    on_path: Set[str] = set()
    frames: List[Tuple[str, Iterator[str]]] = []

    def enter(name: str) -> None:
        path.append(name)
        on_path.add(name)
        deps = list(registry.get_or_create(name).dependencies)
        frames.append((name, iter(deps)))

    enter(target)
    while frames:
        name, deps = frames[-1]
        dep = next(deps, None)
        if dep is None:
            frames.pop()
            path.pop()
            on_path.discard(name)
            done.add(name)
            order.append(name)
            continue

        if dep in done:
            continue
        if dep in on_path:
            start = path.index(dep)
            raise CyclicDependencyError(cycle=path[start:] + [dep])
        enter(dep)

    return order


# ----------------------------------------------------------------------
# Execution
# ----------------------------------------------------------------------

def _run_step(step: Step, context: ExecutionContext) -> None:
    try:
        step.body(StepScope(step, context))
    except MissingConfigurationError as e:
        e.step = e.step or step.name
        raise
    except PipelineError:
        raise
    except Exception as e:
        raise StepExecutionError(
            step=step.name,
            message=str(e) or type(e).__name__,
            details={"error": type(e).__name__},
        ) from e


class PipelineRunner:
    """Runs a target step after everything it transitively depends on."""

    def __init__(
        self,
        registry: StepRegistry,
        context: ExecutionContext,
        console: Console | None = None,
    ):
        self.registry = registry
        self.context = context
        self.console = console or get_console()

    def plan(self, target: str) -> List[str]:
        return resolve_order(self.registry, target)

    def run(self, target: str) -> RunResult:
        """
        Execute `target` and its prerequisites one at a time.

        The whole order is resolved before anything runs, so a cycle fails
        the run without side effects. The first failing step stops the run;
        steps that already finished are left as they are.
        """
        order = self.plan(target)
        self.console.print_debug(f"resolved {target}: {' -> '.join(order)}")

        result = RunResult(target=target)
        for name in order:
            step = self.registry.get_or_create(name)
            if step.body is None:
                self.console.print_step_noop(name)
                result.skipped.append(name)
                result.order.append(name)
                continue

            self.console.print_step(name)
            self.console.print_debug(debug_display(step))
            try:
                _run_step(step, self.context)
            except StepExecutionError as e:
                self.console.print_failure(name, str(e), exit_code=e.exit_code)
                raise
            except PipelineError as e:
                self.console.print_failure(name, str(e))
                raise

            self.console.print_success(name)
            result.order.append(name)

        return result
