from .registry import StepRegistry, StepHandle
from .runner import PipelineRunner, RunResult, resolve_order
from .model import ArtifactVersion, ExecutionContext, Step, StepScope
from .errors import CyclicDependencyError, MissingConfigurationError, PipelineError, StepExecutionError

__all__ = [
    "StepRegistry",
    "StepHandle",
    "PipelineRunner",
    "RunResult",
    "resolve_order",
    "ArtifactVersion",
    "ExecutionContext",
    "Step",
    "StepScope",
    "CyclicDependencyError",
    "MissingConfigurationError",
    "PipelineError",
    "StepExecutionError",
]
