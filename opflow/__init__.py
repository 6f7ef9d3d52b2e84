"""opflow — business operations as ordered, short-circuiting pipelines of steps."""

from opflow.core.constants import AdapterKind
from opflow.pipeline import (
    Failure,
    MappingContainer,
    OperationResolver,
    Outcome,
    OutcomeMatcher,
    Pipeline,
    Resolvable,
    StepLogListener,
    StepSpec,
    Subscription,
    Success,
    Transaction,
    guard_step,
    map_step,
    override,
    tee_step,
    try_step,
)
from opflow.pipeline.errors import (
    InvalidStepResultError,
    MatcherConfigurationError,
    MissingOperationError,
    PipelineError,
    StepArgumentError,
    StepDeclarationError,
    UnwrapError,
)

__version__ = "0.1.0"

__all__ = [
    "AdapterKind",
    "Failure",
    "InvalidStepResultError",
    "MappingContainer",
    "MatcherConfigurationError",
    "MissingOperationError",
    "OperationResolver",
    "Outcome",
    "OutcomeMatcher",
    "Pipeline",
    "PipelineError",
    "Resolvable",
    "StepArgumentError",
    "StepDeclarationError",
    "StepLogListener",
    "StepSpec",
    "Subscription",
    "Success",
    "Transaction",
    "UnwrapError",
    "guard_step",
    "map_step",
    "override",
    "tee_step",
    "try_step",
]
