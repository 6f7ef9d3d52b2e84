"""
Pipeline engine — ordered named steps executed as one short-circuiting call.

This package resolves each step's operation, normalises map / guard /
try / tee results into Outcomes, stops at the first Failure (tagged with
its origin step) and dispatches the final Outcome to optional handlers.
"""

from opflow.pipeline.engine import Pipeline
from opflow.pipeline.events import StepLogListener, Subscription
from opflow.pipeline.matcher import OutcomeMatcher
from opflow.pipeline.outcome import Failure, Outcome, Success
from opflow.pipeline.resolver import MappingContainer, OperationResolver, Resolvable
from opflow.pipeline.step import StepSpec, guard_step, map_step, tee_step, try_step
from opflow.pipeline.transaction import Transaction, override

__all__ = [
    "Failure",
    "MappingContainer",
    "OperationResolver",
    "Outcome",
    "OutcomeMatcher",
    "Pipeline",
    "Resolvable",
    "StepLogListener",
    "StepSpec",
    "Subscription",
    "Success",
    "Transaction",
    "guard_step",
    "map_step",
    "override",
    "tee_step",
    "try_step",
]
