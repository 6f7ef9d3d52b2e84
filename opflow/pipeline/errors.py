"""
Exception hierarchy for the pipeline engine.

All engine exceptions inherit from PipelineError so callers can catch
broadly or narrowly as needed.  Each exception carries structured
context (step name, operation key, etc.) for logging/debugging.

None of these are business failures: an expected failure is returned
as a Failure outcome, never raised.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        step_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class MissingOperationError(PipelineError):
    """No dependency, local override or container entry exists for a step."""

    def __init__(self, message: str, *, operation_key: str | None = None, **kwargs) -> None:
        self.operation_key = operation_key
        super().__init__(message, **kwargs)


class InvalidStepResultError(PipelineError, TypeError):
    """A guard step's operation returned something that is not an Outcome."""

    def __init__(self, message: str, *, result: Any = None, **kwargs) -> None:
        self.result = result
        super().__init__(message, **kwargs)


class UnwrapError(PipelineError):
    """The payload of the other variant was requested from an Outcome."""


class StepDeclarationError(PipelineError):
    """A step was declared with an invalid combination of options."""


class StepArgumentError(PipelineError):
    """Per-call step arguments were given for a step that does not exist."""


class MatcherConfigurationError(PipelineError):
    """A matcher handler slot was registered more than once."""
