"""
Step adapters — normalise an operation's raw return value into an Outcome.

One function per AdapterKind:

    map    value            -> Success(value)
    guard  Outcome          -> unchanged (Failures re-tagged)
    try    value | raise    -> Success(value) | Failure(caught exception)
    tee    anything         -> Success(input)

Every Failure leaving an adapter is tagged with the step name.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from opflow.core.constants import AdapterKind
from opflow.pipeline.errors import InvalidStepResultError
from opflow.pipeline.outcome import Failure, Outcome, Success
from opflow.pipeline.resolver import Operation
from opflow.pipeline.step import StepSpec

Adapter = Callable[[StepSpec, Operation, Any, Sequence[Any]], Outcome]


def _map(spec: StepSpec, operation: Operation, value: Any, args: Sequence[Any]) -> Outcome:
    return Success(operation(value, *args))


def _guard(spec: StepSpec, operation: Operation, value: Any, args: Sequence[Any]) -> Outcome:
    result = operation(value, *args)
    if not isinstance(result, Outcome):
        raise InvalidStepResultError(
            f"Step '{spec.name}' must return a Success or Failure, "
            f"got {type(result).__name__}: {result!r}",
            step_name=spec.name,
            result=result,
        )
    if isinstance(result, Failure):
        return result.with_step(spec.name)
    return result


def _try(spec: StepSpec, operation: Operation, value: Any, args: Sequence[Any]) -> Outcome:
    try:
        return Success(operation(value, *args))
    except spec.catch as exc:
        return Failure(exc, spec.name)


def _tee(spec: StepSpec, operation: Operation, value: Any, args: Sequence[Any]) -> Outcome:
    operation(value, *args)
    return Success(value)


ADAPTERS: dict[AdapterKind, Adapter] = {
    AdapterKind.MAP: _map,
    AdapterKind.GUARD: _guard,
    AdapterKind.TRY: _try,
    AdapterKind.TEE: _tee,
}


def apply_step(
    spec: StepSpec,
    operation: Operation,
    value: Any,
    args: Sequence[Any] = (),
) -> Outcome:
    """Invoke ``operation`` for ``spec`` and normalise its result."""
    return ADAPTERS[spec.kind](spec, operation, value, args)
