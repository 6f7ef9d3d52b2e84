"""
Pipeline — the engine that runs declared steps in order.

Responsibilities:
    - Hold the immutable, ordered step declarations
    - Resolve each step's operation when the step is reached
    - Normalise every result through the step's adapter
    - Stop at the first Failure, which carries its origin step name
    - Publish step events to subscribed listeners

A run keeps all of its state (current value, halted flag) on the stack,
so one Pipeline can be shared across calls and threads.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from opflow.core.constants import StepEvent
from opflow.core.logging import get_logger
from opflow.pipeline.adapters import apply_step
from opflow.pipeline.errors import StepArgumentError
from opflow.pipeline.events import Subscription, as_subscription, publish
from opflow.pipeline.outcome import Outcome, Success
from opflow.pipeline.resolver import OperationResolver
from opflow.pipeline.step import StepSpec

logger = get_logger(__name__)


class Pipeline:
    """
    Ordered, immutable sequence of StepSpecs.

    Usage::

        pipeline = Pipeline([map_step("process"), tee_step("persist")])
        resolver = OperationResolver(container={"process": ..., "persist": ...})
        outcome = pipeline.run({"name": "Jane"}, resolver)
    """

    def __init__(self, steps: Iterable[StepSpec] = (), *, name: str = "pipeline") -> None:
        self._steps: tuple[StepSpec, ...] = tuple(steps)
        self.name = name
        for index, spec in enumerate(self._steps):
            if not isinstance(spec, StepSpec):
                raise TypeError(
                    f"{name}.steps[{index}] must be a StepSpec, got {type(spec).__name__}"
                )

    # ─── Introspection ─────────────────────────────────

    @property
    def steps(self) -> tuple[StepSpec, ...]:
        return self._steps

    @property
    def step_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self._steps)

    def duplicate_step_names(self) -> list[str]:
        """Names declared more than once.  Failure handlers for them are ambiguous."""
        counts = Counter(self.step_names)
        return [step_name for step_name, count in counts.items() if count > 1]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[StepSpec]:
        return iter(self._steps)

    def __repr__(self) -> str:
        return f"Pipeline(name={self.name!r}, steps={list(self.step_names)!r})"

    # ─── Execution ─────────────────────────────────────

    def run(
        self,
        value: Any,
        resolver: OperationResolver,
        *,
        step_args: Mapping[str, Sequence[Any]] | None = None,
        listeners: Iterable[Subscription | Any] = (),
    ) -> Outcome:
        """
        Run every step against ``value``, halting at the first Failure.

        Args:
            value: Input to the first step.
            resolver: Resolves each step's operation.
            step_args: Extra positional arguments per step name, passed
                after the value.
            listeners: Step event listeners or Subscriptions.

        Returns:
            ``Success(final_value)`` or the first step's tagged Failure.

        Raises:
            StepArgumentError: ``step_args`` names an undeclared step.
            MissingOperationError: A reached step has no operation.
            InvalidStepResultError: A guard step returned a non-Outcome.
            Any exception an operation raises that its adapter does not catch.
        """
        step_args = self._check_step_args(step_args or {})
        subscriptions = [as_subscription(item) for item in listeners]

        log = logger.bind(pipeline=self.name, total_steps=len(self._steps))
        log.debug("Pipeline started")

        current = value
        for index, spec in enumerate(self._steps):
            step_log = log.bind(step_name=spec.name, step_index=index + 1, kind=str(spec.kind))

            operation = resolver.resolve(spec)
            publish(subscriptions, StepEvent.STARTED, spec.name, current)

            outcome = apply_step(spec, operation, current, step_args.get(spec.name, ()))

            if outcome.is_failure():
                step_log.debug("Step failed, pipeline halted")
                publish(subscriptions, StepEvent.FAILED, spec.name, current, outcome.unwrap_failure())
                return outcome

            next_value = outcome.unwrap()
            publish(subscriptions, StepEvent.SUCCEEDED, spec.name, current, next_value)
            step_log.debug("Step succeeded")
            current = next_value

        log.debug("Pipeline finished")
        return Success(current)

    def _check_step_args(
        self,
        step_args: Mapping[str, Sequence[Any]],
    ) -> Mapping[str, Sequence[Any]]:
        known = set(self.step_names)
        unknown = sorted(set(step_args) - known)
        if unknown:
            raise StepArgumentError(
                f"Step arguments given for undeclared steps: {', '.join(unknown)}",
                details={"unknown": unknown, "declared": list(self.step_names)},
            )
        checked: dict[str, tuple[Any, ...]] = {}
        for step_name, args in step_args.items():
            if isinstance(args, (str, bytes)) or not isinstance(args, Sequence):
                raise StepArgumentError(
                    f"Step arguments for '{step_name}' must be a list or tuple",
                    step_name=step_name,
                )
            checked[step_name] = tuple(args)
        return checked
