"""
Step events — observe a pipeline run without touching its steps.

A listener is any object with some of these methods::

    on_step_started(step_name, value)
    on_step_succeeded(step_name, value, output)
    on_step_failed(step_name, value, error)

Missing methods are skipped.  Exceptions raised by a listener
propagate out of the call like any other unexpected error.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from opflow.core.constants import StepEvent
from opflow.core.logging import get_logger

_HANDLER_NAMES = {
    StepEvent.STARTED: "on_step_started",
    StepEvent.SUCCEEDED: "on_step_succeeded",
    StepEvent.FAILED: "on_step_failed",
}


@dataclass(frozen=True)
class Subscription:
    """A listener, optionally limited to a single step name."""

    listener: Any
    step: str | None = None

    def wants(self, step_name: str) -> bool:
        return self.step is None or self.step == step_name


def as_subscription(item: Subscription | Any) -> Subscription:
    if isinstance(item, Subscription):
        return item
    return Subscription(item)


def publish(
    subscriptions: Iterable[Subscription],
    event: StepEvent,
    step_name: str,
    *payload: Any,
) -> None:
    """Deliver ``event`` for ``step_name`` to every interested listener."""
    method_name = _HANDLER_NAMES[event]
    for subscription in subscriptions:
        if not subscription.wants(step_name):
            continue
        handler = getattr(subscription.listener, method_name, None)
        if handler is not None:
            handler(step_name, *payload)


class StepLogListener:
    """Listener that writes step events to the structured log."""

    def __init__(self, logger_name: str = "opflow.steps") -> None:
        self.logger = get_logger(logger_name)

    def on_step_started(self, step_name: str, value: Any) -> None:
        self.logger.debug("Step started", step_name=step_name)

    def on_step_succeeded(self, step_name: str, value: Any, output: Any) -> None:
        self.logger.info("Step succeeded", step_name=step_name)

    def on_step_failed(self, step_name: str, value: Any, error: Any) -> None:
        self.logger.warning("Step failed", step_name=step_name, error=str(error))
