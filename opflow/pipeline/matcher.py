"""
OutcomeMatcher — run one handler for a finished call's Outcome.

Handlers are registered into a small table, then ``dispatch`` picks at
most one:

    Success                       -> success handler
    Failure tagged with a step    -> that step's failure handler
    any other Failure             -> catch-all failure handler

Registration methods double as decorators::

    def handlers(m):
        m.success(lambda user: print("created", user["email"]))

        @m.failure("validate")
        def invalid(error):
            print("invalid:", error)

        m.failure(lambda error: print("failed:", error))

    transaction.call(payload, handlers)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from opflow.pipeline.errors import MatcherConfigurationError
from opflow.pipeline.outcome import Failure, Outcome

Handler = Callable[[Any], Any]


class OutcomeMatcher:
    """Registration table for success, per-step failure and catch-all handlers."""

    def __init__(self) -> None:
        self._success: Handler | None = None
        self._catch_all: Handler | None = None
        self._by_step: dict[str, Handler] = {}

    def success(self, handler: Handler) -> Handler:
        """Register the handler for a Success payload."""
        if self._success is not None:
            raise MatcherConfigurationError("A success handler is already registered")
        self._success = handler
        return handler

    def failure(
        self,
        step: str | Handler | None = None,
        handler: Handler | None = None,
    ) -> Any:
        """
        Register a failure handler.

        ``failure(handler)`` registers the catch-all, ``failure("step",
        handler)`` a handler for failures from that step.  Without a
        handler, returns a decorator.
        """
        if callable(step) and handler is None:
            step, handler = None, step

        if handler is None:
            def decorator(func: Handler) -> Handler:
                self._register_failure(step, func)
                return func

            return decorator

        self._register_failure(step, handler)
        return handler

    def _register_failure(self, step: str | None, handler: Handler) -> None:
        if step is None:
            if self._catch_all is not None:
                raise MatcherConfigurationError("A catch-all failure handler is already registered")
            self._catch_all = handler
            return

        if step in self._by_step:
            raise MatcherConfigurationError(
                f"A failure handler for step '{step}' is already registered",
                step_name=step,
            )
        self._by_step[step] = handler

    def dispatch(self, outcome: Outcome) -> Any:
        """
        Invoke the handler chosen for ``outcome``.

        Returns the handler's return value, or None when no handler matches.
        """
        if outcome.is_success():
            if self._success is not None:
                return self._success(outcome.unwrap())
            return None

        error = outcome.unwrap_failure()
        origin = outcome.step if isinstance(outcome, Failure) else None
        if origin is not None and origin in self._by_step:
            return self._by_step[origin](error)
        if self._catch_all is not None:
            return self._catch_all(error)
        return None


def build_matcher(source: OutcomeMatcher | Callable[[OutcomeMatcher], Any]) -> OutcomeMatcher:
    """Accept a ready matcher or a function that registers handlers on a new one."""
    if isinstance(source, OutcomeMatcher):
        return source
    if not callable(source):
        raise TypeError(f"Matcher must be an OutcomeMatcher or callable, got {type(source).__name__}")
    matcher = OutcomeMatcher()
    source(matcher)
    return matcher
