"""
Outcome — the two-variant result value steps and pipelines return.

A value is exactly one of ``Success`` or ``Failure``.  Payloads are read
only through the variant-correct unwrap; asking a Failure for its success
payload (or the other way round) raises UnwrapError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from opflow.pipeline.errors import UnwrapError

T = TypeVar("T")
E = TypeVar("E")


class Outcome(ABC):
    """Common base of Success and Failure.  Not instantiated directly."""

    __slots__ = ()

    @abstractmethod
    def is_success(self) -> bool: ...

    @abstractmethod
    def is_failure(self) -> bool: ...

    @abstractmethod
    def unwrap(self) -> Any:
        """Return the Success payload."""

    @abstractmethod
    def unwrap_failure(self) -> Any:
        """Return the Failure payload."""


@dataclass(frozen=True, slots=True)
class Success(Outcome, Generic[T]):
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_failure(self) -> Any:
        raise UnwrapError(f"Cannot unwrap a failure payload from {self!r}")


@dataclass(frozen=True, slots=True)
class Failure(Outcome, Generic[E]):
    """
    A failed result.

    ``step`` is the origin tag: the name of the step that produced the
    failure.  It is None only for failures built outside a pipeline.
    """

    error: E
    step: str | None = None

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise UnwrapError(
            f"Cannot unwrap a success payload from {self!r}",
            step_name=self.step,
        )

    def unwrap_failure(self) -> E:
        return self.error

    def with_step(self, step: str) -> Failure[E]:
        """Return a copy of this failure tagged with ``step`` as its origin."""
        return Failure(self.error, step)
