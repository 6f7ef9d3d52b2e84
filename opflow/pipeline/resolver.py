"""
OperationResolver — maps a declared step to the callable that performs it.

Lookup order:
    1. Injected dependencies (by step name, then by operation key)
    2. Local overrides (by step name, then by operation key).  The
       override is called with a ``parent`` keyword: a callable that runs
       whatever rule 3 resolves to, so an override can decorate the
       container operation instead of replacing it.
    3. The operation container, by operation key

Nothing found is a MissingOperationError, raised when the step is
reached during a call rather than at declaration time.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from opflow.pipeline.errors import MissingOperationError
from opflow.pipeline.step import StepSpec

Operation = Callable[..., Any]


@runtime_checkable
class Resolvable(Protocol):
    """Anything that can look up an operation by key."""

    def lookup(self, key: str) -> Operation | None: ...


class MappingContainer:
    """Read-only operation container backed by a plain mapping."""

    def __init__(self, operations: Mapping[str, Operation] | None = None) -> None:
        self._operations: Mapping[str, Operation] = MappingProxyType(dict(operations or {}))

    def lookup(self, key: str) -> Operation | None:
        return self._operations.get(key)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._operations)

    def __contains__(self, key: object) -> bool:
        return key in self._operations

    def __repr__(self) -> str:
        return f"MappingContainer({list(self._operations)!r})"


class _EmptyContainer:
    def lookup(self, key: str) -> Operation | None:
        return None


EMPTY_CONTAINER: Resolvable = _EmptyContainer()


class _MappingView:
    """Live, read-only view over a caller-owned mapping."""

    def __init__(self, operations: Mapping[str, Operation]) -> None:
        self._operations = operations

    def lookup(self, key: str) -> Operation | None:
        return self._operations.get(key)


def as_container(source: Resolvable | Mapping[str, Operation] | None) -> Resolvable:
    """
    Normalise a container argument.

    Accepts an object exposing ``lookup(key)``, a mapping of key to
    callable, or None (no container).

    A mapping is read through, not copied, so entries registered on it
    after declaration are visible to later calls.
    """
    if source is None:
        return EMPTY_CONTAINER
    if isinstance(source, Resolvable):
        return source
    if isinstance(source, Mapping):
        return _MappingView(source)
    raise TypeError(
        f"Operation container must be a mapping or expose lookup(key), got {type(source).__name__}"
    )


class OperationResolver:
    """
    Resolves StepSpecs to callables for one transaction instance.

    Args:
        container: Operation container (shared by every instance of the
            declaring class).
        overrides: Local overrides keyed by step name or operation key.
            Each is called as ``override(value, *args, parent=parent)``.
        dependencies: Per-instance injected operations.

    Dependencies and overrides are looked up by step name first, then by
    operation key.  An entry keyed by an operation key therefore serves
    every step aliased to that key (``using="save"``) unless the step's
    own name has an entry.  To replace a single aliased step, key the
    entry by that step's name.
    """

    def __init__(
        self,
        container: Resolvable | Mapping[str, Operation] | None = None,
        overrides: Mapping[str, Operation] | None = None,
        dependencies: Mapping[str, Operation] | None = None,
    ) -> None:
        self.container = as_container(container)
        self.overrides: Mapping[str, Operation] = MappingProxyType(dict(overrides or {}))
        self.dependencies: Mapping[str, Operation] = MappingProxyType(dict(dependencies or {}))

        for key, operation in self.dependencies.items():
            if not callable(operation):
                raise TypeError(f"Dependency for '{key}' must be callable.")

    def resolve(self, spec: StepSpec) -> Operation:
        """
        Return the callable for ``spec``.

        Raises:
            MissingOperationError: No source provides an operation.
        """
        injected = self._find(self.dependencies, spec)
        if injected is not None:
            return injected

        override = self._find(self.overrides, spec)
        if override is not None:
            return functools.partial(override, parent=self._parent_for(spec))

        operation = self.container.lookup(spec.operation_key)
        if operation is not None:
            return operation

        raise MissingOperationError(
            f"No operation found for step '{spec.name}' (key '{spec.operation_key}')",
            step_name=spec.name,
            operation_key=spec.operation_key,
        )

    @staticmethod
    def _find(source: Mapping[str, Operation], spec: StepSpec) -> Operation | None:
        if spec.name in source:
            return source[spec.name]
        return source.get(spec.operation_key)

    def _parent_for(self, spec: StepSpec) -> Operation:
        operation = self.container.lookup(spec.operation_key)
        if operation is not None:
            return operation

        def missing(*args: Any, **kwargs: Any) -> Any:
            raise MissingOperationError(
                f"Override for step '{spec.name}' called parent, but no container "
                f"operation is registered under '{spec.operation_key}'",
                step_name=spec.name,
                operation_key=spec.operation_key,
            )

        return missing
