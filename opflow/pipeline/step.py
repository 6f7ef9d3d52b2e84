"""
StepSpec — the immutable declaration of a single pipeline step.

Steps are declared once, when the owning transaction class is created,
and validated immediately.  The factories below are the declaration
surface::

    steps = [
        map_step("process"),
        guard_step("verify"),
        try_step("validate", catch=NotValidError),
        tee_step("persist", using="persist_record"),
    ]
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from opflow.core.constants import AdapterKind
from opflow.pipeline.errors import StepDeclarationError

CatchSpec = type[BaseException] | tuple[type[BaseException], ...]


class StepSpec(BaseModel):
    """
    Declared step.

    Attributes:
        name: Step identifier, used as the origin tag of failures and as
              the key for failure handlers and per-call step arguments.
        kind: Adapter kind that normalises the operation's return value.
        operation_key: Key used to resolve the operation.  Defaults to
              ``name``.
        catch: Exception class (or tuple of classes) a ``try`` step turns
              into a Failure.  Required for ``try``, rejected otherwise.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1)
    kind: AdapterKind
    operation_key: str = Field(..., min_length=1)
    catch: CatchSpec | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_operation_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("operation_key") is None:
            data = {**data, "operation_key": data.get("name")}
        return data

    @model_validator(mode="after")
    def _check_catch(self) -> StepSpec:
        if self.kind == AdapterKind.TRY and self.catch is None:
            raise ValueError(f"try step '{self.name}' requires a catch exception class")
        if self.kind != AdapterKind.TRY and self.catch is not None:
            raise ValueError(f"catch is only valid on try steps, not on {self.kind} step '{self.name}'")
        return self


def declare_step(
    kind: AdapterKind | str,
    name: str,
    *,
    using: str | None = None,
    catch: CatchSpec | None = None,
) -> StepSpec:
    """
    Build a StepSpec, raising StepDeclarationError when it is invalid.

    Raises:
        StepDeclarationError: Unknown kind, empty name or operation key,
            or a catch option that does not fit the kind.
    """
    try:
        return StepSpec(name=name, kind=kind, operation_key=using, catch=catch)
    except ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        raise StepDeclarationError(
            f"Invalid step declaration '{name}': {messages}",
            step_name=name if isinstance(name, str) else None,
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def map_step(name: str, *, using: str | None = None) -> StepSpec:
    """Step whose operation returns a plain value; it always succeeds."""
    return declare_step(AdapterKind.MAP, name, using=using)


def guard_step(name: str, *, using: str | None = None) -> StepSpec:
    """Step whose operation returns an Outcome itself."""
    return declare_step(AdapterKind.GUARD, name, using=using)


def try_step(name: str, *, catch: CatchSpec, using: str | None = None) -> StepSpec:
    """Step whose operation may raise ``catch``, which becomes a Failure."""
    return declare_step(AdapterKind.TRY, name, using=using, catch=catch)


def tee_step(name: str, *, using: str | None = None) -> StepSpec:
    """Side-effect step; the return value is dropped and the input flows on."""
    return declare_step(AdapterKind.TEE, name, using=using)
