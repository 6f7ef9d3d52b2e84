"""Shared constants and enums used across the library."""

from enum import StrEnum


class AdapterKind(StrEnum):
    """How a step's raw operation result is normalised into an Outcome."""

    MAP = "map"
    GUARD = "guard"
    TRY = "try"
    TEE = "tee"


class StepEvent(StrEnum):
    """Events published to step listeners while a pipeline runs."""

    STARTED = "step_started"
    SUCCEEDED = "step_succeeded"
    FAILED = "step_failed"
