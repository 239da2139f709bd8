"""
Pydantic v2 models for performance budgets and measurement verdicts.

:class:`Budget` is the named performance contract held by
:class:`~perfbudget.catalog.BudgetCatalog`; :class:`MeasurementResult` is the
verdict produced by :func:`~perfbudget.evaluator.measure`.  Both are frozen
so a catalog entry or a verdict can be shared between threads freely.

All models use ``extra="forbid"`` to reject unknown keys at parse time.

Usage::

    from perfbudget.schema import Budget

    budget = Budget(
        name="my_operation",
        max_duration_ns="50ms",
        priority="P1",
        description="Maximum time for my operation",
    )
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from perfbudget.durations import format_duration, to_nanoseconds


class Priority(str, Enum):
    """Well-known budget priorities.

    Priorities are an open set: any string is a valid ``Budget.priority``.
    These members only name the levels the standard catalog uses.
    """
    P0 = "P0"  # critical path, regressions block
    P1 = "P1"
    P2 = "P2"


def duration_validator(v: Any) -> Any:
    """Accept duration strings and timedeltas wherever nanoseconds are expected."""
    if isinstance(v, (str, timedelta)):
        return to_nanoseconds(v)
    return v


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------


class Budget(BaseModel):
    """A named performance contract.

    ``Budget()`` with no arguments is the zero value returned by a missed
    lookup.  A ceiling of ``0`` for allocations or bytes means "no limit",
    not "zero allowed".
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field("", description="Operation name (e.g. 'context_detection')")
    max_duration_ns: int = Field(0, description="Maximum acceptable duration in nanoseconds")
    max_allocations: int = Field(0, description="Maximum heap allocations (0 = no limit)")
    max_bytes: int = Field(0, description="Maximum bytes allocated per operation (0 = no limit)")
    priority: str = Field("", description="Priority label (P0 = critical)")
    description: str = Field("", description="What this budget covers")

    _validate_max_duration = field_validator("max_duration_ns", mode="before")(duration_validator)

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, v: Any) -> Any:
        if isinstance(v, Priority):
            return v.value
        return v

    @property
    def max_duration(self) -> timedelta:
        """Duration ceiling as a timedelta (truncated to microseconds, display only)."""
        return timedelta(microseconds=self.max_duration_ns // 1_000)

    @property
    def has_allocation_limit(self) -> bool:
        return self.max_allocations != 0

    @property
    def has_byte_limit(self) -> bool:
        return self.max_bytes != 0

    def __str__(self) -> str:
        return f"{self.name}: max {format_duration(self.max_duration_ns)} ({self.priority} priority)"


# ---------------------------------------------------------------------------
# Measurement results
# ---------------------------------------------------------------------------


class MeasurementResult(BaseModel):
    """Outcome of evaluating one sample against a budget."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    operation: str = Field(..., description="Name of the measured operation")
    duration_ns: int = Field(..., description="Measured duration in nanoseconds")
    allocations: int = Field(0, description="Observed heap allocations")
    allocated_bytes: int = Field(0, description="Observed bytes allocated")
    passes_duration: bool = Field(..., description="Duration is within budget")
    passes_allocations: bool = Field(..., description="Allocations are within budget")
    passes_bytes: bool = Field(..., description="Bytes are within budget")
    passes: bool = Field(..., description="All criteria pass")
    budget: Optional[Budget] = Field(
        None, description="Budget evaluated against, None when the operation is unregistered"
    )

    @property
    def registered(self) -> bool:
        return self.budget is not None

    @property
    def failed_dimensions(self) -> list[str]:
        failed = []
        if not self.passes_duration:
            failed.append("duration")
        if not self.passes_allocations:
            failed.append("allocations")
        if not self.passes_bytes:
            failed.append("bytes")
        return failed

    @property
    def message(self) -> str:
        """Human-readable diagnostic."""
        if self.budget is None:
            return f"'{self.operation}': no budget registered, passing by default"
        b = self.budget
        parts = [
            f"duration {format_duration(self.duration_ns)} / {format_duration(b.max_duration_ns)}",
            f"allocations {self.allocations} / {b.max_allocations or 'unlimited'}",
            f"bytes {self.allocated_bytes} / {b.max_bytes or 'unlimited'}",
        ]
        if self.passes:
            return f"'{self.operation}': within budget ({', '.join(parts)})"
        return (
            f"'{self.operation}': OVER BUDGET on {', '.join(self.failed_dimensions)} "
            f"({', '.join(parts)})"
        )


class MeasurementSummary(BaseModel):
    """Aggregated verdict over a batch of measurements."""

    model_config = ConfigDict(extra="forbid")

    passed: bool = Field(..., description="True if every measurement passed")
    total: int = Field(..., description="Number of measurements evaluated")
    failed_count: int = Field(0, description="Number of failing measurements")
    unregistered_count: int = Field(0, description="Measurements without a registered budget")
    results: list[MeasurementResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[MeasurementResult]:
        return [r for r in self.results if not r.passes]


# ---------------------------------------------------------------------------
# File formats
# ---------------------------------------------------------------------------


class BudgetFile(BaseModel):
    """Root model for a YAML file declaring additional budgets."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., min_length=1, description="File schema version (e.g. 0.1.0)")
    contract_type: Literal["performance_budgets"] = Field(
        ..., description="Must be 'performance_budgets'"
    )
    budgets: list[Budget] = Field(default_factory=list)
    description: Optional[str] = Field(None, description="Human-readable description")

    @field_validator("budgets")
    @classmethod
    def _names_required(cls, v: list[Budget]) -> list[Budget]:
        for b in v:
            if not b.name:
                raise ValueError("every budget in a budget file needs a name")
        return v


class MeasurementSample(BaseModel):
    """One observed sample in a measurement file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    operation: str = Field(..., min_length=1)
    duration_ns: int = Field(..., alias="duration")
    allocations: int = 0
    allocated_bytes: int = 0

    _validate_duration = field_validator("duration_ns", mode="before")(duration_validator)


class MeasurementFile(BaseModel):
    """Root model for a YAML file of measurements fed to the CLI gate."""

    model_config = ConfigDict(extra="forbid")

    measurements: list[MeasurementSample] = Field(default_factory=list)
