"""
Measurement evaluation against performance budgets.

Compares an observed sample (duration, allocation count, bytes allocated)
with the catalog entry for an operation:

- duration passes when ``duration_ns <= max_duration_ns`` (inclusive)
- allocations pass when ``max_allocations == 0`` (no limit) or
  ``allocations <= max_allocations``
- bytes pass when ``max_bytes == 0`` (no limit) or
  ``allocated_bytes <= max_bytes``

An operation with no registered budget passes on every dimension: no budget
means no constraint.

Usage::

    from perfbudget.evaluator import BudgetEvaluator

    evaluator = BudgetEvaluator(catalog)
    result = evaluator.measure("context_detection", "50ms", 100, 25 * 1024)
    if not result.passes:
        print(result.message)
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from perfbudget.catalog import BudgetCatalog, get_catalog
from perfbudget.durations import DurationLike, to_nanoseconds
from perfbudget.otel import emit_measurement, emit_summary
from perfbudget.schema import Budget, MeasurementResult, MeasurementSample, MeasurementSummary

logger = logging.getLogger(__name__)


def evaluate(
    budget: Optional[Budget],
    name: str,
    duration: DurationLike,
    allocations: int = 0,
    allocated_bytes: int = 0,
) -> MeasurementResult:
    """Evaluate a sample against ``budget`` (``None`` = unregistered, always passes)."""
    duration_ns = to_nanoseconds(duration)

    if budget is None:
        return MeasurementResult(
            operation=name,
            duration_ns=duration_ns,
            allocations=allocations,
            allocated_bytes=allocated_bytes,
            passes_duration=True,
            passes_allocations=True,
            passes_bytes=True,
            passes=True,
        )

    passes_duration = duration_ns <= budget.max_duration_ns
    # 0 means no limit
    passes_allocations = budget.max_allocations == 0 or allocations <= budget.max_allocations
    passes_bytes = budget.max_bytes == 0 or allocated_bytes <= budget.max_bytes

    return MeasurementResult(
        operation=name,
        duration_ns=duration_ns,
        allocations=allocations,
        allocated_bytes=allocated_bytes,
        passes_duration=passes_duration,
        passes_allocations=passes_allocations,
        passes_bytes=passes_bytes,
        passes=passes_duration and passes_allocations and passes_bytes,
        budget=budget,
    )


def measure(
    name: str,
    duration: DurationLike,
    allocations: int = 0,
    allocated_bytes: int = 0,
    catalog: Optional[BudgetCatalog] = None,
) -> MeasurementResult:
    """Look up ``name`` and evaluate the observed sample against its budget.

    Args:
        name: Operation name.
        duration: Observed duration (int nanoseconds, timedelta or "50ms").
        allocations: Observed heap allocations.
        allocated_bytes: Observed bytes allocated.
        catalog: Catalog to consult; the process-wide one when omitted.

    Returns:
        A fresh ``MeasurementResult``.  The catalog is not modified.
    """
    catalog = catalog if catalog is not None else get_catalog()
    budget, ok = catalog.get_budget(name)
    return evaluate(budget if ok else None, name, duration, allocations, allocated_bytes)


def summarise(results: Iterable[MeasurementResult]) -> MeasurementSummary:
    results = list(results)
    failed = sum(1 for r in results if not r.passes)
    unregistered = sum(1 for r in results if not r.registered)
    return MeasurementSummary(
        passed=failed == 0,
        total=len(results),
        failed_count=failed,
        unregistered_count=unregistered,
        results=results,
    )


class BudgetEvaluator:
    """Evaluates measurements against a specific catalog.

    Args:
        catalog: The catalog to consult; the process-wide one when omitted.
        emit_events: Log each verdict and add OTel span events.
    """

    def __init__(
        self,
        catalog: Optional[BudgetCatalog] = None,
        emit_events: bool = False,
    ) -> None:
        self._catalog = catalog if catalog is not None else get_catalog()
        self._emit_events = emit_events

    @property
    def catalog(self) -> BudgetCatalog:
        return self._catalog

    def measure(
        self,
        name: str,
        duration: DurationLike,
        allocations: int = 0,
        allocated_bytes: int = 0,
    ) -> MeasurementResult:
        result = measure(name, duration, allocations, allocated_bytes, catalog=self._catalog)
        if self._emit_events:
            emit_measurement(result)
        return result

    def measure_many(self, samples: Iterable[MeasurementSample]) -> MeasurementSummary:
        """Evaluate a batch of samples and aggregate the verdicts."""
        summary = summarise(
            self.measure(s.operation, s.duration_ns, s.allocations, s.allocated_bytes)
            for s in samples
        )
        if self._emit_events:
            emit_summary(summary)
        return summary
