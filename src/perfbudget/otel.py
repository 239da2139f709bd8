"""
OTel span event emission helpers for budget measurements.

Each helper logs the verdict and adds an event to the current span when it
is recording.  Nothing is emitted when no span is active.

Usage::

    from perfbudget.otel import emit_measurement, emit_summary

    emit_measurement(result)
    emit_summary(summary)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace as otel_trace

if TYPE_CHECKING:
    from perfbudget.schema import MeasurementResult, MeasurementSummary

logger = logging.getLogger(__name__)


def add_span_event(name: str, attributes: dict[str, str | int | float | bool]) -> None:
    """Add an event to the current OTel span if it is recording."""
    span = otel_trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name=name, attributes=attributes)


def emit_measurement(result: MeasurementResult) -> None:
    """Emit a span event for a single measurement.

    Event name: ``perfbudget.measurement.pass`` or ``perfbudget.measurement.fail``.
    """
    event_name = "perfbudget.measurement.pass" if result.passes else "perfbudget.measurement.fail"

    attrs: dict[str, str | int | float | bool] = {
        "perfbudget.operation": result.operation,
        "perfbudget.registered": result.registered,
        "perfbudget.duration_ns": result.duration_ns,
        "perfbudget.allocations": result.allocations,
        "perfbudget.allocated_bytes": result.allocated_bytes,
        "perfbudget.passes": result.passes,
        "perfbudget.passes_duration": result.passes_duration,
        "perfbudget.passes_allocations": result.passes_allocations,
        "perfbudget.passes_bytes": result.passes_bytes,
    }
    if result.budget is not None:
        attrs["perfbudget.priority"] = result.budget.priority
        attrs["perfbudget.max_duration_ns"] = result.budget.max_duration_ns

    if result.passes:
        logger.debug("%s", result.message, extra={"operation": result.operation, "passes": True})
    else:
        logger.warning("%s", result.message, extra={"operation": result.operation, "passes": False})

    add_span_event(event_name, attrs)


def emit_summary(summary: MeasurementSummary) -> None:
    """Emit a summary span event for a batch of measurements.

    Event name: ``perfbudget.summary``
    """
    attrs: dict[str, str | int | float | bool] = {
        "perfbudget.total": summary.total,
        "perfbudget.passed": summary.passed,
        "perfbudget.failed_count": summary.failed_count,
        "perfbudget.unregistered_count": summary.unregistered_count,
    }

    log_fn = logger.info if summary.passed else logger.warning
    log_fn(
        "Budget summary: %d measurements, passed=%s, failed=%d, unregistered=%d",
        summary.total,
        summary.passed,
        summary.failed_count,
        summary.unregistered_count,
    )

    add_span_event("perfbudget.summary", attrs)
