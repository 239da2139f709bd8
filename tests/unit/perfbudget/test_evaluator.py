"""Tests for measurement evaluation."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import patch

import pytest

from perfbudget.catalog import get_catalog
from perfbudget.durations import HOUR, MILLISECOND
from perfbudget.evaluator import BudgetEvaluator, evaluate, measure, summarise
from perfbudget.schema import Budget, MeasurementSample

KIB = 1024


class TestMeasure:
    def test_passes_all_criteria(self, catalog):
        result = measure("context_detection", 50 * MILLISECOND, 100, 25 * KIB, catalog=catalog)

        assert result.passes_duration
        assert result.passes_allocations
        assert result.passes_bytes
        assert result.passes

    def test_fails_duration(self, catalog):
        result = measure("context_detection", 200 * MILLISECOND, 100, 25 * KIB, catalog=catalog)

        assert not result.passes_duration
        assert result.passes_allocations
        assert result.passes_bytes
        assert not result.passes
        assert result.failed_dimensions == ["duration"]

    def test_fails_allocations(self, catalog):
        result = measure("context_detection", 50 * MILLISECOND, 500, 25 * KIB, catalog=catalog)

        assert result.passes_duration
        assert not result.passes_allocations
        assert result.passes_bytes
        assert not result.passes

    def test_fails_bytes(self, catalog):
        result = measure("context_detection", 50 * MILLISECOND, 100, 100 * KIB, catalog=catalog)

        assert result.passes_duration
        assert result.passes_allocations
        assert not result.passes_bytes
        assert not result.passes

    def test_unknown_operation_passes(self, catalog):
        result = measure("unknown_operation", 1 * HOUR, 1_000_000, 1024 * 1024 * 1024, catalog=catalog)

        assert result.passes
        assert result.passes_duration and result.passes_allocations and result.passes_bytes
        assert not result.registered
        assert result.budget is None
        # inputs are echoed even without a budget
        assert result.operation == "unknown_operation"
        assert result.duration_ns == 1 * HOUR
        assert result.allocations == 1_000_000
        assert result.allocated_bytes == 1024 * 1024 * 1024

    def test_zero_limits_mean_no_limit(self, catalog):
        # registry_get has no allocation/byte limits
        result = measure("registry_get", 50, 1_000_000, 1024 * 1024, catalog=catalog)

        assert result.passes_duration
        assert result.passes_allocations
        assert result.passes_bytes
        assert result.passes

    def test_duration_bound_is_inclusive(self, empty_catalog):
        empty_catalog.register_budget(Budget(name="op", max_duration_ns="100ms"))

        at_limit = measure("op", 100 * MILLISECOND, catalog=empty_catalog)
        over_limit = measure("op", 100 * MILLISECOND + 1, catalog=empty_catalog)

        assert at_limit.passes_duration and at_limit.passes
        assert not over_limit.passes_duration and not over_limit.passes

    def test_allocation_and_byte_bounds_are_inclusive(self, catalog):
        result = measure("context_detection", 1, 200, 50 * KIB, catalog=catalog)
        assert result.passes

        result = measure("context_detection", 1, 201, 50 * KIB + 1, catalog=catalog)
        assert result.failed_dimensions == ["allocations", "bytes"]

    def test_zero_duration_budget_only_passes_zero(self, empty_catalog):
        empty_catalog.register_budget(Budget(name="instant"))
        assert measure("instant", 0, catalog=empty_catalog).passes
        assert not measure("instant", 1, catalog=empty_catalog).passes

    def test_echoes_inputs(self, catalog):
        result = measure("config_load", 30 * MILLISECOND, 100, 15 * KIB, catalog=catalog)

        assert result.operation == "config_load"
        assert result.duration_ns == 30 * MILLISECOND
        assert result.allocations == 100
        assert result.allocated_bytes == 15 * KIB
        assert result.budget == catalog.must_get_budget("config_load")

    @pytest.mark.parametrize("duration", ["50ms", timedelta(milliseconds=50), 50 * MILLISECOND])
    def test_duration_inputs(self, catalog, duration):
        result = measure("context_detection", duration, catalog=catalog)
        assert result.duration_ns == 50 * MILLISECOND
        assert result.passes

    def test_idempotent(self, catalog):
        first = measure("context_detection", 200 * MILLISECOND, 500, 100 * KIB, catalog=catalog)
        second = measure("context_detection", 200 * MILLISECOND, 500, 100 * KIB, catalog=catalog)
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_does_not_mutate_catalog(self, catalog):
        before = catalog.list_budgets()
        measure("unknown_operation", 1, catalog=catalog)
        measure("context_detection", 1, catalog=catalog)
        assert catalog.list_budgets() == before

    def test_defaults_to_process_catalog(self):
        get_catalog().register_budget(Budget(name="global_op", max_duration_ns=10))
        assert not measure("global_op", 11).passes


class TestEvaluate:
    def test_without_budget(self):
        assert evaluate(None, "x", 5).passes

    def test_with_budget(self):
        b = Budget(name="x", max_duration_ns=5, max_allocations=1)
        result = evaluate(b, "x", 5, allocations=2)
        assert result.passes_duration
        assert not result.passes_allocations


class TestMeasurementResult:
    def test_message_within_budget(self, catalog):
        result = measure("context_detection", 50 * MILLISECOND, catalog=catalog)
        assert "within budget" in result.message

    def test_message_over_budget(self, catalog):
        result = measure("context_detection", 200 * MILLISECOND, catalog=catalog)
        assert "OVER BUDGET on duration" in result.message
        assert "200ms / 100ms" in result.message

    def test_message_unregistered(self, catalog):
        result = measure("unknown_operation", 1, catalog=catalog)
        assert "no budget registered" in result.message


class TestBudgetEvaluator:
    def test_uses_injected_catalog(self, empty_catalog):
        empty_catalog.register_budget(Budget(name="op", max_duration_ns=10))
        evaluator = BudgetEvaluator(empty_catalog)

        assert evaluator.catalog is empty_catalog
        assert not evaluator.measure("op", 11).passes
        assert evaluator.measure("context_detection", 1 * HOUR).passes  # not in this catalog

    def test_measure_many(self, catalog):
        evaluator = BudgetEvaluator(catalog)
        summary = evaluator.measure_many(
            [
                MeasurementSample(operation="context_detection", duration="50ms"),
                MeasurementSample(operation="config_load", duration="80ms"),
                MeasurementSample(operation="unknown_operation", duration="1h"),
            ]
        )

        assert summary.total == 3
        assert summary.failed_count == 1
        assert summary.unregistered_count == 1
        assert not summary.passed
        assert [r.operation for r in summary.failures] == ["config_load"]

    def test_measure_many_empty(self, catalog):
        summary = BudgetEvaluator(catalog).measure_many([])
        assert summary.passed
        assert summary.total == 0

    def test_emits_events_when_enabled(self, catalog):
        with patch("perfbudget.evaluator.emit_measurement") as emit, \
             patch("perfbudget.evaluator.emit_summary") as emit_sum:
            evaluator = BudgetEvaluator(catalog, emit_events=True)
            evaluator.measure_many([MeasurementSample(operation="config_load", duration="1ms")])

        emit.assert_called_once()
        emit_sum.assert_called_once()

    def test_no_events_by_default(self, catalog):
        with patch("perfbudget.evaluator.emit_measurement") as emit:
            BudgetEvaluator(catalog).measure("config_load", 1)
        emit.assert_not_called()


class TestSummarise:
    def test_all_pass(self, catalog):
        summary = summarise([measure("config_load", 1, catalog=catalog)])
        assert summary.passed
        assert summary.failures == []
