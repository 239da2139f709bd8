"""
perfbudget - Performance budgets for CI regression detection.

Keeps a catalog of named operations, each with a maximum duration, optional
allocation and byte ceilings, and a priority, and evaluates measurements
supplied by a benchmark harness against them.

Public API::

    from perfbudget import (
        # Models
        Budget,
        MeasurementResult,
        MeasurementSummary,
        Priority,
        # Catalog
        BudgetCatalog,
        BudgetNotFoundError,
        get_catalog,
        get_budget,
        must_get_budget,
        register_budget,
        list_budgets,
        list_by_priority,
        # Evaluator
        BudgetEvaluator,
        measure,
    )

Example::

    budget = must_get_budget("context_detection")
    result = measure("context_detection", "50ms", 100, 25 * 1024)
    assert result.passes
"""

from perfbudget.catalog import (
    BudgetCatalog,
    get_budget,
    get_catalog,
    list_budgets,
    list_by_priority,
    must_get_budget,
    register_budget,
    reset_catalog,
)
from perfbudget.errors import BudgetNotFoundError
from perfbudget.evaluator import BudgetEvaluator, measure
from perfbudget.schema import (
    Budget,
    MeasurementResult,
    MeasurementSummary,
    Priority,
)

__version__ = "0.1.0"
__all__ = [
    # Models
    "Budget",
    "MeasurementResult",
    "MeasurementSummary",
    "Priority",
    # Catalog
    "BudgetCatalog",
    "BudgetNotFoundError",
    "get_catalog",
    "reset_catalog",
    "get_budget",
    "must_get_budget",
    "register_budget",
    "list_budgets",
    "list_by_priority",
    # Evaluator
    "BudgetEvaluator",
    "measure",
    "__version__",
]
