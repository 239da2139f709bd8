"""
Budget catalog -- the registry of named performance budgets.

A :class:`BudgetCatalog` maps operation names to :class:`Budget` entries.
New catalogs are seeded with :data:`~perfbudget.defaults.STANDARD_BUDGETS`
and grow through :meth:`BudgetCatalog.register_budget`.  There is no
deletion; registering an existing name replaces the entry.

Every access goes through an ``RLock``.  Entries are frozen models, so a
reader racing a writer sees either the old or the new budget.

Components take a catalog explicitly.  :func:`get_catalog` returns the
process-wide instance for callers that have none to inject.

Usage::

    from perfbudget.catalog import BudgetCatalog

    catalog = BudgetCatalog()
    budget, ok = catalog.get_budget("context_detection")
    if ok:
        print(budget.max_duration_ns)

    critical = catalog.list_by_priority("P0")
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Iterator, Optional

from perfbudget.defaults import STANDARD_BUDGETS
from perfbudget.errors import BudgetNotFoundError
from perfbudget.schema import Budget

logger = logging.getLogger(__name__)


class BudgetCatalog:
    """Thread-safe mapping from operation name to budget."""

    def __init__(
        self,
        budgets: Optional[Iterable[Budget]] = None,
        include_defaults: bool = True,
    ) -> None:
        """
        Args:
            budgets: Extra budgets registered after the standard set.
            include_defaults: Seed with the standard budgets.
        """
        self._lock = threading.RLock()
        self._budgets: dict[str, Budget] = {}
        if include_defaults:
            for b in STANDARD_BUDGETS:
                self._budgets[b.name] = b
        if budgets is not None:
            self.register_all(budgets)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_budget(self, name: str) -> tuple[Budget, bool]:
        """Return ``(budget, True)`` for a registered name, else ``(Budget(), False)``."""
        with self._lock:
            budget = self._budgets.get(name)
        if budget is None:
            return Budget(), False
        return budget, True

    def must_get_budget(self, name: str) -> Budget:
        """Return the budget for ``name``.

        Raises:
            BudgetNotFoundError: If ``name`` is not registered.
        """
        with self._lock:
            try:
                return self._budgets[name]
            except KeyError:
                raise BudgetNotFoundError(name) from None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def register_budget(self, budget: Budget) -> None:
        """Insert or replace the entry keyed by ``budget.name``.

        Values are stored verbatim; a zero duration ceiling is accepted.
        """
        with self._lock:
            replaced = budget.name in self._budgets
            self._budgets[budget.name] = budget
        logger.debug(
            "%s budget: %s (priority=%s)",
            "Replaced" if replaced else "Registered",
            budget.name,
            budget.priority,
        )

    def register_all(self, budgets: Iterable[Budget]) -> None:
        """Register several budgets under one lock acquisition."""
        with self._lock:
            for b in budgets:
                self.register_budget(b)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_budgets(self) -> list[Budget]:
        """Snapshot of every registered budget, sorted by name."""
        with self._lock:
            snapshot = list(self._budgets.values())
        return sorted(snapshot, key=lambda b: b.name)

    def list_by_priority(self, priority: str) -> list[Budget]:
        """Budgets whose priority equals ``priority`` exactly; ``[]`` if none."""
        return [b for b in self.list_budgets() if b.priority == priority]

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._budgets)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._budgets

    def __len__(self) -> int:
        with self._lock:
            return len(self._budgets)

    def __iter__(self) -> Iterator[Budget]:
        return iter(self.list_budgets())

    def __repr__(self) -> str:
        return f"BudgetCatalog(budgets={len(self)})"


# ---------------------------------------------------------------------------
# Process-wide catalog
# ---------------------------------------------------------------------------

_catalog: Optional[BudgetCatalog] = None
_catalog_lock = threading.Lock()


def get_catalog() -> BudgetCatalog:
    """Return the process-wide catalog, creating it with defaults on first use."""
    global _catalog

    with _catalog_lock:
        if _catalog is None:
            _catalog = BudgetCatalog()
        return _catalog


def reset_catalog() -> None:
    """Drop the process-wide catalog (for testing)."""
    global _catalog

    with _catalog_lock:
        _catalog = None


# Convenience functions delegating to the process-wide catalog
def get_budget(name: str) -> tuple[Budget, bool]:
    return get_catalog().get_budget(name)


def must_get_budget(name: str) -> Budget:
    return get_catalog().must_get_budget(name)


def register_budget(budget: Budget) -> None:
    get_catalog().register_budget(budget)


def list_budgets() -> list[Budget]:
    return get_catalog().list_budgets()


def list_by_priority(priority: str) -> list[Budget]:
    return get_catalog().list_by_priority(priority)
