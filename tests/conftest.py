"""
Pytest configuration and fixtures for perfbudget tests.
"""

from __future__ import annotations

import os
from typing import Generator

import pytest

from perfbudget.catalog import BudgetCatalog, reset_catalog
from perfbudget.config import reset_config
from perfbudget.loader import BudgetLoader


@pytest.fixture(autouse=True)
def isolate_state(monkeypatch) -> Generator[None, None, None]:
    """Fresh process-wide catalog, config and loader cache for every test."""
    for key in list(os.environ):
        if key.startswith("PERFBUDGET_"):
            monkeypatch.delenv(key)
    reset_catalog()
    reset_config()
    BudgetLoader.clear_cache()
    yield
    reset_catalog()
    reset_config()
    BudgetLoader.clear_cache()


@pytest.fixture
def catalog() -> BudgetCatalog:
    """A catalog seeded with the standard budgets."""
    return BudgetCatalog()


@pytest.fixture
def empty_catalog() -> BudgetCatalog:
    return BudgetCatalog(include_defaults=False)
