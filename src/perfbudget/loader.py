"""
YAML loader with per-path caching for budget files.

Loads budget files, validates them against :class:`BudgetFile`, and caches
the result per resolved path.  :meth:`BudgetLoader.register_file` pushes the
budgets of a file into a catalog, replacing same-named entries.

Usage::

    from perfbudget.loader import BudgetLoader

    loader = BudgetLoader()
    registered = loader.register_file(Path("budgets.yaml"), catalog)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar, Optional

import yaml

from perfbudget.catalog import BudgetCatalog, get_catalog
from perfbudget.schema import Budget, BudgetFile, MeasurementFile

logger = logging.getLogger(__name__)


class BudgetLoader:
    """Loads and caches budget files from YAML."""

    _cache: ClassVar[dict[str, BudgetFile]] = {}

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the file cache (useful in tests)."""
        cls._cache.clear()

    def load(self, path: Path) -> BudgetFile:
        """Load a budget file.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file contains invalid YAML.
            pydantic.ValidationError: If the YAML does not match the schema.
        """
        key = str(path.resolve())
        if key in self._cache:
            logger.debug("Budget file cache hit: %s", key)
            return self._cache[key]

        if not path.exists():
            raise FileNotFoundError(f"Budget file not found: {path}")

        with open(path) as fh:
            raw = yaml.safe_load(fh)

        budget_file = BudgetFile.model_validate(raw)
        self._cache[key] = budget_file

        logger.debug("Loaded budget file: %s, budgets=%d", path, len(budget_file.budgets))
        return budget_file

    def load_from_string(self, yaml_str: str) -> BudgetFile:
        """Load a budget file from a YAML string (convenience for testing)."""
        raw = yaml.safe_load(yaml_str)
        return BudgetFile.model_validate(raw)

    def register_file(
        self,
        path: Path,
        catalog: Optional[BudgetCatalog] = None,
    ) -> list[Budget]:
        """Register every budget in ``path`` into ``catalog``.

        Returns:
            The budgets that were registered, in file order.
        """
        catalog = catalog if catalog is not None else get_catalog()
        budget_file = self.load(path)
        catalog.register_all(budget_file.budgets)
        logger.info("Registered %d budgets from %s", len(budget_file.budgets), path)
        return list(budget_file.budgets)


def load_measurements(path: Path) -> MeasurementFile:
    """Load a YAML measurement file (not cached; measurements change per run)."""
    if not path.exists():
        raise FileNotFoundError(f"Measurement file not found: {path}")
    with open(path) as fh:
        raw = yaml.safe_load(fh)
    return MeasurementFile.model_validate(raw or {})
