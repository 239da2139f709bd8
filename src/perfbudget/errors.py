"""Exceptions raised by perfbudget."""

from __future__ import annotations


class BudgetNotFoundError(LookupError):
    """Raised by ``must_get_budget`` when no budget is registered for a name.

    Callers reach this only through a programming error (an operation name
    that setup code asserted to exist), so it is never caught internally.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No performance budget registered for operation '{name}'")
