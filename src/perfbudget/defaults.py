"""
Standard performance budgets.

These entries seed every :class:`~perfbudget.catalog.BudgetCatalog` built
with defaults.  The operation names are a public contract: benchmark suites
and CI tooling look budgets up by these strings, so renaming or removing one
is a breaking change.
"""

from __future__ import annotations

from perfbudget.durations import MICROSECOND, MILLISECOND, NANOSECOND
from perfbudget.schema import Budget, Priority

KIB = 1024
MIB = 1024 * KIB

STANDARD_BUDGETS: tuple[Budget, ...] = (
    # Context detection
    Budget(
        name="context_detection",
        max_duration_ns=100 * MILLISECOND,
        max_allocations=200,
        max_bytes=50 * KIB,
        description="Time to detect project context (git root, frameworks, worktree mode)",
        priority=Priority.P0,
    ),
    # Configuration
    Budget(
        name="config_load",
        max_duration_ns=50 * MILLISECOND,
        max_allocations=150,
        max_bytes=20 * KIB,
        description="Time to load a single configuration file",
        priority=Priority.P1,
    ),
    Budget(
        name="config_merge_single",
        max_duration_ns=30 * MILLISECOND,
        max_allocations=150,
        max_bytes=15 * KIB,
        description="Time to merge a single configuration file",
        priority=Priority.P1,
    ),
    Budget(
        name="config_merge_multiple",
        max_duration_ns=100 * MILLISECOND,
        max_allocations=600,
        max_bytes=50 * KIB,
        description="Time to merge multiple (5+) configuration files",
        priority=Priority.P1,
    ),
    # Plugins
    Budget(
        name="plugin_discovery",
        max_duration_ns=500 * MILLISECOND,
        max_allocations=10_000,
        max_bytes=2 * MIB,
        description="Time to discover and enumerate all available plugins",
        priority=Priority.P0,
    ),
    Budget(
        name="plugin_load",
        max_duration_ns=200 * MILLISECOND,
        max_allocations=1_000,
        max_bytes=512 * KIB,
        description="Time to load and initialize a single plugin",
        priority=Priority.P1,
    ),
    Budget(
        name="plugin_cache_get",
        max_duration_ns=10 * MICROSECOND,
        description="Time to retrieve a plugin from cache",
        priority=Priority.P2,
    ),
    # Startup
    Budget(
        name="startup_total",
        max_duration_ns=300 * MILLISECOND,
        max_allocations=10_000,
        max_bytes=5 * MIB,
        description="Total time from start to ready state (excluding plugins)",
        priority=Priority.P0,
    ),
    # Commands
    Budget(
        name="command_lookup",
        max_duration_ns=1 * MILLISECOND,
        max_allocations=10,
        max_bytes=1 * KIB,
        description="Time to look up a command by name",
        priority=Priority.P1,
    ),
    # Errors
    Budget(
        name="error_creation",
        max_duration_ns=1 * MICROSECOND,
        max_allocations=5,
        max_bytes=1 * KIB,
        description="Time to create a structured error",
        priority=Priority.P2,
    ),
    Budget(
        name="error_wrap",
        max_duration_ns=500 * NANOSECOND,
        max_allocations=5,
        max_bytes=512,
        description="Time to wrap an existing error",
        priority=Priority.P2,
    ),
    # Validation
    Budget(
        name="path_validation",
        max_duration_ns=50 * MICROSECOND,
        max_allocations=100,
        max_bytes=10 * KIB,
        description="Time to validate a file path for security",
        priority=Priority.P1,
    ),
    # Registry
    Budget(
        name="registry_get",
        max_duration_ns=100 * NANOSECOND,
        description="Time to retrieve an item from registry",
        priority=Priority.P2,
    ),
    Budget(
        name="registry_list",
        max_duration_ns=10 * MICROSECOND,
        max_allocations=5,
        max_bytes=4 * KIB,
        description="Time to list all items in registry (100 items)",
        priority=Priority.P2,
    ),
)
