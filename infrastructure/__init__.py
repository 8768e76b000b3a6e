"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Statistics engines (scipy/statsmodels/scikit-posthocs, Mock)
- Configuration loading (YAML)
- Sample import (CSV/Excel via pandas)
- Observability (logging, tracing)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    Engine,
    RunConfig,
    StatsConfig,
    load_run_config,
)
from infrastructure.engines import StatisticsEngine, make_engine

__all__ = [
    # Statistics engines (most commonly used)
    "make_engine",
    "StatisticsEngine",
    # Configuration (most commonly used)
    "load_run_config",
    "RunConfig",
    "Engine",
    "StatsConfig",
]
