"""
Configuration management: models, loading, and validation.

Handles:
- RunConfig: Main experiment configuration
- StatsConfig: Tests, corrections, significance levels, model selection
- Allowed test identifiers per test class

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import load_run_config, load_stats_config
from infrastructure.config.models import (
    # Enums
    Engine,
    # Main config
    RunConfig,
    # Stats config
    StatsConfig,
)
from infrastructure.config.registry import ALLOWED_TESTS, OPTIONAL_TEST_CLASSES

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    # Enums
    "Engine",
    # Stats
    "StatsConfig",
    "load_stats_config",
    # Registry
    "ALLOWED_TESTS",
    "OPTIONAL_TEST_CLASSES",
]
