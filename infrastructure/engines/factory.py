"""Factory for creating statistics engines."""

import logging
from typing import Any

from infrastructure.config.models import Engine, RunConfig

from .base import StatisticsEngine
from .mock import MockEngine

logger = logging.getLogger(__name__)


def engine_class(engine: Engine) -> type[StatisticsEngine]:
    """
    Return the engine class for `engine`.

    Backends are imported here, so scipy/statsmodels are only loaded once an engine is built.

    Raises:
        RuntimeError: If no engine class exists for the name.
    """
    if engine is Engine.SCIPY:
        from .scipy import ScipyEngine

        return ScipyEngine
    raise RuntimeError(f"Unsupported statistics engine: {engine.value}")


def make_engine(
    cfg: RunConfig,
    *,
    use_mock: bool = False,
    mock_fixtures: dict[str, Any] | None = None,
) -> StatisticsEngine:
    """
    Create the configured statistics engine (not yet opened).

    Args:
        cfg: Run configuration containing the engine name
        use_mock: If True, use the MockEngine regardless of cfg
        mock_fixtures: Optional fixtures for the MockEngine
    """
    if use_mock:
        return MockEngine(cfg=cfg, fixtures=mock_fixtures)

    engine_cls = engine_class(cfg.engine)
    logger.info("Creating statistics engine %s", engine_cls.__name__)
    return engine_cls.from_cfg(cfg)
