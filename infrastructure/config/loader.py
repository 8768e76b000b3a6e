"""Configuration loading from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from infrastructure.config.models import Engine, RunConfig, StatsConfig
from infrastructure.constants import DATA_DIR


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_stats_config(data: dict[str, Any]) -> StatsConfig:
    """
    Build a StatsConfig from the `stats:` block of experiment.yaml.

    Test classes and significance levels are given as mappings, e.g.

        tests:
          TwoSamplesParametric: DependentT
        significance: {low: 0.1, medium: 0.05, high: 0.01}

    Omitted keys fall back to StatsConfig defaults.
    """
    if not isinstance(data, dict):
        raise ValueError(f"stats block must be a mapping, got {type(data)}")
    return StatsConfig(**data)


def load_run_config(experiment_path: Path) -> RunConfig:
    """
    Load experiment.yaml and construct a fully-resolved RunConfig.

    The samples file is resolved relative to `data_dir` (default: dataset/).
    """
    exp = _load_yaml(experiment_path)

    if "samples_file" not in exp or not exp.get("samples_file"):
        raise ValueError("experiment.yaml missing required key: samples_file")

    engine = Engine(str(exp.get("engine", Engine.SCIPY.value)).strip().lower())
    data_dir = Path(exp.get("data_dir", str(DATA_DIR)))

    stats = load_stats_config(exp.get("stats") or {})

    cfg = RunConfig(
        engine=engine,
        samples_file_path=data_dir / exp["samples_file"],
        separator=str(exp.get("separator", ";")),
        pipeline_kind=exp.get("pipeline_kind", "CV"),
        n_folds=exp.get("n_folds"),
        n_repetitions=exp.get("n_repetitions"),
        output_root=Path(exp.get("output_root", "outputs")),
        stats=stats,
    )

    return cfg
