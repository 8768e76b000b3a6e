"""
CLI entrypoint for the significance evaluation pipeline.

This script performs the following steps:
- loads .env (if present), configs/experiment.yaml
- creates a per-run output folder under outputs/
- imports the samples table and keeps the best-N models
- splits the samples by the fixed independent variable
- evaluates each group with the configured statistics engine
- serializes results to JSON
- logs a human-readable summary of results
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path

import opik
from dotenv import load_dotenv
from opik import opik_context, track

from application import Evaluator, evaluate_groups
from application.constants import CONFIG_SNAPSHOT_FILENAME, DATA_FINGERPRINT_FILENAME, LOG_FILENAME
from domain.samples import PipelineKind, split_by_independent_variable
from infrastructure.config import load_run_config
from infrastructure.constants import EXPERIMENT_FILE
from infrastructure.engines import make_engine
from infrastructure.io import ensure_exists, interpret_table, read_table, write_json
from infrastructure.observability import configure_logging, make_run_tag, set_log_context

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run statistical significance evaluation of model results")
    p.add_argument(
        "--experiment",
        type=str,
        default=str(EXPERIMENT_FILE),
        help="Path to experiment.yaml (default: configs/experiment.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file (default: .env; skipped if missing)",
    )
    p.add_argument(
        "--mock",
        action="store_true",
        help="Use Mock engine instead of computing real statistics.",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level",
    )
    return p.parse_args()


def make_run_id(started: datetime, pipeline_kind: PipelineKind, engine_name: str) -> str:
    """Run folder name: <timestamp>_<pipeline>_<engine>."""
    return f"{started.strftime('%Y%m%d_%H%M%S')}_{pipeline_kind.value}_{engine_name}"


@track(
    name="Significance.run",
    type="general",
    metadata={"task": "significance_evaluation"},
    capture_input=False,
    capture_output=False,
    flush=True,
)
def main() -> None:
    args = _parse_args()

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    experiment_path = Path(args.experiment)
    ensure_exists(experiment_path, "experiment.yaml")

    cfg = load_run_config(experiment_path)

    opik.configure()

    # ---- Per-run output folder ----
    engine_name = cfg.engine.value if not args.mock else "mock_engine"
    run_id = make_run_id(datetime.now(), cfg.pipeline_kind, engine_name)

    run_dir = cfg.output_root / run_id
    run_dir.mkdir(parents=True, exist_ok=True)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
    )

    set_log_context(run_id_full=run_id)

    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    # Load samples
    logger.info("Loading samples from %s...", cfg.samples_file_path)
    samples_df = read_table(cfg.samples_file_path, separator=cfg.separator)
    logger.info("Samples loaded: %d rows, %d columns", samples_df.shape[0], samples_df.shape[1])

    sample_data = interpret_table(samples_df, cfg)
    groups = split_by_independent_variable(sample_data, cfg.stats.fix_independent_variable)

    # Save snapshot config + data fingerprint
    write_json(run_dir / CONFIG_SNAPSHOT_FILENAME, cfg.model_dump(mode="json"))
    write_json(
        run_dir / DATA_FINGERPRINT_FILENAME,
        {
            "samples_file": str(cfg.samples_file_path),
            "rows": int(samples_df.shape[0]),
            "columns": list(samples_df.columns),
            "models": [m.label for m in sample_data.model_metadata],
            "measures": sample_data.measures,
            "datasets": [d.model_dump() for d in sample_data.dataset_names],
            "groups": len(groups),
        },
    )

    opik_context.update_current_span(
        name=f"Significance.run.{cfg.pipeline_kind.value}_{engine_name}",
        metadata={
            "engine": engine_name,
            "pipeline_kind": cfg.pipeline_kind.value,
            "run_id": run_id,
        },
    )

    # Init statistics engine
    logger.info("Initializing statistics engine (engine=%s)...", engine_name)
    with make_engine(cfg, use_mock=bool(args.mock)) as engine:
        written = evaluate_groups(Evaluator(cfg.stats, engine), groups, run_dir)

    logger.info("Wrote %d of %d group evaluations to %s", len(written), len(groups), run_dir)
    logger.info("Detailed log: %s", log_path)


if __name__ == "__main__":
    main()
