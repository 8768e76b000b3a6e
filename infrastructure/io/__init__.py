"""I/O utilities: filesystem operations, dataset loading, sample interpretation."""

from infrastructure.io.datasets import read_table
from infrastructure.io.fs import ensure_exists, write_json
from infrastructure.io.samples import SAMPLE_COLUMNS, interpret_table

__all__ = [
    "ensure_exists",
    "write_json",
    "read_table",
    "interpret_table",
    "SAMPLE_COLUMNS",
]
