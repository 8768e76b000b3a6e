"""Dataset loading utilities."""

from pathlib import Path

import pandas as pd


def read_table(path: Path, separator: str = ",") -> pd.DataFrame:
    """
    Read tabular data file (Excel or CSV) based on file extension.

    Supported formats:
    - Excel: .xlsx, .xls
    - CSV: .csv, .txt (read as strings, with the given separator)

    Args:
        path: Path to data file
        separator: Column separator for CSV files

    Returns:
        pandas DataFrame

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in [".xlsx", ".xls"]:
        return pd.read_excel(path, dtype=str)
    elif suffix in [".csv", ".txt"]:
        return pd.read_csv(path, sep=separator, dtype=str, skipinitialspace=True)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .xlsx, .xls, .csv, .txt")
