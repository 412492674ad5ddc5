"""Snapshot table loading utilities."""

import json
from pathlib import Path

import pandas as pd


def read_table(path: Path) -> pd.DataFrame:
    """
    Read a tabular snapshot file based on file extension.

    Supported formats:
    - JSON: .json (a list of records, or an API dump with an ``items`` list)
    - Excel: .xlsx, .xls
    - CSV: .csv

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("items") or []
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of records in {path}, got {type(data)}")
        return pd.DataFrame.from_records(data)
    elif suffix in [".xlsx", ".xls"]:
        return pd.read_excel(path)
    elif suffix == ".csv":
        return pd.read_csv(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .json, .xlsx, .xls, .csv")
