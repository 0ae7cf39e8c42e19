"""Excel input/output for batch records."""

import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import pandas as pd

from cnki_crawler.utils.log_utils import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _is_empty_cell(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def read_records(path: PathLike) -> List[Dict[str, Any]]:
    """Read the first worksheet into one dict per row.

    Empty cells are left out of a row's dict.

    Args:
        path: Path to an .xlsx file

    Returns:
        Rows in sheet order, keyed by header
    """
    frame = pd.read_excel(path, sheet_name=0, engine="openpyxl")
    frame.columns = [str(c).strip() for c in frame.columns]

    records: List[Dict[str, Any]] = []
    for row in frame.to_dict(orient="records"):
        records.append({k: v for k, v in row.items() if not _is_empty_cell(v)})

    logger.debug(f"Read {len(records)} records from {path}")
    return records


def union_columns(records: Iterable[Dict[str, Any]]) -> List[str]:
    """Every key across the records, in first-seen order."""
    columns: List[str] = []
    seen = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def write_records(path: PathLike, records: List[Dict[str, Any]]) -> str:
    """Write records to a single-sheet workbook.

    Args:
        path: Destination .xlsx path; overwritten if it exists
        records: Rows to write; columns are the union of their keys

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    frame = pd.DataFrame(records, columns=union_columns(records))
    frame.to_excel(path, index=False, engine="openpyxl")

    logger.info(f"Wrote {len(records)} records to {path}")
    return str(path)
