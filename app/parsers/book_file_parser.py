"""
app/parsers/book_file_parser.py

Readers that turn uploaded CSV / Excel files into raw row mappings.
"""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator

import pandas as pd

from app.domain.errors import FileParseError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = frozenset({"csv"})
WORKBOOK_EXTENSIONS = frozenset({"xlsx", "xlsm"})
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | WORKBOOK_EXTENSIONS


def file_extension(filename: str | None) -> str:
    """
    Lowercased text after the last dot, or "" when there is none.
    """

    name = (filename or "").strip()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def parse_book_file(path: Path, extension: str) -> list[dict[str, Any]]:
    """
    Read every data row of a delimited-text or workbook file.

    The extension is checked before the file is opened. Callers own the
    file and are responsible for removing it.
    """

    normalized = extension.strip().lstrip(".").lower()
    if normalized in CSV_EXTENSIONS:
        rows = list(iter_csv_rows(path))
    elif normalized in WORKBOOK_EXTENSIONS:
        rows = read_workbook_rows(path)
    else:
        raise UnsupportedFileTypeError(normalized)

    logger.info("Parsed upload path=%s extension=%s rows=%d", path.name, normalized, len(rows))
    return rows


def iter_csv_rows(path: Path) -> Iterator[dict[str, Any]]:
    """
    Stream rows of a CSV file keyed by the first line's headers.
    """

    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            for raw_row in reader:
                yield {key: value for key, value in raw_row.items() if key is not None}
    except UnicodeDecodeError as exc:
        raise FileParseError("CSV must be UTF-8 encoded.") from exc
    except csv.Error as exc:
        raise FileParseError(f"Invalid CSV format: {exc}") from exc


def read_workbook_rows(path: Path) -> list[dict[str, Any]]:
    """
    Read the first sheet of a workbook into row mappings.

    Empty cells become "" and date cells stay datetimes.
    """

    try:
        frame = pd.read_excel(path, sheet_name=0, dtype=object, engine="openpyxl")
    # openpyxl raises its own exception types for malformed parts.
    except Exception as exc:  # noqa: BLE001
        raise FileParseError(f"Invalid workbook: {exc}") from exc

    frame = frame.astype(object).where(pd.notna(frame), "")
    rows: list[dict[str, Any]] = []
    for record in frame.to_dict(orient="records"):
        rows.append({str(key): _cell_value(value) for key, value in record.items()})
    return rows


def _cell_value(value: Any) -> Any:
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, (datetime, date)):
        return value
    if hasattr(value, "item"):
        # numpy scalars
        return value.item()
    return value
