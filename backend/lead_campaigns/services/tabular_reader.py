"""
Readers turning uploaded CSV / Excel payloads into (headers, rows).

The first row holds the headers. CSV payloads go through the csv module, so
quoted cells may contain commas and doubled quotes. When a header repeats,
each row keeps the value of its first occurrence.
"""
import csv
import io
import logging
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

import openpyxl

from ..exceptions import UnsupportedImportFile

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".csv", ".xlsx")

Rows = Tuple[List[str], List[Dict[str, str]]]


def _csv_cell(value: Any) -> str:
    return value if value is not None else ""


def _excel_cell(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def build_rows(
    columns: List[str],
    records: Iterable[Sequence[Any]],
    cell: Callable[[Any], str] = _csv_cell,
) -> List[Dict[str, str]]:
    """
    Key every record by header.

    Short records are padded with empty cells and completely empty rows are
    skipped. A repeated header is bound to its first column only.
    """
    rows: List[Dict[str, str]] = []
    for record in records:
        row: Dict[str, str] = {}
        for i, col in enumerate(columns):
            if col in row:
                continue
            row[col] = cell(record[i] if i < len(record) else None)
        if any(row.values()):
            rows.append(row)
    return rows


def parse_csv_text(text: str) -> Rows:
    """Parse CSV text into (columns, rows)."""
    if text.startswith("\ufeff"):
        text = text[1:]  # BOM

    reader = csv.reader(io.StringIO(text))
    try:
        header_row = next(reader, None)
        if header_row is None:
            return [], []
        columns = [h.strip() for h in header_row]
        rows = build_rows(columns, reader)
    except csv.Error as e:
        raise UnsupportedImportFile(f"Invalid CSV format: {e}") from e

    return columns, rows


def parse_excel_bytes(content: bytes) -> Rows:
    """Parse the active worksheet of an .xlsx workbook into (columns, rows)."""
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise UnsupportedImportFile(f"Could not open Excel file: {e}") from e

    try:
        ws = wb.active
        if ws is None:
            raise UnsupportedImportFile("Excel file has no active worksheet")
        sheet_rows = list(ws.iter_rows(values_only=True))
    finally:
        wb.close()

    if not sheet_rows:
        return [], []

    header, *records = sheet_rows
    columns = [_excel_cell(c) or f"Column_{i}" for i, c in enumerate(header)]
    return columns, build_rows(columns, records, cell=_excel_cell)


def parse_file_to_rows(filename: str, content: bytes) -> Rows:
    """Parse CSV or Excel file content into (columns, rows)."""
    lower = filename.lower()

    if lower.endswith(".csv"):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise UnsupportedImportFile("File encoding not supported. Please use UTF-8.") from e
        return parse_csv_text(text)

    if lower.endswith(".xlsx"):
        return parse_excel_bytes(content)

    raise UnsupportedImportFile(
        f"Unsupported file format, expected one of {', '.join(ALLOWED_EXTENSIONS)}"
    )
