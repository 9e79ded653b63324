"""Helpers for reading an uploaded export into a cell-address mapping."""

from __future__ import annotations

import csv
import logging
import mimetypes
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from .errors import InputReadError, InputTypeError
from .models import Cell

log = logging.getLogger(__name__)

SHEET_NAME = "Sheet1"

CSV_CONTENT_TYPES = {"text/csv", "application/csv"}
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_SUFFIX_TYPES = {
    ".csv": "text/csv",
    ".xlsx": XLSX_CONTENT_TYPE,
}

CellMap = Dict[str, Cell]


def guess_content_type(path: Path) -> Optional[str]:
    """Return the declared content type for ``path`` based on its name."""

    suffix_type = _SUFFIX_TYPES.get(path.suffix.lower())
    if suffix_type:
        return suffix_type
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type


def check_content_type(content_type: Optional[str]) -> str:
    if content_type in CSV_CONTENT_TYPES or content_type == XLSX_CONTENT_TYPE:
        return content_type
    raise InputTypeError("Incorrect file type. Supported file types are CSV and XLSX")


def _format_value(value: Any) -> str:
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _iter_csv_rows(path: Path) -> Iterator[List[str]]:
    with path.open(newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.reader(csvfile)
        for row in reader:
            yield row


def _read_csv(path: Path) -> CellMap:
    cells: CellMap = {}
    last_row = 0
    last_column = 0
    for row_number, row in enumerate(_iter_csv_rows(path), start=1):
        last_row = row_number
        for col_idx, text in enumerate(row, start=1):
            if text == "":
                continue
            cells[f"{get_column_letter(col_idx)}{row_number}"] = Cell(text, text)
            last_column = max(last_column, col_idx)
    if last_row and last_column:
        cells["!ref"] = Cell(f"A1:{get_column_letter(last_column)}{last_row}")
    return cells


def _read_xlsx(path: Path) -> CellMap:
    wb = load_workbook(filename=str(path), data_only=True)
    if SHEET_NAME in wb.sheetnames:
        ws = wb[SHEET_NAME]
    else:
        ws = wb.worksheets[0]
        log.debug("No %r sheet in %s, using %r", SHEET_NAME, path.name, ws.title)

    cells: CellMap = {}
    for row in ws.iter_rows():
        for cell in row:
            if cell.value is None:
                continue
            cells[cell.coordinate] = Cell(cell.value, _format_value(cell.value))
    cells["!ref"] = Cell(ws.dimensions)
    return cells


def read_sheet(path: str | Path, content_type: Optional[str] = None) -> CellMap:
    """
    Read the ``Sheet1`` cells of a CSV or XLSX export.

    ``content_type`` is the type declared by the caller; when omitted it is
    guessed from the file name. Unsupported types are rejected before any
    bytes are read.
    """

    path = Path(path)
    declared = check_content_type(content_type or guess_content_type(path))
    if not path.exists():
        raise InputReadError(f"File not found: {path}")

    log.info("Reading %s (%s)", path.name, declared)
    try:
        if declared in CSV_CONTENT_TYPES:
            cells = _read_csv(path)
        else:
            cells = _read_xlsx(path)
    except (
        OSError,
        KeyError,
        ValueError,
        csv.Error,
        InvalidFileException,
        zipfile.BadZipFile,
    ) as exc:
        raise InputReadError(f"Could not read {path.name}: {exc}") from exc
    log.debug("Read %d cells from %s", len(cells), path.name)
    return cells
