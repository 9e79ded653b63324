"""Turn a sparse cell-address mapping into dense rows keyed by column."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping, Optional, Tuple

from .models import Cell

log = logging.getLogger(__name__)

_ADDRESS_PATTERN = re.compile(r"^([A-Z]+)([0-9]+)$")

# Spreadsheet row 1 holds the column headers.
FIRST_DATA_ROW = 2

Row = Dict[str, Cell]


def split_address(address: str) -> Optional[Tuple[str, int]]:
    """Return ``(column, row_number)`` for an address such as ``"G7"``."""

    match = _ADDRESS_PATTERN.match(address)
    if not match:
        return None
    column, number = match.groups()
    return column, int(number)


def normalize_cells(cells: Mapping[str, Cell]) -> List[Row]:
    """
    Place every cell at ``rows[N - 2][column]``.

    Keys starting with ``!`` are sheet metadata and are skipped. The header row
    is dropped and the result has one entry per spreadsheet row from row 2 up
    to the last row present; rows without cells are empty dicts.
    """

    placed: List[Tuple[str, int, Cell]] = []
    last_row = FIRST_DATA_ROW - 1
    for address, cell in cells.items():
        if address.startswith("!"):
            continue
        parts = split_address(address)
        if parts is None:
            log.debug("Skipping unrecognised cell address %r", address)
            continue
        column, number = parts
        if number < FIRST_DATA_ROW:
            continue
        placed.append((column, number, cell))
        last_row = max(last_row, number)

    rows: List[Row] = [{} for _ in range(last_row - FIRST_DATA_ROW + 1)]
    for column, number, cell in placed:
        rows[number - FIRST_DATA_ROW][column] = cell
    return rows
