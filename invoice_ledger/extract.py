"""Map normalised spreadsheet rows onto :class:`Payment` records."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from .errors import ParseError
from .grid import FIRST_DATA_ROW
from .models import Cell, Payment

log = logging.getLogger(__name__)

DATE_COLUMN = "A"
ID_COLUMN = "B"
DESCRIPTION_COLUMN = "D"
CLIENT_COLUMN = "G"
AMOUNT_COLUMN = "J"

# Only rows whose description carries this marker are invoice payments; the
# export also lists withdrawals, fees and other transaction types.
INVOICE_MARKER = "Invoice"

_NOISE = re.compile(r"[,$€£]")


class ParsedAmount(NamedTuple):
    value: Optional[float]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RowIssue:
    row_number: Optional[int]
    reason: str


@dataclass(frozen=True)
class ExtractionResult:
    payments: Sequence[Payment]
    issues: Sequence[RowIssue]
    # set when a newer upload replaced this one before it was applied
    discarded: bool = False

    @property
    def skipped(self) -> int:
        return len(self.issues)


def parse_amount(value: Any) -> ParsedAmount:
    """Parse a cell value into a finite float, tolerating export formatting."""

    if isinstance(value, bool) or value is None:
        return ParsedAmount(None, f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        negative = text.startswith("(") and text.endswith(")")
        if negative:
            text = text[1:-1]
        cleaned = _NOISE.sub("", text).strip()
        try:
            number = float(cleaned)
        except ValueError:
            return ParsedAmount(None, f"not a number: {value!r}")
        if negative:
            number = -number
    if not math.isfinite(number):
        return ParsedAmount(None, f"not a finite number: {value!r}")
    return ParsedAmount(number)


def _text(cell: Optional[Cell]) -> str:
    if cell is None or cell.v is None:
        return ""
    value = cell.v
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _formatted(cell: Optional[Cell]) -> str:
    if cell is None:
        return ""
    if cell.w is not None:
        return cell.w
    return "" if cell.v is None else str(cell.v)


def parse_row(row: Mapping[str, Cell], row_number: Optional[int] = None) -> Optional[Payment]:
    """
    Return the payment described by ``row`` or ``None`` when the row is not
    an invoice payment.

    Raises :class:`ParseError` when the row is an invoice payment but its
    amount or id cannot be used.
    """

    client = _text(row.get(CLIENT_COLUMN))
    if not client:
        return None

    description = row.get(DESCRIPTION_COLUMN)
    title = description.v if description is not None else None
    if not isinstance(title, str) or INVOICE_MARKER not in title:
        return None

    amount_cell = row.get(AMOUNT_COLUMN)
    parsed = parse_amount(amount_cell.v if amount_cell is not None else None)
    if not parsed.ok:
        raise ParseError(f"invalid amount ({parsed.error})", row_number)

    payment_id = _text(row.get(ID_COLUMN))
    if not payment_id:
        raise ParseError("missing payment id", row_number)

    return Payment(
        client=client,
        date=_formatted(row.get(DATE_COLUMN)),
        amount=parsed.value,
        id=payment_id,
    )


def extract_payments(rows: Iterable[Mapping[str, Cell]]) -> ExtractionResult:
    """Parse every row in order, keeping invoice payments and noting bad rows."""

    payments: List[Payment] = []
    issues: List[RowIssue] = []
    for index, row in enumerate(rows):
        row_number = index + FIRST_DATA_ROW
        try:
            payment = parse_row(row, row_number)
        except ParseError as exc:
            log.warning("Skipping row %d: %s", row_number, exc.reason)
            issues.append(RowIssue(row_number, exc.reason))
            continue
        if payment is None:
            if row:
                log.debug("Row %d is not an invoice payment", row_number)
            continue
        payments.append(payment)
    log.debug("Extracted %d payments, skipped %d rows", len(payments), len(issues))
    return ExtractionResult(payments=tuple(payments), issues=tuple(issues))
