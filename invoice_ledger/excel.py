from __future__ import annotations

from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Font

from .formatting import client_headers, payment_headers
from .models import Ledger, Settings


def _write_header(ws, headers: Sequence[str], bold) -> None:
    ws.append(list(headers))
    for cell in ws[1]:
        cell.font = bold


def write_workbook(output_path: Path, ledger: Ledger, settings: Settings) -> None:
    """
    Write the payment ledger and client summary to ``output_path`` as two
    sheets, ``Payments`` and ``Clients``.
    """

    symbol = settings.local_currency_symbol
    bold = Font(bold=True)
    wb = Workbook()

    payments_ws = wb.active
    payments_ws.title = "Payments"
    _write_header(payments_ws, payment_headers(symbol), bold)
    for row in ledger.rows:
        payments_ws.append(
            [
                row.client,
                row.date,
                row.amount,
                row.amount_local,
                row.taxed_amount,
                row.amount_local_after_tax,
            ]
        )
    totals = ledger.totals
    payments_ws.append(
        ["Total", None, None, totals.total_local, totals.total_tax, totals.total_local_after_tax]
    )
    for cell in payments_ws[payments_ws.max_row]:
        cell.font = bold

    clients_ws = wb.create_sheet("Clients")
    _write_header(clients_ws, client_headers(symbol), bold)
    for client in ledger.clients:
        clients_ws.append(
            [client.name, client.total_amount_euro, client.tax_amount, client.total_after_tax]
        )

    for ws in (payments_ws, clients_ws):
        for row in ws.iter_rows(min_row=2):
            for cell in row:
                if isinstance(cell.value, float):
                    cell.number_format = "#,##0.00"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
