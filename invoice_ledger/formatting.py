"""Utility helpers for turning ledger objects into text tables."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from .models import ClientSummary, Ledger, PaymentRow, TotalsRow


def kebab_case(text: str) -> str:
    text = re.sub(r"([a-z])([A-Z])", r"\1-\2", text)
    text = re.sub(r"[\s_]+", "-", text)
    return text.lower()


def tax_field_id(client: str) -> str:
    """Identifier for the per-client tax input of a settings form."""

    return "tax-deduction-" + kebab_case(client)


def payment_headers(symbol: str) -> List[str]:
    return [
        "Client",
        "Date",
        "Paid ($)",
        f"Paid ({symbol})",
        f"Taxed ({symbol})",
        f"Paid ({symbol}) after tax",
    ]


def client_headers(symbol: str) -> List[str]:
    return [
        "Client",
        f"Total ({symbol})",
        f"Tax ({symbol})",
        f"After Tax ({symbol})",
    ]


def _column_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Sequence[int]:
    widths = [len(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))
    return widths


def _format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = _column_widths(headers, rows)

    def format_row(row: Sequence[str]) -> str:
        return " | ".join(cell.ljust(widths[idx]) for idx, cell in enumerate(row))

    header_line = format_row(headers)
    separator = "-+-".join("-" * w for w in widths)
    body = "\n".join(format_row(row) for row in rows)
    return "\n".join([header_line, separator, body]) if body else "\n".join(
        [header_line, separator]
    )


def format_payment_table(rows: Iterable[PaymentRow], totals: TotalsRow, symbol: str) -> str:
    data_rows = [
        [
            row.client,
            row.date,
            f"{row.amount:,.2f}",
            f"{row.amount_local:,.2f}",
            f"{row.taxed_amount:,.2f}",
            f"{row.amount_local_after_tax:,.2f}",
        ]
        for row in rows
    ]
    data_rows.append(
        [
            "Total",
            "",
            "",
            f"{totals.total_local:,.2f}",
            f"{totals.total_tax:,.2f}",
            f"{totals.total_local_after_tax:,.2f}",
        ]
    )
    return _format_table(payment_headers(symbol), data_rows)


def format_client_table(clients: Iterable[ClientSummary], symbol: str) -> str:
    data_rows = [
        [
            client.name,
            f"{client.total_amount_euro:,.2f}",
            f"{client.tax_amount:,.2f}",
            f"{client.total_after_tax:,.2f}",
        ]
        for client in clients
    ]
    return _format_table(client_headers(symbol), data_rows)


def format_ledger(ledger: Ledger, symbol: str) -> str:
    return "\n".join(
        [
            "Payments",
            format_payment_table(ledger.rows, ledger.totals, symbol),
            "",
            "Clients",
            format_client_table(ledger.clients, symbol),
        ]
    )
