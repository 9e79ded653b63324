"""Compute the payment ledger and client summary from parsed payments."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import ClientSummary, Ledger, Payment, PaymentRow, Settings, TotalsRow


def list_clients(payments: Iterable[Payment]) -> List[str]:
    """Return distinct client names in the order they first appear."""

    names: Dict[str, None] = {}
    for payment in payments:
        names.setdefault(payment.client, None)
    return list(names)


def build_payment_rows(payments: Iterable[Payment], settings: Settings) -> List[PaymentRow]:
    rate = settings.conversion_rate
    rows: List[PaymentRow] = []
    for payment in payments:
        tax_fraction = settings.tax_fraction(payment.client)
        amount_local = payment.amount * rate
        after_tax = payment.amount * (1 - tax_fraction) * rate
        rows.append(
            PaymentRow(
                client=payment.client,
                date=payment.date,
                id=payment.id,
                amount=round(payment.amount, 2),
                amount_local=round(amount_local, 2),
                tax_fraction=tax_fraction,
                taxed_amount=round(amount_local - after_tax, 2),
                amount_local_after_tax=round(after_tax, 2),
            )
        )
    return rows


def build_totals(payments: Iterable[Payment], settings: Settings) -> TotalsRow:
    """Sum the exact per-payment amounts and round once at the end."""

    rate = settings.conversion_rate
    total_local = 0.0
    total_after_tax = 0.0
    for payment in payments:
        total_local += payment.amount * rate
        total_after_tax += payment.amount * (1 - settings.tax_fraction(payment.client)) * rate
    return TotalsRow(
        total_local=round(total_local, 2),
        total_tax=round(total_local - total_after_tax, 2),
        total_local_after_tax=round(total_after_tax, 2),
    )


def build_client_summary(payments: Sequence[Payment], settings: Settings) -> List[ClientSummary]:
    totals: Dict[str, float] = {}
    for payment in payments:
        totals[payment.client] = totals.get(payment.client, 0.0) + payment.amount

    rows: List[ClientSummary] = []
    for name, dollars in totals.items():
        tax_fraction = settings.tax_fraction(name)
        euro = dollars * settings.conversion_rate
        tax_amount = euro * tax_fraction
        rows.append(
            ClientSummary(
                name=name,
                total_amount_dollars=round(dollars, 2),
                total_amount_euro=round(euro, 2),
                tax_fraction=tax_fraction,
                tax_amount=round(tax_amount, 2),
                total_after_tax=round(euro - tax_amount, 2),
            )
        )
    return rows


def build_ledger(payments: Sequence[Payment], settings: Settings) -> Ledger:
    return Ledger(
        rows=tuple(build_payment_rows(payments, settings)),
        totals=build_totals(payments, settings),
        clients=tuple(build_client_summary(payments, settings)),
    )
