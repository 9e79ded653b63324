"""Data models used by the invoice ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence


DEFAULT_CONVERSION_RATE = 1.0
DEFAULT_CURRENCY_SYMBOL = "€"


@dataclass(frozen=True)
class Cell:
    """A single spreadsheet cell: raw value ``v`` and formatted text ``w``."""

    v: Any
    w: Optional[str] = None


@dataclass(frozen=True)
class Payment:
    """Represents one invoice payment line accepted from the export."""

    client: str
    date: str
    amount: float
    id: str


@dataclass
class Settings:
    """User configurable conversion rate, currency symbol and tax fractions."""

    conversion_rate: float = DEFAULT_CONVERSION_RATE
    local_currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    tax_deductions: Dict[str, float] = field(default_factory=dict)

    def tax_fraction(self, client: str) -> float:
        return self.tax_deductions.get(client) or 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conversionRate": self.conversion_rate,
            "localCurrencySymbol": self.local_currency_symbol,
            "taxDeductions": dict(self.tax_deductions),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        rate = data.get("conversionRate", DEFAULT_CONVERSION_RATE)
        symbol = data.get("localCurrencySymbol", DEFAULT_CURRENCY_SYMBOL)
        deductions = data.get("taxDeductions") or {}
        return cls(
            conversion_rate=float(rate),
            local_currency_symbol=str(symbol),
            tax_deductions={str(name): float(value) for name, value in deductions.items()},
        )


@dataclass(frozen=True)
class PaymentRow:
    client: str
    date: str
    id: str
    amount: float
    amount_local: float
    tax_fraction: float
    taxed_amount: float
    amount_local_after_tax: float


@dataclass(frozen=True)
class TotalsRow:
    total_local: float
    total_tax: float
    total_local_after_tax: float


@dataclass(frozen=True)
class ClientSummary:
    name: str
    total_amount_dollars: float
    total_amount_euro: float
    tax_fraction: float
    tax_amount: float
    total_after_tax: float


@dataclass(frozen=True)
class Ledger:
    """Everything the presentation layer needs to draw both tables."""

    rows: Sequence[PaymentRow]
    totals: TotalsRow
    clients: Sequence[ClientSummary]
