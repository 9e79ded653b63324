"""Session state shared by the presentation layer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .extract import ExtractionResult, RowIssue, extract_payments
from .grid import normalize_cells
from .loader import read_sheet
from .models import ClientSummary, Ledger, Payment, PaymentRow, Settings, TotalsRow
from .settings_store import SettingsEditResult, SettingsForm, SettingsStore
from .summary import build_client_summary, build_ledger, build_payment_rows, build_totals, list_clients

log = logging.getLogger(__name__)

Listener = Callable[[Ledger], None]


@dataclass
class LedgerSession:
    """
    Owns the uploaded payments and the active settings.

    Responsibilities:
    • Load settings once from the store and persist every edit.
    • Replace the payment list wholesale on each successful upload.
    • Notify subscribers with a fresh :class:`Ledger` after every change.
    """

    store: SettingsStore
    settings: Optional[Settings] = None
    payments: List[Payment] = field(default_factory=list)
    issues: List[RowIssue] = field(default_factory=list)
    source: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = self.store.load()
        self._lock = threading.Lock()
        self._generation = 0
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        if not self._listeners:
            return
        ledger = self.ledger()
        for listener in self._listeners:
            listener(ledger)

    def upload(self, path: str | Path, content_type: Optional[str] = None) -> ExtractionResult:
        """
        Read an export and replace the current payments with its contents.

        Read and type errors propagate and leave the previous payments in
        place. If another upload starts before this one finishes reading, this
        result is not applied and comes back marked ``discarded``.
        """

        path = Path(path)
        with self._lock:
            self._generation += 1
            generation = self._generation

        cells = read_sheet(path, content_type)
        result = extract_payments(normalize_cells(cells))

        with self._lock:
            if generation != self._generation:
                log.info("Discarding stale upload of %s", path.name)
                return replace(result, discarded=True)
            self.payments = list(result.payments)
            self.issues = list(result.issues)
            self.source = path
        log.info(
            "Loaded %d payments from %s (%d rows skipped)",
            len(result.payments),
            path.name,
            result.skipped,
        )
        self._notify()
        return result

    def apply_settings_edit(self, form: SettingsForm) -> SettingsEditResult:
        with self._lock:
            result = self.store.apply_edit(self.settings, form)
        self._notify()
        return result

    def clients(self) -> List[str]:
        return list_clients(self.payments)

    def payment_table(self) -> Tuple[List[PaymentRow], TotalsRow]:
        return build_payment_rows(self.payments, self.settings), build_totals(self.payments, self.settings)

    def client_table(self) -> Sequence[ClientSummary]:
        return build_client_summary(self.payments, self.settings)

    def ledger(self) -> Ledger:
        return build_ledger(self.payments, self.settings)
