"""Exceptions raised while loading exports and editing settings."""

from __future__ import annotations

from typing import Optional


class LedgerError(Exception):
    """Base class for all invoice ledger errors."""


class InputTypeError(LedgerError):
    """The uploaded file does not declare a supported content type."""


class InputReadError(LedgerError):
    """The uploaded file is missing or could not be read as a spreadsheet."""


class SettingsError(LedgerError):
    """Persisted settings are unreadable or an edit carried an invalid value."""


class ParseError(LedgerError):
    """A single export row could not be turned into a payment."""

    def __init__(self, reason: str, row_number: Optional[int] = None) -> None:
        self.reason = reason
        self.row_number = row_number
        location = f"row {row_number}: " if row_number is not None else ""
        super().__init__(f"{location}{reason}")
