"""Persist the user's conversion and tax settings between sessions."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .errors import SettingsError
from .models import Settings

log = logging.getLogger(__name__)

SETTINGS_KEY = "invoice-ledger:settings"
SETTINGS_ENV_VAR = "INVOICE_LEDGER_SETTINGS"


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".invoice_ledger" / "settings.json"


@dataclass(frozen=True)
class TaxField:
    """One per-client tax input: the client it belongs to and its percent text."""

    client: Optional[str]
    percent: str


@dataclass(frozen=True)
class SettingsForm:
    conversion_rate: str
    local_currency_symbol: str
    tax_fields: Sequence[TaxField] = field(default_factory=tuple)


@dataclass(frozen=True)
class SettingsEditResult:
    settings: Settings
    warnings: Sequence[str] = field(default_factory=tuple)


def _parse_percent(text: str) -> Optional[float]:
    try:
        percent = float(str(text).strip())
    except ValueError:
        return None
    if not 0 <= percent <= 100:
        return None
    return percent


class SettingsStore:
    """Keyed JSON record holding a single :class:`Settings` value."""

    def __init__(self, path: str | Path | None = None, key: str = SETTINGS_KEY) -> None:
        self.path = Path(path) if path is not None else default_settings_path()
        self.key = key

    def _read_records(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            records = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise SettingsError(f"Could not read settings from {self.path}: {exc}") from exc
        if not isinstance(records, dict):
            raise SettingsError(f"Unexpected settings file layout in {self.path}")
        return records

    def load(self) -> Settings:
        """Return the stored settings, writing the defaults on first use."""

        record = self._read_records().get(self.key)
        if record is None:
            settings = Settings()
            log.info("No stored settings at %s, writing defaults", self.path)
            self.save(settings)
            return settings
        try:
            return Settings.from_dict(record)
        except (AttributeError, TypeError, ValueError) as exc:
            raise SettingsError(f"Stored settings are invalid: {exc}") from exc

    def save(self, settings: Settings) -> None:
        """Replace the stored record with ``settings``."""

        records = self._read_records()
        records[self.key] = settings.to_dict()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Could not save settings to {self.path}: {exc}") from exc
        log.debug("Saved settings to %s", self.path)

    def apply_edit(self, settings: Settings, form: SettingsForm) -> SettingsEditResult:
        """
        Merge a submitted settings form into ``settings`` and persist it.

        Tax percentages are stored as fractions. Clients missing from the form
        keep their current deduction. Tax fields that cannot be matched to a
        client, or whose percent is not a number between 0 and 100, are skipped
        with a warning.
        """

        try:
            rate = float(str(form.conversion_rate).strip())
        except ValueError as exc:
            raise SettingsError(f"Invalid conversion rate: {form.conversion_rate!r}") from exc

        warnings: List[str] = []
        deductions: Dict[str, float] = {}
        for tax_field in form.tax_fields:
            client = (tax_field.client or "").strip()
            if not client:
                message = "No client name specified for tax deduction field"
                log.warning(message)
                warnings.append(message)
                continue
            percent = _parse_percent(tax_field.percent)
            if percent is None:
                message = f"Ignoring tax deduction for {client}: {tax_field.percent!r} is not a percentage"
                log.warning(message)
                warnings.append(message)
                continue
            deductions[client] = percent / 100

        edited = replace(
            settings,
            conversion_rate=rate,
            local_currency_symbol=form.local_currency_symbol,
            tax_deductions={**settings.tax_deductions, **deductions},
        )
        self.save(edited)
        settings.conversion_rate = edited.conversion_rate
        settings.local_currency_symbol = edited.local_currency_symbol
        settings.tax_deductions = edited.tax_deductions
        return SettingsEditResult(settings=settings, warnings=tuple(warnings))
