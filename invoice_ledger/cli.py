"""Command line entry point for rendering the invoice payment ledger."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import LedgerError
from .excel import write_workbook
from .formatting import format_ledger
from .logging_config import configure_logging
from .session import LedgerSession
from .settings_store import SettingsForm, SettingsStore, TaxField


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Summarise invoice payments from a freelancing platform export, "
            "converted to the local currency and net of per-client tax."
        )
    )
    parser.add_argument(
        "export_path",
        help="Path to the CSV or XLSX transaction export.",
    )
    parser.add_argument(
        "--content-type",
        help="Declared content type of the export (guessed from the file name by default).",
    )
    parser.add_argument(
        "--settings-file",
        type=Path,
        help=(
            "JSON file holding the saved settings. Defaults to $INVOICE_LEDGER_SETTINGS "
            "or ~/.invoice_ledger/settings.json."
        ),
    )
    parser.add_argument(
        "--conversion-rate",
        help="Multiplier from dollars to the local currency (saved for later runs).",
    )
    parser.add_argument(
        "--currency",
        help="Local currency symbol (saved for later runs).",
    )
    parser.add_argument(
        "--tax",
        action="append",
        default=[],
        metavar="CLIENT=PERCENT",
        help="Tax deduction percentage for a client; may be repeated (saved for later runs).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the tables to the specified file instead of printing to stdout.",
    )
    parser.add_argument(
        "--excel-output",
        type=Path,
        help="Also write both tables to an Excel workbook at this path.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress and skipped rows to stderr.",
    )
    return parser.parse_args(argv)


def _tax_fields(values: Iterable[str]) -> List[TaxField]:
    fields: List[TaxField] = []
    for value in values:
        client, sep, percent = value.rpartition("=")
        if not sep:
            fields.append(TaxField(client=None, percent=value))
        else:
            fields.append(TaxField(client=client, percent=percent))
    return fields


def _settings_form(args: argparse.Namespace, session: LedgerSession) -> Optional[SettingsForm]:
    if args.conversion_rate is None and args.currency is None and not args.tax:
        return None
    settings = session.settings
    return SettingsForm(
        conversion_rate=(
            args.conversion_rate if args.conversion_rate is not None else str(settings.conversion_rate)
        ),
        local_currency_symbol=(
            args.currency if args.currency is not None else settings.local_currency_symbol
        ),
        tax_fields=_tax_fields(args.tax),
    )


def run(argv: Iterable[str] | None = None) -> str:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        session = LedgerSession(store=SettingsStore(args.settings_file))
        result = session.upload(Path(args.export_path), args.content_type)
        form = _settings_form(args, session)
        if form is not None:
            session.apply_settings_edit(form)
    except LedgerError as exc:
        raise SystemExit(str(exc))

    if not session.payments:
        if result.skipped:
            raise SystemExit(
                f"No usable invoice payments: skipped {result.skipped} row(s) with unreadable amounts or ids."
            )
        raise SystemExit("No invoice payments found in the export.")

    output_text = format_ledger(session.ledger(), session.settings.local_currency_symbol) + "\n"
    if result.skipped:
        output_text += f"\nSkipped {result.skipped} row(s) with unreadable amounts or ids.\n"

    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)

    if args.excel_output:
        try:
            write_workbook(args.excel_output, session.ledger(), session.settings)
        except OSError as exc:
            raise SystemExit(f"Failed to write Excel workbook: {exc}")
    return output_text


def main() -> None:
    run()


if __name__ == "__main__":
    main()
