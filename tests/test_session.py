import pytest

from invoice_ledger import session as session_module
from invoice_ledger.errors import InputTypeError
from invoice_ledger.loader import read_sheet
from invoice_ledger.models import Settings
from invoice_ledger.session import LedgerSession
from invoice_ledger.settings_store import SettingsForm, SettingsStore, TaxField


@pytest.fixture
def store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


def test_session_loads_settings_from_store(store):
    store.save(Settings(conversion_rate=0.5))
    assert LedgerSession(store=store).settings.conversion_rate == 0.5


def test_upload_replaces_payments(store, write_export):
    session = LedgerSession(store=store)

    result = session.upload(write_export())

    assert [p.id for p in session.payments] == ["101", "103", "104"]
    assert not result.discarded
    assert result.skipped == 0
    assert session.clients() == ["Acme", "Globex"]
    rows, totals = session.payment_table()
    assert len(rows) == 3
    assert totals.total_local == pytest.approx(1150.0)
    assert [c.name for c in session.client_table()] == ["Acme", "Globex"]


def test_failed_upload_keeps_previous_payments(store, write_export, tmp_path):
    session = LedgerSession(store=store)
    session.upload(write_export())
    bad = tmp_path / "export.pdf"
    bad.write_bytes(b"%PDF")

    with pytest.raises(InputTypeError):
        session.upload(bad)

    assert len(session.payments) == 3


def test_rows_with_bad_amounts_are_reported(store, write_export):
    rows = [
        ["Jan 5, 2024", "201", "Fixed Price", "Invoice #1", "", "", "Acme", "", "", "12.00"],
        ["Jan 6, 2024", "202", "Fixed Price", "Invoice #2", "", "", "Acme", "", "", "twelve"],
    ]
    session = LedgerSession(store=store)

    result = session.upload(write_export(rows))

    assert [p.id for p in session.payments] == ["201"]
    assert result.skipped == 1
    assert session.issues[0].row_number == 3


def test_stale_upload_is_discarded(store, write_export, monkeypatch):
    first = write_export(name="first.csv")
    second = write_export(
        [["Feb 1, 2024", "900", "Hourly", "Invoice #9", "", "", "Umbrella", "", "", "5"]],
        name="second.csv",
    )
    session = LedgerSession(store=store)
    calls = []

    def slow_read(path, content_type=None):
        calls.append(path.name)
        if path.name == "first.csv":
            # a second upload starts while the first one is still reading
            session.upload(second)
        return read_sheet(path, content_type)

    monkeypatch.setattr(session_module, "read_sheet", slow_read)
    result = session.upload(first)

    assert result.discarded
    assert calls == ["first.csv", "second.csv"]
    assert [p.id for p in session.payments] == ["900"]
    assert session.source == second


def test_settings_edit_persists_and_notifies(store, write_export):
    session = LedgerSession(store=store)
    session.upload(write_export())
    seen = []
    session.subscribe(seen.append)

    result = session.apply_settings_edit(
        SettingsForm(
            conversion_rate="0.9",
            local_currency_symbol="€",
            tax_fields=[TaxField("Acme", "10"), TaxField(None, "5")],
        )
    )

    assert len(result.warnings) == 1
    assert store.load().tax_deductions == {"Acme": 0.1}
    (ledger,) = seen
    acme = ledger.clients[0]
    assert acme.total_amount_euro == pytest.approx(135.0)
    assert acme.total_after_tax == pytest.approx(121.5)


def test_upload_notifies_subscribers(store, write_export):
    session = LedgerSession(store=store)
    seen = []
    session.subscribe(seen.append)

    session.upload(write_export())

    assert len(seen) == 1
    assert len(seen[0].rows) == 3
