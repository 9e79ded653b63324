import zipfile
from datetime import datetime

import pytest
from openpyxl import Workbook

from invoice_ledger.errors import InputReadError, InputTypeError
from invoice_ledger.loader import XLSX_CONTENT_TYPE, guess_content_type, read_sheet
from invoice_ledger.models import Cell


def test_read_csv_exposes_cells_by_address(write_export):
    cells = read_sheet(write_export())

    assert cells["A1"] == Cell("Date", "Date")
    assert cells["D2"] == Cell("Invoice for Milestone 1", "Invoice for Milestone 1")
    assert cells["J4"].v == "1,000.00"
    assert "E2" not in cells
    assert cells["!ref"].v == "A1:J5"


def test_content_type_is_guessed_from_suffix(tmp_path):
    assert guess_content_type(tmp_path / "a.CSV") == "text/csv"
    assert guess_content_type(tmp_path / "a.xlsx") == XLSX_CONTENT_TYPE


def test_other_file_types_are_rejected_before_reading(tmp_path):
    path = tmp_path / "export.txt"
    path.write_text("Date,Ref ID\n", encoding="utf-8")

    with pytest.raises(InputTypeError, match="Incorrect file type"):
        read_sheet(path)
    with pytest.raises(InputTypeError):
        read_sheet(tmp_path / "missing.csv", content_type="application/pdf")


def test_declared_content_type_overrides_suffix(tmp_path):
    path = tmp_path / "upload.bin"
    path.write_text('Date\n"Jan 1, 2024"\n', encoding="utf-8")

    cells = read_sheet(path, content_type="text/csv")

    assert cells["A2"].w == "Jan 1, 2024"


def test_missing_file_raises_read_error(tmp_path):
    with pytest.raises(InputReadError):
        read_sheet(tmp_path / "missing.csv")


def test_corrupt_workbook_raises_read_error(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip file")

    with pytest.raises(InputReadError):
        read_sheet(path)


def test_read_xlsx_formats_dates(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    ws.append(["Date", "Ref ID"])
    ws.append([datetime(2024, 1, 5), 101])
    path = tmp_path / "export.xlsx"
    wb.save(str(path))

    cells = read_sheet(path)

    assert cells["A2"].w == "2024-01-05"
    assert cells["B2"].v == 101
    assert cells["!ref"].v == "A1:B2"


def test_read_xlsx_falls_back_to_first_sheet(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.title = "Transactions"
    ws["G2"] = "Acme"
    wb.create_sheet("Notes")["G2"] = "ignored"
    path = tmp_path / "export.xlsx"
    wb.save(str(path))

    assert read_sheet(path)["G2"].v == "Acme"


def test_zip_that_is_not_a_workbook_raises_read_error(tmp_path):
    path = tmp_path / "export.xlsx"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("hello.txt", "hello")

    with pytest.raises(InputReadError, match="Could not read export.xlsx"):
        read_sheet(path)
