import csv

import pytest


EXPORT_HEADER = [
    "Date",
    "Ref ID",
    "Type",
    "Description",
    "Agency",
    "Freelancer",
    "Team",
    "Account Name",
    "PO",
    "Amount",
]

EXPORT_ROWS = [
    ["Jan 5, 2024", "101", "Fixed Price", "Invoice for Milestone 1", "", "", "Acme", "", "", "100.00"],
    ["Jan 6, 2024", "102", "Withdrawal", "Withdrawal Fee", "", "", "Acme", "", "", "-2.00"],
    ["Jan 7, 2024", "103", "Hourly", "Invoice #55", "", "", "Globex", "", "", "1,000.00"],
    ["Jan 8, 2024", "104", "Fixed Price", "Invoice #56", "", "", "Acme", "", "", "50"],
]


@pytest.fixture
def write_export(tmp_path):
    def _write(rows=None, name="export.csv"):
        path = tmp_path / name
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(EXPORT_HEADER)
            writer.writerows(EXPORT_ROWS if rows is None else rows)
        return path

    return _write
