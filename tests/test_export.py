# ==============================================================================
# EXPORT TESTS
# ==============================================================================
# Tests for CSV reports
# ==============================================================================

import csv
import io

from conftest import make_transaction
from order_desk.services.export_service import CSV_HEADER, transactions_to_csv


def read_rows(content: str):
    return list(csv.reader(io.StringIO(content)))


class TestTransactionsToCsv:
    """Tests for CSV rendering."""

    def test_header_only_when_empty(self):
        assert read_rows(transactions_to_csv([])) == [CSV_HEADER]

    def test_rows_newest_first_with_stored_values(self):
        transactions = [
            make_transaction("t1", minutes=0),
            make_transaction("t2", minutes=5, usd_value="12.345", status="completed"),
        ]

        rows = read_rows(transactions_to_csv(transactions))

        assert [row[0] for row in rows[1:]] == ["t2", "t1"]
        header = rows[0]
        newest = dict(zip(header, rows[1]))
        assert newest["USD Value"] == "12.345"
        assert newest["Status"] == "completed"
        assert newest["Created At"] == "2024-05-01T12:05:00+00:00"

    def test_values_with_commas_are_quoted(self):
        transaction = make_transaction(username="Doe, Jane")

        rows = read_rows(transactions_to_csv([transaction]))

        assert rows[1][1] == "Doe, Jane"

    def test_missing_values_are_blank(self):
        transaction = make_transaction(phone=None, inr_value=None)

        row = dict(zip(CSV_HEADER, read_rows(transactions_to_csv([transaction]))[1]))

        assert row["Phone"] == ""
        assert row["INR Value"] == ""
