from decimal import Decimal

import pytest

from founder_finance.core.errors import IngestionError
from founder_finance.core.export import EXPORT_COLUMNS, MONTHLY_COLUMNS, load_exported_transactions, monthly_frame
from founder_finance.core.session import FinanceSession


def test_round_trip_keeps_every_field(session, tmp_path):
    session.add_manual_transaction("2024-01-10", 'Acme, "Widgets" Inc', "-1,250.50")
    approved = session.add_manual_transaction("2024-01-11", "NA", "99.95")
    session.store.approve(approved.id)
    excluded = session.add_manual_transaction("Jan 12, 2024", "Stripe fee", "-3.20")
    session.store.toggle_excluded(excluded.id)
    split_target = session.add_manual_transaction("2024-01-13", "Costco", "-100")
    session.split(split_target.id, [{"category": "Insurance", "amount": "40"}])

    path = tmp_path / "financial_data.csv"
    rows = session.export(path)

    restored = FinanceSession()
    restored.load_export(path)

    assert rows == len(session.store) == 5
    assert list(restored.store) == list(session.store)


def test_header_order(session, tmp_path):
    path = tmp_path / "out.csv"
    session.export(path)

    assert path.read_text().splitlines()[0] == ",".join(EXPORT_COLUMNS)
    assert EXPORT_COLUMNS[-1] == "isSplit"


def test_missing_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("id,date\n1,2024-01-01\n")

    with pytest.raises(IngestionError, match="missing columns"):
        load_exported_transactions(path)


def test_invalid_amount(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(",".join(EXPORT_COLUMNS) + "\nabc,2024-01-01,Thing,lots,Insurance,high,False,False,False\n")

    with pytest.raises(IngestionError, match="Invalid amount"):
        load_exported_transactions(path)


def test_monthly_frame(session):
    txn = session.add_manual_transaction("2024-01-10", "Consulting", "1000")
    session.store.approve(txn.id)

    df = monthly_frame(session.monthly_aggregates())

    assert list(df.columns) == MONTHLY_COLUMNS
    assert df.loc[0, "month"] == "2024-01"
    assert df.loc[0, "cash_balance"] == Decimal("1000")
