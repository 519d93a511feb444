"""
Tabular export

Writes the full transaction set (every lifecycle state) to CSV and reads
it back, and shapes monthly aggregates into a frame for reporting.
"""
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, List, Sequence, Union

import pandas as pd

from .aggregator import MonthlyAggregate
from .categorization_orchestrator import Confidence
from .errors import IngestionError
from .transaction_store import Transaction

EXPORT_COLUMNS = [
    'id', 'date', 'description', 'amount', 'category',
    'confidence', 'excluded', 'approved', 'isSplit',
]

MONTHLY_COLUMNS = [
    'month', 'income', 'cogs', 'opex', 'funding_in', 'funding_out',
    'net_cash_flow', 'cash_balance',
]

_TRUE_VALUES = {'true', '1', 'yes'}


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            'id': t.id,
            'date': t.date,
            'description': t.description,
            'amount': str(t.amount),
            'category': t.category,
            'confidence': t.confidence.value,
            'excluded': t.excluded,
            'approved': t.approved,
            'isSplit': t.is_split,
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_transactions(transactions: Iterable[Transaction], path: Union[str, Path]) -> int:
    """
    Write transactions to CSV in the stable export column order

    Returns:
        Number of rows written
    """
    df = transactions_to_frame(transactions)
    df.to_csv(path, index=False)
    return len(df)


def _as_bool(value: str) -> bool:
    return str(value).strip().lower() in _TRUE_VALUES


def load_exported_transactions(path: Union[str, Path]) -> List[Transaction]:
    """
    Read a file written by export_transactions

    Raises:
        IngestionError: a column is missing or an amount is not a number
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [c for c in EXPORT_COLUMNS if c not in df.columns]
    if missing:
        raise IngestionError(f"Export file is missing columns: {', '.join(missing)}")

    transactions = []
    for row in df.to_dict(orient='records'):
        try:
            amount = Decimal(row['amount'])
        except InvalidOperation:
            raise IngestionError(f"Invalid amount for transaction {row['id']}: {row['amount']!r}") from None
        transactions.append(Transaction(
            id=row['id'],
            date=row['date'],
            description=row['description'],
            amount=amount,
            category=row['category'],
            confidence=Confidence(row['confidence']),
            approved=_as_bool(row['approved']),
            excluded=_as_bool(row['excluded']),
            is_split=_as_bool(row['isSplit']),
        ))
    return transactions


def monthly_frame(months: Sequence[MonthlyAggregate]) -> pd.DataFrame:
    """Monthly aggregates as a frame, one row per month in ascending order"""
    rows = [
        {column: getattr(m, column) for column in MONTHLY_COLUMNS}
        for m in months
    ]
    return pd.DataFrame(rows, columns=MONTHLY_COLUMNS)
