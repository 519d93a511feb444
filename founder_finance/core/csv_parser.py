"""
CSV Parser for bank statement exports

Bank-agnostic: columns are resolved from header names rather than a fixed
layout. Handles a single signed amount column or a debit/credit pair.
"""
import csv
import io
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Mapping, Optional, Sequence

from .categorization_orchestrator import CategorizationOrchestrator
from .errors import IngestionError
from .transaction_store import MAX_DESCRIPTION_LENGTH, Transaction, new_transaction_id
from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.csv_parser')

DATE_HEADERS = ('date', 'transaction date', 'posted date', 'trans date', 'posting date')
DESCRIPTION_HEADERS = ('description', 'memo', 'transaction description', 'details', 'payee')
AMOUNT_HEADERS = ('amount', 'transaction amount')
DEBIT_HEADERS = ('debit', 'withdrawal', 'withdrawals')
CREDIT_HEADERS = ('credit', 'deposit', 'deposits')

MISSING_COLUMNS = 'Missing date or description column'


def find_column(headers: Sequence[str], possible_names: Sequence[str]) -> Optional[str]:
    """
    Resolve a column by case-insensitive substring match

    Candidate names are tried in order; for each, the first header
    containing it wins.
    """
    for name in possible_names:
        for header in headers:
            if header and name.lower() in header.lower().strip():
                return header
    return None


def parse_amount(amount_str: Optional[str]) -> Optional[Decimal]:
    """Parse an amount cell to Decimal; None when it is not a finite number"""
    if amount_str is None:
        return None
    cleaned = ''.join(str(amount_str).replace('$', '').replace(',', '').split())
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


class StatementColumns:
    """Header names resolved for one file"""

    def __init__(self, headers: Sequence[str]):
        self.date = find_column(headers, DATE_HEADERS)
        self.description = find_column(headers, DESCRIPTION_HEADERS)
        self.amount = find_column(headers, AMOUNT_HEADERS)
        self.debit = find_column(headers, DEBIT_HEADERS)
        self.credit = find_column(headers, CREDIT_HEADERS)

    def row_amount(self, row: Mapping[str, str]) -> Optional[Decimal]:
        if self.amount and row.get(self.amount):
            return parse_amount(row[self.amount])
        if self.debit and self.credit:
            debit = parse_amount(row[self.debit]) if row.get(self.debit) else Decimal('0')
            credit = parse_amount(row[self.credit]) if row.get(self.credit) else Decimal('0')
            if debit is None or credit is None:
                return None
            return credit - debit
        return Decimal('0')


def parse_rows(rows: Sequence[Mapping[str, str]],
               headers: Sequence[str],
               orchestrator: CategorizationOrchestrator) -> List[Transaction]:
    """
    Turn header-named rows into pending, categorized transactions

    Rows with an empty date, a non-numeric amount or a zero amount are
    dropped without error.

    Args:
        rows: Data rows keyed by header
        headers: Header names in file order
        orchestrator: Categorizer for the session

    Returns:
        Transactions in row order

    Raises:
        IngestionError: no date or description column
    """
    columns = StatementColumns(headers)
    if not columns.date or not columns.description:
        raise IngestionError(MISSING_COLUMNS)

    transactions = []
    dropped = 0
    for row in rows:
        date_text = (row.get(columns.date) or '').strip()
        description = (row.get(columns.description) or '').strip()
        amount = columns.row_amount(row)

        if not date_text or amount is None or amount == 0:
            dropped += 1
            continue

        result = orchestrator.classify(description, amount)
        transactions.append(Transaction(
            id=new_transaction_id(),
            date=date_text,
            description=description[:MAX_DESCRIPTION_LENGTH],
            amount=amount,
            category=result.category,
            confidence=result.confidence,
        ))

    if dropped:
        logger.debug("Dropped %d of %d rows", dropped, len(rows))
    return transactions


def parse_csv_text(text: str, orchestrator: CategorizationOrchestrator) -> List[Transaction]:
    """Parse CSV text with a header row; blank lines are skipped"""
    reader = csv.DictReader(io.StringIO(text))
    headers: List[str] = list(reader.fieldnames or [])
    rows: List[Dict[str, str]] = [
        row for row in reader
        if any((value or '').strip() for value in row.values() if isinstance(value, str))
    ]
    return parse_rows(rows, headers, orchestrator)
