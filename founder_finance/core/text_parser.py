"""
Statement text parser

Pulls transactions out of loosely structured text (e.g. the visible text
of a PDF statement). A line counts when it has a recognisable date and at
least one money amount after it.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from .categorization_orchestrator import CategorizationOrchestrator
from .transaction_store import MAX_DESCRIPTION_LENGTH, Transaction, new_transaction_id
from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.text_parser')

MIN_LINE_LENGTH = 10

# Priority order; first pattern that matches a line wins
DATE_PATTERNS = (
    re.compile(r'(?<!\d)\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}(?!\d)'),   # 01/15/2024, 1-15-24
    re.compile(r'(?<!\d)\d{4}[/\-]\d{1,2}[/\-]\d{1,2}(?!\d)'),      # 2024-01-15
    re.compile(r'\b[A-Za-z]{3}\s+\d{1,2},?\s+\d{4}\b'),             # Jan 15, 2024
    re.compile(r'(?<!\d)\d{1,2}\s+[A-Za-z]{3}\s+\d{4}\b'),          # 15 Jan 2024
)

_NUMBER = r'(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}'
# A hyphen glued to a word ("Purchase-12.34") is still a minus sign
PLAIN_AMOUNT = re.compile(
    r'(?:(?<=[A-Za-z])(-)|(?<![\w.,])(-)?)\$?\s?(-)?(' + _NUMBER + r')(?!\d)'
)
PAREN_AMOUNT = re.compile(r'\(\s*\$?\s*(' + _NUMBER + r')\s*\)')

# (start, end, value) of an amount inside a string
AmountMatch = Tuple[int, int, Decimal]


def match_date(line: str) -> Optional[re.Match]:
    for pattern in DATE_PATTERNS:
        match = pattern.search(line)
        if match:
            return match
    return None


def _to_decimal(number: str) -> Optional[Decimal]:
    try:
        return Decimal(number.replace(',', ''))
    except InvalidOperation:
        return None


def find_amounts(text: str) -> List[AmountMatch]:
    """
    All money amounts in a string, in order of position

    Parenthesised amounts are negative. A plain match overlapping a
    parenthesised one is ignored.
    """
    found: List[AmountMatch] = []
    for m in PAREN_AMOUNT.finditer(text):
        value = _to_decimal(m.group(1))
        if value is not None:
            found.append((m.start(), m.end(), -value))

    taken = [(start, end) for start, end, _ in found]
    for m in PLAIN_AMOUNT.finditer(text):
        if any(m.start() < end and start < m.end() for start, end in taken):
            continue
        value = _to_decimal(m.group(4))
        if value is None:
            continue
        if m.group(1) or m.group(2) or m.group(3):
            value = -value
        found.append((m.start(), m.end(), value))

    found.sort(key=lambda item: item[0])
    return found


def _strip_spans(text: str, spans: List[AmountMatch]) -> str:
    pieces = []
    cursor = 0
    for start, end, _ in spans:
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    cleaned = ' '.join(pieces).replace('$', '').replace(',', '')
    return ' '.join(cleaned.split())


def parse_line(line: str) -> Optional[Tuple[str, str, Decimal]]:
    """
    Extract (date text, description, amount) from one line

    The amount is the last one on the line, so a trailing figure such as a
    running balance takes priority over earlier ones.

    Returns:
        The parsed triple, or None when the line does not hold a transaction
    """
    line = line.strip()
    if len(line) < MIN_LINE_LENGTH:
        return None

    date_match = match_date(line)
    if date_match is None:
        return None

    remainder = line[date_match.end():]
    amounts = find_amounts(remainder)
    if not amounts:
        return None

    description = _strip_spans(remainder, amounts)[:MAX_DESCRIPTION_LENGTH]
    amount = amounts[-1][2]
    if not description or not amount.is_finite() or amount == 0:
        return None
    return date_match.group(0), description, amount


def parse_statement_text(text: str, orchestrator: CategorizationOrchestrator) -> List[Transaction]:
    """
    Parse extracted statement text into pending, categorized transactions

    Args:
        text: Visible text with line breaks
        orchestrator: Categorizer for the session

    Returns:
        Transactions in line order
    """
    transactions = []
    lines = [line for line in (text or '').splitlines() if line.strip()]
    for line in lines:
        parsed = parse_line(line)
        if parsed is None:
            continue
        date_text, description, amount = parsed
        result = orchestrator.classify(description, amount)
        transactions.append(Transaction(
            id=new_transaction_id(),
            date=date_text,
            description=description,
            amount=amount,
            category=result.category,
            confidence=result.confidence,
        ))

    logger.debug("Extracted %d transactions from %d lines", len(transactions), len(lines))
    return transactions
