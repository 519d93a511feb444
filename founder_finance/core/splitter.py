"""
Transaction splitting

Breaks one transaction into several categorized parts. Parts that do not
add up to the original are topped up with an "Other Operating Expenses"
remainder, so children always sum back to the original amount.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Mapping, Union

from .errors import UserInputError
from .taxonomy import REMAINDER_CATEGORY
from .transaction_store import Transaction, TransactionStore, new_transaction_id
from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.splitter')

TOLERANCE = Decimal('0.01')
INCOMPLETE_PARTS = 'Please fill in all split fields.'


@dataclass(frozen=True)
class SplitPart:
    category: str
    amount: Decimal


PartLike = Union[SplitPart, Mapping[str, object]]


def _coerce_part(part: PartLike) -> SplitPart:
    if isinstance(part, SplitPart):
        category, raw_amount = part.category, part.amount
    else:
        category, raw_amount = part.get('category'), part.get('amount')

    category = (str(category) if category is not None else '').strip()
    try:
        amount = Decimal(str(raw_amount).strip()) if raw_amount not in (None, '') else None
    except InvalidOperation:
        amount = None
    if not category or amount is None or not amount.is_finite() or amount <= 0:
        raise UserInputError(INCOMPLETE_PARTS)
    return SplitPart(category=category, amount=amount)


def plan_split(original: Transaction, parts: Iterable[PartLike]) -> List[SplitPart]:
    """
    Validate parts and append the reconciling remainder when needed

    Parts adding up to more than the original are refused rather than
    reconciled with a negative remainder, so every child keeps the
    original's sign.

    Raises:
        UserInputError: no parts, an incomplete part, or parts exceeding the original
    """
    planned = [_coerce_part(p) for p in parts]
    if not planned:
        raise UserInputError(INCOMPLETE_PARTS)

    transaction_total = abs(original.amount)
    difference = transaction_total - sum((p.amount for p in planned), Decimal('0'))
    if difference < -TOLERANCE:
        raise UserInputError(
            f"Split amounts exceed the transaction total of {transaction_total:.2f}."
        )
    if abs(difference) > TOLERANCE:
        planned.append(SplitPart(category=REMAINDER_CATEGORY, amount=difference))
        logger.info("Split of %s: added %s remainder of %s", original.id, REMAINDER_CATEGORY, difference)
    return planned


def split_transaction(store: TransactionStore,
                      txn_id: str,
                      parts: Iterable[PartLike]) -> List[Transaction]:
    """
    Replace a transaction with approved split children

    Each child keeps the original's date and direction, takes its part's
    category, and is marked split and approved.

    Args:
        store: Store holding the transaction
        txn_id: Transaction to split
        parts: Categories and positive amounts

    Returns:
        The new child transactions
    """
    original = store.get(txn_id)
    planned = plan_split(original, parts)

    sign = Decimal('1') if original.amount > 0 else Decimal('-1')
    count = len(planned)
    children = [
        Transaction(
            id=new_transaction_id(),
            date=original.date,
            description=f"{original.description} (Split {i}/{count})",
            amount=sign * part.amount,
            category=part.category,
            confidence=original.confidence,
            approved=True,
            excluded=original.excluded,
            is_split=True,
        )
        for i, part in enumerate(planned, start=1)
    ]
    return store.replace(txn_id, children)
