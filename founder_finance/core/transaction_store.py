"""
Transaction Store

The mutable collection of transactions for a session and their review
lifecycle. ``approved`` and ``excluded`` are independent flags; a record can
be both, and exclusion always wins when deciding what counts.
"""
import uuid
from dataclasses import dataclass, field
from datetime import date as calendar_date
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .categorization_orchestrator import CategorizationOrchestrator, Confidence
from .dates import month_key, parse_date
from .errors import UserInputError
from .merchant_normalizer import normalize_merchant
from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.transaction_store')

MAX_DESCRIPTION_LENGTH = 100


def new_transaction_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Transaction:
    """A single statement line under review"""
    id: str
    date: str
    description: str
    amount: Decimal
    category: str
    confidence: Confidence = Confidence.MEDIUM
    approved: bool = False
    excluded: bool = False
    is_split: bool = False
    posted_on: Optional[calendar_date] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.posted_on = parse_date(self.date)

    @property
    def merchant(self) -> str:
        return normalize_merchant(self.description)

    @property
    def month(self) -> Optional[str]:
        return month_key(self.posted_on) if self.posted_on else None

    @property
    def is_pending(self) -> bool:
        return not self.approved and not self.excluded

    @property
    def is_counted(self) -> bool:
        """Included in aggregation: approved and not excluded"""
        return self.approved and not self.excluded


class TransactionStore:
    """
    Owns every transaction in a session

    Newest imports sit at the front. Derived views are recomputed on each
    access and never cached.
    """

    def __init__(self, orchestrator: CategorizationOrchestrator):
        self.orchestrator = orchestrator
        self._records: List[Transaction] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._records))

    def __contains__(self, txn_id: str) -> bool:
        return any(t.id == txn_id for t in self._records)

    # ------------------------------------------------------------------
    # Insertion / removal
    # ------------------------------------------------------------------

    def add(self, txn: Transaction) -> Transaction:
        self.add_many([txn])
        return txn

    def add_many(self, transactions: Iterable[Transaction]) -> List[Transaction]:
        """Insert a batch ahead of existing records, keeping batch order"""
        batch = list(transactions)
        self._records[0:0] = batch
        return batch

    def get(self, txn_id: str) -> Transaction:
        for txn in self._records:
            if txn.id == txn_id:
                return txn
        raise UserInputError(f"Unknown transaction: {txn_id}")

    def delete(self, txn_id: str) -> Transaction:
        """
        Permanently remove a record

        Normal flow only deletes excluded records; that is not enforced.
        """
        txn = self.get(txn_id)
        self._records.remove(txn)
        logger.info("Deleted transaction %s (%s)", txn_id, txn.description[:40])
        return txn

    def replace(self, txn_id: str, replacements: Iterable[Transaction]) -> List[Transaction]:
        """Swap one record for several at the same position"""
        txn = self.get(txn_id)
        index = self._records.index(txn)
        new_records = list(replacements)
        self._records[index:index + 1] = new_records
        return new_records

    def add_manual_transaction(self, date_text: str, description: str, amount: str) -> Transaction:
        """
        Add a hand-entered transaction as pending

        Args:
            date_text: Date as typed
            description: Free-text description
            amount: Signed amount as typed

        Raises:
            UserInputError: a field is blank or the amount is not a number
        """
        date_text = (date_text or '').strip()
        description = (description or '').strip()
        amount_text = str(amount).strip() if amount is not None else ''
        if not date_text or not description or not amount_text:
            raise UserInputError('Please fill in all fields for manual entry.')

        try:
            value = Decimal(amount_text.replace('$', '').replace(',', ''))
        except InvalidOperation:
            raise UserInputError('Please enter a valid amount.') from None
        if not value.is_finite() or value == 0:
            raise UserInputError('Please enter a valid amount.')

        result = self.orchestrator.classify(description, value)
        txn = Transaction(
            id=new_transaction_id(),
            date=date_text,
            description=description,
            amount=value,
            category=result.category,
            confidence=result.confidence,
        )
        return self.add(txn)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def approve(self, txn_id: str) -> Transaction:
        txn = self.get(txn_id)
        txn.approved = True
        return txn

    def toggle_excluded(self, txn_id: str) -> Transaction:
        txn = self.get(txn_id)
        txn.excluded = not txn.excluded
        return txn

    def set_category(self, txn_id: str, category: str) -> Transaction:
        """Change a category, learning the correction when it differs"""
        txn = self.get(txn_id)
        if txn.category != category:
            self.orchestrator.learn(txn.description, category)
            txn.category = category
        return txn

    def bulk_set_category(self, merchant: str, category: str) -> List[Transaction]:
        """
        Re-categorize every pending transaction for a merchant

        The rule is learned once for the merchant key.

        Returns:
            The transactions that were updated
        """
        members = self._pending_for(merchant)
        for txn in members:
            txn.category = category
        self.orchestrator.learn_merchant(merchant, category)
        return members

    def approve_all_in_group(self, merchant: str) -> List[Transaction]:
        """
        Approve every pending transaction for a merchant

        All members take the first member's current category.
        """
        members = self._pending_for(merchant)
        if not members:
            return []
        category = members[0].category
        for txn in members:
            txn.category = category
            txn.approved = True
        return members

    def approve_all_pending(self) -> List[Transaction]:
        members = self.pending
        for txn in members:
            txn.approved = True
        return members

    def _pending_for(self, merchant: str) -> List[Transaction]:
        return [t for t in self._records if t.is_pending and t.merchant == merchant]

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def pending(self) -> List[Transaction]:
        return [t for t in self._records if t.is_pending]

    @property
    def approved(self) -> List[Transaction]:
        return [t for t in self._records if t.is_counted]

    @property
    def excluded(self) -> List[Transaction]:
        return [t for t in self._records if t.excluded]

    def merchant_groups(self) -> List[Tuple[str, List[Transaction]]]:
        """Pending transactions grouped by merchant, largest group first"""
        return _group(self.pending, lambda t: t.merchant)

    def category_groups(self) -> List[Tuple[str, List[Transaction]]]:
        """Pending transactions grouped by category, largest group first"""
        return _group(self.pending, lambda t: t.category)


def _group(transactions: List[Transaction], key) -> List[Tuple[str, List[Transaction]]]:
    groups: Dict[str, List[Transaction]] = {}
    for txn in transactions:
        groups.setdefault(key(txn), []).append(txn)
    # sorted() is stable, so equal-sized groups keep first-seen order
    return sorted(groups.items(), key=lambda item: len(item[1]), reverse=True)
