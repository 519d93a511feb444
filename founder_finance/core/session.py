"""
Finance session

One session holds the taxonomy extensions, the learned rules and the
transaction store. Start a new session to start from an empty state.
"""
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .aggregator import MonthlyAggregate, aggregate_monthly, category_breakdown
from .categorization_orchestrator import CategorizationOrchestrator
from .export import export_transactions, load_exported_transactions
from .importer import ImportResult, TextExtractor, import_documents, import_files
from .kpi import KpiSnapshot, calculate_kpis
from .pdf_text import extract_text_from_pdf
from .splitter import PartLike, split_transaction
from .taxonomy import Taxonomy
from .transaction_store import Transaction, TransactionStore


class FinanceSession:
    """
    Entry point tying the taxonomy, categorizer and store together
    """

    def __init__(self, extractor: TextExtractor = extract_text_from_pdf):
        self.taxonomy = Taxonomy()
        self.orchestrator = CategorizationOrchestrator()
        self.store = TransactionStore(self.orchestrator)
        self.extractor = extractor

    # Ingestion

    def import_files(self,
                     paths: Iterable[Union[str, Path]],
                     should_cancel: Optional[Callable[[], bool]] = None) -> ImportResult:
        return import_files(paths, self.store, self.extractor, should_cancel)

    def import_documents(self,
                         documents: Iterable[Tuple[str, bytes]],
                         should_cancel: Optional[Callable[[], bool]] = None) -> ImportResult:
        return import_documents(documents, self.store, self.extractor, should_cancel)

    def add_manual_transaction(self, date_text: str, description: str, amount: str) -> Transaction:
        return self.store.add_manual_transaction(date_text, description, amount)

    # Review

    def split(self, txn_id: str, parts: Iterable[PartLike]) -> List[Transaction]:
        return split_transaction(self.store, txn_id, parts)

    # Reporting

    def monthly_aggregates(self) -> List[MonthlyAggregate]:
        return aggregate_monthly(self.store, self.taxonomy)

    def kpis(self, new_customers: Union[int, str, None] = 0) -> KpiSnapshot:
        return calculate_kpis(self.monthly_aggregates(), new_customers)

    def category_breakdown(self) -> List[Tuple[str, Decimal]]:
        return category_breakdown(self.store)

    def export(self, path: Union[str, Path]) -> int:
        return export_transactions(self.store, path)

    def load_export(self, path: Union[str, Path]) -> List[Transaction]:
        """Add every transaction from an export file, keeping file order"""
        return self.store.add_many(load_exported_transactions(path))
