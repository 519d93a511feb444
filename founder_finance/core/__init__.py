"""
Core engine: normalization, categorization, ingestion, review lifecycle,
aggregation and KPIs.
"""

from .categorization_orchestrator import CategorizationOrchestrator, CategorizationResult, Confidence
from .merchant_normalizer import normalize_merchant
from .rule_matcher import RuleMatcher
from .taxonomy import Taxonomy
from .transaction_store import Transaction, TransactionStore

__all__ = [
    'normalize_merchant',
    'RuleMatcher',
    'CategorizationOrchestrator',
    'CategorizationResult',
    'Confidence',
    'Taxonomy',
    'Transaction',
    'TransactionStore',
]
