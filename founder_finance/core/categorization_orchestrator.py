"""
Categorization Orchestrator

Categorizes transactions using:
1. Learned merchant rules (user corrections, highest priority)
2. Ordered keyword rules (fallback for everything else)

Every result carries a confidence level for the review queue.
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Union

from .merchant_normalizer import normalize_merchant
from .rule_matcher import RuleMatcher, has_high_confidence_keyword
from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.categorization_orchestrator')


class Confidence(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


@dataclass(frozen=True)
class CategorizationResult:
    """Result of categorizing one description"""
    category: str
    confidence: Confidence
    tag_source: str  # 'learned' or 'keyword'
    merchant: str


class CategorizationOrchestrator:
    """
    Owns the learned merchant -> category mapping for one session
    """

    def __init__(self, rule_matcher: Optional[RuleMatcher] = None):
        self.rule_matcher = rule_matcher or RuleMatcher()
        self.learned_rules: Dict[str, str] = {}
        self.stats = {
            'total': 0,
            'learned_rule': 0,
            'keyword': 0,
            'high_confidence': 0,
        }

    def has_rule(self, merchant: str) -> bool:
        return merchant in self.learned_rules

    def confidence_for(self, description: str) -> Confidence:
        """
        Confidence for a description, independent of which category it got

        High when the merchant has a learned rule or the description has a
        high-signal keyword; medium for anything longer than 5 characters.
        """
        if self.has_rule(normalize_merchant(description)):
            return Confidence.HIGH
        if has_high_confidence_keyword(description):
            return Confidence.HIGH
        if len(description or '') > 5:
            return Confidence.MEDIUM
        return Confidence.LOW

    def classify(self, description: str, amount: Union[Decimal, float]) -> CategorizationResult:
        """
        Categorize a single transaction

        Args:
            description: Raw description
            amount: Signed amount (positive = inflow)

        Returns:
            CategorizationResult with category and confidence
        """
        self.stats['total'] += 1
        merchant = normalize_merchant(description)

        learned = self.learned_rules.get(merchant)
        if learned is not None:
            self.stats['learned_rule'] += 1
            self.stats['high_confidence'] += 1
            return CategorizationResult(
                category=learned,
                confidence=Confidence.HIGH,
                tag_source='learned',
                merchant=merchant,
            )

        category = self.rule_matcher.categorize(description, amount)
        confidence = self.confidence_for(description)
        self.stats['keyword'] += 1
        if confidence is Confidence.HIGH:
            self.stats['high_confidence'] += 1
        return CategorizationResult(
            category=category,
            confidence=confidence,
            tag_source='keyword',
            merchant=merchant,
        )

    def learn(self, description: str, category: str) -> str:
        """
        Remember a user correction for the description's merchant

        Only future classifications are affected.

        Returns:
            The merchant key the rule was stored under
        """
        return self.learn_merchant(normalize_merchant(description), category)

    def learn_merchant(self, merchant: str, category: str) -> str:
        """Upsert the rule for a merchant key; the latest correction wins"""
        previous = self.learned_rules.get(merchant)
        self.learned_rules[merchant] = category
        if previous != category:
            logger.info("Learned rule %r -> %r (was %r)", merchant, category, previous)
        return merchant
