"""
Rule Matcher Engine

Keyword classifier for transactions without a learned merchant rule.
Rules are an ordered list of (keywords, category) pairs, one list for
inflows and one for outflows. The first rule whose keyword appears in the
lower-cased description wins, so list order is the tie-break policy.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class KeywordRule:
    """A single keyword predicate and the category it assigns"""
    rule_id: str
    keywords: Tuple[str, ...]
    category: str

    def matches(self, description_lower: str) -> bool:
        return any(kw in description_lower for kw in self.keywords)


INFLOW_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule('equity', ('equity', 'investment', 'investor'), 'Equity Investment'),
    KeywordRule('loan_received', ('loan', 'borrowed', 'debt received'), 'Loan/Debt Received'),
    KeywordRule('grant', ('grant',), 'Grant Funding'),
    KeywordRule('interest_income', ('interest income', 'interest earned'), 'Interest Income'),
    KeywordRule('subscription', ('subscription', 'recurring'), 'SaaS/Subscription Revenue'),
    KeywordRule('consulting', ('consulting',), 'Consulting Revenue'),
    KeywordRule('service', ('service',), 'Service Revenue'),
)
INFLOW_FALLBACK = 'Other Income'

OUTFLOW_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule('loan_repayment', ('loan payment', 'principal', 'loan repayment'), 'Loan Principal Repayment'),
    KeywordRule('interest_payment', ('interest payment', 'interest expense'), 'Interest Payments'),
    KeywordRule('dividend', ('dividend',), 'Dividend Payments'),
    KeywordRule('hosting', ('aws', 'hosting', 'server'), 'Hosting & Infrastructure'),
    KeywordRule('payment_processing', ('stripe', 'payment'), 'Payment Processing Fees'),
    KeywordRule('software', ('api', 'software'), 'Third-party Software/APIs'),
    KeywordRule('payroll', ('salary', 'payroll'), 'Salaries & Payroll'),
    KeywordRule('marketing', ('marketing', 'ads', 'advertising'), 'Sales & Marketing'),
    KeywordRule('rent', ('rent', 'lease'), 'Rent & Leasing'),
    KeywordRule('office', ('office',), 'Office & Facilities'),
    KeywordRule('professional', ('legal', 'accounting'), 'Professional Services'),
    KeywordRule('insurance', ('insurance',), 'Insurance'),
    KeywordRule('travel', ('travel',), 'Travel & Entertainment'),
)
OUTFLOW_FALLBACK = 'Other Operating Expenses'

# Descriptions containing any of these are trusted even without a learned rule
HIGH_CONFIDENCE_KEYWORDS: Tuple[str, ...] = (
    'subscription', 'payroll', 'rent', 'aws', 'stripe', 'hosting',
)


class RuleMatcher:
    """
    Matches descriptions against the ordered keyword rules
    """

    def __init__(self,
                 inflow_rules: Tuple[KeywordRule, ...] = INFLOW_RULES,
                 outflow_rules: Tuple[KeywordRule, ...] = OUTFLOW_RULES):
        self.inflow_rules = inflow_rules
        self.outflow_rules = outflow_rules
        self.stats = {
            'matches': 0,
            'no_match': 0,
            'by_rule': {},
        }

    def match_rule(self, description: str, amount: Union[Decimal, float]) -> Optional[KeywordRule]:
        """
        Find the first rule matching a description

        Args:
            description: Raw description
            amount: Signed amount; positive selects the inflow rules

        Returns:
            The matching rule, or None when only the fallback applies
        """
        desc = (description or '').lower()
        rules = self.inflow_rules if amount > 0 else self.outflow_rules
        for rule in rules:
            if rule.matches(desc):
                return rule
        return None

    def categorize(self, description: str, amount: Union[Decimal, float]) -> str:
        """Category for a description, falling back per direction"""
        rule = self.match_rule(description, amount)
        if rule is None:
            self.stats['no_match'] += 1
            return INFLOW_FALLBACK if amount > 0 else OUTFLOW_FALLBACK

        self.stats['matches'] += 1
        by_rule: Dict[str, int] = self.stats['by_rule']
        by_rule[rule.rule_id] = by_rule.get(rule.rule_id, 0) + 1
        return rule.category


def has_high_confidence_keyword(description: str) -> bool:
    desc = (description or '').lower()
    return any(kw in desc for kw in HIGH_CONFIDENCE_KEYWORDS)
