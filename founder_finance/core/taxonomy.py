"""
Category Taxonomy

Five disjoint groups of category names used for monthly aggregation:
Income, COGS, OpEx, Funding-In and Funding-Out. Built-in names can be
extended per session with custom categories.
"""
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import UserInputError
from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.taxonomy')

INCOME = 'income'
COGS = 'cogs'
OPEX = 'opex'
FUNDING = 'funding'
FINANCING = 'financing'

# Aggregation order; the first group containing a category wins
GROUP_KEYS: Tuple[str, ...] = (INCOME, COGS, OPEX, FUNDING, FINANCING)

GROUP_LABELS = {
    INCOME: 'Income',
    COGS: 'COGS',
    OPEX: 'OpEx',
    FUNDING: 'Funding-In',
    FINANCING: 'Funding-Out',
}

INCOME_CATEGORIES = (
    'SaaS/Subscription Revenue',
    'Service Revenue',
    'Consulting Revenue',
    'One-time Sales',
    'Other Income',
)

COGS_CATEGORIES = (
    'Hosting & Infrastructure',
    'Third-party Software/APIs',
    'Payment Processing Fees',
    'Direct Labor',
    'Materials & Supplies',
)

OPEX_CATEGORIES = (
    'Sales & Marketing',
    'Salaries & Payroll',
    'Rent & Leasing',
    'Office & Facilities',
    'Professional Services',
    'Software & Subscriptions',
    'Travel & Entertainment',
    'Insurance',
    'Utilities & Telecommunications',
    'Other Operating Expenses',
)

FUNDING_CATEGORIES = (
    'Equity Investment',
    'Loan/Debt Received',
    'Grant Funding',
    'Other Funding',
)

FINANCING_CATEGORIES = (
    'Loan Principal Repayment',
    'Interest Payments',
    'Dividend Payments',
)

# Always part of Income, cannot be moved or re-added elsewhere
INTEREST_INCOME_CATEGORY = 'Interest Income'

MARKETING_CATEGORY = 'Sales & Marketing'
REMAINDER_CATEGORY = 'Other Operating Expenses'

BUILTIN_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    INCOME: INCOME_CATEGORIES + (INTEREST_INCOME_CATEGORY,),
    COGS: COGS_CATEGORIES,
    OPEX: OPEX_CATEGORIES,
    FUNDING: FUNDING_CATEGORIES,
    FINANCING: FINANCING_CATEGORIES,
}


class Taxonomy:
    """
    Built-in category groups plus session-scoped custom extensions
    """

    def __init__(self):
        self.custom: Dict[str, List[str]] = {key: [] for key in GROUP_KEYS}

    def categories(self, group: str) -> List[str]:
        """All category names in a group, built-ins first"""
        if group not in BUILTIN_CATEGORIES:
            raise KeyError(group)
        return list(BUILTIN_CATEGORIES[group]) + list(self.custom[group])

    def all_categories(self) -> List[str]:
        names = []
        for group in GROUP_KEYS:
            names.extend(self.categories(group))
        return names

    def group_of(self, category: str) -> Optional[str]:
        """
        Find the group a category belongs to

        Returns:
            Group key, or None when the category is in no group
        """
        for group in GROUP_KEYS:
            if category in BUILTIN_CATEGORIES[group] or category in self.custom[group]:
                return group
        return None

    def __contains__(self, category: str) -> bool:
        return self.group_of(category) is not None

    def add_custom_category(self, name: str, group: str) -> str:
        """
        Add a user-defined category to a group

        Args:
            name: Category name (surrounding whitespace is ignored)
            group: One of income, cogs, opex, funding, financing

        Returns:
            The stored category name

        Raises:
            UserInputError: blank name, unknown group, or name already in any group
        """
        name = (name or '').strip()
        if not name:
            raise UserInputError('Please enter a category name.')
        if group not in BUILTIN_CATEGORIES:
            raise UserInputError(
                f"Unknown category group: {group!r} (expected one of {', '.join(GROUP_KEYS)})"
            )
        if name in self:
            raise UserInputError('This category already exists.')

        self.custom[group].append(name)
        logger.info("Added custom category %r to %s", name, GROUP_LABELS[group])
        return name

    def load_custom_categories(self, path: Union[str, Path]) -> int:
        """
        Load custom categories from a JSON file

        Accepts either ``{"opex": ["Team Offsites"], ...}`` or
        ``[{"name": "Team Offsites", "group": "opex"}, ...]``.

        Returns:
            Number of categories added
        """
        with open(path, encoding='utf-8') as f:
            raw_data = json.load(f)

        if isinstance(raw_data, dict) and 'categories' in raw_data:
            raw_data = raw_data['categories']

        pairs: List[Tuple[str, str]] = []
        if isinstance(raw_data, dict):
            for group, names in raw_data.items():
                for name in names or []:
                    pairs.append((str(name), str(group).lower()))
        elif isinstance(raw_data, list):
            for item in raw_data:
                if isinstance(item, dict):
                    pairs.append((str(item.get('name', '')), str(item.get('group', '')).lower()))
        else:
            raise UserInputError(f"Unrecognised custom category file: {path}")

        return self.extend(pairs)

    def extend(self, pairs: Iterable[Tuple[str, str]]) -> int:
        """Add several (name, group) pairs; every pair is validated first"""
        pairs = [((name or '').strip(), group) for name, group in pairs]
        seen = set()
        for name, group in pairs:
            if not name:
                raise UserInputError('Please enter a category name.')
            if group not in BUILTIN_CATEGORIES:
                raise UserInputError(f"Unknown category group: {group!r}")
            if name in self or name in seen:
                raise UserInputError(f'This category already exists: {name}')
            seen.add(name)

        for name, group in pairs:
            self.add_custom_category(name, group)
        return len(pairs)
