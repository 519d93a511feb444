"""
Monthly aggregation

Rolls approved, non-excluded transactions up into per-month totals for the
five taxonomy groups, then derives net cash flow and a running cash balance.
Everything is recomputed from scratch on every call.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from .taxonomy import COGS, FINANCING, FUNDING, INCOME, OPEX, Taxonomy
from .transaction_store import Transaction

ZERO = Decimal('0')


@dataclass
class MonthlyAggregate:
    """Group totals for one YYYY-MM month (all non-negative)"""
    month: str
    income: Decimal = ZERO
    cogs: Decimal = ZERO
    opex: Decimal = ZERO
    funding_in: Decimal = ZERO
    funding_out: Decimal = ZERO
    net_cash_flow: Decimal = ZERO
    cash_balance: Decimal = ZERO
    transactions: List[Transaction] = field(default_factory=list, repr=False)

    def add(self, group: str, amount: Decimal) -> None:
        attr = _GROUP_FIELDS[group]
        setattr(self, attr, getattr(self, attr) + amount)


_GROUP_FIELDS = {
    INCOME: 'income',
    COGS: 'cogs',
    OPEX: 'opex',
    FUNDING: 'funding_in',
    FINANCING: 'funding_out',
}


def aggregate_monthly(transactions: Iterable[Transaction], taxonomy: Taxonomy) -> List[MonthlyAggregate]:
    """
    Build the monthly aggregate sequence

    Only approved, non-excluded transactions with a parseable date count.
    A category outside every taxonomy group adds to no total.

    Args:
        transactions: Any transactions (typically the whole store)
        taxonomy: Session taxonomy used to resolve category groups

    Returns:
        Aggregates in ascending month order
    """
    grouped: Dict[str, MonthlyAggregate] = {}
    for txn in transactions:
        if not txn.is_counted or txn.month is None:
            continue

        month = grouped.setdefault(txn.month, MonthlyAggregate(month=txn.month))
        month.transactions.append(txn)

        group = taxonomy.group_of(txn.category)
        if group is not None:
            month.add(group, abs(txn.amount))

    running_balance = ZERO
    months = [grouped[key] for key in sorted(grouped)]
    for m in months:
        m.net_cash_flow = m.income + m.funding_in - m.cogs - m.opex - m.funding_out
        running_balance += m.net_cash_flow
        m.cash_balance = running_balance
    return months


def category_breakdown(transactions: Iterable[Transaction]) -> List[Tuple[str, Decimal]]:
    """Absolute totals per category over approved, non-excluded transactions"""
    breakdown: Dict[str, Decimal] = {}
    for txn in transactions:
        if txn.is_counted:
            breakdown[txn.category] = breakdown.get(txn.category, ZERO) + abs(txn.amount)
    return list(breakdown.items())
