"""
KPI calculation

Burn, runway, margins and CAC derived from the monthly aggregates.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence, Union

from .aggregator import ZERO, MonthlyAggregate
from .taxonomy import MARKETING_CATEGORY

INFINITE_RUNWAY = Decimal('Infinity')
HUNDRED = Decimal('100')


@dataclass(frozen=True)
class KpiSnapshot:
    avg_income: Decimal
    avg_cogs: Decimal
    avg_opex: Decimal
    avg_funding_out: Decimal
    gross_burn: Decimal
    net_burn: Decimal
    current_balance: Decimal
    runway: Decimal
    gross_margin: Decimal
    operating_margin: Decimal
    marketing_spend: Decimal
    cac: Decimal
    total_funding: Decimal

    @property
    def runway_is_infinite(self) -> bool:
        return self.runway.is_infinite()


def _customer_count(new_customers: Union[int, str, None]) -> int:
    if new_customers is None:
        return 0
    try:
        return int(str(new_customers).strip())
    except ValueError:
        return 0


def calculate_kpis(months: Sequence[MonthlyAggregate],
                   new_customers: Union[int, str, None] = 0) -> KpiSnapshot:
    """
    Derive the KPI snapshot

    Args:
        months: Aggregates in ascending month order
        new_customers: Customers acquired over the period, for CAC

    Returns:
        KpiSnapshot; runway is infinite whenever net burn is not positive
    """
    count = len(months)
    total_income = sum((m.income for m in months), ZERO)
    total_cogs = sum((m.cogs for m in months), ZERO)
    total_opex = sum((m.opex for m in months), ZERO)
    total_funding = sum((m.funding_in for m in months), ZERO)
    total_funding_out = sum((m.funding_out for m in months), ZERO)

    def average(total: Decimal) -> Decimal:
        return total / count if count else ZERO

    avg_income = average(total_income)
    avg_cogs = average(total_cogs)
    avg_opex = average(total_opex)
    avg_funding_out = average(total_funding_out)

    gross_burn = avg_cogs + avg_opex + avg_funding_out
    net_burn = gross_burn - avg_income
    current_balance = months[-1].cash_balance if months else ZERO
    runway = current_balance / net_burn if net_burn > 0 else INFINITE_RUNWAY

    if total_income > 0:
        gross_margin = (total_income - total_cogs) / total_income * HUNDRED
        operating_margin = (total_income - total_cogs - total_opex) / total_income * HUNDRED
    else:
        gross_margin = ZERO
        operating_margin = ZERO

    marketing_spend = sum(
        (abs(t.amount) for m in months for t in m.transactions if t.category == MARKETING_CATEGORY),
        ZERO,
    )
    customers = _customer_count(new_customers)
    cac = marketing_spend / customers if customers > 0 else ZERO

    return KpiSnapshot(
        avg_income=avg_income,
        avg_cogs=avg_cogs,
        avg_opex=avg_opex,
        avg_funding_out=avg_funding_out,
        gross_burn=gross_burn,
        net_burn=net_burn,
        current_balance=current_balance,
        runway=runway,
        gross_margin=gross_margin,
        operating_margin=operating_margin,
        marketing_spend=marketing_spend,
        cac=cac,
        total_funding=total_funding,
    )
