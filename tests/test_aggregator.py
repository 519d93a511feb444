from decimal import Decimal

from founder_finance.core.aggregator import aggregate_monthly, category_breakdown
from founder_finance.core.taxonomy import OPEX, Taxonomy


def test_manual_entries_roll_up_by_month(session):
    income = session.add_manual_transaction("2024-01-10", "Client payment", "1000")
    rent = session.add_manual_transaction("2024-02-01", "Rent", "-500")
    session.store.approve(income.id)
    session.store.approve(rent.id)

    months = session.monthly_aggregates()

    assert [m.month for m in months] == ["2024-01", "2024-02"]
    jan, feb = months
    assert (jan.income, jan.net_cash_flow, jan.cash_balance) == (Decimal("1000"), Decimal("1000"), Decimal("1000"))
    assert (feb.opex, feb.net_cash_flow, feb.cash_balance) == (Decimal("500"), Decimal("-500"), Decimal("500"))


def test_only_approved_non_excluded_transactions_count(make_txn):
    transactions = [
        make_txn(amount="-10", category="Insurance", approved=True),
        make_txn(amount="-20", category="Insurance"),
        make_txn(amount="-40", category="Insurance", approved=True, excluded=True),
    ]

    months = aggregate_monthly(transactions, Taxonomy())

    assert months[0].opex == Decimal("10")
    assert len(months[0].transactions) == 1


def test_toggling_exclusion_restores_totals(session):
    txn = session.add_manual_transaction("2024-03-05", "Gusto payroll", "-3000")
    session.store.approve(txn.id)
    before = session.monthly_aggregates()

    session.store.toggle_excluded(txn.id)
    assert session.monthly_aggregates() == []

    session.store.toggle_excluded(txn.id)
    assert session.monthly_aggregates() == before


def test_funding_and_financing(make_txn):
    transactions = [
        make_txn(amount="5000", category="Equity Investment", approved=True),
        make_txn(amount="-200", category="Loan Principal Repayment", approved=True),
        make_txn(amount="-300", category="Hosting & Infrastructure", approved=True),
    ]

    month = aggregate_monthly(transactions, Taxonomy())[0]

    assert month.funding_in == Decimal("5000")
    assert month.funding_out == Decimal("200")
    assert month.cogs == Decimal("300")
    assert month.net_cash_flow == Decimal("4500")


def test_unknown_category_and_undated_transactions(make_txn):
    transactions = [
        make_txn(amount="-25", category="Snacks", approved=True),
        make_txn(amount="-99", category="Insurance", approved=True, date="sometime"),
    ]

    months = aggregate_monthly(transactions, Taxonomy())

    assert len(months) == 1
    assert months[0].opex == Decimal("0")
    assert months[0].net_cash_flow == Decimal("0")
    assert len(months[0].transactions) == 1


def test_custom_categories_are_aggregated(make_txn):
    taxonomy = Taxonomy()
    taxonomy.add_custom_category("Team Offsites", OPEX)

    months = aggregate_monthly([make_txn(amount="-750", category="Team Offsites", approved=True)], taxonomy)

    assert months[0].opex == Decimal("750")


def test_months_sorted_with_running_balance(make_txn):
    transactions = [
        make_txn(amount="-100", category="Insurance", approved=True, date="03/01/2024"),
        make_txn(amount="1000", category="Consulting Revenue", approved=True, date="Jan 5, 2024"),
        make_txn(amount="-300", category="Insurance", approved=True, date="2024-02-10"),
    ]

    months = aggregate_monthly(transactions, Taxonomy())

    assert [(m.month, m.cash_balance) for m in months] == [
        ("2024-01", Decimal("1000")),
        ("2024-02", Decimal("700")),
        ("2024-03", Decimal("600")),
    ]


def test_category_breakdown(make_txn):
    transactions = [
        make_txn(amount="-10", category="Insurance", approved=True),
        make_txn(amount="-15", category="Insurance", approved=True),
        make_txn(amount="40", category="Consulting Revenue", approved=True),
        make_txn(amount="-99", category="Insurance"),
    ]

    assert category_breakdown(transactions) == [
        ("Insurance", Decimal("25")),
        ("Consulting Revenue", Decimal("40")),
    ]


def test_first_month_balance_starts_from_zero(session):
    rent = session.add_manual_transaction("2024-02-01", "Office Rent", "-2000")
    assert rent.category == "Rent & Leasing"
    session.store.approve(rent.id)

    feb = session.monthly_aggregates()[0]

    assert feb.month == "2024-02"
    assert feb.opex == Decimal("2000")
    assert feb.net_cash_flow == Decimal("-2000")
    assert feb.cash_balance == Decimal("-2000")
