from decimal import Decimal

from founder_finance.core.session import FinanceSession

STATEMENT = (
    b"Date,Description,Debit,Credit\n"
    b"2024-01-03,Seed round equity,,250000.00\n"
    b"2024-01-15,Stripe Payment,29.99,\n"
    b"2024-01-20,Acme Corp design work,1200.00,\n"
    b"2024-02-15,Stripe Payment,31.50,\n"
    b"2024-02-20,Acme Corp design work,800.00,\n"
)


def test_review_flow(session):
    result = session.import_documents([("bank.csv", STATEMENT)])
    assert result.total_imported == 5

    acme = [t for t in session.store if t.merchant == "Acme"]
    session.store.set_category(acme[0].id, "Professional Services")
    session.store.bulk_set_category("Acme", "Professional Services")
    session.store.approve_all_pending()

    months = session.monthly_aggregates()
    assert [m.month for m in months] == ["2024-01", "2024-02"]
    assert months[0].funding_in == Decimal("250000.00")
    assert months[0].cogs == Decimal("29.99")
    assert months[0].opex == Decimal("1200.00")

    kpis = session.kpis()
    assert kpis.total_funding == Decimal("250000.00")
    assert not kpis.runway_is_infinite
    assert kpis.current_balance == Decimal("247938.51")

    # learned rule applies to later imports
    later = session.import_documents([("march.csv", b"Date,Description,Amount\n2024-03-02,Acme Corp retainer,-50\n")])
    assert later.transactions[0].category == "Professional Services"


def test_sessions_are_isolated():
    first, second = FinanceSession(), FinanceSession()
    first.orchestrator.learn("Acme", "Insurance")
    first.add_manual_transaction("2024-01-01", "Acme", "-10")

    assert len(second.store) == 0
    assert second.orchestrator.learned_rules == {}


def test_category_breakdown_over_approved_transactions(session):
    rent = session.add_manual_transaction("2024-02-01", "Office Rent", "-2000")
    session.add_manual_transaction("2024-02-02", "Gusto payroll", "-900")
    session.store.approve(rent.id)

    assert session.category_breakdown() == [("Rent & Leasing", Decimal("2000"))]
