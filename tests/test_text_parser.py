from decimal import Decimal

import pytest

from founder_finance.core.text_parser import find_amounts, parse_line, parse_statement_text


def test_simple_line():
    assert parse_line("01/15/2024 Stripe Payment $29.99") == (
        "01/15/2024", "Stripe Payment", Decimal("29.99"),
    )


def test_last_amount_wins():
    assert parse_line("2024-01-15 AWS Services 120.00 4,880.00") == (
        "2024-01-15", "AWS Services", Decimal("4880.00"),
    )


def test_parenthesised_amount_is_negative():
    date_text, description, amount = parse_line("03/02/2024 Refund adjustment (45.50)")
    assert description == "Refund adjustment"
    assert amount == Decimal("-45.50")


def test_leading_minus_is_negative():
    assert parse_line("03/05/2024 Card purchase -12.34")[2] == Decimal("-12.34")


def test_minus_attached_to_a_word_is_negative():
    assert parse_line("03/05/2024 Purchase-12.34") == ("03/05/2024", "Purchase", Decimal("-12.34"))


def test_digits_glued_to_a_word_are_not_an_amount():
    assert parse_line("03/05/2024 Invoice INV12.34") is None


@pytest.mark.parametrize(
    "line, expected_date",
    [
        ("Jan 15, 2024 Google Workspace 12.00", "Jan 15, 2024"),
        ("15 Jan 2024 Zoom subscription 14.99", "15 Jan 2024"),
        ("1-15-24 Slack seats 8.75", "1-15-24"),
    ],
)
def test_date_formats(line, expected_date):
    assert parse_line(line)[0] == expected_date


@pytest.mark.parametrize(
    "line",
    [
        "1/1/24 x",
        "Opening balance 1,000.00",
        "01/15/2024 Transfer pending",
        "01/15/2024 Adjustment 0.00",
        "01/15/2024 29.99 100.00",
    ],
)
def test_lines_without_a_transaction(line):
    assert parse_line(line) is None


def test_whole_numbers_are_not_amounts():
    assert parse_line("01/15/2024 Invoice 1001 paid 250.00") == (
        "01/15/2024", "Invoice 1001 paid", Decimal("250.00"),
    )


def test_description_cleanup():
    _, description, _ = parse_line("01/15/2024 Acme, Inc   consulting $ 500.00")
    assert description == "Acme Inc consulting"


def test_find_amounts_skips_overlap():
    amounts = find_amounts("fee (1,250.00) then 3.10")
    assert [value for _, _, value in amounts] == [Decimal("-1250.00"), Decimal("3.10")]


def test_parse_statement_text(orchestrator):
    text = "\n".join([
        "ACME BANK STATEMENT",
        "01/15/2024 Stripe Payment (29.99)",
        "",
        "01/16/2024 Consulting income 2,000.00",
    ])

    transactions = parse_statement_text(text, orchestrator)

    assert [t.category for t in transactions] == ["Payment Processing Fees", "Consulting Revenue"]
    assert transactions[0].amount == Decimal("-29.99")
    assert all(t.is_pending for t in transactions)
