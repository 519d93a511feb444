"""Shared fixtures: a fresh session per test and a transaction factory."""
import logging
import zlib
from decimal import Decimal

import pytest

from founder_finance.core.categorization_orchestrator import CategorizationOrchestrator, Confidence
from founder_finance.core.session import FinanceSession
from founder_finance.core.transaction_store import Transaction, TransactionStore, new_transaction_id
from founder_finance.utils import logging_setup


@pytest.fixture
def session() -> FinanceSession:
    return FinanceSession()


@pytest.fixture
def orchestrator() -> CategorizationOrchestrator:
    return CategorizationOrchestrator()


@pytest.fixture
def store(orchestrator) -> TransactionStore:
    return TransactionStore(orchestrator)


@pytest.fixture
def make_txn():
    def _make(description="Acme widgets", amount="-10.00", category="Other Operating Expenses",
              date="2024-01-15", approved=False, excluded=False, **kwargs):
        return Transaction(
            id=kwargs.pop("id", new_transaction_id()),
            date=date,
            description=description,
            amount=Decimal(str(amount)),
            category=category,
            confidence=kwargs.pop("confidence", Confidence.MEDIUM),
            approved=approved,
            excluded=excluded,
            **kwargs,
        )

    return _make


def _pdf_escape(text):
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines):
    """One-page PDF with a compressed content stream showing each line in Helvetica"""
    content = "BT /F1 12 Tf 14 TL 72 720 Td\n"
    content += "".join(f"({_pdf_escape(line)}) Tj T*\n" for line in lines)
    content += "ET"
    stream = zlib.compress(content.encode("latin-1"))

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d /Filter /FlateDecode >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    out += b"".join(b"%010d 00000 n \n" % offset for offset in offsets)
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n" % (len(objects) + 1, xref_at)
    return out + b"%EOF\n"


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def reset_logging(monkeypatch):
    """Let a test configure package logging, then drop its handler"""
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield logging.getLogger("founder_finance")
    logger = logging.getLogger("founder_finance")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
