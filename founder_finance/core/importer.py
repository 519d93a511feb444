"""
Statement importer

Imports a batch of statement files into a transaction store, one file at a
time. A failing file is recorded and skipped; it never stops the rest of
the batch, and transactions from good files are committed as soon as each
file has been parsed.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .categorization_orchestrator import CategorizationOrchestrator
from .csv_parser import parse_csv_text
from .errors import IngestionError
from .pdf_text import extract_text_from_pdf
from .text_parser import parse_statement_text
from .transaction_store import Transaction, TransactionStore
from ..utils.logging_setup import get_logger

logger = get_logger('founder_finance.core.importer')

NO_VALID_TRANSACTIONS = 'No valid transactions found'
PDF_NO_TRANSACTIONS = 'Could not extract transactions from PDF'
PDF_PARSING_FAILED = 'PDF parsing failed'
UNSUPPORTED_FILE_TYPE = 'Unsupported file type'
PROCESSING_ERROR = 'Processing error'

TextExtractor = Callable[[bytes], str]


@dataclass(frozen=True)
class FailedFile:
    name: str
    reason: str


@dataclass
class ImportResult:
    """Outcome of one import batch"""
    succeeded: List[str] = field(default_factory=list)
    failed: List[FailedFile] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    cancelled: bool = False

    @property
    def total_imported(self) -> int:
        return len(self.transactions)

    @property
    def summary(self) -> str:
        """Human-readable summary covering full, partial and failed imports"""
        count = len(self.succeeded)
        files = 'file' if count == 1 else 'files'
        if count > 0 and not self.failed:
            message = f"Successfully imported {self.total_imported} transactions from {count} {files}!"
        elif count > 0:
            failed = len(self.failed)
            failed_files = 'file' if failed == 1 else 'files'
            names = ', '.join(f.name for f in self.failed)
            message = (
                f"Imported {self.total_imported} transactions from {count} {files}. "
                f"{failed} {failed_files} failed: {names}"
            )
        elif self.failed:
            details = ', '.join(f"{f.name} ({f.reason})" for f in self.failed)
            message = f"Could not import transactions. Failed files: {details}"
        else:
            message = 'No files were imported.'

        if self.cancelled:
            message += ' Import cancelled; remaining files were skipped.'
        return message


def _parse_document(name: str,
                    payload: bytes,
                    orchestrator: CategorizationOrchestrator,
                    extractor: TextExtractor) -> List[Transaction]:
    suffix = Path(name).suffix.lower()

    if suffix == '.csv':
        transactions = parse_csv_text(payload.decode('utf-8-sig'), orchestrator)
        if not transactions:
            raise IngestionError(NO_VALID_TRANSACTIONS)
        return transactions

    if suffix == '.pdf':
        try:
            text = extractor(payload)
        except Exception as e:
            logger.debug("Text extraction failed for %s: %s", name, e)
            raise IngestionError(PDF_PARSING_FAILED) from e
        transactions = parse_statement_text(text, orchestrator)
        if not transactions:
            raise IngestionError(PDF_NO_TRANSACTIONS)
        return transactions

    if suffix == '.txt':
        transactions = parse_statement_text(payload.decode('utf-8', errors='replace'), orchestrator)
        if not transactions:
            raise IngestionError(NO_VALID_TRANSACTIONS)
        return transactions

    raise IngestionError(UNSUPPORTED_FILE_TYPE)


def _run_batch(items: Iterable[Tuple[str, Callable[[], bytes]]],
               store: TransactionStore,
               extractor: TextExtractor,
               should_cancel: Optional[Callable[[], bool]]) -> ImportResult:
    result = ImportResult()
    for name, load in items:
        if should_cancel is not None and should_cancel():
            result.cancelled = True
            logger.info("Import cancelled before %s", name)
            break

        logger.info("Importing %s", name)
        try:
            transactions = _parse_document(name, load(), store.orchestrator, extractor)
        except IngestionError as e:
            reason = str(e)
        except Exception as e:
            logger.warning("Unexpected error importing %s", name, exc_info=True)
            reason = str(e) or PROCESSING_ERROR
        else:
            store.add_many(transactions)
            result.transactions.extend(transactions)
            result.succeeded.append(name)
            logger.info("Imported %d transactions from %s", len(transactions), name)
            continue

        result.failed.append(FailedFile(name=name, reason=reason))
        logger.warning("Failed to import %s: %s", name, reason)

    return result


def import_documents(documents: Iterable[Tuple[str, bytes]],
                     store: TransactionStore,
                     extractor: TextExtractor = extract_text_from_pdf,
                     should_cancel: Optional[Callable[[], bool]] = None) -> ImportResult:
    """
    Import in-memory documents into a store

    Args:
        documents: (file name, raw bytes) pairs; the name's extension picks the adapter
        store: Store receiving the new pending transactions
        extractor: Turns PDF bytes into visible text
        should_cancel: Checked before each file; True abandons the rest of the batch

    Returns:
        ImportResult with per-file successes and failure reasons
    """
    items = ((name, (lambda payload=payload: payload)) for name, payload in documents)
    return _run_batch(items, store, extractor, should_cancel)


def import_files(paths: Iterable[Union[str, Path]],
                 store: TransactionStore,
                 extractor: TextExtractor = extract_text_from_pdf,
                 should_cancel: Optional[Callable[[], bool]] = None) -> ImportResult:
    """
    Import statement files from disk

    Files are read one at a time; an unreadable file is reported like any
    other per-file failure.
    """
    items = ((Path(p).name, Path(p).read_bytes) for p in paths)
    return _run_batch(items, store, extractor, should_cancel)
