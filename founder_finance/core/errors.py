"""
Exceptions raised by the finance core
"""


class FinanceError(Exception):
    """Base class for founder_finance errors"""


class UserInputError(FinanceError):
    """Rejected user action (incomplete entry, duplicate category, bad split)"""


class IngestionError(FinanceError):
    """A whole file could not be ingested"""
