"""
Founder Finance

Turns raw bank statements into reviewed, categorized transactions and
monthly cash-flow KPIs (burn, runway, margins, CAC).
"""

__version__ = "1.0.0"

from .core.session import FinanceSession

__all__ = [
    'FinanceSession',
]
