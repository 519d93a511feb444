"""
Configuration utilities

Settings are read from environment variables (optionally via a .env file).
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Runtime settings for imports and reporting"""
    log_level: str = 'INFO'
    new_customers: int = 0
    custom_categories_path: Optional[Path] = None
    export_path: Path = Path('financial_data.csv')


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment

    Args:
        dotenv_path: Optional .env file (default: search from the working directory)

    Returns:
        Settings with defaults filled in for anything unset
    """
    load_dotenv(dotenv_path=dotenv_path)

    custom = os.getenv('FOUNDER_FINANCE_CUSTOM_CATEGORIES')
    return Settings(
        log_level=os.getenv('FOUNDER_FINANCE_LOG_LEVEL', 'INFO'),
        new_customers=_int_from_env('FOUNDER_FINANCE_NEW_CUSTOMERS', 0),
        custom_categories_path=Path(custom) if custom else None,
        export_path=Path(os.getenv('FOUNDER_FINANCE_EXPORT_PATH', 'financial_data.csv')),
    )
