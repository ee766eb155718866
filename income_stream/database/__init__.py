"""
Database Package

SQLite persistence for stocks, holdings, dividends, exchange rates,
the portfolio record and settings.
"""

from income_stream.database.base import BaseDatabase
from income_stream.database.main import Database

__all__ = ["Database", "BaseDatabase"]
