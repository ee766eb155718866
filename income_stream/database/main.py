"""
Database - Single source of truth for all database operations.

Usage:
    db = Database()
    await db.connect()
    stocks = await db.get_stocks(tier=1)
    holding = await db.get_holding(3)   # includes the joined stock
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import aiosqlite

from income_stream.database.base import BaseDatabase
from income_stream.utils.dates import utc_now_iso

logger = logging.getLogger(__name__)

STOCK_ORDER = "ORDER BY tier, symbol"


class Database(BaseDatabase):
    """Single source of truth for all database operations."""

    _instances: dict[str, "Database"] = {}  # path -> instance
    _default_path: str = None

    def __new__(cls, path: str = None):
        """One database instance per unique path. None means the default data file."""
        if path is None:
            if cls._default_path is None:
                from income_stream.paths import DATA_DIR

                cls._default_path = str(DATA_DIR / "income_stream.db")
            path = cls._default_path

        if path not in cls._instances:
            instance = super().__new__(cls)
            instance._path = Path(path)
            instance._connection = None
            cls._instances[path] = instance

        return cls._instances[path]

    def __init__(self, path: str = None):
        pass

    async def connect(self) -> "Database":
        """Connect to database and initialize schema."""
        if self._connection is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._path)
            self._connection.row_factory = aiosqlite.Row
            await self._connection.execute("PRAGMA journal_mode=WAL")
            await self._connection.execute("PRAGMA busy_timeout=30000")
            await self._init_schema()
            logger.info(f"Connected to database at {self._path}")
        return self

    async def close(self):
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def remove_from_cache(self):
        """Remove this instance from the singleton cache. Use for temporary databases."""
        path_str = str(self._path)
        if path_str in self._instances:
            del self._instances[path_str]

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    async def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value by key."""
        row = await self._fetch_one("SELECT value FROM settings WHERE key = ?", (key,))
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError):
            return row["value"]

    async def set_setting(self, key: str, value: Any) -> None:
        json_value = json.dumps(value) if not isinstance(value, str) else value
        await self.conn.execute("INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, json_value))
        await self.conn.commit()

    async def get_all_settings(self) -> dict:
        rows = await self._fetch_all("SELECT key, value FROM settings")
        result = {}
        for row in rows:
            try:
                result[row["key"]] = json.loads(row["value"])
            except (json.JSONDecodeError, TypeError):
                result[row["key"]] = row["value"]
        return result

    # -------------------------------------------------------------------------
    # Stocks
    # -------------------------------------------------------------------------

    async def get_stock(self, stock_id: int) -> Optional[dict]:
        return await self._fetch_one("SELECT * FROM stocks WHERE id = ?", (stock_id,))

    async def get_stock_by_symbol(self, symbol: str) -> Optional[dict]:
        return await self._fetch_one("SELECT * FROM stocks WHERE symbol = ?", (symbol,))

    async def get_stocks(self, tier: int | None = None) -> list[dict]:
        """All stocks, optionally restricted to one tier."""
        if tier is None:
            return await self._fetch_all(f"SELECT * FROM stocks {STOCK_ORDER}")
        return await self._fetch_all(f"SELECT * FROM stocks WHERE tier = ? {STOCK_ORDER}", (tier,))

    async def count_stocks(self) -> int:
        return await self._count("stocks")

    async def insert_stock(self, data: dict) -> dict:
        stock_id = await self._insert("stocks", data)
        return await self.get_stock(stock_id)

    async def insert_stocks(self, stocks: list[dict]) -> int:
        """Insert many stocks in one transaction."""
        try:
            for data in stocks:
                await self._insert("stocks", data, commit=False)
            await self.conn.commit()
        except Exception:
            await self.conn.rollback()
            raise
        return len(stocks)

    async def update_stock(self, stock_id: int, data: dict) -> Optional[dict]:
        if not await self._update("stocks", stock_id, data):
            return None
        return await self.get_stock(stock_id)

    async def delete_stock(self, stock_id: int) -> bool:
        return await self._delete("stocks", stock_id)

    async def count_stock_references(self, stock_id: int) -> dict[str, int]:
        """How many holdings and dividends point at a stock."""
        return {
            "holdings": await self._count("holdings", "stock_id = ?", (stock_id,)),
            "dividends": await self._count("dividends", "stock_id = ?", (stock_id,)),
        }

    async def _attach_stocks(self, rows: list[dict]) -> list[dict]:
        """Embed the referenced stock under 'stock' (None if it no longer exists)."""
        stock_ids = sorted({row["stock_id"] for row in rows})
        stocks = {}
        if stock_ids:
            placeholders = ",".join("?" * len(stock_ids))
            for stock in await self._fetch_all(
                f"SELECT * FROM stocks WHERE id IN ({placeholders})",  # noqa: S608
                stock_ids,
            ):
                stocks[stock["id"]] = stock
        for row in rows:
            row["stock"] = stocks.get(row["stock_id"])
        return rows

    # -------------------------------------------------------------------------
    # Holdings
    # -------------------------------------------------------------------------

    async def get_holding(self, holding_id: int) -> Optional[dict]:
        row = await self._fetch_one("SELECT * FROM holdings WHERE id = ?", (holding_id,))
        if row is None:
            return None
        return (await self._attach_stocks([row]))[0]

    async def get_holdings(self, tier: int | None = None) -> list[dict]:
        """All holdings with their stock embedded, optionally only those in one tier."""
        if tier is None:
            rows = await self._fetch_all("SELECT * FROM holdings ORDER BY id")
        else:
            rows = await self._fetch_all(
                """SELECT h.* FROM holdings h
                   JOIN stocks s ON s.id = h.stock_id
                   WHERE s.tier = ?
                   ORDER BY h.id""",
                (tier,),
            )
        return await self._attach_stocks(rows)

    async def insert_holding(self, data: dict) -> dict:
        holding_id = await self._insert("holdings", data)
        return await self.get_holding(holding_id)

    async def update_holding(self, holding_id: int, data: dict) -> Optional[dict]:
        if not await self._update("holdings", holding_id, data):
            return None
        return await self.get_holding(holding_id)

    async def delete_holding(self, holding_id: int) -> bool:
        return await self._delete("holdings", holding_id)

    async def set_allocation_percentages(self, percentages: dict[int, float]) -> None:
        """Write every holding's allocation percentage in a single transaction."""
        now = utc_now_iso()
        try:
            await self.conn.executemany(
                "UPDATE holdings SET allocation_percentage = ?, updated_at = ? WHERE id = ?",
                [(pct, now, holding_id) for holding_id, pct in percentages.items()],
            )
            await self.conn.commit()
        except Exception:
            await self.conn.rollback()
            raise

    async def update_holding_values(self, values: dict[int, float]) -> None:
        """Set current_value for several holdings in one transaction."""
        now = utc_now_iso()
        try:
            await self.conn.executemany(
                "UPDATE holdings SET current_value = ?, last_updated = ?, updated_at = ? WHERE id = ?",
                [(value, now, now, holding_id) for holding_id, value in values.items()],
            )
            await self.conn.commit()
        except Exception:
            await self.conn.rollback()
            raise

    # -------------------------------------------------------------------------
    # Dividends
    # -------------------------------------------------------------------------

    def _dividend_row(self, row: dict) -> dict:
        row["reinvested"] = bool(row["reinvested"])
        return row

    async def get_dividend(self, dividend_id: int) -> Optional[dict]:
        row = await self._fetch_one("SELECT * FROM dividends WHERE id = ?", (dividend_id,))
        if row is None:
            return None
        return (await self._attach_stocks([self._dividend_row(row)]))[0]

    async def get_dividends(self, stock_id: int | None = None) -> list[dict]:
        """Dividends, newest payment first."""
        if stock_id is None:
            rows = await self._fetch_all("SELECT * FROM dividends ORDER BY payment_date DESC, id DESC")
        else:
            rows = await self._fetch_all(
                "SELECT * FROM dividends WHERE stock_id = ? ORDER BY payment_date DESC, id DESC",
                (stock_id,),
            )
        return await self._attach_stocks([self._dividend_row(r) for r in rows])

    async def get_dividends_paid_between(self, start: str, end: str) -> list[dict]:
        """Dividends whose payment_date falls in [start, end] (ISO dates), oldest first."""
        rows = await self._fetch_all(
            """SELECT * FROM dividends
               WHERE substr(payment_date, 1, 10) >= ? AND substr(payment_date, 1, 10) <= ?
               ORDER BY payment_date ASC, id ASC""",
            (start, end),
        )
        return await self._attach_stocks([self._dividend_row(r) for r in rows])

    async def insert_dividend(self, data: dict) -> dict:
        dividend_id = await self._insert("dividends", data)
        return await self.get_dividend(dividend_id)

    async def update_dividend(self, dividend_id: int, data: dict) -> Optional[dict]:
        if not await self._update("dividends", dividend_id, data):
            return None
        return await self.get_dividend(dividend_id)

    async def delete_dividend(self, dividend_id: int) -> bool:
        return await self._delete("dividends", dividend_id)

    # -------------------------------------------------------------------------
    # Exchange Rates
    # -------------------------------------------------------------------------

    async def get_latest_rate(self, from_currency: str, to_currency: str, since: str | None = None) -> Optional[dict]:
        """Most recent stored rate for a pair, optionally no older than `since`."""
        query = "SELECT * FROM exchange_rates WHERE from_currency = ? AND to_currency = ?"
        params: list = [from_currency, to_currency]
        if since:
            query += " AND date >= ?"
            params.append(since)
        query += " ORDER BY date DESC LIMIT 1"
        return await self._fetch_one(query, tuple(params))

    async def get_rate_history(self, from_currency: str, to_currency: str, since: str) -> list[dict]:
        """Stored rates for a pair from `since` onward, oldest first."""
        return await self._fetch_all(
            """SELECT * FROM exchange_rates
               WHERE from_currency = ? AND to_currency = ? AND date >= ?
               ORDER BY date ASC""",
            (from_currency, to_currency, since),
        )

    async def save_rate(self, from_currency: str, to_currency: str, rate: float, date: str, source: str) -> dict:
        """Insert a rate record. A duplicate (pair, date) replaces the stored rate."""
        now = utc_now_iso()
        await self.conn.execute(
            """INSERT INTO exchange_rates (from_currency, to_currency, rate, date, source, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(from_currency, to_currency, date)
               DO UPDATE SET rate = excluded.rate, source = excluded.source, updated_at = excluded.updated_at""",
            (from_currency, to_currency, rate, date, source, now, now),
        )
        await self.conn.commit()
        return await self.get_latest_rate(from_currency, to_currency, since=date)

    async def upsert_daily_rate(
        self, from_currency: str, to_currency: str, rate: float, date: str, day_start: str, source: str
    ) -> dict:
        """Update the pair's record dated today (on or after day_start), or insert one."""
        existing = await self.get_latest_rate(from_currency, to_currency, since=day_start)
        if existing:
            await self._update("exchange_rates", existing["id"], {"rate": rate, "date": date, "source": source})
            return await self._fetch_one("SELECT * FROM exchange_rates WHERE id = ?", (existing["id"],))
        return await self.save_rate(from_currency, to_currency, rate, date, source)

    # -------------------------------------------------------------------------
    # Portfolio (singleton row, id = 1)
    # -------------------------------------------------------------------------

    async def get_portfolio(self) -> dict:
        """The portfolio record, created with its defaults on first use."""
        row = await self._fetch_one("SELECT * FROM portfolio WHERE id = 1")
        if row is None:
            now = utc_now_iso()
            await self.conn.execute(
                "INSERT OR IGNORE INTO portfolio (id, last_updated, created_at, updated_at) VALUES (1, ?, ?, ?)",
                (now, now, now),
            )
            await self.conn.commit()
            logger.info("Created portfolio record with default allocations")
            row = await self._fetch_one("SELECT * FROM portfolio WHERE id = 1")
        return row

    async def update_portfolio(self, data: dict) -> dict:
        await self.get_portfolio()
        if data:
            await self._update("portfolio", 1, data)
        return await self.get_portfolio()

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    async def _init_schema(self) -> None:
        """Initialize database schema."""
        await self.conn.executescript(SCHEMA)
        await self.conn.commit()


SCHEMA = """
-- Settings (key-value store)
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

-- Stock catalog
CREATE TABLE IF NOT EXISTS stocks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    symbol TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    tier INTEGER NOT NULL CHECK(tier IN (1, 2, 3)),
    tier_category TEXT NOT NULL,
    sub_category TEXT,
    current_price REAL NOT NULL DEFAULT 0,
    currency TEXT NOT NULL DEFAULT 'USD' CHECK(currency IN ('USD', 'HKD')),
    dividend_yield REAL NOT NULL DEFAULT 0,  -- Annual, percent
    dividend_frequency TEXT NOT NULL DEFAULT 'Quarterly',
    next_dividend_date TEXT,
    description TEXT,
    risk_level TEXT NOT NULL DEFAULT 'Moderate',
    last_updated TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

-- Positions held
CREATE TABLE IF NOT EXISTS holdings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    stock_id INTEGER NOT NULL,
    shares REAL NOT NULL DEFAULT 0 CHECK(shares >= 0),
    average_cost_basis REAL NOT NULL DEFAULT 0 CHECK(average_cost_basis >= 0),
    current_value REAL NOT NULL DEFAULT 0,  -- current_price * shares
    allocation_percentage REAL NOT NULL DEFAULT 0,
    target_allocation_percentage REAL NOT NULL DEFAULT 0,
    currency TEXT NOT NULL DEFAULT 'USD',
    purchase_date TEXT,
    last_updated TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (stock_id) REFERENCES stocks(id)
);

-- Dividend payments received
CREATE TABLE IF NOT EXISTS dividends (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    stock_id INTEGER NOT NULL,
    ex_date TEXT NOT NULL,
    payment_date TEXT NOT NULL,
    amount_per_share REAL NOT NULL CHECK(amount_per_share >= 0),
    shares REAL NOT NULL CHECK(shares >= 0),
    total_amount REAL NOT NULL,  -- amount_per_share * shares
    currency TEXT NOT NULL DEFAULT 'USD' CHECK(currency IN ('USD', 'HKD')),
    reinvested INTEGER NOT NULL DEFAULT 0,
    notes TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (stock_id) REFERENCES stocks(id)
);

-- Exchange rate observations
CREATE TABLE IF NOT EXISTS exchange_rates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_currency TEXT NOT NULL CHECK(from_currency IN ('USD', 'HKD')),
    to_currency TEXT NOT NULL CHECK(to_currency IN ('USD', 'HKD')),
    rate REAL NOT NULL CHECK(rate > 0),
    date TEXT NOT NULL,  -- ISO UTC timestamp
    source TEXT NOT NULL DEFAULT 'Yahoo Finance',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

-- Portfolio targets (single row)
CREATE TABLE IF NOT EXISTS portfolio (
    id INTEGER PRIMARY KEY CHECK(id = 1),
    total_investment REAL NOT NULL DEFAULT 165000,
    cash_reserve REAL NOT NULL DEFAULT 24750,
    tier1_allocation REAL NOT NULL DEFAULT 90750,
    tier2_allocation REAL NOT NULL DEFAULT 41250,
    tier3_allocation REAL NOT NULL DEFAULT 8250,
    base_currency TEXT NOT NULL DEFAULT 'USD',
    last_rebalanced TEXT,
    last_updated TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

-- Create indexes
CREATE INDEX IF NOT EXISTS idx_stocks_tier ON stocks(tier);
CREATE INDEX IF NOT EXISTS idx_holdings_stock ON holdings(stock_id);
CREATE INDEX IF NOT EXISTS idx_dividends_stock ON dividends(stock_id);
CREATE INDEX IF NOT EXISTS idx_dividends_payment_date ON dividends(payment_date);
CREATE UNIQUE INDEX IF NOT EXISTS idx_exchange_rates_pair_date ON exchange_rates(from_currency, to_currency, date);
"""
