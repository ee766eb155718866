"""
Settings - Runtime configuration stored in the database.

Usage:
    settings = Settings()
    days = await settings.get('upcoming_days')
    await settings.set('forecast_months', 6)
    all_settings = await settings.all()

Defaults are written on first run and can be edited through /api/settings.
"""

from typing import Any

from income_stream.config.currencies import DEFAULT_CURRENCY, SUPPORTED_CURRENCIES
from income_stream.database import Database
from income_stream.exceptions import ValidationError
from income_stream.utils.decorators import singleton

# Default settings - applied on first run, then configurable via the API
DEFAULTS = {
    # Display currency when a request does not name one
    "default_currency": DEFAULT_CURRENCY,
    # Dividend views
    "upcoming_days": 30,  # Window for /dividends/upcoming
    "forecast_months": 12,  # Months covered by /dividends/forecast
    "income_history_years": 5,  # Yearly income default range (end - N .. end)
    # Exchange rates
    "rate_freshness_hours": 24,  # Reuse a persisted USD->HKD rate this long
    # Rebalancing
    "rebalance_threshold_pct": 1.0,  # Recommend when |target - current| exceeds this
    # Quote provider
    "quote_cache_ttl_days": 7,  # In-memory quote cache lifetime
    # Startup seeding
    "seed_additional_stocks": True,
    # Background jobs
    "scheduler_enabled": True,
    "price_refresh_interval_minutes": 10080,  # Weekly, matching the quote cache
    "exchange_rate_refresh_interval_minutes": 1440,  # Daily
}


def _coerce(key: str, value: Any) -> Any:
    """Coerce an incoming value to the type of the key's default."""
    expected = type(DEFAULTS[key])
    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false", "1", "0"):
            return value.strip().lower() in ("true", "1")
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise ValidationError(f"Setting '{key}' must be a boolean")
    if expected in (int, float):
        if isinstance(value, bool):
            raise ValidationError(f"Setting '{key}' must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Setting '{key}' must be a number") from None
        if expected is int:
            if not number.is_integer():
                raise ValidationError(f"Setting '{key}' must be a whole number")
            number = int(number)
        if number < 0:
            raise ValidationError(f"Setting '{key}' must not be negative")
        return number
    if key == "default_currency":
        code = str(value).upper()
        if code not in SUPPORTED_CURRENCIES:
            raise ValidationError("Invalid currency. Only USD and HKD are supported.")
        return code
    return str(value)


@singleton
class Settings:
    """Runtime settings backed by the settings table."""

    _db: "Database"

    def __init__(self):
        self._db = Database()

    async def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value, falling back to the caller's default then DEFAULTS."""
        value = await self._db.get_setting(key)
        if value is not None:
            return value
        return default if default is not None else DEFAULTS.get(key)

    async def set(self, key: str, value: Any) -> Any:
        """Validate and store a setting. Returns the stored value."""
        if key not in DEFAULTS:
            raise ValidationError(f"Unknown setting: {key}")
        coerced = _coerce(key, value)
        await self._db.set_setting(key, coerced)
        return coerced

    async def all(self) -> dict:
        """All settings, stored values over defaults."""
        result = dict(DEFAULTS)
        result.update(await self._db.get_all_settings())
        return result

    async def init_defaults(self) -> None:
        """Write any default not yet present in the database."""
        stored = await self._db.get_all_settings()
        for key, value in DEFAULTS.items():
            if key not in stored:
                await self._db.set_setting(key, value)
