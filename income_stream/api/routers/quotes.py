"""Market data passthrough routes (quotes, dividend estimates, FX, cache)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from typing_extensions import Annotated

from income_stream.api.dependencies import CommonDependencies, get_common_deps
from income_stream.config.currencies import RATE_BASE, RATE_QUOTE
from income_stream.currency import directional_rate, validate_currency
from income_stream.exceptions import ValidationError
from income_stream.utils.strings import normalize_symbol, parse_csv_field

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.get("/quote/{symbol}")
async def get_quote(symbol: str, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return await deps.quotes.get_quote(normalize_symbol(symbol))


@router.get("/dividends/{symbol}")
async def get_dividend_estimates(
    symbol: str, deps: Annotated[CommonDependencies, Depends(get_common_deps)]
) -> list[dict]:
    """Estimated payments for the next year, using the tracked stock's frequency when known."""
    symbol = normalize_symbol(symbol)
    stock = await deps.db.get_stock_by_symbol(symbol)
    frequency = stock["dividend_frequency"] if stock else None
    return await deps.quotes.get_dividend_estimates(symbol, frequency)


@router.get("/batch")
async def get_batch_quotes(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    symbols: Optional[str] = None,
) -> dict:
    """Quotes keyed by symbol. Unresolvable symbols are omitted."""
    requested = [normalize_symbol(s) for s in parse_csv_field(symbols)]
    if not requested:
        raise ValidationError("Symbols parameter is required")
    return await deps.quotes.get_batch_quotes(requested)


@router.get("/refresh/{symbol}")
async def refresh_quote(symbol: str, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    symbol = normalize_symbol(symbol)
    data = await deps.quotes.refresh(symbol)
    return {"message": f"Data for {symbol} refreshed successfully", "data": data}


@router.get("/exchange-rate")
async def get_exchange_rate(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    from_currency: Optional[str] = Query(None, alias="from"),
    to_currency: Optional[str] = Query(None, alias="to"),
) -> dict:
    """Live provider rate (bypasses the stored rates)."""
    if not from_currency or not to_currency:
        raise ValidationError("Both from and to currency parameters are required")
    from_currency = validate_currency(from_currency)
    to_currency = validate_currency(to_currency)
    if from_currency == to_currency:
        rate = 1.0
    else:
        usd_to_hkd = await deps.quotes.get_exchange_rate(RATE_BASE, RATE_QUOTE)
        rate = directional_rate(from_currency, to_currency, usd_to_hkd)
    return {"from": from_currency, "to": to_currency, "rate": rate}


@router.post("/clear-cache")
async def clear_cache(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    cleared = deps.quotes.clear_cache()
    return {"message": "Cache cleared successfully", "cleared": cleared}


@router.get("/cache-stats")
async def cache_stats(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return deps.quotes.cache_stats()
