"""USD/HKD exchange rate API routes."""

from fastapi import APIRouter, Depends, Query
from typing_extensions import Annotated

from income_stream.api.dependencies import CommonDependencies, get_common_deps

router = APIRouter(prefix="/exchange-rates", tags=["exchange-rates"])


@router.get("/current")
async def current_rate(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    from_currency: str = Query("USD", alias="from"),
    to_currency: str = Query("HKD", alias="to"),
) -> dict:
    """Rate for the pair, reusing a stored USD->HKD rate from the last day when there is one."""
    return await deps.currency.get_rate(from_currency, to_currency)


@router.get("/convert")
async def convert(
    amount: float,
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    from_currency: str = Query("USD", alias="from"),
    to_currency: str = Query("HKD", alias="to"),
) -> dict:
    return await deps.currency.convert(amount, from_currency, to_currency)


@router.get("/history")
async def rate_history(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    from_currency: str = Query("USD", alias="from"),
    to_currency: str = Query("HKD", alias="to"),
    days: int = Query(30, ge=1, le=3650),
) -> list[dict]:
    return await deps.currency.history(from_currency, to_currency, days)


@router.post("/refresh")
async def refresh_rates(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    """Fetch USD->HKD and store it with its reciprocal."""
    rates = await deps.currency.refresh_rates()
    return {"message": "Exchange rates refreshed successfully", "rates": rates}
