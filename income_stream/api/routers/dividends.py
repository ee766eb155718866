"""Dividend records and income report API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from typing_extensions import Annotated

from income_stream.api.dependencies import CommonDependencies, get_common_deps
from income_stream.api.models import DividendCreate, DividendUpdate, payload

router = APIRouter(prefix="/dividends", tags=["dividends"])


@router.get("")
async def list_dividends(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> list[dict]:
    """All dividends, newest payment first."""
    return await deps.dividends.list_dividends()


@router.get("/income/monthly")
async def monthly_income(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    year: Optional[int] = Query(None, ge=1900, le=9999),
    currency: Optional[str] = None,
) -> dict:
    return await deps.dividends.monthly_income(year, currency)


@router.get("/income/yearly")
async def yearly_income(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    start_year: Optional[int] = Query(None, ge=1900, le=9999),
    end_year: Optional[int] = Query(None, ge=1900, le=9999),
    currency: Optional[str] = None,
) -> dict:
    return await deps.dividends.yearly_income(start_year, end_year, currency)


@router.get("/upcoming")
async def upcoming_dividends(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    days: Optional[int] = Query(None, ge=0, le=3660),
) -> list[dict]:
    return await deps.dividends.upcoming(days)


@router.get("/forecast")
async def dividend_forecast(
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
    months: Optional[int] = Query(None, ge=1, le=120),
    currency: Optional[str] = None,
) -> dict:
    return await deps.dividends.forecast(months, currency)


@router.get("/stock/{stock_id}")
async def dividends_for_stock(
    stock_id: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]
) -> list[dict]:
    return await deps.dividends.dividends_for_stock(stock_id)


@router.get("/{dividend_id}")
async def get_dividend(dividend_id: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return await deps.dividends.get_dividend(dividend_id)


@router.post("", status_code=201)
async def add_dividend(body: DividendCreate, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return await deps.dividends.add_dividend(body.model_dump(mode="json"))


@router.put("/{dividend_id}")
async def update_dividend(
    dividend_id: int,
    body: DividendUpdate,
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
) -> dict:
    return await deps.dividends.update_dividend(dividend_id, payload(body))


@router.delete("/{dividend_id}")
async def delete_dividend(dividend_id: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    await deps.dividends.delete_dividend(dividend_id)
    return {"message": "Dividend deleted successfully"}
