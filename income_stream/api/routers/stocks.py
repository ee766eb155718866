"""Stock catalog API routes."""

from fastapi import APIRouter, Depends
from typing_extensions import Annotated

from income_stream.api.dependencies import CommonDependencies, get_common_deps
from income_stream.api.models import StockCreate, StockUpdate, payload

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("")
async def list_stocks(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> list[dict]:
    """All stocks ordered by tier and symbol."""
    return await deps.stocks.list_stocks()


@router.get("/tier/{tier}")
async def stocks_by_tier(tier: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> list[dict]:
    return await deps.stocks.stocks_by_tier(tier)


@router.get("/initialize", status_code=201)
async def initialize_stocks(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    """Seed the built-in catalog with live prices. Refused once any stock exists."""
    count = await deps.stocks.initialize_catalog()
    return {"message": "Stocks initialized successfully", "count": count}


@router.get("/update-prices")
async def update_stock_prices(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    result = await deps.stocks.update_prices()
    return {"message": "Stock prices updated successfully", **result}


@router.get("/{stock_id}")
async def get_stock(stock_id: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return await deps.stocks.get_stock(stock_id)


@router.post("", status_code=201)
async def add_stock(body: StockCreate, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return await deps.stocks.add_stock(body.model_dump(mode="json", exclude_none=True))


@router.put("/{stock_id}")
async def update_stock(
    stock_id: int,
    body: StockUpdate,
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
) -> dict:
    return await deps.stocks.update_stock(stock_id, payload(body))


@router.delete("/{stock_id}")
async def delete_stock(stock_id: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    await deps.stocks.delete_stock(stock_id)
    return {"message": "Stock deleted successfully"}
