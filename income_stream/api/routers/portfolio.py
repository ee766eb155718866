"""Portfolio, holdings, rebalancing and tier API routes."""

from fastapi import APIRouter, Depends
from typing_extensions import Annotated

from income_stream.api.dependencies import CommonDependencies, get_common_deps
from income_stream.api.models import HoldingCreate, HoldingUpdate, PortfolioUpdate, payload

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("")
async def get_portfolio(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    """The portfolio record (created with default targets on first access)."""
    return await deps.portfolio.get_portfolio()


@router.put("")
async def update_portfolio(
    body: PortfolioUpdate, deps: Annotated[CommonDependencies, Depends(get_common_deps)]
) -> dict:
    return await deps.portfolio.update_portfolio(payload(body))


@router.get("/holdings")
async def list_holdings(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> list[dict]:
    return await deps.portfolio.list_holdings()


@router.post("/holdings", status_code=201)
async def add_holding(body: HoldingCreate, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return await deps.portfolio.add_holding(body.model_dump(mode="json"))


@router.put("/holdings/{holding_id}")
async def update_holding(
    holding_id: int,
    body: HoldingUpdate,
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
) -> dict:
    return await deps.portfolio.update_holding(holding_id, payload(body))


@router.delete("/holdings/{holding_id}")
async def delete_holding(holding_id: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    await deps.portfolio.delete_holding(holding_id)
    return {"message": "Holding deleted successfully"}


@router.get("/rebalance")
async def rebalance(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    """Buy/Sell suggestions for holdings more than the threshold away from target."""
    return await deps.portfolio.rebalance()


@router.get("/tiers")
async def tier_summary(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> list[dict]:
    return await deps.portfolio.tiers()


@router.get("/tier/{tier}")
async def tier_holdings(tier: int, deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    return await deps.portfolio.tier(tier)


@router.get("/update-prices")
async def update_prices(deps: Annotated[CommonDependencies, Depends(get_common_deps)]) -> dict:
    result = await deps.portfolio.update_prices()
    return {"message": "Prices updated successfully", **result}
