"""Pydantic models for API request validation and documentation."""

from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from income_stream.config.tiers import DEFAULT_RISK_LEVEL

CurrencyCode = Literal["USD", "HKD"]
Frequency = Literal["Weekly", "Monthly", "Quarterly", "Semi-Annual", "Annual", "None"]
RiskLevel = Literal["Low", "Moderate", "High", "Very High"]


# Stock Models
class StockCreate(BaseModel):
    """New catalog entry. The price is looked up, never supplied."""

    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1)
    tier: int = Field(..., ge=1, le=3)
    tier_category: Optional[str] = None
    sub_category: Optional[str] = None
    dividend_yield: float = Field(0, ge=0)
    dividend_frequency: Frequency = "Quarterly"
    next_dividend_date: Optional[date] = None
    description: Optional[str] = None
    risk_level: RiskLevel = DEFAULT_RISK_LEVEL
    currency: CurrencyCode = "USD"


class StockUpdate(BaseModel):
    symbol: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1)
    tier: Optional[int] = Field(None, ge=1, le=3)
    tier_category: Optional[str] = None
    sub_category: Optional[str] = None
    dividend_yield: Optional[float] = Field(None, ge=0)
    dividend_frequency: Optional[Frequency] = None
    next_dividend_date: Optional[date] = None
    description: Optional[str] = None
    risk_level: Optional[RiskLevel] = None
    currency: Optional[CurrencyCode] = None


# Portfolio Models
class PortfolioUpdate(BaseModel):
    total_investment: Optional[float] = Field(None, ge=0)
    cash_reserve: Optional[float] = Field(None, ge=0)
    tier1_allocation: Optional[float] = Field(None, ge=0)
    tier2_allocation: Optional[float] = Field(None, ge=0)
    tier3_allocation: Optional[float] = Field(None, ge=0)
    base_currency: Optional[CurrencyCode] = None


class HoldingCreate(BaseModel):
    stock_id: int
    shares: float = Field(..., ge=0)
    average_cost_basis: float = Field(0, ge=0)
    target_allocation_percentage: float = Field(0, ge=0, le=100)
    purchase_date: Optional[date] = None


class HoldingUpdate(BaseModel):
    shares: Optional[float] = Field(None, ge=0)
    average_cost_basis: Optional[float] = Field(None, ge=0)
    target_allocation_percentage: Optional[float] = Field(None, ge=0, le=100)


# Dividend Models
class DividendCreate(BaseModel):
    """A received payment. Any client-supplied total_amount is ignored."""

    stock_id: int
    ex_date: date
    payment_date: date
    amount_per_share: float = Field(..., ge=0)
    shares: float = Field(..., ge=0)
    currency: CurrencyCode = "USD"
    reinvested: bool = False
    notes: Optional[str] = None


class DividendUpdate(BaseModel):
    ex_date: Optional[date] = None
    payment_date: Optional[date] = None
    amount_per_share: Optional[float] = Field(None, ge=0)
    shares: Optional[float] = Field(None, ge=0)
    currency: Optional[CurrencyCode] = None
    reinvested: Optional[bool] = None
    notes: Optional[str] = None


# Settings Models
class SettingValue(BaseModel):
    value: Any


def payload(model: BaseModel) -> dict:
    """Fields the client actually sent, JSON-ready (dates as ISO strings)."""
    return model.model_dump(mode="json", exclude_unset=True, exclude_none=True)
