from datetime import date as date_type
from typing import Literal, Optional
from pydantic import BaseModel, Field

PriceSource = Literal["purchase", "manual", "estimate"]
Trend = Literal["up", "down", "stable", "insufficient_data"]


class PriceRecordCreate(BaseModel):
    user_id: int
    shopping_item_id: int
    price: float = Field(..., ge=0)
    source: PriceSource = "manual"
    recorded_date: Optional[date_type] = None


class PriceRecord(BaseModel):
    id: int
    user_id: int
    shopping_item_id: int
    price: float
    recorded_date: date_type
    source: PriceSource


class PriceTrend(BaseModel):
    trend: Trend
    current_price: Optional[float] = None
    previous_price: Optional[float] = None
    change_percent: Optional[float] = None
    avg_price: Optional[float] = None


class PriceComparison(BaseModel):
    item_id: int
    item_name: str
    current_price: float
    typical_cost: float
    trend: Trend
    change_percent: Optional[float] = None
