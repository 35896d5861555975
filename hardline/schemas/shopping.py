from typing import Literal, Optional
from pydantic import BaseModel, Field

ShoppingCycle = Literal["MonthStart", "MidMonth", "Both"]
ShoppingCategory = Literal["Cleaning", "Pantry", "Fridge"]


class ShoppingItemBase(BaseModel):
    name: str = Field(..., min_length=1)
    category: ShoppingCategory
    cycle: ShoppingCycle
    quantity: int = Field(1, ge=1)
    is_diabetic_friendly: bool = False
    typical_cost: float = Field(0, ge=0)
    is_active: bool = True


class ShoppingItemCreate(ShoppingItemBase):
    user_id: int


class ShoppingItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[ShoppingCategory] = None
    cycle: Optional[ShoppingCycle] = None
    quantity: Optional[int] = Field(None, ge=1)
    is_diabetic_friendly: Optional[bool] = None
    typical_cost: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ShoppingItem(ShoppingItemBase):
    id: int
    user_id: int


class CycleInfo(BaseModel):
    payday: int
    date: str
    cycle: Literal["MonthStart", "MidMonth"]
