from typing import Optional
from pydantic import BaseModel, Field, field_validator


class FixedExpenseBase(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    trigger_day: int = Field(..., ge=1, le=31)  # day of month the debit fires
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class FixedExpenseCreate(FixedExpenseBase):
    user_id: int


class FixedExpenseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, ge=0)
    trigger_day: Optional[int] = Field(None, ge=1, le=31)
    is_active: Optional[bool] = None


class FixedExpense(FixedExpenseBase):
    id: int
    user_id: int
    last_charged_at: Optional[str] = None


class ChargeRunResult(BaseModel):
    date: str
    succeeded: int
    skipped: int
    failed: int
