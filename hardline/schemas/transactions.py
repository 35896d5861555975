from datetime import date as date_type
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

from ..constants import EXPENSE_CATEGORIES, INCOME_SOURCES

TransactionKind = Literal["income", "expense"]


class TransactionBase(BaseModel):
    type: TransactionKind
    date: date_type
    amount: float = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    category: Optional[str] = None
    income_source: Optional[str] = None

    @model_validator(mode="after")
    def _check_classification(self):
        if self.type == "expense":
            if self.category not in EXPENSE_CATEGORIES:
                raise ValueError(f"expense category must be one of {', '.join(EXPENSE_CATEGORIES)}")
        elif self.income_source is not None and self.income_source not in INCOME_SOURCES:
            raise ValueError(f"income source must be one of {', '.join(INCOME_SOURCES)}")
        return self


class TransactionCreate(TransactionBase):
    user_id: int


class TransactionUpdate(BaseModel):
    date: Optional[date_type] = None
    amount: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    income_source: Optional[str] = None


class Transaction(BaseModel):
    id: int
    user_id: int
    type: TransactionKind
    date: date_type
    amount: float
    description: str
    category: Optional[str] = None
    income_source: Optional[str] = None
    fixed_expense_id: Optional[int] = None
    is_penalty_trigger: bool = False
