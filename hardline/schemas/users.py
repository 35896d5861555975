from typing import Optional
from pydantic import BaseModel, Field


class UserBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    payday: int = Field(25, ge=1, le=31)
    penalty_system_enabled: bool = False


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    payday: Optional[int] = Field(None, ge=1, le=31)
    penalty_system_enabled: Optional[bool] = None


class User(UserBase):
    id: int
