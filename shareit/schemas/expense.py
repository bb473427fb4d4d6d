from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# largest single expense accepted, in the group currency
MAX_AMOUNT = 1_000_000_000


class ExpenseCreate(BaseModel):
    group_id: Optional[int] = None
    description: Optional[str] = None
    amount: float = Field(ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    family_name: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ExpenseUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    family_name: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ExpenseOut(BaseModel):
    id: int
    group_id: int
    description: Optional[str] = None
    amount: float
    family_name: str
    date: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
