from typing import List

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class FamilyBalance(BaseModel):
    family: str
    members: int
    share: float
    paid: float
    balance: float


class Settlement(BaseModel):
    from_family: str = Field(alias="from")
    to_family: str = Field(alias="to")
    # fixed to 2 decimals, e.g. "123.45"
    amount: str

    class Config:
        populate_by_name = True


class SettlementReport(BaseModel):
    total_expenses: float
    total_members: int
    per_person_share: float
    family_balances: List[FamilyBalance]
    settlements: List[Settlement]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
