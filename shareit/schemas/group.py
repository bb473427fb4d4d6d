from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class GroupCreate(BaseModel):
    name: str = ""
    description: Optional[str] = None
    password: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    password: Optional[str] = None

    class Config:
        extra = "ignore"


class GroupMetrics(BaseModel):
    total_expenses: float = 0
    expense_count: int = 0
    family_count: int = 0

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class GroupOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class GroupWithMetricsOut(GroupOut):
    metrics: GroupMetrics
