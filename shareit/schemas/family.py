from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class FamilyCreate(BaseModel):
    group_id: Optional[int] = None
    name: str = ""
    members: int = Field(ge=0, le=10)
    password: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class FamilyUpdate(BaseModel):
    members: int = Field(ge=0, le=10)


class FamilyDelete(BaseModel):
    password: Optional[str] = None


class FamilyOut(BaseModel):
    id: int
    name: str
    members: int
    group_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class FamilyListItem(FamilyOut):
    has_expenses: bool = False
