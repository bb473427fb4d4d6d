from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.config import Settings
from shareit.core.dependencies import get_app_settings, get_db, resolve_group
from shareit.schemas.family import FamilyCreate, FamilyDelete, FamilyListItem, FamilyOut, FamilyUpdate
from shareit.services.family_services import add_family, delete_family, list_families, update_family_members

router = APIRouter()


@router.get("", response_model=list[FamilyListItem])
async def all_families(
    group_id: Optional[int] = Query(default=None, alias="groupId"),
    db: AsyncSession = Depends(get_db)
):
    group = await resolve_group(db, group_id)
    return await list_families(db, group)


@router.post("", response_model=FamilyOut, status_code=201)
async def new_family(
    data: FamilyCreate,
    group_id: Optional[int] = Query(default=None, alias="groupId"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    group = await resolve_group(db, group_id if group_id is not None else data.group_id)
    return await add_family(db, settings, group, data)


@router.patch("/{family_id}", response_model=FamilyOut)
async def edit_members(family_id: int, data: FamilyUpdate, db: AsyncSession = Depends(get_db)):
    return await update_family_members(db, family_id, data.members)


@router.delete("/{family_id}")
async def remove_family(
    family_id: int,
    data: Optional[FamilyDelete] = None,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    password = data.password if data else None
    return await delete_family(db, settings, family_id, password)
