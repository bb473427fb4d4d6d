from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.config import Settings
from shareit.core.dependencies import get_app_settings, get_db
from shareit.schemas.group import GroupCreate, GroupOut, GroupUpdate, GroupWithMetricsOut
from shareit.services.group_services import create_group, get_group, list_groups, update_group

router = APIRouter()


@router.get("", response_model=list[GroupWithMetricsOut])
async def all_groups(db: AsyncSession = Depends(get_db)):
    return await list_groups(db)


@router.get("/{group_id}", response_model=GroupWithMetricsOut)
async def fetch_group(group_id: int, db: AsyncSession = Depends(get_db)):
    return await get_group(db, group_id)


@router.post("", response_model=GroupOut, status_code=201)
async def create_new_group(
    data: GroupCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    return await create_group(db, settings, data)


@router.patch("/{group_id}", response_model=GroupOut)
async def edit_group(
    group_id: int,
    data: GroupUpdate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    return await update_group(db, settings, group_id, data)
