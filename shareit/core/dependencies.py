from fastapi import HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.config import Settings
from shareit.models.group import Group


async def get_db(request: Request):
    async with request.app.state.sessionmaker() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_group_by_id(db: AsyncSession, group_id: int) -> Group:
    res = await db.execute(select(Group).where(Group.id == group_id))
    group = res.scalar_one_or_none()

    if not group:
        raise HTTPException(404, "Group not found.")

    return group


async def resolve_group(db: AsyncSession, group_id: int | None) -> Group:
    # groupId arrives either as a query parameter or in the request body
    if group_id is None:
        raise HTTPException(400, "groupId is required.")

    return await get_group_by_id(db, group_id)


def ensure_group_open(group: Group):
    if group.is_closed:
        raise HTTPException(400, "Cannot modify a closed group.")
