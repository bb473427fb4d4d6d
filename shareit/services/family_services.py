import logging

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.config import Settings
from shareit.core.dependencies import ensure_group_open, get_group_by_id
from shareit.core.security import require_password
from shareit.core.utils import normalise_name
from shareit.models.expense import Expense
from shareit.models.family import Family
from shareit.models.group import Group
from shareit.schemas.family import FamilyCreate, FamilyListItem, FamilyOut

logger = logging.getLogger(__name__)


async def get_families_sorted(db: AsyncSession, group_id: int):
    q = select(Family).where(Family.group_id == group_id).order_by(Family.name)
    res = await db.execute(q)
    return res.scalars().all()


async def _get_family(db: AsyncSession, family_id: int) -> Family:
    res = await db.execute(select(Family).where(Family.id == family_id))
    family = res.scalar_one_or_none()

    if not family:
        raise HTTPException(404, "Family not found.")

    return family


async def list_families(db: AsyncSession, group: Group):
    families = await get_families_sorted(db, group.id)

    usage_q = (
        select(func.lower(Expense.family_name).label("family_key"), func.count(Expense.id).label("usage"))
        .where(Expense.group_id == group.id)
        .group_by(func.lower(Expense.family_name))
    )
    usage_res = await db.execute(usage_q)
    usage = {row.family_key: row.usage for row in usage_res}

    return [
        FamilyListItem(
            **FamilyOut.model_validate(f).model_dump(),
            has_expenses=bool(usage.get(f.name.lower()))
        )
        for f in families
    ]


async def add_family(db: AsyncSession, settings: Settings, group: Group, data: FamilyCreate):
    ensure_group_open(group)
    require_password(settings, data.password, "adding family")

    name = normalise_name(data.name)
    if not name:
        raise HTTPException(400, "Family name is required.")

    # names are unique per group regardless of case
    q = select(Family.id).where(
        Family.group_id == group.id,
        func.lower(Family.name) == name.lower()
    )
    if (await db.execute(q)).first() is not None:
        raise HTTPException(409, "Family already exists in this group.")

    family = Family(name=name, members=data.members, group_id=group.id)
    db.add(family)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Unique constraint rejected family %r in group %s", name, group.id)
        raise HTTPException(409, "Family already exists in this group.")

    await db.refresh(family)
    logger.info("Added family %r (%d members) to group %s", family.name, family.members, group.id)
    return family


async def update_family_members(db: AsyncSession, family_id: int, members: int):
    family = await _get_family(db, family_id)
    group = await get_group_by_id(db, family.group_id)
    ensure_group_open(group)

    family.members = members
    await db.commit()
    await db.refresh(family)

    logger.info("Family %s now has %d members", family.id, members)
    return family


async def delete_family(db: AsyncSession, settings: Settings, family_id: int, password: str | None):
    family = await _get_family(db, family_id)
    group = await get_group_by_id(db, family.group_id)
    ensure_group_open(group)
    require_password(settings, password, "deleting family")

    q = select(Expense.id).where(
        Expense.family_name == family.name,
        Expense.group_id == family.group_id
    ).limit(1)
    if (await db.execute(q)).first() is not None:
        raise HTTPException(400, "Cannot delete a family that has recorded expenses.")

    await db.delete(family)
    await db.commit()

    logger.info("Deleted family %s from group %s", family_id, group.id)
    return {"message": "Family deleted successfully."}
