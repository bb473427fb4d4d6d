import logging

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.config import Settings
from shareit.core.dependencies import get_group_by_id
from shareit.core.security import require_password
from shareit.core.utils import normalise_name
from shareit.models.expense import Expense
from shareit.models.family import Family
from shareit.models.group import GROUP_STATUSES, Group
from shareit.schemas.group import GroupCreate, GroupMetrics, GroupOut, GroupUpdate, GroupWithMetricsOut

logger = logging.getLogger(__name__)


async def group_metrics(db: AsyncSession, group_id: int | None = None) -> dict[int, GroupMetrics]:
    """
    Returns:
        {
            group_id: GroupMetrics(total_expenses, expense_count, family_count)
        }
    """
    expense_q = (
        select(
            Expense.group_id,
            func.coalesce(func.sum(Expense.amount), 0).label("total_amount"),
            func.count(Expense.id).label("expense_count"),
        )
        .group_by(Expense.group_id)
    )
    family_q = (
        select(Family.group_id, func.count(Family.id).label("family_count"))
        .group_by(Family.group_id)
    )

    if group_id is not None:
        expense_q = expense_q.where(Expense.group_id == group_id)
        family_q = family_q.where(Family.group_id == group_id)

    expense_res = await db.execute(expense_q)
    family_res = await db.execute(family_q)

    metrics: dict[int, GroupMetrics] = {}
    for row in expense_res:
        m = metrics.setdefault(row.group_id, GroupMetrics())
        m.total_expenses = float(row.total_amount)
        m.expense_count = row.expense_count

    for row in family_res:
        m = metrics.setdefault(row.group_id, GroupMetrics())
        m.family_count = row.family_count

    return metrics


def _with_metrics(group: Group, metrics: GroupMetrics | None) -> GroupWithMetricsOut:
    return GroupWithMetricsOut(
        **GroupOut.model_validate(group).model_dump(),
        metrics=metrics or GroupMetrics()
    )


async def _name_taken(db: AsyncSession, name: str, exclude_id: int | None = None) -> bool:
    q = select(Group.id).where(func.lower(Group.name) == name.lower())
    if exclude_id is not None:
        q = q.where(Group.id != exclude_id)
    res = await db.execute(q)
    return res.first() is not None


async def list_groups(db: AsyncSession):
    res = await db.execute(select(Group).order_by(Group.created_at, Group.id))
    groups = res.scalars().all()
    metrics = await group_metrics(db)

    return [_with_metrics(g, metrics.get(g.id)) for g in groups]


async def get_group(db: AsyncSession, group_id: int):
    group = await get_group_by_id(db, group_id)
    metrics = await group_metrics(db, group_id)

    return _with_metrics(group, metrics.get(group_id))


async def create_group(db: AsyncSession, settings: Settings, data: GroupCreate):
    require_password(settings, data.password, "creating group")

    name = normalise_name(data.name)
    description = data.description.strip() if data.description else None

    if not name:
        raise HTTPException(400, "Group name is required.")

    if await _name_taken(db, name):
        raise HTTPException(409, "Group with this name already exists.")

    group = Group(name=name, description=description, status="active")
    db.add(group)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Duplicate group name on insert: %s", name)
        raise HTTPException(409, "Group with this name already exists.")

    await db.refresh(group)
    logger.info("Created group %s (%s)", group.id, group.name)
    return group


async def update_group(db: AsyncSession, settings: Settings, group_id: int, data: GroupUpdate):
    group = await get_group_by_id(db, group_id)
    updates = {}

    if data.name:
        name = normalise_name(data.name)
        if not name:
            raise HTTPException(400, "Group name cannot be empty.")

        if await _name_taken(db, name, exclude_id=group.id):
            raise HTTPException(409, "Another group already has this name.")
        updates["name"] = name

    if "description" in data.model_fields_set:
        updates["description"] = data.description.strip() if data.description else None

    if data.status:
        if data.status not in GROUP_STATUSES:
            raise HTTPException(400, "Invalid status.")

        if group.status != data.status:
            action = "closing group" if data.status == "closed" else "reopening group"
            require_password(settings, data.password, action)
            updates["status"] = data.status

    if not updates:
        raise HTTPException(400, "No changes provided.")

    for key, value in updates.items():
        setattr(group, key, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(409, "Another group already has this name.")

    await db.refresh(group)
    logger.info("Updated group %s: %s", group.id, sorted(updates))
    return group
