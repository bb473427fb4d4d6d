import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.dependencies import ensure_group_open, get_group_by_id
from shareit.models.expense import Expense
from shareit.models.family import Family
from shareit.models.group import Group
from shareit.schemas.expense import ExpenseCreate, ExpenseUpdate

logger = logging.getLogger(__name__)


async def _family_exists(db: AsyncSession, group_id: int, family_name: str) -> bool:
    q = select(Family.id).where(
        Family.group_id == group_id,
        Family.name == family_name
    )
    return (await db.execute(q)).first() is not None


async def _get_expense(db: AsyncSession, expense_id: int) -> Expense:
    res = await db.execute(select(Expense).where(Expense.id == expense_id))
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found.")

    return expense


async def get_group_expenses(db: AsyncSession, group_id: int):
    q = (
        select(Expense)
        .where(Expense.group_id == group_id)
        .order_by(Expense.date.desc(), Expense.id.desc())
    )
    res = await db.execute(q)
    return res.scalars().all()


async def add_expense(db: AsyncSession, group: Group, data: ExpenseCreate):
    ensure_group_open(group)

    if not await _family_exists(db, group.id, data.family_name):
        raise HTTPException(400, "Family does not exist in this group.")

    expense = Expense(
        description=data.description,
        amount=data.amount,
        family_name=data.family_name,
        group_id=group.id
    )

    db.add(expense)
    await db.commit()
    await db.refresh(expense)

    logger.info("Recorded expense %s of %.2f for %r in group %s",
                expense.id, expense.amount, expense.family_name, group.id)
    return expense


async def update_expense(db: AsyncSession, expense_id: int, data: ExpenseUpdate):
    expense = await _get_expense(db, expense_id)
    group = await get_group_by_id(db, expense.group_id)
    ensure_group_open(group)

    updates = {}

    if data.amount is not None:
        updates["amount"] = data.amount

    if data.family_name:
        if not await _family_exists(db, group.id, data.family_name):
            raise HTTPException(400, "Family does not exist.")
        updates["family_name"] = data.family_name

    if not updates:
        raise HTTPException(400, "Nothing to update.")

    for key, value in updates.items():
        setattr(expense, key, value)

    await db.commit()
    await db.refresh(expense)

    logger.info("Updated expense %s: %s", expense.id, sorted(updates))
    return expense


async def delete_expense(db: AsyncSession, expense_id: int):
    expense = await _get_expense(db, expense_id)
    group = await get_group_by_id(db, expense.group_id)
    ensure_group_open(group)

    await db.delete(expense)
    await db.commit()

    logger.info("Deleted expense %s from group %s", expense_id, group.id)
    return {"message": "Expense deleted successfully."}
