from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.dependencies import get_db, resolve_group
from shareit.schemas.expense import ExpenseCreate, ExpenseOut, ExpenseUpdate
from shareit.schemas.settlements import SettlementReport
from shareit.services.expense_services import add_expense, delete_expense, get_group_expenses, update_expense
from shareit.services.settlement_service import compute_group_settlements

router = APIRouter()


@router.get("", response_model=list[ExpenseOut])
async def all_expenses(
    group_id: Optional[int] = Query(default=None, alias="groupId"),
    db: AsyncSession = Depends(get_db)
):
    group = await resolve_group(db, group_id)
    return await get_group_expenses(db, group.id)


@router.post("", response_model=ExpenseOut, status_code=201)
async def new_expense(
    data: ExpenseCreate,
    group_id: Optional[int] = Query(default=None, alias="groupId"),
    db: AsyncSession = Depends(get_db)
):
    group = await resolve_group(db, group_id if group_id is not None else data.group_id)
    return await add_expense(db, group, data)


@router.get("/settlements", response_model=SettlementReport)
async def settlements(
    group_id: Optional[int] = Query(default=None, alias="groupId"),
    db: AsyncSession = Depends(get_db)
):
    group = await resolve_group(db, group_id)
    return await compute_group_settlements(db, group)


@router.patch("/{expense_id}", response_model=ExpenseOut)
async def edit(expense_id: int, data: ExpenseUpdate, db: AsyncSession = Depends(get_db)):
    return await update_expense(db, expense_id, data)


@router.delete("/{expense_id}")
async def remove_expense(expense_id: int, db: AsyncSession = Depends(get_db)):
    return await delete_expense(db, expense_id)
