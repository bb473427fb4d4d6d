import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from shareit.core.settlement import InvalidAmountError, InvalidReferenceError, compute_settlements
from shareit.models.group import Group
from shareit.services.expense_services import get_group_expenses
from shareit.services.family_services import get_families_sorted

logger = logging.getLogger(__name__)


async def compute_group_settlements(db: AsyncSession, group: Group):
    # both reads go through the same session
    families = await get_families_sorted(db, group.id)
    expenses = await get_group_expenses(db, group.id)

    try:
        report = compute_settlements(families, expenses)
    except InvalidReferenceError as e:
        logger.error("Group %s has orphan expenses: %s", group.id, e.family_names)
        raise HTTPException(409, str(e))
    except InvalidAmountError as e:
        logger.error("Group %s cannot be settled: %s", group.id, e)
        raise HTTPException(409, str(e))

    logger.info("Group %s: %d settlements over %.2f total",
                group.id, len(report.settlements), report.total_expenses)
    return report
