"""
Settlement computation for a group of families.

Every family owes ``per_person_share * members`` of the group's total
spending. Families that paid more than their share are creditors, the
others are debtors, and a greedy pass pairs the largest debtor with the
largest creditor until all balances are cleared.
"""
import math
from typing import Iterable, List, Protocol

from shareit.core.utils import format_amount
from shareit.schemas.settlements import FamilyBalance, Settlement, SettlementReport

# remaining debt or credit at or below this counts as settled
EPSILON = 1e-9


class FamilyLike(Protocol):
    name: str
    members: int


class ExpenseLike(Protocol):
    family_name: str
    amount: float


class InvalidReferenceError(ValueError):
    """An expense points at a family that is not part of the group."""

    def __init__(self, family_names: Iterable[str]):
        self.family_names = sorted(set(family_names))
        super().__init__(
            "Expenses reference unknown families: " + ", ".join(self.family_names)
        )


class InvalidAmountError(ValueError):
    """An expense amount, or the group total, is not a finite number."""


def compute_family_balances(
    families: Iterable[FamilyLike],
    expenses: Iterable[ExpenseLike],
):
    """
    Returns:
        (total_expenses, total_members, per_person_share, balances)

    ``balances`` is ordered by family name. Raises InvalidReferenceError
    when an expense's family_name matches none of ``families``, and
    InvalidAmountError when an amount or the total is not finite.
    """
    families = list(families)
    expenses = list(expenses)

    if not all(math.isfinite(e.amount) for e in expenses):
        raise InvalidAmountError("Expense amounts must be finite numbers")

    total_members = sum(f.members for f in families)
    try:
        total_expenses = math.fsum(e.amount for e in expenses)
    except OverflowError:
        raise InvalidAmountError("Total expenses are too large to settle")
    per_person_share = total_expenses / total_members if total_members > 0 else 0

    paid_by_family: dict[str, list[float]] = {f.name: [] for f in families}
    orphans = []
    for e in expenses:
        if e.family_name in paid_by_family:
            paid_by_family[e.family_name].append(e.amount)
        else:
            orphans.append(e.family_name)

    if orphans:
        raise InvalidReferenceError(orphans)

    balances = []
    for f in sorted(families, key=lambda f: f.name):
        share = per_person_share * f.members
        paid = math.fsum(paid_by_family[f.name])
        balances.append(FamilyBalance(
            family=f.name,
            members=f.members,
            share=share,
            paid=paid,
            balance=paid - share
        ))

    return total_expenses, total_members, per_person_share, balances


def simplify_debts(balances: List[FamilyBalance]) -> List[Settlement]:
    """
    Greedy matching of debtors to creditors.

    Debtors go most negative first, creditors largest first, ties broken
    by family name. Works on copies of the balances; amounts are rounded
    only when rendered, and transfers that round to 0.00 are dropped.
    """
    debtors = [[b.family, -b.balance] for b in balances if b.balance < -EPSILON]
    creditors = [[b.family, b.balance] for b in balances if b.balance > EPSILON]

    debtors.sort(key=lambda x: (-x[1], x[0]))
    creditors.sort(key=lambda x: (-x[1], x[0]))

    settlements: List[Settlement] = []

    for debtor in debtors:
        debtor_name, remaining_debt = debtor

        for creditor in creditors:
            if remaining_debt <= EPSILON:
                break
            if creditor[1] <= EPSILON:
                continue

            amount = min(remaining_debt, creditor[1])
            rendered = format_amount(amount)
            if rendered != "0.00":
                settlements.append(Settlement(
                    from_family=debtor_name,
                    to_family=creditor[0],
                    amount=rendered
                ))

            remaining_debt -= amount
            creditor[1] -= amount

    return settlements


def compute_settlements(
    families: Iterable[FamilyLike],
    expenses: Iterable[ExpenseLike],
) -> SettlementReport:
    total_expenses, total_members, per_person_share, balances = compute_family_balances(
        families, expenses
    )

    return SettlementReport(
        total_expenses=total_expenses,
        total_members=total_members,
        per_person_share=per_person_share,
        family_balances=balances,
        settlements=simplify_debts(balances)
    )
