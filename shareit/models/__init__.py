from shareit.models.group import Group
from shareit.models.family import Family
from shareit.models.expense import Expense

__all__ = ["Group", "Family", "Expense"]
