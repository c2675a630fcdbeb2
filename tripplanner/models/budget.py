from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import DEFAULT_CURRENCY, ExpenseCategory, normalize_currency


class ExpenseIn(BaseModel):
    amount: Decimal = Field(..., gt=0)
    currency: str
    category: ExpenseCategory = ExpenseCategory.other
    note: str = ""
    timestamp: Optional[datetime] = None

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_currency(v)


class Expense(ExpenseIn):
    id: UUID = Field(default_factory=uuid4)
    # Amount in the owning budget's currency; only set for foreign currency expenses.
    converted_amount: Optional[Decimal] = None


class Budget(BaseModel):
    total_budget: Decimal = Field(Decimal("0"), ge=0)
    currency: str = DEFAULT_CURRENCY
    expenses: List[Expense] = Field(default_factory=list)

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_currency(v)

    @model_validator(mode="after")
    def converted_amounts_consistent(self) -> "Budget":
        expenses = []
        for expense in self.expenses:
            if expense.currency == self.currency:
                if expense.converted_amount is not None:
                    expense = expense.model_copy(update={"converted_amount": None})
            elif expense.converted_amount is None:
                raise ValueError(
                    f"expense {expense.id} in {expense.currency} lacks an amount converted to {self.currency}"
                )
            expenses.append(expense)
        self.expenses = expenses
        return self


class BudgetSummary(BaseModel):
    """Presentation view of a budget; amounts rounded to 2 places."""

    currency: str
    total_budget: float
    spent: float
    remaining: float
    percent_used: float
    category_totals: Dict[str, float]
    expense_count: int
