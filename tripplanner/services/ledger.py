"""Budget ledger: per-day expense arithmetic across currencies.

An expense contributes its ``converted_amount`` when it was recorded in a
foreign currency and its raw ``amount`` otherwise. Foreign expenses only
enter a budget once converted, so totals never double-count or drop a
pending conversion. All functions return new ``Budget`` objects; the input
budget is never mutated.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Protocol
from uuid import UUID

from tripplanner.core.errors import (
    ConversionFailedError,
    ConversionUnavailableError,
    CurrencyMismatchError,
    RateNotAvailableError,
)
from tripplanner.models import Budget, BudgetSummary, Expense, ExpenseCategory
from tripplanner.services.money import display, round2

logger = logging.getLogger("tripplanner.ledger")


class SupportsRateLookup(Protocol):
    async def get_rate(self, base: str, target: str) -> Decimal: ...


def contribution(expense: Expense, budget_currency: str) -> Decimal:
    if expense.currency == budget_currency:
        return expense.amount
    if expense.converted_amount is None:
        raise CurrencyMismatchError(
            f"Expense {expense.id} in {expense.currency} has no amount in {budget_currency}."
        )
    return expense.converted_amount


def spent(budget: Budget) -> Decimal:
    return sum(
        (contribution(e, budget.currency) for e in budget.expenses), Decimal("0")
    )


def remaining_budget(budget: Budget) -> Decimal:
    return budget.total_budget - spent(budget)


def category_totals(budget: Budget) -> Dict[ExpenseCategory, Decimal]:
    """Sum contributions per category; categories with nothing spent are omitted."""
    totals: Dict[ExpenseCategory, Decimal] = {}
    for expense in budget.expenses:
        totals[expense.category] = totals.get(
            expense.category, Decimal("0")
        ) + contribution(expense, budget.currency)
    # Enum order keeps the result stable regardless of insertion order.
    return {c: totals[c] for c in ExpenseCategory if totals.get(c)}


def add_expense(budget: Budget, expense: Expense) -> Budget:
    """Append an expense already expressed in (or converted to) the budget currency."""
    if expense.currency == budget.currency:
        expense = expense.model_copy(update={"converted_amount": None})
    elif expense.converted_amount is None:
        raise CurrencyMismatchError(
            f"Expense in {expense.currency} must be converted to {budget.currency} first."
        )
    return budget.model_copy(update={"expenses": [*budget.expenses, expense]}, deep=True)


async def add_expense_with_conversion(
    budget: Budget, expense: Expense, rates: SupportsRateLookup
) -> Budget:
    """Convert a foreign-currency expense into the budget currency, then append it.

    On any rate failure the budget is returned untouched by raising
    ``ConversionUnavailableError``; retrying is left to the caller.
    """
    if expense.currency == budget.currency:
        return add_expense(budget, expense)
    try:
        rate = await rates.get_rate(expense.currency, budget.currency)
    except (ConversionFailedError, RateNotAvailableError) as exc:
        logger.warning(
            "conversion %s->%s unavailable: %s",
            expense.currency,
            budget.currency,
            exc.message,
        )
        raise ConversionUnavailableError(
            f"Could not convert {expense.currency} to {budget.currency}: {exc.message}"
        ) from exc
    converted = round2(expense.amount * rate)
    logger.debug(
        "converted %s %s -> %s %s at %s",
        expense.amount,
        expense.currency,
        converted,
        budget.currency,
        rate,
    )
    return add_expense(budget, expense.model_copy(update={"converted_amount": converted}))


def remove_expense(budget: Budget, expense_id: UUID) -> Budget:
    remaining = [e for e in budget.expenses if e.id != expense_id]
    if len(remaining) == len(budget.expenses):
        return budget
    return budget.model_copy(update={"expenses": remaining}, deep=True)


def budget_summary(budget: Budget) -> BudgetSummary:
    total_spent = spent(budget)
    percent_used = 0.0
    if budget.total_budget > 0:
        percent_used = display(total_spent / budget.total_budget * 100)
    return BudgetSummary(
        currency=budget.currency,
        total_budget=display(budget.total_budget),
        spent=display(total_spent),
        remaining=display(budget.total_budget - total_spent),
        percent_used=percent_used,
        category_totals={c.value: display(v) for c, v in category_totals(budget).items()},
        expense_count=len(budget.expenses),
    )
