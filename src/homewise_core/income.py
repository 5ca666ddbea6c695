"""Itemized income, withholding and scenario assembly.

Turns a list of ``FinancialItem`` budget rows into the ``FinancialInputs``
the affordability engine consumes, and computes take-home pay item by item
from each paycheck's own withholding. Itemized take-home is the preferred
source; the flat take-home estimate in the lending policy is only a
fallback for scenarios entered without items.
"""

from typing import Any, Iterable, Optional

import structlog

from .defaults import (
    DEFAULT_MORTGAGE_OPTION_LIMITS,
    DEFAULT_WITHHOLDING,
    MortgageOptionLimits,
    WithholdingDefaults,
)
from .models import (
    ExpenseTiming,
    FinancialInputs,
    FinancialItem,
    IncomeEntry,
    ItemType,
    MortgageOptions,
    TakeHomeBreakdown,
    Timing,
)
from .numeric import clamp, safe_number

logger = structlog.get_logger()


def _active(items: Iterable[FinancialItem], item_type: ItemType) -> list[FinancialItem]:
    return [item for item in items if item.active and item.item_type == item_type]


def _pct(value: Optional[float], default: float) -> float:
    return default if value is None else value


def take_home_from_income_items(
    items: Iterable[FinancialItem],
    withholding: Optional[WithholdingDefaults] = None,
) -> TakeHomeBreakdown:
    """Annual take-home pay and withholding lines across all active income.

    Net items count in full toward take-home and are reported separately
    from gross pay. Gross items are reduced by their own withholding
    percentages, falling back to ``withholding`` for any percentage the
    item leaves unset. A single item never contributes a negative take-home,
    even if its percentages add up past 100.
    """
    withholding = withholding or DEFAULT_WITHHOLDING

    annual_gross = 0.0
    annual_net = 0.0
    annual_take_home = 0.0
    lines = {"taxes": 0.0, "retirement": 0.0, "healthcare": 0.0, "hsa": 0.0, "other": 0.0}

    for item in _active(items, ItemType.INCOME):
        amount = item.annual_amount
        if item.income_entry == IncomeEntry.NET:
            annual_net += amount
            annual_take_home += amount
            continue

        annual_gross += amount
        item_lines = {
            "taxes": amount * _pct(item.tax_pct, withholding.tax_pct) / 100,
            "retirement": amount * _pct(item.retirement_pct, withholding.retirement_pct) / 100,
            "healthcare": amount * _pct(item.healthcare_pct, withholding.healthcare_pct) / 100,
            "hsa": amount * _pct(item.hsa_pct, withholding.hsa_pct) / 100,
            "other": amount * _pct(item.other_pct, withholding.other_pct) / 100,
        }
        for key, value in item_lines.items():
            lines[key] += value
        annual_take_home += max(0.0, amount - sum(item_lines.values()))

    logger.debug(
        "take_home_computed",
        annual_gross=round(annual_gross, 2),
        annual_net=round(annual_net, 2),
        annual_take_home=round(annual_take_home, 2),
    )
    return TakeHomeBreakdown(
        annual_gross=annual_gross,
        annual_net=annual_net,
        annual_take_home=annual_take_home,
        **lines,
    )


def _counts_before_move(item: FinancialItem) -> bool:
    if item.expense_timing is None:
        return item.timing == Timing.CURRENT
    return item.expense_timing in (ExpenseTiming.STABLE, ExpenseTiming.CHANGING)


def _counts_after_move(item: FinancialItem) -> bool:
    if item.expense_timing is None:
        return item.timing == Timing.FUTURE
    return item.expense_timing in (ExpenseTiming.CHANGING, ExpenseTiming.NEW)


def financial_inputs_from_items(
    items: Iterable[FinancialItem],
    base: Optional[FinancialInputs] = None,
    withholding: Optional[WithholdingDefaults] = None,
) -> FinancialInputs:
    """Roll budget rows up into a scenario, keeping ``base``'s loan settings.

    Current income becomes ``annual_income`` and future income becomes
    ``future_income_monthly``, so the two are never counted twice. Expenses
    split into the pre-move baseline (stable and changing at today's
    amount) and the post-move projection (changing at the future amount,
    plus new expenses). One-time items do not affect monthly figures.
    """
    items = list(items)
    base = base or FinancialInputs()

    income = _active(items, ItemType.INCOME)
    annual_income = sum(i.annual_amount for i in income if i.timing == Timing.CURRENT)
    future_income_monthly = sum(i.monthly_amount for i in income if i.timing == Timing.FUTURE)
    take_home = take_home_from_income_items(items, withholding)

    expenses = _active(items, ItemType.EXPENSE)
    monthly_expenses = sum(i.monthly_amount for i in expenses if _counts_before_move(i))
    future_expenses_monthly = 0.0
    for item in expenses:
        if not _counts_after_move(item):
            continue
        if item.expense_timing == ExpenseTiming.CHANGING and item.future_amount is not None:
            future_expenses_monthly += item.model_copy(
                update={"amount": item.future_amount}
            ).monthly_amount
        else:
            future_expenses_monthly += item.monthly_amount

    fixed_debts = sum(i.monthly_amount for i in _active(items, ItemType.DEBT))
    down_payment_sources = sum(i.amount for i in _active(items, ItemType.DOWN_PAYMENT))

    logger.debug(
        "scenario_from_items",
        item_count=len(items),
        annual_income=round(annual_income, 2),
        monthly_expenses=round(monthly_expenses, 2),
        fixed_debts=round(fixed_debts, 2),
    )
    return base.model_copy(
        update={
            "annual_income": annual_income,
            "annual_take_home_income": float(round(take_home.annual_take_home)),
            "future_income_monthly": future_income_monthly,
            "monthly_expenses": monthly_expenses,
            "future_expenses_monthly": future_expenses_monthly,
            "fixed_debts": fixed_debts,
            "down_payment_sources": down_payment_sources,
        }
    )


def _parse_rate(value: Any) -> Optional[float]:
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    return safe_number(value, default=None)


def normalize_mortgage_options(
    interest_rate: Any = None,
    term_years: Any = None,
    down_payment_percent: Any = None,
    livability_percent: Any = None,
    available_down_payment: Any = None,
    limits: Optional[MortgageOptionLimits] = None,
) -> MortgageOptions:
    """Sanitize raw mortgage selections into bounded, usable values.

    A missing, non-positive or implausibly high rate falls back to the
    reference rate. Term, down payment and livability are clamped to their
    allowed ranges; available cash is never negative.
    """
    limits = limits or DEFAULT_MORTGAGE_OPTION_LIMITS

    rate = _parse_rate(interest_rate)
    if rate is None or rate <= 0 or rate > limits.max_rate:
        rate = limits.fallback_rate

    term = safe_number(term_years, float(limits.default_term_years))
    down = safe_number(down_payment_percent, limits.default_down_payment_percent)
    livability = safe_number(livability_percent, limits.default_livability_percent)

    return MortgageOptions(
        interest_rate=rate,
        loan_term_years=int(round(clamp(term, limits.min_term_years, limits.max_term_years))),
        down_payment_percent=clamp(
            down, limits.min_down_payment_percent, limits.max_down_payment_percent
        ),
        livability_percent=clamp(
            livability, limits.min_livability_percent, limits.max_livability_percent
        ),
        available_down_payment=max(0.0, safe_number(available_down_payment)),
    )


__all__ = [
    "take_home_from_income_items",
    "financial_inputs_from_items",
    "normalize_mortgage_options",
]
