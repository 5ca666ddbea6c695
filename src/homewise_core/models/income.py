"""Itemized household budget models.

A budget is a list of ``FinancialItem`` rows (paychecks, bills, debts,
savings earmarked for a down payment). The income module rolls them up into
a ``FinancialInputs`` scenario and computes take-home pay item by item.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ..numeric import clamp, safe_number


class ItemType(str, Enum):
    """What a budget row represents."""

    INCOME = "income"
    EXPENSE = "expense"
    DEBT = "debt"
    DOWN_PAYMENT = "down_payment"


class Frequency(str, Enum):
    """How often an amount recurs."""

    MONTHLY = "monthly"
    ANNUAL = "annual"
    ONE_TIME = "one-time"


class Timing(str, Enum):
    """Whether an item applies now or after the purchase."""

    CURRENT = "current"
    FUTURE = "future"


class ExpenseTiming(str, Enum):
    """How an expense behaves once the household moves."""

    STABLE = "stable"
    CHANGING = "changing"
    NEW = "new"


class IncomeEntry(str, Enum):
    """Whether an income amount is before or after withholding."""

    GROSS = "gross"
    NET = "net"


class FinancialItem(BaseModel):
    """One row of an itemized household budget."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "salary",
                    "label": "Salary",
                    "amount": 9000,
                    "item_type": "income",
                    "frequency": "monthly",
                    "income_entry": "gross",
                    "tax_pct": 22,
                }
            ]
        }
    }

    id: str
    label: str = ""
    amount: float = 0.0
    item_type: ItemType
    frequency: Frequency = Frequency.MONTHLY
    timing: Timing = Timing.CURRENT
    expense_timing: Optional[ExpenseTiming] = None
    future_amount: Optional[float] = Field(
        default=None, description="Post-move amount for changing expenses"
    )
    active: bool = True

    income_entry: IncomeEntry = IncomeEntry.GROSS
    tax_pct: Optional[float] = None
    retirement_pct: Optional[float] = None
    healthcare_pct: Optional[float] = None
    hsa_pct: Optional[float] = None
    other_pct: Optional[float] = None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        """Map missing or non-finite amounts to zero."""
        return safe_number(v)

    @field_validator("future_amount", mode="before")
    @classmethod
    def coerce_future_amount(cls, v: Any) -> Optional[float]:
        """Map non-finite input to None so the current amount applies."""
        return safe_number(v, default=None)

    @field_validator(
        "tax_pct",
        "retirement_pct",
        "healthcare_pct",
        "hsa_pct",
        "other_pct",
        mode="before",
    )
    @classmethod
    def coerce_percent(cls, v: Any) -> Optional[float]:
        """Clamp into 0-100; non-finite input becomes None so the default applies."""
        value = safe_number(v, default=None)
        return None if value is None else clamp(value)

    @property
    def monthly_amount(self) -> float:
        """Amount per month; one-time items contribute nothing."""
        if self.frequency == Frequency.MONTHLY:
            return self.amount
        if self.frequency == Frequency.ANNUAL:
            return self.amount / 12
        return 0.0

    @property
    def annual_amount(self) -> float:
        """Amount per year; one-time items contribute nothing."""
        if self.frequency == Frequency.MONTHLY:
            return self.amount * 12
        if self.frequency == Frequency.ANNUAL:
            return self.amount
        return 0.0


class TakeHomeBreakdown(BaseModel):
    """Annual pay split into take-home and withholding lines."""

    model_config = {"frozen": True}

    annual_gross: float = Field(description="Income entered before withholding")
    annual_net: float = Field(
        default=0.0, description="Income entered after withholding; never withheld again"
    )
    annual_take_home: float
    taxes: float
    retirement: float
    healthcare: float
    hsa: float
    other: float

    @property
    def total_withheld(self) -> float:
        """Sum of all withholding lines."""
        return self.taxes + self.retirement + self.healthcare + self.hsa + self.other
