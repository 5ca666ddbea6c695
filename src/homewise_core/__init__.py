"""Homewise Core - deterministic home-buying finance engines."""

__version__ = "0.1.0"

from .affordability import (
    calculate_max_affordability,
    calculate_property_affordability,
    classify_down_payment,
    estimate_interest_rate,
)
from .finance_core import (
    loan_totals,
    piti,
    pmt,
    principal_from_payment,
    solve_price_with_dynamic_down_payment,
    solve_purchase_price,
    solve_purchase_price_for_monthly_budget,
)
from .income import (
    financial_inputs_from_items,
    normalize_mortgage_options,
    take_home_from_income_items,
)
from .liquidity import liquidity_elasticity_index
from .models import (
    AffordabilityResult,
    ComputeResult,
    DecisionMode,
    FinancialInputs,
    LEIInput,
    LEIResult,
    LoanParams,
    LoanTerms,
    SliderState,
    ToggleState,
)
from .rehearsal import compute

__all__ = [
    "calculate_max_affordability",
    "calculate_property_affordability",
    "classify_down_payment",
    "estimate_interest_rate",
    "loan_totals",
    "piti",
    "pmt",
    "principal_from_payment",
    "solve_price_with_dynamic_down_payment",
    "solve_purchase_price",
    "solve_purchase_price_for_monthly_budget",
    "financial_inputs_from_items",
    "normalize_mortgage_options",
    "take_home_from_income_items",
    "liquidity_elasticity_index",
    "compute",
    "AffordabilityResult",
    "ComputeResult",
    "DecisionMode",
    "FinancialInputs",
    "LEIInput",
    "LEIResult",
    "LoanParams",
    "LoanTerms",
    "SliderState",
    "ToggleState",
]
