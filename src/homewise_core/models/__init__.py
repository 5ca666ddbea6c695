"""Data models for the Homewise engines.

This package provides Pydantic models for:
- Loan terms, PITI breakdowns and affordability results (finance)
- Itemized household budgets and take-home pay (income)
- Decision rehearsal sliders, toggles and results (rehearsal)
- Buckets, obligations, charges and the LEI (liquidity)
"""

from .finance import (
    AffordabilityResult,
    DownPaymentClassification,
    DownPaymentMode,
    DownPaymentStatus,
    ExcessStrategy,
    FinancialInputs,
    LoanParams,
    LoanTerms,
    LoanTotals,
    MortgageOptions,
    PaymentCeilings,
    PitiBreakdown,
    Property,
    PropertyAffordability,
    PropertyScores,
    TakeHomeSource,
)
from .income import (
    ExpenseTiming,
    FinancialItem,
    Frequency,
    IncomeEntry,
    ItemType,
    TakeHomeBreakdown,
    Timing,
)
from .liquidity import (
    Bucket,
    BucketConstraint,
    BucketStatus,
    BucketType,
    Charge,
    ChargeStatus,
    ClearingState,
    LEIBreakdown,
    LEIInput,
    LEIResult,
    LedgerEntry,
    Obligation,
    PeakFundingResult,
    RedistributionAllocation,
    RedistributionRule,
    TargetRule,
)
from .rehearsal import (
    BandInfo,
    BandKey,
    BreakdownItem,
    ComputeResult,
    DecisionMode,
    ModeConfig,
    PatternResult,
    SliderCopy,
    SliderState,
    ToggleCopy,
    ToggleState,
)

__all__ = [
    # Finance
    "AffordabilityResult",
    "DownPaymentClassification",
    "DownPaymentMode",
    "DownPaymentStatus",
    "ExcessStrategy",
    "FinancialInputs",
    "LoanParams",
    "LoanTerms",
    "LoanTotals",
    "MortgageOptions",
    "PaymentCeilings",
    "PitiBreakdown",
    "Property",
    "PropertyAffordability",
    "PropertyScores",
    "TakeHomeSource",
    # Income
    "ExpenseTiming",
    "FinancialItem",
    "Frequency",
    "IncomeEntry",
    "ItemType",
    "TakeHomeBreakdown",
    "Timing",
    # Liquidity
    "Bucket",
    "BucketConstraint",
    "BucketStatus",
    "BucketType",
    "Charge",
    "ChargeStatus",
    "ClearingState",
    "LEIBreakdown",
    "LEIInput",
    "LEIResult",
    "LedgerEntry",
    "Obligation",
    "PeakFundingResult",
    "RedistributionAllocation",
    "RedistributionRule",
    "TargetRule",
    # Rehearsal
    "BandInfo",
    "BandKey",
    "BreakdownItem",
    "ComputeResult",
    "DecisionMode",
    "ModeConfig",
    "PatternResult",
    "SliderCopy",
    "SliderState",
    "ToggleCopy",
    "ToggleState",
]
