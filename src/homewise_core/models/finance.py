"""Loan, payment and affordability data models.

Money amounts are plain floats in dollars, rates are annual percentages
(``6.5`` means 6.5%) and terms are in years unless a field says otherwise.
Input models coerce malformed numbers through ``safe_number`` so that a
half-typed form value yields a degenerate result instead of an exception.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from ..numeric import safe_number


class LoanTerms(BaseModel):
    """Financing terms shared by the payment calculation and the price solvers.

    Optional cost fields fall back to the lending policy in use.
    """

    interest_rate_percent: float = Field(default=0.0, description="Annual rate, %")
    term_years: float = Field(default=30.0, description="Amortization length in years")
    down_payment_percent: float = Field(
        default=20.0,
        description="Down payment as % of price; the cap in capped solver mode",
    )
    property_tax_rate_percent: Optional[float] = None
    annual_insurance: Optional[float] = None
    monthly_hoa: Optional[float] = None
    pmi_annual_rate_percent: Optional[float] = None

    @field_validator(
        "interest_rate_percent", "term_years", "down_payment_percent", mode="before"
    )
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        """Map missing or non-finite input to zero."""
        return safe_number(v)

    @field_validator(
        "property_tax_rate_percent",
        "annual_insurance",
        "monthly_hoa",
        "pmi_annual_rate_percent",
        mode="before",
    )
    @classmethod
    def coerce_optional_number(cls, v: Any) -> Optional[float]:
        """Map non-finite input to None so the policy default applies."""
        return safe_number(v, default=None)


class LoanParams(LoanTerms):
    """Inputs for a monthly PITI calculation at a known price."""

    price: float = Field(default=0.0, description="Purchase price in dollars")

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        """Map missing or non-finite price to zero."""
        return safe_number(v)


class PitiBreakdown(BaseModel):
    """Monthly housing payment split into its components."""

    model_config = {"frozen": True}

    monthly: float
    principal_and_interest: float
    property_tax: float
    insurance: float
    hoa: float
    pmi: float
    loan_amount: float


class LoanTotals(BaseModel):
    """Lifetime cost of a fully amortized loan."""

    model_config = {"frozen": True}

    loan_amount: float
    monthly_payment: float
    total_payments: float
    total_interest: float


class DownPaymentMode(str, Enum):
    """How the purchase-price solver treats the down payment."""

    FIXED_PERCENT = "fixed_percent"
    CAPPED = "capped"


class DownPaymentStatus(str, Enum):
    """Available funds relative to the required down payment."""

    SHORTFALL = "shortfall"
    EXCESS = "excess"
    ON_TARGET = "on-target"


class ExcessStrategy(str, Enum):
    """What to do with down payment funds beyond the requirement."""

    SAVE = "save"
    REDUCE_PAYMENT = "reduce-payment"
    INCREASE_PRICE = "increase-price"


class TakeHomeSource(str, Enum):
    """Where the take-home figure behind an affordability result came from."""

    ITEMIZED = "itemized"
    ESTIMATED = "estimated"


class FinancialInputs(BaseModel):
    """A household's financial scenario for affordability analysis."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "annual_income": 120000,
                    "monthly_expenses": 3000,
                    "fixed_debts": 500,
                    "down_payment_sources": 80000,
                    "interest_rate": 6.5,
                    "loan_term": 30,
                    "credit_score": 740,
                }
            ]
        }
    }

    annual_income: float = Field(default=0.0, description="Gross annual income")
    monthly_expenses: float = Field(default=0.0, description="Non-debt living costs")
    fixed_debts: float = Field(default=0.0, description="Monthly debt payments")
    down_payment_sources: float = Field(default=0.0, description="Cash for down payment")
    interest_rate: float = Field(default=6.85, description="Annual rate, %")
    loan_term: float = Field(default=30.0, description="Loan term in years")
    credit_score: int = Field(default=740)

    housing_percentage: Optional[float] = Field(
        default=None, description="Livability target, % of take-home"
    )
    down_payment_percentage: Optional[float] = None
    future_income_monthly: float = 0.0
    future_expenses_monthly: float = 0.0
    excess_down_payment_strategy: ExcessStrategy = ExcessStrategy.SAVE
    annual_take_home_income: Optional[float] = Field(
        default=None, description="Itemized net pay; replaces the 70% estimate"
    )
    market_reference_rate: Optional[float] = None

    @field_validator(
        "annual_income",
        "monthly_expenses",
        "fixed_debts",
        "down_payment_sources",
        "interest_rate",
        "loan_term",
        "future_income_monthly",
        "future_expenses_monthly",
        mode="before",
    )
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        """Map missing or non-finite input to zero."""
        return safe_number(v)

    @field_validator("credit_score", mode="before")
    @classmethod
    def coerce_credit_score(cls, v: Any) -> int:
        """Round credit scores; unusable input reads as the typical 740."""
        return int(round(safe_number(v, 740.0)))

    @field_validator(
        "housing_percentage",
        "down_payment_percentage",
        "annual_take_home_income",
        "market_reference_rate",
        mode="before",
    )
    @classmethod
    def coerce_optional_number(cls, v: Any) -> Optional[float]:
        """Map non-finite input to None so the default applies."""
        return safe_number(v, default=None)

    @field_validator("excess_down_payment_strategy", mode="before")
    @classmethod
    def default_strategy(cls, v: Any) -> Any:
        """Unknown strategies fall back to saving the excess."""
        if isinstance(v, ExcessStrategy):
            return v
        if isinstance(v, str) and v in {s.value for s in ExcessStrategy}:
            return v
        return ExcessStrategy.SAVE

    @computed_field
    @property
    def gross_monthly_income(self) -> float:
        """Current plus future gross income per month."""
        return self.annual_income / 12 + self.future_income_monthly


class PaymentCeilings(BaseModel):
    """The three monthly payment limits; the binding one is the minimum."""

    model_config = {"frozen": True}

    dti: float = Field(description="Lender DTI limit less existing debts")
    livability: float = Field(description="Share of take-home the buyer accepts")
    residual: float = Field(description="Take-home left after expenses and debts")


class DownPaymentClassification(BaseModel):
    """Available down payment funds compared with a price's requirement."""

    model_config = {"frozen": True}

    status: DownPaymentStatus
    required: float
    excess_amount: float
    shortfall_amount: float


class AffordabilityResult(BaseModel):
    """Maximum affordable purchase and its payment structure."""

    model_config = {"frozen": True}

    can_afford: bool
    max_purchase_price: float
    ideal_purchase_price: float
    max_monthly_payment: float
    actual_monthly_payment: float
    available_down_payment: float
    required_down_payment: float
    max_price_from_down_payment: float
    loan_amount: float
    dti_ratio: float
    monthly_income: float
    take_home_income: float
    take_home_source: TakeHomeSource
    monthly_margin: float
    housing_percentage: float
    down_payment_percentage: float
    monthly_principal_interest: float
    monthly_property_tax: float
    monthly_insurance: float
    down_payment_status: DownPaymentStatus
    excess_amount: float
    shortfall_amount: float
    ceilings: PaymentCeilings
    constraints: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)


class Property(BaseModel):
    """A listing evaluated against a household's finances."""

    price: float
    property_tax_rate_percent: Optional[float] = Field(
        default=None, description="Annual tax as % of price"
    )
    annual_insurance: Optional[float] = None
    monthly_hoa: Optional[float] = None
    address: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        """Map missing or non-finite price to zero."""
        return max(0.0, safe_number(v))

    @field_validator(
        "property_tax_rate_percent", "annual_insurance", "monthly_hoa", mode="before"
    )
    @classmethod
    def coerce_optional_number(cls, v: Any) -> Optional[float]:
        """Map non-finite input to None so the policy default applies."""
        return safe_number(v, default=None)


class PropertyScores(BaseModel):
    """Sub-scores behind a property's affordability score, each 0-100."""

    model_config = {"frozen": True}

    payment: float
    dti: float
    down_payment: float
    margin: float


class PropertyAffordability(BaseModel):
    """Verdict on a single property."""

    model_config = {"frozen": True}

    can_afford: bool
    affordability_score: float = Field(ge=0, le=100)
    scores: PropertyScores
    payment: PitiBreakdown
    max_monthly_payment: float
    dti_ratio: float
    monthly_margin: float
    down_payment_required: float
    constraints: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class MortgageOptions(BaseModel):
    """Sanitized mortgage selections ready for the engines."""

    model_config = {"frozen": True}

    interest_rate: float
    loan_term_years: int
    down_payment_percent: float
    livability_percent: float
    available_down_payment: float
