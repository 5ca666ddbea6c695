"""Defaults registry for lending policy, withholding and solver constants.

Every engine reads its constants from the models in this module. A caller
that wants different assumptions builds a modified copy (``model_copy``) or
loads one from the environment through ``homewise_core.config`` and passes it
in; the engines never consult the environment on their own.

Sources:
- 28% front-end housing ratio and 43% back-end DTI: conventional
  qualified-mortgage underwriting limits
- PMI threshold of 20% down: conventional loan requirement
- 1.81% property tax: conservative national effective-rate estimate used by
  the budget solver; listings default to 1.5%
"""

from pydantic import BaseModel, Field


# =============================================================================
# LENDING POLICY
# =============================================================================


class LendingPolicy(BaseModel):
    """Underwriting ratios and cost assumptions for housing payments."""

    model_config = {"frozen": True}

    property_tax_rate_percent: float = Field(
        default=1.5, ge=0, description="Annual property tax for PITI, % of price"
    )
    affordability_tax_rate_percent: float = Field(
        default=1.81,
        ge=0,
        description="Annual property tax assumed by the budget solver, % of price",
    )
    annual_insurance: float = Field(default=1800.0, ge=0)
    monthly_hoa: float = Field(default=0.0, ge=0)
    pmi_annual_rate_percent: float = Field(default=0.6, ge=0)
    pmi_threshold_percent: float = Field(
        default=20.0, ge=0, le=100, description="PMI applies below this down payment"
    )

    max_dti_percent: float = Field(default=43.0, gt=0)
    housing_ratio_percent: float = Field(
        default=28.0, gt=0, description="Front-end ratio used for single properties"
    )
    take_home_estimate_percent: float = Field(
        default=70.0,
        gt=0,
        le=100,
        description="Fallback take-home share of gross when no itemized data exists",
    )
    default_housing_percent: float = Field(default=30.0, gt=0, le=100)
    default_down_payment_percent: float = Field(default=20.0, ge=0, le=100)
    down_payment_tolerance: float = Field(
        default=0.05, ge=0, description="On-target band around the required down payment"
    )
    market_reference_rate: float = Field(default=6.85, gt=0)

    dti_warning_percent: float = Field(default=40.0, gt=0)
    excellent_dti_percent: float = Field(default=30.0, gt=0)
    tight_margin: float = Field(default=500.0)
    strong_margin: float = Field(default=1000.0)
    price_per_margin_dollar: float = Field(
        default=200.0, description="Extra house price one dollar of monthly margin carries"
    )
    property_margin_scale: float = Field(
        default=1000.0, gt=0, description="Margin that earns a full margin sub-score"
    )
    invalid_dti_sentinel: float = Field(
        default=1000.0, description="DTI reported when gross income is zero"
    )


# =============================================================================
# PAYROLL WITHHOLDING
# =============================================================================


class WithholdingDefaults(BaseModel):
    """Percent of gross pay withheld when an income item gives no figures."""

    model_config = {"frozen": True}

    tax_pct: float = Field(default=25.0, ge=0, le=100)
    retirement_pct: float = Field(default=5.0, ge=0, le=100)
    healthcare_pct: float = Field(default=5.0, ge=0, le=100)
    hsa_pct: float = Field(default=0.0, ge=0, le=100)
    other_pct: float = Field(default=0.0, ge=0, le=100)


# =============================================================================
# PRICE SOLVERS
# =============================================================================


class SolverSettings(BaseModel):
    """Iteration ceilings and tolerances for the purchase-price solvers."""

    model_config = {"frozen": True}

    # Fixed-point iteration (down payment proportional to price)
    initial_estimate: float = Field(default=400_000.0, gt=0)
    fixed_point_max_iterations: int = Field(default=50, gt=0)
    convergence_tolerance: float = Field(default=1000.0, gt=0)
    shrink_factor: float = Field(default=0.8, gt=0, lt=1)

    # Bisection (down payment capped by available funds)
    max_price: float = Field(default=5_000_000.0, gt=0)
    bisection_max_iterations: int = Field(default=60, gt=0)
    bracket_tolerance: float = Field(default=100.0, gt=0)
    monthly_tolerance: float = Field(default=50.0, ge=0)


# =============================================================================
# MORTGAGE OPTION LIMITS
# =============================================================================


class MortgageOptionLimits(BaseModel):
    """Bounds applied to user-selected mortgage options."""

    model_config = {"frozen": True}

    fallback_rate: float = Field(default=6.85, gt=0)
    max_rate: float = Field(default=20.0, gt=0)
    min_term_years: int = Field(default=10, gt=0)
    max_term_years: int = Field(default=40, gt=0)
    default_term_years: int = Field(default=30, gt=0)
    min_down_payment_percent: float = Field(default=5.0, ge=0)
    max_down_payment_percent: float = Field(default=50.0, le=100)
    default_down_payment_percent: float = Field(default=20.0, ge=0, le=100)
    min_livability_percent: float = Field(default=10.0, ge=0)
    max_livability_percent: float = Field(default=50.0, le=100)
    default_livability_percent: float = Field(default=30.0, ge=0, le=100)


DEFAULT_LENDING_POLICY = LendingPolicy()
DEFAULT_WITHHOLDING = WithholdingDefaults()
DEFAULT_SOLVER_SETTINGS = SolverSettings()
DEFAULT_MORTGAGE_OPTION_LIMITS = MortgageOptionLimits()


__all__ = [
    "LendingPolicy",
    "WithholdingDefaults",
    "SolverSettings",
    "MortgageOptionLimits",
    "DEFAULT_LENDING_POLICY",
    "DEFAULT_WITHHOLDING",
    "DEFAULT_SOLVER_SETTINGS",
    "DEFAULT_MORTGAGE_OPTION_LIMITS",
]
