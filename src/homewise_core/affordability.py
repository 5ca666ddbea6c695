"""Maximum affordability and single-property affordability analysis.

The maximum affordability pipeline runs in five stages:

1. Income: gross monthly income (current plus future) and take-home pay,
   itemized when available, otherwise estimated from gross.
2. Payment ceiling: the smallest of the lender DTI limit, the buyer's
   livability target and the residual after expenses and debts.
3. Ideal price: the fixed-percent price solver inverts the ceiling.
4. Down payment classification: shortfall, excess or on-target against
   the ideal price's requirement, with a tolerance band.
5. Final structure: the classification and the buyer's excess strategy
   pick the final price and payment; loan, tax, insurance and P&I are
   recomputed from the final price.

Every stage logs a ``debug`` event so a result can be traced step by step.
"""

import math
from typing import Any, Optional

import structlog

from .defaults import (
    DEFAULT_LENDING_POLICY,
    DEFAULT_SOLVER_SETTINGS,
    LendingPolicy,
    SolverSettings,
)
from .finance_core import piti, pmt, solve_purchase_price
from .models import (
    AffordabilityResult,
    DownPaymentClassification,
    DownPaymentMode,
    DownPaymentStatus,
    ExcessStrategy,
    FinancialInputs,
    LoanParams,
    LoanTerms,
    PaymentCeilings,
    Property,
    PropertyAffordability,
    PropertyScores,
    TakeHomeSource,
)
from .numeric import clamp, format_usd, rate_monthly_from_percent, safe_number

logger = structlog.get_logger()

# Margin within half a cent of zero counts as balanced. When the residual
# ceiling binds, the margin is zero up to float noise and the household
# still qualifies.
MARGIN_EPSILON = 0.005


def _first_number(*candidates: Any, default: float) -> float:
    """First candidate that is a finite number, else ``default``."""
    for candidate in candidates:
        value = safe_number(candidate, default=None)
        if value is not None:
            return value
    return default


def estimate_interest_rate(
    credit_score: Any,
    loan_term: Any,
    down_payment_pct: Any,
    market_reference_rate: Any = None,
    policy: Optional[LendingPolicy] = None,
) -> float:
    """Estimate a mortgage rate from credit tier, term and down payment.

    Args:
        credit_score: FICO score.
        loan_term: Term in years.
        down_payment_pct: Down payment as a percent of price.
        market_reference_rate: 30-year benchmark rate, percent.
        policy: Supplies the benchmark when none is given.

    Returns:
        Annual rate in percent, rounded to the nearest eighth of a point.
    """
    policy = policy or DEFAULT_LENDING_POLICY
    rate = _first_number(market_reference_rate, default=policy.market_reference_rate)
    score = safe_number(credit_score)
    term = safe_number(loan_term, 30.0)
    down = safe_number(down_payment_pct)

    if score >= 760:
        rate -= 0.25
    elif score >= 720:
        pass
    elif score >= 680:
        rate += 0.375
    elif score >= 640:
        rate += 0.875
    elif score >= 620:
        rate += 1.375
    else:
        rate += 2.25

    if term <= 15:
        rate -= 0.625
    elif term <= 20:
        rate -= 0.375

    if down < 15:
        rate += 0.25
    elif down < 20:
        rate += 0.125

    # Half-up rounding to 1/8 point
    return math.floor(rate * 8 + 0.5) / 8


def classify_down_payment(
    ideal_price: Any,
    down_payment_pct: Any,
    available: Any,
    tolerance: float = 0.05,
) -> DownPaymentClassification:
    """Compare available funds with the down payment a price requires.

    The on-target band is ``required * (1 +/- tolerance)``, inclusive.
    """
    required = max(0.0, safe_number(ideal_price)) * clamp(safe_number(down_payment_pct)) / 100
    funds = max(0.0, safe_number(available))
    band = required * max(0.0, tolerance)

    if funds < required - band:
        return DownPaymentClassification(
            status=DownPaymentStatus.SHORTFALL,
            required=required,
            excess_amount=0.0,
            shortfall_amount=required - funds,
        )
    if funds > required + band:
        return DownPaymentClassification(
            status=DownPaymentStatus.EXCESS,
            required=required,
            excess_amount=funds - required,
            shortfall_amount=0.0,
        )
    return DownPaymentClassification(
        status=DownPaymentStatus.ON_TARGET,
        required=required,
        excess_amount=0.0,
        shortfall_amount=0.0,
    )


def calculate_max_affordability(
    inputs: FinancialInputs,
    housing_pct: Any = None,
    down_payment_pct: Any = None,
    property_tax_rate_override: Any = None,
    policy: Optional[LendingPolicy] = None,
    settings: Optional[SolverSettings] = None,
) -> AffordabilityResult:
    """Find the most house a household can afford and how to structure it.

    Args:
        inputs: The household's financial scenario.
        housing_pct: Livability target as a percent of take-home; falls back
            to ``inputs.housing_percentage`` then the policy default.
        down_payment_pct: Target down payment percent; falls back to
            ``inputs.down_payment_percentage`` then the policy default.
        property_tax_rate_override: Annual property tax, percent of price.
        policy: Lending policy constants.
        settings: Price solver settings.

    Returns:
        AffordabilityResult with the final price, payment structure, DTI,
        margin and advisory constraints and opportunities.
    """
    policy = policy or DEFAULT_LENDING_POLICY
    settings = settings or DEFAULT_SOLVER_SETTINGS

    housing = clamp(
        _first_number(housing_pct, inputs.housing_percentage, default=policy.default_housing_percent)
    )
    down_pct = clamp(
        _first_number(
            down_payment_pct,
            inputs.down_payment_percentage,
            default=policy.default_down_payment_percent,
        )
    )
    tax_pct = max(
        0.0,
        _first_number(property_tax_rate_override, default=policy.affordability_tax_rate_percent),
    )
    strategy = inputs.excess_down_payment_strategy
    available_down_payment = max(0.0, inputs.down_payment_sources)

    # Step 1: Income
    gross_monthly = (inputs.annual_income + inputs.future_income_monthly * 12) / 12
    if inputs.annual_take_home_income:
        take_home = inputs.annual_take_home_income / 12
        take_home_source = TakeHomeSource.ITEMIZED
    else:
        take_home = gross_monthly * policy.take_home_estimate_percent / 100
        take_home_source = TakeHomeSource.ESTIMATED
    logger.debug(
        "affordability_step",
        step="income",
        gross_monthly=round(gross_monthly, 2),
        take_home=round(take_home, 2),
        take_home_source=take_home_source.value,
    )

    # Step 2: Payment ceiling
    ceilings = PaymentCeilings(
        dti=gross_monthly * policy.max_dti_percent / 100 - inputs.fixed_debts,
        livability=take_home * housing / 100,
        residual=take_home - inputs.monthly_expenses - inputs.fixed_debts,
    )
    max_payment = max(0.0, min(ceilings.dti, ceilings.livability, ceilings.residual))
    logger.debug(
        "affordability_step",
        step="payment_ceiling",
        dti_ceiling=round(ceilings.dti, 2),
        livability_ceiling=round(ceilings.livability, 2),
        residual_ceiling=round(ceilings.residual, 2),
        max_payment=round(max_payment, 2),
    )

    # Step 3: Ideal price
    terms = LoanTerms(
        interest_rate_percent=inputs.interest_rate,
        term_years=inputs.loan_term,
        down_payment_percent=down_pct,
        property_tax_rate_percent=tax_pct,
        annual_insurance=policy.annual_insurance,
        monthly_hoa=0.0,
        pmi_annual_rate_percent=0.0,
    )
    ideal_price = solve_purchase_price(
        max_payment,
        terms,
        mode=DownPaymentMode.FIXED_PERCENT,
        settings=settings,
        policy=policy,
    )
    logger.debug("affordability_step", step="ideal_price", ideal_price=round(ideal_price, 2))

    # Step 4: Down payment classification
    classification = classify_down_payment(
        ideal_price, down_pct, available_down_payment, policy.down_payment_tolerance
    )
    logger.debug(
        "affordability_step",
        step="down_payment",
        status=classification.status.value,
        required=round(classification.required, 2),
        available=round(available_down_payment, 2),
    )

    # Step 5: Final structure
    monthly_rate = rate_monthly_from_percent(clamp(inputs.interest_rate))
    n = max(1, round(inputs.loan_term * 12))
    monthly_insurance = policy.annual_insurance / 12

    def monthly_cost(price: float, down_payment: float) -> float:
        loan = max(0.0, price - down_payment)
        return pmt(loan, monthly_rate, n) + price * tax_pct / 100 / 12 + monthly_insurance

    status = classification.status
    if status == DownPaymentStatus.SHORTFALL:
        final_price = available_down_payment / (down_pct / 100)
        down_payment_used = available_down_payment
        actual_payment = monthly_cost(final_price, down_payment_used)
    elif status == DownPaymentStatus.EXCESS and strategy == ExcessStrategy.INCREASE_PRICE:
        final_price = ideal_price + classification.excess_amount
        down_payment_used = available_down_payment
        actual_payment = monthly_cost(final_price, down_payment_used)
    elif status == DownPaymentStatus.EXCESS and strategy == ExcessStrategy.REDUCE_PAYMENT:
        final_price = ideal_price
        down_payment_used = available_down_payment
        actual_payment = monthly_cost(final_price, down_payment_used)
    else:
        final_price = ideal_price
        down_payment_used = classification.required
        actual_payment = max_payment

    loan_amount = max(0.0, final_price - down_payment_used)
    monthly_principal_interest = pmt(loan_amount, monthly_rate, n)
    monthly_property_tax = final_price * tax_pct / 100 / 12

    if gross_monthly > 0:
        dti_ratio = (actual_payment + inputs.fixed_debts) / gross_monthly * 100
    else:
        dti_ratio = policy.invalid_dti_sentinel
        logger.info("affordability_dti_sentinel", reason="zero_gross_income")

    monthly_margin = (
        take_home
        - actual_payment
        - inputs.monthly_expenses
        - inputs.fixed_debts
        - inputs.future_expenses_monthly
    )
    logger.debug(
        "affordability_step",
        step="final_structure",
        strategy=strategy.value,
        final_price=round(final_price, 2),
        actual_payment=round(actual_payment, 2),
        dti_ratio=round(dti_ratio, 2),
        monthly_margin=round(monthly_margin, 2),
    )

    constraints: list[str] = []
    opportunities: list[str] = []

    if status == DownPaymentStatus.SHORTFALL:
        constraints.append(
            f"Need {format_usd(classification.shortfall_amount)} more down payment "
            f"to afford your ideal {format_usd(ideal_price)} house"
        )
    if max_payment <= 0:
        constraints.append("Current expenses exceed income - reduce expenses to afford a home")
    if dti_ratio > policy.dti_warning_percent:
        constraints.append(
            f"High DTI ratio: {dti_ratio:.1f}% (banks prefer <{policy.max_dti_percent:g}%)"
        )
    if monthly_margin < policy.tight_margin:
        constraints.append(
            "Tight monthly margin — consider reducing housing target or increasing income"
        )

    if monthly_margin > policy.strong_margin:
        opportunities.append(
            f"Strong monthly margin — could afford "
            f"{format_usd(monthly_margin * policy.price_per_margin_dollar)} more house"
        )
    if status == DownPaymentStatus.EXCESS and strategy == ExcessStrategy.SAVE:
        opportunities.append(
            f"Consider using your {format_usd(classification.excess_amount)} excess down "
            f"payment to buy a more expensive house or reduce monthly payments"
        )

    max_purchase_price = max(0.0, final_price)
    return AffordabilityResult(
        can_afford=max_purchase_price > 0 and monthly_margin >= -MARGIN_EPSILON,
        max_purchase_price=max_purchase_price,
        ideal_purchase_price=ideal_price,
        max_monthly_payment=max_payment,
        actual_monthly_payment=max(0.0, actual_payment),
        available_down_payment=available_down_payment,
        required_down_payment=max(0.0, classification.required),
        max_price_from_down_payment=(
            available_down_payment / (down_pct / 100) if down_pct > 0 else 0.0
        ),
        loan_amount=loan_amount,
        dti_ratio=dti_ratio,
        monthly_income=gross_monthly,
        take_home_income=take_home,
        take_home_source=take_home_source,
        monthly_margin=monthly_margin,
        housing_percentage=housing,
        down_payment_percentage=down_pct,
        monthly_principal_interest=monthly_principal_interest,
        monthly_property_tax=monthly_property_tax,
        monthly_insurance=monthly_insurance,
        down_payment_status=status,
        excess_amount=classification.excess_amount,
        shortfall_amount=classification.shortfall_amount,
        ceilings=ceilings,
        constraints=constraints,
        opportunities=opportunities,
    )


def calculate_property_affordability(
    listing: Property,
    inputs: FinancialInputs,
    policy: Optional[LendingPolicy] = None,
) -> PropertyAffordability:
    """Score whether a household can afford one specific property.

    The property is financed at the policy's default down payment. Four
    sub-scores (payment headroom, DTI headroom, down payment coverage and
    monthly margin) are each clamped to 0-100 and averaged.
    """
    policy = policy or DEFAULT_LENDING_POLICY

    gross_monthly = inputs.annual_income / 12
    if inputs.annual_take_home_income:
        take_home = inputs.annual_take_home_income / 12
    else:
        take_home = gross_monthly * policy.take_home_estimate_percent / 100
    max_payment = gross_monthly * policy.housing_ratio_percent / 100

    payment = piti(
        LoanParams(
            price=listing.price,
            down_payment_percent=policy.default_down_payment_percent,
            interest_rate_percent=inputs.interest_rate,
            term_years=inputs.loan_term,
            property_tax_rate_percent=listing.property_tax_rate_percent,
            annual_insurance=listing.annual_insurance,
            monthly_hoa=listing.monthly_hoa,
        ),
        policy,
    )
    total = payment.monthly
    down_payment_required = listing.price * policy.default_down_payment_percent / 100

    if gross_monthly > 0:
        dti_ratio = (inputs.fixed_debts + total) / gross_monthly * 100
    else:
        dti_ratio = policy.invalid_dti_sentinel
    monthly_margin = take_home - total - inputs.monthly_expenses - inputs.fixed_debts

    can_afford = (
        total <= max_payment
        and dti_ratio <= policy.max_dti_percent
        and inputs.down_payment_sources >= down_payment_required
        and monthly_margin >= 0
    )

    scores = PropertyScores(
        payment=clamp(100 - total / max_payment * 100) if max_payment > 0 else 0.0,
        dti=clamp(100 - dti_ratio / policy.max_dti_percent * 100),
        down_payment=(
            clamp(inputs.down_payment_sources / down_payment_required * 100)
            if down_payment_required > 0
            else 100.0
        ),
        margin=clamp(monthly_margin / policy.property_margin_scale * 100),
    )
    affordability_score = (
        scores.payment + scores.dti + scores.down_payment + scores.margin
    ) / 4

    constraints: list[str] = []
    recommendations: list[str] = []
    if not can_afford:
        if total > max_payment:
            constraints.append(
                f"Monthly payment {format_usd(total)} exceeds recommended {format_usd(max_payment)}"
            )
        if dti_ratio > policy.max_dti_percent:
            constraints.append(
                f"DTI ratio {dti_ratio:.1f}% exceeds {policy.max_dti_percent:g}% limit"
            )
        if inputs.down_payment_sources < down_payment_required:
            constraints.append(
                f"Need {format_usd(down_payment_required - inputs.down_payment_sources)} "
                f"more for down payment"
            )
        if monthly_margin < 0:
            constraints.append(
                f"Monthly shortfall of {format_usd(abs(monthly_margin))} after all obligations"
            )
    else:
        if monthly_margin > policy.strong_margin:
            recommendations.append(
                f"Strong monthly margin of {format_usd(monthly_margin)} — good cushion each month"
            )
        if dti_ratio < policy.excellent_dti_percent:
            recommendations.append(f"Excellent DTI ratio of {dti_ratio:.1f}%")

    logger.debug(
        "property_affordability",
        price=listing.price,
        total_payment=round(total, 2),
        dti_ratio=round(dti_ratio, 2),
        can_afford=can_afford,
        score=round(affordability_score, 1),
    )

    return PropertyAffordability(
        can_afford=can_afford,
        affordability_score=affordability_score,
        scores=scores,
        payment=payment,
        max_monthly_payment=max_payment,
        dti_ratio=dti_ratio,
        monthly_margin=monthly_margin,
        down_payment_required=down_payment_required,
        constraints=constraints,
        recommendations=recommendations,
    )


__all__ = [
    "estimate_interest_rate",
    "classify_down_payment",
    "calculate_max_affordability",
    "calculate_property_affordability",
]
