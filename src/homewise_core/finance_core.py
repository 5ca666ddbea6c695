"""Mortgage payment math and purchase-price solvers.

Everything here is a pure function of its arguments. Numbers are routed
through ``safe_number`` and clamped, so malformed input produces a zero or
degenerate result rather than an exception.

The price solvers invert the PITI calculation: given a monthly budget, find
the highest purchase price whose total monthly housing cost fits. Two down
payment models are supported behind ``solve_purchase_price``:

1. ``DownPaymentMode.FIXED_PERCENT`` - the down payment is a fixed share of
   price. Solved by fixed-point iteration on price, because property tax
   depends on the price being solved for. At high down payments tax grows
   faster than loan cost and the iteration cannot contract; those cases,
   and any run that exhausts its iterations, use the closed-form price.
2. ``DownPaymentMode.CAPPED`` - the buyer puts down the lesser of a target
   percent and the cash they have. Solved by bisection over price.
"""

from typing import Any, Optional

import structlog

from .defaults import (
    DEFAULT_LENDING_POLICY,
    DEFAULT_SOLVER_SETTINGS,
    LendingPolicy,
    SolverSettings,
)
from .models import (
    DownPaymentMode,
    LoanParams,
    LoanTerms,
    LoanTotals,
    PitiBreakdown,
)
from .numeric import clamp, rate_monthly_from_percent, safe_number

logger = structlog.get_logger()


def pmt(principal: Any, monthly_rate: Any, num_payments: Any) -> float:
    """Level monthly payment that amortizes ``principal`` over ``num_payments``.

    Args:
        principal: Loan amount in dollars.
        monthly_rate: Periodic rate as a decimal (0.005 for 6% annual).
        num_payments: Number of monthly payments.

    Returns:
        Monthly payment. Straight-line at a zero rate; 0 when there is
        nothing to amortize.
    """
    principal = safe_number(principal)
    r = max(0.0, safe_number(monthly_rate))
    n = safe_number(num_payments)
    if principal <= 0 or n <= 0:
        return 0.0
    if r == 0:
        return principal / n
    return principal * r / (1 - (1 + r) ** -n)


def principal_from_payment(payment: Any, monthly_rate: Any, num_payments: Any) -> float:
    """Largest loan a monthly ``payment`` can amortize (inverse of ``pmt``)."""
    payment = safe_number(payment)
    r = max(0.0, safe_number(monthly_rate))
    n = safe_number(num_payments)
    if payment <= 0 or n <= 0:
        return 0.0
    if r == 0:
        return payment * n
    return payment * (1 - (1 + r) ** -n) / r


def _num_payments(term_years: float) -> int:
    return max(1, round(safe_number(term_years) * 12))


def _cost_or_default(value: Optional[float], default: float) -> float:
    return max(0.0, default if value is None else value)


def piti(params: LoanParams, policy: Optional[LendingPolicy] = None) -> PitiBreakdown:
    """Monthly principal, interest, taxes, insurance, HOA and PMI at a price.

    Args:
        params: Price and financing terms. Cost fields left as None use the
            lending policy defaults.
        policy: Lending policy supplying the defaults; the module default
            when omitted.

    Returns:
        PitiBreakdown with every component and the loan amount.
    """
    policy = policy or DEFAULT_LENDING_POLICY

    price = max(0.0, safe_number(params.price))
    down_payment_pct = clamp(safe_number(params.down_payment_percent), 0, 100)
    rate_pct = clamp(safe_number(params.interest_rate_percent), 0, 100)
    n = _num_payments(params.term_years)

    loan_amount = max(0.0, price * (1 - down_payment_pct / 100))
    principal_and_interest = pmt(loan_amount, rate_monthly_from_percent(rate_pct), n)

    tax_pct = _cost_or_default(
        params.property_tax_rate_percent, policy.property_tax_rate_percent
    )
    property_tax = price * tax_pct / 100 / 12
    insurance = _cost_or_default(params.annual_insurance, policy.annual_insurance) / 12
    hoa = _cost_or_default(params.monthly_hoa, policy.monthly_hoa)

    pmi = 0.0
    if down_payment_pct < policy.pmi_threshold_percent and loan_amount > 0:
        pmi_pct = _cost_or_default(
            params.pmi_annual_rate_percent, policy.pmi_annual_rate_percent
        )
        pmi = loan_amount * pmi_pct / 100 / 12

    monthly = principal_and_interest + property_tax + insurance + hoa + pmi
    return PitiBreakdown(
        monthly=monthly,
        principal_and_interest=principal_and_interest,
        property_tax=property_tax,
        insurance=insurance,
        hoa=hoa,
        pmi=pmi,
        loan_amount=loan_amount,
    )


def loan_totals(loan_amount: Any, rate_percent: Any, term_years: Any) -> LoanTotals:
    """Monthly payment, lifetime payments and lifetime interest of a loan."""
    loan_amount = max(0.0, safe_number(loan_amount))
    n = _num_payments(term_years)
    monthly = pmt(loan_amount, rate_monthly_from_percent(clamp(safe_number(rate_percent))), n)
    total_payments = monthly * n
    return LoanTotals(
        loan_amount=loan_amount,
        monthly_payment=monthly,
        total_payments=total_payments,
        total_interest=max(0.0, total_payments - loan_amount),
    )


def _solve_fixed_percent(
    target_monthly: float,
    terms: LoanTerms,
    settings: SolverSettings,
    policy: LendingPolicy,
) -> float:
    """Fixed-point iteration on price with a down payment proportional to price."""
    down_payment_pct = clamp(safe_number(terms.down_payment_percent), 0, 100)
    monthly_rate = rate_monthly_from_percent(clamp(safe_number(terms.interest_rate_percent)))
    n = _num_payments(terms.term_years)

    tax_rate_monthly = (
        _cost_or_default(terms.property_tax_rate_percent, policy.property_tax_rate_percent)
        / 100
        / 12
    )
    fixed_costs = (
        _cost_or_default(terms.annual_insurance, policy.annual_insurance) / 12
        + _cost_or_default(terms.monthly_hoa, policy.monthly_hoa)
    )
    pmi_rate_monthly = 0.0
    if down_payment_pct < policy.pmi_threshold_percent:
        pmi_rate_monthly = (
            _cost_or_default(terms.pmi_annual_rate_percent, policy.pmi_annual_rate_percent)
            / 100
            / 12
        )

    loan_share = 1 - down_payment_pct / 100
    if loan_share <= 0:
        # All cash: only property tax scales with price
        if tax_rate_monthly <= 0:
            return settings.max_price if target_monthly > fixed_costs else 0.0
        return clamp((target_monthly - fixed_costs) / tax_rate_monthly, 0, settings.max_price)

    if target_monthly <= fixed_costs:
        return 0.0

    # Monthly loan cost per borrowed dollar
    cost_per_dollar = pmt(1.0, monthly_rate, n) + pmi_rate_monthly
    loan_cost_per_price_dollar = cost_per_dollar * loan_share

    def closed_form() -> float:
        # PITI is linear in price at a fixed down payment share
        price = (target_monthly - fixed_costs) / (tax_rate_monthly + loan_cost_per_price_dollar)
        return clamp(price, 0, settings.max_price)

    # Each step shrinks the error by this factor; at 1 or above it diverges
    contraction = tax_rate_monthly / loan_cost_per_price_dollar
    if contraction >= 1:
        price = closed_form()
        logger.debug(
            "price_solver_closed_form",
            mode=DownPaymentMode.FIXED_PERCENT.value,
            reason="non_contracting",
            price=round(price, 2),
        )
        return price

    estimate = settings.initial_estimate
    price = 0.0
    for iteration in range(settings.fixed_point_max_iterations):
        available = target_monthly - estimate * tax_rate_monthly - fixed_costs
        if available <= 0:
            estimate *= settings.shrink_factor
            continue

        price_from_loan = available / loan_cost_per_price_dollar
        price = price_from_loan
        # Distance to the fixed point is bounded by step * q / (1 - q)
        error_bound = abs(price_from_loan - estimate) * contraction / (1 - contraction)
        if error_bound < settings.convergence_tolerance:
            logger.debug(
                "price_solver_converged",
                mode=DownPaymentMode.FIXED_PERCENT.value,
                iterations=iteration + 1,
                price=round(price, 2),
            )
            break
        estimate = price_from_loan
    else:
        price = closed_form()
        logger.warning(
            "price_solver_not_converged",
            mode=DownPaymentMode.FIXED_PERCENT.value,
            target_monthly=target_monthly,
            closed_form_price=round(price, 2),
        )

    return clamp(price, 0, settings.max_price)


def _solve_capped(
    target_monthly: float,
    terms: LoanTerms,
    available_down_payment: float,
    settings: SolverSettings,
    policy: LendingPolicy,
) -> float:
    """Bisection on price with the down payment capped by available cash."""
    cap_pct = clamp(safe_number(terms.down_payment_percent), 0, 100)
    cash = max(0.0, safe_number(available_down_payment))
    base = terms.model_dump()

    def monthly_at(price: float) -> float:
        down_payment_pct = 0.0 if price <= 0 else min(cap_pct, cash / price * 100)
        params = LoanParams(**{**base, "price": price, "down_payment_percent": down_payment_pct})
        return piti(params, policy).monthly

    low, high = 0.0, settings.max_price
    best = 0.0
    iterations = 0
    for iterations in range(1, settings.bisection_max_iterations + 1):
        if high - low < settings.bracket_tolerance:
            break
        mid = (low + high) / 2
        monthly = monthly_at(mid)
        if abs(monthly - target_monthly) <= settings.monthly_tolerance:
            best = mid
            break
        if monthly > target_monthly:
            high = mid
        else:
            best = mid
            low = mid

    logger.debug(
        "price_solver_finished",
        mode=DownPaymentMode.CAPPED.value,
        iterations=iterations,
        price=round(best),
    )
    return float(max(0, round(best)))


def solve_purchase_price(
    target_monthly: Any,
    terms: LoanTerms,
    *,
    mode: DownPaymentMode = DownPaymentMode.FIXED_PERCENT,
    available_down_payment: Any = 0.0,
    settings: Optional[SolverSettings] = None,
    policy: Optional[LendingPolicy] = None,
) -> float:
    """Highest purchase price whose monthly PITI fits ``target_monthly``.

    Args:
        target_monthly: Monthly housing budget in dollars.
        terms: Rate, term, down payment percent (the cap in capped mode)
            and optional cost overrides.
        mode: Down payment model, see module docstring.
        available_down_payment: Cash on hand; only read in capped mode.
        settings: Iteration ceilings and tolerances.
        policy: Lending policy supplying cost defaults.

    Returns:
        Purchase price in dollars, 0 for a non-positive budget.
    """
    settings = settings or DEFAULT_SOLVER_SETTINGS
    policy = policy or DEFAULT_LENDING_POLICY
    target = safe_number(target_monthly)
    if target <= 0:
        logger.debug("price_solver_skipped", reason="non_positive_budget", target=target)
        return 0.0

    if mode == DownPaymentMode.CAPPED:
        return _solve_capped(target, terms, safe_number(available_down_payment), settings, policy)
    return _solve_fixed_percent(target, terms, settings, policy)


def solve_purchase_price_for_monthly_budget(
    target_monthly: Any,
    terms: LoanTerms,
    settings: Optional[SolverSettings] = None,
    policy: Optional[LendingPolicy] = None,
) -> float:
    """Price solver with the down payment a fixed percent of price."""
    return solve_purchase_price(
        target_monthly,
        terms,
        mode=DownPaymentMode.FIXED_PERCENT,
        settings=settings,
        policy=policy,
    )


def solve_price_with_dynamic_down_payment(
    target_monthly: Any,
    terms: LoanTerms,
    available_down_payment: Any,
    settings: Optional[SolverSettings] = None,
    policy: Optional[LendingPolicy] = None,
) -> float:
    """Price solver with the down payment capped by the cash available."""
    return solve_purchase_price(
        target_monthly,
        terms,
        mode=DownPaymentMode.CAPPED,
        available_down_payment=available_down_payment,
        settings=settings,
        policy=policy,
    )


__all__ = [
    "pmt",
    "principal_from_payment",
    "piti",
    "loan_totals",
    "solve_purchase_price",
    "solve_purchase_price_for_monthly_budget",
    "solve_price_with_dynamic_down_payment",
]
