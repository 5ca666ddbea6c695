#!/usr/bin/env python3
"""
Home Affordability Demonstration

This script walks one household through the Homewise engines:
1. Build a scenario from itemized budget rows
2. Find the maximum affordable price and how to structure it
3. Check a specific listing
4. Rehearse the offer decision
5. Score the household's liquidity

Run: python examples/affordability_demo.py
"""

from homewise_core import (
    calculate_max_affordability,
    calculate_property_affordability,
    compute,
    estimate_interest_rate,
    financial_inputs_from_items,
    liquidity_elasticity_index,
)
from homewise_core.config import load_config
from homewise_core.log import configure_logging_from
from homewise_core.models import (
    Bucket,
    BucketType,
    Charge,
    ChargeStatus,
    DecisionMode,
    ExpenseTiming,
    FinancialInputs,
    FinancialItem,
    Frequency,
    ItemType,
    LEIInput,
    Obligation,
    Property,
    SliderState,
    Timing,
    ToggleState,
)


def create_sample_items() -> list[FinancialItem]:
    """Create an itemized budget for a two-income household."""
    return [
        # Income
        FinancialItem(
            id="salary-1",
            label="Primary salary",
            amount=7200,
            item_type=ItemType.INCOME,
            tax_pct=22,
            retirement_pct=6,
            healthcare_pct=4,
        ),
        FinancialItem(
            id="salary-2",
            label="Partner salary",
            amount=3800,
            item_type=ItemType.INCOME,
        ),
        FinancialItem(
            id="freelance",
            label="Freelance (starts after move)",
            amount=600,
            item_type=ItemType.INCOME,
            timing=Timing.FUTURE,
        ),
        # Expenses
        FinancialItem(
            id="rent",
            label="Rent",
            amount=2400,
            item_type=ItemType.EXPENSE,
            expense_timing=ExpenseTiming.CHANGING,
            future_amount=0,
        ),
        FinancialItem(
            id="living",
            label="Food, transport, utilities",
            amount=1900,
            item_type=ItemType.EXPENSE,
            expense_timing=ExpenseTiming.STABLE,
        ),
        FinancialItem(
            id="maintenance",
            label="Home maintenance",
            amount=3600,
            item_type=ItemType.EXPENSE,
            frequency=Frequency.ANNUAL,
            expense_timing=ExpenseTiming.NEW,
        ),
        # Debts
        FinancialItem(id="car", label="Car loan", amount=420, item_type=ItemType.DEBT),
        # Down payment
        FinancialItem(
            id="savings",
            label="Savings",
            amount=85000,
            item_type=ItemType.DOWN_PAYMENT,
            frequency=Frequency.ONE_TIME,
        ),
    ]


def create_sample_ledger() -> LEIInput:
    """Create envelope buckets, annual obligations and card charges."""
    return LEIInput(
        buckets=[
            Bucket(id="op1", name="Checking", type=BucketType.OPERATING, balance=4100),
            Bucket(id="sm1", name="MonthlyBills", type=BucketType.SMOOTHING, balance=2200),
            Bucket(id="lr1", name="AnnualReserve", type=BucketType.LEDGER_RESERVE, balance=7800),
            Bucket(id="cl1", name="CardClearing", type=BucketType.CLEARING, balance=300),
        ],
        obligations=[
            Obligation(id="ob1", name="Car insurance", expected_cost=1600, due_month=4),
            Obligation(id="ob2", name="Renter's insurance", expected_cost=240, due_month=9),
        ],
        charges=[
            Charge(id="c1", merchant="Grocer", amount=182, date="2025-05-02",
                   status=ChargeStatus.FUNDED, bucket_id="sm1"),
            Charge(id="c2", merchant="Fuel", amount=64, date="2025-05-03"),
        ],
        vars_12mo={
            "groceries": [620, 640, 600, 700, 690, 720, 610, 650, 660, 700, 760, 810],
            "utilities": [210, 190, 170, 150, 140, 160, 230, 240, 200, 180, 210, 250],
        },
        buffer=1000,
    )


def main():
    """Run the affordability demonstration."""
    configure_logging_from(load_config())

    print("=" * 70)
    print("HOMEWISE CORE - Affordability Demo")
    print("=" * 70)
    print()

    # Step 1: Scenario
    print("Step 1: Building the scenario from budget items...")
    rate = estimate_interest_rate(credit_score=745, loan_term=30, down_payment_pct=20)
    inputs = financial_inputs_from_items(
        create_sample_items(),
        base=FinancialInputs(interest_rate=rate, loan_term=30, credit_score=745),
    )
    print(f"  - Annual Income: ${inputs.annual_income:,.2f}")
    print(f"  - Annual Take-Home: ${inputs.annual_take_home_income:,.2f}")
    print(f"  - Monthly Expenses (now): ${inputs.monthly_expenses:,.2f}")
    print(f"  - Monthly Expenses (after move): ${inputs.future_expenses_monthly:,.2f}")
    print(f"  - Down Payment Available: ${inputs.down_payment_sources:,.2f}")
    print(f"  - Estimated Rate: {rate:.3f}%")
    print()

    # Step 2: Max affordability
    print("Step 2: Finding the maximum affordable price...")
    result = calculate_max_affordability(inputs)
    print(f"  - Max Monthly Payment: ${result.max_monthly_payment:,.2f}")
    print(f"  - Ideal Price: ${result.ideal_purchase_price:,.0f}")
    print(f"  - Max Purchase Price: ${result.max_purchase_price:,.0f}")
    print(f"  - Down Payment Status: {result.down_payment_status.value}")
    print(f"  - DTI Ratio: {result.dti_ratio:.1f}%")
    print(f"  - Monthly Margin: ${result.monthly_margin:,.2f}")
    print(f"  - Can Afford: {result.can_afford}")
    for message in result.constraints:
        print(f"    ! {message}")
    for message in result.opportunities:
        print(f"    + {message}")
    print()

    # Step 3: Listing check
    print("Step 3: Checking a $425,000 listing...")
    listing = Property(price=425000, property_tax_rate_percent=1.4, monthly_hoa=120)
    check = calculate_property_affordability(listing, inputs)
    print(f"  - Monthly PITI: ${check.payment.monthly:,.2f}")
    print(f"  - Affordability Score: {check.affordability_score:.0f}/100")
    print(f"  - Can Afford: {check.can_afford}")
    for message in check.constraints + check.recommendations:
        print(f"    - {message}")
    print()

    # Step 4: Offer rehearsal
    print("Step 4: Rehearsing the offer...")
    rehearsal = compute(
        DecisionMode.OFFER,
        SliderState(buffer=60, lifestyle=75, risk=55, finance=58, deal=50, attach=70, lev=40),
        ToggleState(t_compete=True),
    )
    print(f"  - Steadiness: {rehearsal.score:.0f} ({rehearsal.band.name})")
    print(f"  - Status: {rehearsal.status_text}")
    print(f"  - Pattern: {rehearsal.pattern.tag}")
    for step in rehearsal.pattern.try_next:
        print(f"    > {step}")
    print()

    # Step 5: Liquidity
    print("Step 5: Scoring liquidity...")
    lei = liquidity_elasticity_index(create_sample_ledger())
    print(f"  - LEI: {lei.lei:.1f}/100")
    print(f"  - Reallocable: ${lei.breakdown.l_realloc:,.2f}")
    print(f"  - Committed: ${lei.breakdown.constraints:,.2f}")
    print()

    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
