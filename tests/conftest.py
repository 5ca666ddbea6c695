"""Shared fixtures for the Homewise test suite."""

import pytest

from homewise_core.models import (
    Bucket,
    BucketConstraint,
    BucketStatus,
    BucketType,
    Charge,
    ChargeStatus,
    FinancialInputs,
    LEIInput,
    Obligation,
    TargetRule,
)


@pytest.fixture
def household() -> FinancialInputs:
    """A typical dual-income household with savings for a down payment."""
    return FinancialInputs(
        annual_income=120000,
        monthly_expenses=3000,
        fixed_debts=500,
        down_payment_sources=80000,
        interest_rate=6.5,
        loan_term=30,
        credit_score=740,
    )


@pytest.fixture
def buckets() -> list[Bucket]:
    """Envelope buckets covering every bucket type plus a dormant one."""
    return [
        Bucket(id="op1", name="Checking", type=BucketType.OPERATING, balance=3200),
        Bucket(
            id="sm1",
            name="MonthlyBills",
            type=BucketType.SMOOTHING,
            balance=1800,
            target_rule=TargetRule.PEAK,
        ),
        Bucket(
            id="sm2",
            name="Groceries",
            type=BucketType.SMOOTHING,
            balance=600,
            target_rule=TargetRule.PEAK,
        ),
        Bucket(
            id="lr1",
            name="AnnualReserve",
            type=BucketType.LEDGER_RESERVE,
            balance=8400,
            target_rule=TargetRule.FIXED,
            constraints=BucketConstraint.LEDGER_REQUIRED,
        ),
        Bucket(
            id="cl1",
            name="ChaseClearing",
            type=BucketType.CLEARING,
            balance=950,
            constraints=BucketConstraint.TRANSFER_REQUIRED,
        ),
        Bucket(
            id="zzold",
            name="zzOldSavings",
            type=BucketType.CAPITAL,
            status=BucketStatus.DORMANT,
            balance=2000,
        ),
    ]


@pytest.fixture
def obligations() -> list[Obligation]:
    """Annual obligations; one is already paid."""
    return [
        Obligation(id="ob1", name="Home Insurance", expected_cost=2400, due_month=3),
        Obligation(id="ob2", name="Car Registration", expected_cost=800, due_month=7),
        Obligation(id="ob3", name="Property Tax", expected_cost=3600, due_month=11),
        Obligation(
            id="ob4", name="Term Life Premium", expected_cost=1200, due_month=1, paid=True
        ),
    ]


@pytest.fixture
def charges() -> list[Charge]:
    """Credit card charges in every clearing status."""
    return [
        Charge(
            id="ch1",
            merchant="Petco",
            amount=68,
            date="2025-06-02",
            status=ChargeStatus.FUNDED,
            bucket_id="sm1",
        ),
        Charge(
            id="ch2",
            merchant="Whole Foods",
            amount=145,
            date="2025-06-03",
            status=ChargeStatus.MATCHED_UNFUNDED,
            bucket_id="sm2",
        ),
        Charge(id="ch3", merchant="Shell", amount=82, date="2025-06-04"),
        Charge(
            id="ch4",
            merchant="Netflix",
            amount=18,
            date="2025-06-01",
            status=ChargeStatus.CLEARED,
            bucket_id="sm1",
        ),
        Charge(
            id="ch5",
            merchant="Amazon",
            amount=35,
            date="2025-06-05",
            status=ChargeStatus.IGNORED,
        ),
    ]


@pytest.fixture
def vars_12mo() -> dict[str, list[float]]:
    """Twelve months of spend for three variable categories."""
    return {
        "groceries": [380, 410, 390, 425, 440, 460, 390, 375, 410, 430, 490, 510],
        "utilities": [160, 170, 150, 130, 120, 140, 200, 210, 175, 155, 180, 195],
        "auto_fuel": [75, 80, 70, 90, 85, 95, 80, 70, 75, 90, 85, 100],
    }


@pytest.fixture
def lei_input(buckets, obligations, charges, vars_12mo) -> LEIInput:
    """Complete LEI input built from the example household ledger."""
    return LEIInput(
        buckets=buckets,
        obligations=obligations,
        charges=charges,
        vars_12mo=vars_12mo,
        buffer=500,
    )
