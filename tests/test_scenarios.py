"""End-to-end affordability checks for representative households."""

import pytest

from homewise_core import calculate_max_affordability, calculate_property_affordability
from homewise_core.models import DownPaymentStatus, FinancialInputs, Property

SCENARIOS = [
    # name, income, expenses, debts, down payment, affordable
    ("first-time buyer", 65000, 2500, 400, 25000, True),
    ("high earner, high expenses", 150000, 8000, 1200, 100000, False),
    ("dual income couple", 120000, 4000, 800, 80000, True),
    ("recent graduate", 45000, 2000, 600, 15000, False),
    ("mid-career professional", 95000, 3500, 300, 60000, True),
]


def _inputs(income, expenses, debts, down_payment) -> FinancialInputs:
    return FinancialInputs(
        annual_income=income,
        monthly_expenses=expenses,
        fixed_debts=debts,
        down_payment_sources=down_payment,
        interest_rate=6.5,
        loan_term=30,
    )


class TestScenarios:
    """Max affordability across typical households."""

    @pytest.mark.parametrize(
        "name,income,expenses,debts,down_payment,affordable",
        SCENARIOS,
        ids=[s[0] for s in SCENARIOS],
    )
    def test_can_afford(self, name, income, expenses, debts, down_payment, affordable):
        """Each household lands on the expected side of affordability."""
        result = calculate_max_affordability(_inputs(income, expenses, debts, down_payment))
        assert result.can_afford is affordable

    def test_first_time_buyer_structure(self):
        """The residual after expenses binds and the margin is used up exactly."""
        result = calculate_max_affordability(_inputs(65000, 2500, 400, 25000))

        assert result.max_monthly_payment == pytest.approx(891.67, abs=0.01)
        assert result.ideal_purchase_price == pytest.approx(112979, rel=0.01)
        assert result.down_payment_status == DownPaymentStatus.EXCESS
        assert result.monthly_margin == pytest.approx(0, abs=0.01)
        # A binding residual ceiling leaves nothing after housing
        assert result.max_monthly_payment == pytest.approx(result.ceilings.residual)
        assert result.can_afford is True

    def test_high_earner_has_no_room(self):
        """Expenses above take-home leave a negative margin and no payment."""
        result = calculate_max_affordability(_inputs(150000, 8000, 1200, 100000))

        assert result.max_monthly_payment == 0
        assert result.max_purchase_price == 0
        assert result.monthly_margin == pytest.approx(-450)


class TestListingCheck:
    """A $350k listing at 6.5% against the same households."""

    LISTING = Property(price=350000, property_tax_rate_percent=1.5)

    def test_first_time_buyer(self):
        """Payment, DTI, cash and margin all fail."""
        result = calculate_property_affordability(
            self.LISTING, _inputs(65000, 2500, 400, 25000)
        )
        assert result.can_afford is False
        assert len(result.constraints) == 4

    def test_dual_income_margin_shortfall(self):
        """The couple clears every lender test but runs short each month."""
        result = calculate_property_affordability(
            self.LISTING, _inputs(120000, 4000, 800, 80000)
        )

        assert result.can_afford is False
        assert result.dti_ratio < 43
        assert result.constraints == [
            f"Monthly shortfall of ${abs(result.monthly_margin):,.0f} after all obligations"
        ]
