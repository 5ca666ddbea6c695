"""Tests for envelope accounting and the Liquidity Elasticity Index."""

import pytest

from homewise_core import liquidity_elasticity_index
from homewise_core.liquidity import (
    active_buckets,
    annual_excess,
    annual_reserve_balance,
    clearing_float,
    clearing_integrity,
    clearing_state,
    funded_charges_total,
    is_dormant,
    outstanding_charges,
    outstanding_total,
    peak_funding_shield,
    pressure_valve_eligible,
    redistribution_plan,
    required_annual_reserve,
)
from homewise_core.models import (
    Bucket,
    BucketStatus,
    BucketType,
    LEIInput,
    RedistributionRule,
)


class TestBuckets:
    """Test suite for dormancy and bucket filtering."""

    def test_dormant_rules(self):
        """Archived, dormant-status and zz-prefixed buckets are dormant."""
        assert is_dormant(Bucket(id="a", name="Old", type=BucketType.CAPITAL, archived=True))
        assert is_dormant(
            Bucket(id="b", name="Old", type=BucketType.CAPITAL, status=BucketStatus.DORMANT)
        )
        assert is_dormant(Bucket(id="c", name="zzLegacy", type=BucketType.CAPITAL))
        assert not is_dormant(Bucket(id="d", name="Savings", type=BucketType.CAPITAL))

    def test_active_buckets_excludes_dormant(self, buckets: list[Bucket]):
        """The dormant capital bucket drops out."""
        active = active_buckets(buckets)
        assert "zzold" not in {b.id for b in active}
        assert active_buckets(buckets, BucketType.CAPITAL) == []

    def test_single_active_clearing_bucket(self, buckets: list[Bucket]):
        """Filtering by type returns only that type."""
        clearing = active_buckets(buckets, BucketType.CLEARING)
        assert [b.id for b in clearing] == ["cl1"]


class TestAnnualReserve:
    """Test suite for reserve coverage and redistribution."""

    def test_required_skips_paid(self, obligations):
        """Only unpaid obligations need reserve."""
        assert required_annual_reserve(obligations) == pytest.approx(6800)

    def test_reserve_balance(self, buckets):
        """Ledger reserve balances are summed."""
        assert annual_reserve_balance(buckets) == pytest.approx(8400)

    def test_annual_excess(self):
        """Excess is balance over required plus buffer, never negative."""
        assert annual_excess(9000, 4000, 2000) == 3000
        assert annual_excess(5000, 4000, 2000) == 0

    def test_pressure_valve_is_strict(self):
        """Excess must strictly exceed the threshold."""
        assert pressure_valve_eligible(1000.01, 1000) is True
        assert pressure_valve_eligible(1000, 1000) is False

    def test_redistribution_by_weight(self):
        """Excess is split in proportion to weights."""
        plan = redistribution_plan(
            1000,
            [
                RedistributionRule(target_id="sm1", weight=3),
                RedistributionRule(target_id="cap", weight=1),
            ],
        )

        assert [(a.target_id, a.amount, a.pct) for a in plan] == [
            ("sm1", pytest.approx(750), pytest.approx(0.75)),
            ("cap", pytest.approx(250), pytest.approx(0.25)),
        ]
        assert sum(a.amount for a in plan) == pytest.approx(1000)

    def test_redistribution_drops_non_positive_weights(self):
        """Zero and negative weights receive nothing."""
        plan = redistribution_plan(
            600,
            [
                RedistributionRule(target_id="a", weight=0),
                RedistributionRule(target_id="b", weight=-2),
                RedistributionRule(target_id="c", weight=1),
            ],
        )
        assert [a.target_id for a in plan] == ["c"]
        assert plan[0].amount == pytest.approx(600)

    @pytest.mark.parametrize("excess", [0, -50])
    def test_redistribution_without_excess(self, excess):
        """No excess means an empty plan."""
        assert redistribution_plan(excess, [RedistributionRule(target_id="a", weight=1)]) == []


class TestPeakFunding:
    """Test suite for the peak funding shield."""

    def test_shield_ratio(self, vars_12mo):
        """Absorbed volatility over peak funding."""
        result = peak_funding_shield(vars_12mo)

        assert result.peak_total == pytest.approx(820)
        assert result.avg_total == pytest.approx((5110 + 1985 + 995) / 12)
        assert result.absorbed_total == pytest.approx(result.peak_total - result.avg_total)
        assert result.shield_ratio == pytest.approx(result.absorbed_total / 820)

    def test_empty_categories(self):
        """No spend gives a zero ratio."""
        result = peak_funding_shield({"groceries": []})
        assert result.peak_total == 0
        assert result.shield_ratio == 0


class TestClearing:
    """Test suite for credit card clearing."""

    def test_outstanding(self, charges):
        """Ignored and cleared charges are settled."""
        assert {c.id for c in outstanding_charges(charges)} == {"ch1", "ch2", "ch3"}
        assert outstanding_total(charges) == pytest.approx(295)

    def test_funded_total(self, charges):
        """Funded and cleared charges count as funded."""
        assert funded_charges_total(charges) == pytest.approx(86)

    def test_clearing_float_never_negative(self):
        """A well-stocked clearing bucket leaves no float."""
        assert clearing_float(295, 86, 950) == 0
        assert clearing_float(295, 86, 100) == pytest.approx(109)

    @pytest.mark.parametrize(
        "funded,exposure,expected",
        [(0, 0, 1.0), (100, 0, 1.0), (0, 200, 0.0), (100, 100, 0.5), (300, 100, 0.75)],
    )
    def test_integrity(self, funded, exposure, expected):
        """Integrity is the funded share; perfect when there is nothing to fund."""
        assert clearing_integrity(funded, exposure) == pytest.approx(expected)

    def test_state_without_clearing_bucket(self, charges):
        """Without a clearing bucket the whole unfunded gap is exposure."""
        state = clearing_state(charges, None)

        assert state.clearing_float == pytest.approx(209)
        assert state.clearing_integrity == pytest.approx(86 / 295)


class TestLiquidityElasticityIndex:
    """Test suite for the LEI composite."""

    def test_breakdown(self, lei_input: LEIInput):
        """Each component is derived from the active buckets."""
        breakdown = liquidity_elasticity_index(lei_input).breakdown

        assert breakdown.l_hard == pytest.approx(3200)
        assert breakdown.l_soft == pytest.approx(2400)
        assert breakdown.l_committed == pytest.approx(6800)
        assert breakdown.a_excess == pytest.approx(1100)
        assert breakdown.l_realloc == pytest.approx(3500)
        assert breakdown.constraints == pytest.approx(6800)
        assert breakdown.clear_int == pytest.approx(1.0)

    def test_score(self, lei_input: LEIInput):
        """Weighted blend of elasticity, volatility shield and clearing integrity."""
        result = liquidity_elasticity_index(lei_input)
        assert result.lei == pytest.approx(43.945, abs=0.01)

    def test_empty_input(self):
        """An empty household scores only on clearing integrity."""
        result = liquidity_elasticity_index(LEIInput())
        assert result.lei == pytest.approx(20.0)
        assert result.breakdown.elasticity == 0

    def test_repeat_calls_identical(self, lei_input: LEIInput):
        """The index depends only on its input."""
        assert liquidity_elasticity_index(lei_input) == liquidity_elasticity_index(lei_input)

    @pytest.mark.parametrize("epsilon", [0, -1, None])
    def test_bad_epsilon_falls_back(self, lei_input: LEIInput, epsilon):
        """Non-positive epsilon is replaced with the default."""
        baseline = liquidity_elasticity_index(lei_input)
        result = liquidity_elasticity_index(lei_input.model_copy(update={"epsilon": epsilon}))
        assert result.lei == pytest.approx(baseline.lei)

    def test_lei_bounded(self, lei_input: LEIInput):
        """A huge smoothing balance cannot push the score past 100."""
        rich = lei_input.model_copy(
            update={
                "buckets": lei_input.buckets
                + [Bucket(id="sm9", name="Windfall", type=BucketType.SMOOTHING, balance=10**9)]
            }
        )
        assert 0 <= liquidity_elasticity_index(rich).lei <= 100
