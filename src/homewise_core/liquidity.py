"""Liquidity Engine: envelope accounting and the Liquidity Elasticity Index.

Models personal cashflow control:
- Envelope partitions (buckets) and dormancy
- Annual reserve coverage and pressure-valve redistribution
- Peak funding for variable bills
- Credit card charge clearing
- The Liquidity Elasticity Index (LEI), a 0-100 composite of how much
  reallocable money exists relative to committed obligations

Every function is pure. Dormant and archived buckets are excluded from all
aggregates.
"""

from typing import Iterable, Mapping, Optional, Sequence

import structlog

from .models import (
    Bucket,
    BucketStatus,
    BucketType,
    Charge,
    ChargeStatus,
    ClearingState,
    LEIBreakdown,
    LEIInput,
    LEIResult,
    Obligation,
    PeakFundingResult,
    RedistributionAllocation,
    RedistributionRule,
)
from .numeric import clamp, safe_number

logger = structlog.get_logger()

DEFAULT_EPSILON = 0.01

# LEI component weights
ELASTICITY_WEIGHT = 0.60
VOLATILITY_WEIGHT = 0.20
CLEARING_WEIGHT = 0.20


# =============================================================================
# BUCKETS
# =============================================================================


def is_dormant(bucket: Bucket) -> bool:
    """A bucket is dormant if archived, marked dormant, or named with a ``zz`` prefix."""
    return bucket.archived or bucket.status == BucketStatus.DORMANT or bucket.name.startswith("zz")


def active_buckets(
    buckets: Iterable[Bucket],
    bucket_type: Optional[BucketType] = None,
) -> list[Bucket]:
    """Non-dormant buckets, optionally limited to one type."""
    return [
        b for b in buckets
        if not is_dormant(b) and (bucket_type is None or b.type == bucket_type)
    ]


def _balance(buckets: Iterable[Bucket]) -> float:
    return sum(safe_number(b.balance) for b in buckets)


# =============================================================================
# ANNUAL RESERVE
# =============================================================================


def required_annual_reserve(obligations: Iterable[Obligation]) -> float:
    """Sum of expected costs for unpaid obligations."""
    return sum(safe_number(o.expected_cost) for o in obligations if not o.paid)


def annual_reserve_balance(buckets: Iterable[Bucket]) -> float:
    """Sum of active ledger-reserve balances."""
    return _balance(active_buckets(buckets, BucketType.LEDGER_RESERVE))


def annual_excess(annual_balance: float, required: float, buffer: float) -> float:
    """Reserve above required coverage plus the safety buffer, never negative."""
    return max(0.0, safe_number(annual_balance) - (safe_number(required) + safe_number(buffer)))


def pressure_valve_eligible(excess: float, threshold: float) -> bool:
    """True when the excess strictly exceeds the redistribution threshold."""
    return safe_number(excess) > safe_number(threshold)


def redistribution_plan(
    excess: float,
    rules: Sequence[RedistributionRule],
) -> list[RedistributionAllocation]:
    """Split ``excess`` across targets in proportion to positive weights.

    Rules with non-positive weight are dropped. Returns an empty plan when
    nothing qualifies or there is no excess; otherwise allocations sum to
    ``excess`` and their ``pct`` values sum to 1.
    """
    excess = safe_number(excess)
    valid = [r for r in rules if r.weight > 0]
    if not valid or excess <= 0:
        return []

    total_weight = sum(r.weight for r in valid)
    return [
        RedistributionAllocation(
            target_id=r.target_id,
            amount=excess * r.weight / total_weight,
            pct=r.weight / total_weight,
        )
        for r in valid
    ]


# =============================================================================
# PEAK FUNDING
# =============================================================================


def peak_funding_shield(vars_12mo: Mapping[str, Sequence[float]]) -> PeakFundingResult:
    """Volatility absorbed by funding each variable category at its peak month.

    Per category, peak is the highest month and avg the mean. Empty
    categories are skipped. The shield ratio is absorbed / peak totals, or
    0 when there is no spend at all.
    """
    peak_total = 0.0
    avg_total = 0.0
    for months in vars_12mo.values():
        values = [safe_number(v) for v in months]
        if not values:
            continue
        peak_total += max(values)
        avg_total += sum(values) / len(values)

    absorbed_total = peak_total - avg_total
    shield_ratio = absorbed_total / peak_total if peak_total > 0 else 0.0
    return PeakFundingResult(
        peak_total=peak_total,
        avg_total=avg_total,
        absorbed_total=absorbed_total,
        shield_ratio=shield_ratio,
    )


# =============================================================================
# CLEARING
# =============================================================================

_SETTLED = (ChargeStatus.IGNORED, ChargeStatus.CLEARED)
_FUNDED = (ChargeStatus.FUNDED, ChargeStatus.CLEARED)


def outstanding_charges(charges: Iterable[Charge]) -> list[Charge]:
    """Charges still needing action (not ignored, not cleared)."""
    return [c for c in charges if c.status not in _SETTLED]


def outstanding_total(charges: Iterable[Charge]) -> float:
    """Sum of outstanding charge amounts."""
    return sum(safe_number(c.amount) for c in outstanding_charges(charges))


def funded_charges_total(charges: Iterable[Charge]) -> float:
    """Sum of funded and cleared charge amounts."""
    return sum(safe_number(c.amount) for c in charges if c.status in _FUNDED)


def clearing_float(outstanding: float, funded: float, clearing_balance: float) -> float:
    """Outstanding charges not covered by funding or the clearing balance."""
    return max(0.0, safe_number(outstanding) - safe_number(funded) - safe_number(clearing_balance))


def clearing_integrity(funded: float, unfunded_exposure: float) -> float:
    """Funded share of funded-plus-exposure, 0-1; 1 when both are zero."""
    funded = safe_number(funded)
    denominator = funded + safe_number(unfunded_exposure)
    if denominator == 0:
        return 1.0
    return clamp(funded / denominator, 0, 1)


def clearing_state(charges: Sequence[Charge], clearing_bucket: Optional[Bucket]) -> ClearingState:
    """Funding position of the charge list against a clearing bucket."""
    outstanding = outstanding_total(charges)
    funded = funded_charges_total(charges)
    balance = safe_number(clearing_bucket.balance) if clearing_bucket is not None else 0.0
    exposure = clearing_float(outstanding, funded, balance)
    return ClearingState(
        outstanding_total=outstanding,
        funded_total=funded,
        clearing_float=exposure,
        clearing_integrity=clearing_integrity(funded, exposure),
    )


# =============================================================================
# LIQUIDITY ELASTICITY INDEX
# =============================================================================


def liquidity_elasticity_index(data: LEIInput) -> LEIResult:
    """Composite 0-100 score of flexibility relative to commitments.

    Formula:
        L_realloc  = active smoothing balance + reserve excess
        Constr     = required reserve + clearing float
        Elasticity = L_realloc / (Constr + epsilon)
        E_norm     = Elasticity / (Elasticity + 1)
        LEI        = 100 * clamp(0.6 * E_norm + 0.2 * shield + 0.2 * integrity, 0, 1)

    The clearing bucket is the first active clearing bucket; with none,
    an empty balance is used.
    """
    epsilon = safe_number(data.epsilon, DEFAULT_EPSILON)
    if epsilon <= 0:
        epsilon = DEFAULT_EPSILON

    l_hard = _balance(active_buckets(data.buckets, BucketType.OPERATING))
    l_soft = _balance(active_buckets(data.buckets, BucketType.SMOOTHING))

    reserve_balance = annual_reserve_balance(data.buckets)
    required = required_annual_reserve(data.obligations)
    l_committed = min(reserve_balance, required)
    a_excess = annual_excess(reserve_balance, required, data.buffer)
    l_realloc = l_soft + a_excess

    clearing_buckets = active_buckets(data.buckets, BucketType.CLEARING)
    clearing = clearing_state(data.charges, clearing_buckets[0] if clearing_buckets else None)

    constraints = required + clearing.clearing_float
    # Overdrawn smoothing buckets read as no reallocable money
    elasticity = max(0.0, l_realloc / (max(0.0, constraints) + epsilon))
    e_norm = elasticity / (elasticity + 1)
    vol_shield = peak_funding_shield(data.vars_12mo).shield_ratio
    clear_int = clearing.clearing_integrity

    lei = 100 * clamp(
        ELASTICITY_WEIGHT * e_norm + VOLATILITY_WEIGHT * vol_shield + CLEARING_WEIGHT * clear_int,
        0,
        1,
    )
    logger.debug(
        "lei_computed",
        lei=round(lei, 2),
        elasticity=round(elasticity, 4),
        vol_shield=round(vol_shield, 4),
        clear_int=round(clear_int, 4),
    )

    return LEIResult(
        lei=lei,
        breakdown=LEIBreakdown(
            l_hard=l_hard,
            l_soft=l_soft,
            l_committed=l_committed,
            a_excess=a_excess,
            l_realloc=l_realloc,
            constraints=constraints,
            elasticity=elasticity,
            e_norm=e_norm,
            vol_shield=vol_shield,
            clear_int=clear_int,
        ),
    )


__all__ = [
    "is_dormant",
    "active_buckets",
    "required_annual_reserve",
    "annual_reserve_balance",
    "annual_excess",
    "pressure_valve_eligible",
    "redistribution_plan",
    "peak_funding_shield",
    "outstanding_charges",
    "outstanding_total",
    "funded_charges_total",
    "clearing_float",
    "clearing_integrity",
    "clearing_state",
    "liquidity_elasticity_index",
]
