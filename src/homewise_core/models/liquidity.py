"""Liquidity Engine data models.

Buckets are envelope partitions of a household's cash. Obligations are
annual bills the reserve must cover. Charges are credit card purchases
moving through the clearing workflow. Ledger entries are the mandatory,
append-only record of every reserve withdrawal.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ..numeric import safe_number


class BucketType(str, Enum):
    """Role a bucket plays in the cashflow system."""

    OPERATING = "operating"
    SMOOTHING = "smoothing"
    LEDGER_RESERVE = "ledger_reserve"
    CAPITAL = "capital"
    CLEARING = "clearing"


class BucketStatus(str, Enum):
    """Whether a bucket participates in calculations."""

    ACTIVE = "active"
    DORMANT = "dormant"


class TargetRule(str, Enum):
    """How a bucket's funding target is set."""

    PEAK = "peak"
    FIXED = "fixed"
    GOAL = "goal"
    NONE = "none"


class BucketConstraint(str, Enum):
    """Movement rules attached to a bucket."""

    NONE = "none"
    LEDGER_REQUIRED = "ledger_required"
    TRANSFER_REQUIRED = "transfer_required"


class ChargeStatus(str, Enum):
    """Position of a charge in the clearing lifecycle."""

    UNMATCHED = "unmatched"
    MATCHED_UNFUNDED = "matched_unfunded"
    FUNDED = "funded"
    CLEARED = "cleared"
    IGNORED = "ignored"


class Bucket(BaseModel):
    """A named envelope partition (sub-account or logical bucket)."""

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "lr1",
                    "name": "AnnualReserve",
                    "type": "ledger_reserve",
                    "status": "active",
                    "balance": 8400,
                    "target_rule": "fixed",
                    "constraints": "ledger_required",
                }
            ]
        },
    }

    id: str
    name: str
    type: BucketType
    status: BucketStatus = BucketStatus.ACTIVE
    balance: float = 0.0
    target_rule: TargetRule = TargetRule.NONE
    constraints: BucketConstraint = BucketConstraint.NONE
    archived: bool = False
    notes: Optional[str] = None
    color: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("balance", mode="before")
    @classmethod
    def coerce_balance(cls, v: Any) -> float:
        """Map missing or non-finite balances to zero."""
        return safe_number(v)


class Obligation(BaseModel):
    """An annual bill (insurance, registration, property tax)."""

    model_config = {"frozen": True}

    id: str
    name: str
    expected_cost: float = 0.0
    due_month: int = Field(ge=1, le=12)
    paid: bool = False

    @field_validator("expected_cost", mode="before")
    @classmethod
    def coerce_cost(cls, v: Any) -> float:
        return safe_number(v)


class Charge(BaseModel):
    """A credit card charge in the clearing workflow.

    Lifecycle:
        unmatched -> matched_unfunded -> funded -> cleared
        unmatched -> ignored
    """

    model_config = {"frozen": True}

    id: str
    merchant: str
    amount: float = 0.0
    date: str = Field(description="ISO date, YYYY-MM-DD")
    category_hint: Optional[str] = None
    status: ChargeStatus = ChargeStatus.UNMATCHED
    bucket_id: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return safe_number(v)


class LedgerEntry(BaseModel):
    """A withdrawal record from a ledger-backed reserve. Never mutated."""

    model_config = {"frozen": True}

    id: str
    bucket_id: str
    date: str
    amount: float
    obligation_id: Optional[str] = None
    note: str


class RedistributionRule(BaseModel):
    """Weight given to a target bucket when excess reserve is released."""

    model_config = {"frozen": True}

    target_id: str
    weight: float

    @field_validator("weight", mode="before")
    @classmethod
    def coerce_weight(cls, v: Any) -> float:
        return safe_number(v)


class RedistributionAllocation(BaseModel):
    """Amount of excess assigned to one target."""

    model_config = {"frozen": True}

    target_id: str
    amount: float
    pct: float = Field(description="Normalized weight actually applied, 0-1")


class PeakFundingResult(BaseModel):
    """Volatility absorbed by funding variable bills at their peak month."""

    model_config = {"frozen": True}

    peak_total: float
    avg_total: float
    absorbed_total: float
    shield_ratio: float


class ClearingState(BaseModel):
    """Funding position of the outstanding credit card charges."""

    model_config = {"frozen": True}

    outstanding_total: float
    funded_total: float
    clearing_float: float = Field(description="Unfunded exposure")
    clearing_integrity: float = Field(ge=0, le=1)


class LEIBreakdown(BaseModel):
    """Intermediate values behind a Liquidity Elasticity Index."""

    model_config = {"frozen": True}

    l_hard: float = Field(description="Active operating balances")
    l_soft: float = Field(description="Active smoothing balances")
    l_committed: float = Field(description="Reserve balance committed to obligations")
    a_excess: float = Field(description="Reserve above required plus buffer")
    l_realloc: float = Field(description="Reallocable liquidity")
    constraints: float = Field(description="Required reserve plus clearing float")
    elasticity: float
    e_norm: float
    vol_shield: float
    clear_int: float


class LEIResult(BaseModel):
    """Composite Liquidity Elasticity Index, 0-100."""

    model_config = {"frozen": True}

    lei: float = Field(ge=0, le=100)
    breakdown: LEIBreakdown


class LEIInput(BaseModel):
    """Everything the Liquidity Elasticity Index reads."""

    buckets: list[Bucket] = Field(default_factory=list)
    obligations: list[Obligation] = Field(default_factory=list)
    charges: list[Charge] = Field(default_factory=list)
    vars_12mo: dict[str, list[float]] = Field(
        default_factory=dict,
        description="Twelve monthly spend amounts per variable expense category",
    )
    buffer: float = Field(default=0.0, description="Safety margin above required reserve")
    epsilon: Optional[float] = Field(default=None, description="Division guard")

    @field_validator("buffer", mode="before")
    @classmethod
    def coerce_buffer(cls, v: Any) -> float:
        return safe_number(v)
