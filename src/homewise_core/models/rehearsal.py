"""Decision Rehearsal data models.

Seven sliders and six stress toggles describe how a person feels about a
housing decision. Slider meaning depends on the rehearsal mode; the field
names are stable keys, not labels.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..numeric import clamp, safe_number


class DecisionMode(str, Enum):
    """Which decision is being rehearsed."""

    CLARIFY = "clarify"
    LOCATION = "location"
    OFFER = "offer"


class BandKey(str, Enum):
    """Qualitative steadiness bands, weakest first."""

    FRAGILE = "fragile"
    REACTIVE = "reactive"
    MANAGING = "managing"
    STABLE = "stable"
    RESILIENT = "resilient"


SLIDER_KEYS = ("buffer", "lifestyle", "risk", "finance", "deal", "attach", "lev")
TOGGLE_KEYS = ("t_compete", "t_timeline", "t_identity", "t_repair", "t_income", "t_rate")


class SliderState(BaseModel):
    """Slider positions, each in [0, 100]."""

    model_config = {"frozen": True}

    buffer: float = 50.0
    lifestyle: float = 50.0
    risk: float = 50.0
    finance: float = 50.0
    deal: float = 50.0
    attach: float = 50.0
    lev: float = 50.0

    @field_validator(*SLIDER_KEYS, mode="before")
    @classmethod
    def clamp_slider(cls, v: Any) -> float:
        """Coerce to a finite number and clamp into the slider range."""
        return clamp(safe_number(v))


class ToggleState(BaseModel):
    """Stress toggles; each one adds pressure when on."""

    model_config = {"frozen": True}

    t_compete: bool = False
    t_timeline: bool = False
    t_identity: bool = False
    t_repair: bool = False
    t_income: bool = False
    t_rate: bool = False


class BreakdownItem(BaseModel):
    """One named contributor to the load or capacity side."""

    model_config = {"frozen": True}

    name: str
    value: float


class PatternResult(BaseModel):
    """The qualitative pattern recognized in a slider configuration."""

    model_config = {"frozen": True}

    tag: str
    summary: str
    drivers: tuple[str, ...]
    try_next: tuple[str, ...] = Field(description="Concrete next steps to try")


class BandInfo(BaseModel):
    """A steadiness band and its nominal integer bounds."""

    model_config = {"frozen": True}

    name: str
    key: BandKey
    min: int
    max: int


class ComputeResult(BaseModel):
    """Full output of a rehearsal computation."""

    model_config = {"frozen": True}

    score: float = Field(ge=0, le=100)
    raw: float
    resource: float
    demand: float
    whiplash: float = Field(ge=0, le=100)
    left_title: str
    right_title: str
    left: tuple[BreakdownItem, ...]
    right: tuple[BreakdownItem, ...]
    band: BandInfo
    status_text: str
    pattern: PatternResult


class SliderCopy(BaseModel):
    """Label and hint shown for a slider in a given mode."""

    model_config = {"frozen": True}

    label: str
    hint: str


class ToggleCopy(BaseModel):
    """Label and sub-label shown for a stress toggle in a given mode."""

    model_config = {"frozen": True}

    key: str
    label: str
    sub: str


class ModeConfig(BaseModel):
    """Static description of a rehearsal mode."""

    model_config = {"frozen": True}

    key: DecisionMode
    name: str
    top_metric: str
    left_title: str
    right_title: str
    sliders: dict[str, SliderCopy]
    defaults: SliderState
    stress_title: str
    toggles: tuple[ToggleCopy, ...]
