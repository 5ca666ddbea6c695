"""Decision Rehearsal scoring.

Scores how steady a person is likely to stay through a housing decision.
Each mode maps the seven sliders onto a resource side (what holds you up)
and a demand side (what pulls on you). Stress toggles add demand. The
resource-demand gap passes through a logistic curve to give a 0-100
steadiness score, which is banded and paired with a recognized pattern
and suggested next steps.

Mode tables and pattern copy are module-level constants; every function is
pure.
"""

import math
from typing import Any, Callable, Union

import structlog

from .exceptions import ValidationError
from .models import (
    BandInfo,
    BandKey,
    BreakdownItem,
    ComputeResult,
    DecisionMode,
    ModeConfig,
    PatternResult,
    SliderCopy,
    SliderState,
    ToggleCopy,
    ToggleState,
)
from .numeric import clamp, safe_number

logger = structlog.get_logger()


# =============================================================================
# BANDS
# =============================================================================

BANDS: tuple[BandInfo, ...] = (
    BandInfo(name="Fragile", key=BandKey.FRAGILE, min=0, max=30),
    BandInfo(name="Reactive", key=BandKey.REACTIVE, min=31, max=50),
    BandInfo(name="Managing", key=BandKey.MANAGING, min=51, max=70),
    BandInfo(name="Stable", key=BandKey.STABLE, min=71, max=85),
    BandInfo(name="Resilient", key=BandKey.RESILIENT, min=86, max=100),
)

STATUS_TEXT: dict[BandKey, str] = {
    BandKey.RESILIENT: "Strong steadiness",
    BandKey.STABLE: "Mostly steady",
    BandKey.MANAGING: "Managing the load",
    BandKey.REACTIVE: "Reactive / easily shaken",
    BandKey.FRAGILE: "Fragile under stress",
}


def band_for(score: Any) -> BandInfo:
    """Band whose upper bound the clamped score does not exceed.

    Fractional scores between nominal bands (30.5) belong to the higher band.
    """
    s = clamp(safe_number(score))
    for band in BANDS:
        if s <= band.max:
            return band
    return BANDS[-1]


def status_text_for(band: Union[BandInfo, BandKey]) -> str:
    """Short status line for a band."""
    key = band.key if isinstance(band, BandInfo) else band
    return STATUS_TEXT[key]


# =============================================================================
# MODES
# =============================================================================


def _toggles(*entries: tuple[str, str, str]) -> tuple[ToggleCopy, ...]:
    return tuple(ToggleCopy(key=key, label=label, sub=sub) for key, label, sub in entries)


MODES: dict[DecisionMode, ModeConfig] = {
    DecisionMode.CLARIFY: ModeConfig(
        key=DecisionMode.CLARIFY,
        name="Clarifying the change",
        top_metric="Resilience to explore",
        left_title="Load",
        right_title="Capacity",
        sliders={
            "buffer": SliderCopy(
                label="Flexibility Buffer",
                hint="How much slack you have if plans shift (time, money, energy).",
            ),
            "lifestyle": SliderCopy(
                label="Identity Clarity",
                hint="How clear you are on what's changing and what you want.",
            ),
            "risk": SliderCopy(
                label="Ambiguity Stress",
                hint="How much uncertainty is weighing on you right now.",
            ),
            "finance": SliderCopy(
                label="Emotional Grounding",
                hint="How steady you feel day-to-day while thinking about this.",
            ),
            "deal": SliderCopy(
                label="Support Stability",
                hint="How supported you feel by people, routines, and logistics.",
            ),
            "attach": SliderCopy(
                label="Attachment Intensity",
                hint="How much you're bonding to a specific outcome too early.",
            ),
            "lev": SliderCopy(
                label="Urgency Pressure",
                hint="How rushed you feel (internal or external).",
            ),
        },
        defaults=SliderState(
            buffer=82, lifestyle=84, risk=30, finance=82, deal=78, attach=28, lev=26
        ),
        stress_title="Mindset nudges",
        toggles=_toggles(
            ("t_timeline", "Need an answer soon",
             "A deadline (real or self-imposed) is pushing speed."),
            ("t_identity", "Identity swirl",
             "It feels like this change says something big about who you are."),
            ("t_compete", "Comparison pressure",
             "Other people's timelines or choices are pulling you."),
        ),
    ),
    DecisionMode.LOCATION: ModeConfig(
        key=DecisionMode.LOCATION,
        name="Testing a location",
        top_metric="Sustainability of Direction",
        left_title="Strain",
        right_title="Support",
        sliders={
            "buffer": SliderCopy(
                label="Personal Buffer",
                hint="If this location surprises you, how much slack do you have?",
            ),
            "lifestyle": SliderCopy(
                label="Lifestyle Alignment",
                hint="Would daily life here support your routines and values?",
            ),
            "risk": SliderCopy(
                label="Volatility Exposure",
                hint="How uncertain or changeable this location feels (costs, stability).",
            ),
            "finance": SliderCopy(
                label="Ongoing cost strain",
                hint="How heavy the ongoing costs feel relative to your life.",
            ),
            "deal": SliderCopy(
                label="Opportunity Access",
                hint="Access to jobs, services, community, and growth.",
            ),
            "attach": SliderCopy(
                label="Pull Toward This Place",
                hint="How emotionally pulled you feel toward living here.",
            ),
            "lev": SliderCopy(
                label="Support Proximity",
                hint="How close you'd be to people/support that matter to you.",
            ),
        },
        defaults=SliderState(
            buffer=80, lifestyle=86, risk=28, finance=32, deal=78, attach=30, lev=76
        ),
        stress_title="Context stressors",
        toggles=_toggles(
            ("t_timeline", "Timing constraint",
             "Work / school / lease timing narrows options."),
            ("t_compete", "Market hype",
             "Noise, headlines, or friends make it feel urgent."),
            ("t_identity", '"This place is the new me"',
             "You're projecting a future self onto a location."),
            ("t_income", "Budget wobble",
             "Income or expenses feel uncertain in the near term."),
        ),
    ),
    DecisionMode.OFFER: ModeConfig(
        key=DecisionMode.OFFER,
        name="Preparing an offer",
        top_metric="Steadiness Under Pressure",
        left_title="Pressure",
        right_title="Protection",
        sliders={
            "buffer": SliderCopy(
                label="Financial Cushion",
                hint="How covered you are if the deal shifts or costs rise.",
            ),
            "lifestyle": SliderCopy(
                label="Life fit (this home)",
                hint="How well this specific home supports your day-to-day life.",
            ),
            "risk": SliderCopy(
                label="Property Surprises",
                hint="Inspection/maintenance uncertainty and unknowns.",
            ),
            "finance": SliderCopy(
                label="Monthly tightness",
                hint="How tight the monthly payment feels for your comfort.",
            ),
            "deal": SliderCopy(
                label="Protections in writing",
                hint="Contingencies, credits, repairs, buydowns—protections you can "
                "point to in writing.",
            ),
            "attach": SliderCopy(
                label="Attachment Intensity",
                hint='How much you feel you "need" this home to work out.',
            ),
            "lev": SliderCopy(
                label="Walk-away Power",
                hint="How real it feels to walk away (alternatives, time, flexibility).",
            ),
        },
        defaults=SliderState(
            buffer=82, lifestyle=84, risk=24, finance=28, deal=78, attach=30, lev=74
        ),
        stress_title="Pressure switches",
        toggles=_toggles(
            ("t_compete", "Bidding war vibe", "Scarcity / competition energy."),
            ("t_timeline", "Time pressure", "Deadline / forced speed."),
            ("t_identity", '"This is my home" story', "Identity projection mode."),
            ("t_repair", "Surprise repair", "Example: a $15k hit."),
            ("t_income", "Income wobble", "Temporary dip."),
            ("t_rate", "Rate shock", "Financing gets harder."),
        ),
    ),
}


def _resolve_mode(mode: Union[DecisionMode, str]) -> DecisionMode:
    try:
        return DecisionMode(mode)
    except ValueError:
        raise ValidationError(
            f"Unknown rehearsal mode: {mode!r}",
            field="mode",
            value=mode,
            constraint=f"Must be one of: {', '.join(m.value for m in DecisionMode)}",
        ) from None


def mode_config(mode: Union[DecisionMode, str]) -> ModeConfig:
    """Static labels, defaults and toggle copy for a mode."""
    return MODES[_resolve_mode(mode)]


def default_sliders(mode: Union[DecisionMode, str]) -> SliderState:
    """Starting slider positions for a mode."""
    return mode_config(mode).defaults


def relevant_toggles(mode: Union[DecisionMode, str]) -> tuple[str, ...]:
    """Toggle keys a mode presents, in display order."""
    return tuple(toggle.key for toggle in mode_config(mode).toggles)


# =============================================================================
# SCORING
# =============================================================================


def _sigmoid(x: float) -> float:
    return 1 / (1 + math.exp(-x))


def _score(resource: float, demand: float, scale: float, bonus: float, divisor: float) -> tuple[float, float]:
    """Raw gap and logistic score; resource above 75 earns a bonus."""
    raw = 50 + (resource - demand) * scale
    if resource > 75:
        raw += (resource - 75) * bonus
    return raw, clamp(100 * _sigmoid((raw - 50) / divisor))


def _compute_clarify(s: SliderState, t: ToggleState) -> dict[str, Any]:
    identity_clarity = s.lifestyle
    grounding = s.finance
    flexibility = s.buffer
    support = s.deal
    ambiguity = s.risk
    attachment = s.attach
    urgency = s.lev

    stress_boost = (5 if t.t_timeline else 0) + (5 if t.t_identity else 0) + (4 if t.t_compete else 0)

    agency = clamp((flexibility + support) / 2)
    urgency_adj = clamp(urgency * (1 - 0.35 * agency / 100))

    resource = clamp(
        0.28 * identity_clarity + 0.28 * grounding + 0.26 * flexibility + 0.18 * support
    )
    demand = clamp(0.33 * attachment + 0.37 * ambiguity + 0.24 * urgency_adj + stress_boost)
    raw, score = _score(resource, demand, scale=0.85, bonus=0.45, divisor=12)
    whiplash = clamp(0.42 * attachment + 0.36 * ambiguity - 0.34 * grounding)

    return dict(
        score=score,
        raw=raw,
        resource=resource,
        demand=demand,
        whiplash=whiplash,
        left=(
            BreakdownItem(name="Urgency pressure (adjusted by agency)", value=urgency_adj),
            BreakdownItem(name="Ambiguity stress", value=ambiguity),
            BreakdownItem(name="Attachment intensity", value=attachment),
            BreakdownItem(name="Extra pressure (toggles)", value=clamp(stress_boost * 4.0)),
        ),
        right=(
            BreakdownItem(name="Identity clarity", value=identity_clarity),
            BreakdownItem(name="Emotional grounding", value=grounding),
            BreakdownItem(name="Flexibility buffer", value=flexibility),
            BreakdownItem(name="Support stability", value=support),
        ),
    )


def _compute_location(s: SliderState, t: ToggleState) -> dict[str, Any]:
    buffer = s.buffer
    lifestyle = s.lifestyle
    support_proximity = s.lev
    opportunity = s.deal
    volatility = s.risk
    cost_strain = s.finance
    pull = s.attach

    stress_boost = (6 if t.t_timeline else 0) + (4 if t.t_compete else 0)

    resource = clamp(
        0.28 * lifestyle + 0.24 * buffer + 0.24 * support_proximity + 0.24 * opportunity
    )
    # Pull only hurts in proportion to strain
    pull_penalty = clamp(pull * ((volatility + cost_strain) / 200))
    demand = clamp(0.38 * cost_strain + 0.34 * volatility + 0.18 * pull_penalty + stress_boost)
    raw, score = _score(resource, demand, scale=0.90, bonus=0.35, divisor=12)
    whiplash = clamp(0.35 * volatility + 0.30 * cost_strain - 0.35 * buffer)

    return dict(
        score=score,
        raw=raw,
        resource=resource,
        demand=demand,
        whiplash=whiplash,
        left=(
            BreakdownItem(name="Ongoing cost strain", value=cost_strain),
            BreakdownItem(name="Volatility exposure", value=volatility),
            BreakdownItem(name="Unhelpful pull (when strain is high)", value=pull_penalty),
        ),
        right=(
            BreakdownItem(name="Lifestyle alignment", value=lifestyle),
            BreakdownItem(name="Personal buffer", value=buffer),
            BreakdownItem(name="Support proximity", value=support_proximity),
            BreakdownItem(name="Opportunity access", value=opportunity),
        ),
    )


def _compute_offer(s: SliderState, t: ToggleState) -> dict[str, Any]:
    cushion = s.buffer
    safeguards = s.deal
    walkaway = s.lev
    tightness = s.finance
    surprises = s.risk
    attachment = s.attach

    stress_pressure = (
        (10 if t.t_compete else 0)
        + (10 if t.t_timeline else 0)
        + (8 if t.t_identity else 0)
        + (10 if t.t_repair else 0)
        + (10 if t.t_income else 0)
        + (10 if t.t_rate else 0)
    )

    # Fit is capped and discounted by attachment
    fit_effective = clamp(min(s.lifestyle, 80) * (1 - 0.25 * attachment / 100))

    resource = clamp(0.34 * cushion + 0.28 * safeguards + 0.28 * walkaway + 0.10 * fit_effective)
    attach_impact = clamp(attachment * (1 - 0.40 * cushion / 100))
    stress_norm = clamp(stress_pressure * 1.4)
    demand = clamp(
        0.30 * tightness + 0.28 * surprises + 0.26 * attach_impact + 0.16 * stress_norm
    )
    raw, score = _score(resource, demand, scale=1.05, bonus=0.50, divisor=11)
    whiplash = clamp(0.50 * attach_impact + 0.30 * stress_norm - 0.40 * walkaway)

    return dict(
        score=score,
        raw=raw,
        resource=resource,
        demand=demand,
        whiplash=whiplash,
        left=(
            BreakdownItem(name="Monthly tightness", value=tightness),
            BreakdownItem(name="Property surprises", value=surprises),
            BreakdownItem(
                name="Attachment intensity (adjusted by cushion)", value=attach_impact
            ),
            BreakdownItem(name="Extra pressure (toggles)", value=stress_norm),
        ),
        right=(
            BreakdownItem(name="Financial cushion", value=cushion),
            BreakdownItem(name="Protections in writing", value=safeguards),
            BreakdownItem(name="Walk-away power", value=walkaway),
            BreakdownItem(name="Life fit (this home)", value=fit_effective),
        ),
    )


_MODE_COMPUTE: dict[DecisionMode, Callable[[SliderState, ToggleState], dict[str, Any]]] = {
    DecisionMode.CLARIFY: _compute_clarify,
    DecisionMode.LOCATION: _compute_location,
    DecisionMode.OFFER: _compute_offer,
}


# =============================================================================
# PATTERNS
# =============================================================================


def _pattern(tag: str, summary: str, drivers: tuple[str, str], try_next: tuple[str, str]) -> PatternResult:
    return PatternResult(tag=tag, summary=summary, drivers=drivers, try_next=try_next)


PatternRule = tuple[Callable[[SliderState], bool], PatternResult]

PATTERN_RULES: dict[DecisionMode, tuple[tuple[PatternRule, ...], PatternResult]] = {
    DecisionMode.OFFER: (
        (
            (
                lambda s: s.attach >= 65 and s.lev <= 45,
                _pattern(
                    "Hard to let go",
                    'This home feels like it has to work out. When a home feels "must-win," '
                    "it becomes harder to hold boundaries during negotiation.",
                    (
                        "You're already emotionally invested in this outcome.",
                        "Walking away doesn't feel very real right now.",
                    ),
                    (
                        'Write one sentence: "I walk away if _____." Keep it visible while you decide.',
                        "Pick one safeguard you won't trade away (inspection, credit, repair, or price).",
                    ),
                ),
            ),
            (
                lambda s: s.finance >= 65 and s.buffer <= 50,
                _pattern(
                    "Tight monthly comfort",
                    "The monthly stretch looks heavy compared to your cushion. That can make "
                    "small setbacks feel big and increase day-to-day stress.",
                    (
                        "Monthly stretch is high.",
                        "Your cushion is limited if costs rise or the timeline drags.",
                    ),
                    (
                        "Lower stretch one notch (price, rate, down payment, or debt) and "
                        "re-check steadiness.",
                        'Decide your "sleep well" payment before thinking about competitiveness.',
                    ),
                ),
            ),
            (
                lambda s: s.risk >= 60 and s.deal <= 45,
                _pattern(
                    "Too many unknowns",
                    "There are meaningful unknowns, but protections are light. That increases "
                    "the chance of regret if surprises appear after you commit.",
                    (
                        "Property surprises are high (inspection/maintenance uncertainty).",
                        "Deal safeguards are low (less protection in writing).",
                    ),
                    (
                        "Choose one protection to keep (inspection window, credit, repairs, or price).",
                        "If you waive one safeguard, replace it with another (credit, price, "
                        "warranty, insurance).",
                    ),
                ),
            ),
        ),
        _pattern(
            "Steady enough to proceed",
            "Right now, your protections are keeping up with pressure. You're more likely "
            "to stay steady even if the deal shifts a bit.",
            (
                "Protection is keeping pace with pressure.",
                "Attachment looks manageable relative to options.",
            ),
            (
                'Before you submit: name your top 1–2 "must keep" terms.',
                "If pressure toggles turn on, add one protection before increasing commitment.",
            ),
        ),
    ),
    DecisionMode.CLARIFY: (
        (
            (
                lambda s: s.lev >= 65 and s.buffer <= 55,
                _pattern(
                    "Rushed without a floor",
                    "You may feel a strong need to change quickly, but your grounding isn't "
                    "fully in place yet. That can make any option feel urgent.",
                    (
                        "Demand/urgency is running high.",
                        "Your buffer/grounding isn't fully supporting you.",
                    ),
                    (
                        "Name what deadline is real vs. imagined (one sentence each).",
                        "Do one stabilizing step first (sleep, schedule, money snapshot) "
                        "before narrowing.",
                    ),
                ),
            ),
            (
                lambda s: s.risk >= 60 and s.lifestyle <= 55,
                _pattern(
                    "Unclear direction",
                    "There's a lot of uncertainty and the direction isn't crisp yet. When the "
                    "direction is fuzzy, decisions can start to feel heavy and confusing.",
                    (
                        "Ambiguity / unknowns are high.",
                        "Clarity about what you want is still forming.",
                    ),
                    (
                        "Write 3 bullets: \"I'm moving toward…\" (not a plan — just a direction).",
                        "Pick one question to answer before you narrow (e.g., commute, support, "
                        "cost, space).",
                    ),
                ),
            ),
        ),
        _pattern(
            "Grounded exploration",
            "You have enough steadiness to explore without forcing commitment. This is a "
            "good place to test options and learn what you actually need.",
            (
                "Your grounding looks supportive.",
                "Demand is present but not dominating.",
            ),
            (
                "Explore two options in parallel for one week (keeps optionality real).",
                "If attachment rises, pause and name what it represents (safety, identity, "
                "relief, status).",
            ),
        ),
    ),
    DecisionMode.LOCATION: (
        (
            (
                lambda s: s.finance >= 60 and s.lifestyle >= 70,
                _pattern(
                    "Fit vs. cost tension",
                    "This location might really fit your day-to-day life — and it might also "
                    "ask more from your budget than feels sustainable long term.",
                    (
                        "Lifestyle alignment is high.",
                        "Cost reality is pulling up strain.",
                    ),
                    (
                        "Try one nearby micro-location or housing type that keeps the lifestyle "
                        "benefits at lower cost.",
                        "Choose the top 1–2 location benefits you'd actually pay extra for.",
                    ),
                ),
            ),
            (
                lambda s: s.lev <= 45 and s.lifestyle <= 55,
                _pattern(
                    "Support may be thin",
                    "This location might not support you the way you want. When support feels "
                    "far away, the move can feel heavier over time.",
                    (
                        "Support/connection feels limited here.",
                        "Lifestyle alignment isn't strong enough to offset that.",
                    ),
                    (
                        "Name one support you'd want within 20 minutes (people, services, community).",
                        "Compare a second location that improves support even if it's less exciting.",
                    ),
                ),
            ),
        ),
        _pattern(
            "Steady scouting",
            "This looks workable. The key decision is what you want to prioritize as you "
            "narrow — cost, fit, support, or flexibility.",
            (
                "Support is keeping up.",
                "Strain isn't taking over.",
            ),
            (
                'Choose your top 2 "must haves" for location before you look at listings.',
                "If strain rises, add buffer (time/money) or adjust expectations rather than "
                "forcing it.",
            ),
        ),
    ),
}


def detect_pattern(
    mode: Union[DecisionMode, str],
    sliders: SliderState,
    toggles: ToggleState,
) -> PatternResult:
    """First matching pattern rule for the mode, else the mode's default.

    Patterns read sliders only; ``toggles`` is accepted so callers can pass
    the full rehearsal state.
    """
    rules, default = PATTERN_RULES[_resolve_mode(mode)]
    for matches, pattern in rules:
        if matches(sliders):
            return pattern
    return default


def compute(
    mode: Union[DecisionMode, str],
    sliders: SliderState,
    toggles: ToggleState,
) -> ComputeResult:
    """Score a rehearsal state.

    Args:
        mode: Which decision is being rehearsed.
        sliders: Slider positions, each 0-100.
        toggles: Stress toggles; toggles a mode does not use are ignored.

    Returns:
        ComputeResult with score, band, breakdowns and pattern.

    Raises:
        ValidationError: If ``mode`` is not a known rehearsal mode.
    """
    resolved = _resolve_mode(mode)
    config = MODES[resolved]
    partial = _MODE_COMPUTE[resolved](sliders, toggles)

    band = band_for(partial["score"])
    pattern = detect_pattern(resolved, sliders, toggles)
    logger.debug(
        "rehearsal_computed",
        mode=resolved.value,
        resource=round(partial["resource"], 2),
        demand=round(partial["demand"], 2),
        score=round(partial["score"], 2),
        band=band.key.value,
        pattern=pattern.tag,
    )

    return ComputeResult(
        left_title=config.left_title,
        right_title=config.right_title,
        band=band,
        status_text=status_text_for(band),
        pattern=pattern,
        **partial,
    )


__all__ = [
    "BANDS",
    "MODES",
    "PATTERN_RULES",
    "band_for",
    "status_text_for",
    "mode_config",
    "default_sliders",
    "relevant_toggles",
    "detect_pattern",
    "compute",
]
