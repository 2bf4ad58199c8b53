"""
Schedule balance checks.

Two advisory checks over a plan's sessions: HIIT recovery spacing and the
share of high-intensity vs recovery sessions.  Neither changes the plan.
"""

from dataclasses import dataclass, field
from datetime import date

from .config import (
    BALANCE_HIGH_INTENSITY_MAX_PCT,
    BALANCE_HIGH_INTENSITY_MIN_PCT,
    HIIT_MIN_SPACING_HOURS,
    RECOVERY_SESSION_TYPES,
    STANDARD_SESSION_TYPES,
)
from .models import Session


@dataclass
class SpacingWarning:
    """Two consecutive HIIT sessions closer than the recovery window."""

    first_session_id: str
    second_session_id: str
    hours_between: float
    recommendation: str = (
        f"HIIT sessions should be spaced {HIIT_MIN_SPACING_HOURS}+ hours apart for recovery"
    )


@dataclass
class SpacingReport:
    valid: bool
    warnings: list[SpacingWarning] = field(default_factory=list)


@dataclass
class BalanceReport:
    high_intensity_sessions: int
    recovery_sessions: int
    high_intensity_pct: float
    recovery_pct: float
    is_balanced: bool
    recommendation: str


def _is_hiit(session: Session) -> bool:
    return session.session_type.startswith("hiit")


def validate_hiit_spacing(sessions: list[Session]) -> SpacingReport:
    """
    Flag HIIT sessions scheduled less than 48 hours after the previous one.

    Sessions are compared in the order given; dates are calendar days, so
    back-to-back days are 24 hours apart.
    """
    hiit = [s for s in sessions if _is_hiit(s)]
    warnings_: list[SpacingWarning] = []

    for prev, cur in zip(hiit, hiit[1:]):
        hours = (date.fromisoformat(cur.date) - date.fromisoformat(prev.date)).days * 24
        if hours < HIIT_MIN_SPACING_HOURS:
            warnings_.append(SpacingWarning(prev.id, cur.id, float(hours)))

    return SpacingReport(valid=not warnings_, warnings=warnings_)


def calculate_sympathetic_balance(sessions: list[Session]) -> BalanceReport:
    """
    Share of high-intensity (resistance + HIIT) vs recovery (stretch) sessions.

    Balanced when high-intensity sessions make up 50-70% of the plan; the
    target is roughly 60/40.

    Example: 6 upper/lower + 4 stretch -> 60.0% / 40.0%, balanced.
    """
    total = len(sessions)
    high = sum(
        1 for s in sessions if s.session_type == "hiit" or s.session_type in STANDARD_SESSION_TYPES
    )
    recovery = sum(1 for s in sessions if s.session_type in RECOVERY_SESSION_TYPES)

    high_pct = high / total * 100 if total else 0.0
    recovery_pct = recovery / total * 100 if total else 0.0
    balanced = BALANCE_HIGH_INTENSITY_MIN_PCT <= high_pct <= BALANCE_HIGH_INTENSITY_MAX_PCT

    return BalanceReport(
        high_intensity_sessions=high,
        recovery_sessions=recovery,
        high_intensity_pct=high_pct,
        recovery_pct=recovery_pct,
        is_balanced=balanced,
        recommendation=(
            "Good balance between high-intensity and recovery activities"
            if balanced
            else "Consider adjusting to achieve a 60/40 ratio of high-intensity to recovery sessions"
        ),
    )
