"""
XP ledger: experience points and level progression.

Levels come from a fixed table of cumulative XP bands. Level 10 is the
open-ended top tier.
"""

import logging
from dataclasses import asdict, dataclass

from bodybalance.errors import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XpLevel:
    """A level band: total XP in [min_xp, max_xp) maps to this level."""

    level: int
    min_xp: int
    max_xp: int | None  # None for the top tier


LEVELS = [
    XpLevel(level=1, min_xp=0, max_xp=100),
    XpLevel(level=2, min_xp=100, max_xp=250),
    XpLevel(level=3, min_xp=250, max_xp=500),
    XpLevel(level=4, min_xp=500, max_xp=1000),
    XpLevel(level=5, min_xp=1000, max_xp=2000),
    XpLevel(level=6, min_xp=2000, max_xp=3500),
    XpLevel(level=7, min_xp=3500, max_xp=5000),
    XpLevel(level=8, min_xp=5000, max_xp=7500),
    XpLevel(level=9, min_xp=7500, max_xp=10000),
    XpLevel(level=10, min_xp=10000, max_xp=None),
]

MAX_LEVEL = LEVELS[-1].level


@dataclass(frozen=True)
class XpState:
    """A user's XP standing. Replaced, never mutated, on each award."""

    level: int = 1
    current_xp: int = 0
    total_xp_earned: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict | None) -> "XpState":
        """Rebuild state from storage, re-deriving level from the total."""
        if not data:
            return cls()
        return state_for_total(int(data.get("total_xp_earned", 0)))


@dataclass(frozen=True)
class XpAward:
    """Outcome of an award: the new state plus the level-up signal."""

    state: XpState
    amount: int
    previous_level: int
    leveled_up: bool

    @property
    def new_level(self) -> int:
        return self.state.level


@dataclass(frozen=True)
class LevelProgress:
    """Progress through the current level band."""

    level: int
    percent: int
    current_level_floor: int
    next_level_threshold: int | None


def level_for_total(total_xp: int) -> XpLevel:
    """Find the level band containing a cumulative XP total."""
    for band in LEVELS:
        if band.max_xp is None or total_xp < band.max_xp:
            return band
    return LEVELS[-1]


def xp_required_for_level(level: int) -> int | None:
    """Width of a level band, or None for the open-ended top tier."""
    band = LEVELS[min(max(level, 1), MAX_LEVEL) - 1]
    if band.max_xp is None:
        return None
    return band.max_xp - band.min_xp


def state_for_total(total_xp: int) -> XpState:
    """Derive the full XP state from a cumulative total."""
    band = level_for_total(total_xp)
    return XpState(
        level=band.level,
        current_xp=total_xp - band.min_xp,
        total_xp_earned=total_xp,
    )


def award_xp(state: XpState | None, amount: int) -> XpAward:
    """
    Add XP and re-derive the level.

    A single award may cross several level boundaries; the returned
    signal reports one level-up carrying the final level reached.

    Args:
        state: Current XP state. None starts from level 1 / 0 XP.
        amount: Non-negative number of points to add

    Returns:
        XpAward with the new state and level-up flag

    Raises:
        InvalidArgument: If amount is negative or not an integer
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidArgument(f"XP amount must be an integer, got {amount!r}")
    if amount < 0:
        raise InvalidArgument(f"XP amount cannot be negative: {amount}")

    if state is None:
        state = XpState()

    new_state = state_for_total(state.total_xp_earned + amount)
    leveled_up = new_state.level > state.level

    if leveled_up:
        logger.info("Level up: %d -> %d", state.level, new_state.level)

    return XpAward(
        state=new_state,
        amount=amount,
        previous_level=state.level,
        leveled_up=leveled_up,
    )


def level_progress(state: XpState | None) -> LevelProgress:
    """
    Compute progress towards the next level.

    percent = floor((total - floor) / (ceiling - floor) * 100), clamped to
    [0, 100]. At the top tier there is no next level, so percent is 100
    and next_level_threshold is None.
    """
    if state is None:
        state = XpState()

    band = level_for_total(state.total_xp_earned)

    if band.max_xp is None:
        return LevelProgress(
            level=band.level,
            percent=100,
            current_level_floor=band.min_xp,
            next_level_threshold=None,
        )

    span = band.max_xp - band.min_xp
    percent = (state.total_xp_earned - band.min_xp) * 100 // span
    return LevelProgress(
        level=band.level,
        percent=max(0, min(100, percent)),
        current_level_floor=band.min_xp,
        next_level_threshold=band.max_xp,
    )
