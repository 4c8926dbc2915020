"""Badge catalog: static definitions shipped with the service.

Changing a badge is a code change. Only badges with a ``predicate`` are
awarded automatically; the rest are listed for the UI but depend on data
this service does not track yet.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

RARITIES = ("common", "rare", "epic", "legendary")
CATEGORIES = ("participation", "achievement", "mastery", "elite")


@dataclass(frozen=True)
class BadgeStats:
    """Inputs to badge criteria, loaded fresh for each evaluation."""

    total_participations: int
    team_participations: int
    total_wins: int


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    description: str
    icon: str
    rarity: str
    category: str
    criteria: str
    color: str
    predicate: Callable[[BadgeStats], bool] | None = None

    @property
    def auto_awarded(self) -> bool:
        return self.predicate is not None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "rarity": self.rarity,
            "category": self.category,
            "criteria": self.criteria,
            "color": self.color,
            "auto_awarded": self.auto_awarded,
        }


BADGE_DEFINITIONS: list[BadgeDefinition] = [
    # Participation (common)
    BadgeDefinition(
        id="first-timer",
        name="First Timer",
        description="Complete first competition registration",
        icon="\U0001F31F",
        rarity="common",
        category="participation",
        criteria="Complete first competition registration",
        color="#28a745",
        predicate=lambda s: s.total_participations >= 1,
    ),
    BadgeDefinition(
        id="team-player",
        name="Team Player",
        description="Participate in 3+ team competitions",
        icon="\U0001F465",
        rarity="common",
        category="participation",
        criteria="Participate in 3+ team competitions",
        color="#17a2b8",
        predicate=lambda s: s.team_participations >= 3,
    ),
    BadgeDefinition(
        id="solo-warrior",
        name="Solo Warrior",
        description="Win a solo competition",
        icon="\U0001F5E1",
        rarity="common",
        category="participation",
        criteria="Win a solo competition",
        color="#dc3545",
    ),
    BadgeDefinition(
        id="consistent",
        name="Consistent",
        description="Participate in competitions for 3 consecutive months",
        icon="\U0001F4C5",
        rarity="common",
        category="participation",
        criteria="Participate in competitions for 3 consecutive months",
        color="#6f42c1",
    ),
    BadgeDefinition(
        id="early-bird",
        name="Early Bird",
        description="Register within first 24 hours of competition announcement",
        icon="\U0001F426",
        rarity="common",
        category="participation",
        criteria="Register within first 24 hours",
        color="#fd7e14",
    ),
    # Achievement (rare)
    BadgeDefinition(
        id="hat-trick",
        name="Hat Trick",
        description="Win 3 competitions in a row",
        icon="\U0001F3A9",
        rarity="rare",
        category="achievement",
        criteria="Win 3 competitions consecutively",
        color="#ffc107",
    ),
    BadgeDefinition(
        id="comeback-kid",
        name="Comeback Kid",
        description="Win after finishing last in previous competition",
        icon="\U0001F4AA",
        rarity="rare",
        category="achievement",
        criteria="Win after finishing last previously",
        color="#20c997",
    ),
    BadgeDefinition(
        id="mentor",
        name="Mentor",
        description="Help 5+ teams as a mentor",
        icon="\U0001F393",
        rarity="rare",
        category="achievement",
        criteria="Mentor 5+ teams",
        color="#6610f2",
    ),
    # Mastery (epic)
    BadgeDefinition(
        id="domain-expert",
        name="Domain Expert",
        description="Win 3+ competitions in same category",
        icon="\U0001F3C6",
        rarity="epic",
        category="mastery",
        criteria="Win 3+ competitions in same category",
        color="#e83e8c",
    ),
    BadgeDefinition(
        id="all-rounder",
        name="All-Rounder",
        description="Place top 3 in 3 different competition categories",
        icon="\U0001F3AF",
        rarity="epic",
        category="mastery",
        criteria="Top 3 in 3 different categories",
        color="#fd7e14",
    ),
    # Elite (legendary)
    BadgeDefinition(
        id="champion",
        name="Champion",
        description="Win 10+ competitions",
        icon="\U0001F451",
        rarity="legendary",
        category="elite",
        criteria="Win 10+ competitions",
        color="#ffd700",
        predicate=lambda s: s.total_wins >= 10,
    ),
    BadgeDefinition(
        id="legend",
        name="Legend",
        description="Maintain top 3 leaderboard position for 6+ months",
        icon="⚡",
        rarity="legendary",
        category="elite",
        criteria="Top 3 for 6+ months",
        color="#ff6b6b",
    ),
]

BADGES_BY_ID: dict[str, BadgeDefinition] = {b.id: b for b in BADGE_DEFINITIONS}


def get_badge(badge_id: str) -> BadgeDefinition | None:
    return BADGES_BY_ID.get(badge_id)
