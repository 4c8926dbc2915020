"""Side-effects queued during a unit of work and dispatched after commit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from joinup.db.models import Notification


@dataclass
class LevelUpEvent:
    user_id: str
    old_level: int
    new_level: int
    level_name: str
    total_points: int


@dataclass
class BadgeEarnedEvent:
    user_id: str
    badge_id: str
    badge_name: str
    rarity: str
    description: str


@dataclass
class EventBuffer:
    """Collects notifications and broadcast events for post-commit delivery.

    Nothing in here touches Redis or email; the engine drains the buffer once
    the transaction has committed so a rolled-back award never announces itself.
    """

    notifications: list[Notification] = field(default_factory=list)
    level_ups: list[LevelUpEvent] = field(default_factory=list)
    badges: list[BadgeEarnedEvent] = field(default_factory=list)

    def clear(self) -> None:
        self.notifications.clear()
        self.level_ups.clear()
        self.badges.clear()

    def summary(self) -> dict[str, Any]:
        return {
            "notifications": len(self.notifications),
            "level_ups": len(self.level_ups),
            "badges": len(self.badges),
        }
