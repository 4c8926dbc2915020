"""Gamification error taxonomy."""

from __future__ import annotations


class GamificationError(Exception):
    """Base class for gamification failures."""


class NotFoundError(GamificationError):
    """The referenced user has no gamification record."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"No gamification record for user {user_id!r}")
        self.user_id = user_id


class PersistenceFailure(GamificationError):
    """The storage layer rejected a read or write. The unit of work was rolled back."""


class EvaluationFailure(GamificationError):
    """A badge criteria check raised. Logged and swallowed by the evaluator."""

    def __init__(self, badge_id: str, cause: BaseException) -> None:
        super().__init__(f"Criteria check for badge {badge_id!r} failed: {cause}")
        self.badge_id = badge_id
        self.cause = cause
