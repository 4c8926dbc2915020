"""Notification creation and listing.

Notifications are:
1. Persisted in the database inside the caller's transaction
2. Pushed to the user via Redis pub/sub once that transaction commits

Gamification notifications all carry ``type="achievement"``; the subtype
distinguishes level-ups from badges.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from joinup.db.models import Notification

logger = logging.getLogger(__name__)

VALID_TYPES = {"info", "success", "warning", "error", "achievement"}


async def create_notification(
    db: AsyncSession,
    user_id: str,
    subtype: str,
    title: str,
    message: str,
    type_: str = "achievement",
    action_url: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> Notification:
    """Persist a notification and flush so it has an id for the push payload."""
    if type_ not in VALID_TYPES:
        msg = f"Invalid notification type: {type_}"
        raise ValueError(msg)

    notification = Notification(
        user_id=user_id,
        type=type_,
        subtype=subtype,
        title=title,
        message=message,
        action_url=action_url,
        is_read=False,
        notification_metadata=metadata or {},
        created_at=datetime.now(timezone.utc),
    )
    db.add(notification)
    await db.flush()
    return notification


async def get_notifications(
    db: AsyncSession,
    user_id: str,
    unread_only: bool = False,
    limit: int = 20,
) -> list[Notification]:
    """Newest-first notifications for a user."""
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.is_read.is_(False))
    result = await db.execute(
        query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def get_unread_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
    )
    return result.scalar_one()
