"""Push formatted notifications and gamification broadcasts over Redis pub/sub."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from joinup.db.models import Notification

logger = logging.getLogger(__name__)


async def push_notification_to_user(redis: object | None, notification: "Notification") -> None:
    """Publish a formatted notification dict to ws:user:{user_id}.

    The notification must already be flushed (have an ``id``). Subscribers
    route the message to the user's open client connections.
    """
    if redis is None:
        return

    ws_payload = {
        "event": "notification",
        "data": {
            "id": str(notification.id),
            "type": notification.type,
            "subtype": notification.subtype,
            "title": notification.title,
            "message": notification.message,
            "timestamp": (
                notification.created_at.isoformat()
                if notification.created_at
                else None
            ),
            "read": False,
            "actionUrl": notification.action_url,
        },
    }
    try:
        await redis.publish(  # type: ignore[union-attr]
            f"ws:user:{notification.user_id}",
            json.dumps(ws_payload),
        )
    except Exception:
        logger.warning(
            "Failed to push notification via ws:user:%s",
            notification.user_id,
            exc_info=True,
        )


async def publish_event(redis: object | None, channel: str, payload: dict[str, Any]) -> None:
    """Broadcast a raw gamification event for activity feeds and overlays."""
    if redis is None:
        return
    try:
        await redis.publish(channel, json.dumps(payload))  # type: ignore[union-attr]
    except Exception:
        logger.warning("Failed to publish %s broadcast", channel, exc_info=True)
