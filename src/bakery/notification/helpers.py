"""The notify hook as event handlers see it.

``notify`` is fire-and-forget: the change that triggered it is already
committed, so a failing notifier is logged and never re-raised.
"""

import structlog

from bakery.notifier import get_notifier

logger = structlog.get_logger(__name__)


def notify(user_id, event: str, payload: dict) -> bool:
    """Hand one notification to the configured notifier. Returns success."""
    if not user_id:
        return False
    try:
        get_notifier().notify(str(user_id), event, payload)
    except Exception as exc:
        logger.warning(
            "Notification failed",
            user_id=str(user_id),
            notification_event=event,
            error=str(exc),
        )
        return False
    return True
