# notify.py
import logging

from plyer import notification

logger = logging.getLogger(__name__)


def notify(title: str, message: str, enabled: bool = True) -> bool:
    """Show a desktop notification. A missing backend is logged, never fatal."""
    if not enabled:
        return False
    try:
        notification.notify(title=title, message=message, app_name="worklog", timeout=10)
    except Exception as exc:  # plyer raises backend-specific errors
        logger.warning("Desktop notification failed: %s", exc)
        return False
    return True
