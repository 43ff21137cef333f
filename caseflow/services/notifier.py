"""
Notification module

Lifecycle notifications are fire-and-forget: a failed delivery is logged and
never undoes the transition that triggered it.
"""
from typing import Dict, Any, Optional
import requests
from config.settings import settings
from caseflow.utils.constants import NotificationEvent
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)


class Notifier:
    """Posts lifecycle events to the notification service"""

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None):
        self.webhook_url = webhook_url if webhook_url is not None else settings.notification_webhook_url
        self.timeout = timeout or settings.notification_timeout_seconds

    def send(self, event: str, payload: Dict[str, Any]) -> bool:
        """
        Deliver a notification

        Args:
            event: event name
            payload: event data

        Returns:
            True when delivered
        """
        if not self.webhook_url:
            logger.info(f"Notification {event} (no webhook configured): {payload.get('case_number')}")
            return False

        try:
            response = requests.post(
                self.webhook_url,
                json={"event": event, "data": payload},
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.info(f"Notification {event} delivered for {payload.get('case_number')}")
            return True
        except requests.RequestException as e:
            logger.error(f"Notification {event} failed: {str(e)}")
            return False

    def case_filed(self, payload: Dict[str, Any]) -> bool:
        return self.send(NotificationEvent.CASE_FILED.value, payload)

    def document_requested(self, payload: Dict[str, Any]) -> bool:
        return self.send(NotificationEvent.DOCUMENT_REQUESTED.value, payload)


# Global notifier instance
notifier = Notifier()
