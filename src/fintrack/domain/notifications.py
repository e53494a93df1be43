"""Notification delivery interface.

Delivery itself (push, local device notification, terminal output) is an
external concern; the domain only hands over ``Notification`` events.
"""

import logging
from abc import ABC, abstractmethod

from fintrack.domain.entities import Notification

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Abstract notification sink."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver a notification immediately."""
        pass


class CollectingNotifier(Notifier):
    """Keeps delivered notifications in memory."""

    def __init__(self):
        self.sent: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.sent.append(notification)


class LoggingNotifier(Notifier):
    """Writes notifications to the application log."""

    def notify(self, notification: Notification) -> None:
        logger.info("%s: %s", notification.title, notification.body)
