"""Notifier port — abstract interface for the notify hook."""

from abc import ABC, abstractmethod


class Notifier(ABC):
    """Delivers a notification about a workflow event to one user."""

    @abstractmethod
    def notify(self, user_id: str, event: str, payload: dict) -> None:
        """Deliver the notification.

        Args:
            user_id: Recipient.
            event: Event key, e.g. "order_assigned" or "application_approved".
            payload: Event details (order_id, status, role, ...).

        Raises on failure; callers decide whether that matters.
        """
        ...
