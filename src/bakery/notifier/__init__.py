"""Notifier registry — the outbound notify hook.

Provides singleton access to the notifier. The in-app notifier is used by
default; tests swap in ``FakeNotifier`` through ``set_notifier``.
"""

from bakery.notifier.port import Notifier

_notifier: Notifier | None = None


def get_notifier() -> Notifier:
    """Return the configured notifier, creating the in-app one on first use."""
    global _notifier
    if _notifier is None:
        from bakery.notifier.in_app import InAppNotifier

        _notifier = InAppNotifier()
    return _notifier


def set_notifier(notifier: Notifier) -> None:
    global _notifier
    _notifier = notifier


def reset_notifier():
    """Reset the notifier singleton (useful for testing)."""
    global _notifier
    _notifier = None
