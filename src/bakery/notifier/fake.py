"""Fake notifier — records notify calls for testing."""

from bakery.notifier.port import Notifier


class FakeNotifier(Notifier):
    """Notifier that records calls in memory for test assertions."""

    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake notifier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def notify(self, user_id: str, event: str, payload: dict) -> None:
        if not self.should_succeed:
            raise RuntimeError(self.failure_reason)
        self.sent.append({"user_id": user_id, "event": event, "payload": payload})

    def events_for(self, user_id: str) -> list[str]:
        return [record["event"] for record in self.sent if record["user_id"] == str(user_id)]

    def reset(self):
        self.sent.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
