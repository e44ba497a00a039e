from bakery.baker_application.baker_application import ApplicationStatus, BakerApplication
from bakery.domain import bakery


@bakery.repository(part_of=BakerApplication)
class BakerApplicationRepository:
    def for_user(self, user_id):
        applications = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(applications, key=lambda app: app.created_at, reverse=True)

    def pending_for_user(self, user_id):
        """The user's open application, or None."""
        pending = (
            self._dao.query.filter(
                user_id=str(user_id),
                status=ApplicationStatus.PENDING.value,
            )
            .all()
            .items
        )
        return pending[0] if pending else None

    def all_applications(self):
        return sorted(self._dao.query.all().items, key=lambda app: app.created_at, reverse=True)
