"""Domain events for the BakerApplication aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from bakery.domain import bakery


@bakery.event(part_of="BakerApplication")
class BakerApplicationSubmitted:
    __version__ = 1

    application_id = Identifier(required=True)
    user_id = Identifier(required=True)
    current_role = String(required=True)
    requested_role = String(required=True)
    preferred_main_baker_id = Identifier()
    completed_orders = Integer(default=0)
    submitted_at = DateTime(required=True)


@bakery.event(part_of="BakerApplication")
class BakerApplicationApproved:
    """An admin approved the application; the applicant's role changes with it."""

    __version__ = 1

    application_id = Identifier(required=True)
    user_id = Identifier(required=True)
    requested_role = String(required=True)
    reviewed_by = Identifier(required=True)
    reviewed_at = DateTime(required=True)


@bakery.event(part_of="BakerApplication")
class BakerApplicationRejected:
    __version__ = 1

    application_id = Identifier(required=True)
    user_id = Identifier(required=True)
    requested_role = String(required=True)
    reviewed_by = Identifier(required=True)
    reviewed_at = DateTime(required=True)
