"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from bakery.domain import bakery


@bakery.event(part_of="User")
class UserRegistered:
    """A new account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    username: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@bakery.event(part_of="User")
class UserRoleChanged:
    """A user's role changed as the result of an approved baker application."""

    __version__ = 1

    user_id: Identifier(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)
    application_id: Identifier(required=True)
    changed_at: DateTime(required=True)
