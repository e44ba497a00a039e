"""Caller-facing errors raised by the bakery workflow.

All of these are recoverable: they describe why a request was refused and
carry enough context (current state, attempted state, ids) for the caller
to render a message. Storage failures are not wrapped and propagate as-is.
"""


class BakeryError(Exception):
    """Base class for workflow errors.

    ``context`` holds structured details that the API layer echoes back.
    """

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = {key: value for key, value in context.items() if value is not None}

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message, **self.context}


class Unauthorized(BakeryError):
    """The actor's role or relationship to the resource does not allow the action."""

    def __init__(self, message: str, actor_id=None, action=None, **context):
        super().__init__(message, actor_id=actor_id, action=action, **context)


class InvalidTransition(BakeryError):
    """The requested status change is not legal from the current status."""

    def __init__(self, current_status, target_status, message: str | None = None, **context):
        message = message or f"Cannot transition from {current_status} to {target_status}"
        super().__init__(message, current_status=current_status, target_status=target_status, **context)
        self.current_status = current_status
        self.target_status = target_status


class AssignmentPrecondition(BakeryError):
    """An assignment would break the baker hierarchy (e.g. junior without main)."""


class DuplicatePendingApplication(BakeryError):
    """The user already has an application waiting for a decision."""


class AlreadyDecided(BakeryError):
    """The application was approved or rejected before this decision arrived."""


class NotFound(BakeryError):
    """No record exists for the given identifier."""

    def __init__(self, entity: str, identifier, message: str | None = None):
        super().__init__(message or f"{entity} {identifier} not found", entity=entity, id=str(identifier))
        self.entity = entity
        self.identifier = identifier


class TransitionFailed(BakeryError):
    """A compound mutation could not be committed as a whole.

    Nothing was applied; the caller should retry the entire operation.
    """

    retryable = True


class PromotionNotEligible(BakeryError):
    """The applicant has not completed enough orders to request promotion."""


class StaleRoleSnapshot(BakeryError):
    """The role the applicant believes they hold differs from the stored role."""
