"""Repository lookups that report missing records as ``NotFound``."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bakery.exceptions import NotFound


def fetch(aggregate_cls, identifier):
    """Load an aggregate by id from the active domain's repository."""
    if identifier is None:
        raise NotFound(aggregate_cls.__name__, identifier)
    try:
        return current_domain.repository_for(aggregate_cls).get(str(identifier))
    except ObjectNotFoundError as exc:
        raise NotFound(aggregate_cls.__name__, identifier) from exc


def fetch_optional(aggregate_cls, identifier):
    """Like ``fetch`` but returns None when no id was given."""
    if identifier is None:
        return None
    return fetch(aggregate_cls, identifier)
