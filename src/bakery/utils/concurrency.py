"""Optimistic concurrency helpers.

Every aggregate carries a ``_version`` that the repository checks on save;
a stale copy raises ``ExpectedVersionError``. Callers may also pin the
version they read through ``expected_version`` on a command.
"""

from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError

from bakery.exceptions import TransitionFailed

logger = structlog.get_logger(__name__)


def check_expected_version(aggregate, expected_version):
    """Refuse to act on an aggregate that moved on since the caller read it."""
    if expected_version is None:
        return
    if aggregate._version != expected_version:
        raise TransitionFailed(
            f"{type(aggregate).__name__} {aggregate.id} was modified concurrently",
            expected_version=expected_version,
            actual_version=aggregate._version,
        )


@contextmanager
def conflicts_raise(error_factory):
    """Translate a stale-version write into the given workflow error."""
    try:
        yield
    except ExpectedVersionError as exc:
        logger.warning("Concurrent write rejected", reason=str(exc))
        raise error_factory() from exc
