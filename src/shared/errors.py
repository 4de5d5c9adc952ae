"""Error taxonomy shared by the rankings and forum contexts.

Every error extends one of Protean's exceptions, so code that already handles
``ObjectNotFoundError`` / ``ValidationError`` / ``InvalidOperationError`` keeps
working. Messages use Protean's ``{field: [message, ...]}`` shape.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class NotFound(ObjectNotFoundError):
    """Unknown item, review, thread or category. Never treated as zero."""


class InvalidInput(ValidationError):
    """Input rejected before any state was touched."""


class ThreadLocked(InvalidOperationError):
    """A post was submitted to a locked thread."""


class Conflict(InvalidOperationError):
    """Persistence detected a concurrent structural change.

    Retried once with a fresh read by the store; surfaced if it recurs.
    """
