class MessagingError(Exception):
    """Base class for errors raised by the messaging subsystem."""


class ValidationError(MessagingError):
    """A required field is missing or malformed. Never retried."""


class NotFoundError(MessagingError):
    """A referenced user or listing does not exist.

    Writes tolerate dangling references, so this is only raised by lookups
    that explicitly require the entity.
    """


class StoreError(MessagingError):
    """The database rejected the read or write. The client may resubmit."""
