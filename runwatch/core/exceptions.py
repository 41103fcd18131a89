"""Error taxonomy shared by the core and its adapters.

Adapters translate library-specific failures (httpx errors, malformed
JSON, Discord HTTP errors) into these types so the core can decide
how to recover without knowing which backend raised.
"""


class RunwatchError(Exception):
    """Base class for all runwatch errors."""


class TransientFetchError(RunwatchError):
    """A data source call failed (network, HTTP status, or bad payload).

    Always recovered by skipping the entity for the current sweep.
    """


class EntityNotFoundError(RunwatchError):
    """The entity named in a registration request does not exist."""


class SinkError(RunwatchError):
    """Posting or deleting a notification failed."""


class MessageAlreadyGoneError(SinkError):
    """The message to delete no longer exists."""
