"""Storefront-specific error kinds.

Protean's ``ValidationError``, ``InvalidOperationError`` and
``ObjectNotFoundError`` cover invalid requests and missing objects. The two
kinds below cover what the framework has no exception for. Both carry a
``messages`` dict shaped like ``ValidationError.messages`` so the HTTP layer
renders every kind the same way.
"""


class StorefrontError(Exception):
    """Base class for storefront errors carrying field-keyed messages."""

    def __init__(self, messages: dict):
        super().__init__(messages)
        self.messages = messages


class ConflictError(StorefrontError):
    """A uniqueness or concurrency conflict. The caller may retry."""


class ForbiddenError(StorefrontError):
    """The caller is known but not allowed to act on the resource."""
