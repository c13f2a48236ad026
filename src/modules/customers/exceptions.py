"""Customer domain exceptions, translated to HTTP responses by the views."""

from __future__ import annotations


class CustomerAlreadyExists(Exception):
    """Another customer already uses this e-mail address."""


class CustomerNotFound(Exception):
    """The requested customer does not exist or has been soft-deleted."""
