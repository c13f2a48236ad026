"""Product domain exceptions, translated to HTTP responses by the views."""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""
