"""Exceptions raised by domainsmith."""


class InvalidRequestError(ValueError):
    """Search request failed validation (empty query, bad limit, malformed TLD)."""
