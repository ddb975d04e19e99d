"""Domain errors.

Only two kinds surface to the user: transport/HTTP failures and bad
credentials. Everything else is either swallowed (enrichment) or discarded
(corrupt stored session).
"""

from __future__ import annotations


class FetchError(Exception):
    """A catalog request failed (non-success status or network error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class AuthError(Exception):
    """Login rejected: the credential pair does not match."""
