"""Fetch failure types raised by the daemon client."""

from __future__ import annotations


class FetchError(Exception):
    """Base exception for anything that stops a fetch from producing data."""

    kind = "transport"


class TransportError(FetchError):
    """The daemon could not be reached or answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(FetchError):
    """The daemon answered, but the body is not the JSON shape we expect."""

    kind = "malformed"


class ReviewNotFound(FetchError):
    """No review is stored for the requested job (HTTP 404)."""

    kind = "not_found"

    def __init__(self, job_id: int):
        super().__init__("no review found")
        self.job_id = job_id
