"""
Elastical Errors — Exception Hierarchy
======================================

Errors raised by the client. Network failures are not wrapped: they surface
as the ``elastic_transport`` exceptions raised by the transport
(``ConnectionError``, ``ConnectionTimeout``, ``TlsError``), all subclasses of
``TransportError``.
"""

from typing import Any, Optional

from elastic_transport import ConnectionError, ConnectionTimeout, TransportError

__all__ = [
    "ConnectionError",
    "ConnectionTimeout",
    "ElasticalError",
    "HttpError",
    "InvalidOptionError",
    "NotFoundError",
    "PartialFailureError",
    "TransportError",
]


class ElasticalError(Exception):
    """Base exception for the project."""


class HttpError(ElasticalError):
    """
    Raised when the server answers with a status outside 200-299.

    Attributes:
        status: HTTP status code
        body: Parsed response body (dict, or text when it was not JSON)
        response: The classified Response
    """

    def __init__(self, status: int, body: Any = None, response: Optional[Any] = None):
        self.status = status
        self.body = {} if body is None else body
        self.response = response
        super().__init__(error_message(status, self.body))


class NotFoundError(HttpError):
    """Raised for 404 responses."""


class PartialFailureError(ElasticalError):
    """Raised when a successful response reports failed shards."""

    def __init__(self, reason: str, body: Any = None):
        self.reason = reason
        self.body = body
        super().__init__(reason)


class InvalidOptionError(ValueError, ElasticalError):
    """Raised when options cannot be shaped into a request."""


def error_message(status: int, body: Any) -> str:
    """Pick the server's ``error`` field, falling back to "HTTP <status>"."""
    if isinstance(body, dict) and body.get("error"):
        error = body["error"]
        if isinstance(error, dict):
            return str(error.get("reason") or error.get("type") or error)
        return str(error)
    return "HTTP %d" % status


def is_missing(status: int, body: Any) -> bool:
    """
    Check whether a failed response means "index, type or document not found".

    Args:
        status: HTTP status code
        body: Parsed response body

    Returns:
        True for 404s and for bodies reporting ``exists``/``found`` false or an
        IndexMissing error
    """
    if status == 404:
        return True
    if not isinstance(body, dict):
        return False
    if body.get("exists") is False or body.get("found") is False:
        return True
    return "IndexMissing" in str(body.get("error", ""))
