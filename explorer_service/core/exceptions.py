"""Exceptions raised by the explorer's query layer.

Four failure classes reach the API:

- ``NotFoundException``: no row for the requested key.
- ``InvalidArgumentException``: malformed hash or conflicting page arguments.
- ``InvalidCursorException``: a cursor that does not decode to a sort key.
- ``InternalServerException``: storage failures and broken query invariants.

``code`` is what ends up in a GraphQL error's ``extensions.code``; ``detail``
is the client-visible message. The RFC 7807 fields (``type``, ``title``,
``status_code``) keep the same exceptions usable from REST handlers.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

INTERNAL_ERROR_MESSAGE = "Something is wrong."


class AppException(Exception):
    """Base for every exception the explorer raises on purpose.

    Args:
        status_code: HTTP status a REST handler would answer with.
        detail: Message shown to API clients.
        type: Problem type slug, e.g. ``"transaction-not-found"``.
        title: Short summary; defaults to the HTTP reason phrase.
        extra: Structured context for logs (hashes, indexes, ...).
    """

    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or HTTPStatus(status_code).phrase
        self.extra = extra or {}


class NotFoundException(AppException):
    """No entity matches the key.

    ``detail`` is part of the public contract, e.g. ``"Address not found."``
    or ``"Block number 12 was not found."``.
    """

    code = "NOT_FOUND"

    def __init__(self, detail: str, type: str = "not-found", extra: dict[str, Any] | None = None) -> None:
        super().__init__(HTTPStatus.NOT_FOUND, detail, type=type, extra=extra)


class InvalidArgumentException(AppException):
    code = "VALIDATION_ERROR"

    def __init__(
        self, detail: str, type: str = "invalid-argument", extra: dict[str, Any] | None = None
    ) -> None:
        super().__init__(HTTPStatus.BAD_REQUEST, detail, type=type, extra=extra)


class InvalidCursorException(InvalidArgumentException):
    """``after``/``before`` was not produced by this server (or was tampered with)."""

    code = "INVALID_CURSOR"

    def __init__(self, detail: str = "Invalid cursor.", extra: dict[str, Any] | None = None) -> None:
        super().__init__(detail, type="invalid-cursor", extra=extra)


class InternalServerException(AppException):
    """Storage failure or a query that broke its own invariant.

    Chain the cause with ``raise ... from exc``; clients only ever see
    ``INTERNAL_ERROR_MESSAGE``.
    """

    code = "INTERNAL_ERROR"

    def __init__(
        self,
        detail: str = INTERNAL_ERROR_MESSAGE,
        type: str = "internal-error",
        extra: dict[str, Any] | None = None,
        *,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(status_code, detail, type=type, extra=extra)


__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "AppException",
    "InternalServerException",
    "InvalidArgumentException",
    "InvalidCursorException",
    "NotFoundException",
]
