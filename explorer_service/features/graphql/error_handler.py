"""GraphQL error classification, codes and production masking.

Resolvers let ``AppException`` subclasses propagate. GraphQL-core wraps them
in ``GraphQLError`` with the exception detail as message; the
``ErrorCodeExtension`` then copies the exception's code into
``extensions.code``. In production, ``InternalErrorMask`` replaces every error that
is not user-facing with the generic ``"Something is wrong."`` message.

Usage:
    # In schema.py:
    schema = ExplorerSchema(
        query=Query,
        extensions=[
            ErrorCodeExtension,
            InternalErrorMask(should_mask_error=should_mask_error, error_message=...),
        ],
    )
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError
from strawberry.extensions import MaskErrors, SchemaExtension

from explorer_service.core.exceptions import AppException

if TYPE_CHECKING:
    from collections.abc import Iterator

    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)

__all__ = [
    "ErrorCategory",
    "ErrorCodeExtension",
    "InternalErrorMask",
    "error_code",
    "is_user_facing_error",
    "log_error",
    "should_mask_error",
]


class ErrorCategory:
    """Error codes placed in ``extensions.code``."""

    VALIDATION = "VALIDATION_ERROR"
    INVALID_CURSOR = "INVALID_CURSOR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL_ERROR"


USER_FACING_CODES = frozenset(
    {ErrorCategory.VALIDATION, ErrorCategory.INVALID_CURSOR, ErrorCategory.NOT_FOUND}
)


def error_code(error: GraphQLError) -> str:
    """Stable code for an error.

    Errors raised by GraphQL-core itself (syntax, validation, coercion) carry
    no application exception and are classified as validation errors.
    """
    original = error.original_error
    if isinstance(original, AppException):
        return original.code
    if original is None:
        return ErrorCategory.VALIDATION
    return ErrorCategory.INTERNAL


def is_user_facing_error(error: GraphQLError) -> bool:
    """Whether the error message is safe to show to API clients as-is."""
    return error_code(error) in USER_FACING_CODES


def should_mask_error(error: GraphQLError) -> bool:
    return not is_user_facing_error(error)


def log_error(error: GraphQLError, execution_context: ExecutionContext | None = None) -> None:
    """Log error with full details for server-side debugging."""
    log_context: dict[str, Any] = {
        "error_message": error.message,
        "error_code": error_code(error),
        "error_path": error.path,
    }

    if execution_context is not None and execution_context.operation_name:
        log_context["operation_name"] = execution_context.operation_name

    original = error.original_error
    if original is not None:
        log_context["exception_type"] = type(original).__name__
        if not is_user_facing_error(error):
            log_context["stack_trace"] = "".join(
                traceback.format_exception(type(original), original, original.__traceback__)
            )

    if is_user_facing_error(error):
        logger.info("GraphQL user-facing error", extra=log_context)
    else:
        logger.error("GraphQL internal error", extra=log_context)


class ErrorCodeExtension(SchemaExtension):
    """Attach ``extensions.code`` to every error in the result."""

    def on_operation(self) -> Iterator[None]:
        yield
        errors = getattr(self.execution_context.result, "errors", None)
        for error in errors or ():
            extensions = error.extensions or {}
            if "code" not in extensions:
                error.extensions = {**extensions, "code": error_code(error)}


class InternalErrorMask(MaskErrors):
    """``MaskErrors`` that keeps the ``INTERNAL_ERROR`` code on masked errors."""

    def anonymise_error(self, error: GraphQLError) -> GraphQLError:
        return GraphQLError(
            self.error_message,
            nodes=error.nodes,
            source=error.source,
            positions=error.positions,
            path=error.path,
            extensions={"code": ErrorCategory.INTERNAL},
        )
