"""GraphQL schema assembly.

Builds the read-only schema from the root ``Query`` type and installs the
extensions configured by ``GraphQLSettings``:

- ``QueryDepthLimiter`` bounds nesting (address -> transactions -> internal
  transactions is the deepest legitimate path)
- ``ErrorCodeExtension`` adds ``extensions.code`` to every error
- ``InternalErrorMask`` hides internal failures in production
- introspection is disabled when ``GRAPHQL_INTROSPECTION_ENABLED=false``
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graphql.validation import NoSchemaIntrospectionCustomRule
import strawberry
from strawberry.extensions import AddValidationRules, QueryDepthLimiter

from explorer_service.core.exceptions import INTERNAL_ERROR_MESSAGE
from explorer_service.core.settings import get_app_settings, get_graphql_settings
from explorer_service.features.graphql.error_handler import (
    ErrorCodeExtension,
    InternalErrorMask,
    log_error,
    should_mask_error,
)
from explorer_service.features.graphql.resolvers import Query

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.extensions import SchemaExtension
    from strawberry.types import ExecutionContext

    from explorer_service.core.settings.app import AppSettings
    from explorer_service.core.settings.graphql import GraphQLSettings

logger = logging.getLogger(__name__)


class ExplorerSchema(strawberry.Schema):
    """Schema that logs every error with its code before it is returned."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            log_error(error, execution_context)


def get_extensions(
    graphql_settings: GraphQLSettings,
    app_settings: AppSettings,
) -> list[SchemaExtension | type[SchemaExtension]]:
    """Extensions for the schema, in execution order."""
    extensions: list[SchemaExtension | type[SchemaExtension]] = [
        QueryDepthLimiter(max_depth=graphql_settings.max_query_depth),
        ErrorCodeExtension,
    ]
    if app_settings.is_production:
        extensions.append(
            InternalErrorMask(should_mask_error=should_mask_error, error_message=INTERNAL_ERROR_MESSAGE)
        )
    if not graphql_settings.introspection_enabled:
        extensions.append(AddValidationRules([NoSchemaIntrospectionCustomRule]))

    logger.debug(
        "GraphQL extensions configured",
        extra={
            "max_query_depth": graphql_settings.max_query_depth,
            "mask_errors": app_settings.is_production,
            "introspection_enabled": graphql_settings.introspection_enabled,
        },
    )
    return extensions


def create_schema(
    graphql_settings: GraphQLSettings | None = None,
    app_settings: AppSettings | None = None,
) -> ExplorerSchema:
    """Build the schema; settings default to the cached environment settings."""
    return ExplorerSchema(
        query=Query,
        extensions=get_extensions(
            graphql_settings or get_graphql_settings(),
            app_settings or get_app_settings(),
        ),
    )


schema = create_schema()

__all__ = ["ExplorerSchema", "create_schema", "get_extensions", "schema"]
