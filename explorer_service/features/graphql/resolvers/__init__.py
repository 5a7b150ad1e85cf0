"""GraphQL resolvers."""

from explorer_service.features.graphql.resolvers.queries import Query

__all__ = ["Query"]
