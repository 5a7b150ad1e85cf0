"""Settings for the ``/graphql`` endpoint (``GRAPHQL_*``)."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GraphQLIDE = Literal["graphiql", "apollo-sandbox", "pathfinder", False]


class GraphQLSettings(BaseSettings):
    """Mount point, in-browser IDE and validation limits of the explorer API.

    Depth limiting matters here because chain types nest
    (transaction -> internal transactions), and public explorers are
    usually deployed with introspection turned off.
    """

    enabled: bool = True
    path: str = Field(default="/graphql", pattern=r"^/[\w\-/]*$", max_length=255)
    graphql_ide: GraphQLIDE = Field(default="graphiql", description="false serves no IDE on GET")
    max_query_depth: int = Field(default=10, ge=1, le=50)
    introspection_enabled: bool = True

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
