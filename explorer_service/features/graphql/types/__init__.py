"""Strawberry GraphQL types."""
