"""Read-only GraphQL query layer over persisted ledger data."""

__version__ = "0.1.0"
