"""Indexed chain data: models, query descriptors and repositories."""
