"""Compose stack models, state diffing, preparation, validation, table output and subresource helpers."""

__version__ = "0.1.0"