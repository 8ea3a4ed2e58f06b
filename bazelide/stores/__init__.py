"""Persistent stores for generated editor configuration."""

from .document import DocumentError, JsonDocumentStore

__all__ = ["DocumentError", "JsonDocumentStore"]
