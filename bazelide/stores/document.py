"""Read-transform-write helper for editor configuration documents."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable, Dict, Mapping


class DocumentError(RuntimeError):
    """Raised when an existing document cannot be read or is not a JSON object."""


Transform = Callable[[Dict[str, Any]], bool]


class JsonDocumentStore:
    """Stores one JSON document on disk.

    All updates go through ``merge``; the read-transform-write is not locked.
    """

    def __init__(self, path: Path, *, indent: int = 4) -> None:
        self.path = path
        self.indent = indent

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, default: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return copy.deepcopy(dict(default))
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentError(f"Cannot read {self.path}: {exc}") from exc
        if not text.strip():
            return copy.deepcopy(dict(default))
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentError(f"{self.path.name} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise DocumentError(f"{self.path.name} must contain a JSON object")
        return data

    def write(self, document: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.render(document), encoding="utf-8")

    def render(self, document: Mapping[str, Any]) -> str:
        return json.dumps(document, indent=self.indent) + "\n"

    def merge(self, transform: Transform, *, default: Mapping[str, Any]) -> bool:
        """Load, apply ``transform`` in place and persist.

        The transform returns False to abandon the write; the file is then
        left exactly as it was.
        """
        document = self.load(default)
        if not transform(document):
            return False
        self.write(document)
        return True


__all__ = ["DocumentError", "JsonDocumentStore"]
