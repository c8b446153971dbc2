"""Canonical data structures for one rustdoc JSON documentation set."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class Declaration:
    """A single API item from a documentation set index."""

    id: str
    name: str | None = None
    attrs: list[str] = field(default_factory=list)
    crate_id: int | None = None
    docs: str | None = None
    visibility: Any = None
    deprecation: Any = None
    span: Any = None
    links: dict[str, Any] = field(default_factory=dict)
    inner: Any = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "crate_id": self.crate_id,
            "name": self.name,
            "span": self.span,
            "visibility": self.visibility,
            "docs": self.docs,
            "links": self.links,
            "attrs": list(self.attrs),
            "deprecation": self.deprecation,
            "inner": self.inner,
        }


@dataclass(slots=True)
class PathEntry:
    """Fully-qualified path of an item, as listed in the paths table."""

    path: list[str]
    kind: str | None = None
    crate_id: int | None = None


@dataclass(slots=True)
class DocumentationSet:
    """One deserialized documentation snapshot of a compiled library."""

    source_path: Path
    index: dict[str, Declaration] = field(default_factory=dict)
    paths: dict[str, PathEntry] = field(default_factory=dict)
    root: str | None = None
    crate_version: str | None = None
    format_version: int | None = None

    @property
    def crate_name(self) -> str | None:
        if self.root is None:
            return None
        declaration = self.index.get(self.root)
        return declaration.name if declaration is not None else None

    def find_path(self, path: list[str]) -> str | None:
        """Return the first id whose full path equals ``path``."""

        for item_id, entry in self.paths.items():
            if entry.path == path:
                return item_id
        return None
