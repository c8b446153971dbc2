"""Domain errors shared by loading, lookup and resolution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class UnstableDocError(Exception):
    """Base class for fatal documentation-corpus errors."""


@dataclass(slots=True)
class DocumentationSetError(UnstableDocError):
    """A documentation-set file could not be read or does not match the schema."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


class PathLookupError(UnstableDocError):
    """An identifier did not map to exactly one paths-table entry."""

    def __init__(self, item_id: str, matches: int) -> None:
        self.item_id = item_id
        self.matches = matches
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"Expected exactly one path entry for id {self.item_id!r}, found {self.matches}"


class MissingPathError(PathLookupError):
    def __init__(self, item_id: str) -> None:
        super().__init__(item_id, 0)

    def _describe(self) -> str:
        return f"No documentation set has a path entry for id {self.item_id!r}"


class AmbiguousPathError(PathLookupError):
    def _describe(self) -> str:
        return f"Id {self.item_id!r} has path entries in {self.matches} documentation sets"


class UnknownFeatureError(UnstableDocError):
    """No declaration in the corpus is gated by the requested feature."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"No unstable declarations found for feature {feature!r}")


class UnresolvedDeclarationError(UnstableDocError):
    """An ancestor path prefix resolved to no declaration in any set."""

    def __init__(self, prefix: list[str]) -> None:
        self.prefix = list(prefix)
        super().__init__(f"No declaration found for path {'::'.join(prefix)!r}")
