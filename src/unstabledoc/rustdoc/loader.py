"""Read rustdoc JSON files into canonical documentation sets."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from unstabledoc.errors import DocumentationSetError
from unstabledoc.rustdoc.models import Declaration, DocumentationSet, PathEntry

logger = logging.getLogger(__name__)

_SUPPORTED_SUFFIXES = {".json"}


def _is_supported(path: Path) -> bool:
    return path.suffix.lower() in _SUPPORTED_SUFFIXES and not path.name.startswith(".")


def collect_inputs(target: Path) -> list[Path]:
    """List documentation-set files directly inside ``target`` in name order."""

    if not target.is_dir():
        raise DocumentationSetError(target, "Documentation path is not a directory")

    try:
        children = sorted(target.iterdir(), key=lambda child: child.name)
    except OSError as exc:
        raise DocumentationSetError(target, f"Failed to list documentation directory: {exc}") from exc

    inputs: list[Path] = []
    for child in children:
        if child.is_file() and _is_supported(child):
            inputs.append(child)
        else:
            logger.debug("Skipping non-documentation entry %s", child)
    return inputs


def _read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise DocumentationSetError(path, f"Failed to open documentation file: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DocumentationSetError(path, f"Failed to parse JSON docs: {exc}") from exc


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None


def _string_list(path: Path, value: Any, *, what: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(part, str) for part in value):
        raise DocumentationSetError(path, f"{what} must be a list of strings")
    return list(value)


def _build_declaration(path: Path, item_id: str, record: Any) -> Declaration:
    if not isinstance(record, dict):
        raise DocumentationSetError(path, f"Index entry {item_id!r} is not an object")

    name = record.get("name")
    if name is not None and not isinstance(name, str):
        raise DocumentationSetError(path, f"Index entry {item_id!r} has a non-string name")

    docs = record.get("docs")
    links = record.get("links") or {}
    return Declaration(
        id=item_id,
        name=name,
        attrs=_string_list(path, record.get("attrs", []), what=f"attrs of {item_id!r}"),
        crate_id=_optional_int(record.get("crate_id")),
        docs=docs if isinstance(docs, str) else None,
        visibility=record.get("visibility"),
        deprecation=record.get("deprecation"),
        span=record.get("span"),
        links=links if isinstance(links, dict) else {},
        inner=record.get("inner"),
        raw=record,
    )


def _build_path_entry(path: Path, item_id: str, record: Any) -> PathEntry:
    if not isinstance(record, dict):
        raise DocumentationSetError(path, f"Paths entry {item_id!r} is not an object")

    kind = record.get("kind")
    return PathEntry(
        path=_string_list(path, record.get("path"), what=f"path of {item_id!r}"),
        kind=kind if isinstance(kind, str) else None,
        crate_id=_optional_int(record.get("crate_id")),
    )


def load_documentation_set(path: str | Path) -> DocumentationSet:
    """Deserialize one rustdoc JSON file; any schema mismatch is fatal."""

    source = Path(path)
    payload = _read_json(source)
    if not isinstance(payload, dict):
        raise DocumentationSetError(source, "Documentation set is not a JSON object")

    raw_index = payload.get("index")
    raw_paths = payload.get("paths")
    if not isinstance(raw_index, dict):
        raise DocumentationSetError(source, "Documentation set has no 'index' object")
    if not isinstance(raw_paths, dict):
        raise DocumentationSetError(source, "Documentation set has no 'paths' object")

    index = {str(key): _build_declaration(source, str(key), value) for key, value in raw_index.items()}
    paths = {str(key): _build_path_entry(source, str(key), value) for key, value in raw_paths.items()}

    root = payload.get("root")
    crate_version = payload.get("crate_version")
    return DocumentationSet(
        source_path=source,
        index=index,
        paths=paths,
        root=str(root) if root is not None else None,
        crate_version=crate_version if isinstance(crate_version, str) else None,
        format_version=_optional_int(payload.get("format_version")),
    )
