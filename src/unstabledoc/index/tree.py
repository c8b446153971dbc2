"""Ancestor-chain reconstruction and declaration lookup across documentation sets."""

from __future__ import annotations

import logging
from typing import Sequence

from unstabledoc.errors import (
    AmbiguousPathError,
    MissingPathError,
    UnknownFeatureError,
    UnresolvedDeclarationError,
)
from unstabledoc.index.metadata import FeatureIndex
from unstabledoc.rustdoc.models import Declaration, DocumentationSet, PathEntry

logger = logging.getLogger(__name__)


def find_path(sets: Sequence[DocumentationSet], item_id: str) -> PathEntry:
    """Return the single paths-table entry for ``item_id``.

    Raises :class:`MissingPathError` when no set lists the id and
    :class:`AmbiguousPathError` when more than one does.
    """

    matches = [entry for documentation_set in sets if (entry := documentation_set.paths.get(item_id)) is not None]
    if not matches:
        raise MissingPathError(item_id)
    if len(matches) > 1:
        raise AmbiguousPathError(item_id, len(matches))
    return matches[0]


def path_for_id(sets: Sequence[DocumentationSet], item_id: str) -> list[str]:
    """Return the first known path of ``item_id``, or an empty list."""

    for documentation_set in sets:
        entry = documentation_set.paths.get(item_id)
        if entry is not None:
            return list(entry.path)
    return []


def ancestor_chain(sets: Sequence[DocumentationSet], item_id: str) -> list[list[str]]:
    """Resolve every prefix of an item's path to the ids declaring it.

    Level ``n`` of the result holds the ids, one per documentation set that
    has one, whose full path equals the first ``n + 1`` segments of the
    item's path. The last level therefore contains the item itself.
    """

    return _prefix_levels(sets, find_path(sets, item_id).path)


def _prefix_levels(sets: Sequence[DocumentationSet], path: list[str]) -> list[list[str]]:
    chain: list[list[str]] = []
    for length in range(1, len(path) + 1):
        prefix = path[:length]
        level: list[str] = []
        for documentation_set in sets:
            found = documentation_set.find_path(prefix)
            if found is not None:
                level.append(found)
        chain.append(level)
    return chain


def get_declaration(sets: Sequence[DocumentationSet], item_id: str) -> Declaration | None:
    for documentation_set in sets:
        declaration = documentation_set.index.get(item_id)
        if declaration is not None:
            return declaration
    return None


def resolve_feature_chain(
    sets: Sequence[DocumentationSet],
    features: FeatureIndex,
    feature: str,
    *,
    all_matches: bool = False,
) -> list[Declaration] | list[list[Declaration]]:
    """Return the declarations from the outermost module down to a feature's item.

    The first item recorded for ``feature`` is expanded. With ``all_matches``
    every resolvable declaration of each level is kept; otherwise only the
    first one per level.
    """

    item_ids = features.get(feature) or []
    if not item_ids:
        raise UnknownFeatureError(feature)

    target = item_ids[0]
    prefix_path = find_path(sets, target).path
    levels = _prefix_levels(sets, prefix_path)
    logger.info("Feature %r resolves to %s (%d levels)", feature, "::".join(prefix_path), len(levels))

    resolved: list[list[Declaration]] = []
    for depth, level_ids in enumerate(levels, start=1):
        declarations = [
            declaration for level_id in level_ids if (declaration := get_declaration(sets, level_id)) is not None
        ]
        if not declarations:
            raise UnresolvedDeclarationError(prefix_path[:depth])
        resolved.append(declarations)

    if all_matches:
        return resolved
    return [declarations[0] for declarations in resolved]
