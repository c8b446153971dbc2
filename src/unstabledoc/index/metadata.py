"""Batch loader building the feature -> declaration-id index over a docs directory."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import time
from typing import Iterator

from unstabledoc.attributes.parser import parse_unstable_feature
from unstabledoc.rustdoc.loader import collect_inputs, load_documentation_set
from unstabledoc.rustdoc.models import DocumentationSet

logger = logging.getLogger(__name__)

FeatureIndex = dict[str, list[str]]


@dataclass(slots=True)
class LoadStats:
    files: int = 0
    declarations: int = 0
    named: int = 0
    marked: int = 0
    duration_ms: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "files": self.files,
            "declarations": self.declarations,
            "named": self.named,
            "marked": self.marked,
            "duration_ms": self.duration_ms,
        }


@dataclass(slots=True)
class MetadataLoadResult:
    """All loaded documentation sets plus the feature index built from them."""

    sets: list[DocumentationSet] = field(default_factory=list)
    features: FeatureIndex = field(default_factory=dict)
    stats: LoadStats = field(default_factory=LoadStats)

    def __iter__(self) -> Iterator[list[DocumentationSet] | FeatureIndex]:
        # allows ``sets, features = load_rustdoc_json_metadata(path)``
        yield self.sets
        yield self.features


def scan_unstable_items(documentation_set: DocumentationSet, stats: LoadStats | None = None) -> dict[str, str]:
    """Map each named declaration id in one set to its first unstable feature."""

    found: dict[str, str] = {}
    for item_id, declaration in documentation_set.index.items():
        if stats is not None:
            stats.declarations += 1
        if not declaration.name:
            continue
        if stats is not None:
            stats.named += 1

        for attr in declaration.attrs:
            feature = parse_unstable_feature(attr)
            if feature is not None:
                found[item_id] = feature
                logger.debug("Item %s (%s) is gated by feature %r", item_id, declaration.name, feature)
                break
    return found


def group_by_feature(item_features: dict[str, str]) -> FeatureIndex:
    """Invert an id -> feature map into feature -> ids, keeping insertion order."""

    grouped: FeatureIndex = {}
    for item_id, feature in item_features.items():
        grouped.setdefault(feature, []).append(item_id)
    return grouped


def load_rustdoc_json_metadata(doc_dir: str | Path) -> MetadataLoadResult:
    """Load every documentation set in ``doc_dir`` and index unstable items by feature.

    Any unreadable or malformed documentation set aborts the whole load with
    :class:`~unstabledoc.errors.DocumentationSetError`.
    """

    started = time.perf_counter()
    stats = LoadStats()
    sets: list[DocumentationSet] = []
    all_items: dict[str, str] = {}

    for file_path in collect_inputs(Path(doc_dir)):
        documentation_set = load_documentation_set(file_path)
        crate_items = scan_unstable_items(documentation_set, stats)
        logger.info(
            "Loaded %s: %d items, %d unstable",
            file_path.name,
            len(documentation_set.index),
            len(crate_items),
        )
        all_items.update(crate_items)
        sets.append(documentation_set)
        stats.files += 1

    stats.marked = len(all_items)
    stats.duration_ms = int((time.perf_counter() - started) * 1000)
    return MetadataLoadResult(sets=sets, features=group_by_feature(all_items), stats=stats)
