"""Feature indexing and ancestor-chain reconstruction."""

from .metadata import FeatureIndex, LoadStats, MetadataLoadResult, load_rustdoc_json_metadata
from .tree import ancestor_chain, find_path, get_declaration, path_for_id, resolve_feature_chain

__all__ = [
    "FeatureIndex",
    "LoadStats",
    "MetadataLoadResult",
    "ancestor_chain",
    "find_path",
    "get_declaration",
    "load_rustdoc_json_metadata",
    "path_for_id",
    "resolve_feature_chain",
]
