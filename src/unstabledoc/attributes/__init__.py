"""Rust attribute tokenizing and unstable-marker extraction."""

from .parser import find_marker_value, parse_meta, parse_unstable_feature

__all__ = ["find_marker_value", "parse_meta", "parse_unstable_feature"]
