"""Rustdoc JSON documentation-set models and loading."""

from .loader import collect_inputs, load_documentation_set
from .models import Declaration, DocumentationSet, PathEntry

__all__ = [
    "Declaration",
    "DocumentationSet",
    "PathEntry",
    "collect_inputs",
    "load_documentation_set",
]
