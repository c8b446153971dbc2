"""Runtime configuration for the unstable API dump command."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping


DEFAULT_DOCS_PATH = "target/doc"
DEFAULT_FEATURE = "default_free_fn"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_log_level(*, name: str, raw_value: str) -> int:
    value = raw_value.strip().upper()
    if value not in _LOG_LEVELS:
        allowed = ", ".join(_LOG_LEVELS)
        raise ValueError(f"{name} must be one of: {allowed}")
    return logging.getLevelName(value)


@dataclass(frozen=True, slots=True)
class DumpSettings:
    """Validated settings for locating docs and choosing the feature to dump."""

    docs_path: Path = Path(DEFAULT_DOCS_PATH)
    feature: str = DEFAULT_FEATURE
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DumpSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        docs_path_raw = source.get("UNSTABLEDOC_DOCS_PATH", DEFAULT_DOCS_PATH).strip()
        feature = source.get("UNSTABLEDOC_FEATURE", DEFAULT_FEATURE).strip()
        log_level_raw = source.get("UNSTABLEDOC_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip()

        if not docs_path_raw:
            raise ValueError("UNSTABLEDOC_DOCS_PATH cannot be empty")
        if not feature:
            raise ValueError("UNSTABLEDOC_FEATURE cannot be empty")
        if not log_level_raw:
            raise ValueError("UNSTABLEDOC_LOG_LEVEL cannot be empty")

        return cls(
            docs_path=Path(docs_path_raw),
            feature=feature,
            log_level=parse_log_level(name="UNSTABLEDOC_LOG_LEVEL", raw_value=log_level_raw),
        )
