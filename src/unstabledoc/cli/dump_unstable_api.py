"""CLI entrypoint dumping the declaration chain of an unstable feature."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from unstabledoc.config import DumpSettings, parse_log_level
from unstabledoc.errors import UnstableDocError
from unstabledoc.index.metadata import load_rustdoc_json_metadata
from unstabledoc.index.tree import resolve_feature_chain

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dump the unstable API declarations of a feature from rustdoc JSON")
    parser.add_argument(
        "docs_path",
        nargs="?",
        help="Directory containing rustdoc JSON files (default: $UNSTABLEDOC_DOCS_PATH or target/doc)",
    )
    parser.add_argument("--feature", help="Unstable feature name to dump (default: $UNSTABLEDOC_FEATURE)")
    parser.add_argument(
        "--list-features",
        action="store_true",
        help="Print every unstable feature with its item ids instead of a declaration chain",
    )
    parser.add_argument(
        "--all-matches",
        action="store_true",
        help="Keep every declaration matching each path level, not only the first",
    )
    parser.add_argument("--log-level", help="Logging level (default: $UNSTABLEDOC_LOG_LEVEL or WARNING)")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)

    try:
        settings = DumpSettings.from_env()
        log_level = settings.log_level
        if args.log_level:
            log_level = parse_log_level(name="--log-level", raw_value=args.log_level)
    except ValueError as exc:
        print(json.dumps({"error": f"Configuration error: {exc}"}, ensure_ascii=True, indent=2))
        return 1

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=log_level,
    )

    docs_path = Path(args.docs_path) if args.docs_path else settings.docs_path
    feature = args.feature or settings.feature

    try:
        loaded = load_rustdoc_json_metadata(docs_path)
        if args.list_features:
            payload: dict[str, object] = {
                "docs_path": str(docs_path),
                "stats": loaded.stats.to_dict(),
                "features": {name: loaded.features[name] for name in sorted(loaded.features)},
            }
        else:
            chain = resolve_feature_chain(loaded.sets, loaded.features, feature, all_matches=args.all_matches)
            if args.all_matches:
                rendered = [[declaration.to_dict() for declaration in level] for level in chain]
            else:
                rendered = [declaration.to_dict() for declaration in chain]
            payload = {
                "feature": feature,
                "docs_path": str(docs_path),
                "chain": rendered,
            }
    except UnstableDocError as exc:
        logger.error("Failed to dump unstable API: %s", exc)
        print(json.dumps({"error": str(exc)}, ensure_ascii=True, indent=2))
        return 1

    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
