from __future__ import annotations

import json
from pathlib import Path

import pytest

from unstabledoc.cli.dump_unstable_api import main as dump_main


def _write_crate(path: Path, *, items: dict[str, tuple[str, list[str]]], paths: dict[str, list[str]]) -> None:
    payload = {
        "root": next(iter(items)),
        "crate_version": None,
        "format_version": 24,
        "index": {
            item_id: {"id": item_id, "crate_id": 0, "name": name, "attrs": attrs, "docs": f"Docs for {name}"}
            for item_id, (name, attrs) in items.items()
        },
        "paths": {item_id: {"crate_id": 0, "path": segments, "kind": "module"} for item_id, segments in paths.items()},
    }
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("UNSTABLEDOC_DOCS_PATH", "UNSTABLEDOC_FEATURE", "UNSTABLEDOC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    target = tmp_path / "json-docs"
    target.mkdir()
    _write_crate(
        target / "core.json",
        items={
            "0:0": ("core", []),
            "0:1": ("default", []),
            "0:2": ("default", ['#[unstable(feature = "default_free_fn", issue = "73014")]']),
            "0:3": ("ptr", ['#[unstable(feature = "strict_provenance", issue = "95228")]']),
        },
        paths={
            "0:0": ["core"],
            "0:1": ["core", "default"],
            "0:2": ["core", "default", "default"],
            "0:3": ["core", "ptr"],
        },
    )
    _write_crate(
        target / "std.json",
        items={"1:0": ("std", []), "1:1": ("default", [])},
        paths={"1:0": ["std"], "1:1": ["core", "default"]},
    )
    return target


def test_cli_dumps_declaration_chain_as_json(docs_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = dump_main([str(docs_dir), "--feature", "default_free_fn"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["feature"] == "default_free_fn"
    assert payload["docs_path"] == str(docs_dir)
    assert [item["id"] for item in payload["chain"]] == ["0:0", "0:1", "0:2"]
    assert payload["chain"][-1]["attrs"] == ['#[unstable(feature = "default_free_fn", issue = "73014")]']
    assert payload["chain"][0]["docs"] == "Docs for core"


def test_cli_all_matches_keeps_reexported_levels(docs_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = dump_main([str(docs_dir), "--feature", "default_free_fn", "--all-matches"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert [[item["id"] for item in level] for level in payload["chain"]] == [["0:0"], ["0:1", "1:1"], ["0:2"]]


def test_cli_lists_features_with_stats(docs_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = dump_main([str(docs_dir), "--list-features"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert list(payload["features"]) == ["default_free_fn", "strict_provenance"]
    assert payload["features"]["strict_provenance"] == ["0:3"]
    assert payload["stats"]["files"] == 2
    assert payload["stats"]["marked"] == 2


def test_cli_reads_feature_and_path_from_environment(
    docs_dir: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("UNSTABLEDOC_DOCS_PATH", str(docs_dir))
    monkeypatch.setenv("UNSTABLEDOC_FEATURE", "strict_provenance")

    exit_code = dump_main([])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["feature"] == "strict_provenance"
    assert [item["name"] for item in payload["chain"]] == ["core", "ptr"]


def test_cli_unknown_feature_fails(docs_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = dump_main([str(docs_dir), "--feature", "nonexistent"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert "nonexistent" in payload["error"]


def test_cli_corrupt_documentation_set_fails(docs_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (docs_dir / "zz-broken.json").write_text("[", encoding="utf-8")

    exit_code = dump_main([str(docs_dir), "--feature", "default_free_fn"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert "zz-broken.json" in payload["error"]


def test_cli_rejects_invalid_log_level(docs_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = dump_main([str(docs_dir), "--log-level", "chatty"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert "--log-level" in payload["error"]
