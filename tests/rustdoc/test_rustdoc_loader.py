from __future__ import annotations

import json
from pathlib import Path

import pytest

from unstabledoc.errors import DocumentationSetError
from unstabledoc.rustdoc.loader import collect_inputs, load_documentation_set


def _write_json(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _crate_payload() -> dict[str, object]:
    return {
        "root": "0:0",
        "crate_version": "0.1.0",
        "includes_private": False,
        "format_version": 24,
        "index": {
            "0:0": {
                "id": "0:0",
                "crate_id": 0,
                "name": "mylib",
                "docs": "Crate docs",
                "attrs": [],
                "links": {},
                "inner": {"module": {"is_crate": True, "items": ["0:1"]}},
            },
            "0:1": {
                "id": "0:1",
                "crate_id": 0,
                "name": "helper",
                "docs": None,
                "attrs": ['#[unstable(feature = "helper_fn", issue = "none")]'],
                "visibility": "public",
                "inner": {"function": {}},
            },
        },
        "paths": {
            "0:0": {"crate_id": 0, "path": ["mylib"], "kind": "module"},
            "0:1": {"crate_id": 0, "path": ["mylib", "helper"], "kind": "function"},
        },
        "external_crates": {},
    }


def test_load_documentation_set_builds_declarations_and_paths(tmp_path: Path) -> None:
    source = _write_json(tmp_path / "mylib.json", _crate_payload())

    documentation_set = load_documentation_set(source)

    assert documentation_set.source_path == source
    assert documentation_set.crate_name == "mylib"
    assert documentation_set.crate_version == "0.1.0"
    assert documentation_set.format_version == 24
    assert set(documentation_set.index) == {"0:0", "0:1"}

    helper = documentation_set.index["0:1"]
    assert helper.name == "helper"
    assert helper.attrs == ['#[unstable(feature = "helper_fn", issue = "none")]']
    assert helper.to_dict()["inner"] == {"function": {}}
    assert helper.raw["visibility"] == "public"

    assert documentation_set.paths["0:1"].path == ["mylib", "helper"]
    assert documentation_set.paths["0:1"].kind == "function"
    assert documentation_set.find_path(["mylib", "helper"]) == "0:1"
    assert documentation_set.find_path(["mylib", "missing"]) is None


def test_integer_identifiers_are_normalized_to_strings(tmp_path: Path) -> None:
    payload = {
        "root": 0,
        "format_version": 40,
        "index": {"0": {"id": 0, "crate_id": 0, "name": "core", "attrs": []}},
        "paths": {"0": {"crate_id": 0, "path": ["core"], "kind": "module"}},
    }
    documentation_set = load_documentation_set(_write_json(tmp_path / "core.json", payload))

    assert documentation_set.root == "0"
    assert documentation_set.index["0"].id == "0"
    assert documentation_set.crate_name == "core"


def test_invalid_json_is_fatal(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(DocumentationSetError, match="Failed to parse JSON docs") as excinfo:
        load_documentation_set(broken)
    assert excinfo.value.path == broken
    assert "broken.json" in str(excinfo.value)


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda payload: payload.pop("paths"), "'paths'"),
        (lambda payload: payload.pop("index"), "'index'"),
        (lambda payload: payload["index"]["0:1"].update(attrs="#[inline]"), "attrs"),
        (lambda payload: payload["index"]["0:1"].update(name=7), "non-string name"),
        (lambda payload: payload["paths"]["0:1"].update(path="mylib::helper"), "path of"),
        (lambda payload: payload["index"].update({"0:9": []}), "not an object"),
    ],
)
def test_schema_mismatch_is_fatal(tmp_path: Path, mutate, message: str) -> None:
    payload = _crate_payload()
    mutate(payload)
    source = _write_json(tmp_path / "bad.json", payload)

    with pytest.raises(DocumentationSetError, match=message):
        load_documentation_set(source)


def test_top_level_must_be_an_object(tmp_path: Path) -> None:
    with pytest.raises(DocumentationSetError, match="not a JSON object"):
        load_documentation_set(_write_json(tmp_path / "list.json", [1, 2, 3]))


def test_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(DocumentationSetError, match="Failed to open"):
        load_documentation_set(tmp_path / "absent.json")


def test_collect_inputs_sorts_and_skips_non_json_entries(tmp_path: Path) -> None:
    (tmp_path / "b.json").write_text("{}", encoding="utf-8")
    (tmp_path / "a.json").write_text("{}", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    (tmp_path / ".hidden.json").write_text("{}", encoding="utf-8")
    (tmp_path / "nested.json").mkdir()

    assert [path.name for path in collect_inputs(tmp_path)] == ["a.json", "b.json"]


def test_collect_inputs_requires_a_directory(tmp_path: Path) -> None:
    with pytest.raises(DocumentationSetError, match="not a directory"):
        collect_inputs(tmp_path / "missing")
