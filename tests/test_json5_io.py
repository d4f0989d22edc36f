import json
from datetime import datetime, timezone

import json5
import pytest

from gallery_builder.exceptions import FragmentError
from gallery_builder.json5_io import dump_fragment, format_json5, load_json5, write_document


def test_format_json5_adds_header_and_stays_parseable():
    data = [{"id": "a", "tags": ["x"]}]
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    text = format_json5(data, "images", now)

    assert text.startswith("// Image configuration")
    assert "gallery-builder images split" in text
    assert "// Last updated: 2024-01-02 03:04:05" in text
    assert json5.loads(text) == data


def test_unknown_kind_uses_generic_header():
    text = format_json5({"a": 1}, "other")

    assert text.startswith("// Configuration file (JSON5)")


def test_write_document_picks_format_from_suffix(tmp_path):
    data = [{"id": "alice"}]

    json_path = tmp_path / "out" / "profiles.json"
    json5_path = tmp_path / "out" / "images.json5"
    write_document(json_path, data, "characterProfiles")
    write_document(json5_path, data, "images")

    assert json.loads(json_path.read_text(encoding="utf-8")) == data
    assert json5_path.read_text(encoding="utf-8").startswith("//")
    assert load_json5(json5_path) == data


def test_dump_fragment_formats():
    entry = {"id": "a", "name": "Ä"}

    assert json.loads(dump_fragment(entry, ".json")) == entry
    assert json5.loads(dump_fragment(entry, ".json5")) == entry
    assert "Ä" in dump_fragment(entry)


def test_load_json5_accepts_comments_and_trailing_commas(tmp_path):
    path = tmp_path / "a.json5"
    path.write_text("// note\n{id: 'a', tags: ['x',],}\n", encoding="utf-8")

    assert load_json5(path) == {"id": "a", "tags": ["x"]}


def test_load_json5_reports_invalid_file(tmp_path):
    path = tmp_path / "broken.json5"
    path.write_text("{id: ", encoding="utf-8")

    with pytest.raises(FragmentError) as excinfo:
        load_json5(path)

    assert excinfo.value.path == path


def test_load_json5_reports_missing_file(tmp_path):
    with pytest.raises(FragmentError):
        load_json5(tmp_path / "missing.json5")


def test_load_json5_reports_invalid_encoding(tmp_path):
    path = tmp_path / "latin1.json5"
    path.write_bytes(b'{name: "caf\xe9"}')

    with pytest.raises(FragmentError) as excinfo:
        load_json5(path)

    assert excinfo.value.path == path
