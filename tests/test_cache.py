"""Tests for content-hash change detection."""

import hashlib

from gallery_builder.cache import HashCache, directory_hash, file_hash


def _tree(tmp_path):
    (tmp_path / "sub").mkdir()
    first = tmp_path / "a.json5"
    second = tmp_path / "sub" / "b.json5"
    first.write_text("{id: 'a'}", encoding="utf-8")
    second.write_text("{id: 'b'}", encoding="utf-8")
    return first, second


def test_file_hash_matches_md5(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"hello")

    assert file_hash(path) == hashlib.md5(b"hello").hexdigest()
    assert file_hash(tmp_path / "missing.txt") is None


def test_directory_hash_is_order_independent(tmp_path):
    first, second = _tree(tmp_path)

    assert directory_hash([first, second], tmp_path) == directory_hash([second, first], tmp_path)


def test_directory_hash_format(tmp_path):
    first, second = _tree(tmp_path)
    entries = f"a.json5:{file_hash(first)}|sub/b.json5:{file_hash(second)}"

    assert directory_hash([first, second], tmp_path) == hashlib.md5(entries.encode()).hexdigest()


def test_directory_hash_changes_on_edit_and_rename(tmp_path):
    first, second = _tree(tmp_path)
    original = directory_hash([first, second], tmp_path)

    first.write_text("{id: 'a', name: 'changed'}", encoding="utf-8")
    edited = directory_hash([first, second], tmp_path)
    assert edited != original

    renamed = second.rename(tmp_path / "sub" / "c.json5")
    assert directory_hash([first, renamed], tmp_path) != edited


def test_hash_cache_round_trip(tmp_path):
    cache = HashCache(tmp_path / ".cache.json")
    cache.set("images_directory_hash", "abc")
    cache.save()

    reloaded = HashCache(tmp_path / ".cache.json")
    assert reloaded.get("images_directory_hash") == "abc"

    reloaded.clear()
    assert reloaded.get("images_directory_hash") is None


def test_hash_cache_ignores_corrupt_file(tmp_path):
    path = tmp_path / ".cache.json"
    path.write_text("{not json", encoding="utf-8")

    assert HashCache(path).data == {}

    path.write_text("[1, 2]", encoding="utf-8")
    assert HashCache(path).data == {}


def test_hash_cache_ignores_undecodable_file(tmp_path):
    path = tmp_path / ".cache.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    cache = HashCache(path)
    assert cache.data == {}

    cache.set("images_directory_hash", "abc")
    cache.save()
    assert HashCache(path).get("images_directory_hash") == "abc"
