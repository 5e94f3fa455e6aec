"""Tests for the cache backends."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tweetembed.cache import CacheBackend, DiskCache, NullCache, create_cache
from tweetembed.exceptions import CorruptCacheError
from tweetembed.models import CacheConfig


KEY = "0" * 64


@pytest.fixture()
def cache(tmp_path: Path, quiet_output) -> DiskCache:
    """A DiskCache rooted in a fresh folder under tmp_path."""
    return DiskCache(tmp_path / "tweet-cache")


# ------------------------------------------------------------------ #
# Construction
# ------------------------------------------------------------------ #


class TestConstruction:
    def test_creates_folder_with_parents(self, tmp_path: Path) -> None:
        folder = tmp_path / "a" / "b" / "c"
        DiskCache(folder)
        assert folder.is_dir()

    def test_existing_folder_is_fine(self, tmp_path: Path) -> None:
        DiskCache(tmp_path)
        DiskCache(tmp_path)

    def test_relative_folder_resolves_against_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        c = DiskCache(".tweet-cache")
        assert c.folder == (tmp_path / ".tweet-cache").resolve()

    def test_path_for_uses_cache_suffix(self, cache: DiskCache) -> None:
        assert cache.path_for(KEY) == cache.folder / f"{KEY}.cache"


# ------------------------------------------------------------------ #
# Read / write
# ------------------------------------------------------------------ #


class TestReadWrite:
    def test_miss_returns_none(self, cache: DiskCache) -> None:
        assert cache.read(KEY) is None

    def test_html_round_trip(self, cache: DiskCache) -> None:
        html = "<blockquote class=\"twitter-tweet\"><p lang=\"en\">hi &amp; bye</p></blockquote>"
        cache.write(KEY, {"html": html})
        assert cache.read(KEY)["html"] == html

    def test_passthrough_fields_survive(self, cache: DiskCache) -> None:
        record = {
            "html": "<p>x</p>",
            "width": 550,
            "height": None,
            "cache_age": "3153600000",
            "ratio": 1.5,
            "provider": {"name": "Twitter", "url": "https://twitter.com"},
        }
        cache.write(KEY, record)
        assert cache.read(KEY) == record

    def test_unicode_round_trip(self, cache: DiskCache) -> None:
        cache.write(KEY, {"html": "<p>café \U0001f426</p>"})
        assert cache.read(KEY) == {"html": "<p>café \U0001f426</p>"}

    def test_file_holds_plain_json_object(self, cache: DiskCache) -> None:
        cache.write(KEY, {"html": "<p>x</p>"})
        text = cache.path_for(KEY).read_text(encoding="utf-8")
        assert json.loads(text) == {"html": "<p>x</p>"}

    def test_write_overwrites(self, cache: DiskCache) -> None:
        cache.write(KEY, {"html": "<p>old</p>"})
        cache.write(KEY, {"html": "<p>new</p>"})
        assert cache.read(KEY) == {"html": "<p>new</p>"}

    def test_write_leaves_no_temp_files(self, cache: DiskCache) -> None:
        cache.write(KEY, {"html": "<p>x</p>"})
        assert [p.name for p in cache.folder.iterdir()] == [f"{KEY}.cache"]

    def test_keys_are_independent(self, cache: DiskCache) -> None:
        other = "1" * 64
        cache.write(KEY, {"html": "<p>a</p>"})
        cache.write(other, {"html": "<p>b</p>"})
        assert cache.read(KEY) == {"html": "<p>a</p>"}
        assert cache.read(other) == {"html": "<p>b</p>"}

    def test_visible_to_a_second_instance(self, cache: DiskCache) -> None:
        cache.write(KEY, {"html": "<p>x</p>"})
        assert DiskCache(cache.folder).read(KEY) == {"html": "<p>x</p>"}


# ------------------------------------------------------------------ #
# Corrupt entries
# ------------------------------------------------------------------ #


class TestCorruptEntries:
    def test_invalid_json_raises(self, cache: DiskCache) -> None:
        cache.path_for(KEY).write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptCacheError, match="Corrupt cache file"):
            cache.read(KEY)

    def test_truncated_file_raises(self, cache: DiskCache) -> None:
        cache.path_for(KEY).write_text('{"html": "<p>x', encoding="utf-8")
        with pytest.raises(CorruptCacheError):
            cache.read(KEY)

    @pytest.mark.parametrize("payload", ["[]", '"html"', "42", "null"])
    def test_non_object_raises(self, cache: DiskCache, payload: str) -> None:
        cache.path_for(KEY).write_text(payload, encoding="utf-8")
        with pytest.raises(CorruptCacheError, match="expected a JSON object"):
            cache.read(KEY)

    def test_unreadable_entry_raises(self, cache: DiskCache) -> None:
        cache.path_for(KEY).mkdir()
        with pytest.raises(CorruptCacheError, match="Cannot read cache file"):
            cache.read(KEY)

    def test_corrupt_error_exit_code(self) -> None:
        assert CorruptCacheError("x").exit_code == 8


# ------------------------------------------------------------------ #
# Null cache
# ------------------------------------------------------------------ #


class TestNullCache:
    def test_read_is_always_none(self) -> None:
        assert NullCache().read(KEY) is None

    def test_write_is_dropped(self) -> None:
        c = NullCache()
        c.write(KEY, {"html": "<p>x</p>"})
        assert c.read(KEY) is None

    def test_is_a_backend(self) -> None:
        assert isinstance(NullCache(), CacheBackend)


# ------------------------------------------------------------------ #
# Factory
# ------------------------------------------------------------------ #


class TestCreateCache:
    def test_enabled_builds_disk_cache(self, tmp_path: Path) -> None:
        c = create_cache(CacheConfig(enabled=True, directory=str(tmp_path / "c")))
        assert isinstance(c, DiskCache)
        assert c.folder == (tmp_path / "c").resolve()

    def test_disabled_builds_null_cache(self, tmp_path: Path) -> None:
        c = create_cache(CacheConfig(enabled=False, directory=str(tmp_path / "c")))
        assert isinstance(c, NullCache)
        assert not (tmp_path / "c").exists()
