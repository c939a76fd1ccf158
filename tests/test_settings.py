"""Tests for the settings stores."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json

import pytest

from core import GridSpec, JsonSettingsStore, MemorySettingsStore, PuzzleError, SettingsError


def test_memory_defaults_to_three_by_three():
    store = MemorySettingsStore()
    assert store.get_grid_spec() == GridSpec(3, 3)
    assert not store.settings.use_custom_grid_size


def test_memory_set_and_reset():
    store = MemorySettingsStore()
    store.set_grid_spec(GridSpec(4, 5))
    assert store.get_grid_spec() == GridSpec(4, 5)
    assert store.settings.use_custom_grid_size

    store.reset_to_default()
    assert store.get_grid_spec() == GridSpec(3, 3)
    assert not store.settings.use_custom_grid_size


def test_documentation_flag():
    store = MemorySettingsStore()
    assert not store.has_seen_documentation()
    store.mark_documentation_seen()
    assert store.has_seen_documentation()


def test_json_store_persists(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = JsonSettingsStore(path)
    assert store.get_grid_spec() == GridSpec(3, 3)
    assert not path.exists()

    store.set_grid_spec(GridSpec(6, 4))
    store.mark_documentation_seen()

    reopened = JsonSettingsStore(path)
    assert reopened.get_grid_spec() == GridSpec(6, 4)
    assert reopened.has_seen_documentation()
    assert json.loads(path.read_text())["rows"] == 6
    assert not path.with_suffix(".json.tmp").exists()


def test_json_store_corrupt_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{ this is not json")
    store = JsonSettingsStore(path)
    assert store.get_grid_spec() == GridSpec(3, 3)


def test_json_store_invalid_grid_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"rows": 0, "columns": 4}))
    assert JsonSettingsStore(path).get_grid_spec() == GridSpec(3, 3)


def test_json_store_unreadable_path_falls_back(tmp_path):
    store = JsonSettingsStore(tmp_path)
    assert store.get_grid_spec() == GridSpec(3, 3)


def test_json_store_failed_write_cleans_up(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    store = JsonSettingsStore(path)
    store.set_grid_spec(GridSpec(4, 4))

    def refuse(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("core.settings.os.replace", refuse)
    with pytest.raises(SettingsError):
        store.set_grid_spec(GridSpec(7, 7))

    assert issubclass(SettingsError, PuzzleError)
    assert store.get_grid_spec() == GridSpec(4, 4)
    assert not path.with_suffix(".json.tmp").exists()
    assert json.loads(path.read_text())["rows"] == 4
