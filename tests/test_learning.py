"""Learning store tests."""

from __future__ import annotations

import itertools
import json
from pathlib import Path

import pytest

from declutter.analysis import ProjectAnalysis
from declutter.catalog.models import Asset, Folder
from declutter.config.models import LearningSettings
from declutter.learning import FOLDER_CREATED, LearningStore
from declutter.state import LEARNING_FILENAME, StateRepository


def _ticker():
    counter = itertools.count(1_000)
    return lambda: next(counter)


def _store(tmp_path: Path | None = None, **settings: int) -> LearningStore:
    repository = StateRepository(tmp_path) if tmp_path is not None else None
    return LearningStore(repository, settings=LearningSettings(**settings), clock=_ticker())


def _assets(*names: str) -> list[Asset]:
    return [Asset(id=f"asset_{index}", name=name) for index, name in enumerate(names, start=1)]


def test_record_counts_usage_and_merges_keywords() -> None:
    store = _store()

    store.record("Interviews", ["interview"])
    record = store.record("Interviews", ["talking"])

    assert record.usage == 2
    assert record.keywords == ["interview", "talking"]
    assert record.last_used == 1_001
    assert store.dirty


def test_record_derives_keywords_from_folder_name() -> None:
    record = _store().record("Drone Shots")

    assert record.keywords == ["drone", "shots"]


def test_folder_created_actions_feed_the_frequency_table() -> None:
    store = _store()

    store.record_action(FOLDER_CREATED, {"name": "Drone"})
    store.record_action("templateApplied", {"templateId": "wedding"})

    data = store.data
    assert [action.action for action in data.user_actions] == [FOLDER_CREATED, "templateApplied"]
    assert data.folder_patterns["Drone"].usage == 1
    assert set(data.folder_patterns) == {"Drone"}


def test_personalize_needs_more_than_two_uses() -> None:
    store = _store()
    assets = _assets("drone_lake.mov", "interview.mov")
    for _ in range(2):
        store.record("Drone", ["drone"])

    assert store.personalize(assets) == []

    store.record("Drone", ["drone"])
    suggestions = store.personalize(assets)

    assert [item.name for item in suggestions] == ["Drone"]
    assert suggestions[0].matching_assets == ["asset_1"]
    assert suggestions[0].confidence == pytest.approx(0.3)
    assert suggestions[0].is_personalized
    assert suggestions[0].type == "createFolder"


def test_personalized_confidence_is_capped() -> None:
    store = _store()
    for _ in range(25):
        store.record("Drone", ["drone"])

    suggestions = store.personalize(_assets("drone.mov"))

    assert suggestions[0].confidence == pytest.approx(0.9)


def test_personalize_skips_existing_and_unmatched_folders() -> None:
    store = _store()
    for _ in range(3):
        store.record("Drone", ["drone"])
        store.record("Timelapse", ["timelapse"])

    assets = _assets("drone.mov", "timelapse_city.mov")

    assert [item.name for item in store.personalize(_assets("city.mov"))] == []
    remaining = store.personalize(assets, [Folder(id="folder_1", name="drone")])
    assert [item.name for item in remaining] == ["Timelapse"]


def test_user_actions_are_trimmed_to_most_recent() -> None:
    store = _store(max_user_actions=10, trimmed_user_actions=5)

    for index in range(11):
        store.record_action("noop", {"index": index})

    actions = store.data.user_actions
    assert len(actions) == 5
    assert [action.data["index"] for action in actions] == [6, 7, 8, 9, 10]


def test_analysis_history_is_trimmed() -> None:
    store = _store(max_history=3, trimmed_history=2)

    for _ in range(4):
        store.record_analysis(ProjectAnalysis())

    history = store.data.organization_history
    assert len(history) == 2
    assert "projectType" in history[0].analysis


def test_folder_patterns_evict_least_recently_used() -> None:
    store = _store(max_folder_patterns=2)

    store.record("A")
    store.record("B")
    store.record("A")
    store.record("C")

    assert list(store.data.folder_patterns) == ["A", "C"]


def test_flush_persists_and_reload_restores(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.record("Drone", ["drone"])

    assert store.flush() is True
    assert not store.dirty

    raw = json.loads((tmp_path / LEARNING_FILENAME).read_text(encoding="utf-8"))
    assert set(raw) == {"userActions", "folderPatterns", "namingPatterns", "organizationHistory"}
    assert raw["folderPatterns"]["Drone"]["lastUsed"] == 1_000

    reloaded = _store(tmp_path)
    assert reloaded.data.folder_patterns["Drone"].usage == 1


def test_corrupt_learning_file_starts_fresh(tmp_path: Path) -> None:
    (tmp_path / LEARNING_FILENAME).write_text("{broken", encoding="utf-8")

    store = _store(tmp_path)

    assert store.data.folder_patterns == {}
    assert not store.dirty


def test_flush_without_changes_is_a_no_op(tmp_path: Path) -> None:
    store = _store(tmp_path)

    assert store.flush() is True
    assert not (tmp_path / LEARNING_FILENAME).exists()


def test_export_import_and_reset() -> None:
    source = _store()
    source.record("Drone", ["drone"])
    exported = source.export_json()

    target = _store()
    target.record("Timelapse")
    assert target.import_json(exported) is True
    assert set(target.data.folder_patterns) == {"Drone"}
    assert target.import_json("[1, 2]") is False
    assert target.import_json("{oops") is False

    target.reset()
    assert target.data.folder_patterns == {}
    assert target.dirty
