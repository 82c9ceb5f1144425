"""Organizer workflow tests."""

from __future__ import annotations

import pytest

from declutter.analysis import CreateFolderSuggestion
from declutter.catalog import DuplicateNameError, ProjectCatalog
from declutter.catalog.models import Asset, Folder, ProjectSnapshot
from declutter.config.models import AnalysisSettings
from declutter.events import EventBus
from declutter.learning import FOLDER_CREATED, LearningStore
from declutter.organizer import GENERIC_CONFIDENCE, Organizer


def _documentary_catalog() -> ProjectCatalog:
    return ProjectCatalog(
        ProjectSnapshot(
            name="Doc",
            assets=[
                Asset(id="asset_1", name="Interview_01.mov", type="footage", tags=["interview"]),
                Asset(id="asset_2", name="BRoll_Skyline.mov", type="footage", tags=["b-roll"]),
                Asset(id="asset_3", name="Music_Bed.wav", type="audio"),
            ],
        )
    )


def _folder_names(suggestions: list) -> list[str]:
    return [item.name for item in suggestions if isinstance(item, CreateFolderSuggestion)]


def test_documentary_project_end_to_end() -> None:
    events = EventBus()
    learning = LearningStore()
    organizer = Organizer(_documentary_catalog(), learning=learning, events=events)

    analysis = organizer.analyze_project()

    assert analysis.project_type.archetype == "documentary"
    assert analysis.project_type.confidence > 0.3
    assert analysis.confidence == analysis.project_type.confidence
    assert analysis.project_type.scores == {
        "documentary": 8,
        "corporate": 5,
        "wedding": 2,
        "music_video": 2,
    }
    assert _folder_names(analysis.suggestions) == ["Interviews", "B-Roll", "Music"]
    assert analysis.asset_breakdown.counts["footage"] == 2
    assert len(learning.data.organization_history) == 1
    published = events.drain()
    assert [event.name for event in published] == ["analysisCompleted"]
    assert published[0].payload["analysis"]["projectType"]["type"] == "documentary"


def test_unknown_projects_report_generic_confidence() -> None:
    catalog = ProjectCatalog(
        ProjectSnapshot(
            assets=[
                Asset(id="asset_1", name="clip_a.mov", type="footage"),
                Asset(id="asset_2", name="clip_b.mov", type="footage"),
                Asset(id="asset_3", name="clip_c.mov", type="footage"),
            ]
        )
    )

    analysis = Organizer(catalog).analyze_project()

    assert analysis.project_type.is_unknown
    assert analysis.confidence == pytest.approx(GENERIC_CONFIDENCE)
    assert "Video Footage" in _folder_names(analysis.suggestions)


def test_disabled_analysis_skips_suggestions() -> None:
    organizer = Organizer(_documentary_catalog(), settings=AnalysisSettings(enabled=False))

    analysis = organizer.analyze_project()

    assert analysis.project_type.archetype == "documentary"
    assert analysis.suggestions == []


def test_personalized_suggestions_are_appended_without_duplicates() -> None:
    catalog = _documentary_catalog()
    catalog.create_folder("Misc")
    learning = LearningStore()
    for _ in range(3):
        learning.record("Music", ["music"])
        learning.record("Skyline", ["skyline"])
    organizer = Organizer(catalog, learning=learning)

    suggestions = organizer.suggest()

    names = _folder_names(suggestions)
    assert names == ["Interviews", "B-Roll", "Music", "Skyline"]
    assert suggestions[-1].is_personalized  # type: ignore[union-attr]

    plain = Organizer(
        catalog, learning=learning, settings=AnalysisSettings(include_personalized=False)
    )
    assert _folder_names(plain.suggest()) == ["Interviews", "B-Roll", "Music"]


def test_suggest_accepts_explicit_inputs() -> None:
    organizer = Organizer(ProjectCatalog())
    assets = _documentary_catalog().list_assets()

    suggestions = organizer.suggest(assets, [Folder(id="folder_1", name="Music")])

    assert _folder_names(suggestions) == ["Interviews", "B-Roll"]
    assert organizer.classify(assets).archetype == "documentary"


def test_apply_suggestion_skips_stale_assets() -> None:
    catalog = _documentary_catalog()
    events = EventBus()
    learning = LearningStore()
    organizer = Organizer(catalog, learning=learning, events=events)
    suggestion = CreateFolderSuggestion(
        name="Interviews",
        reason="Found interview assets",
        matching_assets=["asset_1", "asset_gone"],
        confidence=0.8,
        color="red",
    )

    outcome = organizer.apply_suggestion(suggestion)

    assert outcome.moved_asset_ids == ["asset_1"]
    assert outcome.skipped_asset_ids == ["asset_gone"]
    assert outcome.folder.color == "red"
    assert catalog.get_asset("asset_1").folder_id == outcome.folder.id  # type: ignore[union-attr]
    assert [event.name for event in events.drain()] == ["folderCreated", "assetsMoved"]
    assert learning.data.user_actions[-1].action == FOLDER_CREATED
    assert learning.data.folder_patterns["Interviews"].usage == 1

    with pytest.raises(DuplicateNameError):
        organizer.apply_suggestion(suggestion)


def test_apply_suggestion_with_only_stale_assets_creates_empty_folder() -> None:
    catalog = _documentary_catalog()
    events = EventBus()
    suggestion = CreateFolderSuggestion(
        name="Archival", reason="Old clips", matching_assets=["asset_9"], confidence=0.8
    )

    outcome = Organizer(catalog, events=events).apply_suggestion(suggestion)

    assert outcome.moved_asset_ids == []
    assert [event.name for event in events.drain()] == ["folderCreated"]
    assert len(catalog.unorganized_assets()) == 3


def test_project_health_reflects_catalog() -> None:
    catalog = _documentary_catalog()
    organizer = Organizer(catalog)
    folder = catalog.create_folder("Footage")
    catalog.move_assets(["asset_1", "asset_2"], folder.id)

    health = organizer.project_health()

    assert health.total_assets == 3
    assert health.unorganized_assets == 1
    assert health.total_folders == 1
