"""Project classifier tests."""

from __future__ import annotations

import pytest

from declutter.analysis import ProjectClassifier
from declutter.analysis.classifier import score_asset
from declutter.catalog.models import Asset
from declutter.patterns import DEFAULT_ARCHETYPES, Archetype, FolderPattern, PatternLibrary


def _documentary_assets() -> list[Asset]:
    return [
        Asset(id="asset_1", name="Interview_01.mov", type="footage", tags=["interview"]),
        Asset(id="asset_2", name="BRoll_Skyline.mov", type="footage", tags=["b-roll"]),
        Asset(id="asset_3", name="Music_Bed.wav", type="audio"),
    ]


def test_documentary_project_is_detected() -> None:
    classifier = ProjectClassifier(PatternLibrary())

    result = classifier.classify(_documentary_assets())

    assert result.archetype == "documentary"
    assert result.confidence > 0.3
    assert result.confidence == pytest.approx(1.0)
    assert result.scores == {"documentary": 8, "corporate": 5, "wedding": 2, "music_video": 2}


def test_empty_project_is_unknown() -> None:
    result = ProjectClassifier(PatternLibrary()).classify([])

    assert result.is_unknown
    assert result.confidence == 0.0
    assert set(result.scores) == {archetype.key for archetype in DEFAULT_ARCHETYPES}


def test_low_confidence_falls_back_to_unknown() -> None:
    assets = [
        Asset(id="asset_1", name="interview.mov"),
        Asset(id="asset_2", name="clip_a.mov"),
        Asset(id="asset_3", name="clip_b.mov"),
        Asset(id="asset_4", name="clip_c.mov"),
    ]

    result = ProjectClassifier(PatternLibrary()).classify(assets)

    assert result.is_unknown
    assert result.confidence == pytest.approx(0.25)
    assert result.scores["documentary"] == 2


def test_confidence_floor_is_configurable() -> None:
    assets = [Asset(id="asset_1", name="interview.mov"), Asset(id="asset_2", name="x.mov")]

    strict = ProjectClassifier(PatternLibrary(), confidence_floor=0.6).classify(assets)
    lenient = ProjectClassifier(PatternLibrary(), confidence_floor=0.1).classify(assets)

    assert strict.is_unknown
    assert lenient.archetype == "documentary"


def test_ties_go_to_first_declared_archetype() -> None:
    library = PatternLibrary(
        (
            Archetype(
                key="first",
                confidence=0.5,
                folders=(FolderPattern(name="Shots", keywords=("shot",)),),
            ),
            Archetype(
                key="second",
                confidence=0.9,
                folders=(FolderPattern(name="Shots", keywords=("shot",)),),
            ),
        )
    )

    result = ProjectClassifier(library).classify([Asset(id="asset_1", name="shot_01.mov")])

    assert result.archetype == "first"
    assert result.scores == {"first": 2, "second": 2}


def test_tags_match_exactly_after_lowercasing() -> None:
    archetype = DEFAULT_ARCHETYPES[0]

    assert score_asset(archetype, "clip.mov", {"interview"}) == 1
    assert score_asset(archetype, "clip.mov", {"interviews"}) == 0
    assert score_asset(archetype, "interview.mov", set()) == 2


def test_duplicate_archetype_keys_are_rejected() -> None:
    with pytest.raises(ValueError):
        PatternLibrary((DEFAULT_ARCHETYPES[0], DEFAULT_ARCHETYPES[0]))


@pytest.mark.parametrize("key", ["documentary", "corporate", "wedding", "music_video"])
def test_adding_keyword_assets_never_lowers_the_score(key: str) -> None:
    library = PatternLibrary()
    archetype = library.get(key)
    assert archetype is not None
    classifier = ProjectClassifier(library)
    assets: list[Asset] = [Asset(id="asset_0", name="untitled.mov", type="footage")]
    previous = classifier.classify(assets).scores[key]

    for index, keyword in enumerate(
        (keyword for folder in archetype.folders for keyword in folder.keywords), start=1
    ):
        assets.append(Asset(id=f"asset_{index}", name=f"{keyword}_{index:02d}.mov"))
        current = classifier.classify(assets).scores[key]
        assert current >= previous
        previous = current

    assert previous > 0
