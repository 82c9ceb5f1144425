"""Naming analysis tests."""

from __future__ import annotations

import pytest

from declutter.analysis.naming import (
    analyze_asset_types,
    analyze_naming_patterns,
    extract_keywords,
    find_redundant_words,
    format_folder_name,
    split_name,
)
from declutter.catalog.models import Asset


def _assets(*names: str) -> list[Asset]:
    return [Asset(id=f"asset_{index}", name=name) for index, name in enumerate(names, start=1)]


def test_consistent_names_score_full_marks() -> None:
    analysis = analyze_naming_patterns(_assets("shot_01.mov", "shot_02.mov", "shot_03.mov"))

    assert analysis.consistency_score == 100
    assert analysis.patterns.has_underscores == pytest.approx(100.0)
    assert analysis.patterns.has_numbers == pytest.approx(100.0)


def test_mixed_separators_cost_twenty_points() -> None:
    analysis = analyze_naming_patterns(
        _assets("clip_one.mov", "clip_two.mov", "clip-three.mov", "clip-four.mov")
    )

    assert analysis.patterns.has_underscores == pytest.approx(50.0)
    assert analysis.patterns.has_hyphens == pytest.approx(50.0)
    assert analysis.consistency_score == 80


def test_mixed_separators_and_capitalization() -> None:
    analysis = analyze_naming_patterns(_assets("Clip_One.mov", "clip-two.mov", "CLIP THREE.MOV"))

    assert analysis.patterns.all_caps == pytest.approx(100 / 3)
    assert analysis.consistency_score == 60


def test_empty_input_is_consistent() -> None:
    analysis = analyze_naming_patterns([])

    assert analysis.consistency_score == 100
    assert analysis.common_prefixes == []


def test_common_prefixes_only_count_multi_token_names() -> None:
    analysis = analyze_naming_patterns(_assets("shot_01", "shot_02", "take_1", "single"))

    assert analysis.common_prefixes[0] == ("shot", 2)
    assert ("single", 1) not in analysis.common_prefixes
    assert dict(analysis.common_suffixes)["01"] == 1


def test_redundant_words_need_seventy_percent_of_names() -> None:
    words = find_redundant_words(
        _assets("Project_Final_01.mov", "Project_Final_02.mov", "Project_Draft_03.mov")
    )

    assert {word.word for word in words} == {"project", "mov"}
    assert all(word.frequency == 3 for word in words)
    assert all(word.percentage == pytest.approx(100.0) for word in words)


def test_redundant_words_are_sorted_by_frequency() -> None:
    words = find_redundant_words(
        _assets("city_night.mov", "city_day.mov", "city_dusk.mov", "night_sky.mov", "a.png")
    )

    # threshold is ceil(0.7 * 5) == 4
    assert [word.word for word in words] == ["mov"]
    assert words[0].frequency == 4


def test_word_repeated_within_one_name_counts_once() -> None:
    words = find_redundant_words(_assets("take_take.mov", "take.mov"))

    assert {word.word: word.frequency for word in words} == {"take": 2, "mov": 2}


def test_redundant_words_threshold_is_at_least_two() -> None:
    assert find_redundant_words(_assets("solo_clip.mov")) == []
    assert find_redundant_words([]) == []


def test_extract_keywords_normalizes_punctuation() -> None:
    assert extract_keywords("BRoll_Skyline-v2.mov") == ["broll", "skyline", "mov"]


def test_split_and_format_names() -> None:
    assert split_name("A_b-c  d") == ["A", "b", "c", "d"]
    assert format_folder_name("interview") == "Interview"
    assert format_folder_name("CITY_night") == "City Night"


def test_asset_breakdown_counts_every_type() -> None:
    assets = [
        Asset(id="asset_1", name="a.mov", type="footage"),
        Asset(id="asset_2", name="b.mov", type="footage"),
        Asset(id="asset_3", name="c.wav", type="audio"),
        Asset(id="asset_4", name="Solid 1", type="solid"),
    ]

    breakdown = analyze_asset_types(assets)

    assert breakdown.total == 4
    assert breakdown.counts == {
        "footage": 2,
        "audio": 1,
        "image": 0,
        "composition": 0,
        "other": 1,
    }
    assert breakdown.percentages["footage"] == pytest.approx(50.0)
