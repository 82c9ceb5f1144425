"""Naming-pattern analysis for asset names."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Sequence

from declutter.catalog.models import ASSET_TYPES, Asset

from .models import AssetBreakdown, NamingAnalysis, NamingPatterns, RedundantWord

NAME_SEPARATORS = re.compile(r"[_\-\s]+")
_NON_WORD = re.compile(r"[^a-z0-9\s]")
_NON_LETTER = re.compile(r"[^a-zA-Z]")
_ALL_CAPS = re.compile(r"[A-Z]+")
_CAMEL_CASE = re.compile(r"[a-z]+(?:[A-Z][a-z]*)*")

MIXED_PATTERN_THRESHOLD = 10.0
MIXED_PATTERN_PENALTY = 20
PATTERN_GROUPS: tuple[tuple[str, ...], ...] = (
    ("has_underscores", "has_hyphens", "has_spaces"),
    ("starts_with_capital", "all_caps", "camel_case"),
)
COMMON_AFFIX_LIMIT = 5
REDUNDANT_RATIO = 0.7
MIN_WORD_LENGTH = 3


def analyze_asset_types(assets: Sequence[Asset]) -> AssetBreakdown:
    """Count assets per type and express each count as a percentage."""
    counts = {asset_type: 0 for asset_type in ASSET_TYPES}
    for asset in assets:
        counts[asset.type] = counts.get(asset.type, 0) + 1
    total = len(assets)
    percentages = {
        asset_type: (count / total) * 100 if total else 0.0 for asset_type, count in counts.items()
    }
    return AssetBreakdown(counts=counts, percentages=percentages, total=total)


def analyze_naming_patterns(assets: Sequence[Asset]) -> NamingAnalysis:
    """Measure naming traits, common prefixes/suffixes and overall consistency.

    Args:
        assets: Assets whose names are analyzed.

    Returns:
        NamingAnalysis: Trait percentages, the five most common prefixes and
        suffixes, and the consistency score.
    """
    tallies: Counter[str] = Counter()
    prefixes: Counter[str] = Counter()
    suffixes: Counter[str] = Counter()

    for asset in assets:
        name = asset.name
        letters = _NON_LETTER.sub("", name)
        traits = {
            "has_numbers": any(char.isdigit() for char in name),
            "has_underscores": "_" in name,
            "has_hyphens": "-" in name,
            "has_spaces": any(char.isspace() for char in name),
            "starts_with_capital": name[:1].isascii() and name[:1].isupper(),
            "all_caps": _ALL_CAPS.fullmatch(letters) is not None,
            "camel_case": _CAMEL_CASE.fullmatch(letters) is not None,
        }
        tallies.update(trait for trait, present in traits.items() if present)

        parts = split_name(name)
        if len(parts) > 1:
            prefixes[parts[0]] += 1
            suffixes[parts[-1]] += 1

    total = len(assets)
    patterns = NamingPatterns(
        **{
            field: (tallies[field] / total) * 100 if total else 0.0
            for field in NamingPatterns.model_fields
        }
    )
    return NamingAnalysis(
        patterns=patterns,
        common_prefixes=prefixes.most_common(COMMON_AFFIX_LIMIT),
        common_suffixes=suffixes.most_common(COMMON_AFFIX_LIMIT),
        consistency_score=naming_consistency(patterns),
    )


def naming_consistency(patterns: NamingPatterns) -> int:
    """Score naming consistency from 0 to 100.

    Each pattern group where more than one trait shows up in over 10% of the
    names costs 20 points.
    """
    score = 100
    for group in PATTERN_GROUPS:
        active = [trait for trait in group if getattr(patterns, trait) > MIXED_PATTERN_THRESHOLD]
        if len(active) > 1:
            score -= MIXED_PATTERN_PENALTY
    return max(0, score)


def find_redundant_words(assets: Sequence[Asset]) -> list[RedundantWord]:
    """Return words repeated across most asset names, most frequent first.

    A word qualifies when it appears in at least ``max(2, ceil(0.7 * n))`` of
    the ``n`` names.
    """
    if not assets:
        return []
    frequency: Counter[str] = Counter()
    for asset in assets:
        frequency.update(set(extract_keywords(asset.name)))

    total = len(assets)
    threshold = max(2, math.ceil(total * REDUNDANT_RATIO))
    redundant = [
        RedundantWord(word=word, frequency=count, percentage=(count / total) * 100)
        for word, count in frequency.items()
        if count >= threshold
    ]
    return sorted(redundant, key=lambda item: item.frequency, reverse=True)


def split_name(name: str) -> list[str]:
    """Split a name on underscores, hyphens and whitespace."""
    return [part for part in NAME_SEPARATORS.split(name) if part]


def extract_keywords(name: str) -> list[str]:
    """Return lowercase words of at least three characters from ``name``."""
    cleaned = _NON_WORD.sub(" ", name.lower())
    return [word for word in cleaned.split() if len(word) >= MIN_WORD_LENGTH]


def format_folder_name(name: str) -> str:
    """Title-case each separator-delimited token and join them with spaces."""
    return " ".join(part[:1].upper() + part[1:].lower() for part in split_name(name))


__all__ = [
    "analyze_asset_types",
    "analyze_naming_patterns",
    "extract_keywords",
    "find_redundant_words",
    "format_folder_name",
    "naming_consistency",
    "split_name",
]
