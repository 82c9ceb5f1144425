"""Keyword-scoring project classifier."""

from __future__ import annotations

import logging
from typing import Sequence

from declutter.catalog.models import Asset
from declutter.patterns import Archetype, PatternLibrary

from .models import UNKNOWN, Classification

LOGGER = logging.getLogger(__name__)

NAME_MATCH_WEIGHT = 2
TAG_MATCH_WEIGHT = 1
DEFAULT_CONFIDENCE_FLOOR = 0.3


class ProjectClassifier:
    """Infer the project type by scoring assets against each archetype."""

    def __init__(
        self,
        library: PatternLibrary,
        *,
        confidence_floor: float = DEFAULT_CONFIDENCE_FLOOR,
    ) -> None:
        self._library = library
        self._confidence_floor = confidence_floor

    @property
    def library(self) -> PatternLibrary:
        return self._library

    def classify(self, assets: Sequence[Asset]) -> Classification:
        """Score every archetype and report the best one above the floor.

        Each keyword found in a lowercased asset name adds two points; each
        keyword equal to one of the asset's lowercased tags adds one.

        Args:
            assets: Assets to classify.

        Returns:
            Classification: Best archetype (or ``unknown``), confidence and raw scores.
        """
        scores = {archetype.key: 0 for archetype in self._library}
        for asset in assets:
            name = asset.name.lower()
            tags = asset.lowered_tags
            for archetype in self._library:
                scores[archetype.key] += score_asset(archetype, name, tags)

        best_key = UNKNOWN
        best_score = 0
        for key, score in scores.items():
            if score > best_score:
                best_key, best_score = key, score

        confidence = min(best_score / (len(assets) * 2), 1.0) if assets else 0.0
        archetype = best_key if confidence > self._confidence_floor else UNKNOWN
        LOGGER.debug(
            "Classified %d assets as %s (confidence %.2f, scores %s)",
            len(assets),
            archetype,
            confidence,
            scores,
        )
        return Classification(archetype=archetype, confidence=confidence, scores=scores)


def score_asset(archetype: Archetype, lowered_name: str, lowered_tags: set[str]) -> int:
    """Return the raw score one asset contributes to ``archetype``."""
    score = 0
    for folder in archetype.folders:
        for keyword in folder.keywords:
            if keyword in lowered_name:
                score += NAME_MATCH_WEIGHT
            if keyword in lowered_tags:
                score += TAG_MATCH_WEIGHT
    return score


__all__ = ["DEFAULT_CONFIDENCE_FLOOR", "ProjectClassifier", "score_asset"]
