"""Folder and naming suggestion generation."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from declutter.catalog.models import Asset, Folder
from declutter.patterns import Archetype, PatternLibrary

from .models import (
    Classification,
    CreateFolderSuggestion,
    NamingCleanupSuggestion,
    NamingImprovementSuggestion,
    Suggestion,
)
from .naming import (
    analyze_asset_types,
    analyze_naming_patterns,
    find_redundant_words,
    format_folder_name,
)

LOGGER = logging.getLogger(__name__)

ARCHETYPE_CONFIDENCE = 0.8
TYPE_FOLDER_CONFIDENCE = 0.7
PREFIX_FOLDER_CONFIDENCE = 0.6
CONSISTENCY_CONFIDENCE = 0.8
CLEANUP_CONFIDENCE = 0.7
CONSISTENCY_THRESHOLD = 70
MIN_GROUP_SIZE = 2
DEFAULT_COLOR = "blue"

# Checked in order; the first key contained in the folder name wins.
FOLDER_COLORS: tuple[tuple[str, str], ...] = (
    ("video", "blue"),
    ("footage", "blue"),
    ("audio", "green"),
    ("music", "green"),
    ("image", "yellow"),
    ("graphics", "orange"),
    ("composition", "purple"),
    ("interview", "red"),
    ("b-roll", "blue"),
    ("archival", "brown"),
    ("title", "orange"),
    ("logo", "purple"),
)

TYPE_FOLDER_NAMES = {
    "footage": "Video Footage",
    "audio": "Audio Files",
    "image": "Images",
    "composition": "Compositions",
}

CONSISTENCY_ACTIONS: tuple[str, ...] = (
    "Consider using a consistent separator (underscores, hyphens, or spaces)",
    "Standardize capitalization (Title Case, camelCase, or lowercase)",
    "Use consistent numbering format (01, 02, 03 vs 1, 2, 3)",
)


def suggest_folder_color(folder_name: str) -> str:
    """Pick a label color for a folder name or asset type."""
    lowered = folder_name.lower()
    for key, color in FOLDER_COLORS:
        if key in lowered:
            return color
    return DEFAULT_COLOR


def type_folder_name(asset_type: str) -> str:
    """Return the folder name used to group assets of ``asset_type``."""
    return TYPE_FOLDER_NAMES.get(asset_type) or asset_type[:1].upper() + asset_type[1:]


def matches_keywords(asset: Asset, keywords: Iterable[str]) -> bool:
    """Return True when any keyword is in the lowercased name or equals a lowercased tag."""
    name = asset.name.lower()
    tags = asset.lowered_tags
    return any(keyword in name or keyword in tags for keyword in keywords)


class SuggestionGenerator:
    """Produce ordered folder-creation and naming-improvement suggestions."""

    def __init__(self, library: PatternLibrary) -> None:
        self._library = library

    def suggest(
        self,
        assets: Sequence[Asset],
        existing_folders: Sequence[Folder],
        classification: Classification,
    ) -> list[Suggestion]:
        """Generate suggestions for the given assets.

        Archetype folders are proposed when the classification is known;
        otherwise folders by asset type and shared name prefix are proposed.
        Naming suggestions are always appended.

        Args:
            assets: Assets present in the catalog.
            existing_folders: Folders already in the catalog.
            classification: Result of project classification.

        Returns:
            list[Suggestion]: Suggestions in presentation order.
        """
        existing_names = {folder.name.lower() for folder in existing_folders}
        archetype = None
        if not classification.is_unknown:
            archetype = self._library.get(classification.archetype)

        suggestions: list[Suggestion] = []
        if archetype is not None:
            suggestions.extend(self.archetype_suggestions(assets, archetype, existing_names))
        else:
            suggestions.extend(self.generic_suggestions(assets, existing_names))
        suggestions.extend(self.naming_suggestions(assets))
        LOGGER.debug("Generated %d suggestions for %d assets", len(suggestions), len(assets))
        return suggestions

    def archetype_suggestions(
        self,
        assets: Sequence[Asset],
        archetype: Archetype,
        existing_names: set[str],
    ) -> list[CreateFolderSuggestion]:
        suggestions = []
        for folder in archetype.folders:
            if folder.name.lower() in existing_names:
                continue
            matching = [asset.id for asset in assets if matches_keywords(asset, folder.keywords)]
            if not matching:
                continue
            suggestions.append(
                CreateFolderSuggestion(
                    name=folder.name,
                    reason=(
                        f'Found {len(matching)} assets that match "{folder.name}" criteria'
                    ),
                    matching_assets=matching,
                    confidence=ARCHETYPE_CONFIDENCE,
                    color=suggest_folder_color(folder.name),
                )
            )
        return suggestions

    def generic_suggestions(
        self,
        assets: Sequence[Asset],
        existing_names: set[str],
    ) -> list[CreateFolderSuggestion]:
        suggestions = []
        breakdown = analyze_asset_types(assets)
        for asset_type, count in breakdown.counts.items():
            if asset_type == "other" or count <= MIN_GROUP_SIZE:
                continue
            folder_name = type_folder_name(asset_type)
            if folder_name.lower() in existing_names:
                continue
            suggestions.append(
                CreateFolderSuggestion(
                    name=folder_name,
                    reason=f"Organize {count} {asset_type} assets",
                    matching_assets=[asset.id for asset in assets if asset.type == asset_type],
                    confidence=TYPE_FOLDER_CONFIDENCE,
                    color=suggest_folder_color(asset_type),
                )
            )

        naming = analyze_naming_patterns(assets)
        for prefix, count in naming.common_prefixes:
            folder_name = format_folder_name(prefix)
            lowered = prefix.lower()
            if count <= MIN_GROUP_SIZE or not folder_name:
                continue
            if lowered in existing_names or folder_name.lower() in existing_names:
                continue
            suggestions.append(
                CreateFolderSuggestion(
                    name=folder_name,
                    reason=f'Group {count} assets with "{prefix}" prefix',
                    matching_assets=[
                        asset.id for asset in assets if asset.name.lower().startswith(lowered)
                    ],
                    confidence=PREFIX_FOLDER_CONFIDENCE,
                    color=DEFAULT_COLOR,
                )
            )
        return suggestions

    def naming_suggestions(self, assets: Sequence[Asset]) -> list[Suggestion]:
        suggestions: list[Suggestion] = []
        naming = analyze_naming_patterns(assets)
        if naming.consistency_score < CONSISTENCY_THRESHOLD:
            suggestions.append(
                NamingImprovementSuggestion(
                    title="Improve Naming Consistency",
                    reason="Inconsistent naming patterns detected",
                    confidence=CONSISTENCY_CONFIDENCE,
                    actions=list(CONSISTENCY_ACTIONS),
                )
            )

        redundant = find_redundant_words(assets)
        if redundant:
            suggestions.append(
                NamingCleanupSuggestion(
                    title="Remove Redundant Information",
                    reason="Found repeated information in asset names",
                    confidence=CLEANUP_CONFIDENCE,
                    patterns=redundant,
                )
            )
        return suggestions


__all__ = [
    "FOLDER_COLORS",
    "SuggestionGenerator",
    "matches_keywords",
    "suggest_folder_color",
    "type_folder_name",
]
