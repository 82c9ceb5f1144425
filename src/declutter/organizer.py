"""High-level organization workflows over an asset catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from declutter.analysis import (
    Classification,
    CreateFolderSuggestion,
    ProjectAnalysis,
    ProjectClassifier,
    Suggestion,
    SuggestionGenerator,
)
from declutter.analysis.naming import analyze_asset_types, analyze_naming_patterns
from declutter.catalog import AssetCatalog, existing_asset_ids
from declutter.catalog.health import ProjectHealth, project_health
from declutter.catalog.models import Asset, Folder
from declutter.config.models import AnalysisSettings
from declutter.events import EventBus
from declutter.learning import FOLDER_CREATED, LearningStore
from declutter.patterns import PatternLibrary

LOGGER = logging.getLogger(__name__)

GENERIC_CONFIDENCE = 0.6


@dataclass(slots=True)
class SuggestionOutcome:
    """Result of acting on a folder suggestion.

    Attributes:
        folder: Folder created for the suggestion.
        moved_asset_ids: Assets filed into the folder.
        skipped_asset_ids: Suggested assets that no longer exist.
    """

    folder: Folder
    moved_asset_ids: list[str] = field(default_factory=list)
    skipped_asset_ids: list[str] = field(default_factory=list)


class Organizer:
    """Analyze a project and act on suggestions.

    Collaborators are injected so the organizer can run against any catalog
    and pattern library.
    """

    def __init__(
        self,
        catalog: AssetCatalog,
        library: PatternLibrary | None = None,
        *,
        learning: LearningStore | None = None,
        events: EventBus | None = None,
        settings: AnalysisSettings | None = None,
    ) -> None:
        self._catalog = catalog
        self._library = library or PatternLibrary()
        self._learning = learning
        self._events = events
        self._settings = settings or AnalysisSettings()
        self._classifier = ProjectClassifier(
            self._library, confidence_floor=self._settings.confidence_floor
        )
        self._generator = SuggestionGenerator(self._library)

    @property
    def catalog(self) -> AssetCatalog:
        return self._catalog

    def classify(self, assets: Optional[Sequence[Asset]] = None) -> Classification:
        """Detect the project type of ``assets`` (defaults to the whole catalog)."""
        return self._classifier.classify(self._assets(assets))

    def suggest(
        self,
        assets: Optional[Sequence[Asset]] = None,
        existing_folders: Optional[Sequence[Folder]] = None,
    ) -> list[Suggestion]:
        """Generate suggestions, followed by personalized ones when enabled."""
        assets = self._assets(assets)
        folders = self._folders(existing_folders)
        return self._suggest(assets, folders, self._classifier.classify(assets))

    def analyze_project(
        self,
        assets: Optional[Sequence[Asset]] = None,
        existing_folders: Optional[Sequence[Folder]] = None,
    ) -> ProjectAnalysis:
        """Run classification, breakdown, naming analysis and suggestion generation.

        The analysis is recorded in the learning history.

        Args:
            assets: Assets to analyze; defaults to the catalog contents.
            existing_folders: Existing folders; defaults to the catalog folders.

        Returns:
            ProjectAnalysis: Full analysis with ordered suggestions.
        """
        assets = self._assets(assets)
        folders = self._folders(existing_folders)
        classification = self._classifier.classify(assets)
        analysis = ProjectAnalysis(
            project_type=classification,
            asset_breakdown=analyze_asset_types(assets),
            naming_patterns=analyze_naming_patterns(assets),
            confidence=(
                GENERIC_CONFIDENCE if classification.is_unknown else classification.confidence
            ),
        )
        if self._settings.enabled:
            analysis.suggestions = self._suggest(assets, folders, classification)

        if self._learning is not None:
            self._learning.record_analysis(analysis)
        self._publish("analysisCompleted", analysis=analysis.model_dump(mode="json", by_alias=True))
        return analysis

    def apply_suggestion(
        self,
        suggestion: CreateFolderSuggestion,
        parent_id: Optional[str] = None,
    ) -> SuggestionOutcome:
        """Create the suggested folder and move the suggested assets into it.

        Asset identifiers are re-validated against the catalog first, since
        the suggestion may be stale.

        Raises:
            HostOperationError: If the folder cannot be created or assets cannot be moved.
        """
        folder = self._catalog.create_folder(suggestion.name, suggestion.color, parent_id)
        self._publish("folderCreated", folder=folder.model_dump(mode="json", by_alias=True))
        valid_ids = existing_asset_ids(self._catalog, suggestion.matching_assets)
        skipped = [asset_id for asset_id in suggestion.matching_assets if asset_id not in valid_ids]
        if skipped:
            LOGGER.info("Skipping %d stale assets for %s", len(skipped), suggestion.name)
        if valid_ids:
            self._catalog.move_assets(valid_ids, folder.id)
            self._publish("assetsMoved", asset_ids=valid_ids, folder_id=folder.id)

        if self._learning is not None:
            self._learning.record_action(FOLDER_CREATED, {"name": folder.name})
        return SuggestionOutcome(
            folder=folder, moved_asset_ids=valid_ids, skipped_asset_ids=skipped
        )

    def project_health(self) -> ProjectHealth:
        return project_health(self._catalog.list_assets(), self._catalog.list_folders())

    # Internal helpers -------------------------------------------------

    def _suggest(
        self,
        assets: Sequence[Asset],
        folders: Sequence[Folder],
        classification: Classification,
    ) -> list[Suggestion]:
        suggestions = self._generator.suggest(assets, folders, classification)
        if self._learning is not None and self._settings.include_personalized:
            proposed = {
                suggestion.name.lower()
                for suggestion in suggestions
                if isinstance(suggestion, CreateFolderSuggestion)
            }
            suggestions.extend(
                personalized
                for personalized in self._learning.personalize(assets, folders)
                if personalized.name.lower() not in proposed
            )
        return suggestions

    def _assets(self, assets: Optional[Sequence[Asset]]) -> list[Asset]:
        return list(assets) if assets is not None else self._catalog.list_assets()

    def _folders(self, folders: Optional[Sequence[Folder]]) -> list[Folder]:
        return list(folders) if folders is not None else self._catalog.list_folders()

    def _publish(self, name: str, **payload: object) -> None:
        if self._events is not None:
            self._events.publish(name, **payload)


__all__ = ["Organizer", "SuggestionOutcome"]
