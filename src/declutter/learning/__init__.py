"""Learning store: frequency of user-chosen folders, used to personalize suggestions."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Mapping, Sequence

from pydantic import BaseModel, ValidationError

from declutter.analysis.models import CreateFolderSuggestion
from declutter.analysis.naming import extract_keywords
from declutter.analysis.suggestions import suggest_folder_color
from declutter.catalog.models import Asset, Folder
from declutter.config.models import LearningSettings
from declutter.state import MissingStateError, PersistenceError, StateRepository

from .models import AnalysisRecord, FolderPatternRecord, LearningData, UserAction

LOGGER = logging.getLogger(__name__)

MAX_PERSONALIZED_CONFIDENCE = 0.9
FOLDER_CREATED = "folderCreated"


def _now_ms() -> int:
    return int(time.time() * 1000)


class LearningStore:
    """Track which folders the user creates and suggest them again.

    The store is either clean (matches what was loaded or last flushed) or
    dirty; ``flush`` writes dirty data through the repository. Raw action and
    analysis histories are trimmed to their most recent entries once they
    overflow, and the folder frequency table keeps only the most recently
    used names.
    """

    def __init__(
        self,
        repository: StateRepository | None = None,
        *,
        settings: LearningSettings | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._repository = repository
        self._settings = settings or LearningSettings()
        self._clock = clock
        self._data = LearningData()
        self._dirty = False
        self.load()

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def data(self) -> LearningData:
        """Return a copy of the learning document."""
        return self._data.model_copy(deep=True)

    # Recording --------------------------------------------------------

    def record(
        self, folder_name: str, keywords: Sequence[str] | None = None
    ) -> FolderPatternRecord:
        """Count one use of ``folder_name``.

        Args:
            folder_name: Folder name the user chose.
            keywords: Keywords identifying assets for the folder; derived from
                the name when omitted.

        Returns:
            FolderPatternRecord: The updated record.
        """
        words = list(keywords) if keywords is not None else extract_keywords(folder_name)
        now = self._clock()
        patterns = self._data.folder_patterns
        record = patterns.pop(folder_name, None)
        if record is None:
            record = FolderPatternRecord(keywords=words, usage=1, last_used=now)
        else:
            record.usage += 1
            record.last_used = now
            record.keywords = list(dict.fromkeys([*record.keywords, *words]))
        patterns[folder_name] = record

        while len(patterns) > self._settings.max_folder_patterns:
            evicted = next(iter(patterns))
            del patterns[evicted]
            LOGGER.debug("Evicted least recently used folder pattern %s", evicted)

        self._dirty = True
        return record.model_copy()

    def record_action(self, action: str, data: Mapping[str, Any] | None = None) -> None:
        """Append a raw user action; ``folderCreated`` actions also feed the frequency table."""
        payload = dict(data or {})
        actions = self._data.user_actions
        actions.append(UserAction(action=action, data=payload, timestamp=self._clock()))
        if len(actions) > self._settings.max_user_actions:
            self._data.user_actions = actions[-self._settings.trimmed_user_actions :]
        if action == FOLDER_CREATED and payload.get("name"):
            self.record(str(payload["name"]))
        self._dirty = True

    def record_analysis(self, analysis: BaseModel | Mapping[str, Any]) -> None:
        """Append a project analysis to the history."""
        if isinstance(analysis, BaseModel):
            payload = analysis.model_dump(mode="json", by_alias=True)
        else:
            payload = dict(analysis)
        history = self._data.organization_history
        history.append(AnalysisRecord(analysis=payload, timestamp=self._clock()))
        if len(history) > self._settings.max_history:
            self._data.organization_history = history[-self._settings.trimmed_history :]
        self._dirty = True

    # Suggestions ------------------------------------------------------

    def personalize(
        self,
        assets: Sequence[Asset],
        existing_folders: Sequence[Folder] = (),
    ) -> list[CreateFolderSuggestion]:
        """Suggest frequently used folders whose keywords match current assets.

        Args:
            assets: Assets currently in the catalog.
            existing_folders: Folders that already exist and must not be proposed.

        Returns:
            list[CreateFolderSuggestion]: Personalized suggestions, most used first.
        """
        existing = {folder.name.lower() for folder in existing_folders}
        ranked = sorted(
            self._data.folder_patterns.items(), key=lambda item: item[1].usage, reverse=True
        )
        suggestions = []
        for folder_name, pattern in ranked:
            if pattern.usage <= self._settings.personalize_min_usage:
                continue
            if folder_name.lower() in existing or not pattern.keywords:
                continue
            matching = [
                asset.id
                for asset in assets
                if any(keyword in asset.name.lower() for keyword in pattern.keywords)
            ]
            if not matching:
                continue
            suggestions.append(
                CreateFolderSuggestion(
                    name=folder_name,
                    reason="Based on your previous organization patterns",
                    matching_assets=matching,
                    confidence=min(MAX_PERSONALIZED_CONFIDENCE, pattern.usage / 10),
                    color=suggest_folder_color(folder_name),
                    is_personalized=True,
                )
            )
        return suggestions

    # Persistence ------------------------------------------------------

    def load(self) -> None:
        """Load learning data, falling back to an empty document on failure."""
        self._data = LearningData()
        self._dirty = False
        if self._repository is None:
            return
        try:
            raw = self._repository.load_learning()
            self._data = self._validate(raw)
        except MissingStateError:
            return
        except (PersistenceError, ValidationError) as exc:
            LOGGER.warning("Failed to load learning data, starting fresh: %s", exc)

    def flush(self) -> bool:
        """Persist the learning document if it changed.

        Returns:
            bool: True when nothing needed saving or the save succeeded.
        """
        if not self._dirty or self._repository is None:
            return True
        try:
            self._repository.save_learning(self._data.to_payload())
        except PersistenceError as exc:
            LOGGER.warning("Failed to save learning data: %s", exc)
            return False
        self._dirty = False
        return True

    def export_json(self) -> str:
        return json.dumps(self._data.to_payload(), indent=2)

    def import_json(self, json_data: str) -> bool:
        """Merge a learning backup over the current data, key by key.

        Returns:
            bool: False when the backup is not valid learning JSON.
        """
        try:
            incoming = json.loads(json_data)
            if not isinstance(incoming, dict):
                raise ValueError("Learning backup must be a JSON object.")
            self._data = self._validate({**self._data.to_payload(), **incoming})
        except (ValueError, ValidationError) as exc:
            LOGGER.error("Failed to import learning data: %s", exc)
            return False
        self._dirty = True
        return True

    def reset(self) -> None:
        """Discard all learning data."""
        self._data = LearningData()
        self._dirty = True

    @staticmethod
    def _validate(raw: Mapping[str, Any]) -> LearningData:
        data = LearningData.model_validate(raw)
        # Recency order drives eviction.
        data.folder_patterns = dict(
            sorted(data.folder_patterns.items(), key=lambda item: item[1].last_used)
        )
        return data


__all__ = ["FOLDER_CREATED", "FolderPatternRecord", "LearningData", "LearningStore"]
