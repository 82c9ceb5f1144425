"""Template application service tying the store, engine and catalog together."""

from __future__ import annotations

import logging
from typing import Sequence

from declutter.catalog import AssetCatalog, existing_asset_ids
from declutter.events import EventBus
from declutter.learning import FOLDER_CREATED, LearningStore

from .engine import ApplicationResult, PoolMode, TemplateEngine
from .errors import ApplicationInProgressError, TemplateNotFoundError
from .store import TemplateStore

LOGGER = logging.getLogger(__name__)

TEMPLATE_APPLIED = "templateApplied"


class TemplateService:
    """Apply stored templates to the catalog and record the outcome."""

    def __init__(
        self,
        store: TemplateStore,
        catalog: AssetCatalog,
        *,
        learning: LearningStore | None = None,
        events: EventBus | None = None,
        pool_mode: PoolMode = "snapshot",
        default_color: str = "none",
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._learning = learning
        self._events = events
        self._engine = TemplateEngine(catalog, pool_mode=pool_mode, default_color=default_color)
        self._applying = False

    @property
    def store(self) -> TemplateStore:
        return self._store

    @property
    def is_applying(self) -> bool:
        return self._applying

    def apply_template(
        self,
        template_id: str,
        selected_asset_ids: Sequence[str] | None = None,
    ) -> ApplicationResult:
        """Apply a template to the selected assets, or to every unorganized asset.

        Selected identifiers are re-validated against the catalog first;
        identifiers that no longer exist are dropped.

        Args:
            template_id: Identifier of a built-in or user template.
            selected_asset_ids: Optional asset identifiers to organize.

        Returns:
            ApplicationResult: Counts and per-folder errors.

        Raises:
            TemplateNotFoundError: If ``template_id`` is unknown.
            ApplicationInProgressError: If another application is running.
        """
        if self._applying:
            raise ApplicationInProgressError("A template application is already in progress.")
        template = self._store.get(template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template not found: {template_id}")

        self._applying = True
        try:
            selected = None
            if selected_asset_ids is not None:
                valid_ids = existing_asset_ids(self._catalog, selected_asset_ids)
                dropped = len(set(selected_asset_ids)) - len(valid_ids)
                if dropped:
                    LOGGER.info("Ignoring %d selected assets no longer in the project", dropped)
                by_id = {asset.id: asset for asset in self._catalog.list_assets()}
                selected = [by_id[asset_id] for asset_id in valid_ids]
            result = self._engine.apply(template, selected)
        finally:
            self._applying = False

        self._store.record_usage(template_id)
        if self._learning is not None:
            self._learning.record_action(TEMPLATE_APPLIED, {"templateId": template_id})
            for folder in result.created_folders:
                self._learning.record_action(FOLDER_CREATED, {"name": folder.name})
        if self._events is not None:
            self._events.publish(
                TEMPLATE_APPLIED,
                template_id=template_id,
                result=result.model_dump(mode="json", by_alias=True),
            )
        return result


__all__ = ["TEMPLATE_APPLIED", "TemplateService"]
