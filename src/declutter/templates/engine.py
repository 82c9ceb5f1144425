"""Template application against an asset catalog."""

from __future__ import annotations

import logging
from typing import Callable, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from declutter.catalog import AssetCatalog, CatalogError
from declutter.catalog.models import Asset, Folder

from .filters import filter_assets
from .models import FolderDefinition, Template

LOGGER = logging.getLogger(__name__)

PoolMode = Literal["snapshot", "live"]


class ApplicationResult(BaseModel):
    """Outcome of applying a template.

    Attributes:
        folders_created: Number of folders created.
        assets_moved: Number of asset moves performed, summed over folders.
        errors: Per-folder failure messages in processing order.
        created_folders: Folders created during the application.
    """

    model_config = ConfigDict(populate_by_name=True)

    folders_created: int = Field(default=0, alias="foldersCreated")
    assets_moved: int = Field(default=0, alias="assetsMoved")
    errors: List[str] = Field(default_factory=list)
    created_folders: List[Folder] = Field(default_factory=list, alias="createdFolders")


class TemplateEngine:
    """Create a template's folders and file matching assets into them.

    Folder definitions are processed strictly in order. A failure on one
    definition is recorded and the rest of the template still runs; nothing
    is rolled back.
    """

    def __init__(
        self,
        catalog: AssetCatalog,
        *,
        pool_mode: PoolMode = "snapshot",
        default_color: str = "none",
    ) -> None:
        self._catalog = catalog
        self._pool_mode = pool_mode
        self._default_color = default_color

    @property
    def pool_mode(self) -> PoolMode:
        return self._pool_mode

    def apply(
        self,
        template: Template,
        assets: Optional[Sequence[Asset]] = None,
    ) -> ApplicationResult:
        """Apply ``template`` to ``assets`` or, when omitted, to the unorganized assets.

        In ``snapshot`` mode every definition sees the pool as it was when the
        application started, so an asset matching several definitions ends up
        in the last one. In ``live`` mode the pool is refreshed after each move
        and assets already filed during this application are no longer
        eligible.

        Args:
            template: Template to apply.
            assets: Selected assets; ``None`` selects assets at the project root.

        Returns:
            ApplicationResult: Counts, created folders and per-folder errors.
        """
        result = ApplicationResult()
        created: dict[str, str] = {}
        moved: set[str] = set()
        refresh = self._pool_source(assets)
        pool = refresh(moved)

        for definition in template.folders:
            folder = self._create_folder(definition, created, result)
            if folder is None:
                continue
            created[definition.name] = folder.id
            if not definition.filters:
                continue

            matching = filter_assets(pool, definition.filters)
            if not matching:
                continue
            asset_ids = [asset.id for asset in matching]
            try:
                self._catalog.move_assets(asset_ids, folder.id)
            except CatalogError as exc:
                LOGGER.warning("Moving assets into %s failed: %s", definition.name, exc)
                result.errors.append(f'Failed to move assets into "{definition.name}": {exc}')
                continue
            result.assets_moved += len(asset_ids)
            moved.update(asset_ids)
            if self._pool_mode == "live":
                pool = refresh(moved)

        LOGGER.info(
            "Applied template %s: %d folders, %d moves, %d errors",
            template.id,
            result.folders_created,
            result.assets_moved,
            len(result.errors),
        )
        return result

    def _create_folder(
        self,
        definition: FolderDefinition,
        created: dict[str, str],
        result: ApplicationResult,
    ) -> Folder | None:
        parent_id = None
        if definition.parent_name:
            parent_id = created.get(definition.parent_name)
            if parent_id is None:
                LOGGER.warning(
                    "Parent %r of folder %r was not created in this run; creating at root.",
                    definition.parent_name,
                    definition.name,
                )
        color = definition.color if definition.color != "none" else self._default_color
        try:
            folder = self._catalog.create_folder(definition.name, color, parent_id)
        except CatalogError as exc:
            LOGGER.warning("Creating folder %s failed: %s", definition.name, exc)
            result.errors.append(f'Failed to create folder "{definition.name}": {exc}')
            return None
        result.folders_created += 1
        result.created_folders.append(folder)
        return folder

    def _pool_source(
        self, selected: Optional[Sequence[Asset]]
    ) -> Callable[[set[str]], list[Asset]]:
        if selected is None:

            def _unorganized(_moved: set[str]) -> list[Asset]:
                return [asset for asset in self._catalog.list_assets() if not asset.folder_id]

            return _unorganized

        selected_ids = [asset.id for asset in selected]
        snapshot = list(selected)

        def _selected(moved: set[str]) -> list[Asset]:
            if not moved:
                return snapshot
            current = {asset.id: asset for asset in self._catalog.list_assets()}
            return [
                current[asset_id]
                for asset_id in selected_ids
                if asset_id in current and asset_id not in moved
            ]

        return _selected


__all__ = ["ApplicationResult", "PoolMode", "TemplateEngine"]
