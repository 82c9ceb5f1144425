"""Asset catalog abstractions over the host project."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Protocol, Sequence

from pydantic import ValidationError

from .errors import CatalogError, DuplicateNameError, HostOperationError, MissingProjectError
from .models import ASSET_TYPES, Asset, Folder, ProjectSnapshot

LOGGER = logging.getLogger(__name__)

_NUMERIC_SUFFIX = re.compile(r"_(\d+)$")


class AssetCatalog(Protocol):
    """Primitives the core consumes from the host project."""

    def list_assets(self) -> list[Asset]: ...

    def list_folders(self) -> list[Folder]: ...

    def create_folder(
        self, name: str, color: str = "none", parent_id: Optional[str] = None
    ) -> Folder: ...

    def move_assets(self, asset_ids: Sequence[str], folder_id: Optional[str]) -> bool: ...


class ProjectCatalog:
    """In-memory asset catalog backed by a project snapshot.

    Mirrors the behavior of the host bridge: folders receive ``folder_<n>``
    identifiers, sibling folders may not share a name, and moves silently skip
    asset identifiers that are no longer present.
    """

    def __init__(self, snapshot: ProjectSnapshot | None = None) -> None:
        snapshot = snapshot or ProjectSnapshot()
        self._name = snapshot.name
        self._assets: dict[str, Asset] = {asset.id: asset.model_copy() for asset in snapshot.assets}
        self._folders: dict[str, Folder] = {
            folder.id: folder.model_copy() for folder in snapshot.folders
        }
        self._next_folder = self._seed_counter(self._folders)

    @classmethod
    def from_file(cls, path: Path) -> "ProjectCatalog":
        """Load a catalog from a JSON project snapshot.

        Raises:
            MissingProjectError: If the snapshot file does not exist.
            CatalogError: If the snapshot cannot be parsed or validated.
        """
        if not path.exists():
            raise MissingProjectError(f"No project snapshot found at {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Invalid project snapshot: {exc}") from exc
        if isinstance(data, dict) and "error" in data:
            raise CatalogError(f"Host reported an error: {data['error']}")
        try:
            return cls(ProjectSnapshot.model_validate(data))
        except ValidationError as exc:
            raise CatalogError(f"Invalid project snapshot: {exc}") from exc

    @property
    def name(self) -> str:
        return self._name

    def snapshot(self) -> ProjectSnapshot:
        """Return the current catalog contents as a snapshot."""
        return ProjectSnapshot(
            name=self._name,
            assets=self.list_assets(),
            folders=self.list_folders(),
        )

    def save(self, path: Path) -> None:
        """Write the catalog back to a JSON project snapshot."""
        payload = self.snapshot().model_dump(mode="json", by_alias=True)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Queries ----------------------------------------------------------

    def list_assets(self) -> list[Asset]:
        return [asset.model_copy() for asset in self._assets.values()]

    def list_folders(self) -> list[Folder]:
        return [folder.model_copy() for folder in self._folders.values()]

    def get_asset(self, asset_id: str) -> Asset | None:
        asset = self._assets.get(asset_id)
        return asset.model_copy() if asset is not None else None

    def get_folder(self, folder_id: str) -> Folder | None:
        folder = self._folders.get(folder_id)
        return folder.model_copy() if folder is not None else None

    def assets_by_type(self, asset_type: str) -> list[Asset]:
        return [asset for asset in self.list_assets() if asset.type == asset_type]

    def unorganized_assets(self) -> list[Asset]:
        """Return assets that sit at the project root."""
        return [asset for asset in self.list_assets() if not asset.folder_id]

    # Mutations --------------------------------------------------------

    def create_folder(
        self, name: str, color: str = "none", parent_id: Optional[str] = None
    ) -> Folder:
        """Create a folder, optionally nested under ``parent_id``.

        Raises:
            HostOperationError: If the name is blank or the parent is unknown.
            DuplicateNameError: If a sibling folder already uses the name.
        """
        cleaned = name.strip()
        if not cleaned:
            raise HostOperationError("Folder name must not be empty")
        if parent_id is not None and parent_id not in self._folders:
            raise HostOperationError(f"Parent folder not found: {parent_id}")
        lowered = cleaned.lower()
        for existing in self._folders.values():
            if existing.parent_id == parent_id and existing.name.lower() == lowered:
                raise DuplicateNameError(f'A folder named "{existing.name}" already exists')

        folder = Folder(
            id=f"folder_{self._next_folder}",
            name=cleaned,
            color=color or "none",
            parent_id=parent_id,
            created_at=datetime.now(timezone.utc),
        )
        self._next_folder += 1
        self._folders[folder.id] = folder
        LOGGER.debug("Created folder %s (%s) under %s", folder.name, folder.id, parent_id)
        return folder.model_copy()

    def move_assets(self, asset_ids: Sequence[str], folder_id: Optional[str]) -> bool:
        """Move assets into ``folder_id`` (``None`` moves them to the root).

        Raises:
            HostOperationError: If the target folder does not exist.
        """
        if not asset_ids:
            return True
        if folder_id is not None and folder_id not in self._folders:
            raise HostOperationError("Target folder not found")
        for asset_id in asset_ids:
            asset = self._assets.get(asset_id)
            if asset is not None:
                asset.folder_id = folder_id
        return True

    def rename_folder(self, folder_id: str, new_name: str) -> bool:
        folder = self._require_folder(folder_id)
        cleaned = new_name.strip()
        if not cleaned:
            raise HostOperationError("Folder name must not be empty")
        for other in self._folders.values():
            if (
                other.id != folder_id
                and other.parent_id == folder.parent_id
                and other.name.lower() == cleaned.lower()
            ):
                raise DuplicateNameError(f'A folder named "{other.name}" already exists')
        folder.name = cleaned
        return True

    def set_folder_color(self, folder_id: str, color: str) -> bool:
        self._require_folder(folder_id).color = color
        return True

    def delete_folder(self, folder_id: str, move_assets_to_parent: bool = True) -> bool:
        """Delete a folder.

        When ``move_assets_to_parent`` is set, contained assets and subfolders
        are reparented; otherwise the folder is removed with its contents.
        """
        folder = self._require_folder(folder_id)
        if move_assets_to_parent:
            for asset in self._assets.values():
                if asset.folder_id == folder_id:
                    asset.folder_id = folder.parent_id
            for child in self._folders.values():
                if child.parent_id == folder_id:
                    child.parent_id = folder.parent_id
            del self._folders[folder_id]
            return True

        doomed = self._subtree(folder_id)
        for asset_id in [a.id for a in self._assets.values() if a.folder_id in doomed]:
            del self._assets[asset_id]
        for doomed_id in doomed:
            self._folders.pop(doomed_id, None)
        return True

    # Internal helpers -------------------------------------------------

    def _require_folder(self, folder_id: str) -> Folder:
        folder = self._folders.get(folder_id)
        if folder is None:
            raise HostOperationError("Folder not found")
        return folder

    def _subtree(self, folder_id: str) -> set[str]:
        collected = {folder_id}
        frontier = [folder_id]
        while frontier:
            current = frontier.pop()
            for child in self._folders.values():
                if child.parent_id == current and child.id not in collected:
                    collected.add(child.id)
                    frontier.append(child.id)
        return collected

    @staticmethod
    def _seed_counter(folders: dict[str, Folder]) -> int:
        highest = 0
        for folder_id in folders:
            match = _NUMERIC_SUFFIX.search(folder_id)
            if match:
                highest = max(highest, int(match.group(1)))
        return highest + 1


def existing_asset_ids(catalog: AssetCatalog, candidate_ids: Iterable[str]) -> list[str]:
    """Filter ``candidate_ids`` down to the assets currently in ``catalog``."""
    present = {asset.id for asset in catalog.list_assets()}
    return [asset_id for asset_id in dict.fromkeys(candidate_ids) if asset_id in present]


__all__ = [
    "ASSET_TYPES",
    "Asset",
    "AssetCatalog",
    "CatalogError",
    "DuplicateNameError",
    "Folder",
    "HostOperationError",
    "MissingProjectError",
    "ProjectCatalog",
    "ProjectSnapshot",
    "existing_asset_ids",
]
