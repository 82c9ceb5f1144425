"""Data models describing host project contents."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

AssetType = Literal["footage", "audio", "image", "composition", "other"]
ASSET_TYPES: tuple[str, ...] = ("footage", "audio", "image", "composition", "other")


class CatalogModel(BaseModel):
    """Shared configuration for host payloads.

    Host payloads use camelCase field names and may carry keys we do not model
    (frame rate, sample rate, ...), so unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Asset(CatalogModel):
    """A media item tracked by the host project.

    Attributes:
        id: Host identifier (``asset_<n>``).
        name: Display name including extension.
        type: Normalized asset kind; unknown host kinds become ``other``.
        size: Size in bytes.
        duration: Duration in seconds for time-based media.
        width: Pixel width when known.
        height: Pixel height when known.
        tags: User tags attached to the asset.
        folder_id: Identifier of the containing folder, ``None`` at the root.
    """

    id: str
    name: str
    type: AssetType = "other"
    size: int = 0
    duration: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    folder_id: Optional[str] = Field(default=None, alias="folder")

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: object) -> str:
        if isinstance(value, str) and value in ASSET_TYPES:
            return value
        return "other"

    @field_validator("size", mode="before")
    @classmethod
    def _coerce_size(cls, value: object) -> int:
        if value is None:
            return 0
        return int(value)  # type: ignore[arg-type]

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: object) -> object:
        if isinstance(value, (list, tuple, set)):
            return list(dict.fromkeys(str(tag) for tag in value))
        return value

    @property
    def lowered_tags(self) -> set[str]:
        """Return the tag set lowercased for keyword matching."""
        return {tag.lower() for tag in self.tags}


class Folder(CatalogModel):
    """A folder item in the host project.

    The parent chain is not guaranteed to be acyclic or complete.
    """

    id: str
    name: str
    color: str = "none"
    parent_id: Optional[str] = Field(default=None, alias="parent")
    created_at: Optional[datetime] = Field(default=None, alias="created")


class ProjectSnapshot(CatalogModel):
    """Serialized host project, as emitted by the host bridge."""

    name: str = "Untitled Project"
    assets: List[Asset] = Field(default_factory=list)
    folders: List[Folder] = Field(default_factory=list)


__all__ = ["ASSET_TYPES", "Asset", "AssetType", "Folder", "ProjectSnapshot"]
