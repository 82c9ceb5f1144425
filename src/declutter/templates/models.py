"""Template data models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import TemplateValidationError

TemplateCategory = Literal["built-in", "user"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TemplateModel(BaseModel):
    """Shared configuration: snake_case attributes, original JSON field names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Filter(TemplateModel):
    """Predicate over one asset attribute.

    Attributes:
        type: Attribute inspected: ``name``, ``type``, ``size``, ``duration`` or ``tag``.
        operator: Comparison operator (``contains``, ``=``, ``>``, ``<``, ``>=``, ``<=``...).
        value: Comparison value; sizes carry a unit suffix such as ``100MB``.
    """

    type: str
    operator: str = "contains"
    value: Union[str, int, float] = ""


class FolderDefinition(TemplateModel):
    """Declarative description of one folder a template creates.

    Attributes:
        name: Folder name.
        color: Label color name.
        parent_name: Name of a folder defined earlier in the same template.
        filters: Filters selecting assets for the folder; any match includes an asset.
    """

    name: str
    color: str = "none"
    parent_name: Optional[str] = Field(default=None, alias="parent")
    filters: List[Filter] = Field(default_factory=list)


class Template(TemplateModel):
    """Named, ordered set of folder definitions."""

    id: str
    name: str
    description: str = ""
    category: TemplateCategory = "user"
    version: str = "1.0"
    author: str = "User"
    folders: List[FolderDefinition] = Field(default_factory=list)
    created: datetime = Field(default_factory=_now)
    modified: datetime = Field(default_factory=_now)
    imported: bool = False
    imported_from: Optional[str] = Field(default=None, alias="importedFrom")

    @property
    def is_built_in(self) -> bool:
        return self.category == "built-in"

    def to_payload(self) -> dict[str, Any]:
        """Serialize using the persisted field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_template_payload(payload: Any) -> None:
    """Check the structural shape of a template payload.

    Raises:
        TemplateValidationError: If the name is missing, ``folders`` is not a
            list, a folder lacks a name, or a folder's ``filters`` is not a list.
    """
    if not isinstance(payload, dict):
        raise TemplateValidationError("Template payload must be an object.")
    name = payload.get("name")
    if not name or not isinstance(name, str):
        raise TemplateValidationError("Template name is required.")
    folders = payload.get("folders")
    if not isinstance(folders, list):
        raise TemplateValidationError("Template folders must be a list.")
    for index, folder in enumerate(folders):
        if not isinstance(folder, dict):
            raise TemplateValidationError(f"Folder #{index + 1} must be an object.")
        folder_name = folder.get("name")
        if not folder_name or not isinstance(folder_name, str):
            raise TemplateValidationError(f"Folder #{index + 1} requires a name.")
        filters = folder.get("filters")
        if filters is not None and not isinstance(filters, list):
            raise TemplateValidationError(f'Filters for folder "{folder_name}" must be a list.')


def parse_folders(payload: list[Any]) -> list[FolderDefinition]:
    """Build folder definitions from raw payload entries.

    Raises:
        TemplateValidationError: If an entry does not fit the folder definition shape.
    """
    try:
        return [FolderDefinition.model_validate(entry) for entry in payload]
    except ValidationError as exc:
        raise TemplateValidationError(f"Invalid folder definition: {exc}") from exc


__all__ = [
    "Filter",
    "FolderDefinition",
    "Template",
    "TemplateCategory",
    "parse_folders",
    "validate_template_payload",
]
