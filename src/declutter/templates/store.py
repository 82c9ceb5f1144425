"""Template store: built-in and user templates, CRUD and usage counters."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from declutter.state import PersistenceError, StateRepository

from .builtin import built_in_templates
from .errors import TemplateValidationError
from .models import Template, parse_folders, validate_template_payload

LOGGER = logging.getLogger(__name__)

EXPORTED_BY = "Declutter"
_PROTECTED_FIELDS = ("id", "category", "created")


class TemplateUsage(BaseModel):
    """Usage counters for one template."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    category: str
    usage_count: int = Field(default=0, alias="usageCount")
    last_used: Optional[datetime] = Field(default=None, alias="lastUsed")


def generate_template_id() -> str:
    """Return a new unique user template identifier."""
    stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"template_{stamp}_{uuid.uuid4().hex[:9]}"


class TemplateStore:
    """Hold built-in and user templates.

    Mutating operations return ``None``/``False`` when they cannot be carried
    out instead of raising; callers must check the return value. User
    templates and usage counters are written through ``repository`` when one
    is supplied; persistence failures are logged and ignored.
    """

    def __init__(self, repository: StateRepository | None = None) -> None:
        self._repository = repository
        self._built_in = {template.id: template for template in built_in_templates()}
        self._templates: dict[str, Template] = {}
        self._usage: dict[str, dict[str, Any]] = {}
        self._active_id: str | None = None
        self._load()

    # Queries ----------------------------------------------------------

    def get(self, template_id: str) -> Template | None:
        """Return a copy of the template with ``template_id``, if any."""
        template = self._built_in.get(template_id) or self._templates.get(template_id)
        return template.model_copy(deep=True) if template is not None else None

    def list_templates(self) -> list[Template]:
        """Return every template: built-ins first, then by name."""
        templates = [*self._built_in.values(), *self._templates.values()]
        ordered = sorted(
            templates, key=lambda item: (not item.is_built_in, item.name.casefold())
        )
        return [template.model_copy(deep=True) for template in ordered]

    def search(
        self,
        query: str = "",
        *,
        category: str | None = None,
        author: str | None = None,
    ) -> list[Template]:
        """Return templates whose name, description or author contains ``query``."""
        templates = self.list_templates()
        term = query.strip().lower()
        if term:
            templates = [
                template
                for template in templates
                if term in template.name.lower()
                or term in template.description.lower()
                or term in template.author.lower()
            ]
        if category:
            templates = [template for template in templates if template.category == category]
        if author:
            templates = [template for template in templates if template.author == author]
        return templates

    def categories(self) -> list[str]:
        return list(dict.fromkeys(template.category for template in self.list_templates()))

    def authors(self) -> list[str]:
        return list(dict.fromkeys(template.author for template in self.list_templates()))

    # CRUD -------------------------------------------------------------

    def create(self, data: Mapping[str, Any]) -> Template | None:
        """Create a user template from ``data``.

        Returns:
            Template | None: The new template, or ``None`` if ``data`` is invalid.
        """
        payload = {"name": "Untitled Template", "folders": [], **dict(data)}
        try:
            validate_template_payload(payload)
            now = datetime.now(timezone.utc)
            template = Template(
                id=generate_template_id(),
                name=payload["name"],
                description=payload.get("description") or "",
                category="user",
                author="User",
                folders=parse_folders(payload["folders"]),
                created=now,
                modified=now,
            )
        except (TemplateValidationError, ValidationError) as exc:
            LOGGER.warning("Rejected template: %s", exc)
            return None

        self._templates[template.id] = template
        self._save_templates()
        return template.model_copy(deep=True)

    def update(self, template_id: str, updates: Mapping[str, Any]) -> Template | None:
        """Apply ``updates`` to a user template.

        Identifier, category and creation date are preserved. Built-in
        templates cannot be updated.
        """
        template = self._templates.get(template_id)
        if template is None or template.is_built_in:
            return None

        payload = template.model_dump(mode="python", by_alias=True)
        payload.update(
            {key: value for key, value in updates.items() if key not in _PROTECTED_FIELDS}
        )
        payload["modified"] = datetime.now(timezone.utc)
        if "folders" in updates:
            raw_folders = updates["folders"]
        else:
            raw_folders = [folder.model_dump(by_alias=True) for folder in template.folders]
        try:
            validate_template_payload({**payload, "folders": raw_folders})
            payload["folders"] = parse_folders(raw_folders)
            updated = Template.model_validate(payload)
        except (TemplateValidationError, ValidationError) as exc:
            LOGGER.warning("Rejected update to template %s: %s", template_id, exc)
            return None

        self._templates[template_id] = updated
        self._save_templates()
        return updated.model_copy(deep=True)

    def delete(self, template_id: str) -> bool:
        """Delete a user template; built-ins cannot be deleted."""
        template = self._templates.get(template_id)
        if template is None or template.is_built_in:
            return False
        del self._templates[template_id]
        if self._active_id == template_id:
            self._active_id = None
        self._save_templates()
        return True

    def duplicate(self, template_id: str, new_name: str | None = None) -> Template | None:
        """Copy any template into a new user template."""
        original = self.get(template_id)
        if original is None:
            return None
        now = datetime.now(timezone.utc)
        duplicate = original.model_copy(
            update={
                "id": generate_template_id(),
                "name": new_name or f"{original.name} Copy",
                "category": "user",
                "author": "User",
                "created": now,
                "modified": now,
            },
            deep=True,
        )
        self._templates[duplicate.id] = duplicate
        self._save_templates()
        return duplicate.model_copy(deep=True)

    def export(self, template_id: str) -> str | None:
        """Serialize a template to JSON for sharing."""
        template = self._built_in.get(template_id) or self._templates.get(template_id)
        if template is None:
            return None
        payload = template.to_payload()
        payload["exportedAt"] = datetime.now(timezone.utc).isoformat()
        payload["exportedBy"] = EXPORTED_BY
        return json.dumps(payload, indent=2)

    def import_template(self, json_data: str) -> Template | None:
        """Create a user template from exported JSON.

        Returns:
            Template | None: The imported template, or ``None`` when the JSON
            is malformed or fails validation.
        """
        try:
            data = json.loads(json_data)
            validate_template_payload(data)
            now = datetime.now(timezone.utc)
            template = Template(
                id=generate_template_id(),
                name=data["name"],
                description=data.get("description") or "",
                category="user",
                version=str(data.get("version") or "1.0"),
                author=data.get("author") or "Unknown",
                folders=parse_folders(data["folders"]),
                created=now,
                modified=now,
                imported=True,
                imported_from=data.get("exportedBy") or "Unknown",
            )
        except (json.JSONDecodeError, TemplateValidationError, ValidationError) as exc:
            LOGGER.error("Failed to import template: %s", exc)
            return None

        self._templates[template.id] = template
        self._save_templates()
        return template.model_copy(deep=True)

    # Active template --------------------------------------------------

    def set_active(self, template_id: str) -> bool:
        if self.get(template_id) is None:
            return False
        self._active_id = template_id
        return True

    def active(self) -> Template | None:
        return self.get(self._active_id) if self._active_id else None

    def clear_active(self) -> None:
        self._active_id = None

    # Usage ------------------------------------------------------------

    def record_usage(self, template_id: str) -> None:
        """Count one application of ``template_id``."""
        entry = self._usage.setdefault(template_id, {"count": 0, "lastUsed": None})
        entry["count"] = int(entry.get("count", 0)) + 1
        entry["lastUsed"] = datetime.now(timezone.utc).isoformat()
        self._save_usage()

    def usage_statistics(self) -> list[TemplateUsage]:
        """Return usage counters for every template, most used first."""
        stats = []
        for template in self.list_templates():
            entry = self._usage.get(template.id, {})
            stats.append(
                TemplateUsage(
                    id=template.id,
                    name=template.name,
                    category=template.category,
                    usage_count=int(entry.get("count", 0)),
                    last_used=entry.get("lastUsed"),
                )
            )
        return sorted(stats, key=lambda item: item.usage_count, reverse=True)

    # Persistence ------------------------------------------------------

    def _load(self) -> None:
        if self._repository is None:
            return
        try:
            raw_templates = self._repository.load_templates()
            usage = self._repository.load_analytics().get("templateUsage", {})
        except PersistenceError as exc:
            LOGGER.warning("Failed to load user templates: %s", exc)
            return

        for raw in raw_templates:
            try:
                template = Template.model_validate(raw)
            except ValidationError as exc:
                LOGGER.warning("Skipping unreadable stored template: %s", exc)
                continue
            if template.is_built_in or template.id in self._built_in:
                continue
            self._templates[template.id] = template
        if isinstance(usage, dict):
            self._usage = {
                key: value for key, value in usage.items() if isinstance(value, dict)
            }

    def _save_templates(self) -> None:
        if self._repository is None:
            return
        payload = [template.to_payload() for template in self._templates.values()]
        try:
            self._repository.save_templates(payload)
        except PersistenceError as exc:
            LOGGER.warning("Failed to save user templates: %s", exc)

    def _save_usage(self) -> None:
        if self._repository is None:
            return
        try:
            analytics = self._repository.load_analytics()
            analytics["templateUsage"] = self._usage
            self._repository.save_analytics(analytics)
        except PersistenceError as exc:
            LOGGER.warning("Failed to save template usage: %s", exc)


__all__ = ["EXPORTED_BY", "TemplateStore", "TemplateUsage", "generate_template_id"]
