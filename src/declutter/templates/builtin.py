"""Built-in folder templates."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .models import Template

BUILT_IN_AUTHOR = "Declutter"
_RELEASED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _folder(
    name: str, color: str, parent: str | None, *filters: tuple[str, str, str]
) -> dict[str, Any]:
    return {
        "name": name,
        "color": color,
        "parent": parent,
        "filters": [
            {"type": kind, "operator": operator, "value": value}
            for kind, operator, value in filters
        ],
    }


def _name(value: str) -> tuple[str, str, str]:
    return ("name", "contains", value)


def _tag(value: str) -> tuple[str, str, str]:
    return ("tag", "contains", value)


def _type(value: str) -> tuple[str, str, str]:
    return ("type", "=", value)


_BUILT_IN_PAYLOADS: tuple[dict[str, Any], ...] = (
    {
        "id": "documentary",
        "name": "Documentary",
        "description": "Standard structure for documentary projects",
        "folders": [
            _folder("Raw Footage", "blue", None, _type("footage")),
            _folder("Interviews", "red", "Raw Footage", _name("interview"), _tag("interview")),
            _folder(
                "B-Roll", "blue", "Raw Footage", _name("b-roll"), _name("broll"), _tag("b-roll")
            ),
            _folder(
                "Archival",
                "brown",
                "Raw Footage",
                _name("archive"),
                _name("historical"),
                _tag("archival"),
            ),
            _folder("Audio", "green", None, _type("audio")),
            _folder("Music", "green", "Audio", _name("music"), _name("soundtrack"), _tag("music")),
            _folder("SFX", "green", "Audio", _name("sfx"), _name("sound"), _tag("sfx")),
        ],
    },
    {
        "id": "corporate",
        "name": "Corporate Video",
        "description": "Professional structure for corporate videos",
        "folders": [
            _folder(
                "Interviews",
                "red",
                None,
                _name("interview"),
                _name("testimonial"),
                _name("talking"),
            ),
            _folder(
                "Product Shots", "yellow", None, _name("product"), _name("demo"), _tag("product")
            ),
            _folder(
                "Office B-Roll", "blue", None, _name("office"), _name("workplace"), _name("meeting")
            ),
            _folder("Graphics", "orange", None, _type("image"), _name("logo"), _name("graphic")),
            _folder("Audio", "green", None, _type("audio")),
        ],
    },
    {
        "id": "wedding",
        "name": "Wedding",
        "description": "Romantic structure for wedding videos",
        "folders": [
            _folder("Ceremony", "red", None, _name("ceremony"), _name("vows"), _name("altar")),
            _folder(
                "Reception", "yellow", None, _name("reception"), _name("party"), _name("dance")
            ),
            _folder(
                "Portraits", "purple", None, _name("portrait"), _name("couple"), _name("family")
            ),
            _folder("Details", "orange", None, _name("ring"), _name("dress"), _name("flowers")),
            _folder("Audio", "green", None, _type("audio")),
        ],
    },
    {
        "id": "music_video",
        "name": "Music Video",
        "description": "Creative structure for music videos",
        "folders": [
            _folder(
                "Performance", "red", None, _name("performance"), _name("band"), _name("singing")
            ),
            _folder("Narrative", "blue", None, _name("story"), _name("narrative"), _name("scene")),
            _folder(
                "Abstract", "purple", None, _name("abstract"), _name("artistic"), _name("creative")
            ),
            _folder("Audio", "green", None, _type("audio")),
        ],
    },
)


def built_in_templates() -> list[Template]:
    """Return fresh copies of the built-in templates."""
    return [
        Template.model_validate(
            {
                **payload,
                "category": "built-in",
                "version": "1.0",
                "author": BUILT_IN_AUTHOR,
                "created": _RELEASED,
                "modified": _RELEASED,
            }
        )
        for payload in _BUILT_IN_PAYLOADS
    ]


__all__ = ["BUILT_IN_AUTHOR", "built_in_templates"]
