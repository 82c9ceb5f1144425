"""Pattern library of project archetypes."""

from __future__ import annotations

from typing import Iterator, Tuple

from pydantic import BaseModel, ConfigDict, Field

PATTERN_LIBRARY_VERSION = "1.0"


class FolderPattern(BaseModel):
    """A folder an archetype expects, with the keywords that identify its assets."""

    model_config = ConfigDict(frozen=True)

    name: str
    keywords: Tuple[str, ...]


class Archetype(BaseModel):
    """A named project type used to classify a collection of assets.

    Attributes:
        key: Stable identifier reported by classification.
        folders: Ordered folder patterns; keyword order is significant.
        confidence: Baseline confidence for the archetype.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    folders: Tuple[FolderPattern, ...]
    confidence: float = Field(ge=0.0, le=1.0)


def _archetype(key: str, confidence: float, *folders: tuple[str, tuple[str, ...]]) -> Archetype:
    return Archetype(
        key=key,
        confidence=confidence,
        folders=tuple(FolderPattern(name=name, keywords=keywords) for name, keywords in folders),
    )


DEFAULT_ARCHETYPES: Tuple[Archetype, ...] = (
    _archetype(
        "documentary",
        0.9,
        ("Interviews", ("interview", "subject", "talking", "head")),
        ("B-Roll", ("b-roll", "broll", "cutaway", "establishing")),
        ("Archival", ("archive", "historical", "old", "vintage")),
        ("Music", ("music", "soundtrack", "score", "audio")),
        ("Graphics", ("title", "graphic", "logo", "text")),
    ),
    _archetype(
        "corporate",
        0.85,
        ("Talking Heads", ("ceo", "executive", "interview", "testimonial")),
        ("Product Shots", ("product", "demo", "showcase")),
        ("Office B-Roll", ("office", "workplace", "meeting", "team")),
        ("Branding", ("logo", "brand", "identity", "corporate")),
        ("Music & SFX", ("music", "sound", "audio", "sfx")),
    ),
    _archetype(
        "wedding",
        0.8,
        ("Ceremony", ("ceremony", "vows", "altar", "church")),
        ("Reception", ("reception", "party", "dance", "dinner")),
        ("Portraits", ("portrait", "couple", "family", "group")),
        ("Details", ("ring", "dress", "flowers", "decoration")),
        ("Music", ("music", "song", "audio", "soundtrack")),
    ),
    _archetype(
        "music_video",
        0.75,
        ("Performance", ("performance", "band", "singing", "playing")),
        ("Narrative", ("story", "narrative", "acting", "scene")),
        ("Abstract", ("abstract", "artistic", "creative", "experimental")),
        ("Audio", ("track", "music", "audio", "song")),
        ("Effects", ("effect", "vfx", "motion", "graphics")),
    ),
)


class PatternLibrary:
    """Ordered, read-only collection of archetypes.

    Iteration follows declaration order, which classification relies on to
    break ties.
    """

    def __init__(
        self,
        archetypes: Tuple[Archetype, ...] = DEFAULT_ARCHETYPES,
        *,
        version: str = PATTERN_LIBRARY_VERSION,
    ) -> None:
        keys = [archetype.key for archetype in archetypes]
        if len(set(keys)) != len(keys):
            raise ValueError("Archetype keys must be unique.")
        self._archetypes = {archetype.key: archetype for archetype in archetypes}
        self._version = version

    @property
    def version(self) -> str:
        return self._version

    def __iter__(self) -> Iterator[Archetype]:
        return iter(self._archetypes.values())

    def __len__(self) -> int:
        return len(self._archetypes)

    def __contains__(self, key: object) -> bool:
        return key in self._archetypes

    def keys(self) -> list[str]:
        return list(self._archetypes)

    def get(self, key: str) -> Archetype | None:
        return self._archetypes.get(key)


__all__ = [
    "Archetype",
    "DEFAULT_ARCHETYPES",
    "FolderPattern",
    "PATTERN_LIBRARY_VERSION",
    "PatternLibrary",
]
