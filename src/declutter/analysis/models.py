"""Analysis result models."""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

UNKNOWN = "unknown"


class AnalysisModel(BaseModel):
    """Shared configuration: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(populate_by_name=True)


class Classification(AnalysisModel):
    """Outcome of project-type detection.

    Attributes:
        archetype: Matched archetype key, or ``unknown``.
        confidence: Heuristic strength in ``[0, 1]``.
        scores: Raw score per archetype key, in declaration order.
    """

    archetype: str = Field(default=UNKNOWN, alias="type")
    confidence: float = 0.0
    scores: Dict[str, int] = Field(default_factory=dict)

    @property
    def is_unknown(self) -> bool:
        return self.archetype == UNKNOWN


class CreateFolderSuggestion(AnalysisModel):
    """Proposal to create a folder and file the listed assets into it."""

    type: Literal["createFolder"] = "createFolder"
    name: str
    reason: str
    matching_assets: List[str] = Field(default_factory=list, alias="matchingAssets")
    confidence: float
    color: str = "blue"
    is_personalized: bool = Field(default=False, alias="isPersonalized")


class NamingImprovementSuggestion(AnalysisModel):
    """Proposal to make asset naming consistent."""

    type: Literal["namingImprovement"] = "namingImprovement"
    title: str
    reason: str
    confidence: float
    actions: List[str] = Field(default_factory=list)


class RedundantWord(AnalysisModel):
    """A word repeated across most asset names."""

    word: str
    frequency: int
    percentage: float


class NamingCleanupSuggestion(AnalysisModel):
    """Proposal to strip words that repeat across most asset names."""

    type: Literal["namingCleanup"] = "namingCleanup"
    title: str
    reason: str
    confidence: float
    patterns: List[RedundantWord] = Field(default_factory=list)


Suggestion = Annotated[
    Union[CreateFolderSuggestion, NamingImprovementSuggestion, NamingCleanupSuggestion],
    Field(discriminator="type"),
]
SUGGESTION_ADAPTER: TypeAdapter[Suggestion] = TypeAdapter(Suggestion)


class AssetBreakdown(AnalysisModel):
    """Asset counts and percentages per type."""

    counts: Dict[str, int] = Field(default_factory=dict)
    percentages: Dict[str, float] = Field(default_factory=dict)
    total: int = 0


class NamingPatterns(AnalysisModel):
    """Percentage of names exhibiting each naming trait."""

    has_numbers: float = Field(default=0.0, alias="hasNumbers")
    has_underscores: float = Field(default=0.0, alias="hasUnderscores")
    has_hyphens: float = Field(default=0.0, alias="hasHyphens")
    has_spaces: float = Field(default=0.0, alias="hasSpaces")
    starts_with_capital: float = Field(default=0.0, alias="startsWithCapital")
    all_caps: float = Field(default=0.0, alias="allCaps")
    camel_case: float = Field(default=0.0, alias="camelCase")


class NamingAnalysis(AnalysisModel):
    """Naming trait percentages, common affixes and the consistency score."""

    patterns: NamingPatterns = Field(default_factory=NamingPatterns)
    common_prefixes: List[Tuple[str, int]] = Field(default_factory=list, alias="commonPrefixes")
    common_suffixes: List[Tuple[str, int]] = Field(default_factory=list, alias="commonSuffixes")
    consistency_score: int = Field(default=100, alias="consistencyScore")


class ProjectAnalysis(AnalysisModel):
    """Full analysis of a project, as presented to the user."""

    project_type: Classification = Field(default_factory=Classification, alias="projectType")
    asset_breakdown: AssetBreakdown = Field(default_factory=AssetBreakdown, alias="assetBreakdown")
    naming_patterns: NamingAnalysis = Field(
        default_factory=NamingAnalysis, alias="namingPatterns"
    )
    suggestions: List[Suggestion] = Field(default_factory=list)
    confidence: float = 0.0


__all__ = [
    "AssetBreakdown",
    "Classification",
    "CreateFolderSuggestion",
    "NamingAnalysis",
    "NamingCleanupSuggestion",
    "NamingImprovementSuggestion",
    "NamingPatterns",
    "ProjectAnalysis",
    "RedundantWord",
    "SUGGESTION_ADAPTER",
    "Suggestion",
    "UNKNOWN",
]
