"""Learning data models.

Field aliases match the persisted learning document so existing data loads
unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class LearningModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UserAction(LearningModel):
    """A raw user action, timestamped in epoch milliseconds."""

    action: str
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: int


class FolderPatternRecord(LearningModel):
    """Usage of one user-chosen folder name."""

    keywords: List[str] = Field(default_factory=list)
    usage: int = 0
    last_used: int = Field(default=0, alias="lastUsed")


class AnalysisRecord(LearningModel):
    """A past project analysis."""

    analysis: Dict[str, Any] = Field(default_factory=dict)
    timestamp: int


class LearningData(LearningModel):
    """The persisted learning document."""

    user_actions: List[UserAction] = Field(default_factory=list, alias="userActions")
    folder_patterns: Dict[str, FolderPatternRecord] = Field(
        default_factory=dict, alias="folderPatterns"
    )
    naming_patterns: Dict[str, Any] = Field(default_factory=dict, alias="namingPatterns")
    organization_history: List[AnalysisRecord] = Field(
        default_factory=list, alias="organizationHistory"
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["AnalysisRecord", "FolderPatternRecord", "LearningData", "UserAction"]
