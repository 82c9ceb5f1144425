"""Project health metrics."""

from __future__ import annotations

import re
from collections import Counter
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .models import Asset, Folder

_DIGITS = re.compile(r"\d+")
_SEPARATORS = re.compile(r"[_\-\s]+")

# Traits checked for health; each one shared by only part of the names costs 15.
HEALTH_NAMING_TRAITS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d"),
    re.compile(r"_"),
    re.compile(r"-"),
    re.compile(r"\s"),
    re.compile(r"^[A-Z]"),
    re.compile(r"^[a-z]"),
)
HEALTH_NAMING_PENALTY = 15
MIXED_LOWER = 0.1
MIXED_UPPER = 0.9


class ProjectHealth(BaseModel):
    """Organization metrics for a project.

    Attributes:
        total_assets: Number of assets.
        total_folders: Number of folders.
        unorganized_assets: Assets sitting at the project root.
        organization_rate: Percentage of assets inside a folder.
        average_folder_depth: Mean nesting depth; top-level folders have depth 1.
        naming_consistency: Naming consistency score (0-100).
        duplicate_risk: Likelihood of duplicate assets (0-100).
        overall_score: Weighted summary score (0-100).
    """

    model_config = ConfigDict(populate_by_name=True)

    total_assets: int = Field(alias="totalAssets")
    total_folders: int = Field(alias="totalFolders")
    unorganized_assets: int = Field(alias="unorganizedAssets")
    organization_rate: float = Field(alias="organizationRate")
    average_folder_depth: float = Field(alias="averageFolderDepth")
    naming_consistency: int = Field(alias="namingConsistency")
    duplicate_risk: float = Field(alias="duplicateRisk")
    overall_score: int = Field(alias="overallScore")


def folder_depth(folder: Folder, folders_by_id: Mapping[str, Folder]) -> int:
    """Return how deeply ``folder`` is nested; top-level folders have depth 1.

    A chain that reaches a missing parent or revisits a folder is dangling
    and counts as depth 1. The walk visits each folder at most once.
    """
    depth = 1
    seen = {folder.id}
    current = folder
    while current.parent_id:
        parent = folders_by_id.get(current.parent_id)
        if parent is None or parent.id in seen:
            return 1
        seen.add(parent.id)
        depth += 1
        current = parent
    return depth


def average_folder_depth(folders: Sequence[Folder]) -> float:
    if not folders:
        return 0.0
    by_id = {folder.id: folder for folder in folders}
    return sum(folder_depth(folder, by_id) for folder in folders) / len(folders)


def naming_consistency(assets: Sequence[Asset]) -> int:
    """Score how uniformly asset names share basic traits, from 0 to 100.

    A trait (digits, underscores, hyphens, whitespace, leading upper or lower
    case letter) found in more than 10% but fewer than 90% of names is mixed.
    """
    if not assets:
        return 100
    score = 100
    for trait in HEALTH_NAMING_TRAITS:
        ratio = sum(1 for asset in assets if trait.search(asset.name)) / len(assets)
        if MIXED_LOWER < ratio < MIXED_UPPER:
            score -= HEALTH_NAMING_PENALTY
    return max(0, score)


def duplicate_risk(assets: Sequence[Asset]) -> float:
    """Estimate duplicate risk from repeated name stems and identical sizes."""
    if not assets:
        return 0.0
    stems = Counter(_SEPARATORS.sub("", _DIGITS.sub("", asset.name)) for asset in assets)
    sizes = Counter(asset.size for asset in assets)
    conflicts = sum(1 for count in stems.values() if count > 1)
    conflicts += sum(1 for count in sizes.values() if count > 1)
    return min(100.0, conflicts / len(assets) * 100)


def project_health(assets: Sequence[Asset], folders: Sequence[Folder]) -> ProjectHealth:
    """Compute health metrics and the weighted overall score.

    Weights: organization rate 40%, naming consistency 30%, inverse duplicate
    risk 20%, folder depth 10%.
    """
    unorganized = sum(1 for asset in assets if not asset.folder_id)
    rate = (len(assets) - unorganized) / len(assets) * 100 if assets else 100.0
    depth = average_folder_depth(folders)
    naming = naming_consistency(assets)
    risk = duplicate_risk(assets)

    score = rate * 0.4
    score += min(naming, 100) * 0.3
    score += max(0.0, 100 - risk) * 0.2
    score += min(depth * 20, 100) * 0.1

    return ProjectHealth(
        total_assets=len(assets),
        total_folders=len(folders),
        unorganized_assets=unorganized,
        organization_rate=rate,
        average_folder_depth=depth,
        naming_consistency=naming,
        duplicate_risk=risk,
        overall_score=round(score),
    )


__all__ = [
    "ProjectHealth",
    "average_folder_depth",
    "duplicate_risk",
    "folder_depth",
    "naming_consistency",
    "project_health",
]
