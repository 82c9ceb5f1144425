"""Project analysis: classification, naming analysis and suggestions."""

from .classifier import ProjectClassifier
from .models import (
    UNKNOWN,
    AssetBreakdown,
    Classification,
    CreateFolderSuggestion,
    NamingAnalysis,
    NamingCleanupSuggestion,
    NamingImprovementSuggestion,
    ProjectAnalysis,
    Suggestion,
)
from .suggestions import SuggestionGenerator

__all__ = [
    "AssetBreakdown",
    "Classification",
    "CreateFolderSuggestion",
    "NamingAnalysis",
    "NamingCleanupSuggestion",
    "NamingImprovementSuggestion",
    "ProjectAnalysis",
    "ProjectClassifier",
    "Suggestion",
    "SuggestionGenerator",
    "UNKNOWN",
]
