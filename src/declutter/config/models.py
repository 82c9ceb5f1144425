"""Configuration models describing Declutter settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class DeclutterBaseModel(BaseModel):
    """Shared configuration for Declutter settings models."""

    model_config = ConfigDict(extra="forbid")


class AnalysisSettings(DeclutterBaseModel):
    """Options governing project analysis.

    Attributes:
        enabled: Whether AI-assisted suggestions are produced at all.
        confidence_floor: Classification confidence that must be exceeded
            before an archetype is reported instead of ``unknown``.
        include_personalized: Whether learned suggestions are appended to
            analysis results.
    """

    enabled: bool = True
    confidence_floor: float = Field(default=0.3, ge=0.0, le=1.0)
    include_personalized: bool = True


class TemplateSettings(DeclutterBaseModel):
    """Options governing template application.

    Attributes:
        pool_mode: ``snapshot`` evaluates every folder definition against the
            asset pool captured before the template starts; ``live`` re-queries
            the catalog after each move so filed assets drop out of the pool.
        default_color: Label color used when a folder definition omits one.
    """

    pool_mode: Literal["snapshot", "live"] = "snapshot"
    default_color: str = "none"


class LearningSettings(DeclutterBaseModel):
    """Retention limits for learning data.

    Attributes:
        max_user_actions: Raw action count that triggers trimming.
        trimmed_user_actions: Number of most recent actions kept after trimming.
        max_history: Analysis history count that triggers trimming.
        trimmed_history: Number of most recent analyses kept after trimming.
        max_folder_patterns: Distinct learned folder names retained (LRU).
        personalize_min_usage: Usage count a pattern must exceed to be suggested.
    """

    max_user_actions: int = 1_000
    trimmed_user_actions: int = 500
    max_history: int = 100
    trimmed_history: int = 50
    max_folder_patterns: int = 200
    personalize_min_usage: int = 2


class LoggingSettings(DeclutterBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(DeclutterBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
    """

    quiet_default: bool = False


class DeclutterConfig(DeclutterBaseModel):
    """Top-level configuration struct for Declutter.

    Attributes:
        analysis: Project analysis settings.
        templates: Template application settings.
        learning: Learning store retention settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
        state_dir: Directory holding learning, template and analytics data.
    """

    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    templates: TemplateSettings = Field(default_factory=TemplateSettings)
    learning: LearningSettings = Field(default_factory=LearningSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)
    state_dir: str = "~/.declutter"


__all__ = [
    "DeclutterBaseModel",
    "AnalysisSettings",
    "TemplateSettings",
    "LearningSettings",
    "LoggingSettings",
    "CLIOptions",
    "DeclutterConfig",
]
