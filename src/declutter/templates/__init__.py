"""Folder templates: models, filters, built-ins, storage and application."""

from .engine import ApplicationResult, TemplateEngine
from .errors import (
    ApplicationInProgressError,
    TemplateError,
    TemplateNotFoundError,
    TemplateValidationError,
)
from .models import Filter, FolderDefinition, Template
from .service import TemplateService
from .store import TemplateStore, TemplateUsage

__all__ = [
    "ApplicationInProgressError",
    "ApplicationResult",
    "Filter",
    "FolderDefinition",
    "Template",
    "TemplateEngine",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateService",
    "TemplateStore",
    "TemplateUsage",
    "TemplateValidationError",
]
