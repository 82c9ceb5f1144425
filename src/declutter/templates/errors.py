"""Template errors."""


class TemplateError(Exception):
    """Base exception for template operations."""


class TemplateValidationError(TemplateError):
    """Raised when a template or import payload is malformed."""


class TemplateNotFoundError(TemplateError):
    """Raised when a template identifier cannot be resolved."""


class ApplicationInProgressError(TemplateError):
    """Raised when a template application starts while another is running."""
