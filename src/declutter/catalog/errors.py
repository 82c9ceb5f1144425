"""Asset catalog errors."""


class CatalogError(Exception):
    """Base exception for asset catalog operations."""


class HostOperationError(CatalogError):
    """Raised when the host rejects a folder or asset mutation."""


class DuplicateNameError(HostOperationError):
    """Raised when a folder with the same name already exists under the parent."""


class MissingProjectError(CatalogError):
    """Raised when a project snapshot cannot be located."""
