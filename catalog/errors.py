class CatalogError(Exception):
    """Base class for catalog errors."""


class InvalidFormatError(CatalogError, ValueError):
    """Raised when operator input does not match the expected format."""


class NotFoundError(CatalogError, LookupError):
    """Raised when an id has no matching record."""


class StateConflictError(CatalogError):
    """Raised on checkout of a checked-out book or return of an in-stock book."""


class PersistenceError(CatalogError):
    """Raised when the inventory file cannot be written or decoded."""
