"""Domain exceptions for the food catalog."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class NotFoundError(CatalogError, LookupError):
    """Requested food does not exist."""


class ValidationError(CatalogError, ValueError):
    """Input rejected before touching the catalog."""


class DuplicateFoodError(CatalogError, ValueError):
    """A food with the same name already exists."""


class StoreError(CatalogError, RuntimeError):
    """Durable store failed to complete an operation."""
