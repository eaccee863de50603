"""Error types raised by the listing services."""


class ListingsError(Exception):
    """Base exception for the property listings service."""
    pass


class ListingValidationError(ListingsError):
    """A required listing field is missing or malformed."""
    pass


class ListingNotFoundError(ListingsError):
    """No published listing matches the lookup."""
    pass


class ContentStoreError(ListingsError):
    """The hosted content store rejected a request or could not be reached."""
    pass
