class StorageError(Exception):
    """A backend read or write failed; surfaced to the caller, never retried."""


class StorageConfigError(StorageError):
    """The configured backend cannot be used in this environment."""
