class StoreError(Exception):
    """Base class for attempt store failures."""


class StoreWriteError(StoreError):
    """A record could not be written to the backend."""


class StoreReadError(StoreError):
    """The backend could not be read (as opposed to holding no data)."""
