"""Exception types for spacemap."""


class SpacemapError(Exception):
    """Base class for all spacemap errors."""


class RootUnreadableError(SpacemapError):
    """The scan root itself could not be enumerated."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        self.reason = reason
        message = f"Cannot read directory: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ScanCancelledError(SpacemapError):
    """A scan was cancelled before it finished."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Scan cancelled: {path}")


class InvalidLayoutItemError(SpacemapError, ValueError):
    """A treemap item cannot be laid out (negative size)."""

    def __init__(self, identifier: str, size: int):
        self.identifier = identifier
        self.size = size
        super().__init__(f"Item {identifier!r} has negative size {size}")
