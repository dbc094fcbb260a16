"""Error taxonomy shared by the storage adapters and the sync session."""


class SyncError(Exception):
    """Base class for all quest-sync errors."""

    pass


class StoreIOError(SyncError):
    """Reading from or writing to one of the stores failed."""

    pass


class ParseError(SyncError):
    """A document did not decode to the expected shape."""

    def __init__(self, message: str, source: str = "") -> None:
        """Initialize parse error.

        Args:
            message: Human readable description
            source: Path or entry name of the offending document
        """
        super().__init__(message)
        self.source = source


class NotFoundError(SyncError):
    """An expected document is missing."""

    def __init__(self, path: str) -> None:
        """Initialize with the missing path."""
        super().__init__(f"Not found: {path}")
        self.path = path


class NoPlayerError(SyncError):
    """PlayerData document contains no local players."""

    pass


class DeviceNotReadyError(SyncError):
    """The selected device is not authorized or not ready for transfers."""

    pass


class NoDevicesError(SyncError):
    """No devices are connected."""

    pass


class AdbNotFoundError(SyncError):
    """The adb executable could not be started."""

    pass


# Errors that end the whole session instead of a single category. A missing
# document is fatal only where a category says so (the player profile).
FATAL_ERRORS = (NoPlayerError, DeviceNotReadyError)
