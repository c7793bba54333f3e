"""
Custom exception hierarchy for the raw cleaner.

Only DirectoryScanError is fatal for a run. The others are raised at the
point of failure and turned into per-record warnings or per-file discard
failures by their callers.
"""


class RawCleanerError(Exception):
    """Base exception for all raw cleaner errors."""
    pass


class DirectoryScanError(RawCleanerError):
    """Raised when the target directory cannot be listed."""
    pass


class SidecarReadError(RawCleanerError):
    """Raised when a sidecar (.xmp) file cannot be read."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Cannot read sidecar {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class DiscardError(RawCleanerError):
    """Raised when a file cannot be sent to the trash."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Cannot discard {filename}: {reason}")
        self.filename = filename
        self.reason = reason
