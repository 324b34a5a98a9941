"""Sort errors — everything the engine raises derives from SortError."""


class SortError(Exception):
    """Base class for pixel-sort failures."""


class ConfigurationError(SortError, ValueError):
    """Invalid or conflicting sort options. Raised before any worker starts."""


class UnsupportedTraversal(SortError, NotImplementedError):
    """Requested traversal direction has no coordinate mapping."""

    def __init__(self, direction):
        self.direction = direction
        name = getattr(direction, "value", direction)
        super().__init__(f"traversal '{name}' is not implemented")


class WorkerFailure(SortError, RuntimeError):
    """One or more line workers failed. The pass was aborted without commit."""

    def __init__(self, message: str, failed_lines: list[int] | None = None):
        super().__init__(message)
        self.failed_lines = sorted(failed_lines or [])
