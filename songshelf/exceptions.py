"""
Exception hierarchy for the songshelf service.

Every failure a request can hit maps to one of these classes, so the HTTP
layer can pick a status code and a client-safe message without inspecting
the underlying filesystem error.
"""


class SongshelfError(Exception):
    """Base class for all application-specific errors."""
    pass


class ConfigurationError(SongshelfError):
    """Raised when configuration values are missing or invalid."""
    pass


class DirectoryUnavailable(SongshelfError):
    """Raised when a songs or album directory cannot be listed."""

    def __init__(self, path: str, reason: str = None):
        self.path = path
        self.reason = reason

        message = f"Cannot read directory: {path}"
        if reason:
            message += f" - {reason}"

        super().__init__(message)


class MissingPayload(SongshelfError):
    """Raised when an upload request carries no file."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"No file submitted in field '{field_name}'")


class InvalidName(SongshelfError):
    """Raised when a user-supplied name would escape its album directory."""

    def __init__(self, field_name: str, value: str):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid value for '{field_name}': {value!r}")


class StagingFailed(SongshelfError):
    """Raised when the album directory or the provisional file cannot be written."""

    def __init__(self, path: str, reason: str = None):
        self.path = path
        self.reason = reason

        message = f"Failed to stage upload at {path}"
        if reason:
            message += f": {reason}"

        super().__init__(message)


class RenameFailed(SongshelfError):
    """Raised when a staged file cannot be moved to its final name."""

    def __init__(self, source_path: str, dest_path: str, reason: str = None):
        self.source_path = source_path
        self.dest_path = dest_path
        self.reason = reason

        message = f"Failed to rename '{source_path}' to '{dest_path}'"
        if reason:
            message += f": {reason}"

        super().__init__(message)
