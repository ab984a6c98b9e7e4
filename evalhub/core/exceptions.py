"""
Custom exceptions for EvalHub.

The filter and comparison engine never raises for bad data; these cover the
content loader and the analytics layer.
"""


class EvalHubException(Exception):
    """Base exception for all EvalHub errors."""
    pass


class ContentLoadError(EvalHubException):
    """Raised when the content directory cannot be read."""

    def __init__(self, message: str, content_dir: str = None):
        self.content_dir = content_dir
        super().__init__(message)


class InvalidFrontmatterError(EvalHubException):
    """Raised when a content file's frontmatter is missing or fails validation."""

    def __init__(self, message: str, file_path: str = None, errors: list = None):
        self.file_path = file_path
        self.errors = errors or []
        super().__init__(message)


class InvalidPathError(EvalHubException):
    """Raised when an analytics request carries an unusable content path."""
    pass


class AnalyticsStoreError(EvalHubException):
    """Raised when reading or writing view counters fails."""
    pass
