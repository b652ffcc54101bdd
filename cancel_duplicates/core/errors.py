"""
Errors
======
Every error that aborts an invocation derives from DedupeError. main()
turns them into a non-zero exit code.

GitHubAPIError is the one exception to "always fatal": the cancellation
driver catches it per target and records a failed outcome instead.
"""
from typing import Optional


class DedupeError(Exception):
    """Base class for fatal errors."""


class ConfigurationError(DedupeError):
    """Raised when required environment input is missing or malformed."""


class UnsupportedRefError(DedupeError):
    """Raised when a push ref is neither a branch nor a tag."""


class ResolutionError(DedupeError):
    """Raised when the workflow owning the current run cannot be determined."""


class GitHubAPIError(DedupeError):
    """Raised when a GitHub REST call fails or cannot be sent."""

    def __init__(self, status_code: Optional[int], message: str, url: str = ""):
        self.status_code = status_code
        self.message = message
        self.url = url
        super().__init__(f"GitHub API error [{status_code}] {message}")


class MalformedResponseError(DedupeError):
    """Raised when GitHub answers with a body that is not the expected JSON shape."""
