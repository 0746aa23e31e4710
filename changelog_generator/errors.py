"""
Error types raised by the changelog generation pipeline.

Every error is raised where the failure is detected and only turned into a
response at the request boundary (HTTP handlers or the CLI).
"""

from typing import Optional


class ChangelogError(Exception):
    """Base class for all changelog generator errors."""


class ValidationError(ChangelogError):
    """
    The request is malformed or incomplete.

    Args:
        message: Human-readable description, safe to return to the caller.
        field: Dotted path of the offending field, if there is one.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class EmptyInputError(ValidationError):
    """No usable raw material was left after resolving the request."""


class MissingRepoIdentityError(ValidationError):
    """A GitHub request lacks the repository owner or name."""


class UpstreamFetchError(ChangelogError):
    """
    The GitHub API call failed.

    Args:
        status: HTTP status returned by GitHub, or None for transport failures.
        body: Response body (or transport error text) for diagnostics.
    """

    def __init__(self, status: Optional[int], body: str) -> None:
        if status is None:
            super().__init__(f"GitHub request failed: {body}")
        else:
            super().__init__(f"GitHub API returned {status}: {body}")
        self.status = status
        self.body = body


class GenerationBackendError(ChangelogError):
    """The generation backend could not be reached or rejected the call."""
