"""Exception types raised by the review pipeline.

Per-unit errors (FetchError, AnalysisError) are caught at the unit boundary
in reviewer.py and turned into Failed outcomes. PublishError and ConfigError
are the only ones allowed to end a run.
"""


class PRDigestError(Exception):
    """Base class for every error raised by prdigest_core."""


class ConfigError(PRDigestError, ValueError):
    """Raised when configuration values are missing or invalid."""


class FetchError(PRDigestError, RuntimeError):
    """Raised when a GitHub API call fails (network, auth, not found)."""


class AnalysisError(PRDigestError, RuntimeError):
    """Raised when the chat service errors or returns no content."""


class PublishError(PRDigestError, RuntimeError):
    """Raised when the review comment could not be posted."""
