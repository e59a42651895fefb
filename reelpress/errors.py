"""
Exception types raised by the reelpress pipeline.

Insufficient article content is deliberately absent here: the extractor
reports it as ``None`` (or a ``skipped`` outcome) so callers can pass over
such links without treating them as failures.
"""
from typing import Optional


class ReelpressError(Exception):
    """Base class for all reelpress errors."""


class FetchError(ReelpressError):
    """
    An article could not be fetched after all retry attempts.

    Attributes:
        url: The article URL that failed
        attempts: Number of attempts made before giving up
    """
    def __init__(self, url: str, attempts: int, reason: Optional[str] = None):
        self.url = url
        self.attempts = attempts
        self.reason = reason
        message = f"Failed to fetch {url} after {attempts} attempt(s)"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RenderError(ReelpressError):
    """
    A video rendering provider rejected or failed a render request.

    Provider implementations raise this; the generator passes it through
    untouched.
    """
    def __init__(self, message: str, template_id: Optional[str] = None, status: Optional[int] = None):
        self.template_id = template_id
        self.status = status
        super().__init__(message)


class UnknownTemplateError(ReelpressError, ValueError):
    """A reel template id was requested that is not registered."""
    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown reel template: {template_id}")


class ServiceNotInitializedError(ReelpressError, RuntimeError):
    """A service operation was requested before ``initialize()`` completed."""
