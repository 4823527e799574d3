"""Error taxonomy shared by every docforge component.

Each failure kind is its own exception class so callers can branch on the
type.  None of them are retried by docforge itself; an error aborts the
current request and propagates to the caller unchanged.
"""

from __future__ import annotations

from pathlib import Path


class DocForgeError(Exception):
    """Base class for all docforge failures."""


class ValidationError(DocForgeError):
    """Raised when a request is missing required fields or is malformed."""


class SourceUnavailable(DocForgeError):
    """Raised when a local knowledge base cannot be read or parsed.

    ``reason`` is ``"unreadable"`` when the file could not be read and
    ``"malformed"`` when its content is not a JSON object.
    """

    def __init__(self, message: str, path: str | Path = "", reason: str = "unreadable") -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(message)


class RemoteResolutionFailed(DocForgeError):
    """Raised when a remote knowledge base or analysis endpoint fails.

    ``status`` is the upstream HTTP status code, or ``None`` when the request
    never produced a response (connection refused, timeout, ...).
    """

    def __init__(self, message: str, url: str = "", status: int | None = None) -> None:
        self.url = url
        self.status = status
        super().__init__(message)


class InvalidReference(DocForgeError):
    """Raised when a document or wiki URL does not contain a usable token."""

    def __init__(self, message: str, reference: str = "") -> None:
        self.reference = reference
        super().__init__(message)


class FilesystemError(DocForgeError):
    """Raised when writing an artifact tree or a report fails on disk."""

    def __init__(self, message: str, path: str | Path = "") -> None:
        self.path = str(path)
        super().__init__(message)


class DocumentFetchError(DocForgeError):
    """Raised when the document service refuses or fails a request."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)
