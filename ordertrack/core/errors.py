from __future__ import annotations


class SourceError(RuntimeError):
    """Raised when a registered source cannot be turned into records."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(message)
        self.source = source


class SourceFetchError(SourceError):
    """Network failure or non-success status while retrieving a source."""


class SourceParseError(SourceError):
    """The source payload is not a record collection."""
