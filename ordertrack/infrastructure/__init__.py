"""Infrastructure layer exports."""

from .sources import (
    DirectorySourceClient,
    HttpSourceClient,
    SourceClient,
    configure_source_client,
    get_source_client,
)

__all__ = [
    "DirectorySourceClient",
    "HttpSourceClient",
    "SourceClient",
    "configure_source_client",
    "get_source_client",
]
