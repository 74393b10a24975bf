"""
Release source interfaces and implementations for `rust-releases`.
"""

from .changelog import RustChangelog
from .dist import RustDist
from .dist_cli import RustDistWithCLI
from .interface import (
    ChannelNotAvailableError,
    ConnectionError,
    Document,
    DocumentError,
    FetchResources,
    RetrievedDocument,
    Source,
    SourceError,
    fetch_document,
)
from .manifests import ChannelManifests

__all__ = [
    "ChannelManifests",
    "ChannelNotAvailableError",
    "ConnectionError",
    "Document",
    "DocumentError",
    "FetchResources",
    "RetrievedDocument",
    "RustChangelog",
    "RustDist",
    "RustDistWithCLI",
    "Source",
    "SourceError",
    "fetch_document",
]
