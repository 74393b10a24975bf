"""
The `rust_releases` APIs.
"""

from rust_releases._compare import VersionDateKey, channel_order, date_order, version_then_date
from rust_releases._register import Registry
from rust_releases._release import Release
from rust_releases._search import Bisect, LinearSearch, Narrow, latest_patch_releases
from rust_releases._set import ReleaseSet
from rust_releases._source import (
    ChannelManifests,
    ChannelNotAvailableError,
    Document,
    RustChangelog,
    RustDist,
    RustDistWithCLI,
    Source,
    SourceError,
)
from rust_releases._toolchain import (
    Beta,
    Channel,
    ChannelKind,
    Component,
    Nightly,
    NoSuchChannelError,
    ReleaseDate,
    RustVersion,
    Stable,
    Target,
    ToolchainParseError,
)
from rust_releases._version import __version__

__all__ = [
    "Beta",
    "Bisect",
    "Channel",
    "ChannelKind",
    "ChannelManifests",
    "ChannelNotAvailableError",
    "Component",
    "Document",
    "LinearSearch",
    "Narrow",
    "Nightly",
    "NoSuchChannelError",
    "Registry",
    "Release",
    "ReleaseDate",
    "ReleaseSet",
    "RustChangelog",
    "RustDist",
    "RustDistWithCLI",
    "RustVersion",
    "Source",
    "SourceError",
    "Stable",
    "Target",
    "ToolchainParseError",
    "VersionDateKey",
    "__version__",
    "channel_order",
    "date_order",
    "latest_patch_releases",
    "version_then_date",
]
