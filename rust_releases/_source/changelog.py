"""
Collect stable releases from the Rust changelog (`RELEASES.md`).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from rust_releases._cache import caching_session
from rust_releases._release import Release
from rust_releases._source.interface import (
    ChannelNotAvailableError,
    Document,
    FetchResources,
    Source,
    fetch_document,
)
from rust_releases._state import IndexState
from rust_releases._toolchain import (
    ChannelKind,
    ReleaseDate,
    RustVersion,
    Stable,
    Target,
    ToolchainParseError,
)

logger = logging.getLogger(__name__)


class RustChangelog(Source, FetchResources):
    """
    Indexes the stable releases listed in the official Rust changelog.

    Every `Version X.Y.Z (YYYY-MM-DD)` heading becomes a stable release. The
    changelog doesn't say which platforms a release was built for, so all
    releases are attributed to a single `platform`.
    """

    RELEASES_URL = "https://raw.githubusercontent.com/rust-lang/rust/master/RELEASES.md"

    def __init__(self, document: Document, *, platform: Target | None = None) -> None:
        """
        Create a new `RustChangelog` from the changelog in `document`.

        `platform` is the platform to attribute releases to; it defaults to the host.
        """
        self._document = document
        self._platform = platform if platform is not None else Target.host()

    def releases(self) -> Iterator[Release]:
        """
        Yield a stable release for every versioned heading of the changelog.

        Headings that don't carry a stable version (e.g. `Version 1.0.0-alpha`)
        are skipped.
        """
        for line in self._document.lines():
            if not line.startswith("Version"):
                continue

            release = self._parse_heading(line)
            if release is not None:
                yield release

    def _parse_heading(self, line: str) -> Release | None:
        parts = line.split()
        if len(parts) < 2:
            logger.debug(f"skipping changelog heading without a version: {line!r}")
            return None

        try:
            version = RustVersion.parse(parts[1])
        except ToolchainParseError as e:
            logger.debug(f"skipping changelog heading {line!r}: {e}")
            return None

        date = None
        if len(parts) >= 3:
            try:
                date = ReleaseDate.parse(parts[2].strip("()"))
            except ToolchainParseError:
                logger.debug(f"changelog heading has no valid date: {line!r}")

        return Release(Stable(version), self._platform, date=date)

    @classmethod
    def fetch_channel(
        cls,
        kind: ChannelKind,
        *,
        cache_dir: Path | None = None,
        timeout: int | None = None,
        state: IndexState = IndexState(),
        platform: Target | None = None,
    ) -> RustChangelog:
        """
        Retrieve the changelog. Only the stable channel is available.

        `platform` is the platform to attribute releases to, as in the constructor.

        See `FetchResources.fetch_channel`.
        """
        if kind is not ChannelKind.Stable:
            raise ChannelNotAvailableError(kind)

        session = caching_session(cache_dir)
        state.update_state("Fetching the Rust changelog")
        retrieved = fetch_document(session, cls.RELEASES_URL, timeout=timeout)
        return cls(retrieved.document, platform=platform)
