"""
Collect releases from the listing of the Rust distribution bucket on AWS S3
(`static-rust-lang-org`).
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Collection, Iterator

from rust_releases._cache import caching_session
from rust_releases._release import Release
from rust_releases._source.interface import (
    Document,
    DocumentError,
    FetchResources,
    Source,
    fetch_document,
)
from rust_releases._state import IndexState
from rust_releases._toolchain import (
    Channel,
    ChannelKind,
    Nightly,
    ReleaseDate,
    Target,
    ToolchainParseError,
    channel_from_version,
)

logger = logging.getLogger(__name__)

_S3_NAMESPACE = {"s3": "http://s3.amazonaws.com/doc/2006-03-01/"}

# dist/2021-06-17/rustc-1.53.0-x86_64-unknown-linux-gnu.tar.gz
# dist/2021-06-17/rustc-nightly-x86_64-unknown-linux-gnu.tar.xz
_RUSTC_TARBALL = re.compile(
    r"^dist/(?:(?P<date>\d{4}-\d{2}-\d{2})/)?"
    r"rustc-(?P<channel>\d+\.\d+\.\d+(?:-beta(?:\.\d+)?)?|beta|nightly)-"
    r"(?P<target>[^/]+?)\.tar\.(?:gz|xz)$"
)

# Source tarballs aren't built for a platform.
_SOURCE_TARGET = "src"


def parse_listing_page(content: bytes) -> tuple[list[str], bool]:
    """
    Parse one page of an S3 `ListObjectsV2` response.

    Returns the object keys on the page, and whether more pages follow.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as pe:
        raise DocumentError(f"invalid bucket listing: {pe}") from pe

    keys = [
        key.text
        for key in root.findall("s3:Contents/s3:Key", _S3_NAMESPACE)
        if key.text is not None
    ]
    truncated = root.findtext("s3:IsTruncated", default="false", namespaces=_S3_NAMESPACE)
    return keys, truncated.strip().lower() == "true"


class RustDist(Source, FetchResources):
    """
    Indexes the `rustc` tarballs in the Rust distribution bucket.

    The document is a listing of object keys, one per line. Each versioned
    `rustc` tarball becomes a release for the tarball's target, dated by the
    directory it was published in.
    """

    BUCKET = "static-rust-lang-org"
    REGION = "us-west-1"
    OBJECT_PREFIX = "dist/20"
    PAGE_SIZE = 1000

    LISTING_URL = f"https://{BUCKET}.s3.{REGION}.amazonaws.com/"

    def __init__(self, document: Document, *, kinds: Collection[ChannelKind] | None = None):
        """
        Create a new `RustDist` from a key listing.

        `kinds` restricts the releases to the given channels; all channels are
        indexed when it's `None`.
        """
        self._document = document
        self._kinds = frozenset(kinds) if kinds is not None else frozenset(ChannelKind)

    def releases(self) -> Iterator[Release]:
        for line in self._document.lines():
            key = line.strip()
            if not key:
                continue

            release = self._parse_key(key)
            if release is not None and release.kind in self._kinds:
                yield release

    def _parse_key(self, key: str) -> Release | None:
        match = _RUSTC_TARBALL.match(key)
        if match is None:
            return None

        target = match["target"]
        if target == _SOURCE_TARGET:
            return None

        try:
            platform = Target.parse(target)
            date = ReleaseDate.parse(match["date"]) if match["date"] is not None else None
        except ToolchainParseError as e:
            logger.debug(f"skipping dist key {key!r}: {e}")
            return None

        channel: Channel
        if match["channel"] == "nightly":
            if date is None:
                logger.debug(f"skipping undated nightly dist key {key!r}")
                return None
            channel = Nightly(date)
        elif match["channel"] == "beta":
            # Unversioned betas can't be placed in the release order.
            logger.debug(f"skipping unversioned beta dist key {key!r}")
            return None
        else:
            try:
                channel = channel_from_version(match["channel"])
            except ToolchainParseError as e:
                logger.debug(f"skipping dist key {key!r}: {e}")
                return None

        return Release(channel, platform, date=date)

    @classmethod
    def fetch_channel(
        cls,
        kind: ChannelKind,
        *,
        cache_dir: Path | None = None,
        timeout: int | None = None,
        state: IndexState = IndexState(),
    ) -> RustDist:
        """
        List the distribution bucket, page by page, and index the `kind` releases in it.

        See `FetchResources.fetch_channel`.
        """
        session = caching_session(cache_dir)

        keys: list[str] = []
        start_after: str | None = None
        while True:
            params = {
                "list-type": "2",
                "prefix": cls.OBJECT_PREFIX,
                "max-keys": str(cls.PAGE_SIZE),
            }
            if start_after is not None:
                params["start-after"] = start_after

            state.update_state(f"Listing the Rust distribution bucket ({len(keys)} objects so far)")
            retrieved = fetch_document(session, cls.LISTING_URL, timeout=timeout, params=params)
            page, truncated = parse_listing_page(retrieved.document.content)
            logger.debug(f"bucket listing page after {start_after!r}: {len(page)} keys")

            keys.extend(page)
            if not truncated or not page:
                break
            start_after = page[-1]

        return cls(Document("\n".join(keys).encode("utf-8")), kinds=[kind])
