"""
Collect stable releases from an `aws s3 ls` listing of the Rust distribution bucket.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator

from rust_releases._release import Release
from rust_releases._source.interface import Document, Source
from rust_releases._toolchain import (
    ReleaseDate,
    RustVersion,
    Stable,
    Target,
    ToolchainParseError,
)

logger = logging.getLogger(__name__)

# rust-1.50.0-x86_64-unknown-linux-gnu.tar.gz, optionally with a signature or checksum suffix.
_RUST_ARTIFACT = re.compile(
    r"^rust-(?P<version>\d+\.\d+\.\d+)-(?!beta)(?P<target>.+?)"
    r"(?:\.tar\.(?:gz|xz)|\.msi|\.pkg)?(?:\.(?:sha256|asc))?$"
)


class RustDistWithCLI(Source):
    """
    Indexes the stable releases in a listing produced by the AWS CLI:

        aws --no-sign-request s3 ls static-rust-lang-org/dist/ > dist.txt

    This source can't retrieve the listing by itself; load it with `Document.from_path`.
    """

    def __init__(self, document: Document) -> None:
        self._document = document

    def releases(self) -> Iterator[Release]:
        for line in self._document.lines():
            # Directory ("prefix") entries carry no release.
            if line.strip().startswith("PRE"):
                continue

            release = self._parse_line(line)
            if release is not None:
                yield release

    def _parse_line(self, line: str) -> Release | None:
        # <date> <time> <size> <name>
        fields = line.split()
        if len(fields) < 4 or not fields[3].startswith("rust-1"):
            return None

        match = _RUST_ARTIFACT.match(fields[3])
        if match is None:
            logger.debug(f"skipping unrecognized listing entry: {line!r}")
            return None

        try:
            version = RustVersion.parse(match["version"])
        except ToolchainParseError as e:
            logger.debug(f"skipping listing entry {line!r}: {e}")
            return None

        try:
            date: ReleaseDate | None = ReleaseDate.parse(fields[0])
        except ToolchainParseError:
            logger.debug(f"listing entry has no valid date: {line!r}")
            date = None

        platform = Target.from_triple_or_unknown(match["target"])
        return Release(Stable(version), platform, date=date)
