"""
Functionality for formatting releases as a set of human-readable columns.
"""

from __future__ import annotations

from itertools import zip_longest
from typing import Any, Iterable

from rust_releases._release import Release

from .interface import ReleaseFormat


def tabulate(rows: Iterable[Iterable[Any]]) -> tuple[list[str], list[int]]:
    """Return a list of formatted rows and a list of column sizes.
    For example::
    >>> tabulate([['stable', '1.50.0'], ['nightly']])
    (['stable  1.50.0', 'nightly'], [7, 6])
    """
    rows = [tuple(map(str, row)) for row in rows]
    sizes = [max(map(len, col)) for col in zip_longest(*rows, fillvalue="")]
    table = [" ".join(map(str.ljust, row, sizes)).rstrip() for row in rows]
    return table, sizes


class ColumnsFormat(ReleaseFormat):
    """
    An implementation of `ReleaseFormat` that formats releases as a set of columns.
    """

    def __init__(self, output_components: bool = False):
        """
        Create a new `ColumnsFormat`.

        `output_components` is a flag to determine whether the components of each release
        should be included in the output.
        """
        self.output_components = output_components

    def format(self, releases: list[Release]) -> str:
        """
        Returns a column formatted string for the given releases.

        See `ReleaseFormat.format`.
        """
        header = ["Channel", "Version", "Date", "Platform"]
        if self.output_components:
            header.append("Components")

        data: list[list[Any]] = [header]
        for release in releases:
            data.append(self._format_release(release))

        # A lone header isn't worth printing.
        if len(data) <= 1:
            return ""

        lines, sizes = tabulate(data)
        lines.insert(1, " ".join("-" * size for size in sizes))
        return "\n".join(lines)

    def _format_release(self, release: Release) -> list[Any]:
        row = [
            release.kind,
            release.version if release.version is not None else "",
            release.date if release.date is not None else "",
            release.platform,
        ]
        if self.output_components:
            row.append(", ".join(c.name for c in release.default_components()))
        return row
