"""
Orderings over releases, for use as the `key` of a `ReleaseSet`.

Each function maps a `Release` onto a sort key; releases whose keys compare equal
are considered duplicates by the collection using that key.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable

from rust_releases._release import Release
from rust_releases._toolchain import Channel, ReleaseDate, RustVersion

ReleaseKey = Callable[[Release], Any]
"""
A function turning a release into a totally ordered, hashable sort key.
"""


def channel_order(release: Release) -> Channel:
    """
    The default ordering: stable > beta > nightly, then by version or date.
    """
    return release.channel


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class VersionDateKey:
    """
    A sort key that prefers versions and falls back to dates.

    A key with a version is greater than any key without one. Two keys without a
    version are ordered by date, where a missing date sorts below every date.
    When both keys have a version, dates are not considered at all.
    """

    version: RustVersion | None
    date: ReleaseDate | None

    def _rank(self) -> tuple[Any, ...]:
        if self.version is not None:
            return (1, self.version)
        if self.date is not None:
            return (0, 1, self.date)
        return (0, 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionDateKey):
            return NotImplemented
        return self._rank() == other._rank()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionDateKey):
            return NotImplemented
        return self._rank() < other._rank()

    def __hash__(self) -> int:
        return hash(self._rank())


def version_then_date(release: Release) -> VersionDateKey:
    """
    Order releases by version where they have one, and by date otherwise.

    Stable and beta releases of the same version are equal under this ordering.
    """
    return VersionDateKey(release.version, release.date)


def date_order(release: Release) -> tuple[Any, ...]:
    """
    Order releases by date only; releases without a date sort lowest.
    """
    if release.date is None:
        return (0,)
    return (1, release.date)
