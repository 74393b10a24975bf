"""
An ordered, deduplicated collection of releases.
"""

from __future__ import annotations

import bisect
import logging
from typing import Any, Callable, Iterable, Iterator

from rust_releases._compare import ReleaseKey, channel_order
from rust_releases._release import Release
from rust_releases._search import Bisect, Narrow
from rust_releases._toolchain import ReleaseDate, Target

logger = logging.getLogger(__name__)


class ReleaseSet:
    """
    A set of releases, kept in ascending order under a sort key.

    Two releases whose keys compare equal are duplicates: the first one inserted
    is kept, and later ones are ignored. The default key orders by release channel,
    so stable releases sort above betas and betas above nightlies.

    Releases can only be added, never removed.
    """

    def __init__(self, releases: Iterable[Release] = (), *, key: ReleaseKey = channel_order):
        """
        Create a new `ReleaseSet` from `releases`, in any order.
        """
        self._key = key
        self._keys: list[Any] = []
        self._releases: list[Release] = []
        self.extend(releases)

    def _find(self, key: Any) -> tuple[int, bool]:
        index = bisect.bisect_left(self._keys, key)
        found = index < len(self._keys) and self._keys[index] == key
        return index, found

    def insert(self, release: Release) -> bool:
        """
        Add `release` to the set.

        Returns `False`, leaving the set unchanged, if an equal release is already present.
        """
        key = self._key(release)
        index, found = self._find(key)
        if found:
            logger.debug(f"ignoring duplicate release: {release}")
            return False

        self._keys.insert(index, key)
        self._releases.insert(index, release)
        return True

    def extend(self, releases: Iterable[Release]) -> None:
        for release in releases:
            self.insert(release)

    def first(self) -> Release | None:
        """
        The least release in the set, or `None` if the set is empty.
        """
        return self._releases[0] if self._releases else None

    def last(self) -> Release | None:
        """
        The greatest release in the set, or `None` if the set is empty.
        """
        return self._releases[-1] if self._releases else None

    def ascending(self) -> list[Release]:
        """
        A snapshot of the releases, least to greatest.
        """
        return list(self._releases)

    def descending(self) -> list[Release]:
        """
        A snapshot of the releases, greatest to least.
        """
        return self._releases[::-1]

    def by_date(self, date: ReleaseDate) -> list[Release]:
        """
        The releases published on `date`, in ascending order.
        """
        return [r for r in self._releases if r.date == date]

    def for_platform(self, platform: Target) -> list[Release]:
        """
        The releases built for `platform`, in ascending order.
        """
        return [r for r in self._releases if r.platform == platform]

    def search(self, f: Callable[[Release], Narrow]) -> Release | None:
        """
        Bisect the releases from greatest to least, returning the last release for
        which `f` returns `Narrow.ToRight`.

        See `Bisect.search` for the requirements on `f`.
        """
        return Bisect(self.descending()).search_element(f)

    def __len__(self) -> int:
        return len(self._releases)

    def __iter__(self) -> Iterator[Release]:
        return iter(self.ascending())

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, Release):
            return False
        _, found = self._find(self._key(item))
        return found

    def __repr__(self) -> str:
        return f"ReleaseSet({self._releases!r})"
