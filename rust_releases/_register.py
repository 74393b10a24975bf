"""
A registry of releases, partitioned by platform.
"""

from __future__ import annotations

import heapq
import logging
from typing import Iterable, Iterator

from rust_releases._release import Release
from rust_releases._set import ReleaseSet
from rust_releases._toolchain import ChannelKind, ReleaseDate, Target

logger = logging.getLogger(__name__)


class Registry:
    """
    Holds one `ReleaseSet` per platform.

    Every release is stored in the set of its own `platform`, so the same channel
    released for two platforms is two distinct entries. Within a platform, the
    duplicate policy of `ReleaseSet` applies: the first release inserted wins.

    Lookups never fail: unknown platforms and empty results are `None` or empty lists.
    """

    def __init__(self, releases: Iterable[Release] = ()) -> None:
        """
        Create a new `Registry` from `releases`, in any order.
        """
        self._by_platform: dict[Target, ReleaseSet] = {}
        self.extend(releases)

    def add_release(self, release: Release) -> bool:
        """
        Add `release` to the set of its platform, creating that set if needed.

        Returns `False` if the platform already held an equal release.
        """
        releases = self._by_platform.get(release.platform)
        if releases is None:
            logger.debug(f"new platform in registry: {release.platform}")
            releases = self._by_platform[release.platform] = ReleaseSet()
        return releases.insert(release)

    def extend(self, releases: Iterable[Release]) -> None:
        """
        Add every release in `releases`; this is how partial registries are merged.
        """
        for release in releases:
            self.add_release(release)

    def platform(self, platform: Target) -> ReleaseSet | None:
        """
        The releases for `platform`, or `None` if the registry has none.
        """
        return self._by_platform.get(platform)

    def platforms(self) -> list[Target]:
        """
        The platforms with at least one release, in order of first appearance.
        """
        return list(self._by_platform)

    def count_releases(self) -> int:
        """
        The total number of releases, across all platforms.
        """
        return sum(len(releases) for releases in self._by_platform.values())

    def ascending(self) -> list[Release]:
        """
        All releases of all platforms, least to greatest.
        """
        return list(heapq.merge(*(s.ascending() for s in self._by_platform.values())))

    def descending(self) -> list[Release]:
        """
        All releases of all platforms, greatest to least.
        """
        return list(
            heapq.merge(*(s.descending() for s in self._by_platform.values()), reverse=True)
        )

    def by_date(self, date: ReleaseDate) -> list[Release]:
        """
        The releases of all platforms published on `date`, in ascending order.
        """
        return [r for r in self.ascending() if r.date == date]

    def by_channel(self, kind: ChannelKind) -> list[Release]:
        """
        The releases of all platforms on the `kind` channel, in ascending order.
        """
        return [r for r in self.ascending() if r.kind is kind]

    def __len__(self) -> int:
        return self.count_releases()

    def __iter__(self) -> Iterator[Release]:
        return iter(self.ascending())

    def __repr__(self) -> str:
        return f"Registry({self._by_platform!r})"
