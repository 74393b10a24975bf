"""
Searching ordered release sequences.

`Bisect` finds the boundary of a monotone predicate in logarithmic time;
`LinearSearch` walks the same sequence front to back and serves as a cursor and
as a reference for `Bisect`.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Generic, Iterable, Iterator, Sequence, TypeVar

from rust_releases._release import Release
from rust_releases._util import assert_never

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Narrow(enum.Enum):
    """
    The direction in which a search continues after inspecting an element.
    """

    ToLeft = "left"
    """
    The boundary lies before the inspected element.
    """

    ToRight = "right"
    """
    The inspected element satisfies the predicate; the boundary lies at or after it.
    """

    def __str__(self) -> str:
        return self.value


class Bisect(Generic[T]):
    """
    Binary search over a sequence for the last element accepted by a predicate.

    The predicate must be monotone over the sequence: it returns `Narrow.ToRight`
    for some (possibly empty) prefix and `Narrow.ToLeft` for the rest. For release
    sequences ordered newest to oldest, a predicate like "minor >= 40" finds the
    oldest release satisfying it.
    """

    def __init__(self, items: Sequence[T]) -> None:
        self._items = items

    def search(self, f: Callable[[T], Narrow]) -> int | None:
        """
        Return the index of the last element for which `f` returns `Narrow.ToRight`,
        or `None` if there is no such element.

        Exceptions raised by `f` abort the search and propagate to the caller.
        """
        return self.search_with_remainder(lambda item, _remainder: f(item))

    def search_with_remainder(self, f: Callable[[T, int], Narrow]) -> int | None:
        """
        Like `search`, but `f` also receives the number of elements still under
        consideration, including the inspected one.
        """
        if not self._items:
            return None

        left = 0
        right = len(self._items) - 1
        result: int | None = None

        while left <= right:
            mid = (left + right) // 2
            decision = f(self._items[mid], right - left + 1)

            if decision is Narrow.ToLeft:
                if mid >= 1:
                    right = mid - 1
                else:
                    break
            elif decision is Narrow.ToRight:
                left = mid + 1
                result = mid
            else:
                assert_never(decision)  # pragma: no cover

        return result

    def search_element(self, f: Callable[[T], Narrow]) -> T | None:
        """
        Like `search`, but return the element rather than its index.
        """
        index = self.search(f)
        if index is None:
            return None
        return self._items[index]


class LinearSearch(Generic[T]):
    """
    A forward cursor over a sequence.
    """

    def __init__(self, items: Sequence[T]) -> None:
        self._items = items
        self._position = 0

    def next_release(self) -> T | None:
        """
        Return the element under the cursor and advance, or `None` once exhausted.
        """
        if self._position >= len(self._items):
            return None
        item = self._items[self._position]
        self._position += 1
        return item

    def __iter__(self) -> Iterator[T]:
        while (item := self.next_release()) is not None:
            yield item

    def search(self, f: Callable[[T], Narrow]) -> int | None:
        """
        Return the index of the last element of the `Narrow.ToRight` prefix, or `None`.

        This inspects elements one by one and always starts from the beginning of the
        sequence, independent of the cursor. For monotone predicates it agrees with
        `Bisect.search`.
        """
        result: int | None = None
        for index, item in enumerate(self._items):
            if f(item) is Narrow.ToLeft:
                break
            result = index
        return result


def latest_patch_releases(releases: Iterable[Release]) -> Iterator[Release]:
    """
    Yield only the latest patch release of each `major.minor` series.

    `releases` must be ordered newest to oldest: the first release of each run of
    releases sharing a channel kind, major and minor version is kept, and the rest
    of the run is skipped. Releases without a version (nightlies) are always kept.

    Given `1.1.0, 1.0.1, 1.0.0, 0.9.0`, this yields `1.1.0, 1.0.1, 0.9.0`.
    """
    previous: tuple[object, int, int] | None = None
    for release in releases:
        version = release.version
        if version is None:
            previous = None
            yield release
            continue

        series = (release.kind, version.major, version.minor)
        if series == previous:
            logger.debug(f"skipping {release}: not the latest patch release")
            continue
        previous = series
        yield release
