"""
The `Release` entity: a single Rust toolchain release on a single platform.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import AbstractSet

from rust_releases._toolchain import (
    Beta,
    Channel,
    ChannelKind,
    Component,
    Nightly,
    ReleaseDate,
    RustVersion,
    Stable,
    Target,
)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Release:
    """
    Represents a Rust toolchain release, as distributed for one platform.

    Releases are compared, ordered and hashed by their `channel` alone: the
    platform, date and components are carried along, but two releases with equal
    channels are the same release as far as collections are concerned.
    """

    channel: Channel
    """
    The release channel, which also identifies the release within that channel.
    """

    platform: Target
    """
    The platform this release was built for.
    """

    date: ReleaseDate | None = None
    """
    When the release was published, if known.

    Nightly releases default to the date of their channel. For stable and beta
    releases, keeping the date consistent with the version is up to the caller.
    """

    components: AbstractSet[Component] = field(default_factory=frozenset)
    """
    The components that make up this release.
    """

    targets: AbstractSet[Target] = field(default_factory=frozenset)
    """
    Additional targets this release can compile for, e.g. via `rust-std`.
    """

    def __post_init__(self) -> None:
        if not isinstance(self.channel, (Stable, Beta, Nightly)):
            raise TypeError(f"not a release channel: {self.channel!r}")
        if not isinstance(self.platform, Target):
            raise TypeError(f"not a target: {self.platform!r}")

        if self.date is None and isinstance(self.channel, Nightly):
            object.__setattr__(self, "date", self.channel.date)
        object.__setattr__(self, "components", frozenset(self.components))
        object.__setattr__(self, "targets", frozenset(self.targets))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Release):
            return NotImplemented
        return self.channel == other.channel

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Release):
            return NotImplemented
        return self.channel < other.channel

    def __hash__(self) -> int:
        return hash(self.channel)

    @property
    def kind(self) -> ChannelKind:
        return self.channel.kind

    @property
    def version(self) -> RustVersion | None:
        """
        The version of a stable or beta release; `None` for nightly releases.
        """
        if isinstance(self.channel, (Stable, Beta)):
            return self.channel.version
        return None

    @property
    def nightly_date(self) -> ReleaseDate | None:
        """
        The channel date of a nightly release; `None` for stable and beta releases.
        """
        if isinstance(self.channel, Nightly):
            return self.channel.date
        return None

    def is_stable(self) -> bool:
        return self.channel.is_stable()

    def is_beta(self) -> bool:
        return self.channel.is_beta()

    def is_nightly(self) -> bool:
        return self.channel.is_nightly()

    def find_component(self, name: str) -> Component | None:
        """
        Look up a component of this release by name.
        """
        for component in self.components:
            if component.name == name:
                return component
        return None

    def default_components(self) -> list[Component]:
        """
        The components installed by default, sorted by name.
        """
        return sorted((c for c in self.components if not c.optional), key=lambda c: c.name)

    def extension_components(self) -> list[Component]:
        """
        The optional components, sorted by name.
        """
        return sorted((c for c in self.components if c.optional), key=lambda c: c.name)

    def __str__(self) -> str:
        return f"{self.channel} ({self.platform})"
