"""
Value types describing Rust toolchains: versions, release dates, release
channels, targets and components.

All of these types are immutable and hashable. Versions and dates are ordered
by their components; channels are ordered such that every stable release is
greater than every beta release, which in turn is greater than every nightly
release.
"""

from __future__ import annotations

import enum
import functools
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar, Union

from packaging.version import InvalidVersion, Version

from rust_releases._util import host_triple

_U8_MAX = 2**8 - 1
_U16_MAX = 2**16 - 1
_U64_MAX = 2**64 - 1

_DATE_PATTERN = re.compile(r"^(\d+)-(\d+)-(\d+)$")
_TRIPLE_PATTERN = re.compile(r"^[A-Za-z0-9_.]+(?:-[A-Za-z0-9_.]+){1,3}$")
_VERSION_PATTERN = re.compile(
    r"^(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)(?:-(?P<pre>[0-9A-Za-z.-]+))?$"
)
_BETA_PATTERN = re.compile(r"^beta(?:\.(?P<number>0|[1-9]\d*))?$")

UNKNOWN_TRIPLE = "unknown-unknown-unknown"


class ToolchainParseError(ValueError):
    """
    Raised when a version, date, channel or target can't be parsed or constructed.
    """

    pass


class NoSuchChannelError(ToolchainParseError):
    """
    A `ToolchainParseError` specialized for unknown release channel identifiers.
    """

    def __init__(self, token: str) -> None:
        super().__init__(f"Release channel '{token}' was not found")
        self.token = token


def _check_width(name: str, value: Any, maximum: int) -> None:
    # `bool` is an `int` subclass.
    if not isinstance(value, int) or isinstance(value, bool):
        raise ToolchainParseError(f"{name} must be an integer, not {type(value).__name__}")
    if not 0 <= value <= maximum:
        raise ToolchainParseError(f"{name} out of range [0, {maximum}]: {value}")


def _parse_release_triplet(text: str) -> Version:
    """
    Parse `text` as a `major.minor.patch[-pre]` version with exactly three release
    components.

    Pre-release segments are left for the caller to judge; PEP 440 spellings that
    Rust doesn't use (`v1.2.3`, `1.02.3`, `1.2.3rc1`, epochs, post-releases,
    dev-releases and local segments) are always rejected.
    """
    if not _VERSION_PATTERN.match(text.strip()):
        raise ToolchainParseError(f"invalid version: {text!r}")

    try:
        version = Version(text.strip())
    except InvalidVersion as iv:
        raise ToolchainParseError(f"invalid version: {text!r}") from iv

    if version.epoch != 0 or version.post is not None or version.dev is not None:
        raise ToolchainParseError(f"unsupported version syntax: {text!r}")
    if version.local is not None:
        raise ToolchainParseError(f"unsupported version syntax: {text!r}")
    if len(version.release) != 3:
        raise ToolchainParseError(f"expected a major.minor.patch version: {text!r}")
    return version


@dataclass(frozen=True, order=True)
class RustVersion:
    """
    A three component `major.minor.patch` Rust version.

    Unlike a full semantic version, a `RustVersion` carries no pre-release or build
    metadata.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        _check_width("major", self.major, _U64_MAX)
        _check_width("minor", self.minor, _U64_MAX)
        _check_width("patch", self.patch, _U64_MAX)

    @classmethod
    def parse(cls, text: str) -> RustVersion:
        """
        Parse a `major.minor.patch` version string, e.g. `1.50.0`.

        Raises `ToolchainParseError` on anything else, including pre-release versions.
        """
        version = _parse_release_triplet(text)
        if version.pre is not None:
            raise ToolchainParseError(f"unexpected pre-release version: {text!r}")
        major, minor, patch = version.release
        return cls(major, minor, patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, order=True)
class ReleaseDate:
    """
    The date a Rust release was published.

    This is a versioning primitive rather than a calendar date: it is ordered by
    `(year, month, day)` and is never validated against a calendar, so values like
    `2023-13-99` are kept as given.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        _check_width("year", self.year, _U16_MAX)
        _check_width("month", self.month, _U8_MAX)
        _check_width("day", self.day, _U8_MAX)

    @classmethod
    def parse(cls, text: str) -> ReleaseDate:
        """
        Parse a `YYYY-MM-DD` string.
        """
        match = _DATE_PATTERN.match(text.strip())
        if match is None:
            raise ToolchainParseError(f"invalid release date: {text!r}")
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    @classmethod
    def from_date(cls, value: date) -> ReleaseDate:
        return cls(value.year, value.month, value.day)

    def __str__(self) -> str:
        return f"{self.year:04}-{self.month:02}-{self.day:02}"


@enum.unique
class ChannelKind(str, enum.Enum):
    """
    The release channels through which Rust toolchains are distributed.
    """

    Stable = "stable"
    Beta = "beta"
    Nightly = "nightly"

    @classmethod
    def parse(cls, token: str) -> ChannelKind:
        """
        Look up a channel by its identifier, e.g. `stable`.
        """
        try:
            return cls(token.strip().lower())
        except ValueError:
            raise NoSuchChannelError(token) from None

    def __str__(self) -> str:
        return self.value


@functools.total_ordering
class _ChannelOrder:
    """
    Shared ordering for the channel variants.

    Equality, ordering and hashing are all derived from a single key, so two
    channels are equal exactly when neither sorts before the other.
    """

    kind: ClassVar[ChannelKind]

    def _order_key(self) -> tuple[int, ...]:  # pragma: no cover
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _ChannelOrder):
            return NotImplemented
        return self._order_key() == other._order_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, _ChannelOrder):
            return NotImplemented
        return self._order_key() < other._order_key()

    def __hash__(self) -> int:
        return hash(self._order_key())

    def is_stable(self) -> bool:
        return self.kind is ChannelKind.Stable

    def is_beta(self) -> bool:
        return self.kind is ChannelKind.Beta

    def is_nightly(self) -> bool:
        return self.kind is ChannelKind.Nightly


def _require(name: str, value: Any, expected: type) -> None:
    if not isinstance(value, expected):
        raise TypeError(f"{name} must be a {expected.__name__}, not {type(value).__name__}")


@dataclass(frozen=True, eq=False)
class Stable(_ChannelOrder):
    """
    A release on the stable channel, identified by its version.
    """

    version: RustVersion

    kind = ChannelKind.Stable

    def __post_init__(self) -> None:
        _require("version", self.version, RustVersion)

    def _order_key(self) -> tuple[int, ...]:
        return (2, self.version.major, self.version.minor, self.version.patch)

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True, eq=False)
class Beta(_ChannelOrder):
    """
    A release on the beta channel, identified by its version.

    The `prerelease` number (the `3` in `1.75.0-beta.3`) is informational only:
    two betas of the same version are the same release as far as ordering goes.
    """

    version: RustVersion
    prerelease: int | None = None

    kind = ChannelKind.Beta

    def __post_init__(self) -> None:
        _require("version", self.version, RustVersion)
        if self.prerelease is not None:
            _check_width("prerelease", self.prerelease, 2**32 - 1)

    def _order_key(self) -> tuple[int, ...]:
        return (1, self.version.major, self.version.minor, self.version.patch)

    def __str__(self) -> str:
        if self.prerelease is None:
            return f"{self.version}-beta"
        return f"{self.version}-beta.{self.prerelease}"


@dataclass(frozen=True, eq=False)
class Nightly(_ChannelOrder):
    """
    A release on the nightly channel, identified by its date.
    """

    date: ReleaseDate

    kind = ChannelKind.Nightly

    def __post_init__(self) -> None:
        _require("date", self.date, ReleaseDate)

    def _order_key(self) -> tuple[int, ...]:
        return (0, self.date.year, self.date.month, self.date.day)

    def __str__(self) -> str:
        return f"nightly-{self.date}"


Channel = Union[Stable, Beta, Nightly]
"""
Any one of the three channel variants.
"""


def channel_from_version(text: str) -> Stable | Beta:
    """
    Parse a versioned channel from a version string.

    `1.50.0` is a stable release, `1.51.0-beta.2` (or `1.51.0-beta`) a beta release.
    Other pre-release kinds (`alpha`, `nightly`) are rejected with a `ToolchainParseError`.
    """
    version = _parse_release_triplet(text)
    major, minor, patch = version.release
    rust_version = RustVersion(major, minor, patch)

    if version.pre is None:
        return Stable(rust_version)

    _, _, pre = text.strip().partition("-")
    beta = _BETA_PATTERN.match(pre)
    if beta is None:
        raise ToolchainParseError(f"not a stable or beta version: {text!r}")

    # PEP 440 turns a bare `-beta` into `b0`, so take the number from the text itself.
    number = beta.group("number")
    return Beta(rust_version, prerelease=int(number) if number is not None else None)


@dataclass(frozen=True)
class Target:
    """
    A platform for which Rust releases are built, identified by its target triple
    (e.g. `x86_64-unknown-linux-gnu`).

    Targets are opaque: they support equality and hashing, but no ordering.
    """

    triple: str

    @classmethod
    def host(cls) -> Target:
        """
        The target triple of the running host, on a best-effort basis.
        """
        return cls(host_triple())

    @classmethod
    def parse(cls, triple: str) -> Target:
        """
        Create a `Target` from a target triple with two to four hyphen-separated parts.
        """
        triple = triple.strip()
        if not _TRIPLE_PATTERN.match(triple):
            raise ToolchainParseError(f"invalid target triple: {triple!r}")
        return cls(triple)

    @classmethod
    def from_triple_or_unknown(cls, triple: str) -> Target:
        try:
            return cls.parse(triple)
        except ToolchainParseError:
            return cls(UNKNOWN_TRIPLE)

    @property
    def parts(self) -> tuple[str, ...]:
        return tuple(self.triple.split("-"))

    def __str__(self) -> str:
        return self.triple


@dataclass(frozen=True)
class Component:
    """
    An installable part of a Rust toolchain, such as `rustc`, `cargo` or `rust-docs`.

    Components are identified by name; `optional` marks components which are not
    installed by default.
    """

    name: str
    optional: bool = field(default=False, compare=False)
