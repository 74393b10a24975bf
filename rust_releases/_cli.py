"""
Command-line entrypoints for `rust-releases`.
"""

from __future__ import annotations

import argparse
import enum
import heapq
import logging
import os
import sys
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import IO, Iterator, NoReturn

from rust_releases import __version__
from rust_releases._format import ColumnsFormat, JsonFormat, ReleaseFormat
from rust_releases._register import Registry
from rust_releases._release import Release
from rust_releases._search import latest_patch_releases
from rust_releases._source import (
    ChannelManifests,
    ChannelNotAvailableError,
    Document,
    RustChangelog,
    RustDist,
    RustDistWithCLI,
    Source,
    SourceError,
)
from rust_releases._source.interface import ConnectionError as SourceConnectionError
from rust_releases._state import IndexSpinner, IndexState
from rust_releases._toolchain import ChannelKind, Target, ToolchainParseError
from rust_releases._util import assert_never

logging.basicConfig()
logger = logging.getLogger(__name__)

# NOTE: We configure the top package logger, rather than the root logger,
# to avoid overly verbose logging in third-party code by default.
package_logger = logging.getLogger("rust_releases")
package_logger.setLevel(os.environ.get("RUST_RELEASES_LOGLEVEL", "INFO").upper())


@contextmanager
def _output_io(name: Path) -> Iterator[IO[str]]:  # pragma: no cover
    """
    A context managing wrapper for the `--output` flag. `stdout` and `-` select the
    standard output stream; any other name is opened (and truncated) on entry.
    """
    if str(name) in {"stdout", "-"}:
        yield sys.stdout
    else:
        with name.open("w") as io:
            yield io


@enum.unique
class OutputFormatChoice(str, enum.Enum):
    """
    Output formats supported by the `rust-releases` CLI.
    """

    Columns = "columns"
    Json = "json"

    def to_format(self, output_components: bool) -> ReleaseFormat:
        if self is OutputFormatChoice.Columns:
            return ColumnsFormat(output_components)
        elif self is OutputFormatChoice.Json:
            return JsonFormat(output_components)
        else:
            assert_never(self)  # pragma: no cover

    def __str__(self) -> str:
        return self.value


@enum.unique
class SourceChoice(str, enum.Enum):
    """
    Release sources supported by `rust-releases`.
    """

    Changelog = "changelog"
    Dist = "dist"
    DistCli = "dist-cli"
    Manifests = "manifests"

    def from_document(
        self, document: Document, kind: ChannelKind, platform: Target | None
    ) -> Source:
        """
        Build the source from a local copy of its document.

        Raises `ChannelNotAvailableError` for channels the source doesn't index.
        """
        if self is SourceChoice.Changelog:
            if kind is not ChannelKind.Stable:
                raise ChannelNotAvailableError(kind)
            return RustChangelog(document, platform=platform)
        elif self is SourceChoice.Dist:
            return RustDist(document, kinds=[kind])
        elif self is SourceChoice.DistCli:
            if kind is not ChannelKind.Stable:
                raise ChannelNotAvailableError(kind)
            return RustDistWithCLI(document)
        elif self is SourceChoice.Manifests:
            return ChannelManifests([document], kind=kind)
        else:
            assert_never(self)  # pragma: no cover

    def fetch(
        self,
        kind: ChannelKind,
        cache_dir: Path | None,
        timeout: int,
        state: IndexState,
        platform: Target | None = None,
    ) -> Source:
        """
        Build the source from documents retrieved from upstream.

        `platform` is only used by the changelog, whose releases carry no platform.
        """
        if self is SourceChoice.Changelog:
            return RustChangelog.fetch_channel(
                kind, cache_dir=cache_dir, timeout=timeout, state=state, platform=platform
            )
        elif self is SourceChoice.Dist:
            return RustDist.fetch_channel(kind, cache_dir=cache_dir, timeout=timeout, state=state)
        elif self is SourceChoice.DistCli:
            if kind is not ChannelKind.Stable:
                raise ChannelNotAvailableError(kind)
            raise SourceError(
                "the dist-cli source can't fetch its listing; "
                "create one with `aws --no-sign-request s3 ls static-rust-lang-org/dist/` "
                "and pass it with --input"
            )
        elif self is SourceChoice.Manifests:
            return ChannelManifests.fetch_channel(
                kind, cache_dir=cache_dir, timeout=timeout, state=state
            )
        else:
            assert_never(self)  # pragma: no cover

    def __str__(self) -> str:
        return self.value


@enum.unique
class OrderChoice(str, enum.Enum):
    """
    The order in which releases are listed.
    """

    Ascending = "asc"
    Descending = "desc"

    def to_reverse(self) -> bool:
        if self is OrderChoice.Ascending:
            return False
        elif self is OrderChoice.Descending:
            return True
        else:
            assert_never(self)  # pragma: no cover

    def __str__(self) -> str:
        return self.value


@enum.unique
class ProgressSpinnerChoice(str, enum.Enum):
    """
    Whether or not `rust-releases` should display a progress spinner.
    """

    On = "on"
    Off = "off"

    def __bool__(self) -> bool:
        return self is ProgressSpinnerChoice.On

    def __str__(self) -> str:
        return self.value


def _target(triple: str) -> Target:
    try:
        return Target.parse(triple)
    except ToolchainParseError as e:
        raise argparse.ArgumentTypeError(str(e))


def _enum_help(msg: str, e: type[enum.Enum]) -> str:  # pragma: no cover
    """
    Render a `--help`-style string for the given enumeration.
    """
    return f"{msg} (choices: {', '.join(str(v) for v in e)})"


def _fatal(msg: str) -> NoReturn:  # pragma: no cover
    """
    Log a fatal error to the standard error stream and exit.
    """
    logger.error(msg)
    sys.exit(1)


def _parser() -> argparse.ArgumentParser:  # pragma: no cover
    parser = argparse.ArgumentParser(
        prog="rust-releases",
        description="index the known releases of the Rust toolchain",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-s",
        "--source",
        type=SourceChoice,
        choices=SourceChoice,
        default=SourceChoice.Changelog,
        metavar="SOURCE",
        help=_enum_help("the source to index releases from", SourceChoice),
    )
    parser.add_argument(
        "-c",
        "--channel",
        type=ChannelKind,
        choices=ChannelKind,
        default=ChannelKind.Stable,
        metavar="CHANNEL",
        help=_enum_help("the release channel to index", ChannelKind),
    )
    parser.add_argument(
        "-p",
        "--platform",
        type=_target,
        metavar="TRIPLE",
        help="only list releases for the given target triple; for the `changelog` source, "
        "releases are attributed to this platform instead of the host",
    )
    parser.add_argument(
        "--order",
        type=OrderChoice,
        choices=OrderChoice,
        default=OrderChoice.Descending,
        help=_enum_help("the order to list releases in", OrderChoice),
    )
    parser.add_argument(
        "--latest-patches",
        action="store_true",
        help="only list the latest patch release of each minor version",
    )
    parser.add_argument(
        "-f",
        "--format",
        type=OutputFormatChoice,
        choices=OutputFormatChoice,
        default=OutputFormatChoice.Columns,
        metavar="FORMAT",
        help=_enum_help("the format to emit releases in", OutputFormatChoice),
    )
    parser.add_argument(
        "--components",
        action="store_true",
        help="include the components of each release, where the source provides them",
    )
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        metavar="FILE",
        help="index a local copy of the source's document, rather than fetching it",
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        help="the directory to use as an HTTP cache; uses the user cache directory by default",
    )
    parser.add_argument("--timeout", type=int, default=15, help="set the socket timeout")
    parser.add_argument(
        "--progress-spinner",
        type=ProgressSpinnerChoice,
        choices=ProgressSpinnerChoice,
        default=ProgressSpinnerChoice.On,
        help="display a progress spinner",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="run with additional debug logging; supply multiple times to increase verbosity",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="output results to the given file",
        default="stdout",
    )
    return parser


def _parse_args(parser: argparse.ArgumentParser) -> argparse.Namespace:  # pragma: no cover
    args = parser.parse_args()

    # Configure logging upfront, so that we don't miss anything.
    if args.verbose >= 1:
        package_logger.setLevel("DEBUG")
    if args.verbose >= 2:
        logging.getLogger().setLevel("DEBUG")

    logger.debug(f"parsed arguments: {args}")

    return args


def select_releases(
    registry: Registry,
    *,
    platform: Target | None = None,
    latest_patches: bool = False,
    order: OrderChoice = OrderChoice.Descending,
) -> list[Release]:
    """
    Select the releases to list from `registry`.

    `latest_patches` is applied per platform, so that each platform keeps its own
    latest patch releases.
    """
    platforms = [platform] if platform is not None else registry.platforms()

    descending = []
    for target in platforms:
        partition = registry.platform(target)
        if partition is None:
            continue

        releases = partition.descending()
        if latest_patches:
            releases = list(latest_patch_releases(releases))
        descending.append(releases)

    selected = list(heapq.merge(*descending, reverse=True))
    if not order.to_reverse():
        selected.reverse()
    return selected


def main() -> None:  # pragma: no cover
    """
    The primary entrypoint for `rust-releases`.
    """
    parser = _parser()
    args = _parse_args(parser)

    formatter = args.format.to_format(args.components)

    with ExitStack() as stack:
        actors = []
        if args.progress_spinner:
            actors.append(IndexSpinner("Collecting releases"))
        state = stack.enter_context(IndexState(members=actors))

        try:
            source: Source
            if args.input is not None:
                state.update_state(f"Reading {args.input}")
                document = Document.from_path(args.input)
                source = args.source.from_document(document, args.channel, args.platform)
            else:
                source = args.source.fetch(
                    args.channel, args.cache_dir, args.timeout, state, platform=args.platform
                )

            state.update_state("Building the release index")
            registry = source.build_index()
        except SourceConnectionError as e:
            logger.error(str(e))
            _fatal("Tip: the upstream host may be unreachable; try again with --input FILE")
        except SourceError as e:
            _fatal(str(e))

    releases = select_releases(
        registry,
        platform=args.platform,
        latest_patches=args.latest_patches,
        order=args.order,
    )

    platform_count = len(registry.platforms())
    print(
        f"Indexed {len(registry)} {'release' if len(registry) == 1 else 'releases'} "
        f"for {platform_count} {'platform' if platform_count == 1 else 'platforms'}, "
        f"listing {len(releases)}",
        file=sys.stderr,
    )
    with _output_io(args.output) as io:
        print(formatter.format(releases), file=io)
