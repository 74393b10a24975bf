"""
Collect releases from the historical channel release manifests
(`channel-rust-CHANNEL.toml`) listed in the meta manifest.

No manifests have been published since 2020-02-23, so this source only knows
about releases up to that date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Sequence

import toml

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
    Component,
    Nightly,
    ReleaseDate,
    Target,
    ToolchainParseError,
    channel_from_version,
)

logger = logging.getLogger(__name__)

META_MANIFEST_URL = "https://static.rust-lang.org/manifests.txt"

# `static.rust-lang.org/dist/` is 26 characters long, and followed by the date.
_DATE_SLICE = slice(26, 36)


@dataclass(frozen=True)
class ManifestSource:
    """
    A single entry of the meta manifest: the location of one release manifest.
    """

    url: str
    kind: ChannelKind
    date: ReleaseDate


def _channel_of(entry: str) -> ChannelKind | None:
    for kind in (ChannelKind.Beta, ChannelKind.Nightly, ChannelKind.Stable):
        if kind.value in entry:
            return kind
    return None


def parse_meta_manifest(document: Document) -> list[ManifestSource]:
    """
    Parse the meta manifest, whose lines look like:

        static.rust-lang.org/dist/2016-04-14/channel-rust-stable.toml

    Lines without a recognizable channel or date are skipped.
    """
    sources = []
    for line in document.lines():
        entry = line.strip()
        if not entry:
            continue

        kind = _channel_of(entry)
        if kind is None:
            logger.debug(f"skipping meta manifest entry without a channel: {entry!r}")
            continue

        try:
            date = ReleaseDate.parse(entry[_DATE_SLICE])
        except ToolchainParseError:
            logger.debug(f"skipping meta manifest entry without a date: {entry!r}")
            continue

        sources.append(ManifestSource(f"https://{entry}", kind, date))
    return sources


def _require_table(table: dict[str, Any], key: str, context: str) -> dict[str, Any]:
    value = table.get(key)
    if not isinstance(value, dict):
        raise DocumentError(f"release manifest is missing the `{context}` table")
    return value


def _parse_channel(version_field: Any, kind: ChannelKind, date: ReleaseDate | None) -> Channel:
    if kind is ChannelKind.Nightly:
        if date is None:
            raise DocumentError("nightly release manifest has no `date`")
        return Nightly(date)

    # e.g. "1.8.0 (db2939409 2016-04-11)"
    if not isinstance(version_field, str) or not version_field.split():
        raise DocumentError("release manifest has no `pkg.rust.version`")

    try:
        channel = channel_from_version(version_field.split()[0])
    except ToolchainParseError as e:
        raise DocumentError(f"release manifest has an invalid rust version: {e}") from e

    if channel.kind is not kind:
        raise DocumentError(f"expected a {kind} release manifest, found {channel.kind}")
    return channel


def _require_entries(package: dict[str, Any], key: str, context: str) -> list[dict[str, Any]]:
    entries = package.get(key, [])
    if not isinstance(entries, list) or not all(_is_package_entry(e) for e in entries):
        raise DocumentError(f"release manifest has malformed `{context}.{key}`")
    return entries


def _is_package_entry(entry: Any) -> bool:
    return isinstance(entry, dict) and isinstance(entry.get("pkg", ""), str)


def _parse_targets(entries: list[dict[str, Any]]) -> Iterator[Target]:
    for entry in entries:
        if entry.get("pkg") != "rust-std":
            continue
        try:
            yield Target.parse(str(entry.get("target", "")))
        except ToolchainParseError as e:
            logger.debug(f"skipping rust-std extension: {e}")


def parse_release_manifest(document: Document, kind: ChannelKind) -> list[Release]:
    """
    Parse a single release manifest into one release per available target.

    Raises `DocumentError` when the manifest isn't TOML, or its tables don't have
    the expected structure.
    """
    try:
        manifest = toml.loads(document.text())
    except toml.TomlDecodeError as tde:
        raise DocumentError(f"release manifest is not valid TOML: {tde}") from tde

    date = None
    if "date" in manifest:
        try:
            date = ReleaseDate.parse(str(manifest["date"]))
        except ToolchainParseError as e:
            raise DocumentError(f"release manifest has an invalid date: {e}") from e

    rust = _require_table(_require_table(manifest, "pkg", "pkg"), "rust", "pkg.rust")
    channel = _parse_channel(rust.get("version"), kind, date)

    targets = rust.get("target", {})
    if not isinstance(targets, dict):
        raise DocumentError("release manifest has malformed `pkg.rust.target`")

    releases = []
    for triple, package in targets.items():
        context = f"pkg.rust.target.{triple}"
        if not isinstance(package, dict):
            raise DocumentError(f"release manifest has malformed `{context}`")
        if not package.get("available", False):
            continue

        try:
            platform = Target.parse(triple)
        except ToolchainParseError as e:
            logger.debug(f"skipping release manifest target: {e}")
            continue

        extensions = _require_entries(package, "extensions", context)
        defaults = _require_entries(package, "components", context)
        components = {Component(c["pkg"]) for c in defaults if "pkg" in c}
        components |= {
            Component(e["pkg"], optional=True) for e in extensions if "pkg" in e
        } - components

        releases.append(
            Release(
                channel,
                platform,
                date=date,
                components=components,
                targets=set(_parse_targets(extensions)),
            )
        )
    return releases


class ChannelManifests(Source, FetchResources):
    """
    Indexes releases from channel release manifests.

    This source is deprecated upstream: no manifests have been published since
    2020-02-23.
    """

    def __init__(self, documents: Sequence[Document], *, kind: ChannelKind = ChannelKind.Stable):
        """
        Create a new `ChannelManifests` from release manifests of the `kind` channel.
        """
        self._documents = documents
        self._kind = kind

    def releases(self) -> Iterator[Release]:
        for document in self._documents:
            yield from parse_release_manifest(document, self._kind)

    @classmethod
    def fetch_channel(
        cls,
        kind: ChannelKind,
        *,
        cache_dir: Path | None = None,
        timeout: int | None = None,
        state: IndexState = IndexState(),
    ) -> ChannelManifests:
        """
        Retrieve the meta manifest, and every release manifest of the `kind` channel in it.

        See `FetchResources.fetch_channel`.
        """
        logger.warning(
            "channel manifests are no longer published upstream: "
            "releases after 2020-02-23 won't be indexed"
        )

        session = caching_session(cache_dir)
        state.update_state("Fetching the meta manifest")
        meta = fetch_document(session, META_MANIFEST_URL, timeout=timeout)
        sources = [s for s in parse_meta_manifest(meta.document) if s.kind is kind]

        documents = []
        for index, source in enumerate(sources, start=1):
            state.update_state(f"Fetching release manifest {index}/{len(sources)} ({source.date})")
            documents.append(fetch_document(session, source.url, timeout=timeout).document)

        return cls(documents, kind=kind)
