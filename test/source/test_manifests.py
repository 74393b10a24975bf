from pathlib import Path

import pretend  # type: ignore
import pytest

import rust_releases._source.manifests as manifests
from rust_releases._source import ChannelManifests, Document, DocumentError
from rust_releases._source.manifests import (
    META_MANIFEST_URL,
    ManifestSource,
    parse_meta_manifest,
    parse_release_manifest,
)
from rust_releases._state import IndexState
from rust_releases._toolchain import (
    ChannelKind,
    Component,
    Nightly,
    ReleaseDate,
    RustVersion,
    Target,
)

LINUX = Target("x86_64-unknown-linux-gnu")
DATE = ReleaseDate(2016, 4, 14)


def test_parse_meta_manifest(meta_manifest_document):
    assert parse_meta_manifest(meta_manifest_document) == [
        ManifestSource(
            "https://static.rust-lang.org/dist/2016-04-14/channel-rust-stable.toml",
            ChannelKind.Stable,
            DATE,
        ),
        ManifestSource(
            "https://static.rust-lang.org/dist/2016-04-14/channel-rust-beta.toml",
            ChannelKind.Beta,
            DATE,
        ),
        ManifestSource(
            "https://static.rust-lang.org/dist/2016-04-14/channel-rust-nightly.toml",
            ChannelKind.Nightly,
            DATE,
        ),
    ]


def test_parse_meta_manifest_logs_skipped(monkeypatch, meta_manifest_document):
    logger = pretend.stub(debug=pretend.call_recorder(lambda s: None))
    monkeypatch.setattr(manifests, "logger", logger)

    parse_meta_manifest(meta_manifest_document)

    # One entry without a date, one without a channel.
    assert len(logger.debug.calls) == 2


def test_parse_release_manifest(stable_manifest_document):
    releases = parse_release_manifest(stable_manifest_document, ChannelKind.Stable)

    # The unavailable i686-pc-windows-gnu target isn't a release.
    assert len(releases) == 1

    (release,) = releases
    assert release.is_stable()
    assert release.version == RustVersion(1, 8, 0)
    assert release.date == DATE
    assert release.platform == LINUX
    assert [c.name for c in release.default_components()] == ["rust-std", "rustc"]
    assert [c.name for c in release.extension_components()] == ["rust-docs"]
    assert release.targets == {Target("i686-pc-windows-gnu")}


def test_parse_release_manifest_components_take_precedence(stable_manifest_document):
    (release,) = parse_release_manifest(stable_manifest_document, ChannelKind.Stable)

    # rust-std is both a component and an extension; it's installed by default.
    rust_std = release.find_component("rust-std")
    assert rust_std == Component("rust-std")
    assert not rust_std.optional


def test_parse_release_manifest_nightly(nightly_manifest_document):
    (release,) = parse_release_manifest(nightly_manifest_document, ChannelKind.Nightly)

    assert release.channel == Nightly(DATE)
    assert release.platform == Target("x86_64-apple-darwin")
    assert release.components == frozenset()


def test_parse_release_manifest_nightly_without_date():
    document = Document(b'[pkg.rust]\nversion = "1.10.0-nightly"\n')

    with pytest.raises(DocumentError, match="no `date`"):
        parse_release_manifest(document, ChannelKind.Nightly)


def test_parse_release_manifest_wrong_channel(stable_manifest_document):
    with pytest.raises(DocumentError, match="expected a beta release manifest"):
        parse_release_manifest(stable_manifest_document, ChannelKind.Beta)


@pytest.mark.parametrize(
    "content, match",
    [
        (b"[[[not toml", "not valid TOML"),
        (b'date = "2016-04-14"\n', "`pkg` table"),
        (b'[pkg]\nname = "rust"\n', "`pkg.rust` table"),
        (b'date = "April"\n[pkg.rust]\nversion = "1.8.0"\n', "invalid date"),
        (b"[pkg.rust]\nversion = 1\n", "no `pkg.rust.version`"),
        (b'[pkg.rust]\nversion = "one point eight"\n', "invalid rust version"),
    ],
)
def test_parse_release_manifest_invalid(content, match):
    with pytest.raises(DocumentError, match=match):
        parse_release_manifest(Document(content), ChannelKind.Stable)


_MANIFEST_HEAD = b'date = "2016-04-14"\n[pkg.rust]\nversion = "1.8.0"\n'
_LINUX_TABLE = b"[pkg.rust.target.x86_64-unknown-linux-gnu]\navailable = true\n"


@pytest.mark.parametrize(
    "content, match",
    [
        (_MANIFEST_HEAD + b'target = "oops"\n', "`pkg.rust.target`"),
        (
            _MANIFEST_HEAD + b'[pkg.rust.target]\nx86_64-unknown-linux-gnu = "oops"\n',
            "`pkg.rust.target.x86_64-unknown-linux-gnu`",
        ),
        (_MANIFEST_HEAD + _LINUX_TABLE + b'components = "oops"\n', r"\.components`"),
        (_MANIFEST_HEAD + _LINUX_TABLE + b"components = [1, 2]\n", r"\.components`"),
        (_MANIFEST_HEAD + _LINUX_TABLE + b"extensions = [{ pkg = 1 }]\n", r"\.extensions`"),
    ],
)
def test_parse_release_manifest_malformed_targets(content, match):
    with pytest.raises(DocumentError, match=match):
        parse_release_manifest(Document(content), ChannelKind.Stable)


def test_channel_manifests_malformed_target_is_document_error():
    document = Document(_MANIFEST_HEAD + b"[pkg.rust.target]\nx86_64-unknown-linux-gnu = 1\n")

    with pytest.raises(DocumentError):
        ChannelManifests([document]).build_index()


def test_channel_manifests_releases(stable_manifest_document):
    source = ChannelManifests([stable_manifest_document, stable_manifest_document])

    # The same manifest twice doesn't duplicate releases.
    assert len(list(source.releases())) == 2
    assert source.build_index().count_releases() == 1


def test_channel_manifests_fetch(
    monkeypatch, mock_session, meta_manifest_document, stable_manifest_document
):
    session = mock_session(
        {
            META_MANIFEST_URL: meta_manifest_document.content,
            "https://static.rust-lang.org/dist/2016-04-14/channel-rust-stable.toml": (
                stable_manifest_document.content
            ),
        }
    )
    monkeypatch.setattr(manifests, "caching_session", lambda cache_dir: session)

    logger = pretend.stub(
        warning=pretend.call_recorder(lambda s: None),
        debug=pretend.call_recorder(lambda s: None),
    )
    monkeypatch.setattr(manifests, "logger", logger)

    state = pretend.stub(update_state=pretend.call_recorder(lambda message: None))
    source = ChannelManifests.fetch_channel(ChannelKind.Stable, state=state)

    assert source.build_index().count_releases() == 1
    assert [url for url, _ in session.requests] == [
        META_MANIFEST_URL,
        "https://static.rust-lang.org/dist/2016-04-14/channel-rust-stable.toml",
    ]
    assert state.update_state.calls == [
        pretend.call("Fetching the meta manifest"),
        pretend.call("Fetching release manifest 1/1 (2016-04-14)"),
    ]
    assert len(logger.warning.calls) == 1


@pytest.mark.online
def test_channel_manifests_fetch_online(cache_dir):
    source = ChannelManifests.fetch_channel(
        ChannelKind.Stable, cache_dir=Path(cache_dir), state=IndexState()
    )
    releases = list(source.releases())

    assert len(releases) > 0
    assert all(r.is_stable() for r in releases)
