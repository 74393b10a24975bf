import pretend  # type: ignore
import pytest
import requests

import rust_releases._source.interface as interface
from rust_releases._source import (
    ChannelNotAvailableError,
    ConnectionError,
    Document,
    DocumentError,
    Source,
    SourceError,
    fetch_document,
)
from rust_releases._toolchain import ChannelKind


class TestDocument:
    def test_from_path(self, tmp_path):
        path = tmp_path / "RELEASES.md"
        path.write_bytes(b"Version 1.50.0 (2021-02-11)\n")

        document = Document.from_path(path)
        assert document.lines() == ["Version 1.50.0 (2021-02-11)"]
        assert len(document) == 28

    def test_from_path_missing(self, tmp_path):
        with pytest.raises(DocumentError, match="couldn't read document"):
            Document.from_path(tmp_path / "missing.md")

    def test_text_invalid_utf8(self):
        with pytest.raises(DocumentError, match="not valid UTF-8"):
            Document(b"\xff\xfe\xfd").text()

    def test_empty(self):
        document = Document(b"")
        assert document.lines() == []
        assert len(document) == 0


def test_channel_not_available_error():
    error = ChannelNotAvailableError(ChannelKind.Nightly)

    assert isinstance(error, SourceError)
    assert error.kind is ChannelKind.Nightly
    assert str(error) == "Release channel 'nightly' is not available for this source"


def test_fetch_document(mock_session):
    session = mock_session({"https://example.com/doc": b"contents"})

    retrieved = fetch_document(session, "https://example.com/doc", timeout=3)

    assert retrieved.document == Document(b"contents")
    assert retrieved.location == "https://example.com/doc"
    assert not retrieved.from_cache
    assert session.requests == [("https://example.com/doc", {"params": None, "timeout": 3})]


def test_fetch_document_from_cache(monkeypatch):
    response = pretend.stub(content=b"cached", from_cache=True, raise_for_status=lambda: None)
    session = pretend.stub(get=lambda url, **kw: response)

    logger = pretend.stub(debug=pretend.call_recorder(lambda s: None))
    monkeypatch.setattr(interface, "logger", logger)

    retrieved = fetch_document(session, "https://example.com/doc")

    assert retrieved.from_cache
    assert len(logger.debug.calls) == 1


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError, requests.Timeout, requests.TooManyRedirects],
)
def test_fetch_document_connection_error(error):
    def _get(url, **kwargs):
        raise error("nope")

    session = pretend.stub(get=_get)

    with pytest.raises(ConnectionError, match="Could not retrieve https://example.com/doc"):
        fetch_document(session, "https://example.com/doc")


def test_fetch_document_http_error():
    def _raise_for_status():
        raise requests.HTTPError("404 Client Error")

    response = pretend.stub(raise_for_status=_raise_for_status)
    session = pretend.stub(get=lambda url, **kw: response)

    with pytest.raises(SourceError, match="Unexpected response") as exc_info:
        fetch_document(session, "https://example.com/doc")
    assert not isinstance(exc_info.value, ConnectionError)


def test_build_index(stable, nightly):
    class DummySource(Source):
        def releases(self):
            yield stable("1.0.0")
            yield stable("1.0.0")
            yield nightly("2021-01-01")

    registry = DummySource().build_index()

    assert registry.count_releases() == 2
    assert len(registry.platforms()) == 1


def test_build_index_propagates_errors():
    class BrokenSource(Source):
        def releases(self):
            raise DocumentError("garbled")
            yield

    with pytest.raises(DocumentError, match="garbled"):
        BrokenSource().build_index()
