"""
Interfaces for "release sources", i.e. upstream documents from which
Rust releases can be indexed.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping

import requests

from rust_releases._register import Registry
from rust_releases._release import Release
from rust_releases._state import IndexState
from rust_releases._toolchain import ChannelKind

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """
    Raised when a `Source` fails to provide its releases, for any reason.

    Concrete sources are expected to raise the subclasses of this exception
    where they apply, to provide more context.
    """

    pass


class ConnectionError(SourceError):
    """
    A specialization of `SourceError` for cases where an upstream document
    can't be retrieved, e.g. because the host is unreachable or times out.
    """

    pass


class ChannelNotAvailableError(SourceError):
    """
    A specialization of `SourceError` for sources which don't index releases
    of the requested channel.
    """

    def __init__(self, kind: ChannelKind) -> None:
        super().__init__(f"Release channel '{kind}' is not available for this source")
        self.kind = kind


class DocumentError(SourceError):
    """
    A specialization of `SourceError` for documents which can't be decoded,
    or which don't have the structure a source expects.
    """

    pass


@dataclass(frozen=True)
class Document:
    """
    The raw contents of an upstream document.
    """

    content: bytes

    @classmethod
    def from_path(cls, path: Path) -> Document:
        """
        Read a `Document` from a local file.
        """
        try:
            return cls(path.read_bytes())
        except OSError as e:
            raise DocumentError(f"couldn't read document from {path}: {e}") from e

    def text(self) -> str:
        """
        The contents, decoded as UTF-8.
        """
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentError(f"document is not valid UTF-8: {e}") from e

    def lines(self) -> list[str]:
        return self.text().splitlines()

    def __len__(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class RetrievedDocument:
    """
    A `Document` retrieved from a remote location.
    """

    document: Document

    location: str
    """
    The URL the document was requested from.
    """

    from_cache: bool = False
    """
    Whether the document was served by the local HTTP cache.
    """


def fetch_document(
    session: requests.Session,
    url: str,
    *,
    timeout: int | None = None,
    params: Mapping[str, Any] | None = None,
) -> RetrievedDocument:
    """
    Retrieve the document at `url` with the given (caching) `session`.

    Raises `ConnectionError` when the host can't be reached, and `SourceError` for
    unsuccessful responses.
    """
    try:
        response: requests.Response = session.get(url, params=params, timeout=timeout)
        response.raise_for_status()
    except (requests.ConnectionError, requests.Timeout, requests.TooManyRedirects) as e:
        raise ConnectionError(f"Could not retrieve {url}") from e
    except requests.HTTPError as http_error:
        raise SourceError(f"Unexpected response for {url}: {http_error}") from http_error

    from_cache = bool(getattr(response, "from_cache", False))
    logger.debug(f"retrieved {url} ({len(response.content)} bytes, from cache: {from_cache})")
    return RetrievedDocument(Document(response.content), url, from_cache)


class Source(ABC):
    """
    Represents an abstract source of Rust releases.

    Each concrete source (e.g. the Rust changelog) subclasses `Source` and parses
    its own document format.
    """

    @abstractmethod
    def releases(self) -> Iterator[Release]:  # pragma: no cover
        """
        Yield the releases known to this source, in no particular order.
        """
        raise NotImplementedError

    def build_index(self) -> Registry:
        """
        Collect the releases of this source into a `Registry`.
        """
        return Registry(self.releases())


class FetchResources(ABC):
    """
    Implemented by sources which can retrieve their documents from upstream.
    """

    @classmethod
    @abstractmethod
    def fetch_channel(
        cls,
        kind: ChannelKind,
        *,
        cache_dir: Path | None = None,
        timeout: int | None = None,
        state: IndexState = IndexState(),
    ) -> Source:  # pragma: no cover
        """
        Retrieve the documents needed to index releases of the `kind` channel.

        `cache_dir` is the HTTP cache directory to use, or `None` for the default.
        `timeout` is the number of seconds to wait on each network request.

        Raises `ChannelNotAvailableError` if this source doesn't index `kind` releases.
        """
        raise NotImplementedError
