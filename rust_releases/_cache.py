"""
HTTP caching for `rust-releases`.

Upstream release documents change at most daily, so responses are kept in an
on-disk cache and reused for a day regardless of the server's caching headers.
"""

from __future__ import annotations

import logging
import os
from datetime import timedelta
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import platformdirs
import requests
from cachecontrol import CacheControl
from cachecontrol.caches import FileCache
from cachecontrol.heuristics import ExpiresAfter

from rust_releases._version import __version__

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TIMEOUT = timedelta(days=1)

USER_AGENT = f"rust-releases/{__version__} (github.com/foresterre/rust-releases/issues)"

# Upstream hosts redirect at most once or twice.
_MAX_REDIRECTS = 5


def _get_cache_dir(custom_cache_dir: Path | None) -> Path:
    """
    Returns a directory path suitable for HTTP caching.

    The directory is **not** guaranteed to exist.
    """

    if custom_cache_dir is not None:
        return custom_cache_dir
    return platformdirs.user_cache_path("rust-releases", appauthor=False)


class _SafeFileCache(FileCache):
    """
    A `FileCache` that degrades to a cache miss on I/O failures, and replaces
    entries atomically so that concurrent `rust-releases` processes sharing a
    cache directory never observe partially written documents.
    """

    def __init__(self, directory: Path):
        self._logged_warning = False
        super().__init__(directory)

    def _warn_once(self, action: str, e: Exception) -> None:
        if not self._logged_warning:
            logger.warning(f"Failed to {action} cache directory, documents will be refetched: {e}")
            self._logged_warning = True

    def get(self, key: str) -> Any | None:
        try:
            return super().get(key)
        except Exception as e:  # pragma: no cover
            self._warn_once("read from", e)
            return None

    def set(self, key: str, value: bytes, expires: Any | None = None) -> None:
        try:
            self._set_impl(key, value)
        except Exception as e:  # pragma: no cover
            self._warn_once("write to", e)

    def _set_impl(self, key: str, value: bytes) -> None:
        name: str = super()._fn(key)
        directory = os.path.dirname(name)
        os.makedirs(directory, self.dirmode, exist_ok=True)

        with NamedTemporaryFile(delete=False, dir=directory) as io:
            io.write(value)
            io.flush()
            os.fsync(io.fileno())

        # Windows can't rename the temporary file while it's open.
        os.replace(io.name, name)

    def delete(self, key: str) -> None:  # pragma: no cover
        try:
            super().delete(key)
        except Exception as e:
            self._warn_once("delete from", e)


def caching_session(
    cache_dir: Path | None, *, cache_timeout: timedelta = DEFAULT_CACHE_TIMEOUT
) -> CacheControl:
    """
    Return a `requests` style session, with suitable caching middleware.

    Uses the given `cache_dir` for the HTTP cache, or the user's cache directory
    for `rust-releases` when `cache_dir` is `None`. Responses are considered fresh
    for `cache_timeout` after they were fetched.
    """

    inner_session = requests.Session()
    inner_session.max_redirects = _MAX_REDIRECTS
    inner_session.headers["User-Agent"] = USER_AGENT

    directory = _get_cache_dir(cache_dir)
    logger.debug(f"using HTTP cache at {directory} (timeout: {cache_timeout})")

    return CacheControl(
        inner_session,
        cache=_SafeFileCache(directory),
        heuristic=ExpiresAfter(seconds=int(cache_timeout.total_seconds())),
    )
