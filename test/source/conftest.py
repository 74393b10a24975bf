import pytest

from rust_releases._source import Document

CHANGELOG = b"""\
Version 1.50.0 (2021-02-11)
============================

Language
-----------------------
- [You can now use `const` values for `x` in `[x; N]` array expressions.][79270]

Version 1.49.0 (2020-12-31)
============================

Version 1.48.0
==============

Versioning policy
-----------------

Version 1.0.0-alpha (2015-01-09)
================================

Version 0.12.0 (2014-10-09)
===========================
"""

DIST_KEYS = b"""\
dist/2021-02-11/rustc-1.50.0-x86_64-unknown-linux-gnu.tar.gz
dist/2021-02-11/rustc-1.50.0-x86_64-pc-windows-msvc.tar.xz
dist/2021-02-11/rustc-1.50.0-x86_64-unknown-linux-gnu.tar.gz.sha256
dist/2021-02-11/rustc-1.50.0-src.tar.gz
dist/2021-02-11/cargo-1.50.0-x86_64-unknown-linux-gnu.tar.gz
dist/2021-02-11/rustc-nightly-x86_64-unknown-linux-gnu.tar.gz
dist/2021-02-11/rustc-beta-x86_64-unknown-linux-gnu.tar.gz
dist/2021-02-10/rustc-1.51.0-beta.2-x86_64-unknown-linux-gnu.tar.gz
dist/rustc-nightly-x86_64-unknown-linux-gnu.tar.gz

"""

AWS_LISTING = b"""\
                           PRE 2015-01-09/
2021-02-11 16:30:18  123456789 rust-1.50.0-x86_64-unknown-linux-gnu.tar.gz
2021-02-11 16:30:18        104 rust-1.50.0-x86_64-unknown-linux-gnu.tar.gz.sha256
2021-02-11 16:30:18  123456789 rust-1.50.0-x86_64-pc-windows-msvc.msi
2021-02-11 16:30:18  123456789 rust-1.51.0-beta-x86_64-unknown-linux-gnu.tar.gz
2021-02-11 16:30:18  123456789 rust-nightly-x86_64-unknown-linux-gnu.tar.gz
2021-02-11 16:30:18  123456789 rustc-1.50.0-x86_64-unknown-linux-gnu.tar.gz
2020-12-31 16:30:18  123456789 rust-1.49.0-x86_64-unknown-linux-gnu.tar.gz
"""

META_MANIFEST = b"""\
static.rust-lang.org/dist/2016-04-14/channel-rust-stable.toml
static.rust-lang.org/dist/2016-04-14/channel-rust-beta.toml
static.rust-lang.org/dist/2016-04-14/channel-rust-nightly.toml
static.rust-lang.org/dist/garbage/channel-rust-stable.toml
static.rust-lang.org/dist/2016-04-14/index.html

"""

STABLE_MANIFEST = b"""\
manifest-version = "2"
date = "2016-04-14"

[pkg.rust]
version = "1.8.0 (db2939409 2016-04-11)"

[pkg.rust.target.x86_64-unknown-linux-gnu]
available = true
url = "https://static.rust-lang.org/dist/2016-04-14/rust-1.8.0-x86_64-unknown-linux-gnu.tar.gz"

[[pkg.rust.target.x86_64-unknown-linux-gnu.components]]
pkg = "rustc"
target = "x86_64-unknown-linux-gnu"

[[pkg.rust.target.x86_64-unknown-linux-gnu.components]]
pkg = "rust-std"
target = "x86_64-unknown-linux-gnu"

[[pkg.rust.target.x86_64-unknown-linux-gnu.extensions]]
pkg = "rust-std"
target = "i686-pc-windows-gnu"

[[pkg.rust.target.x86_64-unknown-linux-gnu.extensions]]
pkg = "rust-docs"
target = "x86_64-unknown-linux-gnu"

[pkg.rust.target.i686-pc-windows-gnu]
available = false
"""

NIGHTLY_MANIFEST = b"""\
manifest-version = "2"
date = "2016-04-14"

[pkg.rust]
version = "1.10.0-nightly (2b6020723 2016-04-13)"

[pkg.rust.target.x86_64-apple-darwin]
available = true
"""


class MockResponse:
    def __init__(self, content, *, status_code=200, from_cache=False):
        self.content = content
        self.status_code = status_code
        self.from_cache = from_cache

    def raise_for_status(self):
        pass


class MockSession:
    """
    Serves canned responses by URL, and records every request made.
    """

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        response = self.responses[url]
        if callable(response):
            response = response(**kwargs)
        return MockResponse(response)


@pytest.fixture
def mock_session():
    return MockSession


@pytest.fixture
def changelog_document():
    return Document(CHANGELOG)


@pytest.fixture
def dist_document():
    return Document(DIST_KEYS)


@pytest.fixture
def aws_listing_document():
    return Document(AWS_LISTING)


@pytest.fixture
def meta_manifest_document():
    return Document(META_MANIFEST)


@pytest.fixture
def stable_manifest_document():
    return Document(STABLE_MANIFEST)


@pytest.fixture
def nightly_manifest_document():
    return Document(NIGHTLY_MANIFEST)
