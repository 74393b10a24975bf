import tempfile

import pytest

from rust_releases._release import Release
from rust_releases._toolchain import (
    Beta,
    Nightly,
    ReleaseDate,
    RustVersion,
    Stable,
    Target,
)

LINUX = Target("x86_64-unknown-linux-gnu")
WINDOWS = Target("x86_64-pc-windows-msvc")


def pytest_addoption(parser):
    parser.addoption(
        "--skip-online", action="store_true", help="skip tests that require network connectivity"
    )


def pytest_runtest_setup(item):
    if "online" in item.keywords and item.config.getoption("--skip-online"):
        pytest.skip("skipping test that requires network connectivity due to `--skip-online` flag")


def pytest_configure(config):
    config.addinivalue_line("markers", "online: mark test as requiring network connectivity")


@pytest.fixture
def stable():
    def _stable(version, platform=LINUX, **kwargs):
        return Release(Stable(RustVersion.parse(version)), platform, **kwargs)

    return _stable


@pytest.fixture
def beta():
    def _beta(version, prerelease=None, platform=LINUX, **kwargs):
        return Release(Beta(RustVersion.parse(version), prerelease), platform, **kwargs)

    return _beta


@pytest.fixture
def nightly():
    def _nightly(day, platform=LINUX, **kwargs):
        return Release(Nightly(ReleaseDate.parse(day)), platform, **kwargs)

    return _nightly


@pytest.fixture(scope="session")
def cache_dir():
    cache = tempfile.TemporaryDirectory()
    yield cache.name
    cache.cleanup()
