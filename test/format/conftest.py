import pytest

from rust_releases._release import Release
from rust_releases._toolchain import (
    Beta,
    Component,
    Nightly,
    ReleaseDate,
    RustVersion,
    Stable,
    Target,
)

_LINUX = Target("x86_64-unknown-linux-gnu")

_STABLE = Release(
    Stable(RustVersion(1, 50, 0)),
    _LINUX,
    date=ReleaseDate(2021, 2, 11),
    components={
        Component("rustc"),
        Component("cargo"),
        Component("rust-docs", optional=True),
    },
    targets={Target("wasm32-unknown-unknown"), Target("aarch64-unknown-linux-gnu")},
)
_BETA = Release(Beta(RustVersion(1, 51, 0), 2), _LINUX)
_NIGHTLY = Release(Nightly(ReleaseDate(2021, 2, 11)), _LINUX)


@pytest.fixture
def release_data():
    return [_STABLE, _BETA, _NIGHTLY]
