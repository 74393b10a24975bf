"""
Functionality for formatting releases as an array of JSON objects.
"""

from __future__ import annotations

import json
from typing import Any

from rust_releases._release import Release
from rust_releases._toolchain import Beta

from .interface import ReleaseFormat


class JsonFormat(ReleaseFormat):
    """
    An implementation of `ReleaseFormat` that formats releases as an array of JSON objects.
    """

    def __init__(self, output_components: bool = False):
        """
        Create a new `JsonFormat`.

        `output_components` is a flag to determine whether the components and extra
        targets of each release should be included in the output.
        """
        self.output_components = output_components

    def format(self, releases: list[Release]) -> str:
        """
        Returns a JSON formatted string for the given releases.

        See `ReleaseFormat.format`.
        """
        return json.dumps({"releases": [self._format_release(r) for r in releases]})

    def _format_release(self, release: Release) -> dict[str, Any]:
        release_json: dict[str, Any] = {
            "channel": str(release.kind),
            "version": str(release.version) if release.version is not None else None,
            "date": str(release.date) if release.date is not None else None,
            "platform": str(release.platform),
        }
        if isinstance(release.channel, Beta):
            release_json["prerelease"] = release.channel.prerelease
        if self.output_components:
            release_json["components"] = [c.name for c in release.default_components()]
            release_json["extensions"] = [c.name for c in release.extension_components()]
            release_json["targets"] = sorted(str(t) for t in release.targets)
        return release_json
