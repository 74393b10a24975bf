"""
Interfaces for formatting releases into a string representation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rust_releases._release import Release


class ReleaseFormat(ABC):
    """
    Represents an abstract string representation for a list of releases.
    """

    @abstractmethod
    def format(self, releases: list[Release]) -> str:  # pragma: no cover
        """
        Convert a list of releases into a string, preserving their order.
        """
        raise NotImplementedError
