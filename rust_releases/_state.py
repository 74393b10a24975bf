"""
Interfaces for reporting indexing progress to a user interface, and a progress
spinner implementation for the CLI.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from logging.handlers import MemoryHandler
from typing import Any, Sequence

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner


class IndexState:
    """
    Fans out progress updates to a set of `_StateActor` members.

    Library users can leave this as its default (memberless) construction
    wherever it appears in a signature; only the CLI attaches a spinner.
    """

    def __init__(self, *, members: Sequence[_StateActor] = ()):
        self._members = members

    def update_state(self, message: str) -> None:
        """
        Report that indexing has progressed; `message` is shown to the user.
        """
        for member in self._members:
            member.update_state(message)

    def initialize(self) -> None:
        for member in self._members:
            member.initialize()

    def finalize(self) -> None:
        for member in self._members:
            member.finalize()

    def __enter__(self) -> IndexState:  # pragma: no cover
        self.initialize()
        return self

    def __exit__(
        self, _exc_type: Any, _exc_value: Any, _exc_traceback: Any
    ) -> None:  # pragma: no cover
        self.finalize()


class _StateActor(ABC):
    @abstractmethod
    def update_state(self, message: str) -> None:
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def initialize(self) -> None:
        """
        Called before the first update. Implementors with no setup to do should
        override this as a no-op.
        """
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def finalize(self) -> None:
        """
        Called once no further updates will follow.
        """
        raise NotImplementedError  # pragma: no cover


class IndexSpinner(_StateActor):  # pragma: no cover
    """
    A progress spinner, drawn with `rich` on stderr.

    While the spinner runs, log records are held back in memory so that they
    don't interleave with the animation, and are written out once it stops.
    """

    def __init__(self, message: str = "") -> None:
        self._console = Console(stderr=True)
        self._spinner = Spinner("line", text=message, style="status.spinner")
        self._live = Live(
            self._spinner, console=self._console, refresh_per_second=30, transient=True
        )

        # No target until `finalize`, so nothing is flushed while the spinner is drawn.
        self.log_handler = MemoryHandler(
            0, flushLevel=logging.ERROR, target=None, flushOnClose=False
        )
        self.prev_handlers: list[logging.Handler] = []

    def update_state(self, message: str) -> None:
        self._spinner.update(text=message)
        self._live.update(self._spinner, refresh=True)

    def initialize(self) -> None:
        root_logger = logging.root
        self.prev_handlers = list(root_logger.handlers)
        for handler in self.prev_handlers:
            root_logger.removeHandler(handler)
        root_logger.addHandler(self.log_handler)

        self._live.start()

    def finalize(self) -> None:
        self._live.stop()

        root_logger = logging.root
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(logging.BASIC_FORMAT))
        self.log_handler.setTarget(stream_handler)
        self.log_handler.flush()

        root_logger.removeHandler(self.log_handler)
        for handler in self.prev_handlers:
            root_logger.addHandler(handler)
