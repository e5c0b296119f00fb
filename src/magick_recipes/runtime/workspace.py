"""
Scoped temporary directory for intermediate images.

Every recipe run gets one workspace directory named after the process
id. The directory is removed when the ``with`` block exits, whether it
exits normally, through an exception, or because the process received
SIGINT, SIGTERM or SIGHUP.
"""

from __future__ import annotations

import atexit
import os
import shutil
import signal
import tempfile
import threading
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any

from magick_recipes.constants import (
    SIGNAL_EXIT_BASE,
    TEMP_IMAGE_SUFFIX,
    WORKSPACE_PREFIX,
)
from magick_recipes.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from types import FrameType, TracebackType

_TRAPPED_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP")
    if hasattr(signal, name)
)


def _exit_on_signal(signum: int, _frame: FrameType | None) -> None:
    logger.warning("Interrupted by signal %d; cleaning up", signum)
    raise SystemExit(SIGNAL_EXIT_BASE + signum)


class TempWorkspace:
    """Create, hand out paths inside, and reliably remove a temp dir."""

    def __init__(
        self,
        base_dir: Path | str | None = None,
        prefix: str = WORKSPACE_PREFIX,
    ) -> None:
        self.base_dir = Path(base_dir or tempfile.gettempdir())
        self.prefix = prefix
        self.path: Path | None = None
        self._previous_handlers: dict[int, Any] = {}

    def __enter__(self) -> TempWorkspace:
        if not self.base_dir.is_dir():
            msg = f"Temporary directory does not exist: {self.base_dir}"
            raise FileNotFoundError(msg)
        name = f"{self.prefix}_{os.getpid()}_{uuid.uuid4().hex[:8]}"
        self.path = self.base_dir / name
        self.path.mkdir(mode=0o700)
        atexit.register(self.cleanup)
        self._install_handlers()
        logger.debug("Created workspace %s", self.path)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.cleanup()
        finally:
            self._restore_handlers()
            atexit.unregister(self.cleanup)

    def file(self, name: str, suffix: str = TEMP_IMAGE_SUFFIX) -> Path:
        """Return the path of a named artifact inside the workspace."""
        if self.path is None:
            msg = "workspace is not active; use it as a context manager"
            raise RuntimeError(msg)
        return self.path / f"{name}{suffix}"

    def cleanup(self) -> None:
        """Remove the workspace directory; safe to call more than once."""
        if self.path is not None and self.path.exists():
            shutil.rmtree(self.path)
            logger.debug("Removed workspace %s", self.path)

    def _install_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in _TRAPPED_SIGNALS:
            self._previous_handlers[signum] = signal.getsignal(signum)
            signal.signal(signum, _exit_on_signal)

    def _restore_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            # None means the handler was not installed from Python
            signal.signal(
                signum, signal.SIG_DFL if handler is None else handler,
            )
        self._previous_handlers.clear()
