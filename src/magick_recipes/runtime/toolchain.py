"""Locate the ImageMagick front end and parse its release version."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass

from magick_recipes.constants import MAGICK_BINARIES
from magick_recipes.logging_utils import logger

_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)(?:-(\d+))?")


class ToolNotFoundError(RuntimeError):
    """Raised when no ImageMagick binary can be found on PATH."""


class ToolInvocationError(RuntimeError):
    """Raised when an ImageMagick invocation exits with a failure status."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        msg = f"{command[0]} exited with status {returncode}{detail}"
        super().__init__(msg)


@dataclass(slots=True, frozen=True, order=True)
class MagickVersion:
    """
    ImageMagick release number.

    ``token`` packs the four fields into the zero-padded ``MMmmppRR``
    form, so ``6.9.10-23`` becomes ``6091023`` and versions compare as
    plain integers.
    """

    major: int
    minor: int
    patch: int
    revision: int = 0

    @property
    def token(self) -> int:
        return int(
            f"{self.major:02d}{self.minor:02d}"
            f"{self.patch:02d}{self.revision:02d}",
        )

    @classmethod
    def parse(cls, text: str) -> MagickVersion:
        """Parse ``-version`` output or a bare ``X.Y.Z-R`` string."""
        m = _VERSION_RE.search(text)
        if not m:
            msg = f"cannot find an ImageMagick version in {text!r}"
            raise ValueError(msg)
        return cls(
            major=int(m.group(1)),
            minor=int(m.group(2)),
            patch=int(m.group(3)),
            revision=int(m.group(4) or 0),
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}-{self.revision}"


@dataclass(slots=True, frozen=True)
class Toolchain:
    """The resolved ImageMagick command prefix and its version."""

    program: tuple[str, ...]
    version: MagickVersion


def _resolve_binary(binary: str | None) -> str:
    candidates = (binary,) if binary else MAGICK_BINARIES
    for name in candidates:
        found = shutil.which(name)
        if found:
            return found
    if binary:
        msg = f"ImageMagick binary not found: {binary}"
    else:
        msg = "missing ImageMagick (need `magick` or `convert` on PATH)"
    raise ToolNotFoundError(msg)


def query_version(program: str) -> MagickVersion:
    """Run ``<program> -version`` and parse the reported release."""
    cmd = [program, "-version"]
    proc = subprocess.run(  # noqa: S603
        cmd, text=True, capture_output=True, check=False,
    )
    if proc.returncode != 0:
        raise ToolInvocationError(cmd, proc.returncode, proc.stderr)
    try:
        return MagickVersion.parse(proc.stdout)
    except ValueError as exc:
        raise ToolInvocationError(cmd, proc.returncode, str(exc)) from exc


def detect_toolchain(
    binary: str | None = None,
    version: str | None = None,
) -> Toolchain:
    """
    Find ImageMagick and determine its version.

    An explicit ``binary`` wins over the ``magick`` then ``convert``
    search order. A pinned ``version`` string skips the ``-version``
    query entirely.
    """
    program = _resolve_binary(binary)
    resolved = (
        MagickVersion.parse(version) if version else query_version(program)
    )
    logger.debug("Using %s (ImageMagick %s)", program, resolved)
    return Toolchain(program=(program,), version=resolved)
