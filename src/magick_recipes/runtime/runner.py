"""Execute composed ImageMagick invocations, alone or as pipe chains."""

from __future__ import annotations

import shlex
import signal
import subprocess
import tempfile
from contextlib import ExitStack
from typing import IO, TYPE_CHECKING

from magick_recipes.logging_utils import logger
from magick_recipes.runtime.toolchain import ToolInvocationError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from magick_recipes.runtime.toolchain import Toolchain
    from magick_recipes.type_defs import Invocation

_STATS_FORMAT = " ".join(
    f"%[fx:mean.{c}] %[fx:standard_deviation.{c}]" for c in "rgb"
)
_SIGPIPE_STATUS = -getattr(signal, "SIGPIPE", 13)


def _reap(proc: subprocess.Popen[bytes]) -> None:
    if proc.poll() is None:
        proc.kill()
        proc.wait()


def _group_chains(
    invocations: Iterable[Invocation],
) -> list[list[Invocation]]:
    """Split invocations into runs joined by ``pipe_to_next``."""
    chains: list[list[Invocation]] = []
    current: list[Invocation] = []
    for inv in invocations:
        current.append(inv)
        if not inv.pipe_to_next:
            chains.append(current)
            current = []
    if current:
        msg = "the last invocation cannot pipe into a following one"
        raise ValueError(msg)
    return chains


class MagickRunner:
    """
    Run commands against one resolved toolchain.

    Every non-zero exit status raises ``ToolInvocationError``. In dry-run
    mode the commands that write files are only logged; read-only
    queries still execute because later commands depend on their output.
    """

    def __init__(self, toolchain: Toolchain, *, dry_run: bool = False) -> None:
        self.toolchain = toolchain
        self.dry_run = dry_run

    def command(self, args: Sequence[str]) -> list[str]:
        """Prefix ``args`` with the toolchain program."""
        return [*self.toolchain.program, *args]

    def _execute(self, cmd: list[str]) -> str:
        proc = subprocess.run(  # noqa: S603
            cmd, text=True, capture_output=True, check=False,
        )
        if proc.returncode != 0:
            raise ToolInvocationError(cmd, proc.returncode, proc.stderr)
        return proc.stdout

    def run(self, args: Sequence[str]) -> str:
        """Run one invocation and return its stdout."""
        cmd = self.command(args)
        if self.dry_run:
            logger.info("[dry-run] %s", shlex.join(cmd))
            return ""
        logger.debug("Running: %s", shlex.join(cmd))
        return self._execute(cmd)

    def query(self, args: Sequence[str]) -> str:
        """Run a read-only invocation and return its stripped stdout."""
        cmd = self.command(args)
        logger.debug("Querying: %s", shlex.join(cmd))
        return self._execute(cmd).strip()

    def dimensions(self, path: Path | str) -> tuple[int, int]:
        """Return ``(width, height)`` of the first frame of ``path``."""
        out = self.query([f"{path}[0]", "-format", "%w %h", "info:"])
        try:
            width, height = (int(v) for v in out.split())
        except ValueError as exc:
            msg = f"unexpected size report for {path}: {out!r}"
            raise ValueError(msg) from exc
        return (width, height)

    def channel_stats(
        self,
        path: Path | str,
        colorspace: str | None = None,
    ) -> tuple[tuple[float, float], ...]:
        """
        Return per-channel ``(mean, standard deviation)`` of ``path``.

        Values are normalized to [0, 1] and measured after an optional
        colorspace conversion.
        """
        args = [f"{path}[0]"]
        if colorspace:
            args += ["-colorspace", colorspace]
        args += ["-format", _STATS_FORMAT, "info:"]
        out = self.query(args)
        try:
            values = [float(v) for v in out.split()]
        except ValueError as exc:
            msg = f"unexpected statistics for {path}: {out!r}"
            raise ValueError(msg) from exc
        if len(values) != 6:  # noqa: PLR2004
            msg = f"unexpected statistics for {path}: {out!r}"
            raise ValueError(msg)
        return tuple(zip(values[0::2], values[1::2], strict=True))

    def run_pipeline(self, invocations: Iterable[Invocation]) -> None:
        """Run invocations in order, streaming ``pipe_to_next`` groups."""
        for chain in _group_chains(invocations):
            if len(chain) == 1:
                self.run(chain[0].args)
            else:
                self._run_chain(chain)

    def _run_chain(self, chain: list[Invocation]) -> str:
        commands = [self.command(inv.args) for inv in chain]
        rendered = " | ".join(shlex.join(cmd) for cmd in commands)
        if self.dry_run:
            logger.info("[dry-run] %s", rendered)
            return ""
        logger.debug("Running: %s", rendered)

        with ExitStack() as stack:
            started: list[
                tuple[list[str], subprocess.Popen[bytes], IO[bytes]]
            ] = []
            upstream = None
            for cmd in commands:
                err = stack.enter_context(tempfile.TemporaryFile())
                proc = subprocess.Popen(  # noqa: S603
                    cmd,
                    stdin=upstream,
                    stdout=subprocess.PIPE,
                    stderr=err,
                )
                stack.callback(_reap, proc)
                if upstream is not None:
                    # the child holds its own copy now
                    upstream.close()
                upstream = proc.stdout
                started.append((cmd, proc, err))

            stdout, _ = started[-1][1].communicate()
            for _cmd, proc, _err in started:
                proc.wait()

            failed = [entry for entry in started if entry[1].returncode != 0]
            if failed:
                # a broken pipe upstream is a symptom, not the cause
                real = [
                    f for f in failed if f[1].returncode != _SIGPIPE_STATUS
                ]
                cmd, proc, err = (real or failed)[0]
                err.seek(0)
                stderr = err.read().decode(errors="replace")
                raise ToolInvocationError(cmd, proc.returncode, stderr)
        return stdout.decode(errors="replace")
