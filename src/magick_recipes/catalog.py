"""
Mirror the upstream catalogue of effect scripts.

The upstream site publishes ``script_list.txt``, one ``name - summary``
line per script, and serves each script through a download counter
URL. Syncing saves the list, downloads every script into a staging
workspace, normalizes the bash shebang so the scripts run from any
PATH layout, and moves the results into the destination directory as
executables.
"""

from __future__ import annotations

import http.client
import re
import shutil
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from tqdm import tqdm

from magick_recipes.config_defaults import DEFAULT_SYNC_BASE_URL
from magick_recipes.constants import SCRIPT_MODE, SHEBANG_NEW, SHEBANG_OLD
from magick_recipes.logging_utils import logger
from magick_recipes.runtime.workspace import TempWorkspace

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable

_NAME_RE = re.compile(r"^\w")
_SHEBANG_RE = re.compile(rf"^{re.escape(SHEBANG_OLD)}", re.MULTILINE)


@dataclass(slots=True)
class SyncOptions:
    """Where to fetch from and where to put the mirrored scripts."""

    dest: Path
    list_file: Path
    base_url: str = DEFAULT_SYNC_BASE_URL
    timeout: float = 30.0
    limit: int | None = None
    tmpdir: str | None = None
    progress: bool = True


@dataclass(slots=True)
class SyncReport:
    """Names of the scripts that were and were not mirrored."""

    downloaded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def fetch(url: str, timeout: float) -> bytes:
    """Return the body of ``url``."""
    request = urllib.request.urlopen(url, timeout=timeout)  # noqa: S310
    with request as response:
        return response.read()


def script_list_url(base_url: str = DEFAULT_SYNC_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/script_list.txt"


def download_url(name: str, base_url: str = DEFAULT_SYNC_BASE_URL) -> str:
    """Return the download counter URL serving script ``name``."""
    query = urlencode({"scriptname": name, "dirname": name})
    return f"{base_url.rstrip('/')}/downloadcounter.php?{query}"


def parse_script_list(text: str) -> list[str]:
    """
    Extract script names from ``script_list.txt``.

    The name is everything before the first hyphen on a line; lines that
    do not start with a word character are headings or blank.
    """
    names = []
    for line in text.splitlines():
        name = line.split("-", 1)[0].strip()
        if name and _NAME_RE.match(line):
            names.append(name)
    return names


def fix_shebang(text: str) -> str:
    """Point ``#!/bin/bash`` lines at ``/usr/bin/env bash``."""
    return _SHEBANG_RE.sub(SHEBANG_NEW, text)


def _is_safe_name(name: str) -> bool:
    return Path(name).name == name and name not in {".", ".."}


def sync_scripts(
    options: SyncOptions,
    fetcher: Callable[[str, float], bytes] = fetch,
) -> SyncReport:
    """Download the upstream scripts into ``options.dest``."""
    listing = fetcher(script_list_url(options.base_url), options.timeout)
    options.list_file.parent.mkdir(parents=True, exist_ok=True)
    options.list_file.write_bytes(listing)
    logger.info("Saved script list to %s", options.list_file)

    names = parse_script_list(listing.decode("utf-8", errors="replace"))
    if options.limit is not None:
        names = names[:options.limit]
    logger.info("Syncing %d scripts into %s", len(names), options.dest)

    options.dest.mkdir(parents=True, exist_ok=True)
    report = SyncReport()
    with TempWorkspace(options.tmpdir) as workspace:
        staged: list[tuple[str, Path]] = []
        for name in tqdm(
            names,
            desc="Downloading scripts",
            unit="script",
            disable=not options.progress,
        ):
            if not _is_safe_name(name):
                logger.warning("Skipping unsafe script name: %r", name)
                report.failed.append(name)
                continue
            try:
                body = fetcher(
                    download_url(name, options.base_url), options.timeout,
                )
            except (OSError, http.client.HTTPException) as exc:
                logger.warning("Failed to download %s: %s", name, exc)
                report.failed.append(name)
                continue
            target = workspace.file(name, suffix="")
            # latin-1 round-trips arbitrary bytes unchanged
            target.write_bytes(
                fix_shebang(body.decode("latin-1")).encode("latin-1"),
            )
            staged.append((name, target))

        for name, source in staged:
            final = options.dest / name
            shutil.move(source, final)
            final.chmod(SCRIPT_MODE)
            report.downloaded.append(name)

    logger.info(
        "Synced %d scripts (%d failed)",
        len(report.downloaded),
        len(report.failed),
    )
    return report
