"""
Version strings for ``--version``.

Reports the package release and the ImageMagick release the recipes
would run against. The package release comes from the installed
distribution metadata or, in a source checkout, from the checkout's own
pyproject.toml.
"""

from __future__ import annotations

from importlib import metadata as importlib_metadata
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from magick_recipes.logging_utils import logger

from .toolchain import ToolInvocationError, ToolNotFoundError, detect_toolchain

DISTRIBUTION = "magick-recipes"
UNKNOWN_VERSION = "0.0.0"


def _checkout_pyproject() -> Path:
    # src/magick_recipes/runtime/version.py -> checkout root
    return Path(__file__).resolve().parents[3] / "pyproject.toml"


def project_version() -> str:
    """Return the magick-recipes release, or 0.0.0 when it is unknown."""
    try:
        return importlib_metadata.version(DISTRIBUTION)
    except importlib_metadata.PackageNotFoundError:
        pass

    pyproject_path = _checkout_pyproject()
    if not pyproject_path.is_file():
        return UNKNOWN_VERSION
    try:
        project = tomlkit.parse(
            pyproject_path.read_text(encoding="utf-8"),
        ).get("project", {})
    except (OSError, TOMLKitError) as exc:
        logger.warning("Error reading %s: %s", pyproject_path, exc)
        return UNKNOWN_VERSION

    if project.get("name") != DISTRIBUTION:
        return UNKNOWN_VERSION
    version = str(project.get("version", "")).strip()
    return version or UNKNOWN_VERSION


def toolchain_version(
    binary: str | None = None,
    pinned: str | None = None,
) -> str:
    """Describe the ImageMagick that would run, or why none is usable."""
    try:
        toolchain = detect_toolchain(binary, pinned)
    except (ToolNotFoundError, ToolInvocationError) as exc:
        return f"ImageMagick unavailable: {exc}"
    return f"ImageMagick {toolchain.version} ({toolchain.program[0]})"


def version_report(
    binary: str | None = None,
    pinned: str | None = None,
) -> str:
    """Two lines: the package release, then the ImageMagick release."""
    return (
        f"{DISTRIBUTION} {project_version()}\n"
        f"{toolchain_version(binary, pinned)}"
    )
