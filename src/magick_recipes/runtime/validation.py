"""
Input validation helpers for recipe arguments and file paths.

The converters here follow the argparse ``type=`` convention: they take
the raw command-line text and either return the parsed value or raise
``ValueError`` with a short message. The CLI wraps them so failures
surface as ordinary argparse usage errors.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Iterable, Mapping

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)"
_POINT_RE = re.compile(rf"^\s*({_NUMBER})\s*,\s*({_NUMBER})\s*$")

_COLOR_RE = re.compile(
    r"""
    ^(?:
        \#(?:[0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8}|[0-9a-f]{12}
            |[0-9a-f]{16})
      | [a-z]+[0-9]*
      | (?:s?rgba?|hsla?|hsb|hsv|cmyka?|graya?)\(\s*[0-9.%,\s]+\)
    )$
    """,
    re.IGNORECASE | re.VERBOSE,
)


def _format_bound(value: float) -> str:
    return f"{value:g}"


def float_in_range(lo: float, hi: float) -> Callable[[str], float]:
    """Build a converter accepting floats in the closed range [lo, hi]."""

    def convert(text: str) -> float:
        try:
            value = float(text)
        except ValueError as exc:
            msg = f"{text!r} is not a number"
            raise ValueError(msg) from exc
        if not lo <= value <= hi:
            msg = (
                f"{text} is out of range; must be between "
                f"{_format_bound(lo)} and {_format_bound(hi)}"
            )
            raise ValueError(msg)
        return value

    return convert


def int_in_range(lo: int, hi: int) -> Callable[[str], int]:
    """Build a converter accepting integers in the closed range [lo, hi]."""

    def convert(text: str) -> int:
        try:
            value = int(text)
        except ValueError as exc:
            msg = f"{text!r} is not an integer"
            raise ValueError(msg) from exc
        if not lo <= value <= hi:
            msg = f"{text} is out of range; must be between {lo} and {hi}"
            raise ValueError(msg)
        return value

    return convert


def choice(
    tokens: Iterable[str],
    aliases: Mapping[str, str] | None = None,
) -> Callable[[str], str]:
    """
    Build a converter for an enumerated option.

    Matching is case-insensitive. A value is accepted when it is a token,
    a documented alias, or a prefix that identifies exactly one token.
    """
    valid = tuple(tokens)
    alias_map = {k.lower(): v for k, v in (aliases or {}).items()}

    def convert(text: str) -> str:
        wanted = text.strip().lower()
        if wanted in valid:
            return wanted
        if wanted in alias_map:
            return alias_map[wanted]
        matches = [t for t in valid if wanted and t.startswith(wanted)]
        if len(matches) == 1:
            return matches[0]
        listing = ", ".join(valid)
        if len(matches) > 1:
            msg = f"{text!r} is ambiguous; choose from {listing}"
        else:
            msg = f"{text!r} is not a valid choice; choose from {listing}"
        raise ValueError(msg)

    return convert


def color_spec(text: str) -> str:
    """Accept an ImageMagick color name, hex value, or functional form."""
    value = text.strip()
    if not _COLOR_RE.match(value):
        msg = f"{text!r} is not a valid color specification"
        raise ValueError(msg)
    return value


def point(text: str) -> tuple[float, float]:
    """Parse a single ``x,y`` coordinate pair."""
    m = _POINT_RE.match(text)
    if not m:
        msg = f"{text!r} is not a valid x,y point"
        raise ValueError(msg)
    return (float(m.group(1)), float(m.group(2)))


def point_list(count: int) -> Callable[[str], tuple[tuple[float, float], ...]]:
    """Build a converter for exactly ``count`` whitespace-separated points."""

    def convert(text: str) -> tuple[tuple[float, float], ...]:
        pieces = text.split()
        if len(pieces) != count:
            msg = (
                f"expected {count} x,y points separated by spaces, "
                f"got {len(pieces)}"
            )
            raise ValueError(msg)
        return tuple(point(piece) for piece in pieces)

    return convert


def validate_input_paths(paths: Iterable[Path | str]) -> None:
    """Ensure every input path is an existing, readable regular file."""
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            msg = f"Input image not found: {raw}"
            raise FileNotFoundError(msg)
        if not path.is_file():
            msg = f"Input image is not a regular file: {raw}"
            raise FileNotFoundError(msg)
        if not os.access(path, os.R_OK):
            msg = f"Input image is not readable: {raw}"
            raise PermissionError(msg)


def validate_output_path(path: Path | str) -> None:
    """Ensure the output file's directory already exists."""
    parent = Path(path).parent
    if not parent.is_dir():
        msg = f"Output directory does not exist: {parent}"
        raise FileNotFoundError(msg)


def validate_tmpdir(path: Path | str | None) -> None:
    """Ensure a configured temp directory exists; None means the default."""
    if path is not None and not Path(path).is_dir():
        msg = f"Temporary directory does not exist: {path}"
        raise FileNotFoundError(msg)
