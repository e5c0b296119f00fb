"""
Defines shared type aliases for the magick-recipes commands.

Centralizes reusable type hints to improve consistency and readability.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
VirtualPixel = Literal[
    "mirror", "edge", "tile", "background", "black", "white", "gray",
    "transparent",
]
VIRTUAL_PIXEL_CHOICES: tuple[VirtualPixel, ...] = (
    "mirror", "edge", "tile", "background", "black", "white", "gray",
    "transparent",
)


@dataclass(slots=True, frozen=True)
class RecipeIO:
    """Input image paths and the output path for one recipe run."""

    inputs: tuple[Path, ...]
    output: Path

    @property
    def infile(self) -> Path:
        """Return the primary input image."""
        return self.inputs[0]


@dataclass(slots=True, frozen=True)
class Invocation:
    """
    One call of the image tool, without the program prefix.

    When ``pipe_to_next`` is set the call's stdout is streamed into the
    stdin of the following invocation.
    """

    args: tuple[str, ...]
    pipe_to_next: bool = False
