"""
Turn an image into a mirrored kaleidoscope.

The largest centered square is cut from the (optionally rotated) input
and one of its quadrants is kept. Quad mode mirrors that quadrant left
to right and top to bottom for four-fold symmetry. Octant mode first
folds the quadrant across its diagonal, giving eight-fold symmetry.
The result has the size of the centered square.

Quadrant names may be abbreviated: ul, ur, ll, lr.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import Field

from magick_recipes.constants import STREAM_FORMAT
from magick_recipes.recipes.base import Recipe, RecipeParams
from magick_recipes.type_defs import (
    VIRTUAL_PIXEL_CHOICES,
    Invocation,
    VirtualPixel,
)

if TYPE_CHECKING:  # pragma: no cover
    import argparse
    from collections.abc import Sequence

    from magick_recipes.recipes.base import RecipeContext
    from magick_recipes.type_defs import RecipeIO

KaleidoscopeMode = Literal["quad", "octant"]
Quadrant = Literal["upperleft", "upperright", "lowerleft", "lowerright"]

QUADRANT_ALIASES = {
    "ul": "upperleft",
    "ur": "upperright",
    "ll": "lowerleft",
    "lr": "lowerright",
}

# Flips that bring each quadrant to the upper-left orientation
_NORMALIZE: dict[str, tuple[str, ...]] = {
    "upperleft": (),
    "upperright": ("-flop",),
    "lowerleft": ("-flip",),
    "lowerright": ("-flip", "-flop"),
}


class KaleidoscopeParams(RecipeParams):
    """Symmetry mode, source quadrant and optional pre-rotation."""

    mode: KaleidoscopeMode = "quad"
    quadrant: Quadrant = "upperleft"
    angle: float = Field(0.0, ge=0, le=360)
    virtual_pixel: VirtualPixel = "mirror"


class Kaleidoscope(Recipe):
    """Quad or octant mirror symmetry."""

    name = "kaleidoscope"
    summary = "mirror one quadrant into a 4- or 8-fold kaleidoscope"
    params_model = KaleidoscopeParams
    examples = (
        "kaleidoscope photo.jpg kaleido.png",
        "kaleidoscope -m octant -q lr -a 30 photo.jpg kaleido.png",
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-m", "--mode",
            type=self.choice_arg(("quad", "octant")),
            help=self.describe("mode", "symmetry: quad or octant"),
        )
        parser.add_argument(
            "-q", "--quadrant",
            type=self.choice_arg(
                ("upperleft", "upperright", "lowerleft", "lowerright"),
                QUADRANT_ALIASES,
            ),
            help=self.describe("quadrant", "quadrant to mirror"),
        )
        parser.add_argument(
            "-a", "--angle",
            type=self.float_arg("angle"),
            help=self.describe("angle", "rotation applied before cropping"),
        )
        parser.add_argument(
            "-v", "--virtual-pixel",
            dest="virtual_pixel",
            type=self.choice_arg(VIRTUAL_PIXEL_CHOICES),
            help=self.describe(
                "virtual_pixel", "fill for areas exposed by rotation",
            ),
        )

    def compose(
        self,
        params: KaleidoscopeParams,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> list[Invocation]:
        width, height = ctx.runner.dimensions(io.infile)
        size = min(width, height)
        half = size // 2
        if half < 1:
            msg = f"image is too small for a kaleidoscope: {width}x{height}"
            raise ValueError(msg)

        square: list[str] = [str(io.infile)]
        if params.angle % 360:
            if params.virtual_pixel == "transparent":
                square += ctx.compat.alpha_set
            square += [
                "-virtual-pixel", params.virtual_pixel,
                "-distort", "SRT", f"{params.angle:g}",
            ]
        square += [
            "-gravity", "center",
            "-crop", f"{size}x{size}+0+0", "+repage",
            STREAM_FORMAT,
        ]

        x = 0 if params.quadrant.endswith("left") else size - half
        y = 0 if params.quadrant.startswith("upper") else size - half
        quadrant = ctx.workspace.file("quadrant")
        steps = [
            Invocation(tuple(square), pipe_to_next=True),
            Invocation((
                "-",
                "-crop", f"{half}x{half}+{x}+{y}", "+repage",
                *_NORMALIZE[params.quadrant],
                str(quadrant),
            )),
        ]

        if params.mode == "octant":
            triangle = ctx.workspace.file("triangle")
            edge = half - 1
            steps.append(Invocation((
                "-size", f"{half}x{half}", "xc:black",
                "-fill", "white",
                "-draw", f"polygon 0,0 {edge},0 {edge},{edge}",
                str(triangle),
            )))
            steps.append(Invocation((
                str(quadrant),
                "(", "+clone", "-transpose", ")",
                str(triangle),
                "-compose", "over", "-composite",
                str(quadrant),
            )))

        final: list[str] = [
            str(quadrant),
            "(", "+clone", "-flop", ")", "+append",
            "(", "+clone", "-flip", ")", "-append",
        ]
        if 2 * half != size:
            final += ["-resize", f"{size}x{size}!"]
        final.append(str(io.output))
        steps.append(Invocation(tuple(final)))
        return steps


RECIPE = Kaleidoscope()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the kaleidoscope recipe as a standalone command."""
    from magick_recipes.cli import run_single  # noqa: PLC0415

    return run_single(RECIPE.name, argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
