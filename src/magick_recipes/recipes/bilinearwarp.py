"""
Warp an image by moving its four corners.

Give the new positions of the upper-left, upper-right, lower-right and
lower-left corners, in that order, as "x1,y1 x2,y2 x3,y3 x4,y4". The
interior follows a bilinear mapping. With the input fit the output
keeps the input canvas size. With bestfit the canvas grows to hold the
whole warped image.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from magick_recipes.recipes.base import Recipe, RecipeParams, arg_type
from magick_recipes.runtime import validation
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

Fit = Literal["input", "bestfit"]
Point = tuple[float, float]


class BilinearWarpParams(RecipeParams):
    """Target corner positions and how to fill the uncovered canvas."""

    corners: tuple[Point, Point, Point, Point]
    fit: Fit = "input"
    virtual_pixel: VirtualPixel = "background"
    bgcolor: str = "black"


def control_points(
    width: int,
    height: int,
    corners: tuple[Point, ...],
) -> str:
    """Pair the source image corners with their requested positions."""
    right = width - 1
    bottom = height - 1
    source = ((0, 0), (right, 0), (right, bottom), (0, bottom))
    return "  ".join(
        f"{sx:g},{sy:g} {dx:g},{dy:g}"
        for (sx, sy), (dx, dy) in zip(source, corners, strict=True)
    )


class BilinearWarp(Recipe):
    """Four-corner bilinear distortion."""

    name = "bilinearwarp"
    summary = "bilinear warp from four corner positions"
    params_model = BilinearWarpParams
    examples = (
        'bilinearwarp -c "0,0 199,20 180,149 10,130" in.png out.png',
        'bilinearwarp -f best -v white -c "10,10 250,0 240,200 0,180" '
        "in.png out.png",
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-c", "--corners",
            required=True,
            type=arg_type(validation.point_list(4)),
            help='new corner positions "x1,y1 x2,y2 x3,y3 x4,y4"',
        )
        parser.add_argument(
            "-f", "--fit",
            type=self.choice_arg(("input", "bestfit")),
            help=self.describe("fit", "output canvas: input or bestfit"),
        )
        parser.add_argument(
            "-v", "--virtual-pixel",
            dest="virtual_pixel",
            type=self.choice_arg(VIRTUAL_PIXEL_CHOICES),
            help=self.describe(
                "virtual_pixel",
                "fill outside the source; background uses --bgcolor",
            ),
        )
        parser.add_argument(
            "-b", "--bgcolor",
            type=arg_type(validation.color_spec),
            help=self.describe("bgcolor", "background color"),
        )

    def compose(
        self,
        params: BilinearWarpParams,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> list[Invocation]:
        width, height = ctx.runner.dimensions(io.infile)
        args: list[str] = [str(io.infile)]
        if params.virtual_pixel == "transparent":
            args += ctx.compat.alpha_set
        args += [
            "-virtual-pixel", params.virtual_pixel,
            "-background", params.bgcolor,
            "+distort" if params.fit == "bestfit" else "-distort",
            ctx.compat.bilinear_method,
            control_points(width, height, params.corners),
            "+repage",
            str(io.output),
        ]
        return [Invocation(tuple(args))]


RECIPE = BilinearWarp()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the bilinearwarp recipe as a standalone command."""
    from magick_recipes.cli import run_single  # noqa: PLC0415

    return run_single(RECIPE.name, argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
