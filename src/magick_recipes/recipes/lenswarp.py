"""
Apply a barrel or pincushion lens distortion.

The warp is a radial polynomial whose linear term is chosen so that
the image keeps its size: barrel bows straight lines outward from the
center, pincushion pinches them inward. The distortion center defaults
to the middle of the image and can be moved with --center.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import Field

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

WarpType = Literal["barrel", "pincushion"]


class LensWarpParams(RecipeParams):
    """Lens distortion strength, center and edge fill."""

    type: WarpType = "barrel"
    amount: float = Field(0.2, ge=0, le=1)
    center: tuple[float, float] | None = None
    virtual_pixel: VirtualPixel = "background"
    bgcolor: str = "black"


def barrel_coefficients(params: LensWarpParams) -> tuple[float, ...]:
    """Return the A B C D radial coefficients for the warp."""
    c = params.amount if params.type == "barrel" else -params.amount
    return (0.0, 0.0, c, 1.0 - c)


class LensWarp(Recipe):
    """Barrel and pincushion distortion."""

    name = "lenswarp"
    summary = "barrel or pincushion lens distortion"
    params_model = LensWarpParams
    examples = (
        "lenswarp -a 0.3 grid.png barrel.png",
        "lenswarp -t pin -a 0.15 -c 120,80 grid.png pinched.png",
        "lenswarp -a 0.4 -b red --center=-20,60 grid.png offset.png",
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-t", "--type",
            type=self.choice_arg(("barrel", "pincushion")),
            help=self.describe("type", "barrel or pincushion"),
        )
        parser.add_argument(
            "-a", "--amount",
            type=self.float_arg("amount"),
            help=self.describe("amount", "distortion strength"),
        )
        parser.add_argument(
            "-c", "--center",
            type=arg_type(validation.point),
            help=(
                "distortion center as x,y (default: image center); "
                "write a negative x as --center=-5,10"
            ),
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
        params: LensWarpParams,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> list[Invocation]:
        coefficients = " ".join(f"{c:g}" for c in barrel_coefficients(params))
        if params.center is not None:
            cx, cy = params.center
            coefficients += f" {cx:g} {cy:g}"

        args: list[str] = [str(io.infile)]
        if params.virtual_pixel == "transparent":
            args += ctx.compat.alpha_set
        args += [
            "-virtual-pixel", params.virtual_pixel,
            "-background", params.bgcolor,
            "-distort", "Barrel", coefficients,
            str(io.output),
        ]
        return [Invocation(tuple(args))]


RECIPE = LensWarp()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the lenswarp recipe as a standalone command."""
    from magick_recipes.cli import run_single  # noqa: PLC0415

    return run_single(RECIPE.name, argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
