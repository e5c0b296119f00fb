"""
Render a shaded sphere.

Generates a square image of a diffusely lit sphere on a flat
background. The light comes from the given azimuth (degrees
counterclockwise from the right) and elevation (degrees above the
image plane). Ambient light keeps the side facing away from the
light from going fully dark. No input image is read.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pydantic import Field

from magick_recipes.recipes.base import Recipe, RecipeParams, arg_type
from magick_recipes.runtime import validation
from magick_recipes.type_defs import Invocation

if TYPE_CHECKING:  # pragma: no cover
    import argparse
    from collections.abc import Sequence

    from magick_recipes.recipes.base import RecipeContext
    from magick_recipes.type_defs import RecipeIO


class SphereParams(RecipeParams):
    """Size, colors and light direction of the rendered sphere."""

    size: int = Field(256, ge=8, le=4096)
    color: str = "#3070c0"
    bgcolor: str = "white"
    azimuth: float = Field(135.0, ge=0, le=360)
    elevation: float = Field(45.0, ge=0, le=90)
    ambient: float = Field(0.1, ge=0, le=1)


def light_vector(azimuth: float, elevation: float) -> tuple[float, ...]:
    """Unit light direction in image coordinates (y grows downward)."""
    az = math.radians(azimuth)
    el = math.radians(elevation)
    return (
        math.cos(el) * math.cos(az),
        -math.cos(el) * math.sin(az),
        math.sin(el),
    )


def shading_expression(params: SphereParams) -> str:
    """Return the -fx expression for the Lambert shading map."""
    center = (params.size - 1) / 2
    x = f"(i-{center:g})/{center:g}"
    y = f"(j-{center:g})/{center:g}"
    rr = f"({x})^2+({y})^2"
    lx, ly, lz = light_vector(params.azimuth, params.elevation)
    lambert = (
        f"max(0,{lx:.6f}*{x}+{ly:.6f}*{y}"
        f"+{lz:.6f}*sqrt(max(0,1-({rr}))))"
    )
    diffuse = 1 - params.ambient
    return f"{rr}>1 ? 0 : {params.ambient:g}+{diffuse:g}*{lambert}"


class Sphere(Recipe):
    """Lambert-shaded sphere generator."""

    name = "sphere"
    summary = "generate a Lambert-shaded sphere"
    params_model = SphereParams
    inputs = ()
    examples = (
        "sphere ball.png",
        'sphere -s 512 -c "#c03030" -a 45 -e 60 -b none ball.png',
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-s", "--size",
            type=self.int_arg("size"),
            help=self.describe("size", "output width and height"),
        )
        parser.add_argument(
            "-c", "--color",
            type=arg_type(validation.color_spec),
            help=self.describe("color", "sphere color"),
        )
        parser.add_argument(
            "-b", "--bgcolor",
            type=arg_type(validation.color_spec),
            help=self.describe("bgcolor", "background color"),
        )
        parser.add_argument(
            "-a", "--azimuth",
            type=self.float_arg("azimuth"),
            help=self.describe("azimuth", "light direction in degrees"),
        )
        parser.add_argument(
            "-e", "--elevation",
            type=self.float_arg("elevation"),
            help=self.describe("elevation", "light height in degrees"),
        )
        parser.add_argument(
            "-g", "--ambient",
            type=self.float_arg("ambient"),
            help=self.describe("ambient", "ambient light fraction"),
        )

    def compose(
        self,
        params: SphereParams,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> list[Invocation]:
        size = f"{params.size}x{params.size}"
        center = f"{(params.size - 1) / 2:g}"
        shade = ctx.workspace.file("shade")
        mask = ctx.workspace.file("mask")
        return [
            Invocation((
                "-size", size, "xc:black",
                "-fx", shading_expression(params),
                str(shade),
            )),
            Invocation((
                "-size", size, "xc:black",
                "-fill", "white",
                "-draw", f"circle {center},{center} {center},0",
                str(mask),
            )),
            Invocation((
                "-size", size, f"xc:{params.bgcolor}",
                "(",
                "-size", size, f"xc:{params.color}", str(shade),
                "-compose", "multiply", "-composite",
                ")",
                str(mask),
                "-compose", "over", "-composite",
                str(io.output),
            )),
        ]


RECIPE = Sphere()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the sphere recipe as a standalone command."""
    from magick_recipes.cli import run_single  # noqa: PLC0415

    return run_single(RECIPE.name, argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
