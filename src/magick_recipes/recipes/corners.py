"""
Detect corners with the Harris operator.

The input is reduced to grayscale, differentiated with Sobel kernels,
and the structure tensor terms are smoothed with a Gaussian of the
given sigma. The Harris response det - k * trace^2 is auto-levelled.
Map mode writes that response as a grayscale image. Overlay mode
thresholds it, grows each detection into a disk of the given radius
and paints the disks over the input in the marker color.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import Field

from magick_recipes.recipes.base import Recipe, RecipeParams, arg_type
from magick_recipes.runtime import validation
from magick_recipes.type_defs import Invocation

if TYPE_CHECKING:  # pragma: no cover
    import argparse
    from collections.abc import Sequence

    from magick_recipes.recipes.base import RecipeContext
    from magick_recipes.type_defs import RecipeIO

CornerMode = Literal["overlay", "map"]

# Sobel weights sum to 4 in magnitude; this maps the result into [-0.5, 0.5]
_SOBEL_SCALE = "convolve:scale=0.125"

# Gradients are stored with a 50% bias, so g = 2 * (value - 0.5)
_TENSOR_TERMS = {
    "ixx": "4*(u-0.5)^2",
    "iyy": "4*(v-0.5)^2",
    "ixy": "2*(u-0.5)*(v-0.5)+0.5",
}


class CornersParams(RecipeParams):
    """Harris detector tuning and how detected corners are drawn."""

    blur: float = Field(1.0, ge=0.1, le=10)
    sensitivity: float = Field(0.05, ge=0.01, le=0.25)
    threshold: float = Field(10.0, ge=0, le=100)
    mode: CornerMode = "overlay"
    color: str = "red"
    radius: int = Field(3, ge=1, le=50)


def harris_expression(sensitivity: float) -> str:
    """Return the -fx response over the stored ixx, iyy, ixy images."""
    return (
        "u[0]*u[1]-4*(u[2]-0.5)^2"
        f"-{sensitivity:g}*(u[0]+u[1])^2"
    )


class Corners(Recipe):
    """Harris corner map or overlay."""

    name = "corners"
    summary = "Harris corner detector (overlay or response map)"
    params_model = CornersParams
    examples = (
        "corners checker.png marked.png",
        "corners -m map -b 2 -k 0.04 checker.png response.png",
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-b", "--blur",
            type=self.float_arg("blur"),
            help=self.describe("blur", "structure tensor smoothing sigma"),
        )
        parser.add_argument(
            "-k", "--sensitivity",
            type=self.float_arg("sensitivity"),
            help=self.describe("sensitivity", "Harris k factor"),
        )
        parser.add_argument(
            "-t", "--threshold",
            type=self.float_arg("threshold"),
            help=self.describe("threshold", "response threshold in percent"),
        )
        parser.add_argument(
            "-m", "--mode",
            type=self.choice_arg(("overlay", "map")),
            help=self.describe("mode", "overlay markers or write the map"),
        )
        parser.add_argument(
            "-c", "--color",
            type=arg_type(validation.color_spec),
            help=self.describe("color", "marker color"),
        )
        parser.add_argument(
            "-r", "--radius",
            type=self.int_arg("radius"),
            help=self.describe("radius", "marker radius in pixels"),
        )

    def compose(
        self,
        params: CornersParams,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> list[Invocation]:
        ws = ctx.workspace
        gray = ws.file("gray")
        ix = ws.file("ix")
        iy = ws.file("iy")
        terms = {name: ws.file(name) for name in _TENSOR_TERMS}
        response = ws.file("response")
        sigma = f"0x{params.blur:g}"

        steps = [
            Invocation((
                str(io.infile),
                *ctx.compat.setcspace,
                *ctx.compat.gray,
                str(gray),
            )),
        ]
        for target, kernel in ((ix, "Sobel:0"), (iy, "Sobel:90")):
            steps.append(Invocation((
                str(gray),
                "-define", _SOBEL_SCALE,
                *ctx.compat.convolve_bias(50),
                "-morphology", "Convolve", kernel,
                str(target),
            )))
        for name, expression in _TENSOR_TERMS.items():
            steps.append(Invocation((
                str(ix), str(iy),
                "-fx", expression,
                "-blur", sigma,
                str(terms[name]),
            )))

        response_target = io.output if params.mode == "map" else response
        steps.append(Invocation((
            *(str(terms[name]) for name in _TENSOR_TERMS),
            "-fx", harris_expression(params.sensitivity),
            "-auto-level",
            str(response_target),
        )))

        if params.mode == "overlay":
            steps.append(Invocation((
                str(io.infile),
                "(", "+clone", "-fill", params.color, "-colorize", "100", ")",
                "(", str(response),
                "-threshold", f"{params.threshold:g}%",
                "-morphology", "Dilate", f"Disk:{params.radius}",
                ")",
                "-compose", "over", "-composite",
                str(io.output),
            )))
        return steps


RECIPE = Corners()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the corners recipe as a standalone command."""
    from magick_recipes.cli import run_single  # noqa: PLC0415

    return run_single(RECIPE.name, argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
