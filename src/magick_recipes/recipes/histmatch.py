"""
Match an image's channel statistics to a reference image.

The mean and standard deviation of each channel are measured in both
images. The input's channels are then stretched and shifted linearly
so they have the reference's statistics. The mean option only shifts,
the std option only stretches (about the input's own mean), and both
does both. Working in lab or ycbcr transfers brightness and color
separately.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from magick_recipes.recipes.base import Recipe, RecipeParams
from magick_recipes.type_defs import Invocation

if TYPE_CHECKING:  # pragma: no cover
    import argparse
    from collections.abc import Sequence

    from magick_recipes.recipes.base import RecipeContext
    from magick_recipes.type_defs import RecipeIO

MatchSpace = Literal["rgb", "lab", "ycbcr"]
MatchOption = Literal["mean", "std", "both"]

_COLORSPACES: dict[str, str | None] = {
    "rgb": None,
    "lab": "Lab",
    "ycbcr": "YCbCr",
}

# Deviations below this are treated as a flat channel
_MIN_STD = 1e-6


class HistMatchParams(RecipeParams):
    """Colorspace and statistics used to match the reference."""

    colorspace: MatchSpace = "rgb"
    option: MatchOption = "both"


def channel_transform(
    option: str,
    source: tuple[float, float],
    reference: tuple[float, float],
) -> tuple[float, float]:
    """Return ``(gain, offset)`` mapping source stats onto the reference."""
    src_mean, src_std = source
    ref_mean, ref_std = reference
    gain = 1.0
    if option in {"std", "both"} and src_std > _MIN_STD:
        gain = ref_std / src_std
    if option == "mean":
        return (1.0, ref_mean - src_mean)
    if option == "std":
        return (gain, src_mean - gain * src_mean)
    return (gain, ref_mean - gain * src_mean)


class HistMatch(Recipe):
    """Per-channel mean and deviation matching."""

    name = "histmatch"
    summary = "match channel mean and deviation to a reference image"
    params_model = HistMatchParams
    inputs = ("infile", "reffile")
    examples = (
        "histmatch dull.jpg sunset.jpg warmed.jpg",
        "histmatch -c lab -o mean dull.jpg sunset.jpg warmed.jpg",
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-c", "--colorspace",
            type=self.choice_arg(("rgb", "lab", "ycbcr")),
            help=self.describe("colorspace", "space the statistics use"),
        )
        parser.add_argument(
            "-o", "--option",
            type=self.choice_arg(("mean", "std", "both")),
            help=self.describe("option", "which statistics to transfer"),
        )

    def compose(
        self,
        params: HistMatchParams,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> list[Invocation]:
        infile, reffile = io.inputs
        colorspace = _COLORSPACES[params.colorspace]
        source_stats = ctx.runner.channel_stats(infile, colorspace)
        reference_stats = ctx.runner.channel_stats(reffile, colorspace)

        args: list[str] = [str(infile)]
        if colorspace:
            args += ["-colorspace", colorspace]
        for channel, source, reference in zip(
            "RGB", source_stats, reference_stats, strict=True,
        ):
            gain, offset = channel_transform(params.option, source, reference)
            args += [
                "-channel", channel,
                "-function", "Polynomial", f"{gain:.6g},{offset:.6g}",
            ]
        args.append("+channel")
        if colorspace:
            args += ["-colorspace", ctx.compat.cspace]
        args.append(str(io.output))
        return [Invocation(tuple(args))]


RECIPE = HistMatch()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the histmatch recipe as a standalone command."""
    from magick_recipes.cli import run_single  # noqa: PLC0415

    return run_single(RECIPE.name, argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
