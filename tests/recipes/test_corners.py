"""Tests for the Harris corner composer."""

from __future__ import annotations

import pytest

from magick_recipes.cli import build_recipe_parser
from magick_recipes.recipes.corners import (
    RECIPE,
    CornersParams,
    harris_expression,
)
from magick_recipes.runtime import MagickVersion


def test_harris_expression() -> None:
    assert harris_expression(0.04) == (
        "u[0]*u[1]-4*(u[2]-0.5)^2-0.04*(u[0]+u[1])^2"
    )


def test_overlay_pipeline(make_context, recipe_io) -> None:
    ctx = make_context()
    steps = RECIPE.compose(CornersParams(), recipe_io, ctx)
    ws = ctx.workspace

    assert len(steps) == 8  # noqa: PLR2004
    assert steps[0].args == (
        str(recipe_io.infile),
        "-intensity", "rec709luma", "-colorspace", "gray",
        str(ws.file("gray")),
    )
    assert steps[1].args == (
        str(ws.file("gray")),
        "-define", "convolve:scale=0.125",
        "-define", "convolve:bias=50%",
        "-morphology", "Convolve", "Sobel:0",
        str(ws.file("ix")),
    )
    assert steps[2].args[-2] == "Sobel:90"
    assert steps[3].args[2:6] == ("-fx", "4*(u-0.5)^2", "-blur", "0x1")
    assert steps[6].args[:3] == tuple(
        str(ws.file(name)) for name in ("ixx", "iyy", "ixy")
    )
    assert steps[6].args[-1] == str(ws.file("response"))
    assert steps[7].args[-1] == str(recipe_io.output)
    assert "Disk:3" in steps[7].args
    assert "10%" in steps[7].args
    assert not any(step.pipe_to_next for step in steps)


def test_map_mode_writes_response(make_context, recipe_io) -> None:
    params = CornersParams(mode="map", blur=2, sensitivity=0.04)
    steps = RECIPE.compose(params, recipe_io, make_context())
    assert len(steps) == 7  # noqa: PLR2004
    assert steps[-1].args[-3:] == (
        harris_expression(0.04), "-auto-level", str(recipe_io.output),
    )
    assert steps[3].args[-2] == "0x2"


def test_legacy_release_idioms(make_context, recipe_io) -> None:
    ctx = make_context(MagickVersion(6, 8, 0, 0))
    steps = RECIPE.compose(CornersParams(), recipe_io, ctx)
    assert steps[0].args[1:6] == (
        "-set", "colorspace", "RGB", "-colorspace", "gray",
    )
    assert steps[1].args[3:5] == ("-bias", "50%")


def test_parser_radius_is_integer() -> None:
    parser = build_recipe_parser(RECIPE)
    args = parser.parse_args(["-r", "5", "-m", "m", "a.png", "b.png"])
    params = RECIPE.params_from_args(args)
    assert params.radius == 5  # noqa: PLR2004
    assert params.mode == "map"
    with pytest.raises(SystemExit):
        parser.parse_args(["-r", "2.5", "a.png", "b.png"])
