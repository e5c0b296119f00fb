"""Tests for the sigmoidal tone-mapping composer."""

from __future__ import annotations

import pytest

from magick_recipes.cli import build_recipe_parser
from magick_recipes.recipes.tonemap import RECIPE, ToneMapParams
from magick_recipes.runtime import MagickVersion


def _args(params: ToneMapParams, make_context, recipe_io, version=None):
    ctx = make_context(version) if version else make_context()
    steps = RECIPE.compose(params, recipe_io, ctx)
    assert len(steps) == 1
    return steps[0].args


def test_rgb_increase(make_context, recipe_io) -> None:
    args = _args(ToneMapParams(), make_context, recipe_io)
    assert args == (
        str(recipe_io.infile),
        "-sigmoidal-contrast", "3x50%",
        str(recipe_io.output),
    )


def test_decrease_with_gamma(make_context, recipe_io) -> None:
    params = ToneMapParams(
        direction="decrease", contrast=4, midpoint=40, gamma=1.2,
    )
    args = _args(params, make_context, recipe_io)
    assert args[1:5] == ("+sigmoidal-contrast", "4x40%", "-gamma", "1.2")


@pytest.mark.parametrize(
    ("space", "colorspace", "channel"),
    [("lab", "Lab", "R"), ("hsl", "HSL", "B")],
)
def test_lightness_only(
    make_context,
    recipe_io,
    space: str,
    colorspace: str,
    channel: str,
) -> None:
    args = _args(ToneMapParams(space=space), make_context, recipe_io)
    assert args[1:5] == ("-colorspace", colorspace, "-channel", channel)
    assert args[-4:-1] == ("+channel", "-colorspace", "sRGB")


def test_legacy_release_returns_to_rgb(make_context, recipe_io) -> None:
    args = _args(
        ToneMapParams(space="lab"),
        make_context,
        recipe_io,
        MagickVersion(6, 6, 0, 0),
    )
    assert args[-2] == "RGB"


def test_identity_copies(make_context, recipe_io) -> None:
    params = ToneMapParams(contrast=0, space="lab")
    assert params.is_identity
    args = _args(params, make_context, recipe_io)
    assert args == (str(recipe_io.infile), str(recipe_io.output))


def test_gamma_only(make_context, recipe_io) -> None:
    args = _args(ToneMapParams(contrast=0, gamma=2), make_context, recipe_io)
    assert args[1:3] == ("-gamma", "2")
    assert "-sigmoidal-contrast" not in args


def test_parser_abbreviations() -> None:
    args = build_recipe_parser(RECIPE).parse_args(
        ["-d", "dec", "-s", "H", "a.png", "b.png"],
    )
    params = RECIPE.params_from_args(args)
    assert params.direction == "decrease"
    assert params.space == "hsl"
    assert params.contrast == 3  # noqa: PLR2004


def test_parser_rejects_out_of_range(
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit):
        build_recipe_parser(RECIPE).parse_args(["-c", "25", "a", "b"])
    assert "must be between 0 and 20" in capsys.readouterr().err
