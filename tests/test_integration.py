"""
End to end runs against a real ImageMagick install.

Skipped when neither ``magick`` nor ``convert`` is on PATH.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest
from PIL import Image

import magick_recipes.cli as mr_cli

pytestmark = pytest.mark.integration


def _workspace_dirs() -> set[str]:
    return {
        p.name for p in Path(tempfile.gettempdir()).glob("magick_recipes_*")
    }


@pytest.mark.parametrize(
    ("argv", "size"),
    [
        (["tonemap", "-c", "5"], (48, 32)),
        (["tonemap", "-s", "lab", "-g", "1.2"], (48, 32)),
        (["lenswarp", "-a", "0.3"], (48, 32)),
        (["kaleidoscope"], (32, 32)),
        (["kaleidoscope", "-m", "octant", "-q", "lr", "-a", "30"], (32, 32)),
        (["bilinearwarp", "-c", "0,0 47,4 40,31 3,28"], (48, 32)),
        (["corners", "-m", "map"], (48, 32)),
        (["corners"], (48, 32)),
    ],
)
def test_recipe_produces_image(
    magick_binary: str,
    gradient_image: Path,
    tmp_path: Path,
    argv: list[str],
    size: tuple[int, int],
) -> None:
    before = _workspace_dirs()
    output = tmp_path / "out.png"
    code = mr_cli.main([
        *argv, "--binary", magick_binary, str(gradient_image), str(output),
    ])
    assert code == 0
    with Image.open(output) as img:
        assert img.size == size
    assert _workspace_dirs() <= before


def test_histmatch(
    magick_binary: str,
    input_image: Path,
    reference_image: Path,
    tmp_path: Path,
) -> None:
    output = tmp_path / "matched.png"
    code = mr_cli.main([
        "histmatch", "--binary", magick_binary,
        str(input_image), str(reference_image), str(output),
    ])
    assert code == 0
    with Image.open(output) as img:
        assert img.size == (64, 48)


def test_sphere(magick_binary: str, tmp_path: Path) -> None:
    output = tmp_path / "ball.png"
    code = mr_cli.main([
        "sphere", "--binary", magick_binary, "-s", "24", str(output),
    ])
    assert code == 0
    with Image.open(output) as img:
        assert img.size == (24, 24)
        assert img.convert("RGB").getpixel((0, 0)) == (255, 255, 255)


def test_lenswarp_bgcolor_fills_corners(
    magick_binary: str,
    gradient_image: Path,
    tmp_path: Path,
) -> None:
    output = tmp_path / "barrel.png"
    code = mr_cli.main([
        "lenswarp", "--binary", magick_binary, "-a", "0.5", "-b", "red",
        str(gradient_image), str(output),
    ])
    assert code == 0
    with Image.open(output) as img:
        assert img.convert("RGB").getpixel((0, 0)) == (255, 0, 0)


def test_repeat_runs_are_identical(
    magick_binary: str,
    gradient_image: Path,
    tmp_path: Path,
) -> None:
    first = tmp_path / "a.ppm"
    second = tmp_path / "b.ppm"
    for output in (first, second):
        assert mr_cli.main([
            "lenswarp", "--binary", magick_binary, "-t", "pin",
            str(gradient_image), str(output),
        ]) == 0
    assert first.read_bytes() == second.read_bytes()


def test_tool_failure_exit_code(
    magick_binary: str,
    tmp_path: Path,
) -> None:
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    code = mr_cli.main([
        "tonemap", "--binary", magick_binary,
        str(broken), str(tmp_path / "out.png"),
    ])
    assert code == 1
