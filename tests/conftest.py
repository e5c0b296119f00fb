"""
Test configuration and shared fixtures for magick_recipes.

This module defines reusable pytest fixtures for input images, a
recording stand-in for the ImageMagick runner, compatibility profiles
for old and new ImageMagick releases, and logger housekeeping. These
fixtures support all test modules in the test suite.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
from __future__ import annotations

import shutil
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from PIL import Image

from magick_recipes.logging_utils import logger
from magick_recipes.recipes import RecipeContext
from magick_recipes.runtime import CompatProfile, MagickVersion, TempWorkspace
from magick_recipes.type_defs import Invocation, RecipeIO

IM6_LEGACY = MagickVersion(6, 7, 5, 0)
IM6 = MagickVersion(6, 9, 10, 23)
IM7 = MagickVersion(7, 1, 1, 15)


class FakeRunner:
    """
    Record composed pipelines instead of running ImageMagick.

    Queries are answered from the ``size`` and ``stats`` attributes so
    composers that measure their inputs can be exercised offline.
    """

    def __init__(
        self,
        size: tuple[int, int] = (200, 100),
        stats: dict[str, tuple[tuple[float, float], ...]] | None = None,
    ) -> None:
        self.size = size
        self.stats = stats or {}
        self.queries: list[tuple[object, ...]] = []
        self.pipelines: list[list[Invocation]] = []

    def dimensions(self, path: Path | str) -> tuple[int, int]:
        self.queries.append(("dimensions", Path(path)))
        return self.size

    def channel_stats(
        self,
        path: Path | str,
        colorspace: str | None = None,
    ) -> tuple[tuple[float, float], ...]:
        self.queries.append(("stats", Path(path), colorspace))
        return self.stats[Path(path).name]

    def run_pipeline(self, invocations: list[Invocation]) -> None:
        self.pipelines.append(list(invocations))


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Provide a runner that records instead of executing."""
    return FakeRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Generator[TempWorkspace, None, None]:
    """Provide an active workspace rooted in the test's tmp_path."""
    with TempWorkspace(tmp_path) as ws:
        yield ws


@pytest.fixture
def make_context(
    fake_runner: FakeRunner,
    workspace: TempWorkspace,
) -> Callable[..., RecipeContext]:
    """Build a RecipeContext for a given ImageMagick version."""

    def _build(version: MagickVersion = IM7) -> RecipeContext:
        return RecipeContext(
            runner=fake_runner,  # type: ignore[arg-type]
            compat=CompatProfile.for_version(version),
            workspace=workspace,
        )

    return _build


@pytest.fixture
def recipe_io(tmp_path: Path) -> RecipeIO:
    """Plain input/output paths; the files need not exist."""
    return RecipeIO(
        inputs=(tmp_path / "in.png",),
        output=tmp_path / "out.png",
    )


@pytest.fixture
def input_image(tmp_path: Path) -> Path:
    """Create and save a small green RGB input image."""
    path = tmp_path / "input.png"
    Image.new("RGB", (64, 48), color="green").save(path)
    return path


@pytest.fixture
def reference_image(tmp_path: Path) -> Path:
    """Create and save a small orange RGB reference image."""
    path = tmp_path / "reference.png"
    Image.new("RGB", (40, 40), color=(230, 140, 30)).save(path)
    return path


@pytest.fixture
def gradient_image(tmp_path: Path) -> Path:
    """Create an image with some structure for the integration tests."""
    path = tmp_path / "gradient.png"
    img = Image.new("RGB", (48, 32))
    img.putdata([
        (x * 5 % 256, y * 8 % 256, (x + y) * 3 % 256)
        for y in range(32) for x in range(48)
    ])
    img.save(path)
    return path


@pytest.fixture
def magick_binary() -> str:
    """Return an ImageMagick binary, skipping when none is installed."""
    found = shutil.which("magick") or shutil.which("convert")
    if not found:
        pytest.skip("ImageMagick is not installed")
    return found


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the shared logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)


@pytest.fixture(autouse=True)
def restore_logger_level() -> Generator[None, None, None]:
    """Undo level changes made by --verbose, --quiet or config files."""
    level = logger.level
    yield
    logger.setLevel(level)
