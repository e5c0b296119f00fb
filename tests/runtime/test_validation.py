"""Tests for the argument converters and path checks."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from magick_recipes.runtime import validation


class TestNumericRanges:
    def test_float_in_range_accepts_bounds(self) -> None:
        convert = validation.float_in_range(0, 1)
        assert convert("0") == 0.0
        assert convert("1") == 1.0
        assert convert("0.25") == 0.25  # noqa: PLR2004

    @pytest.mark.parametrize("text", ["-0.1", "1.5", "100"])
    def test_float_in_range_rejects_outside(self, text: str) -> None:
        convert = validation.float_in_range(0, 1)
        with pytest.raises(ValueError, match="out of range; must be between"):
            convert(text)

    def test_float_in_range_rejects_non_numbers(self) -> None:
        with pytest.raises(ValueError, match="is not a number"):
            validation.float_in_range(0, 1)("abc")

    def test_int_in_range(self) -> None:
        convert = validation.int_in_range(1, 50)
        assert convert("7") == 7  # noqa: PLR2004
        with pytest.raises(ValueError, match="between 1 and 50"):
            convert("51")
        with pytest.raises(ValueError, match="is not an integer"):
            convert("2.5")


class TestChoice:
    @pytest.fixture
    def quadrant(self) -> object:
        return validation.choice(
            ("upperleft", "upperright", "lowerleft", "lowerright"),
            {"ul": "upperleft", "lr": "lowerright"},
        )

    def test_exact_token(self, quadrant) -> None:
        assert quadrant("upperright") == "upperright"

    def test_case_insensitive(self, quadrant) -> None:
        assert quadrant("LowerLeft") == "lowerleft"

    def test_alias(self, quadrant) -> None:
        assert quadrant("UL") == "upperleft"
        assert quadrant("lr") == "lowerright"

    def test_unique_prefix(self) -> None:
        convert = validation.choice(("increase", "decrease"))
        assert convert("inc") == "increase"
        assert convert("d") == "decrease"

    def test_ambiguous_prefix(self, quadrant) -> None:
        with pytest.raises(ValueError, match="ambiguous"):
            quadrant("upper")

    def test_unknown_value(self, quadrant) -> None:
        with pytest.raises(ValueError, match="not a valid choice"):
            quadrant("middle")

    def test_empty_value(self, quadrant) -> None:
        with pytest.raises(ValueError, match="not a valid choice"):
            quadrant("")


class TestColorSpec:
    @pytest.mark.parametrize(
        "text",
        [
            "red",
            "gray50",
            "#fff",
            "#3070c0",
            "#3070c0ff",
            "rgb(10,20,30)",
            "rgba(10, 20, 30, 0.5)",
            "hsl(120,50%,50%)",
            "none",
        ],
    )
    def test_accepts(self, text: str) -> None:
        assert validation.color_spec(text) == text

    @pytest.mark.parametrize("text", ["#12", "rgb(1,2", "red;rm", "", "#ggg"])
    def test_rejects(self, text: str) -> None:
        with pytest.raises(ValueError, match="not a valid color"):
            validation.color_spec(text)


class TestPoints:
    def test_point(self) -> None:
        assert validation.point("12,-3.5") == (12.0, -3.5)
        assert validation.point(" 1 , 2 ") == (1.0, 2.0)

    def test_point_rejects(self) -> None:
        with pytest.raises(ValueError, match="not a valid x,y point"):
            validation.point("12")

    def test_point_list(self) -> None:
        convert = validation.point_list(4)
        assert convert("0,0 10,0 10,10 0,10") == (
            (0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0),
        )

    def test_point_list_wrong_count(self) -> None:
        with pytest.raises(ValueError, match="expected 4 x,y points"):
            validation.point_list(4)("0,0 1,1")


class TestPaths:
    def test_existing_input(self, input_image: Path) -> None:
        validation.validate_input_paths([input_image])

    def test_missing_input(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Input image not found"):
            validation.validate_input_paths([tmp_path / "nope.png"])

    def test_directory_input(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="not a regular file"):
            validation.validate_input_paths([tmp_path])

    @pytest.mark.skipif(
        os.name != "posix" or os.geteuid() == 0,
        reason="permission bits are not enforced",
    )
    def test_unreadable_input(self, input_image: Path) -> None:
        input_image.chmod(0)
        try:
            with pytest.raises(PermissionError, match="not readable"):
                validation.validate_input_paths([input_image])
        finally:
            input_image.chmod(0o644)

    def test_output_directory_must_exist(self, tmp_path: Path) -> None:
        validation.validate_output_path(tmp_path / "out.png")
        with pytest.raises(FileNotFoundError, match="Output directory"):
            validation.validate_output_path(tmp_path / "missing" / "out.png")

    def test_tmpdir_must_be_a_directory(
        self,
        tmp_path: Path,
        input_image: Path,
    ) -> None:
        validation.validate_tmpdir(None)
        validation.validate_tmpdir(tmp_path)
        for bad in (tmp_path / "missing", input_image):
            with pytest.raises(FileNotFoundError, match="Temporary directory"):
                validation.validate_tmpdir(bad)
