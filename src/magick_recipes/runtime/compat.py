"""
Version-dependent command idioms.

ImageMagick changed the meaning of several options across releases
(most notably the linear/non-linear RGB split around 6.7.7 and the
grayscale intensity default in 6.8.5). Recipes ask a ``CompatProfile``
for the idiom instead of branching on version numbers themselves, so
the same recipe produces the same picture on old and new installs.
"""

from __future__ import annotations

from dataclasses import dataclass

from magick_recipes.constants import (
    VERSION_BILINEAR_FORWARD,
    VERSION_DEFINE_CONVOLVE_BIAS,
    VERSION_MATTE_TO_ALPHA_SET,
    VERSION_NO_SETCSPACE,
    VERSION_SRGB_WINDOW_END,
    VERSION_SRGB_WINDOW_START,
)
from magick_recipes.runtime.toolchain import MagickVersion


@dataclass(slots=True, frozen=True)
class CompatProfile:
    """Command fragments selected for one ImageMagick version."""

    version: MagickVersion
    cspace: str
    setcspace: tuple[str, ...]
    gray: tuple[str, ...]
    alpha_set: tuple[str, ...]
    bilinear_method: str

    @classmethod
    def for_version(cls, version: MagickVersion) -> CompatProfile:
        token = version.token

        if VERSION_SRGB_WINDOW_START <= token <= VERSION_SRGB_WINDOW_END:
            cspace = "sRGB"
        else:
            cspace = "RGB"
        setcspace: tuple[str, ...] = ("-set", "colorspace", "RGB")
        gray: tuple[str, ...] = ("-colorspace", "gray")
        if token > VERSION_NO_SETCSPACE:
            cspace = "sRGB"
            setcspace = ()
            gray = ("-intensity", "rec709luma", "-colorspace", "gray")

        if token < VERSION_MATTE_TO_ALPHA_SET:
            alpha_set: tuple[str, ...] = ("-matte",)
        else:
            alpha_set = ("-alpha", "set")

        bilinear_method = (
            "Bilinear" if token < VERSION_BILINEAR_FORWARD
            else "BilinearForward"
        )

        return cls(
            version=version,
            cspace=cspace,
            setcspace=setcspace,
            gray=gray,
            alpha_set=alpha_set,
            bilinear_method=bilinear_method,
        )

    def convolve_bias(self, percent: float) -> tuple[str, ...]:
        """Return the option that offsets signed convolution results."""
        if self.version.token < VERSION_DEFINE_CONVOLVE_BIAS:
            return ("-bias", f"{percent:g}%")
        return ("-define", f"convolve:bias={percent:g}%")
