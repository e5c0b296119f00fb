"""
Constants used internally by the magick-recipes commands.

These are implementation-level values that should not be overridden
via config files or CLI arguments.
"""

# Candidate ImageMagick front ends, in order of preference
MAGICK_BINARIES = ("magick", "convert")

# Version tokens (MMmmppRR) where command idioms change
VERSION_MATTE_TO_ALPHA_SET = 6040307
VERSION_BILINEAR_FORWARD = 6050707
VERSION_SRGB_WINDOW_START = 6070607
VERSION_SRGB_WINDOW_END = 6070707
VERSION_NO_SETCSPACE = 6080504
VERSION_DEFINE_CONVOLVE_BIAS = 7000000

# Intermediate artifacts
WORKSPACE_PREFIX = "magick_recipes"
TEMP_IMAGE_SUFFIX = ".miff"
STREAM_FORMAT = "miff:-"

# Exit codes
EXIT_OK = 0
EXIT_TOOL_FAILURE = 1
EXIT_USAGE = 2
SIGNAL_EXIT_BASE = 128

# Catalog sync
SCRIPT_MODE = 0o755
SHEBANG_OLD = "#!/bin/bash"
SHEBANG_NEW = "#!/usr/bin/env bash"
