"""Runtime utilities: toolchain, compatibility, workspace, and execution."""

from .compat import CompatProfile
from .runner import MagickRunner
from .toolchain import (
    MagickVersion,
    Toolchain,
    ToolInvocationError,
    ToolNotFoundError,
    detect_toolchain,
)
from .validation import (
    choice,
    color_spec,
    float_in_range,
    int_in_range,
    point_list,
    validate_input_paths,
    validate_output_path,
    validate_tmpdir,
)
from .version import project_version, version_report
from .workspace import TempWorkspace

__all__ = [
    "CompatProfile",
    "MagickRunner",
    "MagickVersion",
    "TempWorkspace",
    "ToolInvocationError",
    "ToolNotFoundError",
    "Toolchain",
    "choice",
    "color_spec",
    "detect_toolchain",
    "float_in_range",
    "int_in_range",
    "point_list",
    "project_version",
    "validate_input_paths",
    "validate_output_path",
    "validate_tmpdir",
    "version_report",
]
