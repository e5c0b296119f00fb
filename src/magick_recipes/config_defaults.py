"""Shared default values for user-facing configuration settings."""
from magick_recipes.type_defs import LogLevel

# Tool
DEFAULT_TOOL_BINARY: str | None = None
DEFAULT_TOOL_VERSION: str | None = None

# Workspace
DEFAULT_TMPDIR: str | None = None

# Runtime
DEFAULT_DRY_RUN = False
DEFAULT_LOG_LEVEL: LogLevel = "INFO"

# Catalog sync
DEFAULT_SYNC_BASE_URL = "http://www.fmwconcepts.com/imagemagick"
DEFAULT_SYNC_DEST = "bin"
DEFAULT_SYNC_LIST_FILE = "script_list.txt"
DEFAULT_SYNC_TIMEOUT = 30.0
