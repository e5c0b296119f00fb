"""
Configuration schema and loader for the magick-recipes commands.

Defines Pydantic models representing structured configuration sections
and a TOML-based config loader with validation support. Recipe
parameters are not configured here; they live on each recipe's own
parameter model.
"""

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, Field

from magick_recipes.config_defaults import (
    DEFAULT_DRY_RUN,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SYNC_BASE_URL,
    DEFAULT_SYNC_DEST,
    DEFAULT_SYNC_LIST_FILE,
    DEFAULT_SYNC_TIMEOUT,
    DEFAULT_TMPDIR,
    DEFAULT_TOOL_BINARY,
    DEFAULT_TOOL_VERSION,
)
from magick_recipes.type_defs import LogLevel


class ToolConfig(BaseModel):
    """Select the ImageMagick front end and optionally pin its version."""

    binary: str | None = Field(DEFAULT_TOOL_BINARY)
    version: str | None = Field(
        DEFAULT_TOOL_VERSION,
        pattern=r"^\d+\.\d+\.\d+(-\d+)?$",
    )


class WorkspaceConfig(BaseModel):
    """Where per-run temporary directories are created."""

    tmpdir: str | None = Field(DEFAULT_TMPDIR)


class RuntimeConfig(BaseModel):
    """Control execution and log verbosity."""

    dry_run: bool = DEFAULT_DRY_RUN
    log_level: LogLevel = Field(DEFAULT_LOG_LEVEL)


class SyncConfig(BaseModel):
    """Settings for mirroring the upstream script catalogue."""

    base_url: str = Field(DEFAULT_SYNC_BASE_URL, min_length=1)
    dest: str = Field(DEFAULT_SYNC_DEST, min_length=1)
    list_file: str = Field(DEFAULT_SYNC_LIST_FILE, min_length=1)
    timeout: float = Field(DEFAULT_SYNC_TIMEOUT, gt=0)


class MagickRecipesConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of config.toml, grouping related parameters
    under logical categories.
    """

    tool: ToolConfig = Field(
        default_factory=lambda: ToolConfig.model_validate({}),
    )
    workspace: WorkspaceConfig = Field(
        default_factory=lambda: WorkspaceConfig.model_validate({}),
    )
    runtime: RuntimeConfig = Field(
        default_factory=lambda: RuntimeConfig.model_validate({}),
    )
    sync: SyncConfig = Field(
        default_factory=lambda: SyncConfig.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> MagickRecipesConfig:
        """
        Load a configuration from a TOML file.

        Returns a validated MagickRecipesConfig instance based on the file
        contents.
        """
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return MagickRecipesConfig.model_validate(doc.unwrap())


def build_config_from_cli(
    args: dict[str, Any],
    base_config: MagickRecipesConfig | None = None,
) -> MagickRecipesConfig:
    """
    Overlay global CLI flags onto a file-based (or default) config.

    Only flags the user actually passed are applied; ``None`` and missing
    keys leave the base value alone.
    """
    base = base_config or MagickRecipesConfig()
    data = base.model_dump()

    if args.get("binary"):
        data["tool"]["binary"] = args["binary"]
    if args.get("tmpdir"):
        data["workspace"]["tmpdir"] = args["tmpdir"]
    if args.get("dry_run"):
        data["runtime"]["dry_run"] = True
    if args.get("verbose"):
        data["runtime"]["log_level"] = "DEBUG"
    elif args.get("quiet"):
        data["runtime"]["log_level"] = "WARNING"
    if args.get("dest"):
        data["sync"]["dest"] = args["dest"]

    return MagickRecipesConfig.model_validate(data)
