"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
import http.client
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

import magick_recipes.config as mr_config
from magick_recipes import catalog
from magick_recipes.constants import EXIT_OK, EXIT_TOOL_FAILURE
from magick_recipes.logging_utils import logger, set_level
from magick_recipes.recipes import RECIPES, RecipeContext, get_recipe
from magick_recipes.runtime import (
    CompatProfile,
    MagickRunner,
    TempWorkspace,
    ToolInvocationError,
    ToolNotFoundError,
    detect_toolchain,
    validate_input_paths,
    validate_output_path,
    validate_tmpdir,
    version_report,
)
from magick_recipes.type_defs import RecipeIO

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from magick_recipes.recipes import Recipe, RecipeParams

PROG = "magick-recipes"


def _add_help(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-h", "-help", "--help",
        action="help",
        default=argparse.SUPPRESS,
        help="show this help message and exit",
    )


class _VersionAction(argparse.Action):
    """Print the version report; ImageMagick is only queried on request."""

    def __init__(
        self,
        option_strings,
        dest=argparse.SUPPRESS,
        help=None,  # noqa: A002
    ):
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            default=argparse.SUPPRESS,
            nargs=0,
            help=help,
        )

    def __call__(self, parser, namespace, values, option_string=None):
        print(version_report())
        parser.exit()


def _global_options() -> argparse.ArgumentParser:
    """Options shared by every subcommand; long forms only."""
    p = argparse.ArgumentParser(add_help=False)
    g = p.add_argument_group("global options")
    g.add_argument("--config", type=str, help="Path to config.toml file")
    g.add_argument(
        "--validate-config-only", action="store_true",
        help="Validate the config file and exit")
    g.add_argument(
        "--tmpdir", type=str,
        help="Directory for the per-run workspace (default: system temp)")
    g.add_argument(
        "--binary", type=str,
        help="ImageMagick program to run (default: magick, then convert)")
    g.add_argument(
        "--dry-run", action="store_true",
        help="Log the commands that would run without writing output")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", action="store_true", help="Log every command")
    verbosity.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors")
    return p


def _examples_epilog(recipe: Recipe) -> str | None:
    if not recipe.examples:
        return None
    lines = ["Examples:"]
    lines += [f"  {PROG} {example}" for example in recipe.examples]
    return "\n".join(lines)


def _configure_recipe_parser(
    parser: argparse.ArgumentParser,
    recipe: Recipe,
) -> argparse.ArgumentParser:
    _add_help(parser)
    options = parser.add_argument_group("recipe options")
    recipe.add_arguments(options)
    recipe.add_positionals(parser)
    parser.set_defaults(recipe=recipe, command_parser=parser)
    return parser


def build_recipe_parser(
    recipe: Recipe,
    prog: str | None = None,
) -> argparse.ArgumentParser:
    """Construct a standalone parser for a single recipe."""
    prog = prog or f"mr-{recipe.name}"
    parser = argparse.ArgumentParser(
        prog=prog,
        description=recipe.usage,
        epilog=_examples_epilog(recipe),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[_global_options()],
        add_help=False,
    )
    return _configure_recipe_parser(parser, recipe)


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        prog=PROG,
        description="Image-effect recipes composed from ImageMagick",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            f"  {PROG} list\n"
            f"  {PROG} tonemap -c 5 photo.jpg punchy.jpg\n"
            f"  {PROG} kaleidoscope -help\n"
        ),
        add_help=False,
    )
    _add_help(p)
    p.add_argument(
        "--version", action=_VersionAction,
        help="show package and ImageMagick versions and exit")

    sub = p.add_subparsers(dest="command", metavar="<command>")
    global_options = _global_options()

    for recipe in RECIPES.values():
        rp = sub.add_parser(
            recipe.name,
            help=recipe.summary,
            description=recipe.usage,
            epilog=_examples_epilog(recipe),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            parents=[global_options],
            add_help=False,
        )
        _configure_recipe_parser(rp, recipe)

    lp = sub.add_parser(
        "list", help="list the available recipes", add_help=False)
    _add_help(lp)
    lp.set_defaults(command_parser=lp)

    sp = sub.add_parser(
        "sync",
        help="mirror the upstream script catalogue",
        description=catalog.__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[global_options],
        add_help=False,
    )
    _add_help(sp)
    sp.add_argument(
        "--dest", type=str, help="Directory receiving the scripts")
    sp.add_argument(
        "--list-file", type=str, help="Where to save script_list.txt")
    sp.add_argument(
        "--limit", type=int, default=None,
        help="Only fetch the first N scripts")
    sp.add_argument(
        "--no-progress", action="store_true", help="Hide the progress bar")
    sp.set_defaults(command_parser=sp)

    return p


def format_validation_error(exc: ValidationError) -> str:
    """Flatten a Pydantic error into one readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(piece) for piece in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def load_settings(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> mr_config.MagickRecipesConfig:
    """Load --config (if any), overlay CLI flags, and apply log level."""
    base_cfg: mr_config.MagickRecipesConfig | None = None
    if getattr(args, "config", None):
        try:
            base_cfg = mr_config.ConfigLoader.load(args.config)
        except FileNotFoundError as exc:
            parser.error(str(exc))
        except TOMLKitError as exc:
            parser.error(f"Invalid TOML in {args.config}: {exc}")
        except ValidationError as exc:
            parser.error(
                f"Invalid config {args.config}: "
                f"{format_validation_error(exc)}",
            )
    settings = mr_config.build_config_from_cli(vars(args), base_cfg)
    set_level(settings.runtime.log_level)
    if base_cfg is not None:
        logger.info("Loaded config from: %s", args.config)
    return settings


def log_parameters(
    recipe: Recipe,
    params: RecipeParams,
    io: RecipeIO,
    settings: mr_config.MagickRecipesConfig,
) -> None:
    """Log the effective parameters of a recipe run."""
    logger.info("Recipe: %s", recipe.name)
    for path in io.inputs:
        logger.info("Input image: %s", path)
    logger.info("Output image: %s", io.output)
    for key, value in params.model_dump().items():
        logger.info("%s: %s", key.replace("_", " ").title(), value)
    logger.info(
        "Dry Run: %s", "Enabled" if settings.runtime.dry_run else "Disabled")


def run_recipe(
    recipe: Recipe,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    """Validate arguments, then compose and run one recipe."""
    positionals = (*recipe.inputs, "outfile")
    missing = [name for name in positionals if getattr(args, name) is None]
    if missing:
        parser.error(
            "the following arguments are required: " + ", ".join(missing),
        )

    try:
        params = recipe.params_from_args(args)
    except ValidationError as exc:
        parser.error(format_validation_error(exc))

    io = RecipeIO(
        inputs=tuple(Path(getattr(args, name)) for name in recipe.inputs),
        output=Path(args.outfile),
    )
    try:
        validate_input_paths(io.inputs)
        validate_output_path(io.output)
    except OSError as exc:
        parser.error(str(exc))

    settings = load_settings(args, parser)
    try:
        validate_tmpdir(settings.workspace.tmpdir)
    except OSError as exc:
        parser.error(str(exc))
    log_parameters(recipe, params, io, settings)

    try:
        toolchain = detect_toolchain(
            settings.tool.binary, settings.tool.version,
        )
        compat = CompatProfile.for_version(toolchain.version)
        runner = MagickRunner(toolchain, dry_run=settings.runtime.dry_run)
        with TempWorkspace(settings.workspace.tmpdir) as workspace:
            recipe.execute(
                params, io, RecipeContext(runner, compat, workspace),
            )
    except (ToolNotFoundError, ToolInvocationError) as exc:
        logger.error("%s failed: %s", recipe.name, exc)
        return EXIT_TOOL_FAILURE
    except ValueError as exc:
        logger.error("%s failed: %s", recipe.name, exc)
        return EXIT_TOOL_FAILURE

    if not settings.runtime.dry_run:
        logger.info("Output written to: %s", io.output)
    return EXIT_OK


def run_list() -> int:
    """Print every recipe with its one-line summary."""
    width = max(len(name) for name in RECIPES)
    for name, recipe in sorted(RECIPES.items()):
        print(f"{name:<{width}}  {recipe.summary}")
    return EXIT_OK


def run_sync(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    """Mirror the upstream scripts as configured."""
    if args.limit is not None and args.limit < 1:
        parser.error("--limit must be positive")
    settings = load_settings(args, parser)
    try:
        validate_tmpdir(settings.workspace.tmpdir)
    except OSError as exc:
        parser.error(str(exc))
    options = catalog.SyncOptions(
        dest=Path(settings.sync.dest),
        list_file=Path(args.list_file or settings.sync.list_file),
        base_url=settings.sync.base_url,
        timeout=settings.sync.timeout,
        limit=args.limit,
        tmpdir=settings.workspace.tmpdir,
        progress=not args.no_progress,
    )
    try:
        report = catalog.sync_scripts(options)
    except (OSError, http.client.HTTPException) as exc:
        logger.error("Sync failed: %s", exc)
        return EXIT_TOOL_FAILURE
    if not report.ok:
        logger.warning("Could not fetch: %s", ", ".join(report.failed))
        return EXIT_TOOL_FAILURE
    return EXIT_OK


def validate_config_only(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    if not args.config:
        parser.error("--validate-config-only requires --config")
    load_settings(args, parser)
    logger.info("Config %s validated successfully.", args.config)
    return EXIT_OK


def dispatch(args: argparse.Namespace) -> int:
    """Route parsed arguments to the selected subcommand."""
    parser: argparse.ArgumentParser = args.command_parser
    if getattr(args, "validate_config_only", False):
        return validate_config_only(args, parser)
    if args.command == "list":
        return run_list()
    if args.command == "sync":
        return run_sync(args, parser)
    return run_recipe(args.recipe, args, parser)


def run_single(name: str, argv: Sequence[str] | None = None) -> int:
    """Run one recipe as an independent command (``mr-<name>``)."""
    recipe = get_recipe(name)
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_recipe_parser(recipe)
    if not argv:
        parser.print_help()
        return EXIT_OK
    args = parser.parse_args(argv)
    if args.validate_config_only:
        return validate_config_only(args, parser)
    return run_recipe(recipe, args, parser)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command-line interface."""
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_arg_parser()
    if not argv:
        parser.print_help()
        return EXIT_OK
    if len(argv) == 1 and argv[0] in RECIPES:
        recipe_parser = build_recipe_parser(
            get_recipe(argv[0]), prog=f"{PROG} {argv[0]}",
        )
        recipe_parser.print_help()
        return EXIT_OK

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return EXIT_OK
    return dispatch(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
