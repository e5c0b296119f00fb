"""
run_recipe.py - CLI Entry Point

This script serves as the command-line interface entry point for the
magick-recipes project. It forwards execution to the modularized CLI
logic defined in `src/magick_recipes/cli.py`.

Usage:
    python run_recipe.py <recipe> [options] infile outfile

This wrapper allows you to run the tool directly without needing to
modify PYTHONPATH or install the project as a package.

For the list of recipes, run:
    python run_recipe.py list
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import magick_recipes.cli as mr_cli

if __name__ == "__main__":
    sys.exit(mr_cli.main())
