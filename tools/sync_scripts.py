"""Refresh the local mirror of upstream scripts (``magick-recipes sync``)."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from magick_recipes.cli import main as cli_main

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence


def main(argv: Sequence[str] | None = None) -> int:
    """Forward to the ``sync`` subcommand with the given options."""
    args = list(sys.argv[1:] if argv is None else argv)
    return cli_main(["sync", *args])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
