"""
Shared machinery for effect recipes.

A recipe is three things: a frozen parameter model (defaults, ranges
and enumerations declared once with Pydantic), the argparse flags that
populate it, and a composer that turns the validated parameters into a
list of ImageMagick invocations.
"""

from __future__ import annotations

import argparse
import inspect
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

from magick_recipes.runtime import validation

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Mapping

    from magick_recipes.runtime.compat import CompatProfile
    from magick_recipes.runtime.runner import MagickRunner
    from magick_recipes.runtime.workspace import TempWorkspace
    from magick_recipes.type_defs import Invocation, RecipeIO


class RecipeParams(BaseModel):
    """Base class for the immutable per-run parameter record."""

    model_config = ConfigDict(frozen=True, extra="forbid")


@dataclass(slots=True)
class RecipeContext:
    """Everything a composer may need besides its parameters."""

    runner: MagickRunner
    compat: CompatProfile
    workspace: TempWorkspace


def arg_type[T](
    converter: Callable[[str], T],
) -> Callable[[str], T]:
    """Convert ``ValueError`` from a validator into ``ArgumentTypeError``."""

    def wrapper(text: str) -> T:
        try:
            return converter(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    wrapper.__name__ = getattr(converter, "__name__", "value")
    return wrapper


class Recipe:
    """
    Base class for all effects.

    Subclasses set the class attributes and implement ``add_arguments``
    and ``compose``. The module docstring of the subclass becomes the
    recipe's usage text.
    """

    name: ClassVar[str]
    summary: ClassVar[str]
    usage: ClassVar[str] = ""
    params_model: ClassVar[type[RecipeParams]]
    inputs: ClassVar[tuple[str, ...]] = ("infile",)
    examples: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        module = sys.modules.get(cls.__module__)
        doc = module.__doc__ if module is not None else None
        cls.usage = inspect.cleandoc(doc or "")

    def default(self, field: str) -> Any:
        """Return the model default for ``field``."""
        return self.params_model.model_fields[field].default

    def bounds(self, field: str) -> tuple[Any, Any]:
        """Return the inclusive ``(lo, hi)`` declared on a numeric field."""
        lo = hi = None
        for constraint in self.params_model.model_fields[field].metadata:
            if getattr(constraint, "ge", None) is not None:
                lo = constraint.ge
            if getattr(constraint, "le", None) is not None:
                hi = constraint.le
        if lo is None or hi is None:
            msg = f"{self.name}.{field} has no closed range"
            raise ValueError(msg)
        return (lo, hi)

    def float_arg(self, field: str) -> Callable[[str], float]:
        """Argparse type enforcing the model's range for ``field``."""
        lo, hi = self.bounds(field)
        return arg_type(validation.float_in_range(lo, hi))

    def int_arg(self, field: str) -> Callable[[str], int]:
        """Argparse type enforcing the model's range for ``field``."""
        lo, hi = self.bounds(field)
        return arg_type(validation.int_in_range(lo, hi))

    def choice_arg(
        self,
        tokens: tuple[str, ...],
        aliases: Mapping[str, str] | None = None,
    ) -> Callable[[str], str]:
        """Argparse type for an enumerated option with abbreviations."""
        return arg_type(validation.choice(tokens, aliases))

    def describe(self, field: str, text: str) -> str:
        """Append the range and default of ``field`` to help ``text``."""
        parts = [text]
        try:
            lo, hi = self.bounds(field)
            parts.append(f"[{lo:g}-{hi:g}]")
        except ValueError:
            pass
        parts.append(f"(default: {self.default(field)})")
        return " ".join(parts)

    def add_positionals(self, parser: argparse.ArgumentParser) -> None:
        """Add input positionals followed by the output positional."""
        for name in self.inputs:
            parser.add_argument(
                name, nargs="?", default=None, help=f"{name} image path",
            )
        parser.add_argument(
            "outfile", nargs="?", default=None, help="output image path",
        )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        raise NotImplementedError

    def params_from_args(self, args: argparse.Namespace) -> RecipeParams:
        """Build the parameter record from parsed flags."""
        fields = self.params_model.model_fields
        data = {
            key: value for key, value in vars(args).items()
            if key in fields and value is not None
        }
        return self.params_model.model_validate(data)

    def compose(
        self,
        params: Any,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> list[Invocation]:
        raise NotImplementedError

    def execute(
        self,
        params: RecipeParams,
        io: RecipeIO,
        ctx: RecipeContext,
    ) -> None:
        """Compose the invocations and run them in order."""
        ctx.runner.run_pipeline(self.compose(params, io, ctx))
