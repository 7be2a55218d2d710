"""Perch exception hierarchy.

Shared across transformers, codecs, and routes so every module
raises and catches the same types.

Building is fail-fast: the first offending parameter raises ``BuildError``.
Parsing is fail-complete: every declared field is decoded and all
required-field failures are reported together in one ``ParseError``.

The dataclass errors are not frozen: the interpreter and ``contextlib``
assign ``__traceback__`` and friends on exceptions in flight.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a route definition is invalid.

    Typically raised at import time, where templates and param specs
    are declared at module scope.
    """


@dataclass(eq=False)
class BuildError(PerchError):
    """A value could not be written into a location.

    Raised for a missing required path parameter, an undeclared key, or a
    value its transformer's ``encode`` rejects. ``parameter`` is ``None``
    when raised by a bare transformer; codecs fill it in.
    """

    parameter: str | None = None
    reason: str = ""

    def __str__(self) -> str:
        if self.parameter is None:
            return self.reason or "build failed"
        return f"{self.parameter!r}: {self.reason}"

    def with_parameter(self, parameter: str) -> "BuildError":
        return replace(self, parameter=parameter)


@dataclass(eq=False)
class DecodeError(PerchError):
    """A raw string could not be converted by a transformer."""

    parameter: str | None = None
    raw_value: Any = None
    reason: str = ""

    def __str__(self) -> str:
        label = "value" if self.parameter is None else repr(self.parameter)
        detail = f"cannot decode {label} from {self.raw_value!r}"
        if self.reason:
            return f"{detail}: {self.reason}"
        return detail

    def with_parameter(self, parameter: str) -> "DecodeError":
        return replace(self, parameter=parameter)


@dataclass(eq=False)
class TemplateMismatchError(PerchError):
    """A raw parameter map does not belong to this path template.

    ``extra_keys`` are keys absent from the template; ``missing_keys``
    are required placeholders without a value. ``pathname`` is set when
    a concrete path failed to match the template at all.
    """

    template: str = ""
    extra_keys: tuple[str, ...] = ()
    missing_keys: tuple[str, ...] = ()
    pathname: str | None = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.pathname is not None:
            parts.append(f"path {self.pathname!r} does not match")
        if self.extra_keys:
            parts.append(f"unexpected keys {', '.join(self.extra_keys)}")
        if self.missing_keys:
            parts.append(f"missing keys {', '.join(self.missing_keys)}")
        detail = "; ".join(parts) or "parameters do not match"
        return f"template {self.template!r}: {detail}"


@dataclass(eq=False)
class ParseError(PerchError):
    """Every required-field decode failure from one codec, at once."""

    failures: tuple[DecodeError, ...] = ()
    part: str = ""

    def __str__(self) -> str:
        label = f"{self.part} " if self.part else ""
        lines = "; ".join(str(f) for f in self.failures)
        return f"{len(self.failures)} {label}parameter(s) failed to decode: {lines}"

    @property
    def parameters(self) -> tuple[str | None, ...]:
        """Names of the failing fields, in declaration order."""
        return tuple(f.parameter for f in self.failures)

    @classmethod
    def collect(cls, failures: Iterable[DecodeError], part: str) -> "ParseError":
        return cls(failures=tuple(failures), part=part)
