"""Path templates: the literal-plus-placeholder shape of a path.

Syntax::

    /users                 literal segment
    /users/:id             placeholder
    /users/:id(\\d+)        placeholder with a custom pattern
    /users/:id?            optional placeholder (segment may be absent)
    /tags/:names+          one or more segments, captured "/"-joined
    /tags/:names*          zero or more segments, captured "/"-joined
    /files/:path(.+)       pattern may span slashes
    /files/:name.:ext      placeholders inside a segment

Templates are parsed once and are immutable. Compiled regexes for matching
are memoized per template string; the cache is a pure function of its key,
so concurrent first use may compile twice but never changes a result.
"""

import functools
import re
from dataclasses import dataclass
from urllib.parse import unquote

from perch.errors import ConfigurationError

DEFAULT_PATTERN = r"[^/]+"

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_MODIFIERS = "?+*"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed piece of a path template.

    Static:    ``/users``          (is_param=False)
    Param:     ``/:id``            (is_param=True, param_name="id")
    Patterned: ``/:id(\\d+)``       (is_param=True, pattern=r"\\d+")
    Optional:  ``/:id?``           (is_param=True, optional=True)
    Repeated:  ``/:names+``        (is_param=True, repeat=True)
    Joined:    ``.:ext`` in ``/file.:ext`` (joined=True, no "/" before it)
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    pattern: str | None = None
    optional: bool = False
    repeat: bool = False
    joined: bool = False

    @property
    def regex(self) -> str:
        base = self.pattern or DEFAULT_PATTERN
        if self.repeat:
            return f"(?:{base})(?:/(?:{base}))*"
        return base

    @property
    def separator(self) -> str:
        return "" if self.joined else "/"


@dataclass(frozen=True, slots=True)
class PathTemplate:
    """An immutable, parsed path template."""

    source: str
    segments: tuple[PathSegment, ...]
    leading_slash: bool = True
    trailing_slash: bool = False

    @classmethod
    def parse(cls, template: str) -> "PathTemplate":
        return parse_template(template)

    @property
    def placeholders(self) -> tuple[PathSegment, ...]:
        return tuple(seg for seg in self.segments if seg.is_param)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(seg.param_name for seg in self.placeholders if seg.param_name)

    @property
    def required_names(self) -> frozenset[str]:
        return frozenset(
            seg.param_name for seg in self.placeholders if seg.param_name and not seg.optional
        )

    def match(self, pathname: str) -> dict[str, str | None] | None:
        """Match *pathname* and return the raw parameter map, or ``None``.

        Values are percent-decoded; absent optional placeholders map to ``None``.
        Trailing slashes are ignored.
        """
        path = pathname.split("?", 1)[0].split("#", 1)[0]
        if len(path) > 1:
            path = path.rstrip("/")
        found = compile_template(self.source).fullmatch(path)
        if found is None:
            return None
        return {
            name: None if value is None else unquote(value)
            for name, value in found.groupdict().items()
        }

    def __str__(self) -> str:
        return self.source


def _split_segments(template: str) -> list[str]:
    """Split on ``/`` outside of parenthesised patterns."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    for char in template:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                msg = f"Unbalanced ')' in path template {template!r}."
                raise ConfigurationError(msg)
        if char == "/" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth:
        msg = f"Unbalanced '(' in path template {template!r}."
        raise ConfigurationError(msg)
    parts.append("".join(current))
    return parts


def _reject_foreign_syntax(part: str, template: str) -> None:
    if part.startswith("{") and part.endswith("}"):
        msg = (
            f"Path template {template!r} uses {{param}} syntax. "
            f"Perch expects :param (e.g. /users/:id)."
        )
        raise ConfigurationError(msg)
    if part.startswith("<") and part.endswith(">"):
        msg = (
            f"Path template {template!r} uses <param> syntax. "
            f"Perch expects :param (e.g. /users/:id)."
        )
        raise ConfigurationError(msg)


def parse_template(template: str) -> PathTemplate:
    """Parse a template string into segments.

    Examples::

        "/users"            -> [PathSegment("users")]
        "/users/:id"        -> [PathSegment("users"), PathSegment(":id", is_param=True, ...)]
        "/users/:id(\\d+)"   -> [..., PathSegment(":id(\\d+)", is_param=True, pattern=r"\\d+")]
        "/users/:id?"       -> [..., PathSegment(":id?", is_param=True, optional=True)]
        "/tags/:names*"     -> [..., PathSegment(":names*", optional=True, repeat=True)]
        "/file.:ext"        -> [PathSegment("file."), PathSegment(":ext", joined=True, ...)]

    Every ``:`` must open a placeholder. Raises ``ConfigurationError`` for
    malformed placeholders, duplicate names, or patterns that do not compile.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in _split_segments(template):
        if not part:
            continue
        _reject_foreign_syntax(part, template)
        segments.extend(_parse_part(part, template, seen))
    return PathTemplate(
        source=template,
        segments=tuple(segments),
        leading_slash=template.startswith("/") or not template,
        trailing_slash=len(template) > 1 and template.endswith("/"),
    )


def _parse_part(part: str, template: str, seen: set[str]) -> list[PathSegment]:
    """Split one ``/``-delimited part into literal and placeholder pieces."""
    pieces: list[PathSegment] = []
    literal: list[str] = []
    i = 0
    while i < len(part):
        if part[i] != ":":
            literal.append(part[i])
            i += 1
            continue
        if literal:
            pieces.append(PathSegment(value="".join(literal), joined=bool(pieces)))
            literal = []
        start = i
        found = _NAME.match(part, i + 1)
        if found is None:
            msg = f"Malformed placeholder {part[start:]!r} in path template {template!r}."
            raise ConfigurationError(msg)
        name = found.group()
        if name in seen:
            msg = f"Duplicate placeholder {name!r} in path template {template!r}."
            raise ConfigurationError(msg)
        seen.add(name)
        i = found.end()
        pattern = None
        if i < len(part) and part[i] == "(":
            close = _closing_paren(part, i)
            pattern = part[i + 1 : close]
            if not pattern:
                text = part[start : close + 1]
                msg = f"Malformed placeholder {text!r} in path template {template!r}."
                raise ConfigurationError(msg)
            _check_pattern(pattern, template)
            i = close + 1
        modifier = ""
        if i < len(part) and part[i] in _MODIFIERS:
            modifier = part[i]
            i += 1
        pieces.append(
            PathSegment(
                value=part[start:i],
                is_param=True,
                param_name=name,
                pattern=pattern,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                joined=bool(pieces),
            )
        )
    if literal:
        pieces.append(PathSegment(value="".join(literal), joined=bool(pieces)))
    return pieces


def _closing_paren(part: str, opening: int) -> int:
    depth = 0
    for index in range(opening, len(part)):
        if part[index] == "(":
            depth += 1
        elif part[index] == ")":
            depth -= 1
            if depth == 0:
                return index
    msg = f"Unbalanced '(' in path segment {part!r}."
    raise ConfigurationError(msg)


def _check_pattern(pattern: str, template: str) -> None:
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        msg = f"Invalid pattern {pattern!r} in path template {template!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if compiled.groupindex:
        msg = f"Pattern {pattern!r} in path template {template!r} may not use named groups."
        raise ConfigurationError(msg)


@functools.lru_cache(maxsize=512)
def compile_template(template: str) -> re.Pattern[str]:
    """Compile *template* into a full-match regex with one named group per placeholder."""
    parsed = parse_template(template)
    parts: list[str] = []
    for seg in parsed.segments:
        if not seg.is_param:
            parts.append(seg.separator + re.escape(seg.value))
        elif seg.optional:
            parts.append(f"(?:{seg.separator}(?P<{seg.param_name}>{seg.regex}))?")
        else:
            parts.append(f"{seg.separator}(?P<{seg.param_name}>{seg.regex})")
    body = "".join(parts)
    if not parsed.leading_slash and body.startswith("/"):
        body = body[1:]
    return re.compile(body + "/?")


@functools.lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)
