"""Path codec: typed parameters in and out of a path template.

Build interpolates encoded values into the template; parse validates a
raw parameter map (as produced by a path matcher) and decodes it.

A repeated placeholder (``:names+`` or ``:names*``) reaches ``parse``
already joined by the matcher, so ``param.array_of`` on a path placeholder
decodes one element and cannot be built. Use a custom transformer that joins and
splits explicitly when a path segment must carry a list.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from urllib.parse import quote

from perch import param
from perch._internal.types import RawParams
from perch.codecs.template import PathTemplate, compile_pattern, parse_template
from perch.codecs.transformer import Transformer
from perch.errors import (
    BuildError,
    ConfigurationError,
    DecodeError,
    ParseError,
    TemplateMismatchError,
)

# RFC 3986 pchar minus the unreserved set quote() already keeps, plus "/"
# for patterns that span segments
_SAFE = "!$&'()*+,;=:@/"


class PathCodec:
    """Builds and parses the path part of a location.

    Usage::

        codec = PathCodec("/users/:id(\\d+)/:tab?", {"id": param.number})
        codec.build({"id": 7})                 # -> "/users/7"
        codec.parse({"id": "7", "tab": None})  # -> {"id": 7, "tab": None}

    Placeholders without a declared transformer use ``param.string``.
    """

    __slots__ = ("_params", "_template")

    def __init__(
        self,
        template: str | PathTemplate,
        params: Mapping[str, Transformer[Any]] | None = None,
    ) -> None:
        parsed = template if isinstance(template, PathTemplate) else parse_template(template)
        declared = dict(params or {})
        unknown = sorted(set(declared) - parsed.names)
        if unknown:
            msg = (
                f"Path params {', '.join(unknown)} are not placeholders "
                f"in template {parsed.source!r}."
            )
            raise ConfigurationError(msg)
        resolved = {
            seg.param_name: declared.get(seg.param_name, param.string)
            for seg in parsed.placeholders
            if seg.param_name
        }
        self._template = parsed
        self._params: Mapping[str, Transformer[Any]] = MappingProxyType(resolved)

    @property
    def template(self) -> PathTemplate:
        return self._template

    @property
    def params(self) -> Mapping[str, Transformer[Any]]:
        return self._params

    def build(self, values: Mapping[str, Any] | None = None) -> str:
        """Interpolate *values* into the template.

        Raises ``BuildError`` on the first missing required placeholder,
        undeclared key, or value its transformer or pattern rejects.
        """
        values = values or {}
        for key in values:
            if key not in self._params:
                raise BuildError(key, f"not a placeholder in {self._template.source!r}")

        parts: list[str] = []
        for seg in self._template.segments:
            if not seg.is_param or seg.param_name is None:
                parts.append(seg.separator + seg.value)
                continue
            name = seg.param_name
            value = values.get(name)
            if value is None:
                if seg.optional:
                    continue
                raise BuildError(name, "missing required path parameter")
            try:
                text = self._params[name].encode(value)
            except BuildError as exc:
                raise exc.with_parameter(name) from exc
            if not isinstance(text, str):
                raise BuildError(
                    name,
                    "path parameters must encode to a single string; "
                    "join list values with a custom transformer",
                )
            if not compile_pattern(seg.regex).fullmatch(text):
                raise BuildError(name, f"{text!r} does not match pattern {seg.regex!r}")
            parts.append(seg.separator + quote(text, safe=_SAFE))

        path = "".join(parts)
        if not self._template.leading_slash:
            path = path.removeprefix("/")
        elif not path:
            path = "/"
        if self._template.trailing_slash and parts:
            path += "/"
        return path

    def parse(self, raw_params: RawParams) -> dict[str, Any]:
        """Validate *raw_params* against the template and decode every value.

        Raises ``TemplateMismatchError`` if keys do not fit the template,
        and ``ParseError`` listing every required placeholder that failed
        to decode. Optional transformers fall back silently.
        """
        self.check(raw_params)
        result: dict[str, Any] = {}
        failures: list[DecodeError] = []
        for name, transformer in self._params.items():
            raw = raw_params.get(name)
            if raw is None:
                # absent optional placeholder
                result[name] = transformer.fallback if transformer.is_optional else None
                continue
            try:
                result[name] = transformer.decode(raw)
            except DecodeError as exc:
                failures.append(exc.with_parameter(name))
        if failures:
            raise ParseError.collect(failures, part="path")
        return result

    def check(self, raw_params: RawParams) -> None:
        """Raise ``TemplateMismatchError`` unless *raw_params* fits the template."""
        extra = tuple(sorted(set(raw_params) - self._template.names))
        missing = tuple(
            sorted(
                name
                for name in self._template.required_names
                if raw_params.get(name) is None
            )
        )
        if extra or missing:
            raise TemplateMismatchError(
                template=self._template.source,
                extra_keys=extra,
                missing_keys=missing,
            )

    def match(self, pathname: str) -> dict[str, str | None] | None:
        """Return the raw parameter map for *pathname*, or ``None`` if it does not match."""
        return self._template.match(pathname)

    def __repr__(self) -> str:
        return f"PathCodec({self._template.source!r})"


def path(template: str, **params: Transformer[Any]) -> PathCodec:
    """Declare a path codec: ``path("/users/:id", id=param.number)``."""
    return PathCodec(template, params)
