"""Perch: typed, composable codecs for navigational addresses.

Builds and parses the four parts of a location: a path with named
parameters, a query string, a hash fragment, and an opaque state payload.
Pure and synchronous; route definitions are immutable and can be shared
across threads.

Basic usage::

    from perch import HashCodec, param, route

    article = route(
        "/articles/:id(\\d+)",
        {"id": param.number},
        query={"tags": param.array_of(param.string), "page": param.number.optional(1)},
        fragment=HashCodec(["comments"]),
    )

    loc = article.build({"id": 42}, {"tags": ["a", "b"]}, "comments")
    loc.href   # -> "/articles/42?tags=a&tags=b#comments"

    parsed = article.parse({"id": "42"}, loc)
    parsed.query   # -> {"tags": ["a", "b"], "page": 1}
"""

import importlib

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "BuildError",
    "ConfigurationError",
    "DecodeError",
    "HashCodec",
    "Location",
    "ParseError",
    "ParsedRoute",
    "PathCodec",
    "PathTemplate",
    "PerchError",
    "QueryCodec",
    "QueryFormat",
    "Route",
    "StateCodec",
    "TemplateMismatchError",
    "Transformer",
    "fragment",
    "param",
    "path",
    "query",
    "route",
    "state",
]

# Public name -> (module, attribute); attribute None means the module itself
_LAZY_IMPORTS: dict[str, tuple[str, str | None]] = {
    "param": ("perch.param", None),
    "Transformer": ("perch.codecs.transformer", "Transformer"),
    "PathTemplate": ("perch.codecs.template", "PathTemplate"),
    "PathCodec": ("perch.codecs.path", "PathCodec"),
    "path": ("perch.codecs.path", "path"),
    "QueryCodec": ("perch.codecs.query", "QueryCodec"),
    "query": ("perch.codecs.query", "query"),
    "QueryFormat": ("perch.config", "QueryFormat"),
    "HashCodec": ("perch.codecs.hash", "HashCodec"),
    "fragment": ("perch.codecs.hash", "fragment"),
    "StateCodec": ("perch.codecs.state", "StateCodec"),
    "state": ("perch.codecs.state", "state"),
    "Route": ("perch.routing.route", "Route"),
    "route": ("perch.routing.route", "route"),
    "Location": ("perch.routing.location", "Location"),
    "ParsedRoute": ("perch.routing.location", "ParsedRoute"),
    "PerchError": ("perch.errors", "PerchError"),
    "ConfigurationError": ("perch.errors", "ConfigurationError"),
    "BuildError": ("perch.errors", "BuildError"),
    "DecodeError": ("perch.errors", "DecodeError"),
    "TemplateMismatchError": ("perch.errors", "TemplateMismatchError"),
    "ParseError": ("perch.errors", "ParseError"),
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    target = _LAZY_IMPORTS.get(name)
    if target is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    module_name, attr = target
    module = importlib.import_module(module_name)
    return module if attr is None else getattr(module, attr)
