"""Route: one path, query, hash and state codec bound together.

The route holds no state of its own: every operation delegates to the
bound codecs, so a module-level route can be shared freely.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from perch._internal.location import location_field
from perch._internal.types import RawParams
from perch.codecs.hash import HashCodec
from perch.codecs.path import PathCodec
from perch.codecs.query import QueryCodec
from perch.codecs.state import StateCodec
from perch.codecs.template import PathTemplate
from perch.codecs.transformer import Transformer
from perch.errors import TemplateMismatchError
from perch.routing.location import Location, ParsedRoute


def _no_hash() -> HashCodec:
    return HashCodec(allowed=())


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created once at module scope. Parts a route does not use default to
    codecs that build nothing and parse to empty values.
    """

    path: PathCodec
    query: QueryCodec = field(default_factory=QueryCodec)
    fragment: HashCodec = field(default_factory=_no_hash)
    state: StateCodec = field(default_factory=StateCodec)

    @property
    def template(self) -> PathTemplate:
        return self.path.template

    # -- build --

    def build(
        self,
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
        hash_value: str | None = None,
    ) -> Location:
        """Build a location without state.

        Raises ``BuildError`` on the first invalid parameter.
        """
        return Location(
            pathname=self.path.build(path_params),
            search=self.query.build(query_params),
            hash=self.fragment.build(hash_value),
        )

    def build_location(
        self,
        state: Any,
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
        hash_value: str | None = None,
    ) -> Location:
        """Build a location carrying encoded *state*."""
        location = self.build(path_params, query_params, hash_value)
        return Location(
            pathname=location.pathname,
            search=location.search,
            hash=location.hash,
            state=self.state.build(state),
        )

    # -- parse --

    def parse(self, raw_path_params: RawParams, location: Any) -> ParsedRoute:
        """Parse all four parts.

        Raises ``TemplateMismatchError`` or ``ParseError`` from the path,
        ``ParseError`` from the query, or ``DecodeError`` from the state.
        """
        return ParsedRoute(
            path=self.parse_path(raw_path_params),
            query=self.parse_query(location),
            hash=self.parse_hash(location),
            state=self.parse_state(location),
        )

    def parse_path(self, raw_path_params: RawParams) -> dict[str, Any]:
        return self.path.parse(raw_path_params)

    def parse_query(self, location: Any) -> dict[str, Any]:
        return self.query.parse(location_field(location, "search"))

    def parse_hash(self, location: Any) -> str | None:
        return self.fragment.parse(location_field(location, "hash"))

    def parse_state(self, location: Any) -> Any:
        return self.state.parse(location_field(location, "state"))

    # -- matching --

    def match(self, pathname: str) -> dict[str, str | None] | None:
        """Return the raw path parameters for *pathname*, or ``None``."""
        return self.path.match(pathname)

    def parse_href(self, href: str, state: Any = None) -> ParsedRoute:
        """Split *href*, match its path against this route, and parse every part.

        Raises ``TemplateMismatchError`` if the path does not match.
        """
        parts = urlsplit(href)
        raw_params = self.match(parts.path)
        if raw_params is None:
            raise TemplateMismatchError(template=self.template.source, pathname=parts.path)
        location = Location(
            pathname=parts.path,
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
            state=state,
        )
        return self.parse(raw_params, location)

    def __repr__(self) -> str:
        return f"Route({self.template.source!r})"


def route(
    path: str | PathCodec,
    params: Mapping[str, Transformer[Any]] | None = None,
    *,
    query: QueryCodec | Mapping[str, Transformer[Any]] | None = None,
    fragment: HashCodec | None = None,
    state: StateCodec | Transformer[Any] | None = None,
) -> Route:
    """Declare a route.

    Usage::

        user = route(
            "/users/:id",
            {"id": param.number},
            query={"tab": param.one_of("posts", "likes").optional("posts")},
            fragment=HashCodec(["bio"]),
        )
        user.build({"id": 7}, {"tab": "likes"}).href   # -> "/users/7?tab=likes"
    """
    if isinstance(path, PathCodec):
        if params is not None:
            msg = "Pass params to PathCodec() or to route(), not both."
            raise TypeError(msg)
        path_codec = path
    else:
        path_codec = PathCodec(path, params)
    if query is None:
        query_codec = QueryCodec()
    elif isinstance(query, QueryCodec):
        query_codec = query
    else:
        query_codec = QueryCodec(query)
    if state is None:
        state_codec = StateCodec()
    elif isinstance(state, StateCodec):
        state_codec = state
    else:
        state_codec = StateCodec(state)
    return Route(
        path=path_codec,
        query=query_codec,
        fragment=fragment if fragment is not None else _no_hash(),
        state=state_codec,
    )
