"""Location and ParsedRoute frozen dataclasses."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Location:
    """A built location, ready for the navigation layer.

    Plain and serializable: ``pathname``, ``search`` (``""`` or ``"?..."``),
    ``hash`` (``""`` or ``"#..."``) and an optional opaque ``state``.
    Also usable as a raw location when parsing.
    """

    pathname: str
    search: str = ""
    hash: str = ""
    state: Any = None

    @property
    def href(self) -> str:
        """``pathname + search + hash``, for links and redirects."""
        return f"{self.pathname}{self.search}{self.hash}"

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "pathname": self.pathname,
            "search": self.search,
            "hash": self.hash,
        }
        if self.state is not None:
            data["state"] = self.state
        return data

    def __str__(self) -> str:
        return self.href


@dataclass(frozen=True, slots=True)
class ParsedRoute:
    """Result of parsing every part of a location against a route."""

    path: dict[str, Any]
    query: dict[str, Any]
    hash: str | None = None
    state: Any = None
