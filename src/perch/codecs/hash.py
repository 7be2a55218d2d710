"""Hash codec: a single fragment value, optionally from a fixed set.

The hash is always optional. Fragments are edited by hand even more
freely than query strings, so an unknown fragment parses as absent
instead of failing.
"""

import logging
from collections.abc import Iterable
from urllib.parse import quote, unquote

from perch.errors import BuildError

logger = logging.getLogger("perch.codecs")

# Characters allowed unescaped in a fragment (RFC 3986 section 3.5)
_SAFE = "!$&'()*+,;=:@/?"


class HashCodec:
    """Builds and parses the hash part of a location.

    Usage::

        codec = HashCodec(["about", "subscribe"])
        codec.build("about")     # -> "#about"
        codec.parse("#other")    # -> None

    ``allowed=None`` accepts any fragment. An empty allow-list accepts none,
    which is how a route without a hash is represented.
    """

    __slots__ = ("_allowed",)

    def __init__(self, allowed: Iterable[str] | None = None) -> None:
        self._allowed: frozenset[str] | None = None if allowed is None else frozenset(allowed)

    @property
    def allowed(self) -> frozenset[str] | None:
        return self._allowed

    def build(self, value: str | None = None) -> str:
        """Return ``"#value"``, or ``""`` when *value* is ``None``.

        Raises ``BuildError`` if *value* is outside the allow-list.
        """
        if value is None:
            return ""
        if not isinstance(value, str):
            raise BuildError("hash", f"expected str, got {type(value).__name__}")
        if self._allowed is not None and value not in self._allowed:
            if not self._allowed:
                raise BuildError("hash", "route does not declare a hash")
            raise BuildError("hash", f"{value!r} is not one of {', '.join(sorted(self._allowed))}")
        if not value:
            return ""
        return "#" + quote(value, safe=_SAFE)

    def parse(self, raw_hash: str | None) -> str | None:
        """Strip the leading ``#`` and return the value, or ``None``.

        Empty fragments and values outside the allow-list parse as ``None``.
        """
        if not raw_hash:
            return None
        value = unquote(raw_hash[1:] if raw_hash.startswith("#") else raw_hash)
        if not value:
            return None
        if self._allowed is not None and value not in self._allowed:
            logger.debug("Ignoring hash %r outside %s", value, sorted(self._allowed))
            return None
        return value

    def __repr__(self) -> str:
        if self._allowed is None:
            return "HashCodec()"
        return f"HashCodec({sorted(self._allowed)!r})"


def fragment(*allowed: str) -> HashCodec:
    """Declare a hash codec: ``fragment("about", "subscribe")``.

    With no arguments any fragment is accepted.
    """
    return HashCodec(allowed or None)
