"""MultiValueMapping protocol: shared interface for raw query mappings.

A structural protocol so codecs can accept any multi-valued mapping
without coupling to the concrete type.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A read-only string mapping where keys can have multiple values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key, in wire order.
    ``get_split`` splits each value on a delimiter before percent-decoding.

    Values are ``None`` for bare keys written without ``=``.
    """

    def __getitem__(self, key: str) -> str | None: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get(self, key: str, default: str | None = None) -> str | None: ...
    def get_list(self, key: str) -> list[str | None]: ...
    def get_split(self, key: str, sep: str = ",") -> list[str]: ...
