"""Uniform access to raw location objects.

Navigation layers hand over locations in different shapes: objects with
``search``/``hash``/``state`` attributes, or plain mappings decoded from
JSON. Codecs read fields through ``location_field`` so both work.
"""

from collections.abc import Mapping
from typing import Any


def location_field(location: Any, name: str) -> Any:
    """Return *name* from *location*, or ``None`` if it is not present."""
    if location is None:
        return None
    if isinstance(location, Mapping):
        return location.get(name)
    return getattr(location, name, None)
