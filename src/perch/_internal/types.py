"""Shared type aliases used across perch modules."""

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

# Encode/decode halves of a transformer
Encoder: TypeAlias = Callable[[Any], Any]
Decoder: TypeAlias = Callable[[Any], Any]

# Flat placeholder -> raw value map produced by a path matcher
RawParams: TypeAlias = Mapping[str, str | None]
