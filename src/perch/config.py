"""Query string stringification settings.

QueryFormat is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups. One instance is bound to each QueryCodec at
route-definition time.
"""

from dataclasses import dataclass

from perch.errors import ConfigurationError

ARRAY_FORMATS = frozenset({"repeat", "brackets", "indices", "comma"})
BOOLEAN_FORMATS = frozenset({"text", "numeric"})
NULL_FORMATS = frozenset({"skip", "empty", "bare"})


@dataclass(frozen=True, slots=True)
class QueryFormat:
    """How query values are written to and read from the wire.

    All fields have sensible defaults. Override what you need::

        fmt = QueryFormat(array_format="comma", boolean_format="numeric")
    """

    # Arrays
    array_format: str = "repeat"  # tags=a&tags=b | tags[]=a | tags[0]=a | tags=a,b

    # Booleans written by param.boolean fields
    boolean_format: str = "text"  # true/false | 1/0

    # None values
    null_format: str = "skip"  # omitted | key= | key

    def __post_init__(self) -> None:
        _check("array_format", self.array_format, ARRAY_FORMATS)
        _check("boolean_format", self.boolean_format, BOOLEAN_FORMATS)
        _check("null_format", self.null_format, NULL_FORMATS)


def _check(field: str, value: str, allowed: frozenset[str]) -> None:
    if value not in allowed:
        msg = (
            f"QueryFormat.{field} must be one of "
            f"{', '.join(sorted(allowed))}; got {value!r}"
        )
        raise ConfigurationError(msg)
