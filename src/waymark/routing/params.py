"""Variable value patterns and type conversion.

Built-in converters for the four variable kinds of the pattern DSL.
"""

from collections.abc import Iterable
from urllib.parse import quote, unquote

from waymark.routing.route import VariableKind

# (single value regex, plural element regex, python type) for each kind
CONVERTERS: dict[VariableKind, tuple[str, str | None, type]] = {
    VariableKind.STRING: (r"[^/]*", r"[^/&]*", str),
    VariableKind.PATH: (r".*", r"[^&]*", str),
    VariableKind.INTEGER: (r"[0-9]+", r"[0-9]+", int),
    VariableKind.REMAINDER: (r".*", None, str),
}

# Characters encodeURIComponent leaves alone, beyond quote()'s own "_.-~"
_SAFE = "!*'()"


def convert_param(value: str, kind: VariableKind) -> str | int:
    """Convert a captured value to the kind's python type.

    Raises ``ValueError`` if an integer capture is not a base-10 number.
    """
    _, _, target_type = CONVERTERS[kind]
    if target_type is int:
        return int(value, 10)
    return value


def decode_plural(value: str, kind: VariableKind) -> list[str] | list[int]:
    """Split an ``&``-joined capture into percent-decoded elements.

    An empty capture means zero elements.
    """
    if value == "":
        return []
    return [convert_param(unquote(part), kind) for part in value.split("&")]  # type: ignore[return-value]


def encode_plural(values: Iterable[object]) -> str:
    """Percent-encode each element and join them with ``&``."""
    return "&".join(quote(str(v), safe=_SAFE) for v in values)
