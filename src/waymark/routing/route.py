"""Term and ParseResult frozen dataclasses."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias

# Parameter key: an explicit identifier, or the positional index of an
# unnamed variable within its own pattern.
ParamKey: TypeAlias = str | int


class VariableKind(Enum):
    """Variable kinds, keyed by their prefix in the pattern DSL."""

    STRING = ":"
    PATH = "*"
    INTEGER = "+"
    REMAINDER = "..."


@dataclass(frozen=True, slots=True)
class Literal:
    """Text matched and emitted verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class Variable:
    """A typed variable term.

    ``/:noteId?``  -> Variable(STRING, "noteId", slash=True, optional=True)
    ``/+photoIds&`` -> Variable(INTEGER, "photoIds", slash=True, plural=True)
    ``/...``       -> Variable(REMAINDER, 0, slash=True)
    """

    kind: VariableKind
    name: ParamKey
    slash: bool = False
    optional: bool = False
    plural: bool = False

    @property
    def optional_slash(self) -> bool:
        """The preceding ``/`` is dropped when this variable is absent."""
        return self.slash and (self.optional or self.plural)

    @property
    def is_remainder(self) -> bool:
        """Bound to ``remaining_path`` instead of a parameter."""
        return self.kind is VariableKind.REMAINDER


Term: TypeAlias = Literal | Variable


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of a successful parse: where to go and with what.

    A fresh value per ``parse`` call; the caller owns ``parameters``.
    """

    destination: str
    parameters: dict[ParamKey, Any] = field(default_factory=dict)
    remaining_path: str | None = None
