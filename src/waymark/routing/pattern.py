"""Pattern compiler — turns one route pattern into a matcher and generator.

Patterns are Sinatra-alike::

    "photos/+photoIds&"       plural integers, slash optional
    "notes/:noteId?"          optional string, slash optional
    "files/*path"             string that may contain "/"
    "docs/..."                remaining path, bound to ``remaining_path``
    "::"                      escaped ":" literal

Unrecognized input is a literal run, never an error.
"""

import logging
import re
from dataclasses import dataclass

from waymark.routing.params import CONVERTERS, convert_param, decode_plural
from waymark.routing.route import Literal, ParseResult, Term, Variable, VariableKind

logger = logging.getLogger("waymark.routing")

# One token per match, tried in priority order: escape, variable,
# regex-special character, plain literal run.
_TOKEN_RE = re.compile(
    r"(?P<slash>/?)"
    r"(?:"
    r":(?P<escape>[:*+&])"
    r"|(?P<prefix>:|\*|\+|\.\.\.)(?P<name>[A-Za-z0-9_]*)(?P<suffix>[?&]?)"
    r"|(?P<special>[-\[\]{}()*+.^$|,#\s])"
    r"|(?P<literal>[^/:*+.&]+)"
    r")"
)


def tokenize(pattern: str) -> tuple[list[Term], list[Variable]]:
    """Split a pattern into terms, collecting its variables in order.

    Unnamed variables are keyed by a positional counter that starts at
    zero for every pattern.

    Examples::

        "/photo/+photoId" -> [Literal("/photo"), Variable(INTEGER, "photoId", slash=True)]
        "a/:/b/:"         -> [Literal("a"), Variable(STRING, 0, slash=True),
                              Literal("/b"), Variable(STRING, 1, slash=True)]
    """
    terms: list[Term] = []
    variables: list[Variable] = []
    position = 0
    index = 0

    while index < len(pattern):
        match = _TOKEN_RE.match(pattern, index)
        if match is None:
            # Bare "/" before another "/" or at the end, or a lone "&"
            terms.append(Literal(pattern[index]))
            index += 1
            continue

        slash = match.group("slash")
        prefix = match.group("prefix")
        if prefix:
            name: str | int = match.group("name")
            if not name:
                name = position
                position += 1
            kind = VariableKind(prefix)
            suffix = match.group("suffix")
            remainder = kind is VariableKind.REMAINDER
            variable = Variable(
                kind=kind,
                name=name,
                slash=bool(slash),
                optional=suffix == "?" and not remainder,
                plural=suffix == "&" and not remainder,
            )
            terms.append(variable)
            variables.append(variable)
        else:
            text = match.group("escape") or match.group("special") or match.group("literal")
            terms.append(Literal(slash + text))
        index = match.end()

    return terms, variables


def _fragment(term: Term) -> str:
    """Regular expression fragment for one term."""
    if isinstance(term, Literal):
        return re.escape(term.text)

    slash = "/" if term.slash else ""
    single, element, _ = CONVERTERS[term.kind]

    if term.is_remainder:
        return "(" + ("/?" if term.slash else "") + single + ")"

    if term.plural:
        return "(?:" + slash + "(" + element + "(?:&" + element + ")*|))?"

    return "(?:" + slash + "(" + single + "))" + ("?" if term.optional else "")


def compile_regex(terms: list[Term], *, case_insensitive: bool = False) -> re.Pattern[str]:
    """Anchor the concatenated term fragments into one matcher.

    Every variable contributes exactly one capturing group, in order.
    """
    source = "^" + "".join(_fragment(term) for term in terms) + "$"
    return re.compile(source, re.IGNORECASE if case_insensitive else 0)


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A compiled pattern bound to its destination. Immutable."""

    pattern: str
    destination: str
    terms: tuple[Term, ...]
    variables: tuple[Variable, ...]
    regex: re.Pattern[str]

    def match(self, path: str) -> ParseResult | None:
        """Match *path* against this route.

        Returns ``None`` when the path does not match. Plural elements
        are percent-decoded; singular values are passed through raw.
        """
        match = self.regex.fullmatch(path)
        if match is None:
            return None

        parameters: dict[str | int, object] = {}
        remaining_path: str | None = None

        for i, variable in enumerate(self.variables):
            value = match.group(i + 1) or ""
            if variable.plural:
                parameters[variable.name] = decode_plural(value, variable.kind)
            elif variable.is_remainder:
                remaining_path = value
            elif variable.kind is VariableKind.INTEGER:
                # An absent optional integer has no number to convert
                parameters[variable.name] = convert_param(value, variable.kind) if value else None
            else:
                parameters[variable.name] = value

        return ParseResult(
            destination=self.destination,
            parameters=parameters,
            remaining_path=remaining_path,
        )


def compile_pattern(
    pattern: str,
    destination: str,
    *,
    case_insensitive: bool = False,
) -> CompiledRoute:
    """Compile one pattern into a route for *destination*."""
    terms, variables = tokenize(pattern)
    regex = compile_regex(terms, case_insensitive=case_insensitive)
    logger.debug("Compiled %r -> %s for %r", pattern, regex.pattern, destination)
    return CompiledRoute(
        pattern=pattern,
        destination=destination,
        terms=tuple(terms),
        variables=tuple(variables),
        regex=regex,
    )
