"""
Condition Evaluator
===================

Evaluates the membership conditions used by rule-declared red flags.

Grammar (exactly one production, no boolean composition, no nesting):

    condition := IDENT "in" "[" STRING ("," STRING)* "]"
    IDENT     := [A-Za-z0-9_]+
    STRING    := "'" [^']* "'" | '"' [^"]* '"'

Example:
    fh_tumori_brca in ['mutazione_brca_nota', "sospetta"]

A condition that does not match this shape evaluates to False; it never
raises, so a typo in a rule cannot block scoring.

Author: HealthScore Team
Version: 1.0.0
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterator, List, Mapping, NamedTuple, Tuple

from healthscore.logging import get_logger
from healthscore.scoring.mapper import as_list, is_absent


logger = get_logger(__name__)


class ConditionSyntaxError(ValueError):
    """A condition string does not match the membership grammar."""

    def __init__(self, condition: str, position: int, message: str):
        self.condition = condition
        self.position = position
        super().__init__(f"{message} at position {position} in {condition!r}")


class Token(NamedTuple):
    kind: str
    text: str
    position: int


_TOKEN_SPEC = [
    ("STRING", r"'[^']*'|\"[^\"]*\""),
    ("IDENT", r"\w+"),
    ("LBRACKET", r"\["),
    ("RBRACKET", r"\]"),
    ("COMMA", r","),
    ("SKIP", r"\s+"),
    ("MISMATCH", r"."),
]

_TOKEN_RE = re.compile(
    "|".join(f"(?P<{kind}>{pattern})" for kind, pattern in _TOKEN_SPEC),
    re.ASCII,
)


def tokenize(condition: str) -> Iterator[Token]:
    """Split a condition into tokens, raising on any stray character."""
    for match in _TOKEN_RE.finditer(condition):
        kind = match.lastgroup
        if kind == "SKIP":
            continue
        if kind == "MISMATCH":
            raise ConditionSyntaxError(
                condition, match.start(), f"unexpected character {match.group()!r}"
            )
        yield Token(kind, match.group(), match.start())


@dataclass(frozen=True)
class MembershipCondition:
    """Parsed `<identifier> in [<literals>]` test."""

    identifier: str
    literals: Tuple[str, ...]

    def matches(self, answers: Mapping[str, Any]) -> bool:
        """True iff the answer for `identifier` intersects the literals."""
        answer = answers.get(self.identifier)
        if is_absent(answer):
            return False
        return any(item in self.literals for item in as_list(answer))


class _Parser:
    """Recursive-descent parser for the single condition production."""

    def __init__(self, condition: str):
        self.condition = condition
        self.tokens: List[Token] = list(tokenize(condition))
        self.index = 0

    def _peek(self) -> Token:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return Token("END", "", len(self.condition))

    def _expect(self, kind: str, text: str = "") -> Token:
        token = self._peek()
        if token.kind != kind or (text and token.text != text):
            wanted = repr(text) if text else kind
            found = repr(token.text) if token.kind != "END" else "end of input"
            raise ConditionSyntaxError(
                self.condition, token.position, f"expected {wanted}, found {found}"
            )
        self.index += 1
        return token

    def parse(self) -> MembershipCondition:
        identifier = self._expect("IDENT").text
        self._expect("IDENT", "in")
        self._expect("LBRACKET")

        literals = [self._expect("STRING").text[1:-1]]
        while self._peek().kind == "COMMA":
            self.index += 1
            literals.append(self._expect("STRING").text[1:-1])

        self._expect("RBRACKET")
        self._expect("END")
        return MembershipCondition(identifier=identifier, literals=tuple(literals))


@lru_cache(maxsize=1024)
def parse_condition(condition: str) -> MembershipCondition:
    """
    Parse a membership condition.

    Raises:
        ConditionSyntaxError: If the string does not match the grammar
    """
    return _Parser(condition).parse()


def evaluate_condition(condition: Any, answers: Mapping[str, Any]) -> bool:
    """
    Evaluate a membership condition against mapped answers.

    Args:
        condition: Condition string from a red-flag rule
        answers: Mapped answers (feature -> value)

    Returns:
        True if the answer set intersects the literal set; False for an
        absent answer or any condition that does not parse.
    """
    if not isinstance(condition, str):
        logger.warning("condition_not_a_string", condition=repr(condition))
        return False

    try:
        parsed = parse_condition(condition)
    except ConditionSyntaxError as exc:
        logger.warning(
            "condition_unparseable",
            condition=condition,
            position=exc.position,
            error=str(exc),
        )
        return False

    return parsed.matches(answers)
