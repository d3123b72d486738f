"""Boolean condition expressions for ``[if ...]`` directives.

Grammar (lowest to highest precedence)::

    expr    := or
    or      := and ("OR" and)*
    and     := not ("AND" not)*
    not     := "NOT" not | primary
    primary := "(" expr ")" | IDENT

Keywords are whole tokens matched case-insensitively, so identifiers such as
``ANDROID`` or ``MODERATE`` are never split into operators.  Identifiers are
case-sensitive flag names resolved through a ``FlagSet``.

``evaluate`` is total: malformed input is evaluated best-effort instead of
raising.  Use ``parse`` directly when the syntax error itself matters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .flags import FlagSet, as_flag_set


class ExpressionSyntaxError(ValueError):
    """Raised by ``parse`` when an expression cannot be decomposed."""

    def __init__(self, message: str, position: int) -> None:
        self.position = position
        super().__init__(f"{message} (at offset {position})")


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenKind(str, Enum):
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    IDENT = "IDENT"


_KEYWORDS: dict[str, TokenKind] = {
    "AND": TokenKind.AND,
    "OR": TokenKind.OR,
    "NOT": TokenKind.NOT,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


def tokenize(expr: str) -> list[Token]:
    """Split *expr* into keyword, parenthesis and identifier tokens.

    A word is any run of characters that are neither whitespace nor
    parentheses.  Words equal to ``AND``/``OR``/``NOT`` (any case) become
    keyword tokens; every other word is an identifier.
    """
    tokens: list[Token] = []
    i = 0
    n = len(expr)
    while i < n:
        ch = expr[i]
        if ch.isspace():
            i += 1
        elif ch == "(":
            tokens.append(Token(TokenKind.LPAREN, ch, i))
            i += 1
        elif ch == ")":
            tokens.append(Token(TokenKind.RPAREN, ch, i))
            i += 1
        else:
            start = i
            while i < n and not expr[i].isspace() and expr[i] not in "()":
                i += 1
            word = expr[start:i]
            tokens.append(Token(_KEYWORDS.get(word.upper(), TokenKind.IDENT), word, start))
    return tokens


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ident:
    name: str

    def evaluate(self, flags: FlagSet) -> bool:
        return flags.lookup(self.name)


@dataclass(frozen=True)
class Not:
    operand: Node

    def evaluate(self, flags: FlagSet) -> bool:
        return not self.operand.evaluate(flags)


@dataclass(frozen=True)
class And:
    left: Node
    right: Node

    def evaluate(self, flags: FlagSet) -> bool:
        return self.left.evaluate(flags) and self.right.evaluate(flags)


@dataclass(frozen=True)
class Or:
    left: Node
    right: Node

    def evaluate(self, flags: FlagSet) -> bool:
        return self.left.evaluate(flags) or self.right.evaluate(flags)


Node = Ident | Not | And | Or


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    """Recursive-descent parser over a token list.

    With ``recover`` set, a missing operand becomes ``Ident("")`` (which
    looks up as ``False``) instead of raising.  A bare ``NOT`` with nothing
    after it is that same empty identifier rather than its negation.
    """

    def __init__(self, tokens: list[Token], source: str, recover: bool = False) -> None:
        self.tokens = tokens
        self.source = source
        self.recover = recover
        self.pos = 0

    def _peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _at(self, kind: TokenKind) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind is kind

    def _at_operand(self) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind in (TokenKind.IDENT, TokenKind.LPAREN, TokenKind.NOT)

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def parse(self) -> Node:
        if not self.tokens:
            raise ExpressionSyntaxError("empty expression", 0)
        node = self._or()
        tok = self._peek()
        if tok is not None:
            raise ExpressionSyntaxError(f"unexpected {tok.text!r}", tok.position)
        return node

    def _or(self) -> Node:
        node = self._and()
        while self._at(TokenKind.OR):
            self._advance()
            node = Or(node, self._and())
        return node

    def _and(self) -> Node:
        node = self._not()
        while self._at(TokenKind.AND):
            self._advance()
            node = And(node, self._not())
        return node

    def _not(self) -> Node:
        if self._at(TokenKind.NOT):
            self._advance()
            if self.recover and not self._at_operand():
                return Ident("")
            return Not(self._not())
        return self._primary()

    def _primary(self) -> Node:
        if self.recover and not self._at_operand():
            return Ident("")
        tok = self._peek()
        if tok is None:
            raise ExpressionSyntaxError("expected operand", len(self.source))
        if tok.kind is TokenKind.IDENT:
            self._advance()
            return Ident(tok.text)
        if tok.kind is TokenKind.LPAREN:
            self._advance()
            node = self._or()
            if self._at(TokenKind.RPAREN):
                self._advance()
            elif self._peek() is not None:
                bad = self._advance()
                raise ExpressionSyntaxError(f"expected ')' but found {bad.text!r}", bad.position)
            # A group left open at end of input is closed implicitly.
            return node
        raise ExpressionSyntaxError(f"expected operand but found {tok.text!r}", tok.position)


def _drop_unmatched_closers(tokens: list[Token]) -> list[Token]:
    kept: list[Token] = []
    depth = 0
    for tok in tokens:
        if tok.kind is TokenKind.LPAREN:
            depth += 1
        elif tok.kind is TokenKind.RPAREN:
            if depth == 0:
                continue
            depth -= 1
        kept.append(tok)
    return kept


def parse(expr: str) -> Node:
    """Parse *expr* into an AST.

    Raises:
        ExpressionSyntaxError: If the expression is empty or malformed.
    """
    return _Parser(tokenize(expr), expr).parse()


def evaluate(expr: str, flags: Any) -> bool:
    """Evaluate *expr* against *flags*.

    *flags* may be a ``FlagSet``, a mapping, or a record object (see
    ``as_flag_set``).  Unknown identifiers are ``False``.

    Malformed input is evaluated best-effort: a ``)`` with no matching
    ``(`` is ignored, a missing operand counts as ``False`` and open groups
    are closed at the end.  Only empty input and adjacent operands with no
    operator between them give up entirely, returning ``False``.  Never
    raises.
    """
    flag_set = as_flag_set(flags)
    try:
        tokens = _drop_unmatched_closers(tokenize(expr))
        tree = _Parser(tokens, expr, recover=True).parse()
    except (ExpressionSyntaxError, RecursionError):
        return False
    try:
        return tree.evaluate(flag_set)
    except RecursionError:
        # Pathologically deep nesting.
        return False
