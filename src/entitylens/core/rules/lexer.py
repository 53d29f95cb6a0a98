"""Lexer for predicate expressions."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from .exceptions import ExpressionSyntaxError


class TokenType(Enum):
    """Types of tokens in predicate expressions."""

    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOLEAN = auto()
    NULL = auto()
    IDENTIFIER = auto()

    # Comparison
    EQ = auto()  # ==
    NEQ = auto()  # !=
    LT = auto()  # <
    GT = auto()  # >
    LTE = auto()  # <=
    GTE = auto()  # >=

    # Logical
    AND = auto()  # and, &&
    OR = auto()  # or, ||
    NOT = auto()  # not, !
    IN = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()

    EOF = auto()


KEYWORDS = {
    "true": (TokenType.BOOLEAN, True),
    "false": (TokenType.BOOLEAN, False),
    "null": (TokenType.NULL, None),
    "and": (TokenType.AND, "and"),
    "or": (TokenType.OR, "or"),
    "not": (TokenType.NOT, "not"),
    "in": (TokenType.IN, "in"),
}

# Two-character operators are matched before single characters
OPERATORS = {
    "==": TokenType.EQ,
    "!=": TokenType.NEQ,
    "<=": TokenType.LTE,
    ">=": TokenType.GTE,
    "&&": TokenType.AND,
    "||": TokenType.OR,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "!": TokenType.NOT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
}

CANONICAL_OPERATORS = {"&&": "and", "||": "or", "!": "not"}


@dataclass(frozen=True)
class Token:
    """A single token in the expression."""

    type: TokenType
    value: str | int | float | bool | None
    position: int


class Lexer:
    """Tokenizes predicate expressions."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    @property
    def current_char(self) -> str | None:
        return self.text[self.pos] if self.pos < len(self.text) else None

    def error(self, message: str) -> None:
        """Raise a syntax error at the current position."""
        raise ExpressionSyntaxError(message, self.pos)

    def _number(self) -> Token:
        start = self.pos
        while self.current_char is not None and self.current_char.isdigit():
            self.pos += 1
        if self.current_char == "." and self.pos + 1 < len(self.text) and self.text[self.pos + 1].isdigit():
            self.pos += 1
            while self.current_char is not None and self.current_char.isdigit():
                self.pos += 1
            return Token(TokenType.FLOAT, float(self.text[start : self.pos]), start)
        return Token(TokenType.INTEGER, int(self.text[start : self.pos]), start)

    def _string(self) -> Token:
        """Parse a quoted string; a doubled quote stands for the quote itself."""
        start = self.pos
        quote = self.current_char
        self.pos += 1
        chars = []
        while True:
            char = self.current_char
            if char is None:
                self.pos = start
                self.error("Unterminated string literal")
            self.pos += 1
            if char == quote:
                if self.current_char == quote:
                    chars.append(quote)
                    self.pos += 1
                    continue
                break
            chars.append(char)
        return Token(TokenType.STRING, "".join(chars), start)

    def _identifier(self) -> Token:
        start = self.pos
        while self.current_char is not None and (self.current_char.isalnum() or self.current_char in "_."):
            self.pos += 1
        word = self.text[start : self.pos]
        if word in KEYWORDS:
            token_type, value = KEYWORDS[word]
            return Token(token_type, value, start)
        if word.endswith(".") or ".." in word:
            self.pos = start
            self.error(f"Invalid property path '{word}'")
        return Token(TokenType.IDENTIFIER, word, start)

    def get_next_token(self) -> Token:
        """Get the next token from input."""
        while self.current_char is not None and self.current_char.isspace():
            self.pos += 1

        char = self.current_char
        if char is None:
            return Token(TokenType.EOF, None, self.pos)
        if char.isdigit():
            return self._number()
        if char in ("'", '"'):
            return self._string()
        if char.isalpha() or char == "_":
            return self._identifier()

        start = self.pos
        for symbol in (self.text[start : start + 2], char):
            if symbol in OPERATORS:
                self.pos += len(symbol)
                return Token(OPERATORS[symbol], CANONICAL_OPERATORS.get(symbol, symbol), start)

        self.error(f"Invalid character '{char}'")
        raise AssertionError("unreachable")

    def tokenize(self) -> Iterator[Token]:
        """Generator that yields all tokens."""
        while True:
            token = self.get_next_token()
            yield token
            if token.type == TokenType.EOF:
                break
