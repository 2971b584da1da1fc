"""
Tokenizer (lexer) for the expression language.

Converts an expression string into a stream of tokens for the parser.
The tokenizer keeps a single lookahead token: ``current()`` returns it
and ``advance()`` scans the next one.

Lexical problems never raise here. An unknown character or a malformed
number becomes an INVALID token, and the parser reports it when it
expects something else.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .limits import ExpressionLimits, check_expression_length


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    # Literals
    NUMBER = "NUMBER"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    PERCENT = "PERCENT"
    CARET = "CARET"

    # Delimiters
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    COMMA = "COMMA"

    # Special
    INVALID = "INVALID"
    EOF = "EOF"


@dataclass
class Token:
    """A token produced by the tokenizer."""

    type: TokenType
    value: str
    position: int
    number: Optional[float] = None


SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "^": TokenType.CARET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}


def _is_digit(ch: str) -> bool:
    """Checks if a character is a digit."""
    return "0" <= ch <= "9"


def _is_identifier_start(ch: str) -> bool:
    """Checks if a character can start an identifier."""
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_identifier_part(ch: str) -> bool:
    """Checks if a character can continue an identifier."""
    return _is_identifier_start(ch) or _is_digit(ch)


def _is_whitespace(ch: str) -> bool:
    """Checks if a character is whitespace."""
    return ch in (" ", "\t", "\n", "\r", "\f", "\v")


class Tokenizer:
    """Tokenizer for expression strings with one token of lookahead."""

    def __init__(self, source: str, limits: Optional[ExpressionLimits] = None):
        check_expression_length(source, limits)
        self._source = source
        self._position = 0
        self._current = Token(TokenType.EOF, "", 0)
        self.advance()

    @property
    def source(self) -> str:
        return self._source

    def current(self) -> Token:
        """Returns the lookahead token without consuming it."""
        return self._current

    def advance(self) -> Token:
        """Consumes the current token and returns the next one."""
        self._skip_whitespace()

        if self._is_at_end():
            self._current = Token(TokenType.EOF, "", len(self._source))
            return self._current

        start_position = self._position
        ch = self._peek()

        if _is_digit(ch) or ch == ".":
            self._current = self._scan_number(start_position)
        elif _is_identifier_start(ch):
            self._current = self._scan_identifier(start_position)
        else:
            self._position += 1
            token_type = SINGLE_CHAR_TOKENS.get(ch, TokenType.INVALID)
            self._current = Token(token_type, ch, start_position)

        return self._current

    def _is_at_end(self) -> bool:
        return self._position >= len(self._source)

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self._source[self._position]

    def _skip_whitespace(self) -> None:
        while _is_whitespace(self._peek()):
            self._position += 1

    def _scan_number(self, start_position: int) -> Token:
        seen_dot = False

        # Integer and fractional part
        while _is_digit(self._peek()) or self._peek() == ".":
            if self._peek() == ".":
                if seen_dot:
                    break
                seen_dot = True
            self._position += 1

        # Exponent part
        if self._peek() in ("e", "E"):
            self._position += 1
            if self._peek() in ("+", "-"):
                self._position += 1
            while _is_digit(self._peek()):
                self._position += 1

        text = self._source[start_position : self._position]
        try:
            value = float(text)
        except ValueError:
            return Token(TokenType.INVALID, text, start_position)
        if math.isinf(value):
            # Out of range for a float
            return Token(TokenType.INVALID, text, start_position)
        return Token(TokenType.NUMBER, text, start_position, value)

    def _scan_identifier(self, start_position: int) -> Token:
        while _is_identifier_part(self._peek()):
            self._position += 1
        text = self._source[start_position : self._position]
        return Token(TokenType.IDENTIFIER, text, start_position)


def tokenize(source: str, limits: Optional[ExpressionLimits] = None) -> List[Token]:
    """
    Tokenizes an expression string into tokens.

    Args:
        source: The expression string to tokenize
        limits: Optional expression limits

    Returns:
        List of tokens, always ending with an EOF token

    Raises:
        LimitExceededError: If the expression is longer than allowed
    """
    tokenizer = Tokenizer(source, limits)
    tokens = [tokenizer.current()]
    while tokens[-1].type != TokenType.EOF:
        tokens.append(tokenizer.advance())
    return tokens
