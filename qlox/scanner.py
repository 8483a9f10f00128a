from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .diagnostics import SCAN, Diagnostic, compile_error
from .tokens import KEYWORDS, Literal, Token, TokenType

_SINGLE = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
}

# Operators that become a two-character token when followed by '='.
_WITH_EQUAL = {
    "!": (TokenType.BANG, TokenType.BANG_EQUAL),
    "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return "a" <= c <= "z" or "A" <= c <= "Z" or c == "_"


@dataclass
class ScanResult:
    tokens: List[Token]
    diagnostics: List[Diagnostic]


class Scanner:
    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens: List[Token] = []
        self.diagnostics: List[Diagnostic] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self) -> List[Token]:
        while not self._at_end():
            self.start = self.current
            self._scan_token()
        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def _scan_token(self) -> None:
        c = self._advance()
        if c in _SINGLE:
            self._add_token(_SINGLE[c])
        elif c in _WITH_EQUAL:
            plain, with_equal = _WITH_EQUAL[c]
            self._add_token(with_equal if self._match("=") else plain)
        elif c == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._at_end():
                    self.current += 1
            else:
                self._add_token(TokenType.SLASH)
        elif c in (" ", "\r", "\t"):
            pass
        elif c == "\n":
            self.line += 1
        elif c == '"':
            self._string()
        elif _is_digit(c):
            self._number()
        elif _is_alpha(c):
            self._identifier()
        else:
            self._error("Unexpected character.")

    def _string(self) -> None:
        while self._peek() != '"' and not self._at_end():
            if self._peek() == "\n":
                self.line += 1
            self.current += 1

        if self._at_end():
            self._error("Unterminated string.")
            return

        self.current += 1  # closing quote
        self._add_token(TokenType.STRING, self.source[self.start + 1 : self.current - 1])

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self.current += 1

        # A '.' only belongs to the number when a digit follows it.
        if self._peek() == "." and _is_digit(self._peek_next()):
            self.current += 1
            while _is_digit(self._peek()):
                self.current += 1

        self._add_token(TokenType.NUMBER, float(self.source[self.start : self.current]))

    def _identifier(self) -> None:
        while _is_alpha(self._peek()) or _is_digit(self._peek()):
            self.current += 1
        text = self.source[self.start : self.current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _add_token(self, type: TokenType, literal: Optional[Literal] = None) -> None:
        lexeme = self.source[self.start : self.current]
        self.tokens.append(Token(type, lexeme, literal, self.line))

    def _error(self, message: str) -> None:
        self.diagnostics.append(compile_error(SCAN, self.line, message))

    def _match(self, expected: str) -> bool:
        if self._at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def _advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self.source[self.current]

    def _peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def _at_end(self) -> bool:
        return self.current >= len(self.source)


def scan(source: str) -> ScanResult:
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    return ScanResult(tokens=tokens, diagnostics=scanner.diagnostics)


__all__ = ["ScanResult", "Scanner", "scan"]
