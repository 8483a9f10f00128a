from __future__ import annotations

from qlox.scanner import scan
from qlox.tokens import TokenType as T


def _types(source: str) -> list[T]:
    return [tok.type for tok in scan(source).tokens]


def test_comment_contributes_no_token() -> None:
    result = scan("1 + 2.5 // comment")
    assert [tok.type for tok in result.tokens] == [T.NUMBER, T.PLUS, T.NUMBER, T.EOF]
    assert result.tokens[0].literal == 1.0
    assert result.tokens[2].literal == 2.5
    assert result.diagnostics == []


def test_two_char_operators_use_longest_match() -> None:
    assert _types("! != = == < <= > >=") == [
        T.BANG,
        T.BANG_EQUAL,
        T.EQUAL,
        T.EQUAL_EQUAL,
        T.LESS,
        T.LESS_EQUAL,
        T.GREATER,
        T.GREATER_EQUAL,
        T.EOF,
    ]


def test_punctuation() -> None:
    assert _types("(){},.-+;*/") == [
        T.LEFT_PAREN,
        T.RIGHT_PAREN,
        T.LEFT_BRACE,
        T.RIGHT_BRACE,
        T.COMMA,
        T.DOT,
        T.MINUS,
        T.PLUS,
        T.SEMICOLON,
        T.STAR,
        T.SLASH,
        T.EOF,
    ]


def test_keywords_override_identifiers() -> None:
    tokens = scan("class fun var orchid _under score9 nil").tokens
    assert [tok.type for tok in tokens] == [
        T.CLASS,
        T.FUN,
        T.VAR,
        T.IDENTIFIER,
        T.IDENTIFIER,
        T.IDENTIFIER,
        T.NIL,
        T.EOF,
    ]
    assert tokens[3].lexeme == "orchid"


def test_trailing_dot_is_not_part_of_number() -> None:
    tokens = scan("12.").tokens
    assert [tok.type for tok in tokens] == [T.NUMBER, T.DOT, T.EOF]
    assert tokens[0].literal == 12.0
    assert tokens[0].lexeme == "12"


def test_number_followed_by_method_call() -> None:
    assert _types("3.abs") == [T.NUMBER, T.DOT, T.IDENTIFIER, T.EOF]


def test_multiline_string_counts_lines() -> None:
    result = scan('"one\ntwo"\nx')
    string, ident, eof = result.tokens
    assert string.type == T.STRING
    assert string.literal == "one\ntwo"
    assert string.line == 2
    assert ident.line == 3
    assert eof.line == 3


def test_unterminated_string_reported_once_and_dropped() -> None:
    result = scan('print "never closed')
    assert [tok.type for tok in result.tokens] == [T.PRINT, T.EOF]
    assert [d.message for d in result.diagnostics] == ["Unterminated string."]
    assert result.diagnostics[0].phase == "scan"


def test_unexpected_character_skipped_and_scanning_continues() -> None:
    result = scan("a @ b # c")
    assert [tok.lexeme for tok in result.tokens if tok.type == T.IDENTIFIER] == ["a", "b", "c"]
    assert [d.message for d in result.diagnostics] == [
        "Unexpected character.",
        "Unexpected character.",
    ]


def test_non_ascii_digits_are_not_numbers() -> None:
    result = scan("٣")
    assert _types("٣") == [T.EOF]
    assert len(result.diagnostics) == 1


def test_single_eof_with_final_line() -> None:
    tokens = scan("a\n\n\n").tokens
    assert [tok.type for tok in tokens].count(T.EOF) == 1
    assert tokens[-1].line == 4


def test_token_str_for_dump() -> None:
    tokens = scan('var x = "hi";').tokens
    assert [str(tok) for tok in tokens] == [
        "VAR var null",
        "IDENTIFIER x null",
        "EQUAL = null",
        'STRING "hi" hi',
        "SEMICOLON ; null",
        "EOF  null",
    ]
