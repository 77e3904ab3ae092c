import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from qur.qur_constants import TokenKind, token_hashmap
from qur.qur_errors import LexError
from qur.qur_lexer import CharacterStream, Lexer, Token, tokenize


def kinds(source: str) -> list[TokenKind]:
    return [tok.kind for tok in tokenize(source)]


def test_single_char_tokens() -> None:
    code = "{ } ( ) [ ] ; : , . = + - * / % < > ! & | ~"
    expected = [
        TokenKind.LBRACE,
        TokenKind.RBRACE,
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.LBRACK,
        TokenKind.RBRACK,
        TokenKind.SEMICOLON,
        TokenKind.COLON,
        TokenKind.COMMA,
        TokenKind.DOT,
        TokenKind.ASSIGN,
        TokenKind.ADD,
        TokenKind.SUB,
        TokenKind.MUL,
        TokenKind.DIV,
        TokenKind.MOD,
        TokenKind.LESSTHAN,
        TokenKind.MORETHAN,
        TokenKind.NOT,
        TokenKind.AND,
        TokenKind.OR,
        TokenKind.INVERT,
    ]
    assert kinds(code) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("==", [TokenKind.EQUAL]),
        ("!=", [TokenKind.NOTEQUAL]),
        ("<=", [TokenKind.LESSTHANEQUAL]),
        (">=", [TokenKind.MORETHANEQUAL]),
        ("++", [TokenKind.INCREMENT]),
        ("--", [TokenKind.DECREMENT]),
        ("+=", [TokenKind.ASSIGN_ADD]),
        ("-=", [TokenKind.ASSIGN_SUB]),
        ("*=", [TokenKind.ASSIGN_MUL]),
        ("/=", [TokenKind.ASSIGN_DIV]),
        ("%=", [TokenKind.ASSIGN_MOD]),
        ("->", [TokenKind.SETEACH]),
        ("===", [TokenKind.EQUAL, TokenKind.ASSIGN]),
        ("<<=", [TokenKind.LESSTHAN, TokenKind.LESSTHANEQUAL]),
        ("a<=b", [TokenKind.IDENTIFIER, TokenKind.LESSTHANEQUAL, TokenKind.IDENTIFIER]),
    ],
)
def test_longest_operator_match(source: str, expected: list[TokenKind]) -> None:
    assert kinds(source) == expected


def test_keywords() -> None:
    source = (
        "fn return if elif else for while continue break import "
        "void int double boolean char string list tuple dict type true false"
    )
    toks = tokenize(source)
    assert [t.kind for t in toks] == [token_hashmap[t.lexeme] for t in toks]
    assert TokenKind.IDENTIFIER not in [t.kind for t in toks]


@pytest.mark.parametrize("word", ["Return", "_x1", "fnx", "iff", "double2", "__"])
def test_identifiers(word: str) -> None:
    toks = tokenize(word)
    assert toks == [Token(TokenKind.IDENTIFIER, word, 1, 1)]


def test_integer_and_double_share_literal_kind() -> None:
    toks = tokenize("123 3.14")
    assert [(t.kind, t.lexeme) for t in toks] == [
        (TokenKind.LITERAL, "123"),
        (TokenKind.LITERAL, "3.14"),
    ]


def test_second_dot_ends_number() -> None:
    toks = tokenize("1.2.3")
    assert [(t.kind, t.lexeme) for t in toks] == [
        (TokenKind.LITERAL, "1.2"),
        (TokenKind.DOT, "."),
        (TokenKind.LITERAL, "3"),
    ]


def test_number_followed_by_identifier() -> None:
    assert kinds("12ab") == [TokenKind.LITERAL, TokenKind.IDENTIFIER]


def test_string_token() -> None:
    toks = tokenize('"hello world"')
    assert toks == [Token(TokenKind.STRING_LITERAL, "hello world", 1, 1)]


def test_string_escapes_are_kept_raw() -> None:
    toks = tokenize('"line\\nbreak"')
    assert toks[0].lexeme == "line\\nbreak"


def test_escaped_quote_does_not_end_string() -> None:
    toks = tokenize('"say \\"hi\\"" x')
    assert toks[0].kind is TokenKind.STRING_LITERAL
    assert toks[0].lexeme == 'say \\"hi\\"'
    assert toks[1].kind is TokenKind.IDENTIFIER


@pytest.mark.parametrize("source", ['"abc', '"abc\ndef"', '"abc\\'])
def test_unterminated_string_raises(source: str) -> None:
    with pytest.raises(LexError, match="unterminated string"):
        tokenize(source)


@pytest.mark.parametrize(
    "source,lexeme",
    [("'a'", "a"), ("'\\n'", "\\n"), ("'\\''", "\\'"), ("' '", " ")],
)
def test_char_literal(source: str, lexeme: str) -> None:
    toks = tokenize(source)
    assert toks == [Token(TokenKind.CHAR_LITERAL, lexeme, 1, 1)]


@pytest.mark.parametrize(
    "source,message",
    [
        ("''", "empty character literal"),
        ("'a", "unterminated character literal"),
        ("'\\", "unterminated character literal"),
        ("'ab'", "more than one character"),
    ],
)
def test_malformed_char_literal_raises(source: str, message: str) -> None:
    with pytest.raises(LexError, match=message):
        tokenize(source)


def test_line_comment_is_skipped() -> None:
    toks = tokenize("x // a comment = 5;\ny")
    assert [t.lexeme for t in toks] == ["x", "y"]
    assert toks[1].line == 2


def test_only_comment_yields_no_tokens() -> None:
    assert tokenize("// nothing here") == []


def test_single_slash_is_division() -> None:
    assert kinds("a / b") == [TokenKind.IDENTIFIER, TokenKind.DIV, TokenKind.IDENTIFIER]


def test_line_and_column_tracking() -> None:
    toks = tokenize("int x = 1;\n  y = 2;")
    assert [(t.line, t.col) for t in toks[:5]] == [(1, 1), (1, 5), (1, 7), (1, 9), (1, 10)]
    assert (toks[5].lexeme, toks[5].line, toks[5].col) == ("y", 2, 3)


def test_end_column_includes_quotes() -> None:
    toks = tokenize("\"ab\" 'c' xy <=")
    assert [(t.col, t.end_col) for t in toks] == [(1, 5), (6, 9), (10, 12), (13, 15)]


def test_end_column_is_not_part_of_equality() -> None:
    assert tokenize("xy")[0] == Token(TokenKind.IDENTIFIER, "xy", 1, 1)


def test_unexpected_character_raises_with_position() -> None:
    with pytest.raises(LexError) as excinfo:
        tokenize("int x = 1;\n  $")
    err = excinfo.value
    assert err.message == "unexpected character"
    assert (err.line, err.column, err.char) == (2, 3, "$")
    assert "line 2, column 3" in str(err)


def test_lex_error_aborts_without_partial_tokens() -> None:
    lexer = Lexer(CharacterStream("a @ b"))
    assert lexer.next_token().lexeme == "a"
    with pytest.raises(LexError):
        lexer.next_token()


def test_lex_error_is_a_syntax_error() -> None:
    with pytest.raises(SyntaxError):
        tokenize("`")


def test_end_of_input_sentinel() -> None:
    lexer = Lexer(CharacterStream("x"))
    lexer.next_token()
    for _ in range(2):
        tok = lexer.next_token()
        assert tok.kind is TokenKind.UNKNOWN
        assert tok.lexeme == ""


def test_empty_input() -> None:
    assert tokenize("") == []
    assert tokenize("  \n\t ") == []


def test_token_is_immutable() -> None:
    tok = Token(TokenKind.IDENTIFIER, "x", 1, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        tok.lexeme = "y"  # type: ignore[misc]


def test_token_repr_and_eq() -> None:
    t1 = Token(TokenKind.LITERAL, "42", 1, 2)
    t2 = Token(TokenKind.LITERAL, "42", 1, 2)
    t3 = Token(TokenKind.IDENTIFIER, "x")

    assert repr(t1) == "Token(LITERAL, '42')"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


def test_sentinel_after_literal_does_not_read_past_end() -> None:
    lexer = Lexer(CharacterStream("'a'"))
    assert lexer.next_token().kind is TokenKind.CHAR_LITERAL
    end = lexer.next_token()
    assert (end.kind, end.col, end.end_col) == (TokenKind.UNKNOWN, 4, 4)


def test_character_stream_methods() -> None:
    stream = CharacterStream("ab")
    assert stream.peek() == "a"
    assert stream.peek(1) == "b"
    assert stream.peek(5) == ""
    assert stream.next() == "a"
    assert not stream.end_of_file()
    stream.next()
    assert stream.end_of_file()
    with pytest.raises(LexError, match="unexpected end of input"):
        stream.next()


@given(st.text(max_size=80))  # type: ignore[misc]
def test_lexer_only_fails_with_lex_error(source: str) -> None:
    try:
        toks = tokenize(source)
    except LexError:
        return
    assert all(t.kind is not TokenKind.UNKNOWN for t in toks)


@given(st.from_regex(r"[a-z_][a-z0-9_]{0,10}", fullmatch=True))  # type: ignore[misc]
def test_identifier_property(word: str) -> None:
    toks = tokenize(word)
    assert len(toks) == 1
    expected = token_hashmap.get(word, TokenKind.IDENTIFIER)
    assert toks[0].kind is expected
    assert toks[0].lexeme == word


@given(st.integers(min_value=0, max_value=10**12))  # type: ignore[misc]
def test_integer_literal_property(n: int) -> None:
    assert tokenize(str(n)) == [Token(TokenKind.LITERAL, str(n), 1, 1)]
