"""
Lexical analyzer for the QUR programming language.

This module converts raw source text into an ordered, finite sequence of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Immutable lexical unit with kind, lexeme, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace and single-line comments (`//`)
    - Longest-match recognition of operators and punctuation
    - Recognizes:
        * Identifiers and keywords
        * Numeric literals (a single `LITERAL` kind for ints and doubles)
        * String and character literals (escapes are kept raw)
        * Operators and punctuation

Raises:
    LexError: On any character that cannot start a token, and on unterminated
        or malformed string/character literals. Tokenizing stops at the first
        LexError.

Example:
    >>> tokenize("int x = 1;")[0]
    Token(INT, 'int')

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import logging
from dataclasses import dataclass, field, replace

from qur.qur_constants import (
    MAX_OPERATOR_LENGTH,
    TokenKind,
    operator_tokens,
    text_to_kind,
)
from qur.qur_errors import LexError

logger = logging.getLogger(__name__)


def is_digit(ch: str) -> bool:
    """ASCII-only digit test; ``str.isdigit`` also accepts characters like '²'."""
    return "0" <= ch <= "9"


class CharacterStream:
    """
    Reads characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Callers check `end_of_file()` or `peek()` first; reading past the end
        is a contract violation of the caller, not a source error.

        Returns:
            str: The consumed character.

        Raises:
            LexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise LexError("unexpected end of input", self.line, self.column)
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at ``offset`` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind (TokenKind): The token's kind.
        lexeme (str): The raw source text (escape sequences not decoded).
        line (int): 1-based line where the token starts.
        col (int): 1-based column where the token starts.
        end_col (int): Column just past the token's last character, quotes
            included. Not part of equality. 0 when unknown.
    """

    kind: TokenKind
    lexeme: str
    line: int = 0
    col: int = 0
    end_col: int = field(default=0, compare=False, repr=False)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r})"


class Lexer:
    """Lexical analyzer for the QUR language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        """Looks ahead in the stream.

        Args:
            offset (int, optional): Number of characters to look ahead. Defaults to 0.

        Returns:
            str: The character at that offset, or "" past the end.
        """
        return self.stream.peek(offset)

    def advance(self) -> str:
        """Consumes and returns the next character."""
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips whitespace and `//` comments."""
        while not self.stream.end_of_file():
            if self.peek().isspace():
                self.advance()
            elif self.peek() == "/" and self.peek(1) == "/":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        """Advances to the end of the current line."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator at the current position.

        Returns:
            Token | None: A Token if an operator matches, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in operator_tokens:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(operator_tokens[max_token], max_token, line, col)

        return None

    def read_word(self, line: int, col: int) -> Token:
        """Reads an identifier or keyword.

        Args:
            line (int): Line where the word starts.
            col (int): Column where the word starts.

        Returns:
            Token: A keyword token if the word is reserved, else ``IDENTIFIER``.
        """
        word = ""
        while not self.stream.end_of_file() and (
            self.peek().isalnum() or self.peek() == "_"
        ):
            word += self.advance()
        return Token(text_to_kind(word), word, line, col)

    def read_number(self, line: int, col: int) -> Token:
        """Reads an integer or decimal literal as a single ``LITERAL`` token."""
        # A second '.' ends the literal and is lexed on its own
        num = ""
        has_dot = False
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch == ".":
                if has_dot:
                    break
                has_dot = True
            elif not is_digit(ch):
                break
            num += self.advance()
        return Token(TokenKind.LITERAL, num, line, col)

    def read_string(self, line: int, col: int) -> Token:
        """Reads a double-quoted string, keeping escapes raw.

        Returns:
            Token: A ``STRING_LITERAL`` whose lexeme excludes the quotes.

        Raises:
            LexError: If a newline or the end of input comes before the closing quote.
        """
        self.advance()  # opening quote
        val = ""
        while not self.stream.end_of_file() and self.peek() != "\n":
            ch = self.peek()
            if ch == "\\":
                val += self.advance()
                if self.stream.end_of_file() or self.peek() == "\n":
                    break
                val += self.advance()
            elif ch == '"':
                self.advance()
                return Token(TokenKind.STRING_LITERAL, val, line, col)
            else:
                val += self.advance()
        raise LexError("unterminated string", line, col, '"')

    def read_char(self, line: int, col: int) -> Token:
        """Reads a single-quoted character, optionally one escape sequence.

        Returns:
            Token: A ``CHAR_LITERAL`` whose lexeme excludes the quotes.

        Raises:
            LexError: If the literal is empty, unterminated, or longer than one character.
        """
        self.advance()  # opening quote
        ch = self.peek()
        if ch == "'":
            raise LexError("empty character literal", line, col, "'")
        if ch in ("", "\n"):
            raise LexError("unterminated character literal", line, col, "'")
        val = self.advance()
        if val == "\\":
            if self.peek() in ("", "\n"):
                raise LexError("unterminated character literal", line, col, "'")
            val += self.advance()
        if self.peek() in ("", "\n"):
            raise LexError("unterminated character literal", line, col, "'")
        if self.peek() != "'":
            raise LexError(
                "character literal holds more than one character",
                self.stream.line,
                self.stream.column,
                self.peek(),
            )
        self.advance()
        return Token(TokenKind.CHAR_LITERAL, val, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token, or the ``UNKNOWN`` end-of-input sentinel
            (empty lexeme) once the source is exhausted.

        Raises:
            LexError: If a character cannot start any token, or a string or
                character literal is malformed.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token(TokenKind.UNKNOWN, "", line, col, end_col=col)

        token = self.scan_token(line, col)
        # tokens never span lines, so the stream column is the end column
        return replace(token, end_col=self.stream.column)

    def scan_token(self, line: int, col: int) -> Token:
        """Dispatches on the first character of a token starting at ``line``/``col``."""
        ch = self.peek()

        if ch.isalpha() or ch == "_":
            return self.read_word(line, col)

        if is_digit(ch):
            return self.read_number(line, col)

        if ch == '"':
            return self.read_string(line, col)

        if ch == "'":
            return self.read_char(line, col)

        token = self.match_operator()
        if token:
            return token

        raise LexError("unexpected character", line, col, ch)


def tokenize(source: str) -> list[Token]:
    """Tokenizes ``source`` eagerly.

    The returned list does not include the end-of-input sentinel; the parser
    synthesizes one when reading past the last token.

    Raises:
        LexError: On the first character that cannot be tokenized.
    """
    lexer = Lexer(CharacterStream(source))
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        if tok.kind is TokenKind.UNKNOWN:
            break
        tokens.append(tok)
    logger.debug("tokenized %d tokens", len(tokens))
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
