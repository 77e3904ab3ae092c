"""
Error types raised by the QUR front end.

Classes:
    LexError: Unrecoverable tokenizer failure at a specific character.
    ParseError: A single, recoverable syntax error found by the parser.
    BuildError: Aggregate failure raised once a build recorded any ParseError.

All three derive from the builtin ``SyntaxError`` so callers may catch the
front end's failures as one family or handle each kind separately.
"""

from __future__ import annotations


class LexError(SyntaxError):
    """Raised when the lexer meets a character it cannot classify.

    Attributes:
        message (str): Short description of the failure.
        line (int): 1-based line of the offending character.
        column (int): 1-based column of the offending character.
        char (str): The offending character ("" at end of input).
    """

    def __init__(self, message: str, line: int, column: int, char: str = "") -> None:
        self.message = message
        self.line = line
        self.column = column
        self.char = char
        super().__init__(self._format())

    def _format(self) -> str:
        text = f"{self.message} at line {self.line}, column {self.column}"
        if self.char:
            text += f" ({self.char!r})"
        return text

    def __str__(self) -> str:
        return self._format()


class ParseError(SyntaxError):
    """A syntax error at one point of the token stream.

    Attributes:
        message (str): Short description of the failure.
        line (int | None): Line of the token where parsing failed, if known.
        column (int | None): Column of that token, if known.
        found (str | None): Lexeme of that token, if known.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        found: str | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.found = found
        super().__init__(self._format())

    def _format(self) -> str:
        text = self.message
        if self.line is not None and self.line >= 0:
            text += f" at line {self.line}, column {self.column}"
        if self.found is not None:
            text += f" (found {self.found!r})" if self.found else " (found end of input)"
        return text

    def __str__(self) -> str:
        return self._format()


class BuildError(ParseError):
    """Raised by ``Parser.build`` when one or more ParseErrors were recorded.

    Attributes:
        errors (list[ParseError]): Every diagnostic recorded during the build,
            in source order.
    """

    def __init__(self, message: str, errors: list[ParseError] | None = None) -> None:
        self.errors: list[ParseError] = list(errors or [])
        super().__init__(message)


__all__ = ["BuildError", "LexError", "ParseError"]
