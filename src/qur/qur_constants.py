"""
Token taxonomy and shared constants for the QUR front end.

This module holds the single authoritative table that ties every token kind to
its canonical source text. Both lookup directions used by the lexer and parser
are derived from that table once, at import time, and exposed read-only.

Exports:
    - TokenKind: Closed enumeration of every token kind the lexer can produce.
    - VarType: Syntactic type tags attached to declarations.
    - CANONICAL_TOKEN_MAP: kind -> canonical text (read-only).
    - token_hashmap: canonical text -> kind (read-only).
    - operator_tokens: text -> kind restricted to punctuation and operators.
    - kind_to_text / text_to_kind: Lookup helpers over the two maps.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class TokenKind(Enum):
    """Every token kind produced by the QUR lexer."""

    # Punctuation
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACK = "LBRACK"
    RBRACK = "RBRACK"
    SEMICOLON = "SEMICOLON"
    COLON = "COLON"
    COMMA = "COMMA"
    DOT = "DOT"

    # Control keywords
    RETURN = "RETURN"
    IF = "IF"
    ELSEIF = "ELSEIF"
    ELSE = "ELSE"
    FOR = "FOR"
    WHILE = "WHILE"
    CONTINUE = "CONTINUE"
    BREAK = "BREAK"
    FUNCTION = "FUNCTION"
    IMPORT = "IMPORT"

    # Type keywords
    VOID = "VOID"
    INT = "INT"
    DOUBLE = "DOUBLE"
    BOOLEAN = "BOOLEAN"
    CHAR = "CHAR"
    STRING = "STRING"
    LIST = "LIST"
    TUPLE = "TUPLE"
    DICT = "DICT"
    TYPE = "TYPE"

    TRUE = "TRUE"
    FALSE = "FALSE"

    # Operators
    ASSIGN = "ASSIGN"
    ASSIGN_ADD = "ASSIGN_ADD"
    ASSIGN_SUB = "ASSIGN_SUB"
    ASSIGN_MUL = "ASSIGN_MUL"
    ASSIGN_DIV = "ASSIGN_DIV"
    ASSIGN_MOD = "ASSIGN_MOD"
    SETEACH = "SETEACH"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    MOD = "MOD"
    INCREMENT = "INCREMENT"
    DECREMENT = "DECREMENT"
    LESSTHAN = "LESSTHAN"
    MORETHAN = "MORETHAN"
    LESSTHANEQUAL = "LESSTHANEQUAL"
    MORETHANEQUAL = "MORETHANEQUAL"
    EQUAL = "EQUAL"
    NOTEQUAL = "NOTEQUAL"
    NOT = "NOT"
    AND = "AND"
    OR = "OR"
    INVERT = "INVERT"

    # No canonical text
    IDENTIFIER = "IDENTIFIER"
    LITERAL = "LITERAL"
    STRING_LITERAL = "STRING_LITERAL"
    CHAR_LITERAL = "CHAR_LITERAL"
    UNKNOWN = "UNKNOWN"  # end-of-input sentinel


class VarType(Enum):
    """Syntactic type tag of a declaration.

    ``INFERRED`` means the type is unknown at parse time and is left for a
    later pass; it is never an error on its own.
    """

    INT = "int"
    DOUBLE = "double"
    STRING = "string"
    CHAR = "char"
    BOOLEAN = "boolean"
    VOID = "void"
    INFERRED = "inferred"


_TOKEN_TABLE: tuple[tuple[TokenKind, str], ...] = (
    (TokenKind.LBRACE, "{"),
    (TokenKind.RBRACE, "}"),
    (TokenKind.LPAREN, "("),
    (TokenKind.RPAREN, ")"),
    (TokenKind.LBRACK, "["),
    (TokenKind.RBRACK, "]"),
    (TokenKind.SEMICOLON, ";"),
    (TokenKind.COLON, ":"),
    (TokenKind.COMMA, ","),
    (TokenKind.DOT, "."),
    (TokenKind.RETURN, "return"),
    (TokenKind.IF, "if"),
    (TokenKind.ELSEIF, "elif"),
    (TokenKind.ELSE, "else"),
    (TokenKind.FOR, "for"),
    (TokenKind.WHILE, "while"),
    (TokenKind.CONTINUE, "continue"),
    (TokenKind.BREAK, "break"),
    (TokenKind.FUNCTION, "fn"),
    (TokenKind.IMPORT, "import"),
    (TokenKind.VOID, "void"),
    (TokenKind.INT, "int"),
    (TokenKind.DOUBLE, "double"),
    (TokenKind.BOOLEAN, "boolean"),
    (TokenKind.CHAR, "char"),
    (TokenKind.STRING, "string"),
    (TokenKind.LIST, "list"),
    (TokenKind.TUPLE, "tuple"),
    (TokenKind.DICT, "dict"),
    (TokenKind.TYPE, "type"),
    (TokenKind.TRUE, "true"),
    (TokenKind.FALSE, "false"),
    (TokenKind.ASSIGN, "="),
    (TokenKind.ASSIGN_ADD, "+="),
    (TokenKind.ASSIGN_SUB, "-="),
    (TokenKind.ASSIGN_MUL, "*="),
    (TokenKind.ASSIGN_DIV, "/="),
    (TokenKind.ASSIGN_MOD, "%="),
    (TokenKind.SETEACH, "->"),
    (TokenKind.ADD, "+"),
    (TokenKind.SUB, "-"),
    (TokenKind.MUL, "*"),
    (TokenKind.DIV, "/"),
    (TokenKind.MOD, "%"),
    (TokenKind.INCREMENT, "++"),
    (TokenKind.DECREMENT, "--"),
    (TokenKind.LESSTHAN, "<"),
    (TokenKind.MORETHAN, ">"),
    (TokenKind.LESSTHANEQUAL, "<="),
    (TokenKind.MORETHANEQUAL, ">="),
    (TokenKind.EQUAL, "=="),
    (TokenKind.NOTEQUAL, "!="),
    (TokenKind.NOT, "!"),
    (TokenKind.AND, "&"),
    (TokenKind.OR, "|"),
    (TokenKind.INVERT, "~"),
)

CANONICAL_TOKEN_MAP: Mapping[TokenKind, str] = MappingProxyType(dict(_TOKEN_TABLE))
token_hashmap: Mapping[str, TokenKind] = MappingProxyType(
    {text: kind for kind, text in _TOKEN_TABLE}
)

# Punctuation/operator subset, used for longest-match scanning
operator_tokens: Mapping[str, TokenKind] = MappingProxyType(
    {text: kind for text, kind in token_hashmap.items() if not text[0].isalpha()}
)
MAX_OPERATOR_LENGTH: int = max(len(text) for text in operator_tokens)

if len(CANONICAL_TOKEN_MAP) != len(token_hashmap):  # pragma: no cover
    raise RuntimeError("token table must map kinds and text one-to-one")


def kind_to_text(kind: TokenKind) -> str:
    """Return the canonical source text of ``kind``.

    Raises:
        KeyError: For kinds with no fixed spelling (identifiers, literals and
            the end-of-input sentinel).
    """
    return CANONICAL_TOKEN_MAP[kind]


def text_to_kind(text: str) -> TokenKind:
    """Return the kind spelled by ``text``, defaulting to ``IDENTIFIER``."""
    return token_hashmap.get(text, TokenKind.IDENTIFIER)


PRIMITIVE_TYPE_TAGS: Mapping[TokenKind, VarType] = MappingProxyType(
    {
        TokenKind.INT: VarType.INT,
        TokenKind.DOUBLE: VarType.DOUBLE,
        TokenKind.CHAR: VarType.CHAR,
        TokenKind.BOOLEAN: VarType.BOOLEAN,
        TokenKind.STRING: VarType.STRING,
        TokenKind.VOID: VarType.VOID,
    }
)

# Type keywords that may open a variable declaration
DECLARATION_TYPE_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.INT,
        TokenKind.DOUBLE,
        TokenKind.CHAR,
        TokenKind.BOOLEAN,
        TokenKind.STRING,
    }
)

ASSIGNMENT_OPS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.ASSIGN,
        TokenKind.ASSIGN_ADD,
        TokenKind.ASSIGN_SUB,
        TokenKind.ASSIGN_MUL,
        TokenKind.ASSIGN_DIV,
        TokenKind.ASSIGN_MOD,
    }
)
LOGICAL_OR_OPS: frozenset[TokenKind] = frozenset({TokenKind.OR})
LOGICAL_AND_OPS: frozenset[TokenKind] = frozenset({TokenKind.AND})
EQUALITY_OPS: frozenset[TokenKind] = frozenset({TokenKind.EQUAL, TokenKind.NOTEQUAL})
COMPARISON_OPS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.LESSTHAN,
        TokenKind.MORETHAN,
        TokenKind.LESSTHANEQUAL,
        TokenKind.MORETHANEQUAL,
    }
)
ADDITIVE_OPS: frozenset[TokenKind] = frozenset({TokenKind.ADD, TokenKind.SUB})
MULTIPLICATIVE_OPS: frozenset[TokenKind] = frozenset(
    {TokenKind.MUL, TokenKind.DIV, TokenKind.MOD}
)
UNARY_OPS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.NOT,
        TokenKind.SUB,
        TokenKind.INVERT,
        TokenKind.INCREMENT,
        TokenKind.DECREMENT,
    }
)
POSTFIX_OPS: frozenset[TokenKind] = frozenset(
    {TokenKind.INCREMENT, TokenKind.DECREMENT}
)

# Panic-mode recovery stops before any of these
RECOVERY_STOP_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.RBRACE,
        TokenKind.FUNCTION,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.FOR,
        TokenKind.RETURN,
    }
)

ESCAPE_SEQUENCES: Mapping[str, str] = MappingProxyType(
    {
        "n": "\n",
        "t": "\t",
        "r": "\r",
        "0": "\0",
        "\\": "\\",
        "'": "'",
        '"': '"',
    }
)

INDENT_STEP: int = 2

__all__ = [
    "ADDITIVE_OPS",
    "ASSIGNMENT_OPS",
    "CANONICAL_TOKEN_MAP",
    "COMPARISON_OPS",
    "DECLARATION_TYPE_KINDS",
    "EQUALITY_OPS",
    "ESCAPE_SEQUENCES",
    "INDENT_STEP",
    "LOGICAL_AND_OPS",
    "LOGICAL_OR_OPS",
    "MAX_OPERATOR_LENGTH",
    "MULTIPLICATIVE_OPS",
    "POSTFIX_OPS",
    "PRIMITIVE_TYPE_TAGS",
    "RECOVERY_STOP_KINDS",
    "TokenKind",
    "UNARY_OPS",
    "VarType",
    "kind_to_text",
    "operator_tokens",
    "text_to_kind",
    "token_hashmap",
]
