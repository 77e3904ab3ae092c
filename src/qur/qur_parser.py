"""
QUR Language Parser

Parses QUR source tokens into a typed abstract syntax tree.

This module implements a predictive recursive-descent parser over the flat
token list produced by `qur.qur_lexer`. Expressions are parsed by precedence
climbing: each precedence level is one method, lowest precedence outermost.

Supported Constructs
--------------------
- Declarations:
    * Functions: `fn int add(int a, int b) { ... }` (return type optional, defaults to void)
    * Variables: `double x = 1.5;` (initializer optional)
    * Imports: `import std.io;` (raw tokens up to `;` joined as a path)
- Statements:
    * `if (...) stmt elif (...) stmt else stmt`
    * `while (...) { ... };` and `for (init; cond; incr) { ... };`
    * `return expr?;`, `break;`, `continue;`, `{ ... }` blocks, expression statements
- Expressions, from lowest to highest precedence:
    * assignment (`= += -= *= /= %=`, right-associative, target must be a variable)
    * `|`, `&`, `== !=`, `< > <= >=`, `+ -`, `* / %` (left-associative)
    * prefix `! - ~ ++ --` (right-associative)
    * calls `f(a, b)` and postfix `++ --`
    * literals, variables, parenthesized expressions

Error Recovery
--------------
At the top-level declaration loop and inside every block, a `ParseError` is
recorded in `Parser.diagnostics` (and logged) rather than raised. The cursor
then skips forward past the next `;`, or up to the next `}`, `fn`, `if`,
`while`, `for` or `return`, and parsing resumes. A `}` that recovery leaves
at top level is skipped like a stray `;`. When `build()` finishes
with any diagnostics it raises a single `BuildError` instead of returning
the partially built tree.

Entry Points
------------
- `Parser.build()`: Parse a whole program into a `Program` node.
- `Parser.parse_expression()`: Parse a single expression.
- `parse(source)`: Tokenize and build in one call.

Raises
------
LexError
    From `parse()` when the source cannot be tokenized.
BuildError
    When one or more syntax errors were recorded during a build.
"""

from __future__ import annotations

import logging
from typing import Callable

from qur.qur_ast import (
    AssignOp,
    BinaryOp,
    Block,
    BoolLiteral,
    Break,
    CharLiteral,
    Continue,
    DoubleLiteral,
    ExpressionNode,
    FnCall,
    For,
    Function,
    If,
    Import,
    IntLiteral,
    Node,
    Param,
    Program,
    Return,
    StringLiteral,
    UnaryOp,
    VarDecl,
    Variable,
    While,
)
from qur.qur_constants import (
    ADDITIVE_OPS,
    ASSIGNMENT_OPS,
    COMPARISON_OPS,
    DECLARATION_TYPE_KINDS,
    EQUALITY_OPS,
    LOGICAL_AND_OPS,
    LOGICAL_OR_OPS,
    MULTIPLICATIVE_OPS,
    POSTFIX_OPS,
    PRIMITIVE_TYPE_TAGS,
    RECOVERY_STOP_KINDS,
    UNARY_OPS,
    TokenKind,
    VarType,
)
from qur.qur_errors import BuildError, ParseError
from qur.qur_lexer import Token, tokenize

logger = logging.getLogger(__name__)


def resolve_type_tag(kind: TokenKind) -> VarType:
    """Maps a token kind in type position to its type tag, or INFERRED."""
    return PRIMITIVE_TYPE_TAGS.get(kind, VarType.INFERRED)


class Parser:
    """
    QUR Parser Class

    Transforms a list of lexical tokens into a `Program` node. A parser
    instance is single-use: it owns one cursor over one token list.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, without an end-of-input token.
    position : int
        Current index into the token stream.
    diagnostics : list[ParseError]
        Errors recorded by panic-mode recovery during the last build.
    declarations : list[Node]
        Top-level declarations that parsed cleanly during the last build.
        Kept for inspection only; `build()` does not return them on failure.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        self.position: int = 0
        self.diagnostics: list[ParseError] = []
        self.declarations: list[Node] = []

    # Cursor helpers

    def _end_token(self) -> Token:
        """Synthesizes the end-of-input token, placed just after the last token."""
        if self.tokens:
            last = self.tokens[-1]
            end_col = last.end_col or last.col + len(last.lexeme)
            return Token(TokenKind.UNKNOWN, "", last.line, end_col, end_col=end_col)
        return Token(TokenKind.UNKNOWN, "", 1, 1, end_col=1)

    def is_at_end(self) -> bool:
        """Checks whether every token has been consumed.

        Returns:
            bool: True once the cursor is past the last token.
        """
        return self.position >= len(self.tokens)

    def current(self) -> Token:
        """Returns the token under the cursor, or the end-of-input token."""
        if self.is_at_end():
            return self._end_token()
        return self.tokens[self.position]

    def peek(self, offset: int = 1) -> Token:
        """Looks ahead without consuming.

        Args:
            offset (int, optional): Distance from the cursor. Defaults to 1.

        Returns:
            Token: The token at that distance, or the end-of-input token.
        """
        index = self.position + offset
        return self.tokens[index] if index < len(self.tokens) else self._end_token()

    def previous(self) -> Token:
        """Returns the most recently consumed token (the first one before any)."""
        if self.position == 0:
            return self.tokens[0] if self.tokens else self._end_token()
        return self.tokens[self.position - 1]

    def advance(self) -> Token:
        """Consumes the current token and returns it."""
        if not self.is_at_end():
            self.position += 1
        return self.previous()

    def check(self, *kinds: TokenKind) -> bool:
        """Tests the current token's kind without consuming it.

        Args:
            *kinds (TokenKind): Acceptable kinds.

        Returns:
            bool: True if the current token has one of ``kinds``. Always False at end of input.
        """
        return not self.is_at_end() and self.current().kind in kinds

    def match(self, *kinds: TokenKind) -> Token | None:
        """Consumes the current token if it has one of ``kinds``.

        Returns:
            Token | None: The consumed token, or None when nothing matched.
        """
        if self.check(*kinds):
            return self.advance()
        return None

    def consume(self, kind: TokenKind, message: str) -> Token:
        """Consumes a token that must be of ``kind``.

        Args:
            kind (TokenKind): The required kind.
            message (str): Error message used when the token is missing.

        Returns:
            Token: The consumed token.

        Raises:
            ParseError: If the current token is of another kind.
        """
        if self.check(kind):
            return self.advance()
        raise self.error(message)

    def error(self, message: str, tok: Token | None = None) -> ParseError:
        """Builds a ParseError positioned at ``tok`` (default: the current token)."""
        tok = tok or self.current()
        return ParseError(message, tok.line, tok.col, tok.lexeme)

    # Recovery

    def report(self, err: ParseError) -> None:
        """Records ``err`` as a diagnostic instead of raising it."""
        self.diagnostics.append(err)
        logger.debug("recovered from parse error: %s", err)

    def synchronize(self, start: int) -> None:
        """Skips to the next statement boundary after an error.

        Stops after a consumed `;`, or before a token that starts a new
        declaration or closes a block. Always moves past at least one token
        when the failed parse consumed nothing.
        """
        if self.position == start and not self.is_at_end():
            self.advance()
            if self.previous().kind is TokenKind.SEMICOLON:
                return
        while not self.is_at_end():
            kind = self.current().kind
            if kind is TokenKind.SEMICOLON:
                self.advance()
                return
            if kind in RECOVERY_STOP_KINDS:
                return
            self.advance()

    def _parse_recovering(self, out: list[Node]) -> None:
        """Parses one declaration into ``out``, or records the error and resynchronizes."""
        start = self.position
        try:
            out.append(self.parse_declaration())
        except ParseError as err:
            self.report(err)
            self.synchronize(start)

    # Program

    def build(self) -> Program:
        """Parse the whole token list into a Program.

        Raises:
            BuildError: If the token list is empty, or if any syntax error
                was recorded. ``errors`` on the exception (and
                ``self.diagnostics``) lists each of them.
        """
        if not self.tokens:
            raise BuildError("no tokens to parse - input may be empty")

        logger.debug("building AST from %d tokens", len(self.tokens))
        self.position = 0
        self.diagnostics = []
        self.declarations = []

        while not self.is_at_end():
            # stray separators, including a `}` left behind by recovery
            if self.match(TokenKind.SEMICOLON, TokenKind.RBRACE):
                continue
            self._parse_recovering(self.declarations)

        if self.diagnostics:
            raise BuildError(
                f"failed to build AST due to {len(self.diagnostics)} parse error(s)",
                self.diagnostics,
            )

        first = self.tokens[0]
        logger.debug("built AST with %d declarations", len(self.declarations))
        return Program(tuple(self.declarations), line=first.line, col=first.col)

    # Declarations

    def parse_declaration(self) -> Node:
        """Parses a function, import or variable declaration, else a statement.

        Returns:
            Node: The parsed declaration or statement.

        Raises:
            ParseError: On the first syntax error in it.
        """
        tok = self.current()
        if tok.kind is TokenKind.FUNCTION:
            self.advance()
            return self.parse_function(tok)
        if tok.kind is TokenKind.IMPORT:
            self.advance()
            return self.parse_import(tok)
        if self.check(*DECLARATION_TYPE_KINDS):
            return self.parse_var_declaration()
        return self.parse_statement()

    def parse_function(self, fn_tok: Token) -> Function:
        """Parse `fn type? name(params) { ... }` after the `fn` keyword."""
        return_type = VarType.VOID
        if self.check(*PRIMITIVE_TYPE_TAGS):
            return_type = resolve_type_tag(self.advance().kind)
        elif self.check(TokenKind.IDENTIFIER) and self.peek().kind is TokenKind.IDENTIFIER:
            # user type name, left for a later pass
            return_type = resolve_type_tag(self.advance().kind)

        name_tok = self.consume(TokenKind.IDENTIFIER, "expected function name")
        self.consume(TokenKind.LPAREN, "expected '(' after function name")

        params: list[Param] = []
        if not self.check(TokenKind.RPAREN):
            while True:
                params.append(self.parse_param())
                if not self.match(TokenKind.COMMA):
                    break
        self.consume(TokenKind.RPAREN, "expected ')' after parameters")

        body = self.parse_block()
        return Function(
            name_tok.lexeme,
            return_type,
            tuple(params),
            body,
            line=fn_tok.line,
            col=fn_tok.col,
        )

    def parse_param(self) -> Param:
        """Parses one `type name` parameter.

        A user type name in type position resolves to ``VarType.INFERRED``.
        """
        type_tok = self.match(*DECLARATION_TYPE_KINDS, TokenKind.IDENTIFIER)
        if type_tok is None:
            raise self.error("expected parameter type")
        name_tok = self.consume(TokenKind.IDENTIFIER, "expected parameter name")
        return Param(
            resolve_type_tag(type_tok.kind),
            name_tok.lexeme,
            line=type_tok.line,
            col=type_tok.col,
        )

    def parse_var_declaration(self) -> VarDecl:
        """Parses `type name (= expr)?;` with the cursor on the type keyword."""
        type_tok = self.advance()
        name_tok = self.consume(TokenKind.IDENTIFIER, "expected variable name")
        initializer = None
        if self.match(TokenKind.ASSIGN):
            initializer = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "expected ';' after variable declaration")
        return VarDecl(
            name_tok.lexeme,
            resolve_type_tag(type_tok.kind),
            initializer,
            line=type_tok.line,
            col=type_tok.col,
        )

    def parse_import(self, import_tok: Token) -> Import:
        """Parses the path of an import after the `import` keyword.

        Args:
            import_tok (Token): The consumed keyword, used for the node position.

        Returns:
            Import: The lexemes up to `;` joined into one path.
        """
        parts: list[str] = []
        while not self.check(TokenKind.SEMICOLON) and not self.is_at_end():
            parts.append(self.advance().lexeme)
        if not parts:
            raise self.error("expected import path")
        self.consume(TokenKind.SEMICOLON, "expected ';' after import")
        return Import("".join(parts), line=import_tok.line, col=import_tok.col)

    # Statements

    def parse_statement(self) -> Node:
        """Parses one statement.

        Blocks and keyword statements dispatch on the current token; anything
        else is an expression statement terminated by `;`.
        """
        tok = self.current()
        kind = tok.kind

        if kind is TokenKind.LBRACE:
            return self.parse_block()

        if kind in (
            TokenKind.IF,
            TokenKind.WHILE,
            TokenKind.FOR,
            TokenKind.RETURN,
            TokenKind.BREAK,
            TokenKind.CONTINUE,
        ):
            self.advance()
            if kind is TokenKind.IF:
                return self.parse_if(tok)
            if kind is TokenKind.WHILE:
                return self.parse_while(tok)
            if kind is TokenKind.FOR:
                return self.parse_for(tok)
            if kind is TokenKind.RETURN:
                return self.parse_return(tok)
            self.consume(TokenKind.SEMICOLON, f"expected ';' after {tok.lexeme}")
            if kind is TokenKind.BREAK:
                return Break(line=tok.line, col=tok.col)
            return Continue(line=tok.line, col=tok.col)

        expr = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "expected ';' after expression")
        return expr

    def parse_if(self, if_tok: Token) -> If:
        """Parse an `if`, or an `elif` link of an if chain."""
        keyword = if_tok.lexeme
        self.consume(TokenKind.LPAREN, f"expected '(' after '{keyword}'")
        condition = self.parse_expression()
        self.consume(TokenKind.RPAREN, "expected ')' after condition")
        then_branch = self.parse_statement()

        else_branch: Node | None = None
        elif_tok = self.match(TokenKind.ELSEIF)
        if elif_tok is not None:
            else_branch = self.parse_if(elif_tok)
        elif self.match(TokenKind.ELSE):
            else_branch = self.parse_statement()

        return If(condition, then_branch, else_branch, line=if_tok.line, col=if_tok.col)

    def parse_while(self, while_tok: Token) -> While:
        """Parses `(cond) { ... };` after the `while` keyword."""
        self.consume(TokenKind.LPAREN, "expected '(' after 'while'")
        condition = self.parse_expression()
        self.consume(TokenKind.RPAREN, "expected ')' after condition")
        body = self.parse_block()
        self.consume(TokenKind.SEMICOLON, "expected ';' after while body")
        return While(condition, body, line=while_tok.line, col=while_tok.col)

    def parse_for(self, for_tok: Token) -> For:
        """Parses `(init; cond; incr) { ... };` after the `for` keyword.

        Each clause may be empty. The initializer is either a variable
        declaration or an expression.
        """
        self.consume(TokenKind.LPAREN, "expected '(' after 'for'")

        init: Node | None
        if self.match(TokenKind.SEMICOLON):
            init = None
        elif self.check(*DECLARATION_TYPE_KINDS):
            # consumes its own ';'
            init = self.parse_var_declaration()
        else:
            init = self.parse_expression()
            self.consume(TokenKind.SEMICOLON, "expected ';' after for initializer")

        condition = None
        if not self.check(TokenKind.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "expected ';' after for condition")

        increment = None
        if not self.check(TokenKind.RPAREN):
            increment = self.parse_expression()
        self.consume(TokenKind.RPAREN, "expected ')' after for clauses")

        body = self.parse_block()
        self.consume(TokenKind.SEMICOLON, "expected ';' after for body")
        return For(init, condition, increment, body, line=for_tok.line, col=for_tok.col)

    def parse_return(self, return_tok: Token) -> Return:
        """Parses `expr?;` after the `return` keyword."""
        value = None
        if not self.check(TokenKind.SEMICOLON):
            value = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "expected ';' after return statement")
        return Return(value, line=return_tok.line, col=return_tok.col)

    def parse_block(self) -> Block:
        """Parse a `{}`-enclosed block, recovering from errors inside it."""
        lbrace = self.consume(TokenKind.LBRACE, "expected '{'")

        statements: list[Node] = []
        while not self.check(TokenKind.RBRACE) and not self.is_at_end():
            if self.match(TokenKind.SEMICOLON):
                continue
            self._parse_recovering(statements)

        self.consume(TokenKind.RBRACE, "expected '}'")
        return Block(tuple(statements), line=lbrace.line, col=lbrace.col)

    # Expressions

    def parse_expression(self) -> ExpressionNode:
        """Parses a full expression, starting at the lowest precedence.

        Returns:
            ExpressionNode: The root of the expression tree.

        Raises:
            ParseError: If no expression starts at the cursor.
        """
        return self.parse_assignment()

    def parse_assignment(self) -> ExpressionNode:
        """Parses a right-associative assignment, or falls through to `|`.

        Raises:
            ParseError: If the left side of an assignment operator is not a
                variable; positioned at the operator.
        """
        expr = self.parse_logical_or()

        op_tok = self.match(*ASSIGNMENT_OPS)
        if op_tok is None:
            return expr

        value = self.parse_assignment()
        if not isinstance(expr, Variable):
            raise self.error("invalid assignment target", op_tok)
        return AssignOp(op_tok.lexeme, expr, value, line=expr.line, col=expr.col)

    def _parse_binary_level(
        self,
        operators: frozenset[TokenKind],
        operand: Callable[[], ExpressionNode],
    ) -> ExpressionNode:
        """Parse one left-associative precedence level."""
        expr = operand()
        while self.check(*operators):
            op_tok = self.advance()
            right = operand()
            expr = BinaryOp(op_tok.lexeme, expr, right, line=expr.line, col=expr.col)
        return expr

    def parse_logical_or(self) -> ExpressionNode:
        return self._parse_binary_level(LOGICAL_OR_OPS, self.parse_logical_and)

    def parse_logical_and(self) -> ExpressionNode:
        return self._parse_binary_level(LOGICAL_AND_OPS, self.parse_equality)

    def parse_equality(self) -> ExpressionNode:
        return self._parse_binary_level(EQUALITY_OPS, self.parse_comparison)

    def parse_comparison(self) -> ExpressionNode:
        return self._parse_binary_level(COMPARISON_OPS, self.parse_additive)

    def parse_additive(self) -> ExpressionNode:
        return self._parse_binary_level(ADDITIVE_OPS, self.parse_multiplicative)

    def parse_multiplicative(self) -> ExpressionNode:
        return self._parse_binary_level(MULTIPLICATIVE_OPS, self.parse_unary)

    def parse_unary(self) -> ExpressionNode:
        """Parses prefix `! - ~ ++ --`, right-associative."""
        op_tok = self.match(*UNARY_OPS)
        if op_tok is None:
            return self.parse_call()
        operand = self.parse_unary()
        return UnaryOp(op_tok.lexeme, operand, line=op_tok.line, col=op_tok.col)

    def parse_call(self) -> ExpressionNode:
        """Parses a primary, an optional call on a variable, then postfix `++`/`--`."""
        expr = self.parse_primary()

        if isinstance(expr, Variable) and self.match(TokenKind.LPAREN):
            args: list[ExpressionNode] = []
            if not self.check(TokenKind.RPAREN):
                while True:
                    args.append(self.parse_expression())
                    if not self.match(TokenKind.COMMA):
                        break
            self.consume(TokenKind.RPAREN, "expected ')' after function arguments")
            expr = FnCall(expr.name, tuple(args), line=expr.line, col=expr.col)

        while self.check(*POSTFIX_OPS):
            op_tok = self.advance()
            expr = UnaryOp(op_tok.lexeme, expr, postfix=True, line=expr.line, col=expr.col)

        return expr

    def parse_primary(self) -> ExpressionNode:
        """Parses a literal, a variable or a parenthesized expression.

        Raises:
            ParseError: ``expected expression`` on any other token.
        """
        tok = self.current()

        if self.match(TokenKind.STRING_LITERAL):
            return StringLiteral.from_lexeme(tok.lexeme, line=tok.line, col=tok.col)

        if self.match(TokenKind.TRUE, TokenKind.FALSE):
            return BoolLiteral(tok.kind is TokenKind.TRUE, line=tok.line, col=tok.col)

        if self.match(TokenKind.LITERAL):
            if "." in tok.lexeme:
                return DoubleLiteral(float(tok.lexeme), line=tok.line, col=tok.col)
            return IntLiteral(int(tok.lexeme), line=tok.line, col=tok.col)

        if self.match(TokenKind.CHAR_LITERAL):
            return CharLiteral.from_lexeme(tok.lexeme, line=tok.line, col=tok.col)

        if self.match(TokenKind.IDENTIFIER):
            return Variable(tok.lexeme, line=tok.line, col=tok.col)

        if self.match(TokenKind.LPAREN):
            expr = self.parse_expression()
            self.consume(TokenKind.RPAREN, "expected ')' after expression")
            return expr

        raise self.error("expected expression", tok)


def parse(source: str) -> Program:
    """Tokenize ``source`` and build its Program.

    Raises:
        LexError: If the source cannot be tokenized.
        BuildError: If any syntax error was found.
    """
    return Parser(tokenize(source)).build()


__all__ = ["Parser", "parse", "resolve_type_tag"]
