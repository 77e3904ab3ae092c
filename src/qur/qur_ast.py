"""
Defines the abstract syntax tree (AST) node structure for the QUR programming language.

Nodes form a closed set of frozen dataclasses grouped into three categories:

Expressions:
    IntLiteral, DoubleLiteral, CharLiteral, BoolLiteral, StringLiteral,
    Variable, UnaryOp, BinaryOp, AssignOp, FnCall

Statements:
    If, While, For, Return, Break, Continue, Import, Block

Declarations:
    Function (with Param), VarDecl

and the Program root. Each class carries a fixed ``kind`` tag. Child
sequences are tuples and no node refers back to its parent, so a tree built
bottom-up by the parser is immutable and acyclic.

Every node also records the ``line``/``col`` of its first token. Positions
are excluded from equality so tests can compare trees structurally.

Rendering:
    render_tree(node): Indented multi-line rendering, one line per node.
    describe(node): One-line summary of a single node.

Both dispatch over the closed node set in one place and raise ``TypeError``
for anything else.

Example:
    >>> node = BinaryOp("+", IntLiteral(1), IntLiteral(2))
    >>> print(render_tree(node))
    BinaryOp(+)
      int(1)
      int(2)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from qur.qur_constants import ESCAPE_SEQUENCES, INDENT_STEP, VarType


class NodeKind(Enum):
    INT = "int"
    DOUBLE = "double"
    CHAR = "char"
    BOOL = "bool"
    STRING = "string"
    VARIABLE = "variable"
    UNARY_OP = "unary_op"
    BINARY_OP = "binary_op"
    ASSIGN_OP = "assign_op"
    FN_CALL = "fn_call"
    IF = "if"
    WHILE = "while"
    FOR = "for"
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"
    IMPORT = "import"
    BLOCK = "block"
    FUNCTION = "function"
    PARAM = "param"
    VAR_DECL = "var_decl"
    PROGRAM = "program"


class NodeCategory(Enum):
    EXPRESSION = "expression"
    STATEMENT = "statement"
    DECLARATION = "declaration"
    PROGRAM = "program"


def decode_escapes(raw: str) -> str:
    """Decodes backslash escapes in a raw string or char lexeme.

    Known escapes are ``\\n \\t \\r \\0 \\\\ \\' \\"``; any other escaped
    character stands for itself.
    """
    out: list[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and i + 1 < len(raw):
            nxt = raw[i + 1]
            out.append(ESCAPE_SEQUENCES.get(nxt, nxt))
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


@dataclass(frozen=True)
class Node:
    """Base of every AST node."""

    kind: ClassVar[NodeKind]
    category: ClassVar[NodeCategory]

    line: int = field(default=0, compare=False, repr=False, kw_only=True)
    col: int = field(default=0, compare=False, repr=False, kw_only=True)

    def describe(self) -> str:
        return describe(self)

    def render(self, indent: int = 0) -> str:
        return render_tree(self, indent)


@dataclass(frozen=True)
class ExpressionNode(Node):
    category = NodeCategory.EXPRESSION


@dataclass(frozen=True)
class StatementNode(Node):
    category = NodeCategory.STATEMENT


@dataclass(frozen=True)
class DeclarationNode(Node):
    category = NodeCategory.DECLARATION


# Expressions


@dataclass(frozen=True)
class IntLiteral(ExpressionNode):
    kind = NodeKind.INT
    value: int


@dataclass(frozen=True)
class DoubleLiteral(ExpressionNode):
    kind = NodeKind.DOUBLE
    value: float


@dataclass(frozen=True)
class CharLiteral(ExpressionNode):
    kind = NodeKind.CHAR
    value: str

    @classmethod
    def from_lexeme(cls, raw: str, line: int = 0, col: int = 0) -> CharLiteral:
        return cls(decode_escapes(raw), line=line, col=col)


@dataclass(frozen=True)
class BoolLiteral(ExpressionNode):
    kind = NodeKind.BOOL
    value: bool


@dataclass(frozen=True)
class StringLiteral(ExpressionNode):
    kind = NodeKind.STRING
    value: str

    @classmethod
    def from_lexeme(cls, raw: str, line: int = 0, col: int = 0) -> StringLiteral:
        return cls(decode_escapes(raw), line=line, col=col)


@dataclass(frozen=True)
class Variable(ExpressionNode):
    kind = NodeKind.VARIABLE
    name: str


@dataclass(frozen=True)
class UnaryOp(ExpressionNode):
    """Prefix operator, or postfix ``++``/``--`` when ``postfix`` is set."""

    kind = NodeKind.UNARY_OP
    op: str
    operand: ExpressionNode
    postfix: bool = False


@dataclass(frozen=True)
class BinaryOp(ExpressionNode):
    kind = NodeKind.BINARY_OP
    op: str
    left: ExpressionNode
    right: ExpressionNode


@dataclass(frozen=True)
class AssignOp(ExpressionNode):
    """Assignment (``=`` or a compound form such as ``+=``) to a variable."""

    kind = NodeKind.ASSIGN_OP
    op: str
    target: Variable
    value: ExpressionNode

    def __post_init__(self) -> None:
        if not isinstance(self.target, Variable):
            raise TypeError(
                f"assignment target must be a Variable, got {type(self.target).__name__}"
            )


@dataclass(frozen=True)
class FnCall(ExpressionNode):
    kind = NodeKind.FN_CALL
    name: str
    args: tuple[ExpressionNode, ...] = ()


# Statements


@dataclass(frozen=True)
class Block(StatementNode):
    kind = NodeKind.BLOCK
    statements: tuple[Node, ...] = ()


@dataclass(frozen=True)
class If(StatementNode):
    """``if``; an ``elif`` chain nests another If in ``else_branch``."""

    kind = NodeKind.IF
    condition: ExpressionNode
    then_branch: Node
    else_branch: Node | None = None


@dataclass(frozen=True)
class While(StatementNode):
    kind = NodeKind.WHILE
    condition: ExpressionNode
    body: Block


@dataclass(frozen=True)
class For(StatementNode):
    kind = NodeKind.FOR
    init: Node | None
    condition: ExpressionNode | None
    increment: ExpressionNode | None
    body: Block


@dataclass(frozen=True)
class Return(StatementNode):
    kind = NodeKind.RETURN
    value: ExpressionNode | None = None


@dataclass(frozen=True)
class Break(StatementNode):
    kind = NodeKind.BREAK


@dataclass(frozen=True)
class Continue(StatementNode):
    kind = NodeKind.CONTINUE


@dataclass(frozen=True)
class Import(StatementNode):
    """``import`` with the lexemes up to the ``;`` joined as a raw path."""

    kind = NodeKind.IMPORT
    path: str


# Declarations


@dataclass(frozen=True)
class Param(DeclarationNode):
    kind = NodeKind.PARAM
    var_type: VarType
    name: str


@dataclass(frozen=True)
class Function(DeclarationNode):
    kind = NodeKind.FUNCTION
    name: str
    return_type: VarType
    params: tuple[Param, ...]
    body: Block


@dataclass(frozen=True)
class VarDecl(DeclarationNode):
    kind = NodeKind.VAR_DECL
    name: str
    var_type: VarType
    initializer: ExpressionNode | None = None


@dataclass(frozen=True)
class Program(Node):
    kind = NodeKind.PROGRAM
    category = NodeCategory.PROGRAM
    declarations: tuple[Node, ...] = ()


def _format_double(value: float) -> str:
    return repr(value)


def _label(node: Node) -> str:
    """Header line of a node in the tree rendering."""
    if isinstance(node, IntLiteral):
        return f"int({node.value})"
    if isinstance(node, DoubleLiteral):
        return f"double({_format_double(node.value)})"
    if isinstance(node, CharLiteral):
        return f"char({node.value!r})"
    if isinstance(node, BoolLiteral):
        return f"bool({'true' if node.value else 'false'})"
    if isinstance(node, StringLiteral):
        return f"string({node.value!r})"
    if isinstance(node, Variable):
        return f"Variable({node.name})"
    if isinstance(node, UnaryOp):
        return f"UnaryOp({node.op}{' postfix' if node.postfix else ''})"
    if isinstance(node, BinaryOp):
        return f"BinaryOp({node.op})"
    if isinstance(node, AssignOp):
        return f"AssignOp({node.op})"
    if isinstance(node, FnCall):
        return f"FnCall({node.name})"
    if isinstance(node, If):
        return "IfStatement"
    if isinstance(node, While):
        return "WhileLoop"
    if isinstance(node, For):
        return "ForLoop"
    if isinstance(node, Return):
        return "Return"
    if isinstance(node, Break):
        return "Break"
    if isinstance(node, Continue):
        return "Continue"
    if isinstance(node, Import):
        return f"Import({node.path})"
    if isinstance(node, Block):
        return "Body"
    if isinstance(node, Param):
        return f"Param({node.var_type.value} {node.name})"
    if isinstance(node, Function):
        return f"Function({node.name}) -> {node.return_type.value}"
    if isinstance(node, VarDecl):
        return f"VarDecl({node.var_type.value} {node.name})"
    if isinstance(node, Program):
        return "Program"
    raise TypeError(f"Unknown AST node: {type(node).__name__}")


def _sections(node: Node) -> list[tuple[str | None, list[Node]]]:
    """Children of a node, grouped under optional section headers."""
    if isinstance(
        node,
        (
            IntLiteral,
            DoubleLiteral,
            CharLiteral,
            BoolLiteral,
            StringLiteral,
            Variable,
            Break,
            Continue,
            Import,
            Param,
        ),
    ):
        return []
    if isinstance(node, UnaryOp):
        return [(None, [node.operand])]
    if isinstance(node, BinaryOp):
        return [(None, [node.left, node.right])]
    if isinstance(node, AssignOp):
        return [(None, [node.target, node.value])]
    if isinstance(node, FnCall):
        return [(None, list(node.args))]
    if isinstance(node, If):
        sections: list[tuple[str | None, list[Node]]] = [
            ("Condition:", [node.condition]),
            ("Then:", [node.then_branch]),
        ]
        if node.else_branch is not None:
            sections.append(("Else:", [node.else_branch]))
        return sections
    if isinstance(node, While):
        return [("Condition:", [node.condition]), ("Body:", [node.body])]
    if isinstance(node, For):
        sections = []
        if node.init is not None:
            sections.append(("Init:", [node.init]))
        if node.condition is not None:
            sections.append(("Condition:", [node.condition]))
        if node.increment is not None:
            sections.append(("Increment:", [node.increment]))
        sections.append(("Body:", [node.body]))
        return sections
    if isinstance(node, Return):
        return [(None, [node.value])] if node.value is not None else []
    if isinstance(node, Block):
        return [(None, list(node.statements))]
    if isinstance(node, Function):
        return [("Params:", list(node.params)), ("Body:", [node.body])]
    if isinstance(node, VarDecl):
        return [(None, [node.initializer])] if node.initializer is not None else []
    if isinstance(node, Program):
        return [(None, list(node.declarations))]
    raise TypeError(f"Unknown AST node: {type(node).__name__}")


def _render_into(node: Node, indent: int, lines: list[str]) -> None:
    lines.append(" " * indent + _label(node))
    for header, children in _sections(node):
        child_indent = indent + INDENT_STEP
        if header is not None:
            lines.append(" " * child_indent + header)
            child_indent += INDENT_STEP
        for child in children:
            _render_into(child, child_indent, lines)


def render_tree(node: Node, indent: int = 0) -> str:
    """Renders ``node`` and its subtree, one line per node.

    Children are indented ``INDENT_STEP`` spaces deeper than their parent.
    Nodes with several distinct child slots (if/while/for/function) list
    each slot under a ``Name:`` header line.

    Raises:
        TypeError: If the tree contains an object that is not a known node.
    """
    lines: list[str] = []
    _render_into(node, indent, lines)
    return "\n".join(lines)


def describe(node: Node) -> str:
    """Returns a one-line, human-readable summary of a single node."""
    if isinstance(node, IntLiteral):
        return f"INT literal: {node.value}"
    if isinstance(node, DoubleLiteral):
        return f"DOUBLE literal: {_format_double(node.value)}"
    if isinstance(node, CharLiteral):
        return f"CHAR literal: {node.value!r}"
    if isinstance(node, BoolLiteral):
        return f"BOOL literal: {'true' if node.value else 'false'}"
    if isinstance(node, StringLiteral):
        return f"STRING literal: {node.value!r}"
    if isinstance(node, Variable):
        return f"Variable reference: {node.name}"
    if isinstance(node, UnaryOp):
        kind = "Postfix" if node.postfix else "Unary"
        return f"{kind} operation: {node.op}"
    if isinstance(node, BinaryOp):
        return f"Binary operation: {node.op}"
    if isinstance(node, AssignOp):
        return f"Assignment operation: {node.target.name} {node.op}"
    if isinstance(node, FnCall):
        return f"Function call: {node.name} ({len(node.args)} args)"
    if isinstance(node, If):
        return "If statement" + (" with else" if node.else_branch is not None else "")
    if isinstance(node, While):
        return "While loop"
    if isinstance(node, For):
        return "For loop"
    if isinstance(node, Return):
        return "Return statement" + (" (void)" if node.value is None else "")
    if isinstance(node, Break):
        return "Break statement"
    if isinstance(node, Continue):
        return "Continue statement"
    if isinstance(node, Import):
        return f"Import: {node.path}"
    if isinstance(node, Block):
        return f"Body block ({len(node.statements)} statements)"
    if isinstance(node, Param):
        return f"Parameter: {node.var_type.value} {node.name}"
    if isinstance(node, Function):
        return (
            f"Function declaration: {node.name} "
            f"({len(node.params)} params) -> {node.return_type.value}"
        )
    if isinstance(node, VarDecl):
        return f"Variable declaration: {node.var_type.value} {node.name}"
    if isinstance(node, Program):
        return f"Program ({len(node.declarations)} declarations)"
    raise TypeError(f"Unknown AST node: {type(node).__name__}")


__all__ = [
    "AssignOp",
    "BinaryOp",
    "Block",
    "BoolLiteral",
    "Break",
    "CharLiteral",
    "Continue",
    "DeclarationNode",
    "DoubleLiteral",
    "ExpressionNode",
    "FnCall",
    "For",
    "Function",
    "If",
    "Import",
    "IntLiteral",
    "Node",
    "NodeCategory",
    "NodeKind",
    "Param",
    "Program",
    "Return",
    "StatementNode",
    "StringLiteral",
    "UnaryOp",
    "VarDecl",
    "Variable",
    "While",
    "decode_escapes",
    "describe",
    "render_tree",
]
