"""
Abstract Syntax Tree (AST) Node Definitions for the C-- front end

Defines the structure of AST nodes used to represent C-- programs.

Nodes fall into three groups:

- leaves: literals, identifiers and the primitive types
- lists: DeclList, FormalsList, StmtList, ExpList (possibly empty)
- fixed-arity internal nodes: everything else

Line/column are recorded on every node but do not take part in equality,
so a re-parsed tree compares equal to the original one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import ClassVar, Iterator, List, Optional, Union


@dataclass
class ASTNode:
    """Base class for all AST nodes"""
    # Location fields (line/column) are required constructor arguments
    # so subclasses' non-default fields don't follow defaults.
    line: int = field(compare=False)
    column: int = field(compare=False)

    def children(self) -> Iterator["ASTNode"]:
        """Yield direct child nodes in slot order; list slots are flattened."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, ASTNode):
                        yield item


# ============== Type Nodes ==============

@dataclass
class TypeNode(ASTNode):
    """Base class for type descriptors"""
    pass


@dataclass
class IntType(TypeNode):
    """int"""
    pass


@dataclass
class BoolType(TypeNode):
    """bool"""
    pass


@dataclass
class VoidType(TypeNode):
    """void"""
    pass


@dataclass
class StructType(TypeNode):
    """struct <name>, used for struct-typed variables"""
    id: 'Identifier'


# ============== Expression Nodes ==============

@dataclass
class Expression(ASTNode):
    """Base class for expressions"""
    # 1 for leaves, 1 + tallest sub-expression otherwise.
    height: int = field(default=1, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.height = 1 + max((_subexpression_height(c) for c in self.children()), default=0)


def _subexpression_height(node: ASTNode) -> int:
    if isinstance(node, Expression):
        return node.height
    if isinstance(node, ExpList):
        return max((e.height for e in node.exps), default=0)
    return 0


@dataclass
class IntLiteral(Expression):
    """Integer literal"""
    value: int


@dataclass
class StringLiteral(Expression):
    """String literal; ``value`` is the raw text including the quotes"""
    value: str


@dataclass
class TrueLiteral(Expression):
    pass


@dataclass
class FalseLiteral(Expression):
    pass


@dataclass
class Identifier(Expression):
    """Identifier (variable, field, function or struct name)"""
    name: str


@dataclass
class DotAccess(Expression):
    """Struct field access: loc.id"""
    loc: Location
    id: Identifier


@dataclass
class AssignExp(Expression):
    """Assignment; also usable as an expression"""
    lhs: Location
    exp: Expression


@dataclass
class CallExp(Expression):
    """Function call; ``f()`` carries an empty ExpList"""
    id: Identifier
    exp_list: 'ExpList'


@dataclass
class UnaryExp(Expression):
    """Base class for unary operators"""
    operand: Expression

    operator: ClassVar[str] = ""


@dataclass
class UnaryMinus(UnaryExp):
    operator: ClassVar[str] = "-"


@dataclass
class Not(UnaryExp):
    operator: ClassVar[str] = "!"


@dataclass
class BinaryExp(Expression):
    """Base class for binary operators"""
    left: Expression
    right: Expression

    operator: ClassVar[str] = ""


@dataclass
class Plus(BinaryExp):
    operator: ClassVar[str] = "+"


@dataclass
class Minus(BinaryExp):
    operator: ClassVar[str] = "-"


@dataclass
class Times(BinaryExp):
    operator: ClassVar[str] = "*"


@dataclass
class Divide(BinaryExp):
    operator: ClassVar[str] = "/"


@dataclass
class And(BinaryExp):
    operator: ClassVar[str] = "&&"


@dataclass
class Or(BinaryExp):
    operator: ClassVar[str] = "||"


@dataclass
class Equals(BinaryExp):
    operator: ClassVar[str] = "=="


@dataclass
class NotEquals(BinaryExp):
    operator: ClassVar[str] = "!="


@dataclass
class Less(BinaryExp):
    operator: ClassVar[str] = "<"


@dataclass
class Greater(BinaryExp):
    operator: ClassVar[str] = ">"


@dataclass
class LessEq(BinaryExp):
    operator: ClassVar[str] = "<="


@dataclass
class GreaterEq(BinaryExp):
    operator: ClassVar[str] = ">="


# ============== List Nodes ==============

@dataclass
class DeclList(ASTNode):
    """Declarations in source order"""
    decls: List['Declaration'] = field(default_factory=list)


@dataclass
class FormalsList(ASTNode):
    """Formal parameters in source order"""
    formals: List['FormalDecl'] = field(default_factory=list)


@dataclass
class StmtList(ASTNode):
    """Statements in execution order"""
    stmts: List['Statement'] = field(default_factory=list)


@dataclass
class ExpList(ASTNode):
    """Actual parameters in argument order"""
    exps: List[Expression] = field(default_factory=list)


# ============== Declaration Nodes ==============

NOT_STRUCT = -1


@dataclass
class Declaration(ASTNode):
    """Base class for declarations"""
    pass


@dataclass
class VarDecl(Declaration):
    """Variable or struct field declaration"""
    type: TypeNode
    id: Identifier
    size: int = NOT_STRUCT  # 0 for struct-typed variables until layout fills it in


@dataclass
class FnBody(ASTNode):
    """Function body: local declarations followed by statements"""
    decl_list: Optional[DeclList] = None
    stmt_list: Optional[StmtList] = None


@dataclass
class FnDecl(Declaration):
    """Function definition.

    Every slot is optional so that partially built trees can still be
    printed; the unparser renders placeholders for missing parts.
    """
    type: Optional[TypeNode]
    id: Optional[Identifier]
    formals_list: Optional[FormalsList]
    body: Optional[FnBody]


@dataclass
class FormalDecl(Declaration):
    """Formal parameter"""
    type: TypeNode
    id: Identifier


@dataclass
class StructDecl(Declaration):
    """Struct definition: struct <id> { fields };"""
    id: Identifier
    decl_list: DeclList


# ============== Statement Nodes ==============

@dataclass
class Statement(ASTNode):
    """Base class for statements"""
    pass


@dataclass
class AssignStmt(Statement):
    assign: AssignExp


@dataclass
class PostIncStmt(Statement):
    exp: Location


@dataclass
class PostDecStmt(Statement):
    exp: Location


@dataclass
class ReadStmt(Statement):
    """cin >> loc;"""
    exp: Location


@dataclass
class WriteStmt(Statement):
    """cout << exp;"""
    exp: Expression


@dataclass
class IfStmt(Statement):
    exp: Expression
    decl_list: DeclList
    stmt_list: StmtList


@dataclass
class IfElseStmt(Statement):
    exp: Expression
    then_decl_list: DeclList
    then_stmt_list: StmtList
    else_decl_list: DeclList
    else_stmt_list: StmtList


@dataclass
class WhileStmt(Statement):
    exp: Expression
    decl_list: DeclList
    stmt_list: StmtList


@dataclass
class RepeatStmt(Statement):
    exp: Expression
    decl_list: DeclList
    stmt_list: StmtList


@dataclass
class CallStmt(Statement):
    call: CallExp


@dataclass
class ReturnStmt(Statement):
    """Return statement; ``exp`` is None for a valueless return"""
    exp: Optional[Expression] = None


# ============== Program Node ==============

@dataclass
class Program(ASTNode):
    """Root node representing entire program"""
    decl_list: DeclList


# Assignable expressions: a variable or a struct field.
Location = Union[Identifier, DotAccess]


# ============== Utility Functions ==============

def print_ast(node: ASTNode, indent: int = 0) -> str:
    """Dump a tree as an indented outline, one node per line"""
    prefix = "  " * indent

    if isinstance(node, Identifier):
        label = f"Identifier({node.name})"
    elif isinstance(node, (IntLiteral, StringLiteral)):
        label = f"{node.__class__.__name__}({node.value})"
    elif isinstance(node, (BinaryExp, UnaryExp)):
        label = f"{node.__class__.__name__}({node.operator})"
    elif isinstance(node, VarDecl) and node.size != NOT_STRUCT:
        label = f"VarDecl(size={node.size})"
    else:
        label = node.__class__.__name__

    result = f"{prefix}{label}\n"
    for child in node.children():
        result += print_ast(child, indent + 1)
    return result
