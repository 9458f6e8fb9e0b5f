"""pycmm.unparser

Renders an AST back to C-- source text.

The walk is depth-first and left-to-right. Indentation is an integer
threaded through the recursion and grows by ``tab_width`` for every nested
block.

Parentheses:

- every binary expression wraps itself: ``(a + b)``
- ``==`` additionally wraps its right operand: ``(a == ((b + c)))``
- any other expression is wrapped only when its parent asks for it through
  the ``parens`` argument; parents ask for it when the operand of a binary
  or unary operator is an assignment, and when the operand of a unary
  operator is itself unary (``-(-x)``; ``--x`` would scan as a decrement)

Function declarations with missing parts print placeholders instead of
failing, so partially built trees can still be inspected.
"""

from __future__ import annotations

import io
from typing import Optional, TextIO

from pycmm.ast_nodes import (
    ASTNode,
    Program,
    DeclList,
    FormalsList,
    StmtList,
    ExpList,
    VarDecl,
    FnDecl,
    FnBody,
    FormalDecl,
    StructDecl,
    IntType,
    BoolType,
    VoidType,
    StructType,
    Statement,
    AssignStmt,
    PostIncStmt,
    PostDecStmt,
    ReadStmt,
    WriteStmt,
    IfStmt,
    IfElseStmt,
    WhileStmt,
    RepeatStmt,
    CallStmt,
    ReturnStmt,
    Expression,
    IntLiteral,
    StringLiteral,
    TrueLiteral,
    FalseLiteral,
    Identifier,
    DotAccess,
    AssignExp,
    CallExp,
    UnaryExp,
    BinaryExp,
    Equals,
)


TAB = 4


class Unparser:
    """Tree-walking pretty-printer for C--"""

    def __init__(self, tab_width: int = TAB):
        self.tab_width = tab_width

    def unparse(self, node: ASTNode, indent: int = 0) -> str:
        """Render ``node`` and return the text"""
        out = io.StringIO()
        self.render(node, out, indent)
        return out.getvalue()

    def render(self, node: ASTNode, out: TextIO, indent: int = 0) -> None:
        """Write ``node`` to ``out`` starting at column ``indent``"""
        if isinstance(node, Program):
            self._decl_list(node.decl_list, out, indent)
        elif isinstance(node, DeclList):
            self._decl_list(node, out, indent)
        elif isinstance(node, (VarDecl, FnDecl, StructDecl)):
            self._decl(node, out, indent)
        elif isinstance(node, FormalsList):
            self._formals(node, out)
        elif isinstance(node, FormalDecl):
            self._formal(node, out)
        elif isinstance(node, FnBody):
            self._fn_body(node, out, indent)
        elif isinstance(node, StmtList):
            self._stmt_list(node, out, indent)
        elif isinstance(node, Statement):
            self._stmt(node, out, indent)
        elif isinstance(node, ExpList):
            self._exp_list(node, out)
        elif isinstance(node, Expression):
            self._exp(node, out)
        elif isinstance(node, (IntType, BoolType, VoidType, StructType)):
            self._type(node, out)
        else:
            raise TypeError(f"cannot unparse {node.__class__.__name__}")

    # -----------------
    # Declarations
    # -----------------

    def _decl_list(self, decl_list: Optional[DeclList], out: TextIO, indent: int) -> None:
        if decl_list is None:
            return
        for decl in decl_list.decls:
            self._decl(decl, out, indent)

    def _decl(self, decl, out: TextIO, indent: int) -> None:
        out.write(" " * indent)
        if isinstance(decl, VarDecl):
            self._type(decl.type, out)
            out.write(" ")
            self._exp(decl.id, out)
            out.write(";\n")
        elif isinstance(decl, FnDecl):
            self._fn_decl(decl, out, indent)
        elif isinstance(decl, StructDecl):
            out.write("struct ")
            self._exp(decl.id, out)
            out.write(" {\n")
            self._decl_list(decl.decl_list, out, indent + self.tab_width)
            out.write(" " * indent)
            out.write("};\n")
        else:
            raise TypeError(f"cannot unparse declaration {decl.__class__.__name__}")

    def _fn_decl(self, decl: FnDecl, out: TextIO, indent: int) -> None:
        if decl.type is None:
            out.write("<missing type>")
        else:
            self._type(decl.type, out)
        out.write(" ")
        if decl.id is None:
            out.write("<missing id>")
        else:
            self._exp(decl.id, out)
        if decl.formals_list is None:
            out.write("(<missing formals>)")
        else:
            self._formals(decl.formals_list, out)
        out.write(" ")
        if decl.body is None:
            out.write("<missing body>\n")
        else:
            self._fn_body(decl.body, out, indent)
        out.write("\n")

    def _formals(self, formals_list: FormalsList, out: TextIO) -> None:
        out.write("(")
        for i, formal in enumerate(formals_list.formals):
            if i:
                out.write(", ")
            self._formal(formal, out)
        out.write(")")

    def _formal(self, formal: FormalDecl, out: TextIO) -> None:
        self._type(formal.type, out)
        out.write(" ")
        self._exp(formal.id, out)

    def _fn_body(self, body: FnBody, out: TextIO, indent: int) -> None:
        self._block(body.decl_list, body.stmt_list, out, indent)
        out.write("\n")

    def _type(self, ty, out: TextIO) -> None:
        if isinstance(ty, IntType):
            out.write("int")
        elif isinstance(ty, BoolType):
            out.write("bool")
        elif isinstance(ty, VoidType):
            out.write("void")
        elif isinstance(ty, StructType):
            out.write("struct ")
            self._exp(ty.id, out)
        else:
            raise TypeError(f"cannot unparse type {ty.__class__.__name__}")

    # -----------------
    # Statements
    # -----------------

    def _block(self, decl_list: Optional[DeclList], stmt_list: Optional[StmtList], out: TextIO, indent: int) -> None:
        """Write ``{``, the body one level deeper, then ``}`` (no newline)"""
        out.write("{\n")
        self._decl_list(decl_list, out, indent + self.tab_width)
        self._stmt_list(stmt_list, out, indent + self.tab_width)
        out.write(" " * indent)
        out.write("}")

    def _stmt_list(self, stmt_list: Optional[StmtList], out: TextIO, indent: int) -> None:
        if stmt_list is None:
            return
        for stmt in stmt_list.stmts:
            self._stmt(stmt, out, indent)

    def _stmt(self, stmt: Statement, out: TextIO, indent: int) -> None:
        out.write(" " * indent)
        if isinstance(stmt, AssignStmt):
            self._exp(stmt.assign, out)
            out.write(";\n")
        elif isinstance(stmt, PostIncStmt):
            self._exp(stmt.exp, out)
            out.write("++;\n")
        elif isinstance(stmt, PostDecStmt):
            self._exp(stmt.exp, out)
            out.write("--;\n")
        elif isinstance(stmt, ReadStmt):
            out.write("cin >> ")
            self._exp(stmt.exp, out)
            out.write(";\n")
        elif isinstance(stmt, WriteStmt):
            out.write("cout << ")
            self._exp(stmt.exp, out)
            out.write(";\n")
        elif isinstance(stmt, IfStmt):
            self._header("if", stmt.exp, out)
            self._block(stmt.decl_list, stmt.stmt_list, out, indent)
            out.write("\n")
        elif isinstance(stmt, IfElseStmt):
            self._header("if", stmt.exp, out)
            self._block(stmt.then_decl_list, stmt.then_stmt_list, out, indent)
            out.write(" else ")
            self._block(stmt.else_decl_list, stmt.else_stmt_list, out, indent)
            out.write("\n")
        elif isinstance(stmt, WhileStmt):
            self._header("while", stmt.exp, out)
            self._block(stmt.decl_list, stmt.stmt_list, out, indent)
            out.write("\n")
        elif isinstance(stmt, RepeatStmt):
            self._header("repeat", stmt.exp, out)
            self._block(stmt.decl_list, stmt.stmt_list, out, indent)
            out.write("\n")
        elif isinstance(stmt, CallStmt):
            self._exp(stmt.call, out)
            out.write(";\n")
        elif isinstance(stmt, ReturnStmt):
            if stmt.exp is None:
                out.write("return;\n")
            else:
                out.write("return ")
                self._exp(stmt.exp, out)
                out.write(";\n")
        else:
            raise TypeError(f"cannot unparse statement {stmt.__class__.__name__}")

    def _header(self, keyword: str, cond: Expression, out: TextIO) -> None:
        out.write(f"{keyword} (")
        self._exp(cond, out)
        out.write(") ")

    # -----------------
    # Expressions
    # -----------------

    def _exp_list(self, exp_list: ExpList, out: TextIO) -> None:
        for i, exp in enumerate(exp_list.exps):
            if i:
                out.write(", ")
            self._exp(exp, out)

    def _exp(self, exp: Expression, out: TextIO, parens: bool = False) -> None:
        if parens:
            out.write("(")

        if isinstance(exp, IntLiteral):
            out.write(str(exp.value))
        elif isinstance(exp, StringLiteral):
            out.write(exp.value)
        elif isinstance(exp, TrueLiteral):
            out.write("true")
        elif isinstance(exp, FalseLiteral):
            out.write("false")
        elif isinstance(exp, Identifier):
            out.write(exp.name)
        elif isinstance(exp, DotAccess):
            self._exp(exp.loc, out)
            out.write(".")
            self._exp(exp.id, out)
        elif isinstance(exp, AssignExp):
            self._exp(exp.lhs, out)
            out.write(" = ")
            self._exp(exp.exp, out)
        elif isinstance(exp, CallExp):
            self._exp(exp.id, out)
            out.write("(")
            if exp.exp_list is not None:
                self._exp_list(exp.exp_list, out)
            out.write(")")
        elif isinstance(exp, UnaryExp):
            out.write(exp.operator)
            self._exp(exp.operand, out, isinstance(exp.operand, (AssignExp, UnaryExp)))
        elif isinstance(exp, BinaryExp):
            out.write("(")
            self._exp(exp.left, out, isinstance(exp.left, AssignExp))
            out.write(f" {exp.operator} ")
            self._exp(exp.right, out, isinstance(exp, Equals) or isinstance(exp.right, AssignExp))
            out.write(")")
        else:
            raise TypeError(f"cannot unparse expression {exp.__class__.__name__}")

        if parens:
            out.write(")")


def unparse(node: ASTNode, indent: int = 0, tab_width: int = TAB) -> str:
    """Render ``node`` as C-- source text"""
    return Unparser(tab_width).unparse(node, indent)

