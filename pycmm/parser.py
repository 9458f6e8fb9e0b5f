"""pycmm.parser

Recursive-descent parser for the C-- language.

The tree shapes match those of the precedence-annotated LALR(1) grammar
the language is defined by:

- binary operators are left-associative, from loosest to tightest:
  ``||``, ``&&``, ``== !=``, ``< > <= >=``, ``+ -``, ``* /``
- unary ``-`` and ``!`` bind tighter than any binary operator
- assignment is an expression with the loosest binding; its right-hand
  side extends as far as possible
- ``a.b.c`` is ``(a.b).c``
- ``else`` attaches to the nearest unmatched ``if``
- inside a block all declarations precede all statements

The first syntax error is fatal: ``ParserError`` is raised and no partial
tree is returned.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Type

from pycmm.lexer import Token, TokenType
from pycmm.ast_nodes import (
    Program,
    DeclList,
    FormalsList,
    StmtList,
    ExpList,
    Declaration,
    VarDecl,
    FnDecl,
    FnBody,
    FormalDecl,
    StructDecl,
    NOT_STRUCT,
    TypeNode,
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
    UnaryMinus,
    Not,
    BinaryExp,
    Plus,
    Minus,
    Times,
    Divide,
    And,
    Or,
    Equals,
    NotEquals,
    Less,
    Greater,
    LessEq,
    GreaterEq,
    Location,
)


# Recursion nesting (operator levels, parentheses, unary chains, blocks)
# and expression tree height. A tree within MAX_HEIGHT prints to text whose
# expression nesting stays within 225, leaving room for 25 enclosing blocks.
# Each nesting level costs at most three interpreter frames, so MAX_DEPTH
# stays clear of the default recursion limit.
MAX_DEPTH = 250
MAX_HEIGHT = 75

PRIMITIVE_TYPES: Dict[TokenType, Type[TypeNode]] = {
    TokenType.INT: IntType,
    TokenType.BOOL: BoolType,
    TokenType.VOID: VoidType,
}

# Binding power of the binary operators, loosest first; all associate left.
BINARY_OPS: Dict[TokenType, Tuple[int, Type[BinaryExp]]] = {
    TokenType.OR: (1, Or),
    TokenType.AND: (2, And),
    TokenType.EQUALS: (3, Equals),
    TokenType.NOTEQUALS: (3, NotEquals),
    TokenType.LESS: (4, Less),
    TokenType.GREATER: (4, Greater),
    TokenType.LESSEQ: (4, LessEq),
    TokenType.GREATEREQ: (4, GreaterEq),
    TokenType.PLUS: (5, Plus),
    TokenType.MINUS: (5, Minus),
    TokenType.TIMES: (6, Times),
    TokenType.DIVIDE: (6, Divide),
}


class ParserError(Exception):
    """Syntax error; ``line``/``column`` come from the offending token"""
    def __init__(self, message: str, token: Optional[Token] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        if token:
            super().__init__(f"{message} at {token.line}:{token.column}")
        else:
            super().__init__(message)


class Parser:
    """Parser for C--"""

    def __init__(self, tokens: List[Token], max_depth: int = MAX_DEPTH, max_height: int = MAX_HEIGHT):
        self.tokens: List[Token] = list(tokens)
        # A stream cut short still ends in EOF so premature end of input is
        # reported like any other unexpected token.
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            last = self.tokens[-1] if self.tokens else None
            self.tokens.append(
                Token(TokenType.EOF, None, last.line if last else 1, last.column if last else 1)
            )
        self.position = 0
        self.current_token: Token = self.tokens[0]
        self.max_depth = max_depth
        self.max_height = max_height
        self._depth = 0

    def parse(self) -> Program:
        """Parse entire program"""
        first = self.current_token
        decls: List[Declaration] = []
        while not self._at(TokenType.EOF):
            decls.append(self._parse_declaration())

        decl_list = DeclList(decls=decls, line=first.line, column=first.column)
        return Program(decl_list=decl_list, line=first.line, column=first.column)

    def advance(self) -> Token:
        """Move to next token"""
        if self.position < len(self.tokens) - 1:
            self.position += 1
            self.current_token = self.tokens[self.position]
        return self.current_token

    def peek(self, offset: int = 1) -> Optional[Token]:
        """Peek ahead"""
        pos = self.position + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    # -----------------
    # Helpers
    # -----------------

    def _at(self, t: TokenType) -> bool:
        return self.current_token.type == t

    def _match(self, t: TokenType) -> bool:
        if self._at(t):
            self.advance()
            return True
        return False

    def _expect(self, t: TokenType, msg: str) -> Token:
        tok = self.current_token
        if tok.type != t:
            raise ParserError(msg, tok)
        self.advance()
        return tok

    def _is_type_specifier(self) -> bool:
        return self.current_token.type in PRIMITIVE_TYPES

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise ParserError(f"Nesting too deep (max_depth={self.max_depth})", self.current_token)

    def _leave(self) -> None:
        self._depth -= 1

    def _checked(self, node: Expression, tok: Token) -> Expression:
        if node.height > self.max_height:
            raise ParserError(f"Expression too deeply nested (max_height={self.max_height})", tok)
        return node

    def _identifier(self, msg: str) -> Identifier:
        tok = self._expect(TokenType.ID, msg)
        return Identifier(name=tok.value, line=tok.line, column=tok.column)

    # -----------------
    # Declarations
    # -----------------

    def _parse_declaration(self) -> Declaration:
        tok = self.current_token
        if self._at(TokenType.STRUCT):
            after_name = self.peek(2)
            if after_name is not None and after_name.type == TokenType.LCURLY:
                return self._parse_struct_declaration()
            return self._parse_var_declaration()

        if not self._is_type_specifier():
            raise ParserError("Expected declaration", tok)

        ty = self._parse_type()
        ident = self._identifier("Expected identifier")

        if self._at(TokenType.LPAREN):
            formals = self._parse_formals()
            body = self._parse_fn_body()
            return FnDecl(type=ty, id=ident, formals_list=formals, body=body, line=tok.line, column=tok.column)

        self._expect(TokenType.SEMICOLON, "Expected ';' or '(' after identifier")
        return VarDecl(type=ty, id=ident, size=NOT_STRUCT, line=tok.line, column=tok.column)

    def _parse_type(self) -> TypeNode:
        tok = self.current_token
        node_type = PRIMITIVE_TYPES.get(tok.type)
        if node_type is None:
            raise ParserError("Expected type", tok)
        self.advance()
        return node_type(line=tok.line, column=tok.column)

    def _parse_var_declaration(self) -> VarDecl:
        tok = self.current_token
        if self._match(TokenType.STRUCT):
            struct_id = self._identifier("Expected struct name")
            ident = self._identifier("Expected identifier")
            self._expect(TokenType.SEMICOLON, "Expected ';' after declaration")
            ty = StructType(id=struct_id, line=tok.line, column=tok.column)
            return VarDecl(type=ty, id=ident, size=0, line=tok.line, column=tok.column)

        ty = self._parse_type()
        ident = self._identifier("Expected identifier")
        self._expect(TokenType.SEMICOLON, "Expected ';' after declaration")
        return VarDecl(type=ty, id=ident, size=NOT_STRUCT, line=tok.line, column=tok.column)

    def _parse_var_declarations(self) -> DeclList:
        tok = self.current_token
        decls: List[Declaration] = []
        while self._is_type_specifier() or self._at(TokenType.STRUCT):
            decls.append(self._parse_var_declaration())
        return DeclList(decls=decls, line=tok.line, column=tok.column)

    def _parse_struct_declaration(self) -> StructDecl:
        tok = self._expect(TokenType.STRUCT, "Expected 'struct'")
        ident = self._identifier("Expected struct name")
        lcurly = self._expect(TokenType.LCURLY, "Expected '{' after struct name")

        fields: List[Declaration] = []
        while not self._at(TokenType.RCURLY):
            if not (self._is_type_specifier() or self._at(TokenType.STRUCT)):
                raise ParserError("Expected field declaration", self.current_token)
            fields.append(self._parse_var_declaration())
        if not fields:
            raise ParserError("Expected field declaration", self.current_token)

        self._expect(TokenType.RCURLY, "Expected '}' after struct fields")
        self._expect(TokenType.SEMICOLON, "Expected ';' after struct declaration")
        decl_list = DeclList(decls=fields, line=lcurly.line, column=lcurly.column)
        return StructDecl(id=ident, decl_list=decl_list, line=tok.line, column=tok.column)

    def _parse_formals(self) -> FormalsList:
        lparen = self._expect(TokenType.LPAREN, "Expected '('")
        formals: List[FormalDecl] = []
        if not self._at(TokenType.RPAREN):
            while True:
                tok = self.current_token
                ty = self._parse_type()
                ident = self._identifier("Expected parameter name")
                formals.append(FormalDecl(type=ty, id=ident, line=tok.line, column=tok.column))
                if not self._match(TokenType.COMMA):
                    break
        self._expect(TokenType.RPAREN, "Expected ')' after parameter list")
        return FormalsList(formals=formals, line=lparen.line, column=lparen.column)

    def _parse_fn_body(self) -> FnBody:
        lcurly = self.current_token
        decl_list, stmt_list = self._parse_block()
        return FnBody(decl_list=decl_list, stmt_list=stmt_list, line=lcurly.line, column=lcurly.column)

    # -----------------
    # Statements
    # -----------------

    def _parse_block(self) -> Tuple[DeclList, StmtList]:
        self._expect(TokenType.LCURLY, "Expected '{'")
        self._enter()
        try:
            decl_list = self._parse_var_declarations()
            tok = self.current_token
            stmts: List[Statement] = []
            while not self._at(TokenType.RCURLY):
                stmts.append(self._parse_statement())
            self._expect(TokenType.RCURLY, "Expected '}'")
        finally:
            self._leave()
        return decl_list, StmtList(stmts=stmts, line=tok.line, column=tok.column)

    def _parse_condition(self, keyword: str) -> Expression:
        self._expect(TokenType.LPAREN, f"Expected '(' after {keyword}")
        cond = self._parse_expression()
        self._expect(TokenType.RPAREN, f"Expected ')' after {keyword} condition")
        return cond

    def _parse_statement(self) -> Statement:
        tok = self.current_token

        if self._is_type_specifier() or self._at(TokenType.STRUCT):
            raise ParserError("Declarations must precede statements", tok)

        if self._match(TokenType.CIN):
            self._expect(TokenType.READ, "Expected '>>' after cin")
            loc = self._parse_loc()
            self._expect(TokenType.SEMICOLON, "Expected ';' after input statement")
            return ReadStmt(exp=loc, line=tok.line, column=tok.column)

        if self._match(TokenType.COUT):
            self._expect(TokenType.WRITE, "Expected '<<' after cout")
            exp = self._parse_expression()
            self._expect(TokenType.SEMICOLON, "Expected ';' after output statement")
            return WriteStmt(exp=exp, line=tok.line, column=tok.column)

        if self._match(TokenType.IF):
            cond = self._parse_condition("if")
            then_decls, then_stmts = self._parse_block()
            if self._match(TokenType.ELSE):
                else_decls, else_stmts = self._parse_block()
                return IfElseStmt(
                    exp=cond,
                    then_decl_list=then_decls,
                    then_stmt_list=then_stmts,
                    else_decl_list=else_decls,
                    else_stmt_list=else_stmts,
                    line=tok.line,
                    column=tok.column,
                )
            return IfStmt(exp=cond, decl_list=then_decls, stmt_list=then_stmts, line=tok.line, column=tok.column)

        if self._match(TokenType.WHILE):
            cond = self._parse_condition("while")
            decls, stmts = self._parse_block()
            return WhileStmt(exp=cond, decl_list=decls, stmt_list=stmts, line=tok.line, column=tok.column)

        if self._match(TokenType.REPEAT):
            cond = self._parse_condition("repeat")
            decls, stmts = self._parse_block()
            return RepeatStmt(exp=cond, decl_list=decls, stmt_list=stmts, line=tok.line, column=tok.column)

        if self._match(TokenType.RETURN):
            if self._match(TokenType.SEMICOLON):
                return ReturnStmt(exp=None, line=tok.line, column=tok.column)
            val = self._parse_expression()
            self._expect(TokenType.SEMICOLON, "Expected ';' after return")
            return ReturnStmt(exp=val, line=tok.line, column=tok.column)

        if self._at(TokenType.ID):
            nxt = self.peek()
            if nxt is not None and nxt.type == TokenType.LPAREN:
                call = self._parse_call()
                self._expect(TokenType.SEMICOLON, "Expected ';' after call")
                return CallStmt(call=call, line=tok.line, column=tok.column)

            loc = self._parse_loc()
            if self._at(TokenType.ASSIGN):
                assign = self._parse_assignment(loc)
                self._expect(TokenType.SEMICOLON, "Expected ';' after assignment")
                return AssignStmt(assign=assign, line=tok.line, column=tok.column)
            if self._match(TokenType.PLUSPLUS):
                self._expect(TokenType.SEMICOLON, "Expected ';' after '++'")
                return PostIncStmt(exp=loc, line=tok.line, column=tok.column)
            if self._match(TokenType.MINUSMINUS):
                self._expect(TokenType.SEMICOLON, "Expected ';' after '--'")
                return PostDecStmt(exp=loc, line=tok.line, column=tok.column)
            raise ParserError("Expected '=', '++' or '--' after location", self.current_token)

        raise ParserError("Expected statement", tok)

    # -----------------
    # Expressions (precedence climbing)
    # -----------------

    def _parse_expression(self) -> Expression:
        # Statement-level entry point; nested positions call _parse_binary(1)
        # directly to save a frame per nesting level.
        return self._parse_binary(1)

    def _parse_binary(self, min_prec: int) -> Expression:
        self._enter()
        try:
            expr = self._parse_unary()
            while self.current_token.type in BINARY_OPS:
                prec, node_type = BINARY_OPS[self.current_token.type]
                if prec < min_prec:
                    break
                op = self.current_token
                self.advance()
                rhs = self._parse_binary(prec + 1)
                node = node_type(left=expr, right=rhs, line=op.line, column=op.column)
                expr = self._checked(node, op)
            return expr
        finally:
            self._leave()

    def _parse_unary(self) -> Expression:
        tok = self.current_token
        if tok.type in {TokenType.MINUS, TokenType.NOT}:
            self.advance()
            self._enter()
            try:
                operand = self._parse_unary()
            finally:
                self._leave()
            if tok.type == TokenType.MINUS:
                node = UnaryMinus(operand=operand, line=tok.line, column=tok.column)
            else:
                node = Not(operand=operand, line=tok.line, column=tok.column)
            return self._checked(node, tok)
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        tok = self.current_token

        if tok.type == TokenType.INTLITERAL:
            self.advance()
            return IntLiteral(value=tok.value, line=tok.line, column=tok.column)
        if tok.type == TokenType.STRINGLITERAL:
            self.advance()
            return StringLiteral(value=tok.value, line=tok.line, column=tok.column)
        if tok.type == TokenType.TRUE:
            self.advance()
            return TrueLiteral(line=tok.line, column=tok.column)
        if tok.type == TokenType.FALSE:
            self.advance()
            return FalseLiteral(line=tok.line, column=tok.column)
        if self._match(TokenType.LPAREN):
            expr = self._parse_binary(1)
            self._expect(TokenType.RPAREN, "Expected ')'")
            return expr
        if tok.type == TokenType.ID:
            nxt = self.peek()
            if nxt is not None and nxt.type == TokenType.LPAREN:
                return self._parse_call()
            loc = self._parse_loc()
            if self._at(TokenType.ASSIGN):
                return self._parse_assignment(loc)
            return loc

        raise ParserError("Expected expression", tok)

    def _parse_assignment(self, loc: Location) -> AssignExp:
        op = self._expect(TokenType.ASSIGN, "Expected '='")
        rhs = self._parse_binary(1)
        node = AssignExp(lhs=loc, exp=rhs, line=op.line, column=op.column)
        self._checked(node, op)
        return node

    def _parse_loc(self) -> Location:
        loc: Location = self._identifier("Expected identifier")
        while self._at(TokenType.DOT):
            dot = self.current_token
            self.advance()
            field_id = self._identifier("Expected field name after '.'")
            loc = self._checked(DotAccess(loc=loc, id=field_id, line=dot.line, column=dot.column), dot)
        return loc

    def _parse_call(self) -> CallExp:
        ident = self._identifier("Expected function name")
        lparen = self._expect(TokenType.LPAREN, "Expected '(' after function name")
        args: List[Expression] = []
        if not self._at(TokenType.RPAREN):
            args.append(self._parse_binary(1))
            while self._match(TokenType.COMMA):
                args.append(self._parse_binary(1))
        self._expect(TokenType.RPAREN, "Expected ')' after call")
        exp_list = ExpList(exps=args, line=lparen.line, column=lparen.column)
        node = CallExp(id=ident, exp_list=exp_list, line=ident.line, column=ident.column)
        self._checked(node, lparen)
        return node
