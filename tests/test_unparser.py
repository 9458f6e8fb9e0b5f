"""
Unit tests for the Unparser module
"""

import io

import pytest
from pycmm.frontend import parse
from pycmm.unparser import Unparser, unparse
from pycmm.ast_nodes import *


def _body(code):
    """Unparse the statements of a one-function program, without the wrapper"""
    text = unparse(parse("void f() {\n" + code + "\n}\n"))
    lines = text.splitlines(keepends=True)
    assert lines[0] == "void f() {\n"
    assert lines[-2:] == ["}\n", "\n"]
    return "".join(line[4:] for line in lines[1:-2])


class TestDeclarations:

    def test_globals(self):
        assert unparse(parse("int x; bool b;")) == "int x;\nbool b;\n"

    def test_struct(self):
        assert unparse(parse("struct Point { int x; int y; };")) == (
            "struct Point {\n"
            "    int x;\n"
            "    int y;\n"
            "};\n"
        )

    def test_struct_variable(self):
        assert unparse(parse("struct Point p;")) == "struct Point p;\n"

    def test_empty_function(self):
        assert unparse(parse("int f() { }")) == "int f() {\n}\n\n"

    def test_formals(self):
        assert unparse(parse("void g(int a, bool b) { }")).startswith("void g(int a, bool b) {\n")

    def test_whole_function(self):
        code = """
int main(int a, bool b) {
  int t;
  t = a + 1;
  if (b) { cout << t; } else { return; }
  while (t < 10) { t++; }
  return t;
}
"""
        assert unparse(parse(code)) == (
            "int main(int a, bool b) {\n"
            "    int t;\n"
            "    t = (a + 1);\n"
            "    if (b) {\n"
            "        cout << t;\n"
            "    } else {\n"
            "        return;\n"
            "    }\n"
            "    while ((t < 10)) {\n"
            "        t++;\n"
            "    }\n"
            "    return t;\n"
            "}\n"
            "\n"
        )

    def test_tab_width(self):
        prog = parse("void f() { if (a) { x = 1; } }")
        assert unparse(prog, tab_width=2) == (
            "void f() {\n"
            "  if (a) {\n"
            "    x = 1;\n"
            "  }\n"
            "}\n"
            "\n"
        )

    def test_missing_function_parts(self):
        fn = FnDecl(type=None, id=None, formals_list=None, body=None, line=0, column=0)
        assert unparse(fn) == "<missing type> <missing id>(<missing formals>) <missing body>\n\n"

    def test_missing_body_only(self):
        fn = FnDecl(
            type=IntType(line=0, column=0),
            id=Identifier(name="f", line=0, column=0),
            formals_list=FormalsList(line=0, column=0),
            body=None,
            line=0,
            column=0,
        )
        assert unparse(fn) == "int f() <missing body>\n\n"


class TestStatements:

    def test_simple_statements(self):
        assert _body("i++; j--; cin >> p.x; cout << \"a\\tb\";") == (
            "i++;\n"
            "j--;\n"
            "cin >> p.x;\n"
            'cout << "a\\tb";\n'
        )

    def test_call_statement(self):
        assert _body("f(); g(1, a + b);") == "f();\ng(1, (a + b));\n"

    def test_return_forms(self):
        assert _body("return; return 0;") == "return;\nreturn 0;\n"

    def test_repeat(self):
        assert _body("repeat (n) { }") == "repeat (n) {\n}\n"

    def test_if_else_headers(self):
        assert _body("if (a == b) { } else { x = 1; }") == (
            "if ((a == (b))) {\n"
            "} else {\n"
            "    x = 1;\n"
            "}\n"
        )

    def test_block_locals(self):
        assert _body("while (true) { int k; k = 1; }") == (
            "while (true) {\n"
            "    int k;\n"
            "    k = 1;\n"
            "}\n"
        )

    def test_statement_with_indent(self):
        stmt = parse("void f() { x = 1; }").decl_list.decls[0].body.stmt_list.stmts[0]
        assert unparse(stmt, indent=8) == "        x = 1;\n"


class TestExpressions:

    @pytest.mark.parametrize("src, expected", [
        ("a + b", "(a + b)"),
        ("a - b - c", "((a - b) - c)"),
        ("a + b * c", "(a + (b * c))"),
        ("a == b", "(a == (b))"),
        ("a == b + c", "(a == ((b + c)))"),
        ("a != b", "(a != b)"),
        ("a && b || c", "((a && b) || c)"),
        ("-a", "-a"),
        ("- -a", "-(-a)"),
        ("!(a && b)", "!(a && b)"),
        ("-(y = 1)", "-(y = 1)"),
        ("(y = 1) + 2", "((y = 1) + 2)"),
        ("a + y = b || c", "(a + (y = (b || c)))"),
        ("y = 3", "y = 3"),
        ("p.a.b", "p.a.b"),
        ("f(1, true, false)", "f(1, true, false)"),
        ('"s"', '"s"'),
    ])
    def test_rendering(self, src, expected):
        assert _body(f"x = {src};") == f"x = {expected};\n"

    def test_expression_node_alone(self):
        exp = Plus(
            left=Identifier(name="a", line=0, column=0),
            right=IntLiteral(value=1, line=0, column=0),
            line=0,
            column=0,
        )
        assert unparse(exp) == "(a + 1)"

    def test_unparse_does_not_mutate(self):
        prog = parse("void f() { x = a == b; }")
        assert unparse(prog) == unparse(prog)


class TestUnparserInterface:

    def test_render_to_stream(self):
        out = io.StringIO()
        Unparser(tab_width=3).render(parse("void f() { x = 1; }"), out)
        assert out.getvalue() == "void f() {\n   x = 1;\n}\n\n"

    def test_unknown_node(self):
        with pytest.raises(TypeError):
            unparse(ASTNode(line=0, column=0))
