"""
Front End Driver

Orchestrates the scan -> parse -> unparse pipeline.
"""

from __future__ import annotations

from typing import Optional, List
from dataclasses import dataclass
import os

from pycmm.lexer import Lexer, Token
from pycmm.parser import Parser, MAX_DEPTH, MAX_HEIGHT
from pycmm.unparser import Unparser, TAB
from pycmm.ast_nodes import Program


@dataclass
class UnparseResult:
    """Result of running the front end"""
    success: bool
    output_file: Optional[str] = None
    errors: List[str] = None
    warnings: List[str] = None
    ast: Optional[Program] = None
    source: Optional[str] = None

    def __post_init__(self):
        if self.errors is None:
            self.errors = []
        if self.warnings is None:
            self.warnings = []


class Frontend:
    """Front end driver chaining the lexer, parser and unparser"""

    def __init__(
        self,
        tab_width: Optional[int] = None,
        *,
        max_depth: int = MAX_DEPTH,
        max_height: int = MAX_HEIGHT,
    ):
        # Problems with the environment, reported with every run's warnings.
        self.config_warnings: List[str] = []
        if tab_width is None:
            tab_width = self._tab_width_from_env()
        self.tab_width = tab_width
        self.max_depth = max_depth
        self.max_height = max_height
        self.warnings: List[str] = []

    def _tab_width_from_env(self) -> int:
        value = os.environ.get("PYCMM_TAB_WIDTH")
        if value is None:
            return TAB
        try:
            return int(value)
        except ValueError:
            self.config_warnings.append(f"Ignoring PYCMM_TAB_WIDTH={value!r}: not an integer; using {TAB}")
            return TAB

    def unparse_file(self, source_file: str, output_file: Optional[str] = None) -> UnparseResult:
        """Parse a source file and print it back.

        The text goes to ``output_file`` when given; it is always available
        as ``result.source``.
        """
        try:
            with open(source_file, 'r', encoding="utf-8") as f:
                source_code = f.read()
        except (OSError, UnicodeDecodeError) as e:
            return UnparseResult(
                success=False,
                errors=[f"Failed to read source file: {e}"],
                warnings=list(self.config_warnings),
            )
        return self.unparse_code(source_code, output_file)

    def unparse_code(self, source_code: str, output_file: Optional[str] = None) -> UnparseResult:
        """Parse source code and print it back"""
        self.warnings = list(self.config_warnings)

        # Phase 1: Lexical Analysis
        try:
            tokens = self.get_tokens(source_code)
        except Exception as e:
            return UnparseResult(success=False, errors=[f"Lexical analysis failed: {e}"], warnings=self.warnings)

        # Phase 2: Syntax Analysis
        try:
            ast = self.get_ast(tokens)
        except Exception as e:
            return UnparseResult(success=False, errors=[f"Syntax analysis failed: {e}"], warnings=self.warnings)

        # Phase 3: Unparsing
        try:
            text = self.get_source(ast)
        except Exception as e:
            return UnparseResult(success=False, errors=[f"Unparsing failed: {e}"], warnings=self.warnings, ast=ast)

        if output_file:
            try:
                with open(output_file, 'w', encoding="utf-8") as f:
                    f.write(text)
            except OSError as e:
                return UnparseResult(
                    success=False,
                    errors=[f"Failed to write output file: {e}"],
                    warnings=self.warnings,
                    ast=ast,
                )

        return UnparseResult(
            success=True,
            output_file=output_file,
            warnings=self.warnings,
            ast=ast,
            source=text,
        )

    def get_tokens(self, source_code: str) -> List[Token]:
        """Get tokens from source code"""
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        self.warnings.extend(lexer.warnings)
        if lexer.has_errors():
            errors = lexer.get_errors()
            raise Exception("\n".join(str(e) for e in errors))
        return tokens

    def get_ast(self, tokens: List[Token]) -> Program:
        """Get AST from tokens"""
        parser = Parser(tokens, max_depth=self.max_depth, max_height=self.max_height)
        return parser.parse()

    def get_source(self, ast: Program) -> str:
        """Get source text from an AST"""
        return Unparser(self.tab_width).unparse(ast)


def parse(source_code: str) -> Program:
    """Scan and parse ``source_code``, raising on the first error"""
    frontend = Frontend()
    return frontend.get_ast(frontend.get_tokens(source_code))
