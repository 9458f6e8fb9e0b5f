#!/usr/bin/env python3
"""pycmm - top-level CLI wrapper for the C-- front end

Usage examples:
  ./pycmm.py examples/test.cmm
  ./pycmm.py input.cmm -o pretty.cmm --tab 2
  ./pycmm.py input.cmm --ast
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from pycmm.ast_nodes import print_ast
from pycmm.frontend import Frontend


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    ap = argparse.ArgumentParser(prog="pycmm", description="C-- parser and unparser")
    ap.add_argument("source", help="Input C-- source file")
    ap.add_argument("-o", dest="output", required=False, help="Write the unparsed program here (default: stdout)")
    ap.add_argument("--tab", type=int, default=None, help="Indentation width (default: $PYCMM_TAB_WIDTH or 4)")
    ap.add_argument("--ast", action="store_true", help="Print the syntax tree instead of source text")
    args = ap.parse_args(argv)

    frontend = Frontend(tab_width=args.tab)
    output = None if args.ast else args.output
    result = frontend.unparse_file(args.source, output)

    for w in result.warnings:
        print("Warning:", w, file=sys.stderr)
    if not result.success:
        for e in result.errors:
            print("Error:", e)
        return 1

    if args.ast:
        text = print_ast(result.ast)
        if args.output:
            try:
                with open(args.output, "w", encoding="utf-8") as f:
                    f.write(text)
            except OSError as e:
                print(f"Error: cannot write {args.output}: {e}")
                return 1
        else:
            sys.stdout.write(text)
    elif not args.output:
        sys.stdout.write(result.source)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
