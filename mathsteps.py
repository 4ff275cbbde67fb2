#!/usr/bin/env python3
"""
mathsteps.py — MathSteps CLI.

Runs the engine locally, no API server needed. Limits and defaults come from
MATHSTEPS_* environment variables or a .env file, like the API.

Subcommands:
    eval       — evaluate an expression and print the steps
    tokens     — print the lexer output
    tree       — print the parsed expression tree
    functions  — list functions and constants of a calculation type

Usage:
    python mathsteps.py eval "2 + 3 * 4"
    python mathsteps.py eval --type scientific --angle deg "sin(30) * 2"
    python mathsteps.py tokens "sqrt(16) + 1"
    python mathsteps.py tree --type scientific "max(1, 2 ^ 3)"
    echo "10 / 4" | python mathsteps.py eval --json
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.tree import Tree


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _calculator(settings: Any):
    from engine import Calculator
    return Calculator.from_settings(settings)


def _read_expression(args: argparse.Namespace) -> str:
    text = args.expression if args.expression is not None else sys.stdin.read().strip()
    if not text:
        print("Error: pass an expression as an argument or on stdin", file=sys.stderr)
        sys.exit(1)
    return text


def _print_error(expression: str, error: Any) -> None:
    console = _console()
    console.print(f"[bold red]{error.kind}[/]: {error.message}")
    if error.position is not None and error.position <= len(expression):
        console.print(f"  {expression}", markup=False)
        console.print("  " + " " * error.position + "^", markup=False)


def _print_kv_table(title: str, rows: list[tuple[str, Any]]) -> None:
    table = Table(title=title, box=box.ASCII, show_header=False, pad_edge=False)
    table.add_column("Key", no_wrap=True, style="bold cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(str(key), str(value))
    _console().print(table)


def _print_steps_table(trace: list[Any]) -> None:
    table = Table(title=f"Steps [{len(trace)}]", box=box.ASCII)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Reduction")
    table.add_column("Expression")
    for idx, step in enumerate(trace, 1):
        table.add_row(str(idx), step.description, step.expression)
    _console().print(table)


def _node_label(node: Any) -> str:
    from contracts import BinaryOpNode, FunctionCallNode, LiteralNode, UnaryOpNode
    from adapters.evaluator.render import format_number

    if isinstance(node, LiteralNode):
        return node.symbol or format_number(node.value)
    if isinstance(node, UnaryOpNode):
        return "neg"
    if isinstance(node, BinaryOpNode):
        return node.op
    if isinstance(node, FunctionCallNode):
        return f"{node.name}()"
    return type(node).__name__


def _add_subtree(branch: Tree, node: Any) -> None:
    from adapters.evaluator.render import children

    # children are popped in source order, so rich shows them left to right
    stack = [(branch, child) for child in reversed(children(node))]
    while stack:
        parent, current = stack.pop()
        added = parent.add(_node_label(current))
        stack.extend((added, child) for child in reversed(children(current)))


# -- commands --------------------------------------------------------------

def _eval(args: argparse.Namespace) -> None:
    expression = _read_expression(args)
    response = _calculator(args.settings).calculate(
        expression,
        args.type,
        args.angle,
        show_steps=True,
        trace=True,
    )

    if args.json:
        print(json.dumps(response.to_payload(), ensure_ascii=False, indent=2))
    elif not response.success:
        _print_error(expression, response.error)
    else:
        _print_kv_table("Result", [
            ("Expression", response.expression),
            ("Type", args.type),
            ("Result", response.formatted_result),
        ])
        if response.trace:
            _print_steps_table(response.trace)

    if not response.success:
        sys.exit(2)


def _tokens(args: argparse.Namespace) -> None:
    from adapters.lexer import tokenize
    from errors import LexError

    expression = _read_expression(args)
    try:
        tokens = tokenize(expression)
    except LexError as exc:
        _print_error(expression, exc)
        sys.exit(2)

    table = Table(title=f"Tokens [{len(tokens)}]", box=box.ASCII)
    table.add_column("Pos", justify="right", no_wrap=True)
    table.add_column("Kind", no_wrap=True, style="cyan")
    table.add_column("Value")
    for tok in tokens:
        value = tok.model_dump(mode="json", exclude={"kind", "position"})
        table.add_row(str(tok.position), tok.kind, ", ".join(f"{k}={v}" for k, v in value.items()))
    _console().print(table)


def _tree(args: argparse.Namespace) -> None:
    from adapters.lexer import tokenize
    from adapters.parser.precedence_parser import PrecedenceParser
    from errors import CalculationError

    expression = _read_expression(args)
    try:
        root = PrecedenceParser(args.settings.max_nesting_depth).parse(tokenize(expression), args.type)
    except CalculationError as exc:
        _print_error(expression, exc)
        sys.exit(2)

    tree = Tree(_node_label(root))
    _add_subtree(tree, root)
    _console().print(tree)


def _functions(args: argparse.Namespace) -> None:
    from registry import list_constants, list_functions

    table = Table(title=f"Functions ({args.type})", box=box.ASCII)
    table.add_column("Name", no_wrap=True, style="cyan")
    table.add_column("Arity", justify="right", no_wrap=True)
    table.add_column("Description")
    for fn in list_functions(args.type):
        table.add_row(fn.name, str(fn.arity), fn.description)
    for const in list_constants(args.type):
        table.add_row(const.name, "-", f"constant {const.value!r}")
    _console().print(table)


def main() -> None:
    from config import Settings

    settings = Settings()
    parser = argparse.ArgumentParser(
        prog="mathsteps",
        description="MathSteps — step-by-step expression calculator",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def _type_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument("--type", "-T", default=settings.default_calc_type.value,
                       choices=["basic", "scientific"])

    # eval
    p = sub.add_parser("eval", help="Evaluate an expression step by step")
    p.add_argument("expression", nargs="?", help="Expression (or stdin)")
    _type_arg(p)
    p.add_argument("--angle", default=settings.default_angle_unit.value,
                   choices=["rad", "deg"], help="Angle unit for trigonometry")
    p.add_argument("--json", action="store_true", help="Print the API payload")

    # tokens
    p = sub.add_parser("tokens", help="Show lexer tokens")
    p.add_argument("expression", nargs="?", help="Expression (or stdin)")

    # tree
    p = sub.add_parser("tree", help="Show the parsed expression tree")
    p.add_argument("expression", nargs="?", help="Expression (or stdin)")
    _type_arg(p)

    # functions
    p = sub.add_parser("functions", help="List functions and constants")
    p.add_argument("--type", "-T", default="scientific", choices=["basic", "scientific"])

    args = parser.parse_args()
    args.settings = settings

    commands = {
        "eval": _eval,
        "tokens": _tokens,
        "tree": _tree,
        "functions": _functions,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
