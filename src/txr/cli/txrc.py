"""
txrc - TXR Expression Compiler Command-Line Interface
=====================================================

This module implements the command-line interface for the TXR compiler.
It compiles an expression, runs it on the stack machine and prints the
result, optionally listing the intermediate pipeline stages.

Usage Examples
--------------
Evaluate an expression:
    $ txrc "2 * (5 + 5) - 1"
    19

Read the expression from a file:
    $ txrc -f expr.txr

Show the tokens, AST and bytecode:
    $ txrc --tokens --ast --bytecode "8 - 3 - 2"

Verbose mode (all stages plus debug logging):
    $ txrc -v "7 mod 4"
"""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from txr import __version__
from txr.compiler import Compiler
from txr.config import CompilerOptions, STAGE_TOKENS, STAGE_AST, STAGE_BYTECODE
from txr.cli.errors import handle_cli_exception
from txr import printer


# =============================================================================
# Stage Listing
# =============================================================================

STAGE_TITLES = {
    STAGE_TOKENS: "TOKENS",
    STAGE_AST: "AST",
    STAGE_BYTECODE: "BYTECODE",
}


def render_stage(stage: str, payload: Any) -> str:
    """Format one pipeline stage as an indented listing."""
    body = "\n".join(f"  {line}" for line in printer.format_stage(stage, payload))
    return f"{STAGE_TITLES.get(stage, stage.upper())}:\n{body}"


def make_echo_listener(stages: set[str]):
    """Listener that echoes the selected stages to stdout."""
    def listener(stage: str, payload: Any) -> None:
        if stage in stages:
            click.echo(render_stage(stage, payload))
    return listener


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("expression", required=False)
@click.option(
    "-f", "--file", "source_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the expression from a file",
)
@click.option("--tokens", is_flag=True, help="Print the token list")
@click.option("--ast", is_flag=True, help="Print the syntax tree")
@click.option("--bytecode", is_flag=True, help="Print the bytecode listing")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Print every stage and enable debug logging",
)
@click.version_option(version=__version__, prog_name="txrc")
def main(
    expression: Optional[str],
    source_file: Optional[Path],
    tokens: bool,
    ast: bool,
    bytecode: bool,
    verbose: bool,
) -> None:
    """
    Compile and run a TXR arithmetic expression.

    EXPRESSION is the source text to evaluate. Use -f to read it from a
    file instead.

    \b
    Examples:
        txrc "2 * (5 + 5) - 1"      # 19
        txrc "7 mod 4"              # 3
        txrc --bytecode -- "-(1 + 2)"  # listing, then -3
        txrc -f expr.txr            # read from a file

    \b
    Operators (tightest first):
        * / % div mod
        + -
    Division and modulo by zero evaluate to 0.
    """
    try:
        if (expression is None) == (source_file is None):
            raise click.UsageError("give exactly one of EXPRESSION or --file")

        source = expression if expression is not None else source_file.read_text()

        if verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

        stages = set()
        if tokens or verbose:
            stages.add(STAGE_TOKENS)
        if ast or verbose:
            stages.add(STAGE_AST)
        if bytecode or verbose:
            stages.add(STAGE_BYTECODE)

        options = CompilerOptions(
            verbose=bool(stages),
            listener=make_echo_listener(stages),
        )
        result = Compiler(options).compile_and_run(source)

        if not result.success:
            handle_cli_exception(result.error, verbose)

        try:
            text = str(result.value)
        except ValueError:
            raise click.ClickException("result has too many digits to print") from None
        click.echo(text)

    except SystemExit:
        raise
    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
