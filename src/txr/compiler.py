"""
TXR Compiler Main Module
========================

This module orchestrates the complete pipeline:

    Source → Lex → Parse → Lower → Execute → Result

Usage
-----
Command line:
    $ txrc "2 * (5 + 5) - 1"

Programmatic:
    >>> from txr import compile_and_run
    >>> result = compile_and_run("2 * (5 + 5) - 1")
    >>> result.value
    19

Error Handling
--------------
Every stage fails fast on the first error. ``Compiler.compile`` and
``Compiler.run`` raise the stage's TxrError; ``compile_and_run`` never
raises a TxrError and instead returns a failed RunResult carrying the
error. The failure is also recorded as the compiler's last diagnostic.

Verbose Mode
------------
With ``CompilerOptions.verbose`` set, the token list, AST and instruction
list are handed to the options' listener after each stage.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from txr.lexer import Token, tokenize
from txr.parser import parse
from txr.lowering import lower
from txr.executor import Number, execute
from txr.ast import Expression, node_count
from txr.bytecode import Instruction
from txr.config import CompilerOptions, STAGE_TOKENS, STAGE_AST, STAGE_BYTECODE
from txr.diagnostics import Diagnostic, DiagnosticState, thread_state
from txr.errors import TxrError
from txr import printer

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """
    Result of a compile-and-run call.

    Attributes:
        source: The source text
        success: True if every stage succeeded
        value: The computed value (None on failure)
        error: The first error encountered (None on success)
        tokens: Token list, if lexing succeeded
        ast: Expression tree, if parsing succeeded
        instructions: Bytecode, if lowering succeeded
    """
    source: str = ""
    success: bool = False
    value: Optional[Number] = None
    error: Optional[TxrError] = None
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Expression] = None
    instructions: list[Instruction] = field(default_factory=list)

    @property
    def diagnostic(self) -> Optional[Diagnostic]:
        if self.error is None:
            return None
        return Diagnostic.from_error(self.error)


class Compiler:
    """
    TXR expression compiler and runner.

    Example:
        compiler = Compiler(CompilerOptions(verbose=True))
        result = compiler.compile_and_run("8 - 3 - 2")
        print(result.value)

    Attributes:
        options: Compiler configuration options
        diagnostics: Last-error state for this compiler's calls
    """

    def __init__(
        self,
        options: Optional[CompilerOptions] = None,
        diagnostics: Optional[DiagnosticState] = None,
    ):
        self.options = options or CompilerOptions()
        self.diagnostics = diagnostics or DiagnosticState()

    def compile(self, source: str) -> list[Instruction]:
        """
        Compile source text to bytecode.

        Raises:
            TxrError: On the first lexing, parsing or lowering error
        """
        return self._compile(source, RunResult(source=source))

    def run(self, instructions: Sequence[Instruction]) -> Number:
        """
        Execute compiled bytecode.

        Raises:
            ExecError: If execution fails
        """
        return execute(instructions)

    def compile_and_run(self, source: str) -> RunResult:
        """
        Compile and execute source text.

        The diagnostic state is reset at the start of the call, cleared on
        success and set to the first error on failure.

        Returns:
            RunResult; ``success`` is False and ``error`` is set on failure
        """
        self.diagnostics.clear()
        result = RunResult(source=source)

        try:
            instructions = self._compile(source, result)
            result.value = self.run(instructions)
            result.success = True
        except TxrError as e:
            if self.options.show_source:
                e.with_source(source)
            result.error = e
            diagnostic = self.diagnostics.record(e)
            logger.debug(f"Compilation of {source!r} failed: {diagnostic}")
            return result

        logger.debug(f"{source!r} evaluated to a {type(result.value).__name__}")
        return result

    def _compile(self, source: str, result: RunResult) -> list[Instruction]:
        result.tokens = tokenize(source)
        self._report(STAGE_TOKENS, result.tokens)

        result.ast = parse(result.tokens)
        logger.debug(f"AST has {node_count(result.ast)} nodes")
        self._report(STAGE_AST, result.ast)

        result.instructions = lower(result.ast)
        self._report(STAGE_BYTECODE, result.instructions)
        return result.instructions

    def _report(self, stage: str, payload: Any) -> None:
        """Hand a stage's output to the listener in verbose mode."""
        if not self.options.verbose:
            return
        if self.options.listener is not None:
            self.options.listener(stage, payload)
        else:
            log_stage(stage, payload)


def log_stage(stage: str, payload: Any) -> None:
    """Default listener: log a formatted stage listing at INFO level."""
    listing = "\n  ".join(printer.format_stage(stage, payload))
    logger.info(f"{stage.upper()}:\n  {listing}")


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str) -> list[Instruction]:
    """
    Compile source text to bytecode (lex, parse and lower).

    Raises:
        TxrError: On the first error
    """
    return Compiler().compile(source)


def compile_and_run(source: str, options: Optional[CompilerOptions] = None) -> RunResult:
    """
    Compile and execute source text.

    This is the primary high-level interface. Failures are returned, not
    raised, and are also available from ``txr.last_error()`` on the same
    thread until the next call.

    Args:
        source: Expression source text
        options: Compiler options (default: from environment variables)

    Returns:
        RunResult with the value or the first error

    Example:
        >>> compile_and_run("5 % 0").value
        0
    """
    compiler = Compiler(options or CompilerOptions.from_env(), thread_state())
    return compiler.compile_and_run(source)
