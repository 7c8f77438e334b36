#!/usr/bin/env python3
"""
TXR Compiler Demo
=================

This script demonstrates how to use the TXR package to:
1. Compile and run an expression in one call
2. Walk through each pipeline stage by hand
3. Watch the stages with a verbose-mode listener
4. Inspect failures and the last-error diagnostic

Usage:
    pip install -e .
    python examples/txr_demo.py
"""

import txr
from txr import printer
from txr.compiler import Compiler
from txr.config import CompilerOptions


def main():
    source = "2 * (5 + 5) - 1"

    # ==========================================================================
    # 1. One-call evaluation
    # ==========================================================================
    result = txr.compile_and_run(source)
    print(f"{source} = {result.value}")

    # ==========================================================================
    # 2. Stage by stage
    # ==========================================================================
    tokens = txr.tokenize(source)
    print("\nTokens:")
    for line in printer.format_tokens(tokens):
        print(f"  {line}")

    tree = txr.parse(tokens)
    print("\nSyntax tree:")
    print(printer.ASTPrinter().print(tree))

    instructions = txr.lower(tree)
    print("\nBytecode:")
    for line in printer.format_bytecode(instructions):
        print(f"  {line}")

    print(f"\nStack machine result: {txr.execute(instructions)}")

    # ==========================================================================
    # 3. Verbose mode with a custom listener
    # ==========================================================================
    def listener(stage, payload):
        print(f"[{stage}] {len(printer.format_stage(stage, payload))} lines")

    compiler = Compiler(CompilerOptions(verbose=True, listener=listener))
    print(f"\n8 - 3 - 2 = {compiler.compile_and_run('8 - 3 - 2').value}")

    # ==========================================================================
    # 4. Failures
    # ==========================================================================
    # Division and modulo by zero are not failures; they evaluate to 0
    for expression in ("5 / 0", "5 mod 0", "(2 + 3", "2 & 3", "x + 1"):
        result = txr.compile_and_run(expression)
        if result.success:
            print(f"\n{expression} = {result.value}")
        else:
            print(f"\n{expression} failed ({txr.last_error()}):")
            print(result.error)


if __name__ == "__main__":
    main()
