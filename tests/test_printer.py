"""
Tests for the stage listings in txr.printer.
"""

import pytest

from txr.lexer import Token, TokenType, tokenize
from txr.parser import parse
from txr.lowering import lower
from txr.bytecode import LoadIdentifier, Negate, PushNumber
from txr.config import STAGE_TOKENS, STAGE_AST, STAGE_BYTECODE
from txr.printer import (
    ASTPrinter,
    format_bytecode,
    format_stage,
    format_tokens,
    reconstruct_source,
)


class TestTokenListing:
    """Tests for format_tokens."""

    def test_listing(self):
        assert format_tokens(tokenize("2 * (x + 1)")) == [
            "NUMBER ( 2 )",
            "MULTIPLY",
            "OPEN PAREN",
            "IDENTIFIER ( x )",
            "ADD",
            "NUMBER ( 1 )",
            "CLOSE PAREN",
            "END OF FILE",
        ]

    def test_operator_words(self):
        assert format_tokens(tokenize("1 div 2 mod 3 / 4 % 5 - 6")) == [
            "NUMBER ( 1 )",
            "DIVIDE",
            "NUMBER ( 2 )",
            "MODULO",
            "NUMBER ( 3 )",
            "DIVIDE",
            "NUMBER ( 4 )",
            "MODULO",
            "NUMBER ( 5 )",
            "SUBTRACT",
            "NUMBER ( 6 )",
            "END OF FILE",
        ]


class TestReconstructSource:
    """Rebuilt source must tokenize back to the same token list."""

    @pytest.mark.parametrize("source", [
        "",
        "2 * (5 + 5) - 1",
        "  8-3 -2  ",
        "7 mod 4",
        "x div divisor",
        "12abc",
        "-(-(1))",
        "a\tb\nc",
    ])
    def test_round_trip(self, source):
        tokens = tokenize(source)
        assert tokenize(reconstruct_source(tokens)) == tokens

    def test_operator_without_symbol(self):
        tokens = [
            Token(TokenType.NUMBER, 0, 1),
            Token(TokenType.OPERATOR, 2, "?"),
            Token(TokenType.NUMBER, 4, 2),
            Token(TokenType.EOF, 5),
        ]
        assert reconstruct_source(tokens) == "1 ? 2"
        assert format_tokens(tokens)[1] == "UNKNOWN"

    def test_keeps_spacing(self):
        assert reconstruct_source(tokenize("1 +  2")) == "1 +  2"


class TestASTPrinter:
    """Tests for the indented tree listing."""

    def test_reference_expression(self):
        output = ASTPrinter().print(parse(tokenize("2 * (5 + 5) - 1")))
        assert output.splitlines() == [
            "SUBTRACT @12",
            "  MULTIPLY @2",
            "    NUMBER 2 @0",
            "    ADD @7",
            "      NUMBER 5 @5",
            "      NUMBER 5 @9",
            "  NUMBER 1 @14",
        ]

    def test_unary_and_identifier(self):
        output = ASTPrinter().print(parse(tokenize("-x")))
        assert output.splitlines() == ["NEGATE @0", "  IDENTIFIER x @1"]

    def test_printer_is_reusable(self):
        printer = ASTPrinter()
        printer.print(parse(tokenize("1 + 2")))
        assert printer.print(parse(tokenize("3"))) == "NUMBER 3 @0"


class TestBytecodeListing:
    """Tests for format_bytecode."""

    def test_binary_operation(self):
        assert format_bytecode(lower(parse(tokenize("1 + 2")))) == [
            "0: Push Number 1 onto stack",
            "1: Push Number 2 onto stack",
            "2: Pop values A and B from stack",
            "3: Add A to B",
            "4: Push result onto stack",
            "5: Pop final result from stack and return",
        ]

    def test_subtraction_step(self):
        assert "3: Subtract B from A" in format_bytecode(lower(parse(tokenize("8 - 3"))))

    def test_negate_and_identifier(self):
        assert format_bytecode([LoadIdentifier(0, "x"), Negate(0)]) == [
            "0: Push value of 'x' onto stack",
            "1: Negate the value on top of the stack",
            "2: Pop final result from stack and return",
        ]


class TestFormatStage:
    """Tests for verbose-mode stage dispatch."""

    def test_known_stages(self):
        tokens = tokenize("5")
        assert format_stage(STAGE_TOKENS, tokens) == ["NUMBER ( 5 )", "END OF FILE"]
        assert format_stage(STAGE_AST, parse(tokens)) == ["NUMBER 5 @0"]
        assert format_stage(STAGE_BYTECODE, [PushNumber(0, 5)])[0] == "0: Push Number 5 onto stack"

    def test_unknown_stage(self):
        assert format_stage("other", 42) == ["42"]
