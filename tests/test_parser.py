"""Tests for the formula tokenizer and parser."""
import unittest

from formulaterrain.expression import (
    Binary,
    Call,
    CompileError,
    Conditional,
    Name,
    Number,
    Unary,
    parse,
    preprocess,
)
from formulaterrain.expression.lexer import TokenKind, tokenize


class TestLexer(unittest.TestCase):

    def test_tokens_and_positions(self):
        tokens = tokenize("sin(x) ** 2.5e1")
        kinds = [t.kind for t in tokens]
        self.assertEqual(kinds, [
            TokenKind.NAME, TokenKind.LPAREN, TokenKind.NAME, TokenKind.RPAREN,
            TokenKind.OPERATOR, TokenKind.NUMBER, TokenKind.END,
        ])
        self.assertEqual(tokens[4].text, "**")
        self.assertEqual(tokens[5].text, "2.5e1")
        self.assertEqual(tokens[5].position, 10)

    def test_leading_dot_number(self):
        self.assertEqual(tokenize(".5")[0].text, ".5")

    def test_exponent_needs_digits(self):
        # "2e" is a number followed by the name "e"
        tokens = tokenize("2e")
        self.assertEqual([t.text for t in tokens[:2]], ["2", "e"])

    def test_unicode_pi_is_a_name(self):
        self.assertEqual(tokenize("π")[0].kind, TokenKind.NAME)

    def test_unexpected_character(self):
        with self.assertRaises(CompileError) as ctx:
            tokenize("x $ z")
        self.assertEqual(ctx.exception.position, 2)


class TestParser(unittest.TestCase):

    def test_caret_is_rewritten(self):
        self.assertEqual(preprocess("x^2 + z^3"), "x**2 + z**3")
        self.assertEqual(parse("x^2"), parse("x**2"))

    def test_precedence(self):
        tree = parse("1 + 2 * 3")
        self.assertIsInstance(tree, Binary)
        self.assertEqual(tree.op, "+")
        self.assertEqual(tree.right.op, "*")

    def test_power_is_right_associative(self):
        tree = parse("2 ** 3 ** 2")
        self.assertEqual(tree.op, "**")
        self.assertEqual(tree.left, Number(2.0, 0))
        self.assertEqual(tree.right.op, "**")

    def test_unary_minus_binds_looser_than_power(self):
        tree = parse("-x ** 2")
        self.assertIsInstance(tree, Unary)
        self.assertEqual(tree.operand.op, "**")

    def test_negative_exponent(self):
        tree = parse("2 ** -1")
        self.assertIsInstance(tree.right, Unary)

    def test_call_with_arguments(self):
        tree = parse("perlin(x*0.1, 0, z*0.1)")
        self.assertIsInstance(tree, Call)
        self.assertEqual(tree.function, "perlin")
        self.assertEqual(len(tree.args), 3)

    def test_call_without_arguments(self):
        tree = parse("rand()")
        self.assertEqual(tree, Call("rand", (), 0))

    def test_conditional_and_logic(self):
        tree = parse("(abs(x)<1 && abs(z)<1) ? 10 : 0")
        self.assertIsInstance(tree, Conditional)
        self.assertEqual(tree.test.op, "&&")
        self.assertEqual(tree.if_false, Number(0.0, tree.if_false.position))

    def test_nested_conditional_is_right_associative(self):
        tree = parse("x ? 1 : z ? 2 : 3")
        self.assertIsInstance(tree.if_false, Conditional)

    def test_comparison_below_arithmetic(self):
        tree = parse("x + 1 > z * 2")
        self.assertEqual(tree.op, ">")

    def test_names(self):
        self.assertEqual(parse("pi"), Name("pi", 0))

    def test_errors(self):
        for text in ["", "x +", "(x", "x)", "sin(x,", "x ? 1", "1 2", "* x", "f(,)"]:
            with self.subTest(text=text):
                with self.assertRaises(CompileError):
                    parse(text)

    def test_error_reports_position(self):
        with self.assertRaises(CompileError) as ctx:
            parse("x + )")
        self.assertEqual(ctx.exception.position, 4)
        self.assertIn("position 4", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
