"""Primitive operators shared by both evaluation strategies.

Operators are ordinary identifiers: the parser produces a Variable for `+` exactly like it does for `x`, and only the
reducers give these names meaning. Every primitive is strict in all of its arguments.
"""

from numbers import Number

from skcalc.lang.error import ArithmeticFault, TypeMismatch, UnknownOperator


ARITHMETIC = ("+", "-", "*", "/", "%", "=", "<", ">")
UNARY = ("head", "tail", "isnil", "length")

ARITY = {
    **{op: 2 for op in ARITHMETIC},
    **{op: 1 for op in UNARY},
    "cons": 2,
    "map": 2,
    "fold": 3,
}


def kind(value):
    """Kind of an operand for comparison purposes: 'number', 'string', or the node type for anything else."""
    if isinstance(value, Number) and not isinstance(value, bool):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def binary(op, left, right):
    """Applies arithmetic/comparison op to two forced operands. Literal operands are passed as plain Python values,
    anything else as the node itself. Comparisons return Python bools: encoding them is the caller's business.
    """
    left_kind, right_kind = kind(left), kind(right)

    if op == "=":
        return left_kind == right_kind and left == right

    if op == "+" and left_kind == right_kind == "string":
        return left + right

    if op in ("<", ">"):
        if left_kind != right_kind or left_kind not in ("number", "string"):
            raise TypeMismatch("'{}' cannot compare '{}' with '{}'", [op, left, right])
        return left < right if op == "<" else left > right

    if op not in ("+", "-", "*", "/", "%"):
        raise UnknownOperator("'{}' is not a primitive operator", op)

    if left_kind != "number" or right_kind != "number":
        raise TypeMismatch("'{}' expects numbers, got '{}' and '{}'", [op, left, right])

    try:
        if op == "+":
            return left + right
        elif op == "-":
            return left - right
        elif op == "*":
            return left * right
        elif op == "/":
            if isinstance(left, int) and isinstance(right, int):
                return left // right
            return left / right
        return left % right
    except ZeroDivisionError as exc:
        raise ArithmeticFault("'{}' of '{}' by zero", [op, left]) from exc
    except ArithmeticError as exc:
        raise ArithmeticFault("'{}' failed on '{}' and '{}': {}", [op, left, right, exc]) from exc
