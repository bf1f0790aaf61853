"""Lazy normal-order reduction of SK combinator trees.

The reducer always reduces the function position of an application first and looks at an argument only when a rule
needs its value. Unused arguments are therefore never evaluated, which gives the same call-by-name behavior as the
direct lambda calculus evaluator:

```
I x       -> x                     reduced further, the result has to be a normal form
K x       -> K x                   x is stored as is, it may never be needed
K x y     -> x                     x is forced now, y is dropped unevaluated
S x y     -> S x y                 still waiting for the third argument
S x y z   -> x z (y z)             z is shared by both copies, not evaluated
```

Names are resolved at reduction time: `true`, `false` and `if` are the Church encodings K, K I and I, `nil` is the
empty list, and the primitive operators in lang/primitives.py evaluate their arguments strictly. Everything else is a
free variable, applied lazily.

Reduction is plain recursion over the tree. Programs without a normal form either run forever or exhaust the stack
and raise RecursionError: that is expected, not an error condition of the reducer.
"""

from skcalc.lang import primitives
from skcalc.lang.error import RECURSION_LIMIT, EvaluationError, NotASequence, recursion_limit
from skcalc.sk.lexical import (App, Combinator, Cons, I, K, Nil, Num, PartialOp, PartialOp2, S, Str, Var, church,
                               to_list)


class LazyReducer:
    """Reduces SK trees to normal form, leftmost-outermost."""
    NAMES = {"true": church(True), "false": church(False), "if": I(), "nil": Nil()}

    def __init__(self, recursion_limit=RECURSION_LIMIT):
        self.recursion_limit = recursion_limit

    def reduce(self, expr):
        with recursion_limit(self.recursion_limit):
            return self._reduce(expr)

    def _reduce(self, expr):
        if isinstance(expr, (Combinator, Num, Str, Nil, Cons, PartialOp, PartialOp2)):
            return expr

        elif isinstance(expr, Var):
            return LazyReducer.NAMES.get(expr.name, expr)

        elif isinstance(expr, App):
            return self._apply(self._reduce(expr.func), expr.arg)

        raise EvaluationError("'{}' is not an SK term", repr(expr), internal=True)

    def _apply(self, func, arg):
        """Reduces `func arg`, given func is already reduced and arg is not."""
        if isinstance(func, I):
            return self._reduce(arg)

        elif isinstance(func, (K, S)):
            return App(func, arg)

        elif isinstance(func, App):
            return self._apply2(func.func, func.arg, arg)

        elif isinstance(func, Var) and primitives.ARITY.get(func.name) == 1:
            return self._unary(func.name, self._reduce(arg))

        elif isinstance(func, Var) and func.name in primitives.ARITY:
            return PartialOp(func.name, self._reduce(arg))

        elif isinstance(func, PartialOp):
            return self._binary(func.op, func.arg, self._reduce(arg))

        elif isinstance(func, PartialOp2):
            return self._fold(func.first, func.second, self._reduce(arg))

        return App(func, arg)  # free variable or malformed application, left as is

    def _apply2(self, inner_func, inner_arg, arg):
        """Reduces `(inner_func inner_arg) arg`, given `inner_func inner_arg` is already reduced."""
        if isinstance(inner_func, K):
            return self._reduce(inner_arg)

        elif isinstance(inner_func, App) and isinstance(inner_func.func, S):
            x, y, z = inner_func.arg, inner_arg, arg
            return self._reduce(App(App(x, z), App(y, z)))

        return App(App(inner_func, inner_arg), arg)

    def _binary(self, op, first, second):
        if op in primitives.ARITHMETIC:
            return apply_primitive(op, first, second)
        elif op == "cons":
            return Cons(first, second)
        elif op == "map":
            return to_list([self._reduce(App(first, item)) for item in elements(op, second)])
        return PartialOp2(op, first, second)

    def _fold(self, func, acc, items):
        for item in elements("fold", items):
            acc = self._reduce(App(App(func, acc), item))
        return acc

    @staticmethod
    def _unary(name, arg):
        if name == "length" and isinstance(arg, Str):
            return Num(len(arg.value))
        elif name == "length":
            return Num(len(elements(name, arg)))
        elif name == "isnil":
            return church(not elements(name, arg))
        elif not isinstance(arg, Cons):
            raise NotASequence("'{}' expects a non-empty list, got '{}'", [name, arg])
        elif name == "head":
            return arg.head
        return arg.tail


def apply_primitive(op, first, second):
    """Applies a binary arithmetic/comparison primitive to two reduced operands."""
    result = primitives.binary(op, literal(first), literal(second))
    if isinstance(result, bool):
        return church(result)
    elif isinstance(result, str):
        return Str(result)
    return Num(result)


def literal(expr):
    """Python value of a literal, or the node itself."""
    if isinstance(expr, (Num, Str)):
        return expr.value
    return expr


def elements(name, expr):
    """Items of a proper list, raising NotASequence otherwise."""
    if isinstance(expr, Nil):
        return []
    elif isinstance(expr, Cons):
        items, tail = expr.elements()
        if tail is None:
            return items
    raise NotASequence("'{}' expects a list, got '{}'", [name, expr])
