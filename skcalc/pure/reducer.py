"""Direct call-by-name evaluation of lambda calculus syntax trees.

This is the reference strategy the SK pipeline is checked against: a term is evaluated by finding the leftmost
outermost redex and substituting the unevaluated argument into the abstraction body. Abstractions are values, so no
reduction happens under a λ.

Sources: http://pages.cs.wisc.edu/~horwitz/CS704-NOTES/1.LAMBDA-CALCULUS.html#NOR
"""

from skcalc.lang import primitives
from skcalc.lang.error import RECURSION_LIMIT, EvaluationError, NotASequence, recursion_limit
from skcalc.pure.lexical import (Abstraction, Application, Define, Number, String, Variable, NIL, as_list,
                                 make_list, substitute)


TRUE = Abstraction("t", Abstraction("f", Variable("t")))
FALSE = Abstraction("t", Abstraction("f", Variable("f")))
IF = Abstraction("b", Variable("b"))


def church(flag):
    return TRUE if flag else FALSE


def spine(term):
    """Splits a left-nested application into its head and argument list: f a b -> (f, [a, b])."""
    args = []
    while isinstance(term, Application):
        args.insert(0, term.arg)
        term = term.func
    return term, args


class NormalOrderReducer:
    """Implements call-by-name reduction of a LambdaTerm to a value."""
    CHURCH = {"true": TRUE, "false": FALSE, "if": IF}

    def __init__(self, recursion_limit=RECURSION_LIMIT):
        self.recursion_limit = recursion_limit

    def reduce(self, term):
        """Evaluates term. Non-terminating programs hang or end in RecursionError."""
        with recursion_limit(self.recursion_limit):
            return self._reduce(term)

    def _reduce(self, term):
        if isinstance(term, Variable):
            return NormalOrderReducer.CHURCH.get(term.name, term)

        elif isinstance(term, (Number, String, Abstraction)):
            return term

        elif isinstance(term, Application):
            func = self._reduce(term.func)

            if isinstance(func, Abstraction):
                return self._reduce(substitute(func.body, func.param, term.arg))

            head, args = spine(func)
            if isinstance(head, Variable) and len(args) < primitives.ARITY.get(head.name, 0):
                arg = self._reduce(term.arg)  # builtins are strict
                if len(args) + 1 < primitives.ARITY[head.name]:
                    return Application(func, arg)
                return self._apply_builtin(head.name, args + [arg])

            return Application(func, term.arg)  # free function: nothing to do, leave the argument alone

        elif isinstance(term, Define):
            raise EvaluationError("'{}' can only appear at the top level", str(term), internal=True)

        raise EvaluationError("'{}' is not a λ-term", repr(term), internal=True)

    def _apply_builtin(self, name, args):
        if name in primitives.ARITHMETIC:
            result = primitives.binary(name, literal(args[0]), literal(args[1]))
            if isinstance(result, bool):
                return church(result)
            elif isinstance(result, str):
                return String(result)
            return Number(result)

        elif name == "cons":
            return make_list([args[0]], args[1])

        elif name == "map":
            func, items = args[0], elements(name, args[1])
            return make_list([self._reduce(Application(func, item)) for item in items])

        elif name == "fold":
            func, acc, items = args[0], args[1], elements(name, args[2])
            for item in items:
                acc = self._reduce(Application(Application(func, acc), item))
            return acc

        arg = args[0]
        if name == "length" and isinstance(arg, String):
            return Number(len(arg.value))
        elif name == "length":
            return Number(len(elements(name, arg)))
        elif name == "isnil":
            return church(not elements(name, arg))

        items = as_list(arg)
        if not items or not items[0]:
            raise NotASequence("'{}' expects a non-empty list, got '{}'", [name, arg])
        elif name == "head":
            return items[0][0]
        return make_list(items[0][1:], items[1] if items[1] is not None else NIL)


def literal(term):
    """Python value of a literal, or the term itself."""
    if isinstance(term, (Number, String)):
        return term.value
    return term


def elements(name, term):
    """Items of a proper list, raising NotASequence otherwise."""
    items = as_list(term)
    if items is None or items[1] is not None:
        raise NotASequence("'{}' expects a list, got '{}'", [name, term])
    return items[0]
