"""Pure lambda calculus abstract syntax tree.

The `pure` directory contains the lambda calculus side of skcalc: the syntax tree built by the parser and the direct
call-by-name evaluator. Formally, the trees produced by the parser follow

```
<λ-term> ::= <variable>                 ; identifiers, including operator names such as `+` and `head`
           | <number> | <string>        ; literals
           | "λ" <variable> "." <λ-term> ; "abstraction", a single parameter (no currying)
           | <λ-term> <λ-term>          ; "application", associating by left: abcd = (((a b) c) d)
```

plus Define, a top-level `define name = <λ-term>` binding that never appears inside a term.

Nodes are immutable and compare structurally. Anything that needs to tell two equal nodes apart (the translation cache)
must key on identity instead.
"""

from abc import ABC
from dataclasses import dataclass


class LambdaTerm(ABC):
    """Superclass that represents any node of a lambda calculus syntax tree."""
    SUBS = ["₀", "₁", "₂", "₃", "₄", "₅", "₆", "₇", "₈", "₉"]


@dataclass(frozen=True)
class Variable(LambdaTerm):
    name: str

    def __str__(self):
        return self.name

    @classmethod
    def subscript(cls, var, num):
        """Returns var with subscript of num."""
        return cls(var + "".join(LambdaTerm.SUBS[int(digit)] for digit in str(num)))

    @staticmethod
    def split(expr):
        """Splits expr into var and subscript (-1 if there is none)."""
        subscript = []
        while expr and expr[-1] in LambdaTerm.SUBS:
            subscript.insert(0, LambdaTerm.SUBS.index(expr[-1]))
            expr = expr[:-1]
        return expr, int("".join(str(sub) for sub in subscript)) if subscript else -1


@dataclass(frozen=True)
class Number(LambdaTerm):
    value: object

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class String(LambdaTerm):
    value: str

    def __str__(self):
        return quote(self.value)


@dataclass(frozen=True)
class Abstraction(LambdaTerm):
    param: str
    body: LambdaTerm

    def __str__(self):
        return f"λ{self.param}.{self.body}"


@dataclass(frozen=True)
class Application(LambdaTerm):
    func: LambdaTerm
    arg: LambdaTerm

    def __str__(self):
        items = as_list(self)
        if items is not None:
            return show_list(*items)

        func = f"({self.func})" if isinstance(self.func, Abstraction) else str(self.func)
        arg = f"({self.arg})" if isinstance(self.arg, Abstraction) else str(self.arg)
        return f"{func} {arg}"


@dataclass(frozen=True)
class Define(LambdaTerm):
    """Top-level binding. Evaluators wrap the statements that follow it instead of evaluating it."""
    name: str
    body: LambdaTerm

    def __str__(self):
        return f"define {self.name} = {self.body}"


NIL = Variable("nil")
CONS = Variable("cons")

ESCAPES = {"\\": "\\\\", "\"": "\\\"", "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def quote(text):
    """Double-quotes text, escaping what the tokenizer unescapes."""
    return "\"" + "".join(ESCAPES.get(char, char) for char in text) + "\""


def show_list(items, tail, show=str):
    """Renders list items as a list literal, with a trailing `. tail` for improper lists (tail is None if proper)."""
    body = " ".join(show(item) for item in items)
    if tail is None:
        return "{" + body + "}"
    return "{" + body + " . " + show(tail) + "}"


def make_list(items, tail=NIL):
    """Builds the `cons e1 (cons e2 ... nil)` spine a list literal desugars to."""
    for item in reversed(items):
        tail = Application(Application(CONS, item), tail)
    return tail


def as_list(term):
    """Returns (items, tail) if term is a cons spine, where tail is None for a nil-terminated list. Returns None if
    term is not a list at all.
    """
    items = []
    while isinstance(term, Application) and isinstance(term.func, Application) and term.func.func == CONS:
        items.append(term.func.arg)
        term = term.arg

    if term == NIL:
        return items, None
    elif items:
        return items, term
    return None


def free_variables(term):
    """Set of names that occur free in term."""
    if isinstance(term, Variable):
        return {term.name}
    elif isinstance(term, Abstraction):
        return free_variables(term.body) - {term.param}
    elif isinstance(term, Application):
        return free_variables(term.func) | free_variables(term.arg)
    elif isinstance(term, Define):
        return free_variables(term.body)
    return set()


def fresh_name(name, used):
    """Returns the next subscripted variant of name that isn't in used."""
    base, __ = Variable.split(name)
    max_subscript = -1
    for expr in used:
        var, subscript = Variable.split(expr)
        if var == base and subscript > max_subscript:
            max_subscript = subscript
    return Variable.subscript(base, max_subscript + 1).name


def substitute(term, name, value):
    """Capture-avoiding substitution of value for every free occurrence of name in term.

    A binder that would capture a free variable of value is renamed first, the same way α-conversion picks fresh
    names: by appending a subscript.
    """
    if isinstance(term, Variable):
        return value if term.name == name else term
    elif isinstance(term, Application):
        return Application(substitute(term.func, name, value), substitute(term.arg, name, value))
    elif isinstance(term, Abstraction):
        if term.param == name:
            return term

        param, body = term.param, term.body
        value_free = free_variables(value)
        if param in value_free and name in free_variables(body):
            param = fresh_name(param, value_free | free_variables(body) | {name})
            body = substitute(body, term.param, Variable(param))

        return Abstraction(param, substitute(body, name, value))
    return term
