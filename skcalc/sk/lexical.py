"""SK combinator calculus abstract syntax tree.

```
<sk-term> ::= "S" | "K" | "I"          ; the three base combinators
            | <var> | <num> | <str>    ; free identifiers/operator names and literals
            | <sk-term> <sk-term>      ; binary application, associating by left
```

with the rewrite rules `I x = x`, `K x y = x`, `S x y z = x z (y z)`. Evaluation adds a few value-only nodes that never
come out of the translator: Nil and Cons for lists, and PartialOp/PartialOp2 for strict primitives that have received
some, but not all, of their (already forced) arguments.

The combinators carry no fields, so every S equals every other S and dispatch only ever looks at the node type.
"""

from abc import ABC
from dataclasses import dataclass

from skcalc.pure.lexical import quote, show_list


class SKTerm(ABC):
    """Superclass that represents any node of an SK combinator tree."""


class Combinator(SKTerm):

    def __str__(self):
        return type(self).__name__


@dataclass(frozen=True)
class S(Combinator):
    """S x y z = x z (y z)"""


@dataclass(frozen=True)
class K(Combinator):
    """K x y = x"""


@dataclass(frozen=True)
class I(Combinator):
    """I x = x"""


@dataclass(frozen=True)
class Var(SKTerm):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Num(SKTerm):
    value: object

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Str(SKTerm):
    value: str

    def __str__(self):
        return quote(self.value)


@dataclass(frozen=True)
class App(SKTerm):
    func: SKTerm
    arg: SKTerm

    def __str__(self):
        func = f"({self.func})" if isinstance(self.func, App) else str(self.func)
        arg = f"({self.arg})" if isinstance(self.arg, App) else str(self.arg)
        return f"{func} {arg}"


@dataclass(frozen=True)
class Nil(SKTerm):

    def __str__(self):
        return "{}"


@dataclass(frozen=True)
class Cons(SKTerm):
    head: SKTerm
    tail: SKTerm

    def elements(self):
        """Returns (items, tail), where tail is None if the list is nil-terminated."""
        items = []
        current = self
        while isinstance(current, Cons):
            items.append(current.head)
            current = current.tail
        return items, None if isinstance(current, Nil) else current

    def __str__(self):
        return show_list(*self.elements())


@dataclass(frozen=True)
class PartialOp(SKTerm):
    op: str
    arg: SKTerm

    def __str__(self):
        return f"({self.op} {self.arg} ...)"


@dataclass(frozen=True)
class PartialOp2(SKTerm):
    op: str
    first: SKTerm
    second: SKTerm

    def __str__(self):
        return f"({self.op} {self.first} {self.second} ...)"


TRUE = K()
FALSE = App(K(), I())


def church(flag):
    """Church-encoded boolean: true selects its first argument (K), false its second (K I)."""
    return TRUE if flag else FALSE


def to_list(items, tail=None):
    """Builds Cons cells from a Python list."""
    result = Nil() if tail is None else tail
    for item in reversed(items):
        result = Cons(item, result)
    return result
