"""Translation of lambda calculus into SK combinators by bracket abstraction.

Writing [x]E for "abstract x out of E", the translation is

```
T[x]       = x                  T[E F]   = T[E] T[F]               T[λx.E] = [x]E
[x]x       = I                  [x]y     = K y        (y != x)     [x]c    = K c    (literals, combinators)
[x]λy.E    = [x]([y]E)          [x](E F) = S ([x]E) ([x]F)
```

where the inner abstraction of `[x]λy.E` is translated first and x is then abstracted out of the SK result, so [x]
has to work on SK trees as well as LC trees. Two rewrites keep the output small, tried in order before the general S
form:

```
S (K E) I     = E
S (K E) (K F) = K (E F)
```

Source: https://en.wikipedia.org/wiki/Combinatory_logic#Completeness_of_the_S-K_basis
"""

from skcalc.lang.error import TranslationError
from skcalc.pure import lexical as lc
from skcalc.sk.lexical import App, Combinator, I, K, Num, S, Str, Var


class Translator:
    """Stateless LC -> SK translator. translate is pure: equal inputs always give equal outputs."""

    def translate(self, expr):
        if isinstance(expr, lc.Variable):
            return Var(expr.name)
        elif isinstance(expr, lc.Number):
            return Num(expr.value)
        elif isinstance(expr, lc.String):
            return Str(expr.value)
        elif isinstance(expr, lc.Application):
            return App(self.translate(expr.func), self.translate(expr.arg))
        elif isinstance(expr, lc.Abstraction):
            return self.bracket(expr.param, expr.body)

        raise TranslationError("'{}' cannot be translated to SK", repr(expr))

    def bracket(self, param, body):
        """Abstracts param out of body, which may be an LC tree or an already translated SK tree."""
        if isinstance(body, lc.Abstraction):
            return self.bracket(param, self.bracket(body.param, body.body))

        elif isinstance(body, (lc.Application, App)):
            return Translator.combine(self.bracket(param, body.func), self.bracket(param, body.arg))

        elif isinstance(body, (lc.Variable, Var)):
            if body.name == param:
                return I()
            return App(K(), Var(body.name))

        elif isinstance(body, lc.Number):
            return App(K(), Num(body.value))

        elif isinstance(body, lc.String):
            return App(K(), Str(body.value))

        elif isinstance(body, (Num, Str, Combinator)):
            return App(K(), body)

        raise TranslationError("'{}' cannot be bracket-abstracted over '{}'", [repr(body), param])

    @staticmethod
    def combine(left, right):
        """[x](E F) given left = [x]E and right = [x]F."""
        if Translator.is_constant(left) and isinstance(right, I):
            return left.arg
        elif Translator.is_constant(left) and Translator.is_constant(right):
            return App(K(), App(left.arg, right.arg))
        return App(App(S(), left), right)

    @staticmethod
    def is_constant(term):
        """Whether term has the form K E."""
        return isinstance(term, App) and isinstance(term.func, K)
