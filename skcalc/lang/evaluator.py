"""Program evaluation: turns source text into a list of results with either strategy.

A program is a sequence of statements (see lang/lexical.py for how they are split). `define` statements produce no
result; they are collected and every later statement is evaluated inside them:

```
define a = 1
define b = + a 1
+ a b                ==>    (λa. (λb. + a b) (+ a 1)) 1
```

so later defines can see earlier ones, and nothing is ever looked up by name at run time.
"""

from abc import ABC, abstractmethod

from skcalc.lang.error import RECURSION_LIMIT, recursion_limit
from skcalc.lang.lexical import parse, split_statements
from skcalc.pure.lexical import Abstraction, Application, Define
from skcalc.pure.reducer import NormalOrderReducer
from skcalc.sk.reducer import LazyReducer
from skcalc.sk.translator import Translator


def wrap_defines(expr, defines):
    """Nests expr inside `(λname. expr) value` for every define, the first define outermost."""
    for define in reversed(defines):
        expr = Application(Abstraction(define.name, expr), define.body)
    return expr


class ProgramEvaluator(ABC):
    """Superclass for an evaluation strategy: evaluates single LambdaTerms and drives whole programs."""

    def __init__(self, error_handler=None, recursion_limit=RECURSION_LIMIT):
        self.error_handler = error_handler
        self.recursion_limit = recursion_limit

    @abstractmethod
    def evaluate(self, expr):
        """Evaluates a parsed LambdaTerm to a value."""

    def statements(self, source, defines):
        """Yields every non-define statement of source, wrapped in the defines accumulated so far. Defines are
        appended to defines as they are reached.
        """
        for __, text in split_statements(source):
            stmt = parse(text)
            if isinstance(stmt, Define):
                if self.error_handler and any(define.name == stmt.name for define in defines):
                    self.error_handler.warn("'{}' shadows an earlier define", stmt.name, diagnosis=False)
                defines.append(stmt)
            else:
                yield wrap_defines(stmt, defines)

    def evaluate_program(self, source, defines=None):
        """Evaluates every statement of source in order, returning the results of the non-define statements."""
        if defines is None:
            defines = []
        return [self.evaluate(expr) for expr in self.statements(source, defines)]


class CachedEvaluator(ProgramEvaluator):
    """Evaluates by translating to SK combinators and reducing lazily. Translations are cached per LambdaTerm
    instance, so a term evaluated repeatedly is only translated once; reduction always runs.

    The cache is keyed on identity, not on structure: two equal terms built separately are translated separately.
    """

    def __init__(self, error_handler=None, recursion_limit=RECURSION_LIMIT):
        super().__init__(error_handler, recursion_limit)
        self.translator = Translator()
        self.reducer = LazyReducer(recursion_limit)
        self._cache = {}  # id(expr): (expr, translation), expr is kept so its id can't be reused

    def translation(self, expr):
        """Returns the SK translation of expr, translating it on a cache miss."""
        key = id(expr)
        if key not in self._cache:
            with recursion_limit(self.recursion_limit):
                self._cache[key] = (expr, self.translator.translate(expr))
            if self.error_handler:
                self.error_handler.register_step("SK", self._cache[key][1])
        return self._cache[key][1]

    def evaluate(self, expr):
        return self.reducer.reduce(self.translation(expr))

    def cache_size(self):
        return len(self._cache)

    def clear_cache(self):
        self._cache.clear()


class DirectEvaluator(ProgramEvaluator):
    """Evaluates LambdaTerms directly by call-by-name substitution."""

    def __init__(self, error_handler=None, recursion_limit=RECURSION_LIMIT):
        super().__init__(error_handler, recursion_limit)
        self.reducer = NormalOrderReducer(recursion_limit)

    def evaluate(self, expr):
        return self.reducer.reduce(expr)
