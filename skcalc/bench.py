"""Benchmark of the evaluation strategies on small expressions: direct lambda calculus evaluation, SK translation on
every run, and SK with cached translations. Run with `skcalc --bench N`.
"""

import timeit

from termcolor import colored

from skcalc.lang.evaluator import CachedEvaluator, DirectEvaluator
from skcalc.lang.lexical import parse
from skcalc.sk.reducer import LazyReducer
from skcalc.sk.translator import Translator


EXPRESSIONS = {
    "identity function": "(\\x.x) 5",
    "K combinator": "(\\x.\\y.x) a b",
    "simple arithmetic": "+ 2 3",
    "lambda with arithmetic": "(\\x.+ x 3) 2",
    "church true selection": "(\\t.\\f.t) a b",
    "church false selection": "(\\t.\\f.f) a b",
    "if with comparison": "if (= 2 2) 10 20",
    "nested lambda": "(\\x.\\y.+ x y) 2 3",
    "complex expression": "(\\f.f 5 10) (\\x.\\y.* x y) 0",
}

STRATEGIES = ("lc", "sk_uncached", "sk_cached")


def compare(expr, iterations=1000):
    """Returns {strategy: seconds} for evaluating expr iterations times with each strategy."""
    direct = DirectEvaluator()
    translator, reducer = Translator(), LazyReducer()
    cached = CachedEvaluator()

    direct.evaluate(expr)  # warm up
    cached.evaluate(expr)

    return {
        "lc": timeit.timeit(lambda: direct.evaluate(expr), number=iterations),
        "sk_uncached": timeit.timeit(lambda: reducer.reduce(translator.translate(expr)), number=iterations),
        "sk_cached": timeit.timeit(lambda: cached.evaluate(expr), number=iterations),
    }


def ratio(time, baseline):
    """Human-readable speed of time relative to baseline."""
    if baseline == 0 or time == 0:
        return "n/a"
    elif time >= baseline:
        return f"{time / baseline:.2f}x slower"
    return colored(f"{baseline / time:.2f}x faster", "green", attrs=["bold"])


def run(iterations=1000, expressions=None):
    """Benchmarks every expression and prints a table of timings, then averages. Returns the raw timings."""
    if expressions is None:
        expressions = EXPRESSIONS

    print(colored(f"lambda calculus vs SK combinators, {iterations} iteration(s) per test", attrs=["bold"]))
    print(f"{'':<24}{'lc':>10}{'sk uncached':>14}{'sk cached':>12}   cached vs lc")

    results = {}
    for name, source in expressions.items():
        results[name] = times = compare(parse(source), iterations)
        print(f"{name:<24}{times['lc']:>10.4f}{times['sk_uncached']:>14.4f}{times['sk_cached']:>12.4f}   "
              + ratio(times["sk_cached"], times["lc"]))

    if results:
        averages = {strategy: sum(times[strategy] for times in results.values()) / len(results)
                    for strategy in STRATEGIES}
        print(colored(f"{'average':<24}", attrs=["bold"])
              + f"{averages['lc']:>10.4f}{averages['sk_uncached']:>14.4f}{averages['sk_cached']:>12.4f}   "
              + ratio(averages["sk_cached"], averages["lc"]))

    return results
