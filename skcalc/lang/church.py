"""Church-encoded booleans. Both strategies return booleans as functions (K and K I in SK, λt.λf.t and λt.λf.f in
lambda calculus); this module recognizes them so results can be shown as `true`/`false`.

Source: https://en.wikipedia.org/wiki/Church_encoding#Church_Booleans
"""

from skcalc.pure import lexical as lc
from skcalc.sk import lexical as sk


def boolean(term):
    """Returns 'true' or 'false' if term is a Church boolean in either encoding, otherwise None."""
    if term == sk.TRUE:
        return "true"
    elif term == sk.FALSE:
        return "false"

    if isinstance(term, lc.Abstraction) and isinstance(term.body, lc.Abstraction):
        outer, inner, body = term.param, term.body.param, term.body.body
        if body == lc.Variable(outer) and outer != inner:
            return "true"
        elif body == lc.Variable(inner):
            return "false"
    return None


def display(term):
    """Pretty-prints an evaluation result, with booleans shown by name, including inside lists."""
    name = boolean(term)
    if name:
        return name

    if isinstance(term, sk.Cons):
        return lc.show_list(*term.elements(), show=display)
    elif term == lc.NIL:
        return "{}"
    elif isinstance(term, lc.Application):
        items = lc.as_list(term)
        if items is not None:
            return lc.show_list(*items, show=display)
    return str(term)
