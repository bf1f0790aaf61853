import unittest

from skcalc.lang.error import ArithmeticFault, EvaluationError, NotASequence, TypeMismatch
from skcalc.lang.lexical import parse
from skcalc.pure.lexical import Application, Define, NIL, Number, String, Variable, make_list
from skcalc.pure.reducer import FALSE, TRUE, NormalOrderReducer, spine


class NormalOrderReducerTestCase(unittest.TestCase):

    def setUp(self):
        self.reducer = NormalOrderReducer()

    def test_spine(self):
        f, a, b = Variable("f"), Variable("a"), Variable("b")
        self.assertEqual((f, []), spine(f))
        self.assertEqual((f, [a, b]), spine(Application(Application(f, a), b)))

    def test_reduce(self):
        cases = {
            "(\\x.x) 5": Number(5),
            "(\\x.\\y.x) a b": Variable("a"),
            "(\\t.\\f.f) a b": Variable("b"),
            "+ 2 3": Number(5),
            "(\\x.\\y.+ x y) 2 3": Number(5),
            "- 10 4": Number(6),
            "/ 7 2": Number(3),
            "/ 7.0 2": Number(3.5),
            "% 7 3": Number(1),
            "+ \"ab\" \"cd\"": String("abcd"),
            "= 2 2": TRUE,
            "= 2 \"2\"": FALSE,
            "< \"a\" \"b\"": TRUE,
            "if (= 2 2) 10 20": Number(10),
            "if (= 2 3) 10 20": Number(20),
            "true": TRUE,
            "f 1": Application(Variable("f"), Number(1)),
            "+ 2": Application(Variable("+"), Number(2)),
            "(\\f.f 5 10) (\\x.\\y.* x y)": Number(50),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.reducer.reduce(parse(case)), case)

    def test_lists(self):
        cases = {
            "{}": NIL,
            "{(+ 1 1) 3}": make_list([Number(2), Number(3)]),
            "head {1 2 3}": Number(1),
            "tail {1 2 3}": make_list([Number(2), Number(3)]),
            "tail {1}": NIL,
            "isnil {}": TRUE,
            "isnil {1}": FALSE,
            "length {1 2 3}": Number(3),
            "length \"abcd\"": Number(4),
            "map (\\x.* x x) {1 2 3}": make_list([Number(1), Number(4), Number(9)]),
            "map (\\x.x) {}": NIL,
            "fold (\\acc.\\x.+ acc x) 0 {1 2 3}": Number(6),
            "fold (\\acc.\\x.- acc x) 10 {1 2 3}": Number(4),
            "fold (\\acc.\\x.+ acc x) 7 {}": Number(7),
            "cons 1 2": make_list([Number(1)], Number(2)),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.reducer.reduce(parse(case)), case)

    def test_laziness(self):
        should_pass = ["(\\x.5) (/ 1 0)", "(\\x.\\y.x) 5 (/ 1 0)", "if true 5 (head {})"]
        for case in should_pass:
            self.assertEqual(Number(5), self.reducer.reduce(parse(case)), case)

    def test_errors(self):
        should_fail = [
            ("/ 1 0", ArithmeticFault),
            ("% 1 0", ArithmeticFault),
            ("+ 1 \"a\"", TypeMismatch),
            ("< 1 \"a\"", TypeMismatch),
            ("head {}", NotASequence),
            ("tail 5", NotASequence),
            ("map (\\x.x) 5", NotASequence),
            ("+ 1 (head {})", NotASequence),  # builtins are strict
        ]
        for case, error in should_fail:
            self.assertRaises(error, self.reducer.reduce, parse(case))

        self.assertRaises(EvaluationError, self.reducer.reduce, Define("x", Number(1)))

    def test_divergence(self):
        should_fail = ["(\\x.x x) (\\x.x x)", "(\\f.(\\x.f (x x)) (\\x.f (x x))) (\\n.+ 1 n)"]
        for case in should_fail:
            self.assertRaises(RecursionError, self.reducer.reduce, parse(case))


if __name__ == '__main__':
    unittest.main()
