import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from skcalc import main
from skcalc.lang import church
from skcalc.lang.error import ErrorHandler, GenericException, ParseError, TypeMismatch, recursion_limit
from skcalc.lang.evaluator import CachedEvaluator, DirectEvaluator
from skcalc.lang.session import Session
from skcalc.lang.shell import Shell
from skcalc.pure import lexical as lc
from skcalc.pure import reducer as lc_reducer
from skcalc.sk import lexical as sk


PROGRAM = """# squares
define square = \\x.* x x
map square {1
            2
            3}
= (square 3) 9
fold (\\acc.\\x.+ acc x) 0 {}
"""


class ChurchTestCase(unittest.TestCase):

    def test_boolean(self):
        cases = [
            (sk.K(), "true"),
            (sk.App(sk.K(), sk.I()), "false"),
            (lc_reducer.TRUE, "true"),
            (lc_reducer.FALSE, "false"),
            (lc.Abstraction("a", lc.Abstraction("b", lc.Variable("a"))), "true"),
            (lc.Abstraction("a", lc.Abstraction("a", lc.Variable("a"))), "false"),
            (lc.Abstraction("a", lc.Abstraction("b", lc.Variable("c"))), None),
            (sk.I(), None),
            (sk.Num(1), None),
        ]
        for case, expected in cases:
            self.assertEqual(expected, church.boolean(case), case)

    def test_display(self):
        cases = [
            (sk.Num(5), "5"),
            (sk.Str("hi"), "\"hi\""),
            (sk.K(), "true"),
            (sk.to_list([sk.K(), sk.Num(1)]), "{true 1}"),
            (sk.Nil(), "{}"),
            (lc.Number(5), "5"),
            (lc.NIL, "{}"),
            (lc.make_list([lc_reducer.FALSE, lc.Number(2)]), "{false 2}"),
            (sk.App(sk.Var("f"), sk.Num(1)), "f 1"),
        ]
        for case, expected in cases:
            self.assertEqual(expected, church.display(case), expected)


class ErrorHandlerTestCase(unittest.TestCase):

    def run_handler(self, error, **kwargs):
        output = io.StringIO()
        with redirect_stdout(output):
            with ErrorHandler(**kwargs):
                raise error
        return output.getvalue()

    def test_non_fatal(self):
        cases = [
            (ParseError("'{}' has unexpected '{}'", ["+ 1 )", ")"], start=4, end=5), "error"),
            (TypeMismatch("'{}' expects numbers", "+"), "expects numbers"),
            (RecursionError(), "maximum recursion depth exceeded"),
            (KeyboardInterrupt(), "keyboard interrupt"),
        ]
        for error, expected in cases:
            self.assertIn(expected, self.run_handler(error, fatal=False), error)

    def test_diagnosis(self):
        output = self.run_handler(ParseError("'{}' has unexpected '{}'", ["+ 1 )", ")"], start=4, end=5), fatal=False)
        self.assertIn("^", output)

    def test_fatal(self):
        with self.assertRaises(SystemExit) as context:
            self.run_handler(ParseError("bad"))
        self.assertEqual(1, context.exception.code)

    def test_internal_errors_propagate(self):
        with self.assertRaises(ValueError):
            self.run_handler(ValueError("boom"), fatal=False)

    def test_traceback_reset(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("<in>")
        handler.register_line("<in>", "/ 1 0", 3)
        with redirect_stdout(io.StringIO()) as output:
            with handler:
                raise GenericException("failed")
        self.assertIn("line 3", output.getvalue())
        self.assertEqual({"<in>": (None, None)}, handler.traceback)

    def test_warn(self):
        handler = ErrorHandler(fatal=False)
        with redirect_stdout(io.StringIO()) as output:
            handler.warn("'{}' shadows an earlier define", "a", diagnosis=False)
        self.assertIn("warning", output.getvalue())

    def test_trace(self):
        with redirect_stdout(io.StringIO()) as output:
            ErrorHandler(trace=False).register_step("SK", sk.I())
        self.assertEqual("", output.getvalue())

        with redirect_stdout(io.StringIO()) as output:
            ErrorHandler(trace=True).register_step("SK", sk.I())
        self.assertIn("I", output.getvalue())

    def test_recursion_limit(self):
        previous = sys.getrecursionlimit()
        with recursion_limit(previous + 500):
            self.assertEqual(previous + 500, sys.getrecursionlimit())
        self.assertEqual(previous, sys.getrecursionlimit())

        with recursion_limit(10):  # never lowered
            self.assertEqual(previous, sys.getrecursionlimit())


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".sk")
        with os.fdopen(handle, "w", encoding="utf-8") as file:
            file.write(PROGRAM)

    def tearDown(self):
        os.remove(self.path)

    def test_run_file(self):
        for strategy in Session.STRATEGIES:
            sess = Session(ErrorHandler(), self.path, cmd_line=False, strategy=strategy)
            sess.run()
            self.assertEqual(["{1 4 9}", "true", "0"], [sess.pop() for __ in range(3)], strategy)
            self.assertEqual(["square"], [define.name for define in sess.defines])

    def test_strategy(self):
        self.assertIsInstance(Session(ErrorHandler(), Session.SH_FILE, True).evaluator, CachedEvaluator)
        self.assertIsInstance(Session(ErrorHandler(), Session.SH_FILE, True, strategy="lc").evaluator,
                              DirectEvaluator)
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE, True, strategy="ski")

    def test_bad_paths(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), self.path + ".missing", False)
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE, False)

    def test_cmd_line_is_not_fatal(self):
        handler = ErrorHandler()
        Session(handler, Session.SH_FILE, cmd_line=True)
        self.assertFalse(handler.fatal)

    def test_add(self):
        sess = Session(ErrorHandler(fatal=False), Session.SH_FILE, cmd_line=True)
        sess.add("define a = 2", 1)
        sess.add("+ a 1", 2)
        sess.run()
        self.assertEqual("3", sess.pop())
        self.assertEqual([], sess.to_exec)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True))

    def send(self, *lines):
        with redirect_stdout(io.StringIO()) as output:
            for line in lines:
                self.shell.onecmd(line)
        return output.getvalue()

    def test_evaluate(self):
        cases = [
            (["+ 2 3"], "=> 5"),
            (["= 1 1"], "=> true"),
            (["define inc = \\x.+ x 1", "inc 41"], "=> 42"),
            (["tail {1 2 3}"], "=> {2 3}"),
            (["head {1", "# still open", "  2}"], "=> 1"),
        ]
        for lines, expected in cases:
            self.assertIn(expected, self.send(*lines), lines)

    def test_continuation_prompt(self):
        self.send("head {1")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)
        self.send("2}")
        self.assertEqual("λ> ", self.shell.prompt)

    def test_errors_do_not_stop_the_shell(self):
        output = self.send("+ 1 1", "/ 1 0", "(", ")", "+ 2 2")
        self.assertIn("=> 2", output)
        self.assertIn("error", output)
        self.assertIn("=> 4", output)
        self.assertEqual(3, self.shell.sess.evaluator.cache_size())

    def test_non_ascii_digit_is_a_syntax_error(self):
        output = self.send("+ 1 ²", "+ 2 2")
        self.assertIn("error", output)
        self.assertIn("=> 4", output)

    def test_internal_error_does_not_leave_statement_buffered(self):
        evaluator = self.shell.sess.evaluator
        with mock.patch.object(evaluator, "evaluate_program", side_effect=ValueError("boom")):
            with self.assertRaises(ValueError):
                self.send("head {1", "2}")
        self.assertEqual([], self.shell._tmp_lines)
        self.assertEqual("λ> ", self.shell.prompt)
        self.assertIn("=> 4", self.send("+ 2 2"))

    def test_cache(self):
        self.send("+ 1 1", "+ 1 2")
        self.assertIn("2 cached translation(s)", self.send("cache"))
        self.assertIn("cache cleared", self.send("cache clear"))
        self.assertEqual(0, self.shell.sess.evaluator.cache_size())

        shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, strategy="lc"))
        with redirect_stdout(io.StringIO()) as output:
            shell.onecmd("cache")
        self.assertIn("no translation cache", output.getvalue())

    def test_commands(self):
        self.assertIn("skcalc", self.send("help"))
        self.assertEqual("", self.send(""))
        with redirect_stdout(io.StringIO()):
            self.assertTrue(self.shell.onecmd("exit"))
            self.assertTrue(self.shell.onecmd("EOF"))


class MainTestCase(unittest.TestCase):

    def test_file(self):
        handle, path = tempfile.mkstemp(suffix=".sk")
        with os.fdopen(handle, "w", encoding="utf-8") as file:
            file.write(PROGRAM)
        try:
            for strategy in ("sk", "lc"):
                with redirect_stdout(io.StringIO()) as output:
                    main.main([path, "--strategy", strategy])
                self.assertEqual("{1 4 9}\ntrue\n0\n", output.getvalue(), strategy)
        finally:
            os.remove(path)

    def test_missing_file(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                main.main(["does-not-exist.sk"])
        self.assertEqual(1, context.exception.code)

    def test_trace(self):
        handle, path = tempfile.mkstemp(suffix=".sk")
        with os.fdopen(handle, "w", encoding="utf-8") as file:
            file.write("(\\x.x) 5\n")
        try:
            with redirect_stdout(io.StringIO()) as output:
                main.main([path, "--trace"])
            self.assertIn("I 5", output.getvalue())
        finally:
            os.remove(path)


if __name__ == '__main__':
    unittest.main()
