"""Error handling for skcalc. Only GenericExceptions should be encountered during running: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

The taxonomy mirrors the stages of a run:

```
GenericException
 ├── ParseError            ; malformed token/grammar, raised by the tokenizer/parser
 ├── TranslationError      ; unknown node kind reached the bracket-abstraction translator (internal)
 └── EvaluationError       ; raised by either reducer
      ├── UnknownOperator
      ├── TypeMismatch
      ├── NotASequence
      └── ArithmeticFault  ; division/modulo by zero, chained from the host ZeroDivisionError
```

RecursionError is not part of the taxonomy: stack exhaustion on unbounded recursion propagates untouched
out of the core and is only reported here, at the boundary.
"""

import sys
from contextlib import contextmanager

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a skcalc error/warning. Essentially just a
    wrapper around str.format.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class ParseError(GenericException):
    """Source text that the tokenizer or parser cannot accept."""


class TranslationError(GenericException):
    """An LC node of unrecognized kind reached the translator. Unreachable for anything the parser produces."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("internal", True)
        super().__init__(msg, exprs, **kwargs)


class EvaluationError(GenericException):
    """Failure while reducing a term. Evaluation errors refer to values, not source positions."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("diagnosis", False)
        super().__init__(msg, exprs, **kwargs)


class UnknownOperator(EvaluationError):
    pass


class TypeMismatch(EvaluationError):
    pass


class NotASequence(EvaluationError):
    pass


class ArithmeticFault(EvaluationError, ZeroDivisionError):
    """Host arithmetic failure: division or modulo by zero, or overflow converting to float. Still a ZeroDivisionError,
    so callers that only know about host arithmetic see it.
    """


RECURSION_LIMIT = 10000  # default floor for translation and reduction


@contextmanager
def recursion_limit(limit):
    """Raises the interpreter recursion limit to at least limit for the duration of the block.

    Reduction is plain structural recursion, so legitimate programs need more frames than Python's default allows.
    The limit is only ever raised, never removed: unbounded recursion still ends in RecursionError.
    """
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom skcalc errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    TRACE = "cyan"

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to evaluating a statement."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a statement was evaluated successfully."""
        self.traceback[path] = (None, None)

    def register_step(self, label, expr):
        """Prints an intermediate form of the statement being run, if tracing."""
        if self.trace:
            print(colored(f"{label}: ", ErrorHandler.TRACE, attrs=["bold"]) + str(expr))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        location = ""
        for file, (line, line_num) in self.traceback.items():
            if line:
                col = max(line.find(error.expr), 0) + error.start
                location = f"{file}:{line_num}:{col}: "

        error_msg = colored(location, attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)

        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("maximum recursion depth exceeded: the program may not have a normal form"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
