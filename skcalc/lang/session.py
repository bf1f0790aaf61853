"""Session control for the skcalc language. Runs a program either from a file or statement by statement from the
command line, keeping the accumulated defines and a single evaluator (and therefore a single translation cache) for
the whole session.
"""

from skcalc.lang import church
from skcalc.lang.error import RECURSION_LIMIT, GenericException
from skcalc.lang.evaluator import CachedEvaluator, DirectEvaluator
from skcalc.lang.lexical import split_statements


class Session:
    """Governs a skcalc session, with control over the defines in scope."""
    SH_FILE = "<in>"  # command-line interpreter filename
    STRATEGIES = {"sk": CachedEvaluator, "lc": DirectEvaluator}

    def __init__(self, error_handler, path, cmd_line, strategy="sk", recursion_limit=RECURSION_LIMIT):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        if strategy not in Session.STRATEGIES:
            raise GenericException("'{}' is not an evaluation strategy", strategy, diagnosis=False)
        self.evaluator = Session.STRATEGIES[strategy](error_handler, recursion_limit)

        self.defines = []   # Define statements seen so far, in order
        self.to_exec = []   # (line num, statement) pairs waiting to be run
        self.results = []   # values of executed statements, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.to_exec.extend(split_statements(source))

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename", diagnosis=False)

    def add(self, stmt, line_num):
        """Queues a statement. Evaluation is delayed until run is called."""
        self.to_exec.append((line_num, stmt))

    def run(self):
        """Runs the queued statements in order. A statement is dequeued before it runs, so a failing statement is not
        retried by the next run. Will raise any errors that are encountered.
        """
        while self.to_exec:
            line_num, stmt = self.to_exec.pop(0)
            self.error_handler.register_line(self.path, stmt, line_num)  # in case error is raised

            self.results.extend(self.evaluator.evaluate_program(stmt, self.defines))

            self.error_handler.remove_line(self.path)  # error was not raised

    def pop(self):
        """Removes the oldest result and returns it formatted for display."""
        return church.display(self.results.pop(0))
