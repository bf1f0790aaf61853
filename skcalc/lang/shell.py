"""Handles interactive/command-line mode for the skcalc interpreter. Uses cmd as backend."""

import cmd

from skcalc.lang.evaluator import CachedEvaluator
from skcalc.lang.lexical import preprocess_line


class Shell(cmd.Cmd):
    """skcalc interpreter shell."""
    intro = "SK combinator interpreter :: Python backend\nType 'help' for more information."
    prompt = "λ> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = "λ> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_lines = []
        self._depth = 0
        self._start = 0
        self.line_num = 0

    def default(self, line):
        """Executes an arbitrary skcalc statement, or buffers it while brackets are left open."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, self._depth = preprocess_line(line, self._depth)
            if not line:
                return

            if not self._tmp_lines:
                self._start = self.line_num
            self._tmp_lines.append(line)

            if self._depth > 0:
                self.prompt = self.secondary_prompt
                return

            stmt = " ".join(self._tmp_lines)
            self.reset()  # leaves the buffer before running, so a failure can't get stuck in it
            self.sess.add(stmt, self._start)
            self.sess.run()

            while self.sess.results:
                print("=> " + self.sess.pop())

    def reset(self):
        """Drops any partially entered statement."""
        self._tmp_lines = []
        self._depth = 0
        self.prompt = self._tmp_prompt

    def onecmd(self, line):
        """Sends every line inside an open statement to default, so continuation lines can't be read as commands."""
        if self._tmp_lines and line != "EOF":
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Doesn't return docs, but rather a short intro."""
        print("Welcome to the skcalc interpreter!\n\n"
              "Statements are lambda calculus terms with numbers, strings, lists and primitive operators. They are\n"
              "translated to S, K and I combinators and reduced lazily.\n\n"
              "Try 'define double = \\x.+ x x', then 'double 21'. 'if (< 1 2) \"yes\" \"no\"' picks a branch,\n"
              "and 'map (\\x.* x x) {1 2 3}' works on lists.\n\n"
              "Commands: 'cache' shows the number of cached translations, 'cache clear' empties the cache,\n"
              "'exit' (or EOF) leaves the interpreter.")

    def do_cache(self, arg):
        """Shows the translation cache size, or clears the cache with 'cache clear'."""
        evaluator = self.sess.evaluator
        if not isinstance(evaluator, CachedEvaluator):
            print("no translation cache: evaluating directly")
        elif arg.strip() == "clear":
            evaluator.clear_cache()
            print("cache cleared")
        elif arg.strip():
            print(f"unknown cache command '{arg.strip()}'")
        else:
            print(f"{evaluator.cache_size()} cached translation(s)")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
