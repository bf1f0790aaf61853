"""Lexical analysis for the skcalc language: tokenization and recursive-descent parsing of statements into lambda
calculus syntax trees, plus the line preprocessing used to split a program into statements.

All grammar can be loosely defined as follows:

```
<statement>   ::= "define" <ident> "=" <expr>   ; binds <ident> in every later statement
                | <expr>                         ; evaluated and printed

<expr>        ::= ("\\" | "λ") <ident> "." <expr>   ; abstraction, body is greedy: λx.x y = λx.(x y)
                | "let" <ident> "=" <expr> "in" <expr>  ; sugar for (λident.expr) expr
                | <atom>+ [<expr>]               ; application, associating by left; a trailing λ/let is the last arg
<atom>        ::= <ident> | <number> | <string> | "(" <expr> ")"
                | "{" <elem>* "}"                ; list literal, sugar for cons e1 (cons e2 ... nil)

<comment>     ::= "#" <char>*
```

Identifiers may contain operator characters, so `+`, `<=` and `is-nil?` are all plain identifiers. `true`, `false`
and `if` are identifiers too: the evaluators give them their meaning.
"""

from dataclasses import dataclass

from skcalc.lang.error import ParseError
from skcalc.pure.lexical import Abstraction, Application, Define, Number, String, Variable, make_list


LAM, DOT, LPAREN, RPAREN, LBRACE, RBRACE = "LAM", "DOT", "LPAREN", "RPAREN", "LBRACE", "RBRACE"
NUM, STR, IDENT, EOF = "NUM", "STR", "IDENT", "EOF"
LET, IN, DEFINE = "LET", "IN", "DEFINE"

KEYWORDS = {"let": LET, "in": IN, "define": DEFINE}
PUNCTUATION = {"\\": LAM, "λ": LAM, ".": DOT, "(": LPAREN, ")": RPAREN, "{": LBRACE, "}": RBRACE}
IDENT_CHARS = "_+-*/%=<>!?"
UNESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "\"": "\""}

DIGITS = "0123456789"
OPENERS, CLOSERS = "({", ")}"


@dataclass(frozen=True)
class Token:
    kind: str
    value: object = None
    pos: int = 0

    def __str__(self):
        return self.kind if self.value is None else f"{self.kind}({self.value!r})"


class Tokenizer:
    """Splits a single statement into Tokens. The token list always ends with EOF."""

    def __init__(self, source):
        self.source = source
        self.pos = 0

    def tokenize(self):
        tokens = []
        while True:
            self._skip_whitespace()
            if self.pos >= len(self.source):
                tokens.append(Token(EOF, pos=self.pos))
                return tokens
            tokens.append(self._next_token())

    def _skip_whitespace(self):
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == "#":
                newline = self.source.find("\n", self.pos)
                self.pos = len(self.source) if newline == -1 else newline
            elif char.isspace():
                self.pos += 1
            else:
                return

    def _next_token(self):
        start, char = self.pos, self.source[self.pos]

        if char in PUNCTUATION:
            self.pos += 1
            return Token(PUNCTUATION[char], pos=start)
        elif char == "\"":
            return self._read_string()
        elif Tokenizer.is_digit(char):
            return self._read_number()
        elif Tokenizer.is_ident_char(char) and not char.isdigit():  # no identifier starts with a digit, ASCII or not
            while self.pos < len(self.source) and Tokenizer.is_ident_char(self.source[self.pos]):
                self.pos += 1
            word = self.source[start:self.pos]
            return Token(KEYWORDS.get(word, IDENT), word, start)

        raise ParseError("'{}' contains unexpected character '{}'", [self.source, char], start=start, end=start + 1)

    @staticmethod
    def is_ident_char(char):
        return char != "λ" and (char.isalnum() or char in IDENT_CHARS)

    @staticmethod
    def is_digit(char):
        """ASCII digits only: str.isdigit also accepts superscripts and other scripts' digits."""
        return len(char) == 1 and char in DIGITS

    def _read_number(self):
        start = self.pos
        while self.pos < len(self.source) and Tokenizer.is_digit(self.source[self.pos]):
            self.pos += 1

        if self.source[self.pos:self.pos + 1] == "." and Tokenizer.is_digit(self.source[self.pos + 1:self.pos + 2]):
            self.pos += 1
            while self.pos < len(self.source) and Tokenizer.is_digit(self.source[self.pos]):
                self.pos += 1
            return Token(NUM, float(self.source[start:self.pos]), start)

        return Token(NUM, int(self.source[start:self.pos]), start)

    def _read_string(self):
        start = self.pos
        self.pos += 1  # opening quote
        chars = []
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == "\"":
                self.pos += 1
                return Token(STR, "".join(chars), start)
            elif char == "\\" and self.source[self.pos + 1:self.pos + 2] in UNESCAPES:
                chars.append(UNESCAPES[self.source[self.pos + 1]])
                self.pos += 2
            else:
                chars.append(char)
                self.pos += 1

        raise ParseError("'{}' has an unterminated string literal", self.source, start=start)


class Parser:
    """Recursive-descent parser from Tokens to a single LambdaTerm (or Define)."""
    ATOMS = (IDENT, NUM, STR, LPAREN, LBRACE)

    def __init__(self, tokens, source=""):
        self.tokens = tokens
        self.source = source
        self.pos = 0

    @property
    def current(self):
        return self.tokens[self.pos]

    def advance(self):
        token = self.current
        if token.kind != EOF:
            self.pos += 1
        return token

    def expect(self, kind, value=None):
        token = self.current
        if token.kind != kind or (value is not None and token.value != value):
            self.error("'{}' expected '{}', found '{}'", value or kind, token)
        return self.advance()

    def error(self, msg, *details):
        """Raises a ParseError pointing at the current token. msg is templated with the source, then details."""
        token = self.current
        end = token.pos + len(str(token.value)) if token.value is not None else token.pos + 1
        raise ParseError(msg, [self.source, *details], start=token.pos, end=end)

    def parse(self):
        """Parses a whole statement: nothing may follow it."""
        statement = self.parse_statement()
        if self.current.kind != EOF:
            self.error("'{}' has unexpected '{}'", self.current)
        return statement

    def parse_statement(self):
        if self.current.kind == DEFINE:
            self.advance()
            name = self.expect(IDENT).value
            self.expect(IDENT, "=")
            return Define(name, self.parse_expr())
        return self.parse_expr()

    def parse_expr(self):
        if self.current.kind == LAM:
            return self.parse_abstraction()
        elif self.current.kind == LET:
            return self.parse_let()
        return self.parse_application()

    def parse_abstraction(self):
        self.expect(LAM)
        param = self.expect(IDENT).value
        self.expect(DOT)
        return Abstraction(param, self.parse_expr())

    def parse_let(self):
        self.expect(LET)
        name = self.expect(IDENT).value
        self.expect(IDENT, "=")
        value = self.parse_expr()
        self.expect(IN)
        return Application(Abstraction(name, self.parse_expr()), value)

    def parse_application(self):
        term = self.parse_atom()
        while self.current.kind in Parser.ATOMS:
            term = Application(term, self.parse_atom())
        if self.current.kind in (LAM, LET):
            term = Application(term, self.parse_expr())
        return term

    def parse_atom(self):
        token = self.current
        if token.kind == IDENT:
            self.advance()
            return Variable(token.value)
        elif token.kind == NUM:
            self.advance()
            return Number(token.value)
        elif token.kind == STR:
            self.advance()
            return String(token.value)
        elif token.kind == LPAREN:
            self.advance()
            term = self.parse_expr()
            self.expect(RPAREN)
            return term
        elif token.kind == LBRACE:
            return self.parse_list()
        self.error("'{}' has unexpected '{}'", token)

    def parse_list(self):
        self.expect(LBRACE)
        items = []
        while self.current.kind != RBRACE:
            if self.current.kind in (LAM, LET):
                items.append(self.parse_expr())
            else:
                items.append(self.parse_atom())
        self.expect(RBRACE)
        return make_list(items)


def parse(source):
    """Parses one statement of source text."""
    return Parser(Tokenizer(source).tokenize(), source).parse()


def preprocess_line(line, depth=0):
    """Strips the comment and surrounding whitespace from line and returns it along with the bracket nesting depth
    after it, starting from depth. Brackets inside string literals and comments don't count.
    """
    in_string = escaped = False
    for idx, char in enumerate(line):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == "\"":
                in_string = False
        elif char == "\"":
            in_string = True
        elif char == "#":
            line = line[:idx]
            break
        elif char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
    return line.strip(), depth


def split_statements(source):
    """Yields (line number, statement) for every statement in source. A statement ends on the first non-blank,
    non-comment line that brings the bracket nesting depth back to zero (or below).
    """
    buffer, depth, start = [], 0, None
    for line_num, line in enumerate(source.splitlines(), 1):
        line, depth = preprocess_line(line, depth)
        if not line:
            continue

        if start is None:
            start = line_num
        buffer.append(line)

        if depth <= 0:
            yield start, " ".join(buffer)
            buffer, depth, start = [], 0, None

    if buffer:
        yield start, " ".join(buffer)  # unbalanced: let the parser report it
