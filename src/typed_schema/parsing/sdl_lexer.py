"""Lexer for the schema definition language."""

import inspect
import json

import ply.lex as lex


class SDLLexer:
    """Lexer for tokenizing schema definitions."""

    # Reserved keywords
    reserved = {
        "type": "TYPE",
        "interface": "INTERFACE",
        "enum": "ENUM",
        "input": "INPUT",
        "union": "UNION",
        "scalar": "SCALAR",
        "implements": "IMPLEMENTS",
        "true": "TRUE",
        "false": "FALSE",
        "null": "NULL",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "STRING",
        "FLOAT",
        "INTEGER",
        "LBRACE",
        "RBRACE",
        "LBRACKET",
        "RBRACKET",
        "LPAREN",
        "RPAREN",
        "COLON",
        "EQUALS",
        "BANG",
        "AT",
        "AMP",
        "PIPE",
    ] + list(reserved.values())

    # Simple tokens
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_COLON = r":"
    t_EQUALS = r"="
    t_BANG = r"!"
    t_AT = r"@"
    t_AMP = r"&"
    t_PIPE = r"\|"

    # Commas are insignificant, like whitespace
    t_ignore = " \t\r,"

    # Comments
    t_ignore_COMMENT = r"\#[^\n]*"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"""(?:[^"]|"(?!""))*"""|"(?:[^"\\\n]|\\.)*"'
        if t.value.startswith('"""'):
            t.lexer.lineno += t.value.count("\n")
            t.value = inspect.cleandoc(t.value[3:-3])
        else:
            t.value = json.loads(t.value)
        return t

    def t_FLOAT(self, t: lex.LexToken) -> lex.LexToken:
        r"-?\d+(\.\d+([eE][-+]?\d+)?|[eE][-+]?\d+)"
        t.value = float(t.value)
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"-?\d+"
        t.value = int(t.value)
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        # Check if it's a reserved word
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at line {t.lineno}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.lineno = 1
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
