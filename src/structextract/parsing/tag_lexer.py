"""Lexer for field tag strings (``key:"value,opt" other:"value"``)."""

import ply.lex as lex

from structextract.errors import TagSyntaxError


class TagLexer:
    """Lexer for tokenizing field tag strings."""

    tokens = [
        "KEY",
        "COLON",
        "STRING",
    ]

    t_COLON = r":"

    # Pairs are separated by spaces
    t_ignore = " \t\r\n"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"(?:[^"\\\n]|\\.)*"'
        t.value = unquote(t.value)
        return t

    def t_KEY(self, t: lex.LexToken) -> lex.LexToken:
        r'[^\x00-\x20:"\x7f]+'
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise TagSyntaxError(
            f"Illegal character {t.value[0]!r} at position {t.lexpos} in tag"
        )

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
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


_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
}


def unquote(quoted: str) -> str:
    """Strip the surrounding quotes and resolve backslash escapes."""
    body = quoted[1:-1]
    if "\\" not in body:
        return body

    out: list[str] = []
    chars = iter(body)
    for ch in chars:
        if ch == "\\":
            escaped = next(chars)
            out.append(_ESCAPES.get(escaped, escaped))
        else:
            out.append(ch)
    return "".join(out)
