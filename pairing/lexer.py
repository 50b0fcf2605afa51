"""
Tokenizer for the pairing system description language.

Token classes:
    [ ] , .            punctuation
    ->                 ARROW
    !sigma: !gamma:    section keywords
    !rules: !accept:
    !eps               the empty-string symbol
    end of line        only reported when asked for (charset lines)
    end of input       EOF
    anything else      a single literal character (CHAR)

A ``#`` starts a comment running to the end of the line. The newline that
ends a comment is left in place, so a commented charset line still ends.

All cursor state lives in a LexerState, one per source; nothing is shared
between sources.
"""

import io
from enum import Enum
from typing import List, NamedTuple, TextIO, Union

from .errors import DescriptionSyntaxError


class TokenKind(Enum):
    CHAR = "char"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    DOT = "."
    ARROW = "->"
    SIGMA = "!sigma"
    GAMMA = "!gamma"
    RULES = "!rules"
    ACCEPT = "!accept"
    EPSILON = "!eps"
    LINE_END = "end of line"
    EOF = "end of input"


KEYWORDS = {
    "sigma": TokenKind.SIGMA,
    "gamma": TokenKind.GAMMA,
    "rules": TokenKind.RULES,
    "accept": TokenKind.ACCEPT,
}

PUNCTUATION = {
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
}


class Token(NamedTuple):
    kind: TokenKind
    text: str
    line: int

    def readable(self) -> str:
        """Spelling used in diagnostics."""
        if self.kind is TokenKind.CHAR:
            return self.text
        return self.kind.value


class LexerState:
    """
    Cursor over one description source.

    Holds the source stream, one character of lookahead and the current
    line number. Create one per source and pull tokens with next_token().

    Example:
        state = LexerState.from_text("!sigma: a b\\n")
        state.next_token().kind                         # => TokenKind.SIGMA
        state.next_token(stop_at_line_end=True).text    # => "a"
    """

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.lookahead = " "
        self.line = 1

    @classmethod
    def from_text(cls, text: str) -> 'LexerState':
        return cls(io.StringIO(text))

    def _advance(self) -> str:
        # '' marks end of input
        if self.lookahead == "\n":
            self.line += 1
        self.lookahead = self.stream.read(1)
        return self.lookahead

    def _at_space(self) -> bool:
        return self.lookahead != "" and self.lookahead.isspace()

    def next_token(self, stop_at_line_end: bool = False) -> Token:
        """
        Return the next token.

        Args:
            stop_at_line_end: If True, a newline is returned as a LINE_END
                token instead of being skipped as whitespace.

        Raises:
            DescriptionSyntaxError: on '-' not followed by '>', on a '!word'
                without a trailing ':', or on an unknown keyword.
        """
        while True:
            if stop_at_line_end:
                while self.lookahead != "\n" and self._at_space():
                    self._advance()
                if self.lookahead == "\n":
                    line = self.line
                    self.line += 1
                    self.lookahead = " "
                    return Token(TokenKind.LINE_END, "\n", line)
            else:
                while self._at_space():
                    self._advance()

            if self.lookahead != "#":
                break
            while self._advance() not in ("\n", ""):
                pass

        line = self.line

        if self.lookahead == "":
            return Token(TokenKind.EOF, "", line)

        if self.lookahead == "-":
            following = self._advance()
            if following != ">":
                raise DescriptionSyntaxError(f"unexpected token '-{following}'", line)
            self.lookahead = " "
            return Token(TokenKind.ARROW, "->", line)

        if self.lookahead == "!":
            return self._keyword(line)

        char = self.lookahead
        self._advance()
        kind = PUNCTUATION.get(char, TokenKind.CHAR)
        return Token(kind, char, line)

    def _keyword(self, line: int) -> Token:
        word = ""
        while self._advance().isalpha():
            word += self.lookahead

        if word == "eps":
            return Token(TokenKind.EPSILON, "!eps", line)

        if self.lookahead != ":":
            raise DescriptionSyntaxError(f"expected ':' after '!{word}'", line)
        self._advance()

        if word not in KEYWORDS:
            raise DescriptionSyntaxError(f"unrecognized identifier '!{word}'", line)
        return Token(KEYWORDS[word], f"!{word}:", line)


def next_token(state: LexerState, stop_at_line_end: bool = False) -> Token:
    """Pull the next token from ``state``."""
    return state.next_token(stop_at_line_end)


def tokenize(source: Union[str, TextIO], stop_at_line_end: bool = False) -> List[Token]:
    """
    Drain a whole source into a token list, EOF token included.

    Mostly useful for debugging descriptions:
        [t.readable() for t in tokenize("[a,b -> c].")]
        # => ['[', 'a', ',', 'b', '->', 'c', ']', '.', 'end of input']
    """
    state = LexerState.from_text(source) if isinstance(source, str) else LexerState(source)
    tokens = []
    while True:
        token = state.next_token(stop_at_line_end)
        tokens.append(token)
        if token.kind is TokenKind.EOF:
            return tokens
