"""
Parser for pairing system descriptions.

Grammar (every section mandatory, in this order):

    system  := !sigma: charset !gamma: charset !rules: ruleset !accept: charset
    charset := symbol* <end of line>
    ruleset := rule* '.'
    rule    := '[' symbol ',' symbol '->' symbol ']'

Example description:

    # pairs ab collapse to c
    !sigma: a b
    !gamma: a b c
    !rules: [a,b -> c], [c,c -> c].
    !accept: c !eps

Each section is checked as soon as it has been read:
    - Sigma must be non-empty
    - Sigma must be a subset of Gamma
    - rule symbols must belong to Gamma
    - the accept set must be a subset of Gamma (plus !eps)
"""

import io
import logging
from pathlib import Path
from typing import List, Sequence, TextIO, Union

from .errors import DescriptionSemanticError, DescriptionSyntaxError
from .lexer import LexerState, Token, TokenKind
from .system import EPSILON, PairingSystem, Rule, Symbol, is_subset, is_valid_symbol

logger = logging.getLogger(__name__)

# Tokens that can stand for a symbol. '.' doubles as the ruleset terminator.
_SYMBOL_KINDS = (TokenKind.CHAR, TokenKind.DOT)


class DescriptionParser:
    """
    Recursive-descent parser over a single LexerState.

    Example:
        parser = DescriptionParser.from_text(text)
        system = parser.parse_system()
    """

    def __init__(self, state: LexerState):
        self.state = state

    @classmethod
    def from_text(cls, text: str) -> 'DescriptionParser':
        return cls(LexerState.from_text(text))

    @classmethod
    def from_stream(cls, stream: TextIO) -> 'DescriptionParser':
        return cls(LexerState(stream))

    def _next(self, stop_at_line_end: bool = False) -> Token:
        return self.state.next_token(stop_at_line_end)

    def expect(self, kind: TokenKind) -> Token:
        """Consume the next token, failing unless it is of ``kind``."""
        token = self._next()
        if token.kind is not kind:
            raise DescriptionSyntaxError(
                line=token.line, expected=kind.value, found=token.readable())
        return token

    def parse_charset(self, allow_epsilon: bool = False) -> List[Symbol]:
        """
        Read symbols up to the end of the current line (or of the input).

        Args:
            allow_epsilon: accept ``!eps`` as a member (accept set only)
        """
        symbols: List[Symbol] = []
        token = self._next(stop_at_line_end=True)
        while token.kind not in (TokenKind.LINE_END, TokenKind.EOF):
            if allow_epsilon and token.kind is TokenKind.EPSILON:
                symbols.append(EPSILON)
            elif token.kind in _SYMBOL_KINDS and is_valid_symbol(token.text):
                symbols.append(token.text)
            else:
                raise DescriptionSyntaxError(
                    f"character '{token.readable()}' cannot be used as symbol", token.line)
            token = self._next(stop_at_line_end=True)
        return symbols

    def _rule_symbol(self, gamma: Sequence[Symbol]) -> str:
        token = self._next()
        if token.kind not in _SYMBOL_KINDS and token.kind is not TokenKind.EPSILON:
            raise DescriptionSyntaxError(
                line=token.line, expected="symbol", found=token.readable())
        if token.kind is TokenKind.EPSILON or token.text not in gamma:
            raise DescriptionSemanticError(
                "only symbols in gamma can be used in rules", token.line)
        return token.text

    def parse_rules(self, gamma: Sequence[Symbol]) -> List[Rule]:
        """Read ``[x,y -> z]`` triples until a bare '.'."""
        rules: List[Rule] = []
        token = self._next()
        while token.kind is not TokenKind.DOT:
            if token.kind is not TokenKind.LBRACKET:
                raise DescriptionSyntaxError(
                    line=token.line, expected="[", found=token.readable())

            left = self._rule_symbol(gamma)
            self.expect(TokenKind.COMMA)
            right = self._rule_symbol(gamma)
            self.expect(TokenKind.ARROW)
            replacement = self._rule_symbol(gamma)
            self.expect(TokenKind.RBRACKET)

            rules.append(Rule(left, right, replacement))
            token = self._next()
            # Separating commas between rules are optional
            if token.kind is TokenKind.COMMA:
                token = self._next()
        return rules

    def parse_system(self) -> PairingSystem:
        """
        Parse a complete description.

        Raises:
            DescriptionSyntaxError: missing or out-of-order section keyword,
                malformed rule, disallowed character
            DescriptionSemanticError: violated system invariant
        """
        keyword = self.expect(TokenKind.SIGMA)
        sigma = self.parse_charset()
        if not sigma:
            raise DescriptionSemanticError("empty alphabet", keyword.line)
        logger.debug("sigma: %s", sigma)

        keyword = self.expect(TokenKind.GAMMA)
        gamma = self.parse_charset()
        if not is_subset(sigma, gamma):
            raise DescriptionSemanticError("gamma must extend sigma", keyword.line)
        logger.debug("gamma: %s", gamma)

        self.expect(TokenKind.RULES)
        rules = self.parse_rules(gamma)
        logger.debug("rules: %d parsed", len(rules))

        keyword = self.expect(TokenKind.ACCEPT)
        accept = self.parse_charset(allow_epsilon=True)
        if not is_subset(accept, gamma):
            raise DescriptionSemanticError("accept set must be within gamma", keyword.line)
        logger.debug("accept: %s", accept)

        system = PairingSystem(sigma, gamma, rules, accept)
        logger.info("parsed pairing system with %d rules", len(system.rules))
        return system


def parse(source: Union[str, TextIO]) -> PairingSystem:
    """
    Parse a description from text or from a readable character stream.

    The stream is consumed from its current position; how it was opened is
    the caller's business.
    """
    if isinstance(source, str):
        source = io.StringIO(source)
    return DescriptionParser.from_stream(source).parse_system()


def load_system_from_text(text: str) -> PairingSystem:
    """Parse description text."""
    return parse(text)


def load_system_from_file(path: Union[str, Path]) -> PairingSystem:
    """Parse a description file."""
    path = Path(path)
    logger.debug("loading description from %s", path)
    with path.open(encoding="utf-8") as stream:
        return parse(stream)
