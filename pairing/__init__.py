"""
PAIRING - Pairing System Parser and Evaluator

A pairing system rewrites adjacent symbol pairs until no rule applies,
then accepts or rejects the word by the symbol that remains.

Quick Start:
    from pairing import PairingSystem, Evaluator

    system = PairingSystem.from_text('''
        !sigma: a b
        !gamma: a b c
        !rules: [a,b -> c].
        !accept: c
    ''')

    Evaluator(system)("ab").accepted   # => True

Description Syntax:
    # Comments start with #
    !sigma: <symbols>                 input alphabet, one line
    !gamma: <symbols>                 working alphabet, one line
    !rules: [x,y -> z], [x,y -> z] .  rules, ended by a bare '.'
    !accept: <symbols or !eps>        accept set, one line

Symbols are single ASCII letters, digits, or one of @ . ( )
"""

__version__ = "0.1.0"

from .errors import (
    DescriptionError,
    DescriptionSyntaxError,
    DescriptionSemanticError,
)

from .system import (
    EPSILON,
    ALLOWED_SYMBOLS,
    Symbol,
    Rule,
    PairingSystem,
    is_valid_symbol,
    is_subset,
    format_charset,
)

from .lexer import (
    TokenKind,
    Token,
    LexerState,
    next_token,
    tokenize,
)

from .parser import (
    DescriptionParser,
    parse,
    load_system_from_text,
    load_system_from_file,
)

from .engine import (
    select_rule,
    RewriteStep,
    RewriteTrace,
    Verdict,
    Evaluation,
    Evaluator,
    reduce,
    evaluate,
)

# Public API
__all__ = [
    # Version
    "__version__",
    # Errors
    "DescriptionError",
    "DescriptionSyntaxError",
    "DescriptionSemanticError",
    # Data model
    "EPSILON",
    "ALLOWED_SYMBOLS",
    "Symbol",
    "Rule",
    "PairingSystem",
    "is_valid_symbol",
    "is_subset",
    "format_charset",
    # Lexer
    "TokenKind",
    "Token",
    "LexerState",
    "next_token",
    "tokenize",
    # Parser
    "DescriptionParser",
    "parse",
    "load_system_from_text",
    "load_system_from_file",
    # Engine
    "select_rule",
    "RewriteStep",
    "RewriteTrace",
    "Verdict",
    "Evaluation",
    "Evaluator",
    "reduce",
    "evaluate",
]
