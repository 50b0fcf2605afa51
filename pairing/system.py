"""
Data model for pairing systems.

A pairing system is the tuple (Sigma, Gamma, R, A):

    Sigma   input alphabet, the symbols an evaluated word may contain
    Gamma   working alphabet, a superset of Sigma
    R       ordered rewrite rules [x, y -> z]
    A       accept set, symbols of Gamma plus optionally !eps

Symbols are single characters from ALLOWED_SYMBOLS, or the EPSILON marker
standing for the empty string.
"""

import json
import string
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Sequence, Tuple, Union


ALLOWED_SYMBOLS = frozenset(string.ascii_letters + string.digits + "@-.()")


class _Epsilon:
    """
    Singleton for the empty-string symbol.

    Spelled ``!eps`` in descriptions. It never appears inside a working
    string; it only stands for the empty result of a reduction.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EPSILON"

    def __str__(self) -> str:
        return "!eps"

    def __reduce__(self):
        return (_Epsilon, ())


EPSILON = _Epsilon()

# A symbol is a one-character string or EPSILON
Symbol = Union[str, _Epsilon]


def is_valid_symbol(char: Any) -> bool:
    """True if ``char`` may be written as a bare symbol."""
    return isinstance(char, str) and len(char) == 1 and char in ALLOWED_SYMBOLS


def is_subset(subset: Iterable[Symbol], superset: Iterable[Symbol]) -> bool:
    """
    Check subset ⊆ superset, with EPSILON implicitly present in superset.

    Examples:
        is_subset(["a", EPSILON], ["a", "b"])  -> True
        is_subset(["c"], ["a", "b"])           -> False
    """
    members = set(superset)
    members.add(EPSILON)
    return all(symbol in members for symbol in subset)


def format_symbol(symbol: Symbol) -> str:
    """Description spelling of a symbol (``!eps`` for EPSILON)."""
    return str(symbol)


def format_charset(symbols: Sequence[Symbol]) -> str:
    """Format a charset as ``{ a, b, c }``."""
    if not symbols:
        return "{  }"
    return "{ " + ", ".join(format_symbol(s) for s in symbols) + " }"


class Rule(NamedTuple):
    """Rewrite of the adjacent pair (left, right) into ``replacement``."""

    left: str
    right: str
    replacement: str

    def __str__(self) -> str:
        return f"[{self.left}, {self.right} -> {self.replacement}]"

    def to_description(self) -> str:
        return f"[{self.left},{self.right} -> {self.replacement}]"

    def to_dict(self) -> Dict[str, str]:
        return {"left": self.left, "right": self.right, "replacement": self.replacement}


class PairingSystem:
    """
    An immutable, parsed pairing system.

    Build one with ``PairingSystem.from_text`` or ``PairingSystem.from_file``;
    the constructor does not validate, the parser does.

    Example:
        system = PairingSystem.from_text('''
            !sigma: a b
            !gamma: a b c
            !rules: [a,b -> c].
            !accept: c
        ''')
        system.sigma   # => ('a', 'b')
        system.rules   # => (Rule(left='a', right='b', replacement='c'),)
    """

    __slots__ = ('_sigma', '_gamma', '_rules', '_accept')

    def __init__(self, sigma: Iterable[Symbol], gamma: Iterable[Symbol],
                 rules: Iterable[Rule], accept: Iterable[Symbol]):
        self._sigma: Tuple[Symbol, ...] = tuple(sigma)
        self._gamma: Tuple[Symbol, ...] = tuple(gamma)
        self._rules: Tuple[Rule, ...] = tuple(Rule(*r) for r in rules)
        self._accept: Tuple[Symbol, ...] = tuple(accept)

    @property
    def sigma(self) -> Tuple[Symbol, ...]:
        return self._sigma

    @property
    def gamma(self) -> Tuple[Symbol, ...]:
        return self._gamma

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    @property
    def accept(self) -> Tuple[Symbol, ...]:
        return self._accept

    def accepts_symbol(self, symbol: Symbol) -> bool:
        """True if ``symbol`` (possibly EPSILON) is listed in the accept set."""
        return symbol in self._accept

    def invalid_symbols(self, word: str) -> List[str]:
        """Characters of ``word`` outside Sigma, in order of appearance."""
        alphabet = set(self._sigma)
        seen: List[str] = []
        for char in word:
            if char not in alphabet and char not in seen:
                seen.append(char)
        return seen

    def is_word(self, word: str) -> bool:
        """True if every character of ``word`` belongs to Sigma."""
        return not self.invalid_symbols(word)

    # ------------------------------------------------------------
    # Display and serialization
    # ------------------------------------------------------------

    def format(self) -> str:
        """
        Multi-line summary of the system:

            Sigma = { a, b }
            Gamma = { a, b, c }
                R = (
                     [a, b -> c],
                    )
                A = { c }
        """
        lines = [
            f"Sigma = {format_charset(self._sigma)}",
            f"Gamma = {format_charset(self._gamma)}",
            "    R = (",
        ]
        for rule in self._rules:
            lines.append(f"         {rule},")
        lines.append("        )")
        lines.append(f"    A = {format_charset(self._accept)}")
        return "\n".join(lines)

    def list_rules(self) -> List[str]:
        """Rules as ``index: [x, y -> z]`` strings, in priority order."""
        return [f"{i}: {rule}" for i, rule in enumerate(self._rules)]

    def to_description(self) -> str:
        """Render description text that parses back to an equal system."""
        rules = ", ".join(rule.to_description() for rule in self._rules)
        return "\n".join([
            "!sigma: " + " ".join(format_symbol(s) for s in self._sigma),
            "!gamma: " + " ".join(format_symbol(s) for s in self._gamma),
            f"!rules: {rules} ." if rules else "!rules: .",
            "!accept: " + " ".join(format_symbol(s) for s in self._accept),
        ]) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "sigma": [format_symbol(s) for s in self._sigma],
            "gamma": [format_symbol(s) for s in self._gamma],
            "rules": [rule.to_dict() for rule in self._rules],
            "accept": [format_symbol(s) for s in self._accept],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    # ------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------

    @classmethod
    def from_text(cls, text: str) -> 'PairingSystem':
        """Parse a description from a string."""
        from .parser import load_system_from_text
        return load_system_from_text(text)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'PairingSystem':
        """Parse a description file."""
        from .parser import load_system_from_file
        return load_system_from_file(path)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PairingSystem):
            return NotImplemented
        return (self._sigma == other._sigma and self._gamma == other._gamma
                and self._rules == other._rules and self._accept == other._accept)

    def __hash__(self) -> int:
        return hash((self._sigma, self._gamma, self._rules, self._accept))

    def __repr__(self) -> str:
        return (f"PairingSystem(sigma={len(self._sigma)}, gamma={len(self._gamma)}, "
                f"rules={len(self._rules)}, accept={len(self._accept)})")
