"""
Rewrite engine for pairing systems.

One reduction step scans the rules in declared order. The first rule whose
pair (x, y) occurs anywhere in the working string wins, and it is applied
at its leftmost occurrence: xy is replaced by z and the string shrinks by
one. Rule order decides first, position second, so with

    !rules: [b,c -> x], [a,b -> y].

the word "abc" reduces to "ax" (rule 0 at position 1), not to "yc".

Reduction stops when no rule applies or fewer than two symbols remain.
The result is EPSILON for an empty final string, otherwise its first
symbol, and the word is accepted when the result is in the accept set.

Usage:
    from pairing import PairingSystem, Evaluator

    system = PairingSystem.from_file("parity.pair")
    evaluation = Evaluator(system)("abab")
    evaluation.accepted          # => True / False
    evaluation.trace.snapshots() # => ["abab", ..., final]
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .system import EPSILON, PairingSystem, Rule, Symbol, format_symbol

logger = logging.getLogger(__name__)

HIGHLIGHT_START = "\033[1;31m"
HIGHLIGHT_END = "\033[0m"


def format_word(word: str) -> str:
    """Display form of a working string; the empty string shows as !eps."""
    return word if word else str(EPSILON)


def select_rule(word: Sequence[str], rules: Sequence[Rule]) -> Optional[Tuple[int, int]]:
    """
    Pick the next rewrite for ``word``.

    Returns:
        (rule_index, position) of the first rule, in declared order, that
        matches an adjacent pair, at its leftmost match; None if no rule
        applies or ``word`` has fewer than two symbols.
    """
    if len(word) < 2:
        return None

    for index, rule in enumerate(rules):
        for position in range(len(word) - 1):
            if word[position] == rule.left and word[position + 1] == rule.right:
                return index, position

    return None


class RewriteStep:
    """A single pair replacement."""

    def __init__(self, rule_index: int, rule: Rule, position: int,
                 before: str, after: str):
        self.rule_index = rule_index
        self.rule = rule
        self.position = position
        self.before = before
        self.after = after

    def highlight(self, start: str = HIGHLIGHT_START, end: str = HIGHLIGHT_END) -> str:
        """The ``before`` string with the rewritten pair wrapped in start/end."""
        p = self.position
        return self.before[:p] + start + self.before[p:p + 2] + end + self.before[p + 2:]

    def __repr__(self) -> str:
        return (f"rule[{self.rule_index}] {self.rule} at {self.position}: "
                f"{format_word(self.before)} → {format_word(self.after)}")

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "rule_index": self.rule_index,
            "rule": self.rule.to_dict(),
            "position": self.position,
            "before": self.before,
            "after": self.after,
        }


class RewriteTrace:
    """
    Every step taken while reducing one word.

    Provides multiple formatting options:
        - format("verbose"): one line per working string, '=> ' between them
        - format("chain"): strings interleaved with the rule applied
        - format("compact"): single line with the rule indices
        - format("rules"): just the rules applied
        - to_dict(): JSON-serializable dictionary
    """

    def __init__(self, initial: str = ""):
        self.steps: List[RewriteStep] = []
        self.initial: str = initial
        self.final: str = initial

    def add_step(self, step: RewriteStep):
        self.steps.append(step)
        self.final = step.after

    def snapshots(self) -> List[str]:
        """The working string before the first step and after every step."""
        return [self.initial] + [step.after for step in self.steps]

    def format(self, style: str = "verbose", color: bool = False) -> str:
        """
        Format the trace in different styles.

        Args:
            style: One of "verbose", "chain", "compact", "rules"
            color: Highlight the rewritten pair with ANSI escapes
                   (verbose style only)
        """
        if style == "compact":
            indices = ", ".join(str(s.rule_index) for s in self.steps)
            return f"{format_word(self.initial)} --[{indices}]--> {format_word(self.final)}"

        elif style == "rules":
            rules = [str(s.rule) for s in self.steps]
            return " -> ".join(rules) if rules else "(no rules applied)"

        elif style == "chain":
            parts = [format_word(self.initial)]
            for step in self.steps:
                parts.append(f"  --({step.rule})-->")
                parts.append(format_word(step.after))
            return "\n".join(parts)

        elif style == "verbose":
            if color:
                rows = [step.highlight() for step in self.steps]
            else:
                rows = [step.before for step in self.steps]
            rows.append(self.final)
            return "\n".join(("   " if i == 0 else "=> ") + row for i, row in enumerate(rows))

        raise ValueError(f"Unknown trace style: {style}. "
                         "Options: verbose, chain, compact, rules")

    def __repr__(self) -> str:
        return self.format("chain")

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        """Iterate over rewrite steps."""
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any rewriting was done."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        """Convert trace to dictionary for JSON serialization."""
        return {
            "initial": self.initial,
            "final": self.final,
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }

    def rule_counts(self) -> Dict[int, int]:
        """Count how many times each rule index was applied."""
        counts: Dict[int, int] = {}
        for step in self.steps:
            counts[step.rule_index] = counts.get(step.rule_index, 0) + 1
        return counts


class Verdict(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Evaluation:
    """Outcome of evaluating one word: trace, residual symbol and verdict."""

    def __init__(self, word: str, trace: RewriteTrace, result: Optional[Symbol],
                 verdict: Verdict, invalid_symbols: Optional[List[str]] = None):
        self.word = word
        self.trace = trace
        self.result = result
        self.verdict = verdict
        self.invalid_symbols = invalid_symbols or []

    @property
    def accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPTED

    @property
    def valid(self) -> bool:
        """False when the word used symbols outside Sigma and was not reduced."""
        return not self.invalid_symbols

    @property
    def stuck(self) -> bool:
        """True when reduction stopped with more than one symbol left."""
        return self.valid and len(self.trace.final) > 1

    def format(self, trace: bool = True, color: bool = False) -> str:
        """Human-readable report of the evaluation."""
        if not self.valid:
            bad = ", ".join(repr(c) for c in self.invalid_symbols)
            return f"error: input string not valid: must have sigma as alphabet ({bad})."

        lines = []
        if trace:
            lines.append(self.trace.format("verbose", color=color))
            lines.append("")
        final = self.trace.final
        lines.append("no more rules applicable.")
        if self.accepted:
            lines.append(f"the input is accepted as '{final}' is in A.")
        else:
            lines.append(f"the input is rejected as '{final}' is not in A.")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": self.word,
            "valid": self.valid,
            "invalid_symbols": list(self.invalid_symbols),
            "trace": self.trace.to_dict(),
            "result": None if self.result is None else format_symbol(self.result),
            "verdict": self.verdict.value,
            "stuck": self.stuck,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __repr__(self) -> str:
        return f"Evaluation({self.word!r} -> {self.trace.final!r}, {self.verdict.value})"


class Evaluator:
    """
    Reduces words under a PairingSystem.

    The system is only read, so one Evaluator (or several) may share it;
    every call works on its own copy of the word.

    Args:
        system: The parsed pairing system
        strict: If True, a reduction that gets stuck with more than one
            symbol is always rejected. By default only the first symbol of
            such a string is checked against the accept set.
    """

    def __init__(self, system: PairingSystem, strict: bool = False):
        self.system = system
        self.strict = strict
        # First rule per pair; later duplicates can never be selected
        first_rule: Dict[Tuple[str, str], int] = {}
        for index, rule in enumerate(system.rules):
            first_rule.setdefault((rule.left, rule.right), index)
        self._candidates = sorted(first_rule.values())

    def select(self, word: Sequence[str]) -> Optional[Tuple[int, int]]:
        """Same choice as select_rule(), using the pair index."""
        if len(word) < 2:
            return None

        pairs = set(zip(word, word[1:]))
        rules = self.system.rules
        for index in self._candidates:
            rule = rules[index]
            if (rule.left, rule.right) in pairs:
                for position in range(len(word) - 1):
                    if word[position] == rule.left and word[position + 1] == rule.right:
                        return index, position
        return None

    def reduce(self, word: str) -> RewriteTrace:
        """Apply rules until none matches; return the full trace."""
        trace = RewriteTrace(word)
        working = list(word)

        choice = self.select(working)
        while choice is not None:
            index, position = choice
            rule = self.system.rules[index]
            before = "".join(working)
            working[position:position + 2] = [rule.replacement]
            after = "".join(working)
            logger.debug("rule[%d] %s at %d: %r -> %r", index, rule, position, before, after)
            trace.add_step(RewriteStep(index, rule, position, before, after))
            choice = self.select(working)

        return trace

    def decide(self, final: str) -> Tuple[Symbol, Verdict]:
        """Residual symbol and verdict for a fully reduced string."""
        result: Symbol = final[0] if final else EPSILON
        accepted = self.system.accepts_symbol(result)
        if self.strict and len(final) > 1:
            accepted = False
        return result, Verdict.ACCEPTED if accepted else Verdict.REJECTED

    def evaluate(self, word: str) -> Evaluation:
        """
        Reduce ``word`` and decide membership.

        Words containing symbols outside Sigma are not reduced; the
        returned Evaluation has ``valid == False`` and is rejected.
        """
        invalid = self.system.invalid_symbols(word)
        if invalid:
            logger.debug("rejecting %r: symbols outside sigma %s", word, invalid)
            return Evaluation(word, RewriteTrace(word), None, Verdict.REJECTED, invalid)

        trace = self.reduce(word)
        result, verdict = self.decide(trace.final)
        logger.debug("%r reduced to %r in %d steps: %s",
                     word, trace.final, len(trace), verdict.value)
        return Evaluation(word, trace, result, verdict)

    def __call__(self, word: str) -> Evaluation:
        return self.evaluate(word)

    def __repr__(self) -> str:
        return f"Evaluator({self.system!r}, strict={self.strict})"


def reduce(system: PairingSystem, word: str) -> RewriteTrace:
    """Reduce ``word`` under ``system`` and return the trace."""
    return Evaluator(system).reduce(word)


def evaluate(system: PairingSystem, word: str, strict: bool = False) -> Evaluation:
    """Evaluate ``word`` under ``system``."""
    return Evaluator(system, strict=strict).evaluate(word)
