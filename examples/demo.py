#!/usr/bin/env python3
"""
Pairing System Demonstration

Walks through parsing descriptions, evaluating words, rule priority and
error reporting.
"""

from pathlib import Path

from pairing import (
    PairingSystem, Evaluator, DescriptionError, parse,
)

HERE = Path(__file__).parent


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_basic_usage():
    """Parse a description and evaluate a few words."""
    section("Basic Usage")

    system = PairingSystem.from_file(HERE / "abc.pair")
    print(system.format())
    print()

    evaluator = Evaluator(system)
    for word in ["ab", "ba", ""]:
        evaluation = evaluator(word)
        print(f"  {word or '!':>4} => {evaluation.trace.format('compact')}  "
              f"[{evaluation.verdict.value}]")


def demo_parity():
    """A complete ruleset deciding the parity of 1s."""
    section("Parity")

    evaluator = Evaluator(PairingSystem.from_file(HERE / "parity.pair"))
    for word in ["0110", "111", "10001", "0"]:
        evaluation = evaluator(word)
        print(f"\n  {word}:")
        print(evaluation.trace.format("chain"))
        print(f"  => {evaluation.verdict.value}")


def demo_priority():
    """Rule order decides before position does."""
    section("Rule Priority")

    system = parse('''
        !sigma: a b c
        !gamma: a b c x y
        !rules: [b,c -> x], [a,b -> y].
        !accept: x y
    ''')
    evaluation = Evaluator(system)("abc")
    print("  rules:", ", ".join(str(r) for r in system.rules))
    print("  abc reduces by", evaluation.trace.format("rules"))
    print("  final:", evaluation.trace.final)


def demo_strict():
    """Stuck strings with more than one symbol."""
    section("Stuck Strings")

    system = PairingSystem.from_file(HERE / "brackets.pair")
    for strict in (False, True):
        evaluation = Evaluator(system, strict=strict)("())")
        print(f"  strict={strict!s:5}  ()) -> {evaluation.trace.final}  "
              f"[{evaluation.verdict.value}]")


def demo_errors():
    """Descriptions that fail to parse."""
    section("Errors")

    broken = [
        "!sigma: a\n!rules: [a,a -> a].\n!accept: a\n",
        "!sigma: a b\n!gamma: a\n!rules: .\n!accept: a\n",
        "!sigma: a\n!gamma: a\n!rules: [a,a => a].\n!accept: a\n",
    ]
    for text in broken:
        try:
            parse(text)
        except DescriptionError as e:
            print(f"  {type(e).__name__}: {e}")


if __name__ == "__main__":
    demo_basic_usage()
    demo_parity()
    demo_priority()
    demo_strict()
    demo_errors()
