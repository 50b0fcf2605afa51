#!/usr/bin/env python3
"""
Pairing System Command-Line Interface

Loads a description file, then evaluates words interactively, one-shot,
or from a pipe.

Usage:
    pairing parity.pair                  # Start REPL
    pairing parity.pair -e ab -e ba      # Evaluate words and exit
    echo ab | pairing parity.pair        # Filter mode
    pairing parity.pair -e ab --json     # Machine-readable output

Input words:
    A word is a string over Sigma. A lone '!' is the empty string.

REPL Commands:
    :help              Show help
    :system            Show the parsed system
    :rules             List rules in priority order
    :trace on|off      Toggle printing of intermediate steps
    :strict on|off     Reject every word that gets stuck with 2+ symbols
    :color on|off      Toggle highlighting of the rewritten pair
    :quit              Exit
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .engine import Evaluation, Evaluator
from .errors import DescriptionError
from .parser import load_system_from_file
from .system import PairingSystem

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False

logger = logging.getLogger(__name__)

EMPTY_INPUT_MARKER = "!"
HISTORY_FILE = Path.home() / ".pairing_history"
PROMPT = "pairing> "

_ON = ("on", "true", "1")
_OFF = ("off", "false", "0")


def color_supported(stream=None) -> bool:
    """ANSI highlighting is used only on a terminal and without NO_COLOR."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def read_word(line: str) -> str:
    """Turn an input line into a word; '!' stands for the empty string."""
    word = line.strip()
    return "" if word == EMPTY_INPUT_MARKER else word


class PairingREPL:
    """Interactive REPL over one parsed pairing system."""

    def __init__(self, system: PairingSystem, trace: bool = True,
                 strict: bool = False, color: bool = False):
        self.system = system
        self.evaluator = Evaluator(system, strict=strict)
        self.trace = trace
        self.color = color
        self.running = True

        if HAS_READLINE:
            try:
                readline.read_history_file(HISTORY_FILE)
            except (FileNotFoundError, OSError):
                pass
            readline.set_history_length(1000)

    @property
    def strict(self) -> bool:
        return self.evaluator.strict

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE:
            try:
                readline.write_history_file(HISTORY_FILE)
            except OSError as e:
                logger.debug("could not save history: %s", e)

    def _toggle(self, current: bool, arg: str) -> bool:
        if arg.lower() in _ON:
            return True
        if arg.lower() in _OFF:
            return False
        return not current

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd in ("quit", "exit", "q"):
            self.running = False
            return None

        elif cmd == "system":
            return self.system.format()

        elif cmd == "rules":
            rules = self.system.list_rules()
            if not rules:
                return "No rules defined"
            return "\n".join(rules)

        elif cmd == "trace":
            self.trace = self._toggle(self.trace, arg)
            return f"Tracing {'enabled' if self.trace else 'disabled'}"

        elif cmd == "strict":
            self.evaluator.strict = self._toggle(self.evaluator.strict, arg)
            return f"Strict acceptance {'enabled' if self.strict else 'disabled'}"

        elif cmd == "color":
            self.color = self._toggle(self.color, arg)
            return f"Highlighting {'enabled' if self.color else 'disabled'}"

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return f"""Pairing REPL Commands:
  :help              Show this help
  :system            Show the parsed system
  :rules             List rules in priority order
  :trace on|off      Toggle printing of intermediate steps
  :strict on|off     Reject every word that gets stuck with 2+ symbols
  :color on|off      Toggle highlighting of the rewritten pair
  :quit              Exit

Input:
  word               Evaluate a word over Sigma
  {EMPTY_INPUT_MARKER}                  Evaluate the empty string
"""

    def evaluate(self, line: str) -> Evaluation:
        return self.evaluator.evaluate(read_word(line))

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        Returns the result to print, or None.
        """
        line = line.strip()

        if not line:
            return None

        if line.startswith(":"):
            return self.handle_command(line)

        evaluation = self.evaluate(line)
        return evaluation.format(trace=self.trace, color=self.color)

    def run(self):
        """Run the REPL loop."""
        print("Type :help for help, :quit to exit")
        print(f"Insert an input string ({EMPTY_INPUT_MARKER} for the empty string)")
        print()

        while self.running:
            try:
                line = input(PROMPT)
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

            result = self.process_line(line)
            if result:
                print(result)
                print()

        self.save_history()


class InputRunner:
    """Evaluates words outside the REPL."""

    def __init__(self, repl: PairingREPL, as_json: bool = False):
        self.repl = repl
        self.as_json = as_json

    def emit(self, evaluation: Evaluation) -> None:
        if self.as_json:
            print(evaluation.to_json())
        elif not evaluation.valid:
            print(evaluation.format(), file=sys.stderr)
        else:
            print(evaluation.format(trace=self.repl.trace, color=self.repl.color))
            print()

    def run_words(self, lines: List[str]) -> int:
        """
        Evaluate each line as a word.

        Returns:
            Exit code: 0 when every word was accepted, 1 when any was
            rejected, 2 when any word used symbols outside Sigma.
        """
        code = 0
        for line in lines:
            evaluation = self.repl.evaluate(line)
            self.emit(evaluation)
            if not evaluation.valid:
                code = 2
            elif not evaluation.accepted and code == 0:
                code = 1
        return code

    def run_stdin(self) -> int:
        """Read words from stdin, one per line; blank lines are skipped."""
        return self.run_words([line for line in sys.stdin if line.strip()])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pairing",
        description="Evaluate words against a pairing system description",
        epilog="Examples:\n"
               "  pairing parity.pair                 Start REPL\n"
               "  pairing parity.pair -e ab -e '!'    Evaluate words\n"
               "  echo ab | pairing parity.pair       Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "description",
        help="Pairing system description file"
    )

    parser.add_argument(
        "-e", "--input",
        action="append",
        default=[],
        metavar="WORD",
        help=f"Evaluate WORD and exit (repeatable; '{EMPTY_INPUT_MARKER}' is the empty string)"
    )

    parser.add_argument(
        "-t", "--trace",
        dest="trace",
        action="store_true",
        default=True,
        help="Show intermediate strings (default)"
    )

    parser.add_argument(
        "--no-trace",
        dest="trace",
        action="store_false",
        help="Only show the verdict"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject words that get stuck with more than one symbol"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON object per evaluated word"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable highlighting of the rewritten pair"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print the parsed system"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log parsing and every rewrite step"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        system = load_system_from_file(args.description)
    except FileNotFoundError:
        print(f"error: file not found: {args.description}", file=sys.stderr)
        sys.exit(1)
    except DescriptionError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json and not args.input and sys.stdin.isatty():
        print("error: --json needs -e or piped input", file=sys.stderr)
        sys.exit(1)

    color = not args.no_color and not args.json and color_supported()
    repl = PairingREPL(system, trace=args.trace, strict=args.strict, color=color)
    runner = InputRunner(repl, as_json=args.json)

    if not args.quiet and not args.json:
        print("Pairing system was successfully parsed:\n")
        print(system.format())
        print()

    if args.input:
        sys.exit(runner.run_words(args.input))

    elif not sys.stdin.isatty():
        sys.exit(runner.run_stdin())

    else:
        repl.run()


if __name__ == "__main__":
    main()
