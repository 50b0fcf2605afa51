"""Tests for the description parser."""

import io
import re

import pytest
from pairing import (
    EPSILON, Rule, PairingSystem, DescriptionParser,
    DescriptionError, DescriptionSyntaxError, DescriptionSemanticError,
    parse, load_system_from_file, load_system_from_text,
)


ABC = "!sigma: a b\n!gamma: a b c\n!rules: [a,b -> c].\n!accept: c\n"


class TestParseSystem:
    """Tests for complete descriptions."""

    def test_basic_description(self):
        """All four sections end up in the system."""
        system = parse(ABC)

        assert system.sigma == ("a", "b")
        assert system.gamma == ("a", "b", "c")
        assert system.rules == (Rule("a", "b", "c"),)
        assert system.accept == ("c",)

    def test_parse_from_stream(self):
        """A readable stream works as well as a string."""
        assert parse(io.StringIO(ABC)) == parse(ABC)

    def test_comments_and_blank_lines(self):
        """Comments and blank lines may appear between sections."""
        system = parse('''
            # header comment
            !sigma: a b     # input symbols

            !gamma: a b c   # working symbols
            !rules:
                [a,b -> c],  # collapse
                [c,c -> c]
                .
            !accept: c
        ''')

        assert system.sigma == ("a", "b")
        assert system.rules == (Rule("a", "b", "c"), Rule("c", "c", "c"))
        assert system.accept == ("c",)

    def test_rules_without_separating_commas(self):
        """Commas between rules are optional."""
        system = parse("!sigma: a\n!gamma: a b\n!rules: [a,a -> b] [b,b -> a].\n!accept: a\n")
        assert len(system.rules) == 2

    def test_empty_ruleset(self):
        """A bare '.' is an empty ruleset."""
        system = parse("!sigma: a\n!gamma: a\n!rules: .\n!accept: a\n")
        assert system.rules == ()

    def test_accept_with_epsilon(self):
        """!eps is allowed in the accept set."""
        system = parse("!sigma: a\n!gamma: a\n!rules: .\n!accept: a !eps\n")
        assert system.accept == ("a", EPSILON)

    def test_accept_line_without_newline(self):
        """The accept line may run to end of input."""
        system = parse("!sigma: a\n!gamma: a\n!rules: .\n!accept: a")
        assert system.accept == ("a",)

    def test_empty_accept_set(self):
        """The accept set may be empty."""
        system = parse("!sigma: a\n!gamma: a\n!rules: .\n!accept:\n")
        assert system.accept == ()

    def test_duplicates_preserved(self):
        """Charsets keep duplicates and order."""
        system = parse("!sigma: b a b\n!gamma: a b\n!rules: .\n!accept: a\n")
        assert system.sigma == ("b", "a", "b")

    def test_special_symbols(self):
        """'@', '.', '(' and ')' are ordinary symbols."""
        system = parse("!sigma: ( ) . @\n!gamma: ( ) . @ 0\n"
                       "!rules: [(,) -> 0], [.,@ -> .].\n!accept: 0 .\n")

        assert system.sigma == ("(", ")", ".", "@")
        assert system.rules == (Rule("(", ")", "0"), Rule(".", "@", "."))
        assert system.accept == ("0", ".")

    def test_load_from_text(self):
        """load_system_from_text and PairingSystem.from_text agree."""
        assert load_system_from_text(ABC) == PairingSystem.from_text(ABC)

    def test_load_from_file(self, tmp_path):
        """Descriptions load from files."""
        path = tmp_path / "abc.pair"
        path.write_text(ABC)

        assert load_system_from_file(path) == parse(ABC)
        assert PairingSystem.from_file(str(path)) == parse(ABC)

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_system_from_file(tmp_path / "missing.pair")


class TestKeywordOrder:
    """Tests for section keyword order."""

    def test_missing_gamma(self):
        """A missing section is a syntax error naming both tokens."""
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            parse("!sigma: a\n!rules: [a,a -> a].\n!accept: a\n")

        assert exc_info.value.expected == "!gamma"
        assert exc_info.value.found == "!rules"

    def test_sections_out_of_order(self):
        """Sections cannot be reordered."""
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            parse("!gamma: a\n!sigma: a\n!rules: .\n!accept: a\n")

        assert exc_info.value.expected == "!sigma"

    def test_missing_accept(self):
        """The accept section is mandatory."""
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            parse("!sigma: a\n!gamma: a\n!rules: .\n")

        assert exc_info.value.expected == "!accept"
        assert exc_info.value.found == "end of input"

    def test_empty_description(self):
        """Empty input fails on the first keyword."""
        with pytest.raises(DescriptionSyntaxError, match="expected '!sigma'"):
            parse("")


class TestCharsetErrors:
    """Tests for charset validation."""

    def test_disallowed_character(self):
        """Characters outside the symbol set are rejected."""
        with pytest.raises(DescriptionSyntaxError, match=re.escape("character '$'")):
            parse("!sigma: a $\n!gamma: a\n!rules: .\n!accept: a\n")

    def test_epsilon_in_sigma(self):
        """!eps only belongs in the accept set."""
        with pytest.raises(DescriptionSyntaxError, match="cannot be used as symbol"):
            parse("!sigma: a !eps\n!gamma: a\n!rules: .\n!accept: a\n")

    def test_epsilon_in_gamma(self):
        """!eps is not a working symbol."""
        with pytest.raises(DescriptionSyntaxError):
            parse("!sigma: a\n!gamma: a !eps\n!rules: .\n!accept: a\n")

    def test_dash_is_not_a_symbol(self):
        """'-' always starts an arrow."""
        with pytest.raises(DescriptionSyntaxError, match="unexpected token"):
            parse("!sigma: a -\n!gamma: a\n!rules: .\n!accept: a\n")


class TestSemanticErrors:
    """Tests for system invariants."""

    def test_empty_alphabet(self):
        """Sigma must not be empty."""
        with pytest.raises(DescriptionSemanticError, match="empty alphabet"):
            parse("!sigma:\n!gamma: a\n!rules: .\n!accept: a\n")

    def test_gamma_must_extend_sigma(self):
        """Every Sigma symbol must be in Gamma."""
        with pytest.raises(DescriptionSemanticError, match="gamma must extend sigma") as exc_info:
            parse("!sigma: a b\n!gamma: a c\n!rules: .\n!accept: a\n")

        assert exc_info.value.line == 2

    def test_accept_within_gamma(self):
        """Accept symbols must be in Gamma."""
        with pytest.raises(DescriptionSemanticError, match="accept set must be within gamma"):
            parse("!sigma: a\n!gamma: a b\n!rules: .\n!accept: a z\n")

    def test_rule_symbol_outside_gamma(self):
        """Each rule symbol must be in Gamma."""
        for rules in ("[z,a -> a]", "[a,z -> a]", "[a,a -> z]"):
            with pytest.raises(DescriptionSemanticError, match="only symbols in gamma"):
                parse(f"!sigma: a\n!gamma: a\n!rules: {rules}.\n!accept: a\n")

    def test_epsilon_in_rule(self):
        """!eps is never a rule symbol."""
        with pytest.raises(DescriptionSemanticError):
            parse("!sigma: a\n!gamma: a\n!rules: [a,a -> !eps].\n!accept: a\n")

    def test_errors_are_value_errors(self):
        """Both kinds share a ValueError base."""
        assert issubclass(DescriptionSyntaxError, DescriptionError)
        assert issubclass(DescriptionSemanticError, DescriptionError)
        assert issubclass(DescriptionError, ValueError)


class TestRuleSyntax:
    """Tests for malformed rules."""

    def parse_rules(self, text):
        return DescriptionParser.from_text(text).parse_rules(["a", "b", "c"])

    def test_rules_in_order(self):
        """Rules keep declaration order."""
        rules = self.parse_rules("[a,b -> c], [c,c -> a], [a,b -> a].")
        assert rules == [Rule("a", "b", "c"), Rule("c", "c", "a"), Rule("a", "b", "a")]

    def test_missing_open_bracket(self):
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            self.parse_rules("a,b -> c].")
        assert exc_info.value.expected == "["
        assert exc_info.value.found == "a"

    def test_missing_comma(self):
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            self.parse_rules("[a b -> c].")
        assert exc_info.value.expected == ","
        assert exc_info.value.found == "b"

    def test_missing_arrow(self):
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            self.parse_rules("[a,b c].")
        assert exc_info.value.expected == "->"

    def test_missing_close_bracket(self):
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            self.parse_rules("[a,b -> c .")
        assert exc_info.value.expected == "]"

    def test_missing_terminator(self):
        """Running out of input before '.' is a syntax error."""
        with pytest.raises(DescriptionSyntaxError) as exc_info:
            self.parse_rules("[a,b -> c]")
        assert exc_info.value.found == "end of input"

    def test_punctuation_in_symbol_slot(self):
        """Structural tokens cannot stand for a symbol."""
        with pytest.raises(DescriptionSyntaxError):
            self.parse_rules("[a,] -> c].")


class TestParseCharset:
    """Tests for DescriptionParser.parse_charset."""

    def test_stops_at_line_end(self):
        parser = DescriptionParser.from_text(" a b c\nd")
        assert parser.parse_charset() == ["a", "b", "c"]
        assert parser.parse_charset() == ["d"]

    def test_epsilon_allowed(self):
        parser = DescriptionParser.from_text("!eps a\n")
        assert parser.parse_charset(allow_epsilon=True) == [EPSILON, "a"]
