"""
Exceptions raised while reading a pairing system description.

Both kinds abort the parse; no partially built system is ever returned.
"""

from typing import Optional


class DescriptionError(ValueError):
    """Base class for every description failure."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


class DescriptionSyntaxError(DescriptionError):
    """
    Malformed token stream.

    When raised by an ``expect`` check, ``expected`` and ``found`` hold the
    readable spelling of both tokens.
    """

    def __init__(self, message: Optional[str] = None, line: Optional[int] = None,
                 expected: Optional[str] = None, found: Optional[str] = None):
        self.expected = expected
        self.found = found
        if message is None:
            message = f"expected '{expected}', found '{found}'"
        super().__init__(message, line)


class DescriptionSemanticError(DescriptionError):
    """Well-formed description that violates a system invariant."""
