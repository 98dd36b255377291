"""
Source Location (Span) of a textual location description
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Position inside a piece of location notation.

    - Source name, line, column (1-based), plus optional end position
    - Code snippets extracted from the source text when needed (not stored here)
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
