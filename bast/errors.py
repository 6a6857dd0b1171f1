"""
Exceptions and issue records.

Only the loader raises across its boundary (LoadError). Lowering problems are
recorded as LoweringIssue values and resolution misses are plain return
values, never exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass


class BastError(Exception):
    """Base class for all bast errors."""

    pass


class LoadError(BastError):
    """Raised when inputs cannot be loaded.

    This can happen when:
    - An input path does not exist or cannot be read
    - A package has syntax errors and strict loading is enabled
    """

    def __init__(self, message: str, issues: list[SyntaxIssue] | None = None):
        super().__init__(message)
        self.issues = list(issues or [])


class FrozenStoreError(BastError):
    """Raised on an attempt to modify the IR after lowering completed."""

    pass


class TemplateError(BastError):
    """Raised when a template cannot be loaded or rendered."""

    pass


@dataclass(frozen=True)
class SyntaxIssue:
    """A syntax error reported by the parser for one file."""

    file: str
    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}: {self.message}"


@dataclass(frozen=True)
class LoweringIssue:
    """A node that could not be lowered and was skipped."""

    file: str
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}: {self.message}"
