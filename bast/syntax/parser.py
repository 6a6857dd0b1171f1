"""
Go syntax front end.

Uses tree-sitter and tree-sitter-go to parse Go source into syntax trees.
The grammar is not bast's concern: bast consumes the trees and only reports
the syntax errors the parser found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import tree_sitter_go as ts_go
from tree_sitter import Language, Node, Parser, Tree

from ..errors import SyntaxIssue

if TYPE_CHECKING:
    from ..analyzer.types import ScopeLike

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(ts_go.language())


@dataclass
class SourceFile:
    """A parsed Go source file."""

    path: str = ""
    source: bytes = b""
    tree: Tree | None = field(default=None, repr=False)
    issues: list[SyntaxIssue] = field(default_factory=list)

    @property
    def root(self) -> Node | None:
        return self.tree.root_node if self.tree is not None else None


@dataclass
class PackageSource:
    """The parsed files of one Go package, ready to be lowered."""

    # Short package name from the package clause.
    name: str = ""
    # Import path, the identity of the package.
    path: str = ""
    files: list[SourceFile] = field(default_factory=list)
    # Optional type scope; one is derived from declarations if absent.
    scope: ScopeLike | None = field(default=None, repr=False)
    # Input errors not tied to a parsed file.
    errors: list[SyntaxIssue] = field(default_factory=list)

    @property
    def issues(self) -> list[SyntaxIssue]:
        """All input errors of the package, file syntax errors included."""
        issues = list(self.errors)
        for source_file in self.files:
            issues.extend(source_file.issues)
        return issues


class GoParser:
    """Parses Go source files with tree-sitter."""

    def __init__(self):
        self._parser = Parser(GO_LANGUAGE)

    def parse(self, source: str | bytes, path: str = "") -> SourceFile:
        """
        Parse Go source code.

        Args:
            source: Go source code
            path: File path used in reported issues

        Returns:
            SourceFile holding the tree and any syntax issues found
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        tree = self._parser.parse(source)
        issues = []
        if tree.root_node.has_error:
            issues = [_issue(path, node) for node in find_errors(tree.root_node)]
            logger.debug("Parsed %s with %d syntax error(s)", path or "<source>", len(issues))
        return SourceFile(path=path, source=source, tree=tree, issues=issues)

    def parse_file(self, path: str | Path) -> SourceFile:
        """Read and parse the Go file at path."""
        path = Path(path)
        return self.parse(path.read_bytes(), str(path))


def find_errors(node: Node) -> list[Node]:
    """Find all ERROR and MISSING nodes in the tree."""
    errors = []
    if node.type == "ERROR" or node.is_missing:
        errors.append(node)
        return errors
    for child in node.children:
        if child.has_error or child.is_missing:
            errors.extend(find_errors(child))
    return errors


def _issue(path: str, node: Node) -> SyntaxIssue:
    row, column = node.start_point[0], node.start_point[1]
    if node.is_missing:
        message = f"missing {node.type}"
    else:
        snippet = node_text(node)[:40].replace("\n", " ")
        message = f"syntax error near '{snippet}'"
    return SyntaxIssue(file=path, line=row + 1, column=column + 1, message=message)


def node_text(node: Node | None) -> str:
    """Return the source text of node, or an empty string for None."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")
