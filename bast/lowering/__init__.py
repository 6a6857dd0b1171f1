"""
Lowering module.

Converts syntax trees into the declaration model.
"""

from __future__ import annotations

from .comments import comment_groups, doc_comments, line_comment
from .lowerer import Lowerer, freeze_package, package_name

__all__ = [
    "Lowerer",
    "comment_groups",
    "doc_comments",
    "freeze_package",
    "line_comment",
    "package_name",
]
