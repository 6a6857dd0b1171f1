"""
Comment extraction.

Groups comment nodes the way Go does: comments with no code and no empty
line between them form one group. A doc comment is the group ending on the
line right above a node; a line comment starts on the line a node ends on.
"""

from __future__ import annotations

from tree_sitter import Node

from ..syntax.parser import node_text


def comment_groups(root: Node) -> tuple[tuple[str, ...], ...]:
    """Return all comment groups of a tree in source order.

    A comment starting on the line where code ends is a group of its own.
    """
    groups: list[list[str]] = []
    current: list[str] = []
    prev_comment_end = -2
    code_end = -1
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "comment":
            start = node.start_point[0]
            if current and (start - prev_comment_end > 1 or start == code_end):
                groups.append(current)
                current = []
            current.append(node_text(node))
            prev_comment_end = node.end_point[0]
            if start == code_end:
                groups.append(current)
                current = []
            continue
        if node.child_count == 0:
            # Code between comments ends the group.
            if node.end_byte > node.start_byte:
                if current:
                    groups.append(current)
                    current = []
                if node_text(node).strip():
                    code_end = node.end_point[0]
            continue
        stack.extend(reversed(node.children))
    if current:
        groups.append(current)
    return tuple(tuple(group) for group in groups)


def doc_comments(node: Node | None) -> tuple[str, ...]:
    """Return the doc comment lines directly above node."""
    if node is None:
        return ()
    lines: list[Node] = []
    expected_end = node.start_point[0] - 1
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == "comment" and sibling.end_point[0] == expected_end:
        lines.append(sibling)
        expected_end = sibling.start_point[0] - 1
        sibling = sibling.prev_sibling
    # A comment trailing code on its line belongs to that code.
    if lines and sibling is not None and sibling.end_point[0] == lines[-1].start_point[0]:
        lines.pop()
    return tuple(node_text(n) for n in reversed(lines))


def line_comment(node: Node | None) -> tuple[str, ...]:
    """Return the comment trailing node on the line node ends on."""
    if node is None:
        return ()
    row = node.end_point[0]
    sibling = node.next_sibling
    while sibling is not None and not sibling.is_named and sibling.type != "\n":
        sibling = sibling.next_sibling
    if sibling is not None and sibling.type == "comment" and sibling.start_point[0] == row:
        return (node_text(sibling),)
    return ()
