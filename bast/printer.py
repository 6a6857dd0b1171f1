"""
Debug printer.

Dumps a Bast as an indented, column aligned listing of packages, files and
declarations. Meant for humans inspecting what a template will see.
"""

from __future__ import annotations

import sys
from typing import TextIO

from .api import Bast
from .config import PrinterConfig
from .kinds import DeclKind
from .model import Declaration, Field, File, Func, Interface, Method

# Column layout: cells are padded to at least MIN_WIDTH and by PADDING.
MIN_WIDTH = 2
PADDING = 2


def print_bast(bast: Bast, out: TextIO | None = None, config: PrinterConfig | None = None) -> None:
    """Print bast to out, stdout by default."""
    Printer(config).print(bast, out if out is not None else sys.stdout)


def format_bast(bast: Bast, config: PrinterConfig | None = None) -> str:
    """Return the printed form of bast."""
    return Printer(config).format(bast)


class Printer:
    """Formats a Bast according to a PrinterConfig."""

    def __init__(self, config: PrinterConfig | None = None):
        self.config = config if config is not None else PrinterConfig()
        self._rows: list[list[str]] = []

    def print(self, bast: Bast, out: TextIO) -> None:
        out.write(self.format(bast))

    def format(self, bast: Bast) -> str:
        self._rows = []
        for package in bast.packages.values():
            self._row(0, "Package", f'"{package.name}"', f"({package.path})")
            for file in package.files.values():
                self._file(file)
            for issue in package.errors:
                self._row(1, "Error", str(issue))
        return _align(self._rows)

    def _file(self, file: File) -> None:
        config = self.config
        if config.print_doc:
            self._lines(1, file.doc)
        self._row(1, "File", f'"{file.name}"', f"({file.package_name})")
        if file.imports:
            self._row(2, "Imports")
            for imp in file.imports.values():
                self._row(3, f'"{imp.name}"', f"({imp.path})")

        sections = [
            (config.print_consts, DeclKind.CONST),
            (config.print_vars, DeclKind.VAR),
            (config.print_types, DeclKind.TYPE),
            (config.print_funcs, DeclKind.FUNC),
            (config.print_methods, DeclKind.METHOD),
            (config.print_structs, DeclKind.STRUCT),
            (config.print_interfaces, DeclKind.INTERFACE),
        ]
        for enabled, kind in sections:
            if not enabled:
                continue
            for decl in file.declarations.values():
                if decl.kind is kind:
                    self._decl(2, decl)

    def _decl(self, depth: int, decl: Declaration) -> None:
        if self.config.print_doc:
            self._lines(depth, decl.doc)
        kind = decl.kind
        if kind in (DeclKind.CONST, DeclKind.VAR):
            self._row(depth, kind.value.capitalize(), f'"{decl.name}"', f"({decl.type})", f"'{decl.value}'", *self._comment(decl))
        elif kind is DeclKind.TYPE:
            alias = "alias" if decl.is_alias else ""
            self._row(depth, "Type", f'"{decl.name}"', f"({decl.type})", alias, *self._comment(decl))
            self._fields(depth + 1, "Type Param", decl.type_params.values())
        elif kind is DeclKind.STRUCT:
            self._row(depth, "Struct", f'"{decl.name}"', *self._comment(decl))
            self._fields(depth + 1, "Type Param", decl.type_params.values())
            self._fields(depth + 1, "Field", decl.fields.values())
        elif kind is DeclKind.INTERFACE:
            self._interface(depth, decl)
        else:
            self._func(depth, decl)

    def _func(self, depth: int, func: Func) -> None:
        label = "Method" if isinstance(func, Method) else "Func"
        self._row(depth, label, f'"{func.name}"', *self._comment(func))
        if isinstance(func, Method) and func.receiver is not None:
            receiver = func.receiver
            receiver_type = f"*{receiver.type}" if receiver.pointer else receiver.type
            self._row(depth + 1, "Receiver", f'"{receiver.name}"', f"({receiver_type})")
        self._fields(depth + 1, "Type Param", func.type_params.values())
        self._fields(depth + 1, "Param", func.params.values())
        self._fields(depth + 1, "Result", func.results.values())

    def _interface(self, depth: int, interface: Interface) -> None:
        self._row(depth, "Interface", f'"{interface.name}"', *self._comment(interface))
        self._fields(depth + 1, "Type Param", interface.type_params.values())
        for method in interface.methods.values():
            if self.config.print_doc:
                self._lines(depth + 1, method.doc)
            self._func(depth + 1, method)
        self._fields(depth + 1, "Embed", interface.interfaces.values())

    def _fields(self, depth: int, label: str, fields: list[Field]) -> None:
        for f in fields:
            if self.config.print_doc:
                self._lines(depth, f.doc)
            self._row(depth, label, f'"{f.name}"', f"({f.type})", f.tag, *self._comment(f))

    def _comment(self, model) -> list[str]:
        if not self.config.print_comments or not model.comment:
            return []
        return [" ".join(model.comment)]

    def _lines(self, depth: int, lines: tuple[str, ...]) -> None:
        for line in lines:
            self._row(depth, line)

    def _row(self, depth: int, *cells: str) -> None:
        self._rows.append([""] * depth + list(cells))


def _align(rows: list[list[str]]) -> str:
    """Render rows of cells with the columns of adjacent rows aligned.

    Every cell but the last of a row is a column cell. A column is aligned
    over each run of adjacent rows that have a cell in it.
    """
    widths: list[list[int]] = [[0] * max(len(row) - 1, 0) for row in rows]
    _measure(rows, widths, 0, len(rows), 0)
    out = []
    for row, row_widths in zip(rows, widths):
        line = "".join(cell.ljust(width) for cell, width in zip(row, row_widths))
        if row:
            line += row[-1]
        out.append(line.rstrip() + "\n")
    return "".join(out)


def _measure(rows: list[list[str]], widths: list[list[int]], start: int, end: int, column: int) -> None:
    row = start
    while row < end:
        if len(rows[row]) - 1 <= column:
            row += 1
            continue
        block_end = row
        while block_end < end and len(rows[block_end]) - 1 > column:
            block_end += 1
        width = max(len(rows[r][column]) for r in range(row, block_end)) + PADDING
        width = max(width, MIN_WIDTH)
        for r in range(row, block_end):
            widths[r][column] = width
        _measure(rows, widths, row, block_end, column + 1)
        row = block_end
