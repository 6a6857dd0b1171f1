"""
Tree lowering.

Converts tree-sitter Go syntax trees into the declaration model. Only top
level declarations are lowered; function bodies are ignored and every type
or value expression is kept as its source text.

Lowering never raises on a parsed tree. Node shapes it cannot make sense of
are skipped and recorded as LoweringIssue values.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Sequence
from dataclasses import dataclass, fields

from tree_sitter import Node

from ..errors import LoweringIssue
from ..model import Const, Declaration, Field, File, Func, Import, Interface, Method, Package, Struct, Type, Var
from ..store import OrderedMap
from ..syntax.parser import PackageSource, SourceFile, node_text
from .comments import comment_groups, doc_comments, line_comment

logger = logging.getLogger(__name__)

# Names Go allows to be declared more than once per package.
_REPEATABLE_NAMES = {"_", "init"}

_METHOD_ELEMS = {"method_elem", "method_spec"}
_PARAM_DECLS = {"parameter_declaration", "variadic_parameter_declaration"}


@dataclass
class _FileContext:
    """The file being lowered and the weak reference handed to its children."""

    file: File
    file_ref: weakref.ReferenceType


class Lowerer:
    """Lowers parsed Go files into Packages and Files."""

    def __init__(self, issues: list[LoweringIssue] | None = None):
        """
        Initialize the lowerer.

        Args:
            issues: List that collects lowering issues, a new one if omitted
        """
        self.issues = issues if issues is not None else []
        self._handlers = {
            "import_declaration": self._lower_imports,
            "const_declaration": self._lower_consts,
            "var_declaration": self._lower_vars,
            "type_declaration": self._lower_types,
            "function_declaration": self._lower_func,
            "method_declaration": self._lower_method,
        }

    def lower_package(
        self,
        source: PackageSource,
        bast_ref: weakref.ReferenceType | None = None,
        scope=None,
    ) -> Package:
        """
        Lower all files of a package.

        Args:
            source: Parsed package
            bast_ref: Weak reference to the owning Bast
            scope: Type scope to attach, source.scope if omitted

        Returns:
            Package with one File per source file, in source order
        """
        name = source.name
        if not name:
            name = next((package_name(f.root) for f in source.files if f.root is not None), "")
        package = Package(
            name=name,
            path=source.path or name,
            scope=scope if scope is not None else source.scope,
            errors=source.issues,
            bast_ref=bast_ref,
        )
        for source_file in source.files:
            file = self.lower_file(package, source_file)
            if file is None:
                continue
            if not package.files.put(file.name, file):
                self._issue(file.name, 0, f"file {file.name} listed twice in package {package.path}")
        logger.debug("Lowered package %s: %d file(s)", package.path, len(package.files))
        return package

    def lower_file(self, package: Package, source_file: SourceFile) -> File | None:
        """
        Lower one parsed file.

        Args:
            package: Package the file belongs to
            source_file: Parsed file

        Returns:
            The lowered File, or None if the file has no syntax tree
        """
        root = source_file.root
        if root is None:
            self._issue(source_file.path, 0, "file has no syntax tree")
            return None

        file = File(
            name=source_file.path,
            package_name=package_name(root),
            comments=comment_groups(root),
            doc=doc_comments(_first_child(root, "package_clause")),
            package_ref=weakref.ref(package),
        )
        ctx = _FileContext(file=file, file_ref=weakref.ref(file))
        for node in root.named_children:
            if node.type in ("package_clause", "comment"):
                continue
            handler = self._handlers.get(node.type)
            if handler is None:
                logger.debug("Skipping top level %s at %s:%d", node.type, file.name, _line(node))
                continue
            handler(ctx, node)
        return file

    # Declarations

    def _lower_imports(self, ctx: _FileContext, node: Node) -> None:
        for spec in _specs(node, {"import_spec"}, "import_spec_list"):
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                self._skip(ctx, spec, "import without a path")
                continue
            doc, comment = _spec_comments(node, spec)
            imp = Import(
                name=node_text(spec.child_by_field_name("name")),
                path=_unquote(node_text(path_node)),
                doc=doc,
                comment=comment,
            )
            if not ctx.file.imports.put(imp.path, imp):
                self._issue(ctx.file.name, _line(spec), f"duplicate import {imp.path!r}, keeping the first one")

    def _lower_consts(self, ctx: _FileContext, node: Node) -> None:
        self._lower_values(ctx, node, "const_spec", None, Const)

    def _lower_vars(self, ctx: _FileContext, node: Node) -> None:
        self._lower_values(ctx, node, "var_spec", "var_spec_list", Var)

    def _lower_values(self, ctx: _FileContext, node: Node, spec_type: str, list_type: str | None, cls) -> None:
        """Lower the specs of one const or var declaration.

        A spec without a type takes the last explicit type of the group.
        """
        carried = ""
        for spec in _specs(node, {spec_type}, list_type):
            type_node = spec.child_by_field_name("type")
            if type_node is not None:
                carried = node_text(type_node)
            value_node = spec.child_by_field_name("value")
            values = _named(value_node) if value_node is not None else []
            doc, comment = _spec_comments(node, spec)
            for i, name_node in enumerate(spec.children_by_field_name("name")):
                decl = cls(
                    name=node_text(name_node),
                    doc=doc,
                    comment=comment,
                    file_ref=ctx.file_ref,
                    type=carried,
                    value=_value_at(values, i),
                )
                self._put_decl(ctx, spec, decl.name, decl)

    def _lower_types(self, ctx: _FileContext, node: Node) -> None:
        for spec in _specs(node, {"type_spec", "type_alias"}):
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None:
                self._skip(ctx, spec, f"incomplete {spec.type}")
                continue
            name = node_text(name_node)
            doc, comment = _spec_comments(node, spec)
            common = {"name": name, "doc": doc, "comment": comment, "file_ref": ctx.file_ref}

            if spec.type == "type_alias":
                if type_node.type == "generic_type":
                    logger.debug("Skipping alias %s of a generic instantiation", name)
                    continue
                decl = Type(type=node_text(type_node), is_alias=True, **common)
            elif type_node.type == "struct_type":
                decl = Struct(**common)
                self._lower_struct_fields(ctx, type_node, decl.fields)
            elif type_node.type == "interface_type":
                decl = Interface(**common)
                self._lower_interface(ctx, type_node, decl)
            else:
                decl = Type(type=node_text(type_node), **common)

            self._lower_type_params(ctx, spec.child_by_field_name("type_parameters"), decl.type_params)
            self._put_decl(ctx, spec, name, decl)

    def _lower_func(self, ctx: _FileContext, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            self._skip(ctx, node, "function without a name")
            return
        decl = Func(name=node_text(name_node), doc=doc_comments(node), file_ref=ctx.file_ref)
        self._lower_signature(ctx, node, decl)
        self._put_decl(ctx, node, decl.name, decl)

    def _lower_method(self, ctx: _FileContext, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        receiver = self._lower_receiver(ctx, node.child_by_field_name("receiver"))
        if name_node is None or receiver is None:
            self._skip(ctx, node, "method without a name or a single receiver")
            return
        decl = Method(name=node_text(name_node), doc=doc_comments(node), file_ref=ctx.file_ref, receiver=receiver)
        self._lower_signature(ctx, node, decl)
        # Keyed by method expression so methods of different types never collide.
        self._put_decl(ctx, node, f"{receiver.type}.{decl.name}", decl)

    # Signatures and field lists

    def _lower_signature(self, ctx: _FileContext, node: Node, decl: Func) -> None:
        self._lower_type_params(ctx, node.child_by_field_name("type_parameters"), decl.type_params)
        self._lower_params(ctx, node.child_by_field_name("parameters"), decl.params)
        self._lower_result(ctx, node.child_by_field_name("result"), decl.results)

    def _lower_receiver(self, ctx: _FileContext, node: Node | None) -> Field | None:
        """Lower a receiver list to a Field holding the bare receiver type."""
        if node is None:
            return None
        params = [child for child in node.named_children if child.type == "parameter_declaration"]
        if len(params) != 1:
            return None
        param = params[0]
        type_node = param.child_by_field_name("type")
        while type_node is not None and type_node.type == "parenthesized_type":
            type_node = _first_named(type_node)

        pointer = False
        if type_node is not None and type_node.type == "pointer_type":
            pointer = True
            type_node = _first_named(type_node)
        if type_node is not None and type_node.type == "generic_type":
            type_node = type_node.child_by_field_name("type")
        if type_node is None:
            return None

        name_node = param.child_by_field_name("name")
        return Field(
            name=node_text(name_node),
            type=node_text(type_node),
            pointer=pointer,
            doc=doc_comments(param),
            comment=line_comment(param),
            file_ref=ctx.file_ref,
        )

    def _lower_params(self, ctx: _FileContext, node: Node | None, out: OrderedMap[Field]) -> None:
        if node is None:
            return
        for index, entry in enumerate(_named(node)):
            type_node = entry.child_by_field_name("type")
            if entry.type not in _PARAM_DECLS or type_node is None:
                self._skip(ctx, entry, f"unexpected {entry.type} in parameter list")
                continue
            type_text = node_text(type_node)
            if entry.type == "variadic_parameter_declaration":
                type_text = "..." + type_text
            names = entry.children_by_field_name("name")
            if names:
                self._put_fields(ctx, entry, out, names, type_text)
            else:
                self._put_unnamed(ctx, entry, out, f"{type_text} [{index}]", "", type_text)

    def _lower_result(self, ctx: _FileContext, node: Node | None, out: OrderedMap[Field]) -> None:
        if node is None:
            return
        if node.type == "parameter_list":
            self._lower_params(ctx, node, out)
            return
        type_text = node_text(node)
        self._put_unnamed(ctx, node, out, f"{type_text} [0]", "", type_text)

    def _lower_type_params(self, ctx: _FileContext, node: Node | None, out: OrderedMap[Field]) -> None:
        if node is None:
            return
        for entry in _named(node):
            type_node = entry.child_by_field_name("type")
            if entry.type != "type_parameter_declaration" or type_node is None:
                self._skip(ctx, entry, f"unexpected {entry.type} in type parameter list")
                continue
            self._put_fields(ctx, entry, out, entry.children_by_field_name("name"), node_text(type_node))

    def _lower_struct_fields(self, ctx: _FileContext, node: Node, out: OrderedMap[Field]) -> None:
        field_list = _first_child(node, "field_declaration_list")
        if field_list is None:
            return
        for entry in _named(field_list):
            type_node = entry.child_by_field_name("type")
            if entry.type != "field_declaration" or type_node is None:
                self._skip(ctx, entry, f"unexpected {entry.type} in struct")
                continue
            type_text = node_text(type_node)
            tag = node_text(entry.child_by_field_name("tag"))
            names = entry.children_by_field_name("name")
            if names:
                self._put_fields(ctx, entry, out, names, type_text, tag)
                continue
            # Embedded field, named after its type.
            if any(child.type == "*" for child in entry.children):
                type_text = "*" + type_text
            self._put_unnamed(ctx, entry, out, type_text, type_text, type_text, tag)

    def _lower_interface(self, ctx: _FileContext, node: Node, decl: Interface) -> None:
        for elem in _named(node):
            if elem.type not in _METHOD_ELEMS:
                # Embedded interface or type set element.
                text = _collapse(node_text(elem))
                self._put_unnamed(ctx, elem, decl.interfaces, text, text, text)
                continue
            name_node = elem.child_by_field_name("name")
            if name_node is None:
                self._skip(ctx, elem, "interface method without a name")
                continue
            method = Method(
                name=node_text(name_node),
                doc=doc_comments(elem),
                comment=line_comment(elem),
                file_ref=ctx.file_ref,
            )
            self._lower_params(ctx, elem.child_by_field_name("parameters"), method.params)
            self._lower_result(ctx, elem.child_by_field_name("result"), method.results)
            if not decl.methods.put(method.name, method):
                self._issue(ctx.file.name, _line(elem), f"duplicate method {decl.name}.{method.name}, keeping the first one")

    # Storing

    def _put_fields(
        self,
        ctx: _FileContext,
        entry: Node,
        out: OrderedMap[Field],
        names: Sequence[Node],
        type_text: str,
        tag: str = "",
    ) -> None:
        """Expand one field entry with several names into one Field per name."""
        doc = doc_comments(entry)
        comment = line_comment(entry)
        for name_node in names:
            name = node_text(name_node)
            field = Field(name=name, type=type_text, tag=tag, doc=doc, comment=comment, file_ref=ctx.file_ref)
            if not out.put(name, field) and name != "_":
                self._issue(ctx.file.name, _line(entry), f"duplicate field {name}, keeping the first one")

    def _put_unnamed(
        self,
        ctx: _FileContext,
        entry: Node,
        out: OrderedMap[Field],
        key: str,
        name: str,
        type_text: str,
        tag: str = "",
    ) -> None:
        field = Field(
            name=name,
            type=type_text,
            tag=tag,
            unnamed=True,
            doc=doc_comments(entry),
            comment=line_comment(entry),
            file_ref=ctx.file_ref,
        )
        if not out.put(key, field):
            self._issue(ctx.file.name, _line(entry), f"duplicate field {key}, keeping the first one")

    def _put_decl(self, ctx: _FileContext, node: Node, key: str, decl: Declaration) -> None:
        if ctx.file.declarations.put(key, decl):
            return
        if decl.name in _REPEATABLE_NAMES:
            logger.debug("Keeping first %s declaration in %s", decl.name, ctx.file.name)
            return
        self._issue(ctx.file.name, _line(node), f"duplicate declaration {key}, keeping the first one")

    # Issues

    def _skip(self, ctx: _FileContext, node: Node, message: str) -> None:
        if node.type == "ERROR" or node.has_error:
            # Already reported as a syntax error.
            logger.debug("Skipping %s at %s:%d", node.type, ctx.file.name, _line(node))
            return
        self._issue(ctx.file.name, _line(node), message)

    def _issue(self, file: str, line: int, message: str) -> None:
        issue = LoweringIssue(file=file, line=line, message=message)
        logger.warning("%s", issue)
        self.issues.append(issue)


def package_name(root: Node) -> str:
    """Return the name in the package clause of a source file tree."""
    clause = _first_child(root, "package_clause")
    if clause is None:
        return ""
    return node_text(_first_child(clause, "package_identifier"))


def freeze_package(package: Package) -> None:
    """Freeze every map reachable from package."""
    for file in package.files.values():
        file.imports.freeze()
        for decl in file.declarations.values():
            _freeze_model(decl)
        file.declarations.freeze()
    package.files.freeze()


def _freeze_model(model) -> None:
    for f in fields(model):
        value = getattr(model, f.name)
        if isinstance(value, OrderedMap):
            for item in value.values():
                if isinstance(item, Declaration):
                    _freeze_model(item)
            value.freeze()


def _specs(node: Node, spec_types: set[str], list_type: str | None = None) -> list[Node]:
    """Return the specs of a declaration, looking inside a spec list if present."""
    specs = []
    for child in node.named_children:
        if child.type in spec_types:
            specs.append(child)
        elif list_type is not None and child.type == list_type:
            specs.extend(c for c in child.named_children if c.type in spec_types)
    return specs


def _spec_comments(decl: Node, spec: Node) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return doc and line comment of a spec.

    The spec of an ungrouped declaration such as "var x int" shares the
    comments of the declaration itself.
    """
    doc = doc_comments(spec)
    comment = line_comment(spec)
    if not _is_grouped(decl):
        doc = doc or doc_comments(decl)
        comment = comment or line_comment(decl)
    return doc, comment


def _is_grouped(decl: Node) -> bool:
    for child in decl.children:
        if child.type == "(" or child.type.endswith("_spec_list"):
            return True
    return False


def _named(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def _first_named(node: Node) -> Node | None:
    named = _named(node)
    return named[0] if named else None


def _first_child(node: Node, node_type: str) -> Node | None:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _value_at(values: list[Node], index: int) -> str:
    """Return the value bound to the name at index."""
    if index < len(values):
        return node_text(values[index])
    if len(values) == 1:
        return node_text(values[0])
    return ""


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] in "\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def _collapse(text: str) -> str:
    return " ".join(text.split())


def _line(node: Node) -> int:
    return node.start_point[0] + 1
