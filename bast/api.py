"""
Query facade.

Bast is the handle to a loaded IR. Packages are stored in load order keyed by
import path; every query is an ordered traversal in which the first match
wins. Arguments naming a package accept an import path and fall back to the
package's short name.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterable

from .analyzer import queries
from .analyzer.scope_builder import build_scope
from .analyzer.type_resolver import resolve_basic_type
from .analyzer.types import UNIVERSE, Scope
from .config import LoadConfig
from .errors import LoadError, LoweringIssue
from .kinds import DeclKind
from .lowering import Lowerer, freeze_package
from .model import Const, File, Func, Interface, Method, Package, Struct, Type, Var
from .store import OrderedMap
from .syntax.parser import PackageSource

logger = logging.getLogger(__name__)


class Bast:
    """A loaded set of Go packages and the queries over them."""

    def __init__(self, config: LoadConfig | None = None):
        self.config = config if config is not None else LoadConfig()
        self.packages: OrderedMap[Package] = OrderedMap()
        self.issues: list[LoweringIssue] = []

    @classmethod
    def from_sources(cls, sources: Iterable[PackageSource], config: LoadConfig | None = None) -> Bast:
        """
        Lower parsed packages into a new, frozen Bast.

        Args:
            sources: Parsed packages in load order
            config: Load configuration

        Returns:
            The Bast holding one Package per source

        Raises:
            LoadError: If config.strict is set and any source has syntax errors
        """
        bast = cls(config)
        sources = list(sources)

        syntax_issues = [issue for source in sources for issue in source.issues]
        if syntax_issues:
            if bast.config.strict:
                raise LoadError(f"{len(syntax_issues)} syntax error(s) in input", syntax_issues)
            for issue in syntax_issues:
                logger.warning("Syntax error: %s", issue)

        lowerer = Lowerer(bast.issues)
        bast_ref = weakref.ref(bast)
        for source in sources:
            scope = source.scope
            derive_scope = scope is None and bast.config.type_checking
            if derive_scope:
                scope = Scope(parent=UNIVERSE)
            package = lowerer.lower_package(source, bast_ref=bast_ref, scope=scope)
            if derive_scope:
                build_scope(package, scope)
            if not bast.packages.put(package.path, package):
                issue = LoweringIssue(file="", line=0, message=f"duplicate package {package.path}, keeping the first one")
                logger.warning("%s", issue)
                bast.issues.append(issue)

        bast.freeze()
        return bast

    def freeze(self) -> None:
        """Make the IR read only."""
        for package in self.packages.values():
            freeze_package(package)
        self.packages.freeze()

    @property
    def errors(self) -> list:
        """Syntax errors recorded on all packages."""
        return [issue for package in self.packages.values() for issue in package.errors]

    # Packages

    def package_names(self) -> list[str]:
        return [package.name for package in self.packages.values()]

    def all_packages(self) -> list[Package]:
        return self.packages.values()

    def package(self, package: str) -> Package | None:
        """Return the package with the given import path or short name."""
        return queries.find_package(self.packages.values(), package)

    # One declaration by name from a package

    def var(self, package: str, name: str) -> Var | None:
        return self._named(package, DeclKind.VAR, name)

    def const(self, package: str, name: str) -> Const | None:
        return self._named(package, DeclKind.CONST, name)

    def type(self, package: str, name: str) -> Type | None:
        return self._named(package, DeclKind.TYPE, name)

    def func(self, package: str, name: str) -> Func | None:
        return self._named(package, DeclKind.FUNC, name)

    def method(self, package: str, name: str) -> Method | None:
        return self._named(package, DeclKind.METHOD, name)

    def interface(self, package: str, name: str) -> Interface | None:
        return self._named(package, DeclKind.INTERFACE, name)

    def struct(self, package: str, name: str) -> Struct | None:
        return self._named(package, DeclKind.STRUCT, name)

    # One declaration by name from any package

    def any_var(self, name: str) -> Var | None:
        return queries.named_decl(self.packages.values(), DeclKind.VAR, name)

    def any_const(self, name: str) -> Const | None:
        return queries.named_decl(self.packages.values(), DeclKind.CONST, name)

    def any_type(self, name: str) -> Type | None:
        return queries.named_decl(self.packages.values(), DeclKind.TYPE, name)

    def any_func(self, name: str) -> Func | None:
        return queries.named_decl(self.packages.values(), DeclKind.FUNC, name)

    def any_method(self, name: str) -> Method | None:
        return queries.named_decl(self.packages.values(), DeclKind.METHOD, name)

    def any_interface(self, name: str) -> Interface | None:
        return queries.named_decl(self.packages.values(), DeclKind.INTERFACE, name)

    def any_struct(self, name: str) -> Struct | None:
        return queries.named_decl(self.packages.values(), DeclKind.STRUCT, name)

    # All declarations of a kind from a package

    def pkg_vars(self, package: str) -> list[Var]:
        return self._kind(package, DeclKind.VAR)

    def pkg_consts(self, package: str) -> list[Const]:
        return self._kind(package, DeclKind.CONST)

    def pkg_types(self, package: str) -> list[Type]:
        return self._kind(package, DeclKind.TYPE)

    def pkg_funcs(self, package: str) -> list[Func]:
        return self._kind(package, DeclKind.FUNC)

    def pkg_methods(self, package: str) -> list[Method]:
        return self._kind(package, DeclKind.METHOD)

    def pkg_interfaces(self, package: str) -> list[Interface]:
        return self._kind(package, DeclKind.INTERFACE)

    def pkg_structs(self, package: str) -> list[Struct]:
        return self._kind(package, DeclKind.STRUCT)

    # All declarations of a kind from all packages

    def all_vars(self) -> list[Var]:
        return queries.kind_decls(self.packages.values(), DeclKind.VAR)

    def all_consts(self) -> list[Const]:
        return queries.kind_decls(self.packages.values(), DeclKind.CONST)

    def all_types(self) -> list[Type]:
        return queries.kind_decls(self.packages.values(), DeclKind.TYPE)

    def all_funcs(self) -> list[Func]:
        return queries.kind_decls(self.packages.values(), DeclKind.FUNC)

    def all_methods(self) -> list[Method]:
        return queries.kind_decls(self.packages.values(), DeclKind.METHOD)

    def all_interfaces(self) -> list[Interface]:
        return queries.kind_decls(self.packages.values(), DeclKind.INTERFACE)

    def all_structs(self) -> list[Struct]:
        return queries.kind_decls(self.packages.values(), DeclKind.STRUCT)

    # Filters

    def vars_of_type(self, package: str, type_name: str) -> list[Var]:
        """Return vars of package declared with exactly the type text type_name."""
        return self._typed(package, DeclKind.VAR, type_name)

    def consts_of_type(self, package: str, type_name: str) -> list[Const]:
        """Return consts of package declared with exactly the type text type_name.

        Useful for collecting the members of an enum-like constant group.
        """
        return self._typed(package, DeclKind.CONST, type_name)

    def types_of_type(self, package: str, type_name: str) -> list[Type]:
        return self._typed(package, DeclKind.TYPE, type_name)

    def method_set(self, package: str, type_name: str) -> list[Method]:
        """Return methods of package with value or pointer receiver type_name."""
        pkg = self.package(package)
        if pkg is None:
            return []
        return queries.method_set([pkg], type_name)

    def field_names(self, package: str, struct_name: str) -> list[str]:
        pkg = self.package(package)
        if pkg is None:
            return []
        return queries.field_names([pkg], struct_name)

    def resolve_basic_type(self, type_name: str, file: File | None = None) -> str:
        """
        Resolve the basic type a type name derives from.

        Args:
            type_name: Type name, "pkg.Name" for types of other packages
            file: File whose imports qualify type_name

        Returns:
            The basic type name, or an empty string if it cannot be resolved
        """
        return resolve_basic_type(self.packages.values(), type_name, file=file)

    def _named(self, package: str, kind: DeclKind, name: str):
        pkg = self.package(package)
        if pkg is None:
            return None
        return queries.named_decl([pkg], kind, name)

    def _kind(self, package: str, kind: DeclKind) -> list:
        pkg = self.package(package)
        if pkg is None:
            return []
        return queries.kind_decls([pkg], kind)

    def _typed(self, package: str, kind: DeclKind, type_name: str) -> list:
        pkg = self.package(package)
        if pkg is None:
            return []
        return queries.typed_decls([pkg], kind, type_name)

    def __repr__(self) -> str:
        return f"Bast(packages={self.packages.keys()!r})"
