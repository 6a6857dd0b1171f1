"""
Basic type resolution tests against the fixture project.
"""

import pytest

from bast.analyzer.types import UNIVERSE, Basic, Scope, TypeName
from bast.config import LoadConfig
from bast.loader import parse_source


class TestResolveBasicType:
    """Test resolving type names to basic types"""

    @pytest.mark.parametrize(
        "type_name, expected",
        [
            ("ID", "int"),
            ("Name", "string"),
            ("Label", "string"),
            ("Color", "int"),
            ("Key", "int"),
            ("Level", "int"),
            ("Named", "string"),
        ],
    )
    def test_unqualified(self, project, type_name, expected):
        assert project.resolve_basic_type(type_name) == expected

    def test_predeclared_names_resolve_to_themselves(self, project):
        for name in ("int", "string", "bool", "float64", "rune", "byte", "uintptr"):
            assert project.resolve_basic_type(name) == name

    def test_idempotent(self, project):
        for name in ("ID", "Label", "Key", "int"):
            once = project.resolve_basic_type(name)
            assert project.resolve_basic_type(once) == once

    def test_unknown_is_empty(self, project):
        assert project.resolve_basic_type("Unknown") == ""
        assert project.resolve_basic_type("nope.Unknown") == ""

    def test_struct_resolves_to_its_literal(self, project):
        resolved = project.resolve_basic_type("Record")
        assert resolved.startswith("struct{")
        assert "Name string" in resolved

    def test_qualified_without_file_uses_package_name(self, project):
        assert project.resolve_basic_type("types.Label") == "string"

    def test_qualified_with_file_uses_imports(self, project):
        file = project.package("models").files.first()
        assert project.resolve_basic_type("t.ID", file=file) == "int"
        # "types" refers to the unloaded types/v2 import in this file.
        assert project.resolve_basic_type("types.Flags", file=file) == ""

    def test_from_declaration(self, project):
        record = project.struct("models", "Record")
        assert record.fields["ID"].type == "t.ID"
        assert record.fields["ID"].resolve_basic_type("t.ID") == "int"

    def test_without_type_checking_only_predeclared_names_resolve(self):
        bast = parse_source("package p\n\ntype MyInt int\n", config=LoadConfig(type_checking=False))
        assert bast.all_packages()[0].scope is None
        assert bast.resolve_basic_type("MyInt") == ""
        assert bast.resolve_basic_type("int") == "int"

    def test_single_source(self):
        bast = parse_source("package p\n\ntype A B\ntype B C\ntype C uint16\n")
        assert bast.resolve_basic_type("A") == "uint16"

    def test_cycle_terminates(self):
        bast = parse_source("package p\n\ntype A B\ntype B A\n")
        assert bast.resolve_basic_type("A") in ("p.A", "p.B", "command-line-arguments.A", "command-line-arguments.B")

    def test_alias_cycle_terminates(self):
        bast = parse_source("package p\n\ntype (\n\tA = B\n\tB = A\n)\n")
        assert bast.resolve_basic_type("A") in ("A", "B")
        assert bast.resolve_basic_type("B") in ("A", "B")

    def test_self_alias_terminates(self):
        bast = parse_source("package p\n\ntype A = A\n")
        assert bast.resolve_basic_type("A") == "A"


class TestScope:
    """Test the symbol table model"""

    def test_universe_has_basic_types(self):
        obj = UNIVERSE.lookup("int")
        assert isinstance(obj.type, Basic)
        assert obj.type.underlying() is obj.type

    def test_lookup_parent(self):
        scope = Scope(parent=UNIVERSE)
        scope.insert(TypeName(name="Local", _type=Basic("int")))
        assert scope.lookup("string") is None
        assert scope.lookup_parent("string") is UNIVERSE.lookup("string")
        assert scope.lookup("Local") is not None

    def test_insert_keeps_first(self):
        scope = Scope()
        first = TypeName(name="X", _type=Basic("int"))
        assert scope.insert(first) is None
        assert scope.insert(TypeName(name="X", _type=Basic("string"))) is first
        assert scope.names() == ["X"]

    def test_external_scope_can_be_attached(self):
        from bast.api import Bast
        from bast.syntax import GoParser, PackageSource

        scope = Scope(parent=UNIVERSE)
        scope.insert(TypeName(name="Opaque", _type=Basic("int64")))
        source = PackageSource(name="p", path="example.com/p", files=[GoParser().parse("package p\n")], scope=scope)
        bast = Bast.from_sources([source])
        assert bast.package("p").scope is scope
        assert bast.resolve_basic_type("Opaque") == "int64"

    def test_any_object_with_lookup_serves_as_scope(self):
        from bast.api import Bast
        from bast.syntax import GoParser, PackageSource

        class CheckerScope:
            def lookup(self, name):
                return TypeName(name=name, _type=Basic("uint32")) if name == "Handle" else None

        source = PackageSource(name="p", path="example.com/p", files=[GoParser().parse("package p\n")], scope=CheckerScope())
        bast = Bast.from_sources([source])
        assert bast.resolve_basic_type("Handle") == "uint32"
        assert bast.resolve_basic_type("Other") == ""
