"""
Lowering tests.

Each test lowers a small in-memory Go source and checks the resulting
declarations.
"""

from __future__ import annotations

import pytest

from bast.errors import FrozenStoreError
from bast.kinds import DeclKind
from bast.loader import parse_source
from bast.model import Const, Field, Func, Interface, Method, Struct, Type, Var


def lower_file(src: str):
    """Lower src and return its only file."""
    bast = parse_source(src, path="test.go")
    return bast.all_packages()[0].files.first()


class TestValueDeclarations:
    """Test const and var lowering"""

    def test_const_group_carries_type(self):
        file = lower_file(
            """package p

const (
	A Color = iota
	B
	C
)

const D = 1
"""
        )
        assert [file.const(n).type for n in ("A", "B", "C")] == ["Color", "Color", "Color"]
        assert file.const("A").value == "iota"
        assert file.const("B").value == ""
        # Carried type does not leak into the next declaration.
        assert file.const("D").type == ""
        assert file.const("D").value == "1"

    def test_carried_type_is_replaced_by_a_new_explicit_type(self):
        file = lower_file(
            """package p

const (
	A int = 1
	B
	C string = "c"
	D
)
"""
        )
        assert [file.const(n).type for n in ("A", "B", "C", "D")] == ["int", "int", "string", "string"]

    def test_var_group_carries_type(self):
        file = lower_file(
            """package p

var (
	x int
	y = 2
)

var z = 3
"""
        )
        assert file.var("x").type == "int"
        assert file.var("x").value == ""
        assert file.var("y").type == "int"
        assert file.var("y").value == "2"
        assert file.var("z").type == ""

    def test_multiple_names_bind_values_by_position(self):
        file = lower_file("package p\n\nvar a, b, c = 1, 2, 3\n")
        assert [file.var(n).value for n in ("a", "b", "c")] == ["1", "2", "3"]

    def test_single_value_binds_all_names(self):
        file = lower_file("package p\n\nvar a, b = pair()\n")
        assert file.var("a").value == "pair()"
        assert file.var("b").value == "pair()"

    def test_entities_are_typed(self):
        file = lower_file("package p\n\nvar v int\nconst c = 1\n")
        assert isinstance(file.var("v"), Var)
        assert isinstance(file.const("c"), Const)
        assert file.var("v").kind is DeclKind.VAR
        assert file.var("c") is None


class TestTypeDeclarations:
    """Test type, struct and interface lowering"""

    def test_alias_and_definition_in_group(self):
        file = lower_file(
            """package p

type (
	A = int
	B int
)
"""
        )
        a, b = file.type("A"), file.type("B")
        assert isinstance(a, Type)
        assert a.is_alias is True
        assert a.type == "int"
        assert b.is_alias is False
        assert b.type == "int"

    def test_alias_of_generic_instantiation_is_skipped(self):
        file = lower_file(
            """package p

type List[T any] []T

type Ints = List[int]
type Number = int
"""
        )
        assert file.type("Ints") is None
        assert file.type("Number").is_alias
        assert file.type("List").type == "[]T"
        assert list(file.type("List").type_params) == ["T"]

    def test_non_struct_types_keep_their_text(self):
        file = lower_file(
            """package p

type Handler func(int) error
type Names []string
type Index map[string]int
type Ref *Node
type ID uuid.UUID
"""
        )
        assert file.type("Handler").type == "func(int) error"
        assert file.type("Names").type == "[]string"
        assert file.type("Index").type == "map[string]int"
        assert file.type("Ref").type == "*Node"
        assert file.type("ID").type == "uuid.UUID"

    def test_struct_fields(self):
        file = lower_file(
            """package p

type Record struct {
	// ID identifies.
	ID int `json:"id"`
	// Baz and Bat share everything.
	Baz, Bat string `tag:"x"`
	Base
	*Meta
}
"""
        )
        struct = file.struct("Record")
        assert isinstance(struct, Struct)
        assert list(struct.fields) == ["ID", "Baz", "Bat", "Base", "*Meta"]

        id_field = struct.fields["ID"]
        assert id_field.type == "int"
        assert id_field.tag == '`json:"id"`'
        assert id_field.doc == ("// ID identifies.",)

        baz, bat = struct.fields["Baz"], struct.fields["Bat"]
        assert (baz.type, baz.tag, baz.doc) == (bat.type, bat.tag, bat.doc)
        assert baz.type == "string"
        assert baz.doc == ("// Baz and Bat share everything.",)

        base = struct.fields["Base"]
        assert base.unnamed is True
        assert base.name == "Base"
        assert base.type == "Base"
        assert struct.fields["*Meta"].type == "*Meta"
        assert struct.field_names() == ["ID", "Baz", "Bat", "Base", "*Meta"]

    def test_empty_and_generic_structs(self):
        file = lower_file(
            """package p

type Empty struct{}

type Pair[K comparable, V any] struct {
	Key   K
	Value V
}
"""
        )
        assert len(file.struct("Empty").fields) == 0
        pair = file.struct("Pair")
        assert list(pair.type_params) == ["K", "V"]
        assert pair.type_params["K"].type == "comparable"
        assert pair.fields["Value"].type == "V"

    def test_interface_embeds_and_methods(self):
        file = lower_file(
            """package p

import "io"

type I interface {
	io.Reader
	Foo()
}
"""
        )
        interface = file.interface("I")
        assert isinstance(interface, Interface)
        assert list(interface.interfaces) == ["io.Reader"]
        assert interface.interfaces["io.Reader"].unnamed is True
        assert list(interface.methods) == ["Foo"]
        foo = interface.methods["Foo"]
        assert isinstance(foo, Method)
        assert foo.receiver is None
        assert len(foo.params) == 0

    def test_interface_method_signature(self):
        file = lower_file(
            """package p

type Renderer interface {
	// Render renders.
	Render(prefix string, n int) (string, error)
}
"""
        )
        render = file.interface("Renderer").methods["Render"]
        assert render.doc == ("// Render renders.",)
        assert list(render.params) == ["prefix", "n"]
        assert list(render.results) == ["string [0]", "error [1]"]

    def test_type_set_elements(self):
        file = lower_file(
            """package p

type Number interface {
	~int | ~float64
}
"""
        )
        assert list(file.interface("Number").interfaces) == ["~int | ~float64"]


class TestFunctions:
    """Test func and method lowering"""

    def test_named_results_expand(self):
        file = lower_file("package p\n\nfunc F() (a, b, c int) { return 0, 1, 2 }\n")
        func = file.func("F")
        assert isinstance(func, Func)
        assert list(func.results) == ["a", "b", "c"]
        assert all(r.type == "int" for r in func.results.values())

    def test_unnamed_params_and_results(self):
        file = lower_file("package p\n\nfunc G(int, string) error { return nil }\n")
        func = file.func("G")
        assert list(func.params) == ["int [0]", "string [1]"]
        assert all(p.unnamed for p in func.params.values())
        assert list(func.results) == ["error [0]"]
        result = func.results["error [0]"]
        assert result.unnamed is True
        assert result.type == "error"

    def test_parenthesized_unnamed_results(self):
        file = lower_file("package p\n\nfunc H() (int, error) { return 0, nil }\n")
        assert list(file.func("H").results) == ["int [0]", "error [1]"]

    def test_variadic_param(self):
        file = lower_file("package p\n\nfunc Print(format string, args ...any) {}\n")
        params = file.func("Print").params
        assert params["format"].type == "string"
        assert params["args"].type == "...any"

    def test_type_params(self):
        file = lower_file("package p\n\nfunc Map[K comparable, V any](m map[K]V) []K { return nil }\n")
        func = file.func("Map")
        assert list(func.type_params) == ["K", "V"]
        assert func.type_params["V"].type == "any"
        assert func.params["m"].type == "map[K]V"
        assert func.signature == "(m map[K]V) []K"

    def test_receivers(self):
        file = lower_file(
            """package p

type S struct{}

func (s *S) Ptr() {}

func (s S) Val() int { return 0 }

func (S) Anon() {}
"""
        )
        ptr = file.method("Ptr")
        assert isinstance(ptr, Method)
        assert ptr.receiver.name == "s"
        assert ptr.receiver.type == "S"
        assert ptr.receiver.pointer is True
        val = file.method("Val")
        assert val.receiver.type == "S"
        assert val.receiver.pointer is False
        assert file.method("Anon").receiver.name == ""

    def test_generic_receiver_is_bare(self):
        file = lower_file(
            """package p

type List[T any] struct{}

func (l *List[T]) Len() int { return 0 }
"""
        )
        receiver = file.method("Len").receiver
        assert receiver.type == "List"
        assert receiver.pointer is True
        assert "*" not in receiver.type

    def test_methods_keyed_by_receiver(self):
        file = lower_file(
            """package p

type A struct{}
type B struct{}

func (A) String() string { return "a" }
func (B) String() string { return "b" }
"""
        )
        assert "A.String" in file.declarations
        assert "B.String" in file.declarations
        assert file.method("String").receiver.type == "A"

    def test_function_bodies_are_ignored(self):
        file = lower_file(
            """package p

func F() {
	var local int
	type inner struct{}
	_ = local
}
"""
        )
        assert list(file.declarations) == ["F"]


class TestFileLowering:
    """Test file level lowering"""

    def test_imports(self):
        file = lower_file(
            """package p

import (
	"fmt"
	str "strings"
	. "math"
	_ "embed"
)
"""
        )
        assert list(file.imports) == ["fmt", "strings", "math", "embed"]
        assert file.imports["fmt"].name == ""
        assert file.imports["strings"].name == "str"
        assert file.imports["math"].name == "."
        assert file.imports["embed"].name == "_"

    def test_single_import_doc_and_comment(self):
        file = lower_file('package p\n\n// fmt is for printing.\nimport "fmt" // printing\n')
        imp = file.imports["fmt"]
        assert imp.doc == ("// fmt is for printing.",)
        assert imp.comment == ("// printing",)

    def test_package_name_and_doc(self):
        file = lower_file("// Package p does things.\npackage p\n")
        assert file.package_name == "p"
        assert file.doc == ("// Package p does things.",)
        assert file.name == "test.go"

    def test_declarations_in_source_order(self):
        file = lower_file(
            """package p

type T int

func F() {}

var V = 1

const C = 2

func (T) M() {}
"""
        )
        assert list(file.declarations) == ["T", "F", "V", "C", "T.M"]

    def test_back_references(self):
        bast = parse_source("package p\n\ntype S struct {\n\tA int\n}\n")
        package = bast.all_packages()[0]
        file = package.files.first()
        struct = file.struct("S")
        assert struct.file is file
        assert struct.package is package
        assert file.package is package
        assert package.bast is bast
        assert struct.fields["A"].file is file

    def test_duplicate_declaration_keeps_first(self):
        bast = parse_source("package p\n\nvar x = 1\n\nvar x = 2\n")
        file = bast.all_packages()[0].files.first()
        assert file.var("x").value == "1"
        assert len(bast.issues) == 1
        assert "duplicate declaration x" in bast.issues[0].message

    def test_repeatable_names_are_not_issues(self):
        bast = parse_source("package p\n\nfunc init() {}\n\nfunc init() {}\n\nvar _ = 1\n\nvar _ = 2\n")
        assert bast.issues == []

    def test_store_is_frozen_after_lowering(self):
        bast = parse_source("package p\n\ntype S struct {\n\tA int\n}\n")
        package = bast.all_packages()[0]
        file = package.files.first()
        with pytest.raises(FrozenStoreError):
            file.declarations.put("B", Var(name="B"))
        with pytest.raises(FrozenStoreError):
            file.struct("S").fields.put("B", Field(name="B"))
        with pytest.raises(FrozenStoreError):
            package.files.put("other.go", file)

    def test_entities_are_immutable(self):
        file = lower_file("package p\n\nvar x = 1\n")
        with pytest.raises(AttributeError):
            file.var("x").value = "2"
