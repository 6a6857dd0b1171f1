import pytest

from bast.analyzer.import_resolver import resolve_import, split_selector
from bast.loader import parse_source

SOURCE = """package p

import (
	"fmt"
	"example.com/x/foo"
	foo2 "example.com/y/foo"
	"example.com/repo/v2"
	yaml "gopkg.in/yaml.v3"
)
"""


@pytest.fixture(scope="module")
def bast():
    return parse_source(SOURCE)


@pytest.fixture(scope="module")
def file(bast):
    return bast.all_packages()[0].files.first()


class TestSplitSelector:
    """Test selector splitting"""

    def test_valid(self):
        assert split_selector("pkg.Name") == ("pkg", "Name")

    @pytest.mark.parametrize("selector", ["Name", ".Name", "pkg.", ""])
    def test_invalid(self, selector):
        assert split_selector(selector) is None


class TestResolveImport:
    """Test mapping selectors to imports"""

    def test_last_path_segment(self, file):
        assert resolve_import(file, "fmt.Println").path == "fmt"

    def test_alias_is_preferred(self, file):
        assert resolve_import(file, "foo2.Bar").path == "example.com/y/foo"

    def test_version_suffix_is_skipped(self, file):
        assert resolve_import(file, "repo.Thing").path == "example.com/repo/v2"
        assert resolve_import(file, "v2.Thing") is None

    def test_alias_matches_selector(self, file):
        assert resolve_import(file, "yaml.Node").path == "gopkg.in/yaml.v3"

    def test_shared_base_resolves_to_first_unaliased_import(self, file):
        # Only one unaliased import has base foo here, the other is aliased.
        assert resolve_import(file, "foo.Bar").path == "example.com/x/foo"

    def test_ambiguous_bases_resolve_to_first_in_file_order(self):
        bast = parse_source('package p\n\nimport (\n\t"a/foo"\n\t"b/foo"\n)\n')
        file = bast.all_packages()[0].files.first()
        assert resolve_import(file, "foo.X").path == "a/foo"

    def test_unknown_and_invalid(self, file):
        assert resolve_import(file, "os.Exit") is None
        assert resolve_import(file, "Println") is None
        assert resolve_import(file, "") is None

    def test_file_and_declaration_entry_points(self):
        bast = parse_source('package p\n\nimport "example.com/types"\n\ntype ID types.ID\n')
        file = bast.all_packages()[0].files.first()
        assert file.import_spec_from_selector("types.ID").path == "example.com/types"
        assert file.type("ID").import_spec_by_selector("types.ID").path == "example.com/types"


class TestImportBase:
    """Test the selector name of imports"""

    def test_base(self, file):
        assert file.imports["example.com/x/foo"].base == "foo"
        assert file.imports["example.com/repo/v2"].base == "repo"
        assert file.imports["fmt"].base == "fmt"
