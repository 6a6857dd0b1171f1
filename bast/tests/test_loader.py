"""
Loader tests.
"""

import pytest

from bast.config import LoadConfig
from bast.errors import LoadError
from bast.loader import PLACEHOLDER_PACKAGE, load, module_import_path, parse_source


class TestLoad:
    """Test loading directories and files"""

    def test_directory_import_path_from_go_mod(self, test_data):
        assert module_import_path(test_data / "project" / "pkg" / "models") == "example.com/project/pkg/models"
        assert module_import_path(test_data / "project") == "example.com/project"

    def test_import_path_without_go_mod(self, test_data):
        loose = test_data / "loose"
        assert module_import_path(loose) == loose.resolve().as_posix()

    def test_relative_inputs_use_config_dir(self, test_data):
        bast = load("pkg/types", config=LoadConfig(dir=str(test_data / "project")))
        assert bast.package_names() == ["types"]
        assert bast.package("types").path == "example.com/project/pkg/types"

    def test_test_files_are_skipped_by_default(self, test_data):
        models = test_data / "project" / "pkg" / "models"
        assert load(models).any_var("testOnly") is None
        assert load(models, config=LoadConfig(tests=True)).any_var("testOnly") is not None

    def test_build_tag_suffixes_are_skipped(self, test_data):
        models = test_data / "project" / "pkg" / "models"
        bast = load(models, config=LoadConfig(tests=True, build_tags=["_test.go"]))
        assert bast.any_var("testOnly") is None

    def test_loose_files_go_to_placeholder_package(self, test_data):
        bast = load(test_data / "loose" / "main.go", test_data / "project" / "pkg" / "types")
        assert bast.packages.keys() == ["example.com/project/pkg/types", PLACEHOLDER_PACKAGE]
        package = bast.package(PLACEHOLDER_PACKAGE)
        assert package.name == "main"
        assert bast.const("main", "Greeting").value == '"hello"'
        assert bast.field_names("main", "Point") == ["X", "Y"]

    def test_missing_input(self, test_data):
        with pytest.raises(LoadError, match="no such file"):
            load(test_data / "missing")

    def test_no_inputs(self):
        bast = load()
        assert bast.package_names() == []


class TestInputErrors:
    """Test strict and lenient handling of syntax errors"""

    def test_strict_load_fails(self, test_data):
        with pytest.raises(LoadError) as info:
            load(test_data / "project" / "pkg" / "broken", config=LoadConfig(strict=True))
        assert info.value.issues
        assert info.value.issues[0].file.endswith("broken.go")

    def test_lenient_load_records_errors(self, test_data):
        bast = load(test_data / "project" / "pkg" / "broken")
        package = bast.package("broken")
        assert package.errors
        assert bast.errors == package.errors
        assert bast.type("broken", "Good") is not None

    def test_lenient_parse_source(self):
        bast = parse_source("package p\n\ntype Good int\n\nfunc (\n")
        assert bast.errors
        assert bast.type("p", "Good").type == "int"

    def test_strict_parse_source(self):
        with pytest.raises(LoadError):
            parse_source("package p\n\nfunc (\n", config=LoadConfig(strict=True))

    def test_clean_source_has_no_errors(self):
        assert parse_source("package p\n").errors == []
