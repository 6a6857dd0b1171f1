"""
Configuration for loading and printing.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LoadConfig:
    """Configuration options for loading Go inputs."""

    # Directory relative inputs are resolved against (empty = current directory)
    dir: str = ""

    # Whether to load _test.go files
    tests: bool = False

    # Whether to derive type scopes so basic types can be resolved
    type_checking: bool = True

    # Whether a syntax error anywhere aborts the whole load
    strict: bool = False

    # File name suffixes to skip, e.g. "_windows.go"
    build_tags: list[str] = field(default_factory=list)

    @staticmethod
    def from_dict(d: dict) -> LoadConfig:
        """Create a config from a dictionary."""
        config = LoadConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "dir": self.dir,
            "tests": self.tests,
            "type_checking": self.type_checking,
            "strict": self.strict,
            "build_tags": self.build_tags,
        }


@dataclass
class PrinterConfig:
    """What the debug printer includes in its dump."""

    print_doc: bool = True
    print_comments: bool = True
    print_consts: bool = True
    print_vars: bool = True
    print_types: bool = True
    print_funcs: bool = True
    print_methods: bool = True
    print_structs: bool = True
    print_interfaces: bool = True

    @staticmethod
    def from_dict(d: dict) -> PrinterConfig:
        """Create a config from a dictionary."""
        config = PrinterConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "print_doc": self.print_doc,
            "print_comments": self.print_comments,
            "print_consts": self.print_consts,
            "print_vars": self.print_vars,
            "print_types": self.print_types,
            "print_funcs": self.print_funcs,
            "print_methods": self.print_methods,
            "print_structs": self.print_structs,
            "print_interfaces": self.print_interfaces,
        }
