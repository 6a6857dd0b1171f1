"""
Package loader.

Turns file system inputs into parsed packages and lowers them into a Bast.
A directory is loaded as the packages its .go files declare; .go files given
directly are collected into one placeholder package. Import paths come from
the module line of the nearest go.mod file.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .api import Bast
from .config import LoadConfig
from .errors import LoadError
from .lowering import package_name
from .syntax.parser import GoParser, PackageSource, SourceFile

logger = logging.getLogger(__name__)

# Import path of the package holding files loaded outside of a directory.
PLACEHOLDER_PACKAGE = "command-line-arguments"

_MODULE_LINE = re.compile(r"^module\s+(\S+)", re.MULTILINE)


def load(*inputs: str | Path, config: LoadConfig | None = None) -> Bast:
    """
    Load Go files and package directories.

    Args:
        inputs: Paths to .go files or package directories
        config: Load configuration

    Returns:
        A frozen Bast with the loaded packages in input order; the
        placeholder package, if any, comes last

    Raises:
        LoadError: If an input does not exist or cannot be read, or if
            config.strict is set and the input has syntax errors
    """
    config = config if config is not None else LoadConfig()
    base = Path(config.dir) if config.dir else Path.cwd()
    parser = GoParser()

    sources: dict[str, PackageSource] = {}
    loose: PackageSource | None = None
    for raw in inputs:
        path = Path(raw)
        if not path.is_absolute():
            path = base / path
        if not path.exists():
            raise LoadError(f"stat input: {raw}: no such file or directory")

        if path.is_dir():
            for source in _load_dir(parser, path, config):
                if source.path in sources:
                    logger.debug("Package %s already loaded", source.path)
                    continue
                sources[source.path] = source
            continue

        if loose is None:
            loose = PackageSource(path=PLACEHOLDER_PACKAGE)
        loose.files.append(_parse_file(parser, path))

    if loose is not None:
        sources[loose.path] = loose
    return Bast.from_sources(sources.values(), config)


def parse_source(src: str | bytes, config: LoadConfig | None = None, path: str = "") -> Bast:
    """
    Lower a single Go source held in memory.

    The file is put in the placeholder package, named after its package
    clause.

    Args:
        src: Go source code
        config: Load configuration
        path: File name recorded for the source

    Returns:
        A frozen Bast with one package
    """
    source_file = GoParser().parse(src, path)
    source = PackageSource(path=PLACEHOLDER_PACKAGE, files=[source_file])
    return Bast.from_sources([source], config)


def module_import_path(directory: Path) -> str:
    """
    Compute the import path of a package directory.

    Args:
        directory: Package directory

    Returns:
        The path below the module of the nearest go.mod, or the directory
        path itself if no go.mod with a module line is found
    """
    directory = directory.resolve()
    for parent in (directory, *directory.parents):
        go_mod = parent / "go.mod"
        if not go_mod.is_file():
            continue
        match = _MODULE_LINE.search(go_mod.read_text(encoding="utf-8"))
        if match is None:
            break
        module = match.group(1).strip('"`')
        rel = directory.relative_to(parent).as_posix()
        return module if rel == "." else f"{module}/{rel}"
    return directory.as_posix()


def _load_dir(parser: GoParser, directory: Path, config: LoadConfig) -> list[PackageSource]:
    """Parse the .go files of a directory, one PackageSource per package clause."""
    import_path = module_import_path(directory)
    by_name: dict[str, PackageSource] = {}
    for path in sorted(directory.glob("*.go")):
        if not path.is_file() or _ignored(path.name, config):
            continue
        source_file = _parse_file(parser, path)
        name = package_name(source_file.root) or directory.name
        source = by_name.get(name)
        if source is None:
            # External test packages get their own import path.
            pkg_path = f"{import_path}_test" if name.endswith("_test") else import_path
            source = by_name[name] = PackageSource(name=name, path=pkg_path)
        source.files.append(source_file)

    if not by_name:
        logger.warning("No Go files in %s", directory)
    return list(by_name.values())


def _ignored(name: str, config: LoadConfig) -> bool:
    if name.startswith((".", "_")):
        return True
    if name.endswith("_test.go") and not config.tests:
        return True
    return any(name.endswith(suffix) for suffix in config.build_tags)


def _parse_file(parser: GoParser, path: Path) -> SourceFile:
    try:
        return parser.parse_file(path)
    except OSError as e:
        raise LoadError(f"read {path}: {e}") from e
