"""
Template function map.

Exposes the Bast queries and a few string and date helpers to Jinja2
templates. Every function is available as a template global; the single
string argument helpers are also registered as filters, so both
{{ trimpfx(name, "Get") }} and {{ name | trimpfx("Get") }} work.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import jinja2

from .api import Bast
from .errors import TemplateError

# Helpers that also work as filters.
STRING_FILTERS = ("trimpfx", "trimsfx", "lowercase", "uppercase", "split")

# Short description of every template function, printed by "bast -f".
FUNCTION_HELP = {
    "trimpfx": "trimpfx(s, prefix): s without prefix",
    "trimsfx": "trimsfx(s, suffix): s without suffix",
    "lowercase": "lowercase(s): s lowercased",
    "uppercase": "uppercase(s): s uppercased",
    "split": "split(s, sep): s split at every sep",
    "join": "join(sep, *s): s joined with sep",
    "repeat": "repeat(s, delim, n): s repeated n times, delimited with delim",
    "datefmt": "datefmt(layout): local time now, formatted with a Go time layout",
    "dateutcfmt": "dateutcfmt(layout): UTC time now, formatted with a Go time layout",
    "packagenames": "packagenames(): names of all loaded packages",
    "varsoftype": "varsoftype(pkg, type): vars of pkg declared with type",
    "constsoftype": "constsoftype(pkg, type): consts of pkg declared with type",
    "typesoftype": "typesoftype(pkg, type): types of pkg defined as type",
    "methodset": "methodset(pkg, type): methods of pkg with receiver type or *type",
    "fieldnames": "fieldnames(pkg, struct): field names of a struct of pkg",
    "basictype": "basictype(type): basic type type derives from, or an empty string",
    "var": "var(pkg, name): var of pkg named name",
    "const": "const(pkg, name): const of pkg named name",
    "type": "type(pkg, name): type of pkg named name",
    "func": "func(pkg, name): func of pkg named name",
    "method": "method(pkg, name): method of pkg named name",
    "interface": "interface(pkg, name): interface of pkg named name",
    "struct": "struct(pkg, name): struct of pkg named name",
    "pkgvars": "pkgvars(pkg): all vars of pkg",
    "pkgconsts": "pkgconsts(pkg): all consts of pkg",
    "pkgtypes": "pkgtypes(pkg): all types of pkg",
    "pkgfuncs": "pkgfuncs(pkg): all funcs of pkg",
    "pkgmethods": "pkgmethods(pkg): all methods of pkg",
    "pkginterfaces": "pkginterfaces(pkg): all interfaces of pkg",
    "pkgstructs": "pkgstructs(pkg): all structs of pkg",
    "allvars": "allvars(): vars of all packages",
    "allconsts": "allconsts(): consts of all packages",
    "alltypes": "alltypes(): types of all packages",
    "allfuncs": "allfuncs(): funcs of all packages",
    "allmethods": "allmethods(): methods of all packages",
    "allinterfaces": "allinterfaces(): interfaces of all packages",
    "allstructs": "allstructs(): structs of all packages",
}

# Elements of a Go time layout, longest first.
_GO_LAYOUT = re.compile(r"January|Jan|Monday|Mon|MST|2006|Z07:00|-07:00|-0700|15|PM|pm|_2|01|02|03|04|05|06|1|2|3|4|5")

_GO_LAYOUT_VALUES: dict[str, Callable[[datetime], str]] = {
    "January": lambda t: t.strftime("%B"),
    "Jan": lambda t: t.strftime("%b"),
    "Monday": lambda t: t.strftime("%A"),
    "Mon": lambda t: t.strftime("%a"),
    "MST": lambda t: t.strftime("%Z"),
    "2006": lambda t: f"{t.year:04d}",
    "06": lambda t: f"{t.year % 100:02d}",
    "01": lambda t: f"{t.month:02d}",
    "1": lambda t: str(t.month),
    "02": lambda t: f"{t.day:02d}",
    "_2": lambda t: f"{t.day:2d}",
    "2": lambda t: str(t.day),
    "15": lambda t: f"{t.hour:02d}",
    "03": lambda t: f"{(t.hour % 12) or 12:02d}",
    "3": lambda t: str((t.hour % 12) or 12),
    "04": lambda t: f"{t.minute:02d}",
    "4": lambda t: str(t.minute),
    "05": lambda t: f"{t.second:02d}",
    "5": lambda t: str(t.second),
    "PM": lambda t: "PM" if t.hour >= 12 else "AM",
    "pm": lambda t: "pm" if t.hour >= 12 else "am",
    "-0700": lambda t: t.strftime("%z"),
    "-07:00": lambda t: _colon_offset(t),
    "Z07:00": lambda t: "Z" if not t.utcoffset() else _colon_offset(t),
}


def go_time_format(when: datetime, layout: str) -> str:
    """Format when with a Go reference time layout such as "2006-01-02 15:04"."""
    return _GO_LAYOUT.sub(lambda m: _GO_LAYOUT_VALUES[m.group(0)](when), layout)


def _colon_offset(when: datetime) -> str:
    offset = when.strftime("%z")
    return f"{offset[:3]}:{offset[3:]}" if offset else ""


def _trim_prefix(s: str, prefix: str) -> str:
    return s[len(prefix) :] if prefix and s.startswith(prefix) else s


def _trim_suffix(s: str, suffix: str) -> str:
    return s[: -len(suffix)] if suffix and s.endswith(suffix) else s


def _join(sep: str, *s: str) -> str:
    return sep.join(s)


def _repeat(s: str, delim: str, n: int) -> str:
    return delim.join([s] * n)


def func_map(bast: Bast) -> dict[str, Callable[..., Any]]:
    """
    Build the template functions bound to a Bast.

    Args:
        bast: Loaded IR the query functions read

    Returns:
        Mapping of function name to callable
    """
    return {
        # String utils
        "trimpfx": _trim_prefix,
        "trimsfx": _trim_suffix,
        "lowercase": str.lower,
        "uppercase": str.upper,
        "split": lambda s, sep: s.split(sep),
        "join": _join,
        "repeat": _repeat,
        # Other utils
        "datefmt": lambda layout: go_time_format(datetime.now().astimezone(), layout),
        "dateutcfmt": lambda layout: go_time_format(datetime.now(timezone.utc), layout),
        # Retrieval utils
        "packagenames": bast.package_names,
        "varsoftype": bast.vars_of_type,
        "constsoftype": bast.consts_of_type,
        "typesoftype": bast.types_of_type,
        "methodset": bast.method_set,
        "fieldnames": bast.field_names,
        "basictype": bast.resolve_basic_type,
        # One by name from a package
        "var": bast.var,
        "const": bast.const,
        "type": bast.type,
        "func": bast.func,
        "method": bast.method,
        "interface": bast.interface,
        "struct": bast.struct,
        # All of a kind from a package
        "pkgvars": bast.pkg_vars,
        "pkgconsts": bast.pkg_consts,
        "pkgtypes": bast.pkg_types,
        "pkgfuncs": bast.pkg_funcs,
        "pkgmethods": bast.pkg_methods,
        "pkginterfaces": bast.pkg_interfaces,
        "pkgstructs": bast.pkg_structs,
        # All of a kind from all packages
        "allvars": bast.all_vars,
        "allconsts": bast.all_consts,
        "alltypes": bast.all_types,
        "allfuncs": bast.all_funcs,
        "allmethods": bast.all_methods,
        "allinterfaces": bast.all_interfaces,
        "allstructs": bast.all_structs,
    }


def make_environment(bast: Bast, template_dir: str | Path | None = None) -> jinja2.Environment:
    """
    Create a Jinja2 environment with the function map of bast installed.

    Args:
        bast: Loaded IR
        template_dir: Directory templates are loaded from, for include and import

    Returns:
        The configured environment
    """
    loader = jinja2.FileSystemLoader(str(template_dir)) if template_dir is not None else None
    env = jinja2.Environment(loader=loader, lstrip_blocks=True, trim_blocks=True, keep_trailing_newline=True)
    funcs = func_map(bast)
    env.globals.update(funcs)
    for name in STRING_FILTERS:
        env.filters[name] = funcs[name]
    return env


def render_template(
    bast: Bast,
    source: str,
    variables: dict[str, str] | None = None,
    template_dir: str | Path | None = None,
    **context: Any,
) -> str:
    """
    Render template source against bast.

    The template sees the IR as "bast", the variables as "vars" and any
    extra context under its own name.

    Raises:
        TemplateError: If the template cannot be compiled or rendered
    """
    env = make_environment(bast, template_dir)
    try:
        template = env.from_string(source)
        return template.render(context, bast=bast, vars=dict(variables or {}))
    except (jinja2.TemplateError, TypeError, ValueError) as e:
        raise TemplateError(f"execute template: {e}") from e


def render_file(bast: Bast, path: str | Path, variables: dict[str, str] | None = None, **context: Any) -> str:
    """Render the template file at path against bast."""
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateError(f"read template: {e}") from e
    return render_template(bast, source, variables, template_dir=path.parent, **context)
