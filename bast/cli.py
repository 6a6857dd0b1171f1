"""
Command line interface.

Loads Go inputs into a Bast and renders a Jinja2 template against it.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from .config import LoadConfig
from .errors import BastError
from .funcmap import FUNCTION_HELP, render_file
from .loader import load
from .printer import print_bast
from .writer import AtomicWriter

# Template suffixes dropped when deriving the default output file name.
TEMPLATE_SUFFIXES = (".jinja2", ".jinja", ".j2", ".tmpl")


def parse_variables(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated key=value options into a dict, rejecting duplicate keys."""
    variables: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep:
            raise click.BadParameter("variable must be in key=value format", ctx=ctx, param=param)
        if key in variables:
            raise click.BadParameter(f"duplicate variable: {key}", ctx=ctx, param=param)
        variables[key] = val
    return variables


def default_output(template: Path) -> Path:
    """Output path used without -o: the template name, suffix dropped, in the current directory."""
    name = template.name
    for suffix in TEMPLATE_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            name = name[: -len(suffix)]
            break
    return Path.cwd() / name


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the command line from the current Click context.

    Options are rendered with their short flag when they have one and path
    values with their file name only.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line, "bast" if there is no active context
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return "bast"

    parts = ["bast"]
    for param in click_command.params:
        value = ctx.params.get(param.name)
        if not value or not isinstance(param, click.Option) or value == param.default:
            continue
        flag = next((opt for opt in param.opts if not opt.startswith("--")), param.opts[0])
        if param.is_flag:
            parts.append(flag)
        elif isinstance(value, dict):
            for key, val in value.items():
                parts.extend([flag, f"{key}={val}"])
        elif isinstance(value, (list, tuple)):
            for item in value:
                parts.extend([flag, Path(str(item)).name])
        else:
            parts.extend([flag, Path(str(value)).name])
    return " ".join(parts)


def _show_reference(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo("Template functions:")
    width = max(len(name) for name in FUNCTION_HELP) + 2
    for name, help_text in FUNCTION_HELP.items():
        click.echo(f"  {name.ljust(width)}{help_text}")
    click.echo()
    click.echo('Template variables: "bast" is the loaded IR, "vars" the -v variables,')
    click.echo('"command" the command line that produced the output.')
    ctx.exit()


@click.command(name="bast", no_args_is_help=True)
@click.option("--input", "-i", "template", required=True, type=click.Path(exists=True, dir_okay=False, resolve_path=True), help="Input template file.")
@click.option("--go", "-g", "go_inputs", multiple=True, required=True, type=click.Path(), help="Go file or package directory. Repeatable.")
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True), help="Output file name.")
@click.option("--var", "-v", "variables", multiple=True, callback=parse_variables, help="Define a template variable as key=value. Repeatable.")
@click.option("--overwrite", "-w", is_flag=True, default=False, help="Overwrite the output file if it exists.")
@click.option("--stdout", "-s", is_flag=True, default=False, help="Also write the output to stdout.")
@click.option("--debug", "-d", is_flag=True, default=False, help="Print debug info and the loaded IR.")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True), help="JSON file with load options.")
@click.option("--tests", is_flag=True, default=False, help="Load _test.go files.")
@click.option("--strict", is_flag=True, default=False, help="Fail on any syntax error in the Go input.")
@click.option("--reference", "-f", is_flag=True, expose_value=False, is_eager=True, callback=_show_reference, help="Show the template function reference.")
def bast_command(template, go_inputs, output, variables, overwrite, stdout, debug, config, tests, strict):
    """Render a template against the declarations of Go packages."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config, encoding="utf-8") as f:
            load_config = LoadConfig.from_dict(json.load(f))
    else:
        load_config = LoadConfig()
    if tests:
        load_config.tests = True
    if strict:
        load_config.strict = True

    template_path = Path(template)
    output_path = Path(output) if output is not None else default_output(template_path)
    if output_path.is_dir():
        output_path = output_path / default_output(template_path).name
    if output_path == template_path:
        raise click.ClickException(f"output would overwrite the template: {output_path}")

    try:
        loaded = load(*go_inputs, config=load_config)
        if debug:
            click.echo("Bast:")
            print_bast(loaded, sys.stdout)
            click.echo()
            click.echo(f"Execute '{template_path}' to '{output_path}'")
        command = reconstruct_command_line(click.get_current_context().command)
        text = render_file(loaded, template_path, variables, command=command)
        if stdout:
            click.echo(text, nl=False)
        writer = AtomicWriter()
        if overwrite:
            writer.write(output_path, text)
        else:
            writer.write_if_not_exists(output_path, text)
    except (BastError, OSError) as e:
        raise click.ClickException(str(e)) from e


def main():
    bast_command()


if __name__ == "__main__":
    main()
