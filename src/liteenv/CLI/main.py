"""
Command Line Interface for liteenv.
"""
import json
import logging
import os

import click
import yaml

from ..errors import EnvFileError, EnvSyntaxError, KeyFormatError
from ..MANAGERS.env_store import EnvStore
from ..MANAGERS.environment_manager import EnvironmentManager, ENV_DEFAULT_PATH
from ..PARSERS.env_parser import EnvParser

@click.group()
@click.option('--file', '-f', 'files', multiple=True, envvar='LITEENV_FILE', type=click.Path(),
              help='.env file to load (repeatable, later files win). '
                   'LITEENV_FILE takes several paths separated by os.pathsep')
@click.option('--strict', is_flag=True, help='Fail on a quoted value left open at end of file')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
@click.pass_context
def cli(ctx, files, strict, verbose):
    """
    liteenv - load .env files and inspect the resulting environment.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    ctx.ensure_object(dict)
    ctx.obj['files'] = list(files) or [ENV_DEFAULT_PATH]
    ctx.obj['strict'] = strict

def _load(ctx):
    """
    Loads the configured files into a store over a copy of the process
    environment. Exits with status 1 if a file cannot be loaded.
    """
    manager = EnvironmentManager(store=EnvStore(environ=dict(os.environ)), strict=ctx.obj['strict'])
    try:
        manager.load_multiple(*ctx.obj['files'])
    except (EnvFileError, EnvSyntaxError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    return manager

@cli.command()
@click.argument('key')
@click.option('--default', '-d', default=None, help='Printed when the key is not set')
@click.pass_context
def get(ctx, key, default):
    """Print the value of KEY."""
    manager = _load(ctx)
    try:
        value = manager.get(key)
    except KeyFormatError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    if value is None:
        if default is None:
            click.echo(f"Error: {key} is not set.", err=True)
            ctx.exit(1)
        click.echo(default)
    else:
        click.echo(value.to_string())

@cli.command()
@click.argument('key')
@click.pass_context
def has(ctx, key):
    """Exit with status 0 if KEY is set, 1 otherwise."""
    manager = _load(ctx)
    try:
        found = manager.has(key)
    except KeyFormatError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)
    click.echo("yes" if found else "no")
    ctx.exit(0 if found else 1)

@cli.command()
@click.pass_context
def keys(ctx):
    """List loaded keys"""
    manager = _load(ctx)
    for key in manager.keys():
        click.echo(key)

@cli.command()
@click.option('--format', '-o', 'fmt', type=click.Choice(['env', 'json', 'yaml']), default='env')
@click.pass_context
def dump(ctx, fmt):
    """Print loaded variables with their coerced types"""
    manager = _load(ctx)
    items = manager.store.items()

    if fmt == 'json':
        click.echo(json.dumps({k: v.value for k, v in items}, indent=2, ensure_ascii=False))
    elif fmt == 'yaml':
        click.echo(yaml.safe_dump({k: v.value for k, v in items}, sort_keys=False, allow_unicode=True), nl=False)
    else:
        for k, v in items:
            click.echo(f"{k}={v.to_string()}")

@cli.command()
@click.pass_context
def check(ctx):
    """Report syntax errors without loading anything."""
    failed = False
    for path in ctx.obj['files']:
        errors = []
        try:
            EnvParser.validate_file(path)
            pairs = list(EnvParser.iter_pairs(EnvParser.read_lines(path), errors=errors,
                                              strict=ctx.obj['strict']))
        except (EnvFileError, EnvSyntaxError) as e:
            click.echo(f"Error: {e}", err=True)
            failed = True
            continue

        for e in errors:
            click.echo(f"{path}:{e.line_number}: {e.message}")
        click.echo(f"{path}: {len(pairs)} entries, {len(errors)} errors")
        failed = failed or bool(errors)

    ctx.exit(1 if failed else 0)

def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})

if __name__ == '__main__':
    main()
