import logging
import sys

from dataclasses import dataclass
from pathlib import Path

import click

from click_option_group import (
    RequiredMutuallyExclusiveOptionGroup,
    optgroup,
)

from . import formatters
from ._version import get_version
from .exceptions import PqMetaError
from .footer import read_file_metadata
from .metadata import FileMetadata
from .util.http_file import HttpFile


@dataclass
class MetadataContext:
    metadata: FileMetadata


def load_metadata(path: Path | str) -> FileMetadata:
    """Load metadata from file or URL."""
    try:
        if isinstance(path, Path):
            with path.open('rb') as f:
                return read_file_metadata(f)
        with HttpFile(path) as hf:
            return read_file_metadata(hf)
    except PqMetaError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """pqmeta - Parquet footer metadata inspection"""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(levelname)s %(name)s: %(message)s',
        )


@cli.command()
def version():
    """Show the pqmeta version."""
    click.echo(get_version())


@cli.group(invoke_without_command=True)
@optgroup.group(
    'Parquet source file',
    cls=RequiredMutuallyExclusiveOptionGroup,
    help='A parquet file local path or remote HTTP(S) url',
)
@optgroup.option(
    '-f',
    '--file',
    'file_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to Parquet file',
)
@optgroup.option('-u', '--url', help='HTTP(S) URL to Parquet file')
@click.pass_context
def inspect(ctx: click.Context, file_path: Path | None, url: str | None):
    """Inspect Parquet file footer metadata."""
    path = file_path if file_path else url
    if path is None:
        raise click.UsageError("Didn't get a file or a url")

    ctx.obj = MetadataContext(metadata=load_metadata(path))

    if ctx.invoked_subcommand is None:
        click.echo(formatters.format_summary(ctx.obj.metadata))


@inspect.command()
@click.pass_obj
def summary(ctx: MetadataContext):
    """Show high-level summary of the file."""
    click.echo(formatters.format_summary(ctx.metadata))


@inspect.command()
@click.pass_obj
def schema(ctx: MetadataContext):
    """Show the schema tree."""
    click.echo(formatters.format_schema(ctx.metadata))


@inspect.command()
@click.argument('index', type=int)
@click.pass_obj
def rowgroup(ctx: MetadataContext, index: int):
    """Show the column chunks of row group INDEX (0-indexed)."""
    num_row_groups = ctx.metadata.num_row_groups
    if not 0 <= index < num_row_groups:
        raise click.BadParameter(
            f'Row group {index} does not exist. '
            f'File has {num_row_groups} row groups.',
            param_hint="'INDEX'",
        )
    click.echo(formatters.format_row_group(ctx.metadata, index))


@inspect.command()
@click.pass_obj
def columns(ctx: MetadataContext):
    """Show column-level metadata and encoding information."""
    click.echo(formatters.format_columns(ctx.metadata))


@inspect.command()
@click.pass_obj
def dump(ctx: MetadataContext):
    """Dump the complete footer as JSON."""
    click.echo(formatters.format_dump(ctx.metadata))


if __name__ == '__main__':
    cli()
