"""``tfcv-opgen wrapper``: generate the Python loader of a compiled op library."""

from __future__ import annotations

from typing import Optional, Tuple

import click


@click.command()
@click.argument("library")
@click.argument("ops", nargs=-1, required=True)
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False),
              help="Write the module here instead of printing it")
def wrapper(library: str, ops: Tuple[str, ...], output: Optional[str]) -> None:
    """Bind OPS from the shared LIBRARY in a Python module."""
    from tfcv_opgen.kernel_helper import render_wrapper, write_wrapper

    if output is None:
        click.echo(render_wrapper(ops, library), nl=False)
        return
    write_wrapper(ops, library, output)
    click.echo(f"Wrote {output}")
