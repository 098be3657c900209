"""``tfcv-opgen render``: generate kernel sources from operator specs."""

from __future__ import annotations

from typing import Optional, Tuple

import click


@click.command()
@click.argument("specs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, type=click.Path(file_okay=False),
              help="Output directory (default: next to each spec)")
@click.option("--device", default=None, help="Kernel device, e.g. DEVICE_GPU")
@click.option("--header", default=None, help="Header declaring the user function")
@click.option("--using", "namespaces", multiple=True, help="Extra 'using namespace' (repeatable)")
def render(
    specs: Tuple[str, ...],
    output: Optional[str],
    device: Optional[str],
    header: Optional[str],
    namespaces: Tuple[str, ...],
) -> None:
    """Render SPECS (JSON operator specs) into <name>_op.cc kernels."""
    from tfcv_opgen._exceptions import OpGenError
    from tfcv_opgen.kernel_helper import RenderOptions, scaffold

    options = RenderOptions(device=device, header=header, namespaces=namespaces)
    for spec_path in specs:
        try:
            files = scaffold(spec_path, output, options)
        except OpGenError as e:
            raise click.ClickException(f"{spec_path}: {e}") from e
        for path in files:
            click.echo(f"{spec_path} -> {path}")
