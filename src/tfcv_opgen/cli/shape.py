"""``tfcv-opgen shape``: classify a shape descriptor."""

from __future__ import annotations

from typing import Tuple

import click


@click.command()
@click.argument("tokens", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def shape(tokens: Tuple[str, ...], as_json: bool) -> None:
    """Classify the shape descriptor TOKENS (dimensions, then the data token)."""
    from tfcv_opgen._exceptions import OpGenError
    from tfcv_opgen.shape import classify_shape

    try:
        parsed = classify_shape(list(tokens))
    except OpGenError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        import json

        data = {
            "tokens": list(tokens),
            "kind": parsed.kind.value,
            "array_rank": parsed.array_rank,
            "block_rank": parsed.block_rank,
            "vector_dims": parsed.vector_dims,
            "block_dims": parsed.block_dims,
            "dims": [str(dim) for dim in parsed.dims],
            "data": str(parsed.data),
            "channels": parsed.data.channels,
            "container": parsed.data.container.value,
            "declaration": parsed.declaration,
            "element_declaration": parsed.element_declaration,
        }
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(f"kind:         {parsed.kind.value}")
        click.echo(f"declaration:  {parsed.declaration}")
        click.echo(f"tensor rank:  {parsed.array_rank}")
        click.echo(f"block rank:   {parsed.block_rank} "
                   f"({parsed.vector_dims} vector, {parsed.block_dims} block)")
        click.echo(f"element:      {parsed.data.element_type}")
