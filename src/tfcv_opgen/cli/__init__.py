"""CLI package for tfcv-opgen.

Subcommands are registered from separate modules.

Usage::

    tfcv-opgen render ops/detect_edges.json -o build/
    tfcv-opgen shape vector:none 3 3 CV_32F:Matx
    tfcv-opgen wrapper libcv_ops.so DetectEdges Blur -o cv_ops.py
"""

from __future__ import annotations

import click

from tfcv_opgen._logging import get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(package_name="tfcv-opgen")
def main() -> None:
    """tfcv-opgen: Generate TensorFlow ops around OpenCV functions."""


from tfcv_opgen.cli.render import render  # noqa: E402
from tfcv_opgen.cli.shape import shape  # noqa: E402
from tfcv_opgen.cli.wrapper import wrapper  # noqa: E402

main.add_command(render)
main.add_command(shape)
main.add_command(wrapper)
