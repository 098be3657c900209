"""Support ``python -m tfcv_opgen``.

Usage::

    python -m tfcv_opgen render ops/detect_edges.json
    python -m tfcv_opgen shape none none CV_64FC3
"""

from __future__ import annotations


def main() -> None:
    from tfcv_opgen.cli import main as cli_main
    cli_main()


if __name__ == "__main__":
    main()
