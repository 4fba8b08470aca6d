"""Executable entrypoint for gridsnake."""

from __future__ import annotations

from pathlib import Path
import logging
import os

from .app import SnakeApp


def main() -> None:
    """Launch the game."""
    logging.basicConfig(
        level=os.environ.get("GRIDSNAKE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    root = Path(__file__).resolve().parents[2]
    data_dir = os.environ.get("GRIDSNAKE_DATA_DIR")
    SnakeApp(root=root, data_dir=Path(data_dir) if data_dir else None).run()


if __name__ == "__main__":
    main()
