# path: route-playback/route_playback/core/logging.py

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure(level: str = "INFO") -> None:
    # stderr keeps stdout free for the JSON-lines output of the CLI
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_time=False,
                show_path=False,
            )
        ],
    )
