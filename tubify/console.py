from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()

logger = logging.getLogger("tubify")
logger.setLevel(logging.INFO)
handler = RichHandler(
    console=console,
    show_time=False,
    show_level=True,
    show_path=False,
    markup=True,
)
if not logger.handlers:
    logger.addHandler(handler)


def set_verbose(verbose: bool) -> None:
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def input_yesno(prompt: str) -> bool:
    """Ask until the answer is y/yes or n/no."""
    while True:
        console.print(f"{prompt} \\[y/n]: ", end="")
        value = input().strip().lower()
        if value in ("y", "yes"):
            return True
        if value in ("n", "no"):
            return False
        console.print("[yellow]Please answer y/n.[/yellow]")


__all__ = ["console", "logger", "set_verbose", "input_yesno"]
