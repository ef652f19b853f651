"""Terminal colours for item names, keyed by item quality."""

from __future__ import annotations

import click

# poor, common, uncommon, rare, epic, legendary, artifact, heirloom
QUALITY_COLOURS = {
    0: "bright_black",
    1: "white",
    2: "green",
    3: "blue",
    4: "magenta",
    5: "yellow",
    6: "bright_yellow",
    7: "bright_yellow",
}


def styled(text: str, quality: int | None) -> str:
    """``text`` coloured like an item link of the given quality."""
    if quality is None:
        return text
    colour = QUALITY_COLOURS.get(quality)
    if colour is None:
        return text
    return click.style(text, fg=colour)
