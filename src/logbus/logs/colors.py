"""Color functions used to paint logger output.

A color function takes the fully assembled line and returns something a
``rich.console.Console`` can print. Any ``Callable[[str], str | Text]``
works, so tests and callers may pass ``str`` to print uncolored text.
"""

from __future__ import annotations

from collections.abc import Callable

from rich.text import Text

ColorFn = Callable[[str], str | Text]


def paint(style: str) -> ColorFn:
    """Return a color function applying a rich ``style`` to the whole line."""

    def color(message: str) -> Text:
        return Text(message, style=style)

    color.__name__ = style.replace(" ", "_")
    color.__qualname__ = color.__name__
    return color


blue = paint("blue")
cyan = paint("cyan")
green = paint("green")
yellow = paint("yellow")
magenta = paint("magenta")
white = paint("white")
red = paint("red")
bright_red = paint("bright_red")
bg_red = paint("white on red")
