"""
Terminal coloring for dispatcher output.

colorize() is a pure formatter: it wraps text in ANSI SGR escape sequences and
returns the resulting string. Nothing is printed and no state is kept.

Palette
- success → green, failure → red, warning → yellow.
- Define a mapping named __styles__ in __main__ to override any entry with a
  rich style string (e.g. {"success": "bold #22C55E"}).
"""
from enum import StrEnum

from rich.color import ColorSystem
from rich.style import Style

from .utils import hostattr


class Color(StrEnum):
    """Semantic colors understood by colorize()."""
    SUCCESS = "success"
    FAILURE = "failure"
    WARNING = "warning"


_PALETTE = {
    Color.SUCCESS: "green",
    Color.FAILURE: "red",
    Color.WARNING: "yellow",
}


def colorize(text, color=Color.SUCCESS, bold=False, *, colorful=True):
    """
    Wrap text in escape sequences selecting a semantic color and optional bold weight.

    Parameters
    - text: str
      The text to wrap; empty text is returned untouched.
    - color: Color
      One of SUCCESS, FAILURE, WARNING.
    - bold: bool
      Add the bold attribute.
    - colorful: bool (keyword-only)
      When False, return text as-is (no escapes at all).

    Examples
    - colorize("ok")                          -> "\\x1b[32mok\\x1b[0m"
    - colorize("no", Color.FAILURE, True)     -> "\\x1b[1;31mno\\x1b[0m"
    """
    if not colorful:
        return text
    styles = _PALETTE | {Color(key): value for key, value in hostattr("__styles__", {}).items() if key in Color}
    style = Style.parse(styles[Color(color)])
    if bold:
        style += Style(bold=True)
    return style.render(text, color_system=ColorSystem.TRUECOLOR)


__all__ = (
    "Color",
    "colorize",
)
