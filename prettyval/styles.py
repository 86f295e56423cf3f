"""
Semantic style table and ANSI rendering for prettyval output.

Every colorization point of the printer goes through `colorize()` with one of the
semantic styles below, so the printer itself never deals with escape sequences.
Styles are `rich.style.Style` objects rendered for a 256-color terminal.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, fields
from enum import Enum, unique

# Third-party ----------------------------------------------------------------------------------------------------------
from rich.color import ColorSystem
from rich.style import Style
from rich.text import Text

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import UNSET, UnsetType


# Constants ------------------------------------------------------------------------------------------------------------

# Palette used to tell cyclic identities and UUIDs apart
POINTER_GAMUT: tuple[Style, ...] = (
    Style(color="color(196)"),  # red
    Style(color="color(208)"),  # orange
    Style(color="color(226)"),  # yellow
    Style(color="color(51)"),   # cyan
    Style(color="color(135)"),  # purple
    Style(color="color(170)"),  # pink
    Style(color="color(129)"),  # violet
    Style(color="color(204)"),  # rose
    Style(color="color(124)"),  # dark red
)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class ColorMode(str, Enum):
    """
    When to emit ANSI colors:
        - "auto": only when the output destination is an interactive terminal
        - "always": unconditionally
        - "never": plain text
    """
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass(frozen=True)
class Styles:
    """
    Style table mapping semantic categories to rich styles.

    Any field may be given as a rich style definition string (e.g. "bold red"),
    which is parsed on construction.

    Attributes:
        error: invalid values and failed reads
        string: quoted strings
        boolean: true/false
        number: integers
        float: floating point numbers
        special_type: stream handles, JSON marker, zero time
        time: relative time phrases
        null: the nil token
        comment: truncation notes, clock suffix, cycle tag glyphs
        field: record field names and string mapping keys
        pointer_gamut: palette for cycle tags and UUIDs

    Examples:
        >>> Styles().merge(string="bold green").string
        Style(bold=True, color=Color('green', ColorType.STANDARD, number=2))
    """
    error: Style | str = Style(color="color(1)")
    string: Style | str = Style(color="color(2)")
    boolean: Style | str = Style(color="color(3)")
    number: Style | str = Style(color="color(4)")
    float: Style | str = Style(color="color(6)")
    special_type: Style | str = Style(color="color(5)")
    time: Style | str = Style(color="color(13)")
    null: Style | str = Style(color="color(8)")
    comment: Style | str = Style(color="color(8)")
    field: Style | str = Style()
    pointer_gamut: tuple[Style | str, ...] = POINTER_GAMUT

    def __post_init__(self):
        """Parse style strings and validate the gamut."""
        for f in fields(self):
            if f.name == "pointer_gamut":
                continue
            object.__setattr__(self, f.name, _as_style(getattr(self, f.name), f.name))

        gamut = tuple(_as_style(s, "pointer_gamut") for s in self.pointer_gamut)
        if not gamut:
            raise ValueError("pointer_gamut must contain at least one style")
        object.__setattr__(self, "pointer_gamut", gamut)

    def merge(self, **overrides: Style | str | tuple | UnsetType) -> "Styles":
        """
        Create a new Styles instance with some categories replaced.

        Categories not provided (or passed as UNSET) are inherited from the current instance.

        Raises:
            TypeError: If an unknown category name is given.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"unknown style categories: {', '.join(sorted(unknown))}")
        values = {name: getattr(self, name) for name in known}
        values.update({k: v for k, v in overrides.items() if v is not UNSET})
        return Styles(**values)

    def gamut_style(self, hashed: int) -> Style:
        """Pick a palette entry for a 64-bit hash."""
        return self.pointer_gamut[hashed % len(self.pointer_gamut)]


# Methods --------------------------------------------------------------------------------------------------------------

def colorize(text: str, style: Style, enabled: bool) -> str:
    """
    Wrap text in the ANSI sequence of style when enabled, return it unchanged otherwise.

    A null style (no attributes) leaves the text unchanged as well.
    """
    if not enabled:
        return text
    return style.render(text, color_system=ColorSystem.EIGHT_BIT)


def visible_width(text: str) -> int:
    """
    Terminal cell width of a single line of text, ignoring ANSI escape sequences.

    Examples:
        >>> visible_width("abc")
        3
        >>> visible_width(colorize("abc", Style(color="red"), True))
        3
    """
    if "\x1b" not in text:
        return Text(text).cell_len
    return Text.from_ansi(text).cell_len


# Private Methods ------------------------------------------------------------------------------------------------------

def _as_style(value: Style | str, name: str) -> Style:
    if isinstance(value, Style):
        return value
    if isinstance(value, str):
        return Style.parse(value)
    raise TypeError(f"style '{name}' must be a rich Style or a style string, but got {type(value).__name__}")
