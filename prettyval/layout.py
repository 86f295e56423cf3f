"""
Text layout primitives: single-line vs multi-line compound rendering, center truncation, margins.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field

# Local ----------------------------------------------------------------------------------------------------------------
from .styles import visible_width

# Constants ------------------------------------------------------------------------------------------------------------

INDENT_UNIT = "  "
ELLIPSIS = "..."


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class CompoundFormatter:
    """
    Collects the items of a compound value and decides between single-line and multi-line layout.

    Each item is supplied twice: rendered at depth 0 for the tentative single-line form and
    rendered at depth+1 for the multi-line fallback. A running tally of the single-line width
    is kept while items are added; once the tally plus the closing brace would exceed
    `max_width`, or `max_keys_inline` items were already accepted, the formatter is marked
    exceeded and the remaining single-line candidates are ignored.

    Examples:
        >>> cf = CompoundFormatter("[", "]", max_width=12)
        >>> for n in "1234":
        ...     cf.add_item(n, n)
        >>> cf.format()
        '[1, 2, 3, 4]'
        >>> cf = CompoundFormatter("[", "]", max_width=11)
        >>> for n in "1234":
        ...     cf.add_item(n, n)
        >>> print(cf.format())
        [
          1,
          2,
          3,
          4
        ]
    """
    open_brace: str
    close_brace: str
    type_name: str = ""
    depth: int = 0
    pad_braces: bool = False
    max_keys_inline: int = 0
    max_width: int = 100

    single_items: list[str] = field(default_factory=list, init=False)
    multi_items: list[str] = field(default_factory=list, init=False)
    current_width: int = field(default=0, init=False)
    exceeded: bool = field(default=False, init=False)

    def __post_init__(self):
        self.current_width = visible_width(self.type_name + self.open_brace) + (1 if self.pad_braces else 0)

    def add_item(self, single: str, multi: str) -> None:
        """Add one item in both its single-line and multi-line renderings."""
        if not self.exceeded:
            if "\n" in single:
                self.exceeded = True
            else:
                item_width = visible_width(single)
                if self.single_items:
                    item_width += 2
                self.current_width += item_width

                if 0 < self.max_keys_inline <= len(self.single_items):
                    self.exceeded = True
                elif self.current_width + visible_width(self.close_brace) > self.max_width:
                    self.exceeded = True
                else:
                    self.single_items.append(single)

        self.multi_items.append(multi)

    def format(self) -> str:
        """Render the collected items, single-line when everything fit."""
        if not self.multi_items:
            return self.type_name + self.open_brace + self.close_brace

        if self.exceeded or len(self.single_items) != len(self.multi_items):
            return self._format_multi_line()

        pad = " " if self.pad_braces else ""
        return f"{self.type_name}{self.open_brace}{pad}{', '.join(self.single_items)}{pad}{self.close_brace}"

    def _format_multi_line(self) -> str:
        item_indent = indent(self.depth + 1)
        body = ",\n".join(item_indent + item for item in self.multi_items)
        return f"{self.type_name}{self.open_brace}\n{body}\n{indent(self.depth)}{self.close_brace}"


# Methods --------------------------------------------------------------------------------------------------------------

def indent(depth: int) -> str:
    """Indentation prefix for the given nesting depth (two spaces per level)."""
    return INDENT_UNIT * depth


def truncate_center(text: str, max_len: int) -> str:
    """
    Shorten text to max_len characters by replacing its middle with an ellipsis.

    Keeps floor((max_len-3)/2) leading and ceil((max_len-3)/2) trailing characters.
    A max_len of 0 or less disables truncation; below 4 the text is hard-clipped.

    Examples:
        >>> truncate_center("abcdefghijklmnop", 10)
        'abc...mnop'
        >>> truncate_center("abcdef", 3)
        'abc'
        >>> truncate_center("short", 10)
        'short'
    """
    if max_len <= 0 or len(text) <= max_len:
        return text

    if max_len < 4:
        return text[:max_len]

    content_len = max_len - len(ELLIPSIS)
    left = content_len // 2
    right = content_len - left
    if left + right >= len(text):
        return text

    return text[:left] + ELLIPSIS + text[len(text) - right:]


def apply_margin(text: str, margin: tuple[int, int, int, int]) -> str:
    """
    Surround a text block with blank space, given as (top, right, bottom, left).

    Every line is padded to the width of the widest line, so the block stays rectangular.
    Widths are measured ignoring ANSI escape sequences.

    Examples:
        >>> apply_margin("ab\\nc", (1, 1, 0, 2)).split("\\n")
        ['     ', '  ab ', '  c  ']
    """
    top, right, bottom, left = margin
    if not any(margin):
        return text

    lines = text.split("\n")
    widths = [visible_width(line) for line in lines]
    block_width = max(widths)
    full_width = left + block_width + right

    padded = [" " * left + line + " " * (block_width - w + right) for line, w in zip(lines, widths)]
    blank = " " * full_width
    return "\n".join([blank] * top + padded + [blank] * bottom)
