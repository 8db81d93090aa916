"""
Rectangular cell grids used by the compositor.

A Surface stores three parallel arrays of shape [height, width]:
    chars: Glyph occupying the cell ("" marks the pad of a wide glyph)
    pairs: Colour-pair slot
    bold:  Bold attribute

A wide glyph (display width N) is stored in its leading cell and reserves
the following N-1 cells as pads. Writes never raise: anything that falls
outside the grid is dropped.
"""

import unicodedata
from typing import NamedTuple

import numpy as np

BLANK = " "
PAD = ""


class Attr(NamedTuple):
    """Colour pair and bold flag applied atomically with a write."""

    pair: int = 0
    bold: bool = False


PLAIN = Attr()


def glyph_width(char: str) -> int:
    """
    Display width of a single character.

    Combining marks occupy no column of their own; East Asian wide and
    full-width characters occupy two.
    """
    if not char:
        return 0
    if unicodedata.combining(char):
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


def text_width(text: str) -> int:
    return sum(glyph_width(c) for c in text)


class Surface:
    """An independently positioned cell grid with a stacking order."""

    def __init__(
        self,
        height: int,
        width: int,
        y: int = 0,
        x: int = 0,
        z: int = 0,
        transparent: bool = False,
        name: str = "",
    ) -> None:
        self.height = max(0, height)
        self.width = max(0, width)
        self.y = y
        self.x = x
        self.z = z
        self.transparent = transparent
        self.name = name
        shape = (self.height, self.width)
        self.chars = np.full(shape, BLANK, dtype=object)
        self.pairs = np.zeros(shape, dtype=np.int16)
        self.bold = np.zeros(shape, dtype=bool)

    def __repr__(self) -> str:
        return (
            f"Surface({self.name!r}, {self.height}x{self.width} "
            f"at ({self.y}, {self.x}), z={self.z})"
        )

    def contains(self, y: int, x: int) -> bool:
        return 0 <= y < self.height and 0 <= x < self.width

    def clear(self) -> None:
        self.chars.fill(BLANK)
        self.pairs.fill(0)
        self.bold.fill(False)

    def put(self, y: int, x: int, text: str, attr: Attr = PLAIN) -> int:
        """
        Write `text` starting at (y, x).

        The whole write is dropped if the start cell is outside the grid;
        characters running past the right edge are clipped. A wide glyph
        that would not fit entirely is dropped too.

        Returns:
            Number of characters stored
        """
        if not self.contains(y, x):
            return 0
        written = 0
        col = x
        for char in text:
            w = glyph_width(char)
            if w == 0:
                continue
            if col + w > self.width:
                break
            for cell in range(col, col + w):
                self._release(y, cell)
            self.chars[y, col] = char
            self.chars[y, col + 1:col + w] = PAD
            self.pairs[y, col:col + w] = attr.pair
            self.bold[y, col:col + w] = attr.bold
            col += w
            written += 1
        return written

    def _release(self, y: int, x: int) -> None:
        # Overwriting part of a wide glyph blanks the rest of it
        lead = x
        while lead > 0 and self.chars[y, lead] == PAD:
            lead -= 1
        w = glyph_width(self.chars[y, lead])
        if w > 1 and lead + w > x:
            self.chars[y, lead:lead + w] = BLANK

    def draw_border(
        self,
        attr: Attr = PLAIN,
        side: str = "|",
        edge: str = "-",
        corner: str = "+",
    ) -> None:
        """Draw a one-cell frame around the grid edge."""
        if self.height < 1 or self.width < 1:
            return
        for row in range(self.height):
            self.put(row, 0, side, attr)
            self.put(row, self.width - 1, side, attr)
        for row in {0, self.height - 1}:
            self.put(row, 0, corner + edge * max(0, self.width - 2), attr)
            self.put(row, self.width - 1, corner, attr)

    def blit(self, other: "Surface", dy: int = 0, dx: int = 0) -> None:
        """Copy the cells of `other` into this grid, shifted by (dy, dx)."""
        src_y0 = max(0, -dy)
        src_x0 = max(0, -dx)
        src_y1 = min(other.height, self.height - dy)
        src_x1 = min(other.width, self.width - dx)
        if src_y1 <= src_y0 or src_x1 <= src_x0:
            return
        src = (slice(src_y0, src_y1), slice(src_x0, src_x1))
        dst = (slice(src_y0 + dy, src_y1 + dy), slice(src_x0 + dx, src_x1 + dx))
        self.chars[dst] = other.chars[src]
        self.pairs[dst] = other.pairs[src]
        self.bold[dst] = other.bold[src]

    def row_text(self, y: int) -> str:
        """Plain text of one row, pads removed."""
        return "".join(self.chars[y])

    def text(self) -> str:
        return "\n".join(self.row_text(y) for y in range(self.height))


class TextCursor:
    """
    Sequential writer over a surface, in the manner of a terminal window.

    Text wraps onto the next row at the right edge; a newline moves to the
    start of the next row. Output past the last row is dropped.
    """

    def __init__(self, surface: Surface, attr: Attr = PLAIN) -> None:
        self.surface = surface
        self.attr = attr
        self.y = 0
        self.x = 0

    def write(self, text: str) -> None:
        for char in text:
            if char == "\n":
                self.y += 1
                self.x = 0
                continue
            w = glyph_width(char)
            if w == 0:
                continue
            if self.x + w > self.surface.width:
                self.y += 1
                self.x = 0
            if self.y >= self.surface.height:
                return
            self.surface.put(self.y, self.x, char, self.attr)
            self.x += w
            if self.x >= self.surface.width:
                self.y += 1
                self.x = 0
