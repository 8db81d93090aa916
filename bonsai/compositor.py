"""
Layered surfaces and frame composition.

Four surfaces are stacked bottom to top:

    tree            z=0  transparent, all rows above the base
    base            z=1  transparent, static art centred at the bottom
    message_border  z=2  opaque frame around the message
    message         z=3  opaque wrapped message text

Transparent surfaces let blank cells show what lies beneath. The composed
frame is what both the live display and the print serializer consume, so
the two always agree. Surfaces are rebuilt from scratch on every resize
and for every new tree.
"""

from typing import NamedTuple

import numpy as np

from bonsai.config import BASE_STYLES, GRAY, BaseStyle
from bonsai.display import Display
from bonsai.surface import BLANK, Attr, Surface, TextCursor
from bonsai.text import message_box_size, wrap_message


class Geometry(NamedTuple):
    """Placement of one surface on the screen."""

    height: int
    width: int
    y: int
    x: int
    z: int
    transparent: bool = False


BORDER_ATTR = Attr(GRAY, True)

# Stacking order
TREE_Z = 0
BASE_Z = 1
BORDER_Z = 2
MESSAGE_Z = 3


def layout(
    rows: int, cols: int, style: BaseStyle, message: str | None = None
) -> dict[str, Geometry]:
    """
    Compute surface geometries for a terminal of `rows` x `cols`.

    The message surfaces are only present when a message is configured.
    """
    base_y = rows - style.height - style.raise_rows
    base_x = cols // 2 - style.width // 2
    geometries = {
        "tree": Geometry(max(1, rows - style.height), cols, 0, 0, TREE_Z, True),
        "base": Geometry(style.height, style.width, base_y, base_x, BASE_Z, True),
    }
    if message:
        box_width, box_height = message_box_size(message, cols)
        top = int(rows * 0.7)
        left = int(cols * 0.7)
        geometries["message_border"] = Geometry(
            box_height + 2, box_width + 4, top - 1, left - 2, BORDER_Z
        )
        geometries["message"] = Geometry(
            box_height, box_width + 1, top, left, MESSAGE_Z
        )
    return geometries


def draw_base(surface: Surface, style: BaseStyle) -> None:
    """Paint the static art of a base style."""
    for segment in style.segments:
        surface.put(segment.row, segment.col, segment.text, Attr(segment.pair, segment.bold))


def draw_message(surface: Surface, message: str) -> None:
    """Wrap and write the message into its surface."""
    wrapped = wrap_message(message, surface.width - 2)
    TextCursor(surface).write(wrapped.text())


class Compositor:
    """
    Owns the layered surfaces of one screen and flushes composed frames.

    Only cells that changed since the previous flush are handed to the
    display, which does its own diffing against the physical terminal.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        base: int = 1,
        message: str | None = None,
        display: Display | None = None,
    ) -> None:
        self.style = BASE_STYLES[base]
        self.message = message
        self.display = display
        self.surfaces: dict[str, Surface] = {}
        self._last: Surface | None = None
        self.rebuild(rows, cols)

    @property
    def tree(self) -> Surface:
        return self.surfaces["tree"]

    @property
    def base(self) -> Surface:
        return self.surfaces["base"]

    @property
    def message_border(self) -> Surface | None:
        return self.surfaces.get("message_border")

    @property
    def message_body(self) -> Surface | None:
        return self.surfaces.get("message")

    def rebuild(self, rows: int, cols: int, keep_tree: bool = False) -> None:
        """
        Destroy and recreate every surface for a `rows` x `cols` screen.

        With `keep_tree`, the grown tree is copied into the new tree surface
        anchored at its bottom centre.
        """
        old_tree = self.surfaces.get("tree") if keep_tree else None
        self.rows = max(0, rows)
        self.cols = max(0, cols)
        self.surfaces = {
            name: Surface(g.height, g.width, g.y, g.x, g.z, g.transparent, name)
            for name, g in layout(self.rows, self.cols, self.style, self.message).items()
        }
        self._last = None

        draw_base(self.base, self.style)
        if self.message:
            self.message_border.draw_border(BORDER_ATTR)
            draw_message(self.message_body, self.message)
        if old_tree is not None:
            dy = self.tree.height - old_tree.height
            dx = self.tree.width // 2 - old_tree.width // 2
            self.tree.blit(old_tree, dy, dx)

    def stacked(self) -> list[Surface]:
        return sorted(self.surfaces.values(), key=lambda s: s.z)

    def compose(self) -> Surface:
        """Flatten all surfaces, in stacking order, into one screen grid."""
        frame = Surface(self.rows, self.cols, name="screen")
        for surface in self.stacked():
            y0 = max(0, surface.y)
            x0 = max(0, surface.x)
            y1 = min(self.rows, surface.y + surface.height)
            x1 = min(self.cols, surface.x + surface.width)
            if y1 <= y0 or x1 <= x0:
                continue
            src = (slice(y0 - surface.y, y1 - surface.y), slice(x0 - surface.x, x1 - surface.x))
            dst = (slice(y0, y1), slice(x0, x1))
            chars = surface.chars[src]
            if surface.transparent:
                mask = chars != BLANK
            else:
                mask = np.ones(chars.shape, dtype=bool)
            frame.chars[dst][mask] = chars[mask]
            frame.pairs[dst][mask] = surface.pairs[src][mask]
            frame.bold[dst][mask] = surface.bold[src][mask]
        return frame

    def flush(self) -> int:
        """
        Compose and hand the changed cells to the display.

        Calling it again without any intervening write changes nothing.

        Returns:
            Number of cells that changed
        """
        frame = self.compose()
        if self._last is None or self._last.chars.shape != frame.chars.shape:
            changed = np.ones(frame.chars.shape, dtype=bool)
        else:
            changed = (
                (frame.chars != self._last.chars)
                | (frame.pairs != self._last.pairs)
                | (frame.bold != self._last.bold)
            )
        count = int(changed.sum())
        if count and self.display is not None:
            self.display.present(frame, changed)
        self._last = frame
        return count
