"""
Composed screen to ANSI text.

Used for print mode: once the tree is finished (live or not) the composed
frame is walked cell by cell and re-emitted as plain text with SGR codes
for bold and foreground colour, so it can be left on the terminal or
written to a pipe.
"""

from dataclasses import dataclass

from bonsai.surface import PAD, Surface, glyph_width

RESET = "\033[0m"
BOLD = "\033[1m"

# Foregrounds of pairs 8..15 on terminals with fewer than 256 colours
_FOLDED = (7, 1, 2, 3, 4, 5, 6, 7)


@dataclass(frozen=True)
class Palette:
    """
    Fixed 16-slot palette mapping colour pairs to foreground colours.

    On terminals with fewer than 256 colours the bright half folds onto
    the basic eight (gray renders as white). With fewer than 8 colours the
    display is monochrome.
    """

    colors: int = 256

    @property
    def monochrome(self) -> bool:
        return self.colors < 8

    def foreground(self, pair: int) -> int | None:
        """Foreground colour of `pair`, or None for the terminal default."""
        if pair <= 0 or pair > 15 or self.monochrome:
            return None
        if pair >= 8 and self.colors < 256:
            return _FOLDED[pair - 8]
        return pair


def color_code(foreground: int | None) -> str:
    if foreground is None:
        return ""
    if foreground <= 7:
        return f"\033[3{foreground}m"
    return f"\033[9{foreground - 8}m"


def serialize_frame(frame: Surface, palette: Palette | None = None, noir: bool = False) -> str:
    """
    Re-emit a composed frame as a character stream.

    Args:
        frame: Composed screen (see Compositor.compose)
        palette: Colour mapping in effect on the live display
        noir: Emit bold/plain only, no colour codes

    Returns:
        Rows joined by newlines, terminated by a reset and a newline
    """
    palette = palette or Palette()
    rows = []
    for y in range(frame.height):
        parts = []
        x = 0
        while x < frame.width:
            char = frame.chars[y, x]
            if char == PAD:
                # Orphaned pad of a wide glyph that was partly covered
                char = " "
            parts.append(BOLD if frame.bold[y, x] else RESET)
            if not noir:
                parts.append(color_code(palette.foreground(int(frame.pairs[y, x]))))
            parts.append(char)
            width = glyph_width(char)
            if width > 1:
                x += width - 1
            x += 1
        rows.append("".join(parts))
    return "\n".join(rows) + RESET + "\n"
