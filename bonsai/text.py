"""
Word wrapping for the message box.

The message is scanned one character at a time into a word buffer. At
each whitespace character (and at the end) the buffered word is placed:

    fits on the current line  -> append it, then the separator
    longer than a whole line  -> put it on a line of its own, unbroken
    otherwise                 -> start a new line with it

`position` tracks the cursor column the way a terminal window would, and
is what the fit test is made against.
"""

from dataclasses import dataclass, field

from bonsai.surface import glyph_width


@dataclass
class WrappedText:
    """Wrapped lines plus the tracked cursor column after the last one."""

    lines: list[str] = field(default_factory=lambda: [""])
    position: int = 0

    def text(self) -> str:
        return "\n".join(self.lines)

    def rendered_rows(self, width: int) -> int:
        """
        Rows needed to show the lines in a window `width` cells wide.

        Counts the way TextCursor moves: filling the last column wraps to
        the next row, and a newline right after that still starts another
        row, leaving one blank.
        """
        lines = list(self.lines)
        while len(lines) > 1 and not lines[-1]:
            lines.pop()
        if width <= 0:
            return len(lines)

        y = x = 0
        for char in "\n".join(lines):
            if char == "\n":
                y += 1
                x = 0
                continue
            w = glyph_width(char)
            if w == 0:
                continue
            if x + w > width:
                y += 1
                x = 0
            x += w
            if x >= width:
                y += 1
                x = 0
        return max(1, y + 1 if x else y)


def wrap_message(message: str, max_width: int) -> WrappedText:
    """
    Word-wrap `message` to lines of at most `max_width` columns.

    Words longer than `max_width` are never broken or truncated; such a
    word gets a line to itself and the text after it resumes at column 0
    of the following line.
    """
    out = WrappedText()
    word = ""

    def newline() -> None:
        out.lines.append("")
        out.position = 0

    for char in message + "\0":
        end = char == "\0"
        if not (end or char.isspace()):
            word += char
            continue

        if out.position + len(word) <= max_width:
            out.lines[-1] += word
            out.position += len(word)
            word = ""
            if char in (" ", "\t"):
                # Separator only if there is room left for it
                if out.position < max_width - 1:
                    out.lines[-1] += " "
                    out.position += 1
            elif char == "\n":
                newline()
        elif len(word) > max_width:
            if out.lines[-1]:
                out.lines.append(word)
            else:
                out.lines[-1] = word
            word = ""
            newline()
        else:
            out.lines.append(word + " ")
            out.position = len(word)
            word = ""

    return out


def message_box_size(message: str, cols: int) -> tuple[int, int]:
    """
    Width and height of the text area for `message` on a `cols`-wide screen.

    Short messages get a single line just wide enough for them; longer ones
    get a quarter of the screen width and as many rows as wrapping needs.
    """
    quarter = int(0.25 * cols)
    if len(message) + 3 <= 0.25 * cols:
        return len(message) + 1, 1
    width = max(1, quarter)
    wrapped = wrap_message(message, width - 1)
    return width, wrapped.rendered_rows(width + 1)
