"""
Tests for cell grids and the sequential text cursor.
"""

from bonsai.surface import BLANK, PAD, Attr, Surface, TextCursor, glyph_width, text_width


class TestGlyphWidth:
    """Tests for display width of single characters."""

    def test_widths(self) -> None:
        assert glyph_width("a") == 1
        assert glyph_width("木") == 2
        assert glyph_width("\u0301") == 0
        assert glyph_width("") == 0

    def test_text_width(self) -> None:
        assert text_width("a木b") == 4


class TestSurfacePut:
    """Tests for clipped, attribute-carrying writes."""

    def test_put_sets_cells_and_attributes(self) -> None:
        surface = Surface(2, 5)
        assert surface.put(1, 1, "ab", Attr(3, True)) == 2
        assert surface.row_text(1) == " ab  "
        assert surface.pairs[1, 1] == 3
        assert surface.bold[1, 2]
        assert not surface.bold[0, 1]

    def test_clips_at_right_edge(self) -> None:
        surface = Surface(1, 5)
        assert surface.put(0, 3, "abcd") == 2
        assert surface.row_text(0) == "   ab"

    def test_out_of_bounds_start_dropped(self) -> None:
        surface = Surface(1, 5)
        assert surface.put(0, 5, "x") == 0
        assert surface.put(-1, 0, "x") == 0
        assert surface.put(1, 0, "x") == 0
        assert surface.text() == " " * 5

    def test_wide_glyph_reserves_pad(self) -> None:
        surface = Surface(1, 4)
        surface.put(0, 0, "木")
        assert surface.chars[0, 0] == "木"
        assert surface.chars[0, 1] == PAD
        assert surface.row_text(0) == "木  "

    def test_wide_glyph_that_does_not_fit_is_dropped(self) -> None:
        surface = Surface(1, 3)
        assert surface.put(0, 2, "木") == 0
        assert surface.chars[0, 2] == BLANK

    def test_overwriting_pad_releases_wide_glyph(self) -> None:
        """Covering half of a wide glyph blanks the other half."""
        surface = Surface(1, 4)
        surface.put(0, 0, "木")
        surface.put(0, 1, "x")
        assert surface.chars[0, 0] == BLANK
        assert surface.chars[0, 1] == "x"

    def test_overwriting_lead_releases_pad(self) -> None:
        surface = Surface(1, 4)
        surface.put(0, 1, "木")
        surface.put(0, 1, "y")
        assert surface.row_text(0) == " y  "

    def test_clear(self) -> None:
        surface = Surface(2, 2)
        surface.put(0, 0, "ab", Attr(2, True))
        surface.clear()
        assert surface.text() == "  \n  "
        assert not surface.bold.any()
        assert not surface.pairs.any()


class TestSurfaceDrawing:
    """Tests for borders and block copies."""

    def test_border(self) -> None:
        surface = Surface(3, 4)
        surface.draw_border()
        assert surface.text() == "+--+\n|  |\n+--+"

    def test_border_on_empty_surface(self) -> None:
        Surface(0, 0).draw_border()

    def test_blit_with_offset(self) -> None:
        source = Surface(2, 2)
        source.put(0, 0, "ab")
        source.put(1, 0, "cd")
        target = Surface(3, 3)
        target.blit(source, 1, 2)
        assert target.text() == "   \n  a\n  c"

    def test_blit_outside_is_noop(self) -> None:
        source = Surface(1, 1)
        source.put(0, 0, "x")
        target = Surface(2, 2)
        target.blit(source, 5, 5)
        assert target.text() == "  \n  "


class TestTextCursor:
    """Tests for terminal-like sequential writes."""

    def test_wraps_at_right_edge(self) -> None:
        surface = Surface(2, 3)
        TextCursor(surface).write("abcdefg")
        assert surface.text() == "abc\ndef"

    def test_newline(self) -> None:
        surface = Surface(2, 4)
        TextCursor(surface).write("ab\ncd")
        assert surface.text() == "ab  \ncd  "

    def test_attribute_applied(self) -> None:
        surface = Surface(1, 2)
        TextCursor(surface, Attr(5, True)).write("z")
        assert surface.pairs[0, 0] == 5
        assert surface.bold[0, 0]
