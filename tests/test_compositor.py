"""
Tests for surface layout, composition and diffed flushing.
"""

from bonsai.compositor import Compositor, Geometry, layout
from bonsai.config import BASE_STYLES
from bonsai.display import HeadlessDisplay

POT_RIM = ":___________./~~~\\.___________:"


def make_test_compositor(
    rows: int = 24, cols: int = 80, base: int = 1, message: str | None = None
) -> tuple[Compositor, HeadlessDisplay]:
    display = HeadlessDisplay(rows, cols)
    return Compositor(rows, cols, base, message, display), display


class TestLayout:
    """Tests for surface geometry."""

    def test_pot_layout(self) -> None:
        geometries = layout(24, 80, BASE_STYLES[1])
        assert geometries["tree"] == Geometry(20, 80, 0, 0, 0, True)
        assert geometries["base"] == Geometry(4, 31, 20, 25, 1, True)
        assert "message" not in geometries

    def test_roots_base_is_raised(self) -> None:
        geometries = layout(24, 80, BASE_STYLES[3])
        assert geometries["base"].y == 19

    def test_no_base(self) -> None:
        geometries = layout(24, 80, BASE_STYLES[0])
        assert geometries["tree"].height == 24

    def test_message_geometry(self) -> None:
        geometries = layout(24, 80, BASE_STYLES[1], "hi")
        assert geometries["message_border"] == Geometry(3, 7, 15, 54, 2, False)
        assert geometries["message"] == Geometry(1, 4, 16, 56, 3, False)

    def test_tree_at_least_one_row(self) -> None:
        geometries = layout(2, 10, BASE_STYLES[1])
        assert geometries["tree"].height == 1


class TestCompose:
    """Tests for stacking and transparency."""

    def test_base_art_at_bottom(self) -> None:
        compositor, _ = make_test_compositor()
        frame = compositor.compose()
        assert frame.row_text(20)[25:56] == POT_RIM

    def test_transparent_base_shows_tree(self) -> None:
        """Blank base cells show the tree; drawn base cells cover it."""
        compositor, _ = make_test_compositor(base=3)
        compositor.tree.put(19, 39, "X")
        compositor.tree.put(19, 24, "Y")
        frame = compositor.compose()
        assert frame.chars[19, 39] == "#"
        assert frame.chars[19, 24] == "Y"

    def test_message_is_opaque(self) -> None:
        compositor, _ = make_test_compositor(message="hi")
        compositor.tree.put(16, 58, "Z")
        frame = compositor.compose()
        assert frame.row_text(16)[56:60] == "hi  "
        assert frame.chars[15, 54] == "+"

    def test_attributes_carried(self) -> None:
        compositor, _ = make_test_compositor()
        frame = compositor.compose()
        assert frame.pairs[20, 25] == 8
        assert frame.bold[20, 25]

    def test_small_terminal(self) -> None:
        """A terminal smaller than the base still composes."""
        compositor, _ = make_test_compositor(rows=2, cols=10, message="hello world")
        frame = compositor.compose()
        assert frame.chars.shape == (2, 10)

    def test_window_wide_word_keeps_following_text(self) -> None:
        """A word filling the whole message window does not push later words out."""
        compositor, _ = make_test_compositor(rows=40, cols=40, base=0, message="a " + "b" * 11 + " c")
        body = compositor.message_body

        assert body.width == 11
        assert body.height == 4
        assert body.row_text(1) == "b" * 11
        assert body.row_text(2).strip() == ""
        assert body.row_text(3).startswith("c")


class TestFlush:
    """Tests for diffed flushing."""

    def test_first_flush_sends_everything(self) -> None:
        compositor, display = make_test_compositor()
        assert compositor.flush() == 24 * 80
        assert display.frames == 1

    def test_flush_is_idempotent(self) -> None:
        compositor, display = make_test_compositor()
        compositor.flush()
        assert compositor.flush() == 0
        assert display.frames == 1

    def test_only_changes_sent(self) -> None:
        compositor, display = make_test_compositor()
        compositor.flush()
        compositor.tree.put(0, 0, "x")
        assert compositor.flush() == 1
        assert display.cells_presented == 24 * 80 + 1


class TestRebuild:
    """Tests for resize handling."""

    def test_rebuild_keeps_tree_anchored(self) -> None:
        compositor, _ = make_test_compositor(base=0)
        compositor.tree.put(23, 40, "T")
        compositor.rebuild(30, 100, keep_tree=True)
        assert compositor.tree.height == 30
        assert compositor.tree.chars[29, 50] == "T"

    def test_rebuild_discards_tree(self) -> None:
        compositor, _ = make_test_compositor(base=0)
        compositor.tree.put(23, 40, "T")
        compositor.rebuild(24, 80)
        assert compositor.tree.text().strip() == ""

    def test_rebuild_resends_frame(self) -> None:
        compositor, _ = make_test_compositor()
        compositor.flush()
        compositor.rebuild(10, 40)
        assert compositor.flush() == 10 * 40
