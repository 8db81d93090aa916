"""
Bonsai - Random ASCII Bonsai Trees

Grows a randomly branching bonsai tree into a layered terminal canvas,
optionally animated, optionally printed as ANSI text when finished.

Modules:
    config: Branch kinds, base styles and growth configuration
    policy: Random direction, glyph and colour choices per branch kind
    growth: Growth engine (branch walking and spawning)
    surface: Cell grids and wide-glyph aware writes
    text: Word wrapping for the message box
    compositor: Layered surfaces, composition and diffed flushing
    serializer: Composed screen to ANSI text
    display: Curses and headless display drivers
    persistence: Save/load of seed and branch count
    session: User options and the session driver
    fetch: System information report under a tree
    cli: Command-line entry points
"""

from bonsai.compositor import Compositor, Geometry, layout
from bonsai.config import (
    BASE_STYLES,
    BaseStyle,
    BranchCursor,
    BranchKind,
    Counters,
    GrowthConfig,
    parse_leaves,
)
from bonsai.display import CursesDisplay, HeadlessDisplay
from bonsai.growth import DrawRequest, GrowthResult, grow
from bonsai.persistence import (
    PersistenceError,
    SavedProgress,
    default_cache_path,
    load_progress,
    save_progress,
)
from bonsai.policy import choose_attr, choose_glyph, next_deltas
from bonsai.serializer import Palette, serialize_frame
from bonsai.session import SessionOptions, SessionResult, run_session
from bonsai.surface import Attr, Surface, TextCursor, glyph_width
from bonsai.text import WrappedText, message_box_size, wrap_message

__all__ = [
    # Config
    "BASE_STYLES",
    "BaseStyle",
    "BranchCursor",
    "BranchKind",
    "Counters",
    "GrowthConfig",
    "parse_leaves",
    # Growth
    "DrawRequest",
    "GrowthResult",
    "choose_attr",
    "choose_glyph",
    "grow",
    "next_deltas",
    # Surfaces and layout
    "Attr",
    "Compositor",
    "Geometry",
    "Surface",
    "TextCursor",
    "WrappedText",
    "glyph_width",
    "layout",
    "message_box_size",
    "wrap_message",
    # Output
    "CursesDisplay",
    "HeadlessDisplay",
    "Palette",
    "serialize_frame",
    # Sessions
    "PersistenceError",
    "SavedProgress",
    "SessionOptions",
    "SessionResult",
    "default_cache_path",
    "load_progress",
    "run_session",
    "save_progress",
]
