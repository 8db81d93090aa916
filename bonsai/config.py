"""
Configuration and type definitions for bonsai growth.

This module defines the branch kinds, the base-style table, the per-run
growth configuration and the mutable bookkeeping shared by one growth run.

Branch kinds:
    TRUNK: Main stem, climbs and spawns shoots
    SHOOT_LEFT / SHOOT_RIGHT: Side branches trending to one side
    DYING: End of a trunk or shoot, spreads wide
    DEAD: Leaf clusters scattered around branch ends

Colour slots follow a fixed 16-entry palette (see serializer.Palette).
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple

# Colour-pair slots used by the art and the policy
DEFAULT = 0
GREEN = 2  # Soil, dying branches
YELLOW = 3  # Trunk
GRAY = 8  # Pot rim, message border
LEAF = 10  # Bright green
BARK = 11  # Bright yellow

DEFAULT_LEAVES: tuple[str, ...] = ("&",)
ORGANIC_LEAVES: tuple[str, ...] = (".", ".:", "::", "-", "--", "*")


class BranchKind(IntEnum):
    """Closed set of branch kinds. Values match the shoot parity rule."""

    TRUNK = 0
    SHOOT_LEFT = 1
    SHOOT_RIGHT = 2
    DYING = 3
    DEAD = 4

    @property
    def is_shoot(self) -> bool:
        return self in (BranchKind.SHOOT_LEFT, BranchKind.SHOOT_RIGHT)


class ArtSegment(NamedTuple):
    """A run of base-art text drawn with a single colour pair."""

    row: int
    col: int
    text: str
    pair: int
    bold: bool = False


@dataclass(frozen=True)
class BaseStyle:
    """
    A static ASCII-art footer and its branching table.

    `organic` selects the squat, wide trunk table and the dense glyph set.
    `raise_rows` lifts the art so it overlaps the bottom of the tree canvas.
    """

    name: str
    width: int
    height: int
    segments: tuple[ArtSegment, ...] = ()
    organic: bool = False
    raise_rows: int = 0
    default_leaves: tuple[str, ...] = DEFAULT_LEAVES


def _pot() -> BaseStyle:
    rim = "  \\_________________________/ "
    return BaseStyle(
        name="pot",
        width=31,
        height=4,
        segments=(
            ArtSegment(0, 0, ":", GRAY, True),
            ArtSegment(0, 1, "___________", GREEN, True),
            ArtSegment(0, 12, "./~~~\\.", BARK, True),
            ArtSegment(0, 19, "___________", GREEN, True),
            ArtSegment(0, 30, ":", GRAY, True),
            ArtSegment(1, 0, " \\                           / ", GRAY, True),
            ArtSegment(2, 0, rim, GRAY, True),
            ArtSegment(3, 0, "  (_)                     (_)", GRAY, True),
        ),
    )


def _bowl() -> BaseStyle:
    return BaseStyle(
        name="bowl",
        width=15,
        height=3,
        segments=(
            ArtSegment(0, 0, "(", GRAY),
            ArtSegment(0, 1, "---", GREEN),
            ArtSegment(0, 4, "./~~~\\.", BARK),
            ArtSegment(0, 11, "---", GREEN),
            ArtSegment(0, 14, ")", GRAY),
            ArtSegment(1, 0, " (           ) ", GRAY),
            ArtSegment(2, 0, "  (_________)  ", GRAY),
        ),
    )


def _roots() -> BaseStyle:
    # Trunk tapers from the narrow top row into wide roots
    return BaseStyle(
        name="roots",
        width=35,
        height=4,
        segments=(
            ArtSegment(0, 16, "###", YELLOW),
            ArtSegment(1, 15, "#####", YELLOW),
            ArtSegment(2, 14, "*", GRAY),
            ArtSegment(2, 15, "#####", YELLOW),
            ArtSegment(2, 20, "*", GRAY),
            ArtSegment(3, 0, ".::--==++", GRAY),
            ArtSegment(3, 9, "****#########****", YELLOW),
            ArtSegment(3, 26, "++==--::.", GRAY),
        ),
        organic=True,
        raise_rows=1,
        default_leaves=ORGANIC_LEAVES,
    )


BASE_STYLES: dict[int, BaseStyle] = {
    0: BaseStyle(name="none", width=0, height=0),
    1: _pot(),
    2: _bowl(),
    3: _roots(),
}


def parse_leaves(text: str) -> tuple[str, ...]:
    """Split a comma-delimited leaf list, dropping empty tokens."""
    return tuple(token for token in text.split(",") if token)


@dataclass(frozen=True)
class GrowthConfig:
    """
    Immutable configuration for one growth run.

    `target_branch_count` is only used to skip animation pacing while a
    loaded run catches up with its saved milestone.
    """

    life: int = 32  # Starting life budget of the first trunk
    multiplier: int = 5  # Shoot frequency and spread
    base: int = 1  # Key into BASE_STYLES
    noir: bool = False
    leaves: tuple[str, ...] = DEFAULT_LEAVES
    live: bool = False
    time_step: float = 0.03  # Seconds between animation steps
    target_branch_count: int = 0
    verbosity: int = 0

    def __post_init__(self) -> None:
        if self.life < 0:
            raise ValueError("Life must be nonnegative")
        if self.multiplier < 0:
            raise ValueError("Multiplier must be nonnegative")
        if self.time_step < 0:
            raise ValueError("Step delay must be nonnegative")
        if self.target_branch_count < 0:
            raise ValueError("Target branch count must be nonnegative")
        if not self.leaves:
            raise ValueError("Leaf set must contain at least one glyph")
        if self.base not in BASE_STYLES:
            raise ValueError(f"Unknown base style: {self.base}")

    @property
    def style(self) -> BaseStyle:
        return BASE_STYLES[self.base]


@dataclass
class Counters:
    """
    Mutable counters owned by a single growth run.

    `shoot_counter` starts at a random value; its parity picks the side
    of the next shoot.
    """

    branches: int = 0
    shoots: int = 0
    shoot_counter: int = 0


@dataclass
class BranchCursor:
    """Walking state of one branch. Lives only while that branch grows."""

    y: int
    x: int
    kind: BranchKind
    life: int
    shoot_cooldown: int = 0
