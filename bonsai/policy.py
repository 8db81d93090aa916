"""
Direction and shape policy for branch growth.

Each step of a branch asks the policy three questions:
    next_deltas: Which way to move (dx, dy), one die roll table per kind
    choose_attr: Which colour pair and whether bold
    choose_glyph: Which string to draw at the new position

All randomness is drawn from a numpy Generator passed by the caller, in a
fixed order, so a seeded run is reproducible. Screen coordinates grow
downward: dy = -1 climbs.
"""

import numpy as np

from bonsai.config import BARK, GREEN, LEAF, YELLOW, BranchKind, GrowthConfig
from bonsai.surface import Attr

FALLBACK_GLYPH = "?"
ORGANIC_DYING_GLYPH = "-=:."


def roll(rng: np.random.Generator, sides: int) -> int:
    """Roll a die with faces 0..sides-1."""
    return int(rng.integers(sides))


def _bucket(dice: int, table: tuple[tuple[int, int], ...]) -> int:
    """Map a die face to a value through (upper_face, value) buckets."""
    for upper, value in table:
        if dice <= upper:
            return value
    return table[-1][1]


# (highest face, value) tables for the weighted dice
_TRUNK_DX = ((0, -2), (3, -1), (5, 0), (8, 1), (9, 2))
_SHOOT_DY = ((1, -1), (7, 0), (9, 1))
_SHOOT_LEFT_DX = ((1, -2), (5, -1), (8, 0), (9, 1))
_SHOOT_RIGHT_DX = ((1, 2), (5, 1), (8, 0), (9, -1))
_DYING_DY = ((1, -1), (8, 0), (9, 1))
_DYING_DX = ((0, -3), (2, -2), (5, -1), (8, 0), (11, 1), (13, 2), (14, 3))
_DEAD_DY = ((2, -1), (6, 0), (9, 1))


def _trunk_deltas(
    life: int, age: int, multiplier: int, rng: np.random.Generator
) -> tuple[int, int]:
    if age <= 2 or life < 4:
        return roll(rng, 3) - 1, 0
    if age < multiplier * 3:
        half = max(1, multiplier // 2)
        dy = -1 if age % half == 0 else 0
        return _bucket(roll(rng, 10), _TRUNK_DX), dy
    dy = -1 if roll(rng, 10) > 2 else 0
    return roll(rng, 3) - 1, dy


def _organic_trunk_deltas(age: int, rng: np.random.Generator) -> tuple[int, int]:
    # Squat and wide: level half the time, sway widens with age
    dy = -1 if roll(rng, 10) <= 4 else 0
    if age <= 3:
        return 0, -1
    dice = roll(rng, 10)
    if age <= 10:
        dx = -1 if dice <= 2 else (1 if dice >= 8 else 0)
    else:
        dx = -1 if dice <= 3 else (1 if dice >= 7 else 0)
    return dx, dy


def next_deltas(
    kind: BranchKind,
    life: int,
    age: int,
    multiplier: int,
    organic: bool,
    rng: np.random.Generator,
) -> tuple[int, int]:
    """
    Pick the next step for a branch.

    Args:
        kind: Branch kind
        life: Remaining life after this step's decrement
        age: Steps elapsed since the run's starting life
        multiplier: Branching multiplier
        organic: Use the squat organic trunk table
        rng: Random generator

    Returns:
        (dx, dy) cell offsets
    """
    if kind == BranchKind.TRUNK:
        if organic:
            return _organic_trunk_deltas(age, rng)
        return _trunk_deltas(life, age, multiplier, rng)
    if kind == BranchKind.SHOOT_LEFT:
        dy = _bucket(roll(rng, 10), _SHOOT_DY)
        return _bucket(roll(rng, 10), _SHOOT_LEFT_DX), dy
    if kind == BranchKind.SHOOT_RIGHT:
        dy = _bucket(roll(rng, 10), _SHOOT_DY)
        return _bucket(roll(rng, 10), _SHOOT_RIGHT_DX), dy
    if kind == BranchKind.DYING:
        dy = _bucket(roll(rng, 10), _DYING_DY)
        return _bucket(roll(rng, 15), _DYING_DX), dy
    # Dead: fill in the surrounding area
    dy = _bucket(roll(rng, 10), _DEAD_DY)
    return roll(rng, 3) - 1, dy


def choose_attr(kind: BranchKind, noir: bool, rng: np.random.Generator) -> Attr:
    """
    Colour pair and bold flag for a branch write.

    Noir mode keeps only the bold/plain intensity split.
    """
    if kind == BranchKind.TRUNK or kind.is_shoot:
        bold = roll(rng, 2) == 0
        pair = BARK if bold else YELLOW
    elif kind == BranchKind.DYING:
        bold = roll(rng, 10) == 0
        pair = GREEN
    else:
        bold = roll(rng, 3) == 0
        pair = LEAF
    if noir:
        return Attr(0, bold)
    return Attr(pair, bold)


def _leaf(leaves: tuple[str, ...], rng: np.random.Generator) -> str:
    return leaves[roll(rng, len(leaves))]


def _organic_trunk_glyph(age: int, dx: int) -> str:
    # Tapers from four cells at the base to one near the top
    if age <= 3:
        forms = ("%###", "###", "###%")
    elif age <= 8:
        forms = ("%##", "###", "##%")
    elif age <= 15:
        forms = ("%#", "##", "#%")
    else:
        forms = ("%", "#", "%")
    return forms[0] if dx < 0 else (forms[1] if dx == 0 else forms[2])


def _shoot_glyph(
    dx: int, dy: int, down: str, level: str, up_left: str, up: str, up_right: str
) -> str:
    if dy > 0:
        return down
    if dy == 0:
        return level
    if dx < 0:
        return up_left
    if dx == 0:
        return up
    return up_right


def choose_glyph(
    config: GrowthConfig,
    kind: BranchKind,
    life: int,
    dx: int,
    dy: int,
    rng: np.random.Generator,
) -> str:
    """
    Glyph for a branch that just moved by (dx, dy).

    Branches with fewer than four steps of life left draw as dying; dead
    branches and (outside the organic style) dying ones draw a random glyph
    from the leaf set.
    """
    if life < 4 and kind != BranchKind.DEAD:
        kind = BranchKind.DYING

    if config.style.organic:
        if kind == BranchKind.TRUNK:
            return _organic_trunk_glyph(config.life - life, dx)
        if kind == BranchKind.SHOOT_LEFT:
            return _shoot_glyph(dx, dy, "%", "*+", "%*", "*%", "+")
        if kind == BranchKind.SHOOT_RIGHT:
            return _shoot_glyph(dx, dy, "%", "+*", "*%", "%*", "+")
        if kind == BranchKind.DYING:
            return ORGANIC_DYING_GLYPH
        return _leaf(config.leaves, rng)

    if kind == BranchKind.TRUNK:
        if dy == 0:
            return "/~"
        if dx < 0:
            return "\\|"
        if dx == 0:
            return "/|\\"
        return "|/"
    if kind == BranchKind.SHOOT_LEFT:
        return _shoot_glyph(dx, dy, "\\", "\\_", "\\|", "/|", "/")
    if kind == BranchKind.SHOOT_RIGHT:
        return _shoot_glyph(dx, dy, "/", "_/", "\\|", "/|", "/")
    if kind in (BranchKind.DYING, BranchKind.DEAD):
        return _leaf(config.leaves, rng)
    return FALLBACK_GLYPH
