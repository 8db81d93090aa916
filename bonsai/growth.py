"""
Branch growth engine.

A run starts with a single trunk at the bottom centre of the tree canvas
and walks it step by step until its life runs out. Each step:

    1. Decrement life; age = starting life - remaining life
    2. Ask the policy for (dx, dy); never step below the canvas floor
    3. Possibly spawn a child branch at the current position:
         life < 3                      -> dead (leaf clutter)
         trunk/shoot, life < mult + 2  -> dying
         trunk, 1-in-3 or life % mult  -> new trunk (1-in-8, life > 7)
                                          or a shoot once cooled down
    4. Move, pick colour and glyph, write to the canvas
    5. In live mode, flush a frame and sleep

A spawned child grows to completion before its parent takes the rest of
its step. Branches are generators that yield the children they spawn, and
the engine keeps them on an explicit stack, so stack depth never depends
on the Python call stack.
"""

from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import NamedTuple, Protocol

import numpy as np

from bonsai import policy
from bonsai.config import BranchCursor, BranchKind, Counters, GrowthConfig
from bonsai.surface import PLAIN, Attr, Surface, glyph_width


class Canvas(Protocol):
    """Anything exposing the current tree surface (usually a Compositor)."""

    @property
    def tree(self) -> Surface: ...


class DrawRequest(NamedTuple):
    """One glyph placement emitted by a branch step."""

    y: int
    x: int
    kind: BranchKind
    glyph: str
    attr: Attr
    written: bool  # False when the wide-glyph column rule suppressed it


@dataclass
class GrowthResult:
    """Outcome of one growth run."""

    counters: Counters
    writes: list[DrawRequest] = field(default_factory=list)
    aborted: bool = False

    @property
    def branches(self) -> int:
        return self.counters.branches

    def summary(self) -> dict[str, int]:
        written = sum(1 for w in self.writes if w.written)
        return {
            "Branches": self.counters.branches,
            "Shoots": self.counters.shoots,
            "Writes": written,
            "Suppressed": len(self.writes) - written,
            "Aborted": int(self.aborted),
        }

    def print_summary(self) -> None:
        """Print a formatted summary table to stdout."""
        print("\n" + "=" * 40)
        print("GROWTH SUMMARY")
        print("=" * 40)
        for key, value in self.summary().items():
            print(f"{key:20s}: {value:>10d}")
        print("=" * 40)


def should_write(x: int, glyph: str) -> bool:
    """Wide glyphs are only placed on columns that are a multiple of their width."""
    width = glyph_width(glyph[:1]) if glyph else 1
    return x % max(1, width) == 0


class _Run:
    """State of a single growth run: config, rng, canvas and counters."""

    def __init__(
        self,
        config: GrowthConfig,
        canvas: Canvas,
        rng: np.random.Generator,
        counters: Counters,
        should_abort: Callable[[], bool] | None,
        on_frame: Callable[[], None] | None,
    ) -> None:
        self.config = config
        self.canvas = canvas
        self.rng = rng
        self.counters = counters
        self.should_abort = should_abort
        self.on_frame = on_frame
        self.result = GrowthResult(counters=counters)

    def _fast_forwarding(self) -> bool:
        return self.counters.branches < self.config.target_branch_count

    def _debug(self, row: int, text: str) -> None:
        if self.config.verbosity > 0:
            self.canvas.tree.put(row, 5, text, PLAIN)

    def _spawn(self, cursor: BranchCursor) -> BranchCursor | None:
        """Decide whether this step spawns a child branch."""
        cfg = self.config
        life = cursor.life
        here = (cursor.y, cursor.x)

        if life < 3:
            return BranchCursor(*here, BranchKind.DEAD, life)

        if (cursor.kind == BranchKind.TRUNK or cursor.kind.is_shoot) and life < (
            cfg.multiplier + 2
        ):
            return BranchCursor(*here, BranchKind.DYING, life)

        if cursor.kind != BranchKind.TRUNK:
            return None
        on_beat = cfg.multiplier > 0 and life % cfg.multiplier == 0
        if not (policy.roll(self.rng, 3) == 0 or on_beat):
            return None

        if policy.roll(self.rng, 8) == 0 and life > 7:
            cursor.shoot_cooldown = cfg.multiplier * 2
            offset = policy.roll(self.rng, 5) - 2
            return BranchCursor(*here, BranchKind.TRUNK, life + offset)

        if cursor.shoot_cooldown <= 0:
            cursor.shoot_cooldown = cfg.multiplier * 2
            self.counters.shoots += 1
            self.counters.shoot_counter += 1
            self._debug(4, f"shoots: {self.counters.shoots:02d}")
            kind = BranchKind(self.counters.shoot_counter % 2 + 1)
            return BranchCursor(*here, kind, life + cfg.multiplier)
        return None

    def _draw(self, cursor: BranchCursor, dx: int, dy: int) -> None:
        attr = policy.choose_attr(cursor.kind, self.config.noir, self.rng)
        glyph = policy.choose_glyph(
            self.config, cursor.kind, cursor.life, dx, dy, self.rng
        )
        written = should_write(cursor.x, glyph)
        if written:
            self.canvas.tree.put(cursor.y, cursor.x, glyph, attr)
        self.result.writes.append(
            DrawRequest(cursor.y, cursor.x, cursor.kind, glyph, attr, written)
        )

    def walk(self, cursor: BranchCursor) -> Generator[BranchCursor, None, None]:
        """Grow one branch, yielding each child it spawns."""
        cfg = self.config
        self.counters.branches += 1
        cursor.shoot_cooldown = cfg.multiplier

        while cursor.life > 0:
            if self.should_abort is not None and self.should_abort():
                self.result.aborted = True
                return

            cursor.life -= 1
            age = cfg.life - cursor.life

            dx, dy = policy.next_deltas(
                cursor.kind, cursor.life, age, cfg.multiplier,
                cfg.style.organic, self.rng,
            )
            # Keep off the ground
            if dy > 0 and cursor.y > self.canvas.tree.height - 2:
                dy -= 1

            child = self._spawn(cursor)
            if child is not None:
                yield child
                if self.result.aborted:
                    return
            cursor.shoot_cooldown -= 1

            self._debug(5, f"dx: {dx:02d}")
            self._debug(6, f"dy: {dy:02d}")
            self._debug(7, f"type: {int(cursor.kind)}")
            self._debug(8, f"shootCooldown: {cursor.shoot_cooldown: 3d}")

            cursor.x += dx
            cursor.y += dy
            self._draw(cursor, dx, dy)

            if cfg.live and self.on_frame is not None and not self._fast_forwarding():
                self.on_frame()


def grow(
    config: GrowthConfig,
    canvas: Canvas,
    rng: np.random.Generator,
    should_abort: Callable[[], bool] | None = None,
    on_frame: Callable[[], None] | None = None,
) -> GrowthResult:
    """
    Grow a complete tree onto `canvas.tree`.

    Args:
        config: Growth configuration
        canvas: Provides the tree surface; looked up on every step so a
            rebuilt surface is picked up mid-run
        rng: Random generator (seeded by the caller)
        should_abort: Polled before every step; True stops the whole run
        on_frame: Called after each write in live mode, unless the run is
            still catching up with `config.target_branch_count`

    Returns:
        GrowthResult with counters, every draw request and the abort flag
    """
    counters = Counters(shoot_counter=int(rng.integers(2**31 - 1)))
    run = _Run(config, canvas, rng, counters, should_abort, on_frame)

    tree = canvas.tree
    run._debug(2, f"maxX: {tree.width:03d}, maxY: {tree.height:03d}")
    root = BranchCursor(tree.height - 1, tree.width // 2, BranchKind.TRUNK, config.life)

    stack = [run.walk(root)]
    while stack:
        try:
            child = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        stack.append(run.walk(child))

    return run.result
