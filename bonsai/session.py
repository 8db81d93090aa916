"""
Session driver.

Wires user options into one or more growth runs:

    load    -> seed and fast-forward target from the save file
    grow    -> one tree per iteration; infinite mode repeats after `wait`
    finish  -> wait for a key (unless printing), release the display, save
    print   -> serialize the final composed screen to `out`

Pressing `q` (any key in screensaver mode) aborts the session. An aborted
session still saves but does not print.
"""

import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator

from bonsai.compositor import Compositor
from bonsai.config import BASE_STYLES, GrowthConfig, parse_leaves
from bonsai.display import RESIZE, CursesDisplay, Display, HeadlessDisplay
from bonsai.growth import GrowthResult, grow
from bonsai.persistence import PersistenceError, default_cache_path, load_progress, save_progress
from bonsai.serializer import serialize_frame

#
# Options
#


class SessionOptions(BaseModel):
    """User-facing options for one bonsai session."""

    live: bool = Field(default=False, description="Show each step of growth")
    time_step: float = Field(default=0.03, gt=0, description="Seconds between growth steps")
    infinite: bool = Field(default=False, description="Keep growing trees")
    wait: float = Field(default=4.0, gt=0, description="Seconds between trees in infinite mode")
    screensaver: bool = Field(
        default=False, description="Live, infinite, save and load; any key quits"
    )
    noir: bool = Field(default=False, description="Bold/plain output only, no colour")
    message: str | None = Field(default=None, description="Message shown beside the tree")
    base: int = Field(default=1, description="Base art style, 0 is none")
    leaves: tuple[str, ...] | None = Field(
        default=None, description="Leaf glyphs; defaults depend on the base style"
    )
    multiplier: int = Field(default=5, ge=0, le=20, description="Branching multiplier")
    life: int = Field(default=32, ge=0, le=200, description="Starting life of the trunk")
    print_tree: bool = Field(default=False, description="Print the tree when finished")
    seed: int | None = Field(default=None, gt=0, description="Random seed; clock if unset")
    save_path: Path | None = Field(default=None, description="Save progress to this file")
    load_path: Path | None = Field(default=None, description="Load progress from this file")
    verbosity: int = Field(default=0, ge=0, description="Debug overlay level")

    @field_validator("base")
    @classmethod
    def _known_base(cls, value: int) -> int:
        if value not in BASE_STYLES:
            raise ValueError(f"invalid base index: '{value}'")
        return value

    @field_validator("leaves", mode="before")
    @classmethod
    def _split_leaves(cls, value: object) -> object:
        if isinstance(value, str):
            value = parse_leaves(value)
        elif value is not None:
            value = tuple(token for token in value if token)
        if value is not None and not value:
            raise ValueError("leaf list must contain at least one glyph")
        return value

    @model_validator(mode="after")
    def _apply_screensaver(self) -> "SessionOptions":
        if self.screensaver:
            self.live = True
            self.infinite = True
            if self.save_path is None:
                self.save_path = default_cache_path()
            if self.load_path is None:
                self.load_path = default_cache_path()
        return self

    @property
    def resolved_leaves(self) -> tuple[str, ...]:
        if self.leaves:
            return self.leaves
        return BASE_STYLES[self.base].default_leaves

    def growth_config(self, target_branch_count: int = 0) -> GrowthConfig:
        return GrowthConfig(
            life=self.life,
            multiplier=self.multiplier,
            base=self.base,
            noir=self.noir,
            leaves=self.resolved_leaves,
            live=self.live,
            time_step=self.time_step,
            target_branch_count=target_branch_count,
            verbosity=self.verbosity,
        )


#
# Driver
#


@dataclass
class SessionResult:
    """What a session did: the seed it ended on and every tree it grew."""

    seed: int
    trees: list[GrowthResult] = field(default_factory=list)
    aborted: bool = False
    output: str | None = None

    @property
    def branches(self) -> int:
        return self.trees[-1].branches if self.trees else 0


def is_quit_key(key: str | None, screensaver: bool) -> bool:
    if key is None or key == RESIZE:
        return False
    return screensaver or key == "q"


def default_display(options: SessionOptions) -> Display:
    """A terminal is only needed when something is animated or waited on."""
    if options.print_tree and not (options.live or options.infinite):
        return HeadlessDisplay(noir=options.noir)
    return CursesDisplay(noir=options.noir)


def _load(options: SessionOptions) -> tuple[int | None, int]:
    if options.load_path is None:
        return options.seed, 0
    try:
        saved = load_progress(options.load_path)
    except PersistenceError as e:
        print(f"warning: {e}", file=sys.stderr)
        return options.seed, 0
    return saved.seed, saved.target_branch_count


def run_session(
    options: SessionOptions,
    display: Display | None = None,
    out: TextIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> SessionResult:
    """
    Run a full bonsai session.

    Args:
        options: Validated session options
        display: Display to draw on; see default_display when omitted.
            The display is entered as a context manager and closed on exit.
        out: Stream for print mode (defaults to stdout)
        sleep: Called with the step delay after each live frame
        clock: Seed source when no seed is configured

    Returns:
        SessionResult with the final seed and every tree grown
    """
    out = sys.stdout if out is None else out
    if display is None:
        display = default_display(options)

    seed, target = _load(options)
    if not seed:
        seed = int(clock())
    rng = np.random.default_rng(seed)
    result = SessionResult(seed=seed)

    with display:
        while True:
            rows, cols = display.size()
            compositor = Compositor(rows, cols, options.base, options.message, display)

            def should_abort() -> bool:
                key = display.poll_key()
                if key == RESIZE:
                    compositor.rebuild(*display.size(), keep_tree=True)
                return is_quit_key(key, options.screensaver)

            def on_frame() -> None:
                compositor.flush()
                sleep(options.time_step)

            tree = grow(options.growth_config(target), compositor, rng, should_abort, on_frame)
            result.trees.append(tree)
            compositor.flush()
            target = 0

            if tree.aborted:
                result.aborted = True
                break
            if not options.infinite:
                break
            if is_quit_key(display.wait_key(options.wait), options.screensaver):
                result.aborted = True
                break

            seed = int(clock())
            rng = np.random.default_rng(seed)
            result.seed = seed

        if not options.print_tree and not result.aborted:
            display.wait_key(None)
        frame = compositor.compose()

    if options.save_path is not None:
        try:
            save_progress(options.save_path, result.seed, result.branches)
        except PersistenceError as e:
            print(f"warning: {e}", file=sys.stderr)

    if options.print_tree and not result.aborted:
        result.output = serialize_frame(frame, display.palette, options.noir)
        out.write(result.output)
        out.flush()
    return result
