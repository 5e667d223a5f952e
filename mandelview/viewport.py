"""
View state and the mapping from view state to the complex plane.

The visible region is the base rectangle [-2, 1] x [-1.5, 1.5] shrunk by
the zoom factor, then shifted by whole viewport widths/heights according
to the pan block. Navigation commands produce new (immutable) view states.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from .colormaps import DEFAULT_PALETTE, PALETTES, next_palette_name


# Base region of the complex plane shown at zoom 1, block (0, 0)
BASE_LEFT = -2.0
BASE_RIGHT = 1.0
BASE_TOP = -1.5
BASE_BOTTOM = 1.5

ZOOM_STEP = 0.5
MIN_ZOOM = 0.5
MIN_ITERATIONS = 1
MAX_ITERATIONS = 1 << 16
DEFAULT_ITERATIONS = 256


def _is_int(value):
    """True for int values; bool is rejected even though it subclasses int."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ViewState:
    """Navigation position: zoom factor, pan block and iteration budget."""

    zoom: float = 1.0
    block_x: int = 0
    block_y: int = 0
    max_iterations: int = DEFAULT_ITERATIONS
    palette: str = DEFAULT_PALETTE

    def __post_init__(self):
        if not _is_int(self.block_x) or not _is_int(self.block_y):
            raise ValueError(f"pan blocks must be integers, got {self.block_x!r}, {self.block_y!r}")
        if not _is_int(self.max_iterations):
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        if not self.zoom > 0:
            raise ValueError(f"zoom must be > 0, got {self.zoom}")
        if self.max_iterations < MIN_ITERATIONS:
            raise ValueError(f"max_iterations must be >= {MIN_ITERATIONS}, got {self.max_iterations}")
        if self.palette not in PALETTES:
            raise ValueError(f"unknown palette {self.palette!r}")


@dataclass(frozen=True)
class PlaneRect:
    """Axis-aligned rectangle in the complex plane."""

    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


def plane_rect(view: ViewState) -> PlaneRect:
    """Compute the region of the complex plane shown for a view state."""

    view_width = (BASE_RIGHT - BASE_LEFT) / view.zoom
    view_height = (BASE_BOTTOM - BASE_TOP) / view.zoom
    left = BASE_LEFT + view_width * view.block_x
    top = BASE_TOP + view_height * view.block_y
    return PlaneRect(left=left, right=left + view_width, top=top, bottom=top + view_height)


class Command(enum.Enum):
    """Navigation commands understood by navigate()."""

    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    PAN_UP = "pan_up"
    PAN_DOWN = "pan_down"
    PAN_LEFT = "pan_left"
    PAN_RIGHT = "pan_right"
    MORE_ITERATIONS = "more_iterations"
    FEWER_ITERATIONS = "fewer_iterations"
    NEXT_PALETTE = "next_palette"
    RESET = "reset"


def navigate(view: ViewState, command: Command) -> ViewState:
    """
    Apply one navigation command.

    Zoom never drops below MIN_ZOOM and the iteration budget saturates in
    [MIN_ITERATIONS, MAX_ITERATIONS], so the result is always a valid view.
    Pan blocks are unbounded.
    """
    if command is Command.ZOOM_IN:
        return replace(view, zoom=view.zoom + ZOOM_STEP)
    if command is Command.ZOOM_OUT:
        return replace(view, zoom=max(MIN_ZOOM, view.zoom - ZOOM_STEP))
    if command is Command.PAN_UP:
        return replace(view, block_y=view.block_y - 1)
    if command is Command.PAN_DOWN:
        return replace(view, block_y=view.block_y + 1)
    if command is Command.PAN_LEFT:
        return replace(view, block_x=view.block_x - 1)
    if command is Command.PAN_RIGHT:
        return replace(view, block_x=view.block_x + 1)
    if command is Command.MORE_ITERATIONS:
        return replace(view, max_iterations=min(MAX_ITERATIONS, view.max_iterations * 2))
    if command is Command.FEWER_ITERATIONS:
        return replace(view, max_iterations=max(MIN_ITERATIONS, view.max_iterations // 2))
    if command is Command.NEXT_PALETTE:
        return replace(view, palette=next_palette_name(view.palette))
    if command is Command.RESET:
        return ViewState(max_iterations=view.max_iterations, palette=view.palette)
    raise ValueError(f"Unknown command: {command!r}")


def title(view: ViewState) -> str:
    """Window caption describing the view state."""
    return (
        f"Mandelbrot [Mag:{view.zoom} Block:{view.block_x},{view.block_y} "
        f"Iterations:{view.max_iterations} Palette:{view.palette}]"
    )
