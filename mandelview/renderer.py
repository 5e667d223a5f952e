"""
Background Mandelbrot renderer with cancellable scans.

The RenderCoordinator class handles:
- A single long-lived worker thread so the UI stays responsive
- Cancel-and-restart when the view changes while a scan is running
- The shared pixel buffer and scan cursor read by the display each frame
- Palette reuse across scans with the same palette/iteration budget
"""

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .colormaps import build_palette
from .compute import scan_pixels
from .viewport import ViewState, plane_rect

logger = logging.getLogger(__name__)


class ScanState(enum.Enum):
    IDLE = "idle"
    SCANNING = "scanning"


class PixelBuffer:
    """
    RGB pixel grid plus the cursor of the pixel being computed.

    Writes and snapshots share one lock, so a snapshot never sees a
    half-written pixel.
    """

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"buffer size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)
        self.cursor = (0, 0)
        self._lock = threading.Lock()

    def move_cursor(self, x, y):
        self.cursor = (x, y)

    def put(self, x, y, color):
        with self._lock:
            self.pixels[y, x] = color

    def fill(self, color):
        with self._lock:
            self.pixels[:] = color

    def copy(self):
        """Return (pixels copy, cursor)."""
        with self._lock:
            return self.pixels.copy(), self.cursor


@dataclass(frozen=True)
class Snapshot:
    """What the display layer draws for one frame."""

    pixels: np.ndarray
    cursor: tuple
    state: ScanState
    view: Optional[ViewState]


class RenderCoordinator:
    """
    Runs Mandelbrot scans on a background thread, one at a time.

    Usage:
        coordinator = RenderCoordinator(640, 480)
        coordinator.request_recompute(ViewState())

        # In your game loop:
        snapshot = coordinator.current_snapshot()
        display(snapshot.pixels, snapshot.cursor)

    A request made while a scan is running cancels that scan; the worker
    then starts the newest request. Older pending requests are replaced,
    never queued. All scans run on the same worker thread, so at most one
    scan writes to the buffer at any time.
    """

    def __init__(self, width, height):
        """
        Initialize the coordinator and start its worker thread.

        Args:
            width, height: Pixel buffer dimensions
        """
        self.buffer = PixelBuffer(width, height)

        self._cond = threading.Condition()
        self._state = ScanState.IDLE
        self._pending = None
        self._cancel = None  # Cancel event of the running scan
        self._view = None  # View of the most recently started scan
        self._closed = False

        # Only touched by the worker thread
        self._palette = None
        self._palette_key = None

        self._thread = threading.Thread(target=self._worker, name="mandelview-scan")
        self._thread.daemon = True
        self._thread.start()

    @property
    def width(self):
        return self.buffer.width

    @property
    def height(self):
        return self.buffer.height

    @property
    def state(self):
        with self._cond:
            return self._state

    @property
    def view(self):
        with self._cond:
            return self._view

    def request_recompute(self, view):
        """
        Request a scan of view, superseding any running or pending scan.

        Returns immediately; the scan happens on the worker thread.
        """
        with self._cond:
            if self._closed:
                raise RuntimeError("RenderCoordinator is closed")
            self._pending = view
            if self._cancel is not None:
                self._cancel.set()
            self._state = ScanState.SCANNING
            self._cond.notify_all()

    def current_snapshot(self):
        """
        Get a copy of the buffer and cursor for display.

        Safe to call while a scan is running; the image may be partial.
        """
        pixels, cursor = self.buffer.copy()
        with self._cond:
            return Snapshot(pixels=pixels, cursor=cursor, state=self._state, view=self._view)

    def wait_until_idle(self, timeout=None):
        """
        Block until no scan is running or pending.

        Returns:
            True if idle, False if the timeout expired first
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._state is ScanState.IDLE, timeout)

    def close(self, timeout=None):
        """Cancel any scan and stop the worker thread."""
        with self._cond:
            self._closed = True
            self._pending = None
            if self._cancel is not None:
                self._cancel.set()
            self._cond.notify_all()
        self._thread.join(timeout)

    def _worker(self):
        """Worker thread: take the newest request and scan it."""
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._pending is not None or self._closed)
                if self._closed:
                    self._state = ScanState.IDLE
                    self._cond.notify_all()
                    return
                view = self._pending
                self._pending = None
                cancel = threading.Event()
                self._cancel = cancel
                self._view = view

            try:
                self._scan(view, cancel)
            except Exception:
                logger.exception("Scan failed for %s", view)

            with self._cond:
                self._cancel = None
                if self._pending is None:
                    self._state = ScanState.IDLE
                    self._cond.notify_all()

    def _scan(self, view, cancel):
        rect = plane_rect(view)
        palette_key = (view.palette, view.max_iterations)
        if palette_key != self._palette_key:
            logger.debug("Building palette %s with %d colors", *palette_key)
            self._palette = build_palette(*palette_key)
            self._palette_key = palette_key

        logger.debug("Scan started: %s -> %s", view, rect)
        completed = scan_pixels(rect, view.max_iterations, self._palette, self.buffer, cancel)
        if completed:
            logger.debug("Scan finished: %s", view)
        else:
            logger.debug("Scan cancelled: %s", view)
        return completed
