"""
Mandelbrot Set Viewer Package

An interactive Mandelbrot set explorer using Pygame for display and a
Numba JIT-compiled escape-time evaluator. The image is recomputed on a
background thread after every view change and drawn while it fills.

Quick Start:
    from mandelview import run
    run()

Or from command line:
    python -m mandelview

Package Structure:
    - colormaps.py: Palette generation (RGB grid walk and gradients)
    - viewport.py: View state, plane mapping and navigation commands
    - compute.py: Escape-time evaluator and cancellable pixel scan
    - renderer.py: Background scan worker and shared pixel buffer
    - settings.py: Settings defaults and JSON settings file
    - app.py: Main application and event loop
    - cli.py: Command-line options

Controls:
    - Page Up / Page Down: Zoom in / out
    - Arrow keys: Pan by one viewport
    - Q / A: Double / halve the iteration count
    - C: Next palette
    - R: Reset to default view
    - S: Save the current image as PNG
    - ESC: Quit
"""

import logging

from .colormaps import PALETTES, build_palette, list_palette_names
from .compute import escape_time, scan_pixels
from .renderer import PixelBuffer, RenderCoordinator, ScanState, Snapshot
from .settings import Settings, load_settings
from .viewport import Command, PlaneRect, ViewState, navigate, plane_rect


def run(settings=None):
    """Run the viewer (imports pygame on first use)."""
    from .app import run as _run
    _run(settings)


logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "run",
    "Command",
    "PALETTES",
    "PixelBuffer",
    "PlaneRect",
    "RenderCoordinator",
    "ScanState",
    "Settings",
    "Snapshot",
    "ViewState",
    "build_palette",
    "escape_time",
    "list_palette_names",
    "load_settings",
    "navigate",
    "plane_rect",
    "scan_pixels",
]
