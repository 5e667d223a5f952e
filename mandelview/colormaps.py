"""
Palette definitions for Mandelbrot visualization.

A palette is a numpy array of shape (max_iterations, 3) with RGB values
(uint8), indexed directly by the escape iteration count. Points that never
escape are drawn black, so no palette entry is ever pure black.

The "Grid" palette walks the RGB cube in equal steps. The gradient
palettes are defined at a fixed resolution (4096 colors) and resampled
to the requested length.

To add a new palette:
1. Define a create_gradient_xxx() function that returns the color array
2. Add it to the PALETTES dictionary at the bottom of this file
"""

import math

import numpy as np


NUM_COLORS = 4096  # Resolution of gradient definitions
GRID_MAX = 0xFF * 0xFF * 0xFF  # Upper bound of the RGB grid walk
MIN_COLOR = (1, 1, 1)  # Replaces black, which is reserved for the set


def create_gradient_hot():
    """
    Hot gradient: black -> red -> orange -> yellow -> white.

    Uses a power curve to spend more time in the bright colors.
    """
    t = np.linspace(0.0, 1.0, NUM_COLORS) ** 0.8
    colors = np.empty((NUM_COLORS, 3), dtype=np.uint8)
    colors[:, 0] = np.clip(255 * np.minimum(1, t * 2.5), 0, 255)
    colors[:, 1] = np.clip(255 * np.maximum(0, (t - 0.4) * 2.5), 0, 255)
    colors[:, 2] = np.clip(255 * np.maximum(0, (t - 0.7) * 3.3), 0, 255)
    return colors


def create_gradient_ocean():
    """Ocean gradient: deep blue -> cyan -> white."""
    t = np.linspace(0.0, 1.0, NUM_COLORS)
    colors = np.empty((NUM_COLORS, 3), dtype=np.uint8)
    colors[:, 0] = np.clip(255 * np.maximum(0, (t - 0.5) * 2), 0, 255)  # Red (late)
    colors[:, 1] = np.clip(255 * t, 0, 255)                            # Green
    colors[:, 2] = np.clip(50 + 205 * t, 0, 255)                       # Blue (starts high)
    return colors


def create_gradient_rainbow():
    """
    Rainbow gradient: cycles through hues.

    High-contrast look that shows fine detail. Cycles through 5 complete
    hue rotations at full saturation and value.
    """
    h = (np.linspace(0.0, 1.0, NUM_COLORS) * 5) % 1.0
    band = np.minimum((h * 6).astype(np.int64), 5)
    rising = 255 * (h * 6 - band)  # 0 -> 255 across a band
    falling = 255 - rising

    full = np.full(NUM_COLORS, 255.0)
    zero = np.zeros(NUM_COLORS)
    bands = [band == k for k in range(6)]
    red = np.select(bands, [full, falling, zero, zero, rising, full])
    green = np.select(bands, [rising, full, full, falling, zero, zero])
    blue = np.select(bands, [zero, zero, rising, full, full, falling])
    return np.clip(np.stack([red, green, blue], axis=1), 0, 255).astype(np.uint8)


def create_gradient_grayscale():
    """Grayscale gradient: black -> white."""
    v = np.linspace(0, 255, NUM_COLORS).astype(np.uint8)
    return np.stack([v, v, v], axis=1)


def build_grid_palette(max_iterations):
    """
    Walk the RGB grid in equal steps, one color per iteration count.

    Each grid code is decoded as 0xRRGGBB. The walk starts one step in so
    the first color is not black. When the grid runs out before
    max_iterations entries, the last color is repeated.

    Args:
        max_iterations: Number of palette entries (>= 1)

    Returns:
        Palette array (max_iterations, 3) of uint8 RGB values
    """
    step = math.ceil(GRID_MAX / max_iterations)
    codes = np.arange(step, GRID_MAX + 1, step, dtype=np.int64)[:max_iterations]
    if len(codes) < max_iterations:
        codes = np.concatenate(
            [codes, np.full(max_iterations - len(codes), codes[-1], dtype=np.int64)]
        )

    colors = np.empty((max_iterations, 3), dtype=np.uint8)
    colors[:, 0] = (codes >> 16) & 0xFF
    colors[:, 1] = (codes >> 8) & 0xFF
    colors[:, 2] = codes & 0xFF
    return colors


def resample_gradient(gradient, max_iterations):
    """
    Resample a gradient to max_iterations entries.

    Entry i takes the gradient color at fraction (i + 1) / max_iterations,
    so low iteration counts land just above the dark end of the gradient.
    """
    positions = np.arange(1, max_iterations + 1) / max_iterations
    indices = np.rint(positions * (len(gradient) - 1)).astype(np.int64)
    return gradient[indices]


def _gradient_palette(create_gradient):
    def build(max_iterations):
        return resample_gradient(create_gradient(), max_iterations)
    return build


# Registry of all available palettes.
# Keys are display names, values are builders taking max_iterations.
# The first entry is the default.
PALETTES = {
    'Grid': build_grid_palette,
    'Hot': _gradient_palette(create_gradient_hot),
    'Ocean': _gradient_palette(create_gradient_ocean),
    'Rainbow': _gradient_palette(create_gradient_rainbow),
    'Grayscale': _gradient_palette(create_gradient_grayscale),
}

DEFAULT_PALETTE = 'Grid'


def build_palette(name, max_iterations):
    """
    Build a palette by name.

    Args:
        name: Key from PALETTES dictionary
        max_iterations: Palette length, one entry per escape iteration count

    Returns:
        Palette array (max_iterations, 3) of uint8 RGB values, with no
        pure black entries

    Raises:
        KeyError if name not found
        ValueError if max_iterations is not an integer >= 1
    """
    builder = PALETTES[name]
    if not isinstance(max_iterations, (int, np.integer)) or isinstance(max_iterations, bool):
        raise ValueError(f"max_iterations must be an integer, got {max_iterations!r}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    colors = np.ascontiguousarray(builder(int(max_iterations)), dtype=np.uint8)
    colors[~colors.any(axis=1)] = MIN_COLOR
    return colors


def list_palette_names():
    """Get list of available palette names."""
    return list(PALETTES.keys())


def next_palette_name(name):
    """Get the palette name following name in the registry, wrapping around."""
    names = list_palette_names()
    return names[(names.index(name) + 1) % len(names)]
