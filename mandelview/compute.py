"""
Mandelbrot computation functions.

This module contains the escape-time evaluator, JIT-compiled with Numba
since it runs once per pixel, and the scan engine that drives it over a
pixel buffer:
- escape_time: iteration count for one point of the complex plane
- pixel_color: map an iteration count to a palette color (black = in set)
- scan_pixels: row-major, cancellable fill of a pixel buffer
"""

import numpy as np
from numba import jit


ESCAPE_RADIUS_SQ = 4.0  # |z|^2 threshold (escape radius 2)
BLACK = np.zeros(3, dtype=np.uint8)


@jit(nopython=True, cache=True)
def escape_time(x0, y0, max_iter):
    """
    Count iterations of z <- z² + c until z escapes.

    Iteration starts at z = c = x0 + i·y0 and stops when |z|² > 4 or
    max_iter iterations have been performed.

    Args:
        x0, y0: Real and imaginary parts of c
        max_iter: Iteration budget (>= 1)

    Returns:
        Iteration count in [0, max_iter]. max_iter means the point did not
        escape and is treated as a member of the set.
    """
    x1 = x0
    y1 = y0
    iteration = 0
    while x1 * x1 + y1 * y1 <= ESCAPE_RADIUS_SQ and iteration < max_iter:
        xtemp = x1 * x1 - y1 * y1 + x0
        y1 = 2 * x1 * y1 + y0
        x1 = xtemp
        iteration += 1
    return iteration


def pixel_color(iterations, max_iter, palette):
    """Color for an iteration count: black inside the set, else palette[iterations]."""
    if iterations == max_iter:
        return BLACK
    return palette[iterations]


def scan_pixels(rect, max_iter, palette, buffer, cancel):
    """
    Fill a pixel buffer for one plane rectangle, pixel by pixel.

    Pixels are visited row-major (top to bottom, left to right). Pixel
    (px, py) maps to x = left + px·width/W, y = top + py·height/H. The
    buffer cursor moves to each pixel before it is computed.

    The cancel event is checked before every pixel; once it is set the
    scan returns without writing anything else, leaving the buffer
    partially updated.

    Args:
        rect: PlaneRect to sample
        max_iter: Iteration budget
        palette: (max_iter, 3) uint8 colors indexed by iteration count
        buffer: PixelBuffer to write into
        cancel: threading.Event (or anything with is_set())

    Returns:
        True if every pixel was written, False if the scan was cancelled
    """
    width, height = buffer.width, buffer.height
    dx = (rect.right - rect.left) / width
    dy = (rect.bottom - rect.top) / height

    for py in range(height):
        y0 = rect.top + py * dy
        for px in range(width):
            if cancel.is_set():
                return False
            buffer.move_cursor(px, py)
            iterations = escape_time(rect.left + px * dx, y0, max_iter)
            buffer.put(px, py, pixel_color(iterations, max_iter, palette))
    return True


def warmup_jit():
    """
    Warm up JIT compilation.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first scan.
    """
    escape_time(0.0, 0.0, 2)
