"""
Main application module for the Mandelbrot viewer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- Keyboard navigation (zoom, pan, iterations, palette)
- Drawing the (possibly partial) pixel buffer every frame
- Handing view changes to the render coordinator
"""

import logging
import os
from datetime import datetime

import pygame

from .compute import warmup_jit
from .renderer import RenderCoordinator, ScanState
from .settings import Settings
from .viewport import Command, ViewState, navigate, title

logger = logging.getLogger(__name__)

CURSOR_COLOR = (0xFF, 0xFF, 0xFF)

# Key bindings for navigation commands
KEY_COMMANDS = {
    pygame.K_PAGEUP: Command.ZOOM_IN,
    pygame.K_PAGEDOWN: Command.ZOOM_OUT,
    pygame.K_UP: Command.PAN_UP,
    pygame.K_DOWN: Command.PAN_DOWN,
    pygame.K_LEFT: Command.PAN_LEFT,
    pygame.K_RIGHT: Command.PAN_RIGHT,
    pygame.K_q: Command.MORE_ITERATIONS,
    pygame.K_a: Command.FEWER_ITERATIONS,
    pygame.K_c: Command.NEXT_PALETTE,
    pygame.K_r: Command.RESET,
}


class MandelbrotApp:
    """
    Main application class for the Mandelbrot viewer.

    Owns the view state and the pygame window. Every navigation key
    produces a new view state and a recompute request; the coordinator
    cancels whatever scan is running, so the caption always matches the
    image being computed.
    """

    def __init__(self, settings=None, coordinator=None):
        """
        Initialize the application.

        Args:
            settings: Settings instance (default Settings())
            coordinator: RenderCoordinator to use (default: one sized to the window)
        """
        self.settings = settings or Settings()
        self.width = self.settings.width
        self.height = self.settings.height
        self.view = ViewState(
            max_iterations=self.settings.max_iterations,
            palette=self.settings.palette,
        )

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        self.coordinator = coordinator
        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        try:
            self._init_components()
            self.running = True
            while self.running:
                self._handle_events()
                self._draw()
                self.clock.tick(self.settings.fps)
        finally:
            if self.coordinator is not None:
                self.coordinator.close(timeout=1.0)
            pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.width, self.height))
        self.clock = pygame.time.Clock()

    def _init_components(self):
        """Compile the evaluator and start the first scan."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit()
        if self.coordinator is None:
            self.coordinator = RenderCoordinator(self.width, self.height)
        self._set_view(self.view)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_s:
            self._save_image()
        elif event.key in KEY_COMMANDS:
            self._set_view(navigate(self.view, KEY_COMMANDS[event.key]))

    def _set_view(self, view):
        self.view = view
        self.coordinator.request_recompute(view)
        pygame.display.set_caption(title(view))

    def _save_image(self):
        """Save the currently displayed buffer as a PNG file."""
        snapshot = self.coordinator.current_snapshot()
        surface = pygame.surfarray.make_surface(snapshot.pixels.swapaxes(0, 1))

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = os.path.join(self.settings.save_dir, f"mandelbrot_{timestamp}.png")
        pygame.image.save(surface, filename)
        if snapshot.state is ScanState.SCANNING:
            logger.info("Saved partial image to %s", filename)
        else:
            logger.info("Saved image to %s", filename)

    def _draw(self):
        """Draw the current frame."""
        snapshot = self.coordinator.current_snapshot()
        self.screen.fill((0, 0, 0))
        pygame.surfarray.blit_array(self.screen, snapshot.pixels.swapaxes(0, 1))
        if self.settings.highlight_cursor and snapshot.state is ScanState.SCANNING:
            self.screen.set_at(snapshot.cursor, CURSOR_COLOR)
        pygame.display.flip()


def run(settings=None):
    """
    Run the Mandelbrot viewer.

    Args:
        settings: Settings instance (default Settings())
    """
    app = MandelbrotApp(settings)
    try:
        app.run()
    except KeyboardInterrupt:
        pass
