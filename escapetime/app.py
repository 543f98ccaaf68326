"""
Interactive pygame viewer for escapetime.

Contains the FractalApp class which handles:
- Window setup and main loop
- User input (zoom, keyboard)
- Ticking the tile scheduler a few tiles per frame
- Interaction between the scheduler and the display

The renderer never blocks the loop for more than tiles_per_frame tiles,
so the window stays responsive while a slow view fills in.
"""

import logging
import os
from datetime import datetime

import pygame

from .colormaps import list_palette_names
from .compute import ITERATION_POLICIES, get_policy, policy_name, warmup_jit
from .renderer import TileScheduler
from .settings import load_settings
from .surface import PygameSurface


logger = logging.getLogger(__name__)


class FractalApp:
    """
    Main application class for the viewer.

    Handles the pygame window, event loop, and coordinates between the
    tile scheduler and the display.
    """

    # Zoom factors
    ZOOM_IN_FACTOR = 0.85
    ZOOM_OUT_FACTOR = 1.18

    # max_iter step for +/- keys
    ITER_STEP = 50

    def __init__(self, width=None, height=None, max_iter=None, settings=None):
        """
        Initialize the application.

        Args:
            width: Window width in pixels (default from settings)
            height: Window height in pixels (default from settings)
            max_iter: Maximum iteration count (default from settings)
            settings: Settings dict (default: load_settings())
        """
        self.settings = settings if settings is not None else load_settings()
        default_w, default_h = self.settings['window']
        self.width = width or default_w
        self.height = height or default_h
        self.max_iter = max_iter or self.settings['max_iter']

        self.default_bounds = tuple(self.settings['bounds'])
        self.x_min, self.x_max, self.y_min, self.y_max = self.default_bounds

        self.palette_names = list_palette_names()
        palette = self.settings['palette']
        self.palette_index = self.palette_names.index(palette) if palette in self.palette_names else 0
        self.policy_names = list(ITERATION_POLICIES)
        # Settings may name the policy by id or in any case
        self.policy = policy_name(get_policy(self.settings['policy']))

        # Pygame state (initialized in run())
        self.screen = None
        self.canvas = None
        self.clock = None
        self.scheduler = None
        self.handle = None

        self.running = False

    @property
    def palette(self):
        return self.palette_names[self.palette_index]

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit()
        self._start_render()

        tiles_per_frame = self.settings['tiles_per_frame']
        self.running = True
        while self.running:
            self._handle_events()
            for _ in range(tiles_per_frame):
                if not self.scheduler.tick():
                    break
            self._draw()
            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame, the window and the offscreen canvas."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.width, self.height))
        self.canvas = pygame.Surface((self.width, self.height))
        self.clock = pygame.time.Clock()
        self.scheduler = TileScheduler(PygameSurface(self.canvas), self.settings)

    def _start_render(self):
        """Start rendering the current view, superseding any render in progress."""
        self.handle = self.scheduler.start(
            self.max_iter, self.x_min, self.x_max, self.y_min, self.y_max,
            policy=self.policy, palette=self.palette,
        )

    def _draw(self):
        self.screen.blit(self.canvas, (0, 0))
        if self.handle.done:
            status = "done"
        else:
            status = f"{self.handle.progress:.0%}"
        pygame.display.set_caption(
            f"{self.policy} - {self.palette} - max_iter {self.max_iter} - {status}"
        )
        pygame.display.flip()

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEWHEEL:
                self._handle_zoom(event)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_zoom(self, event):
        """Handle mouse wheel zoom around the pointer."""
        mx, my = pygame.mouse.get_pos()

        # Row 0 of the canvas is y_min
        cx = self.x_min + (self.x_max - self.x_min) * mx / self.width
        cy = self.y_min + (self.y_max - self.y_min) * my / self.height

        zoom = self.ZOOM_IN_FACTOR if event.y > 0 else self.ZOOM_OUT_FACTOR

        new_width = (self.x_max - self.x_min) * zoom
        new_height = (self.y_max - self.y_min) * zoom

        x_ratio = (cx - self.x_min) / (self.x_max - self.x_min)
        y_ratio = (cy - self.y_min) / (self.y_max - self.y_min)

        self.x_min = cx - x_ratio * new_width
        self.x_max = cx + (1 - x_ratio) * new_width
        self.y_min = cy - y_ratio * new_height
        self.y_max = cy + (1 - y_ratio) * new_height
        self._start_render()

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_r:
            self.x_min, self.x_max, self.y_min, self.y_max = self.default_bounds
            self._start_render()
        elif event.key == pygame.K_b:
            i = self.policy_names.index(self.policy)
            self.policy = self.policy_names[(i + 1) % len(self.policy_names)]
            self._start_render()
        elif event.key == pygame.K_p:
            self.palette_index = (self.palette_index + 1) % len(self.palette_names)
            self._start_render()
        elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.max_iter += self.ITER_STEP
            self._start_render()
        elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.max_iter = max(1, self.max_iter - self.ITER_STEP)
            self._start_render()
        elif event.key == pygame.K_s:
            self._save_image()

    def _save_image(self):
        """Save the canvas as it currently stands to a PNG in the working directory."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = os.path.abspath(f"{self.policy}_{timestamp}.png")
        pygame.image.save(self.canvas, filename)
        logger.info("Image saved to: %s", filename)


def run(width=None, height=None, max_iter=None):
    """
    Run the viewer.

    Args:
        width: Window width (default from settings.json)
        height: Window height (default from settings.json)
        max_iter: Maximum iterations (default from settings.json)
    """
    logging.basicConfig(level=logging.INFO, format='%(message)s')
    app = FractalApp(width, height, max_iter)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
