"""
Display module for the Mandelbrot renderer.

Contains the MandelbrotApp class which handles:
- Resolving viewport parameters and rendering the image
- Window setup with a thin border around the image
- Showing the title and elapsed render time
- Saving the image as PNG
"""

import json
import os
from datetime import datetime

import pygame

from .compute import warmup_jit
from .params import params_from_fragment, format_title
from .renderer import MandelbrotRenderer


SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULT_SETTINGS = {
    'border_color': [0, 128, 0],
    'border_width': 1,
    'save_directory': '~/Desktop',
    'caption_prefix': 'Mandelbrot2',
}


def load_settings(path=SETTINGS_PATH):
    """
    Load display settings from a JSON file.

    Missing keys take their value from DEFAULT_SETTINGS. An unreadable
    file prints a warning and yields the defaults.
    """
    settings = dict(DEFAULT_SETTINGS)
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Warning: Could not load {os.path.basename(path)}: {e}")
        return settings

    if not isinstance(loaded, dict):
        print(f"Warning: Ignoring {os.path.basename(path)}: expected a JSON object")
        return settings
    settings.update({k: v for k, v in loaded.items() if k in DEFAULT_SETTINGS})
    return settings


def save_image(buffer, params, filename):
    """
    Write an RGBA buffer to an image file.

    Works without a display; pygame picks the format from the extension.
    """
    surface = pygame.image.frombuffer(
        bytes(buffer), (params.width, params.height), 'RGBA'
    )
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    pygame.image.save(surface, filename)
    return filename


class MandelbrotApp:
    """
    Renders one viewport and shows it in a pygame window.

    Keys:
        S: Save the image to the configured save directory
        ESC: Quit
    """

    def __init__(self, fragment="", settings=None, warmup=True):
        """
        Initialize the application.

        Args:
            fragment: Parameter string, e.g. "#w=800&h=600&mag=2"
            settings: Display settings dict (default: load settings.json)
            warmup: Compile the JIT kernels before the timed render

        Raises:
            ValueError if the resolved parameters are degenerate
        """
        self.settings = settings if settings is not None else load_settings()
        self.params = params_from_fragment(fragment)
        self.renderer = MandelbrotRenderer(self.params)
        self.title = format_title(self.params, self.settings['caption_prefix'])
        self.warmup = warmup

        self.border = int(self.settings['border_width'])
        self.result = None
        self.surface = None
        self.screen = None
        self.clock = None
        self.running = False

    def render(self):
        """Render the image and report the elapsed time."""
        print(self.title)
        if self.warmup:
            warmup_jit()
        self.result = self.renderer.render()
        print(f"elapsed: {self.result.elapsed_ms:.1f}")
        return self.result

    def save(self, filename=None):
        """Save the current render; returns the path written."""
        if self.result is None:
            self.render()
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            directory = os.path.expanduser(self.settings['save_directory'])
            filename = os.path.join(directory, f"mandelbrot_{timestamp}.png")
        save_image(self.result.buffer, self.params, filename)
        print(f"Image saved to: {filename}")
        return filename

    def run(self):
        """Render, then show the window until the user closes it."""
        if self.result is None:
            self.render()

        self._init_pygame()
        self.surface = pygame.image.frombuffer(
            bytes(self.result.buffer), (self.params.width, self.params.height), 'RGBA'
        )

        self.running = True
        while self.running:
            self._handle_events()
            self._draw()
            self.clock.tick(30)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create a window with room for the border."""
        pygame.init()
        self.screen = pygame.display.set_mode((
            self.params.width + 2 * self.border,
            self.params.height + 2 * self.border,
        ))
        pygame.display.set_caption(
            f"{self.title} - elapsed: {self.result.elapsed_ms:.1f} ms"
        )
        self.clock = pygame.time.Clock()

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_s:
                    self.save()

    def _draw(self):
        """Draw the border and the image inside it."""
        self.screen.fill(tuple(self.settings['border_color']))
        self.screen.blit(self.surface, (self.border, self.border))
        pygame.display.flip()


def run(fragment="", warmup=True):
    """
    Render a viewport and display it.

    Args:
        fragment: Parameter string (keys w, h, x, y, mag, limit)
        warmup: Compile the JIT kernels before the timed render
    """
    app = MandelbrotApp(fragment, warmup=warmup)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
