"""
Timed Mandelbrot renderer with optional background computation.

The MandelbrotRenderer class handles:
- Validating parameters before a buffer is allocated
- Timing each render (wall clock, milliseconds)
- Background (async) computation so a UI stays responsive
"""

import threading
import time
from dataclasses import dataclass

from .compute import new_pixel_buffer, draw_mandelbrot_set, as_image_array
from .params import validate_params


@dataclass
class RenderResult:
    """A finished render: the RGBA buffer plus how long it took."""
    params: object
    buffer: object
    elapsed_ms: float

    def as_array(self):
        """(height, width, 4) view of the buffer."""
        return as_image_array(self.buffer, self.params)


class MandelbrotRenderer:
    """
    Renders ViewParams into RGBA buffers.

    Usage:
        renderer = MandelbrotRenderer(params)
        result = renderer.render()          # synchronous

        renderer.compute_async()            # or in the background
        # In your event loop:
        result = renderer.get_result()
        if result is not None:
            display(result.buffer)

    Attributes:
        params: The validated ViewParams being rendered
        last_result: Most recent RenderResult, or None
        error: Exception from the last failed background render, or None
    """

    def __init__(self, params):
        """
        Initialize the renderer.

        Args:
            params: ViewParams. Raises ValueError if they are degenerate.
        """
        self.params = validate_params(params)
        self.last_result = None
        self.error = None

        # Async computation state
        self.computing = False
        self.result_ready = False
        self.pending_params = None
        self.lock = threading.Lock()

    def render(self, params=None):
        """
        Render synchronously and return a RenderResult.

        Args:
            params: Optional new ViewParams; defaults to self.params
        """
        if params is not None:
            self.params = validate_params(params)
        params = self.params

        img = new_pixel_buffer(params)
        t1 = time.perf_counter()
        draw_mandelbrot_set(params, img)
        t2 = time.perf_counter()

        result = RenderResult(params, img, (t2 - t1) * 1000.0)
        self.last_result = result
        return result

    def compute_async(self, params=None):
        """
        Start rendering in a background thread.

        If a render is already running, the new params are queued and
        picked up as soon as it finishes; only the latest request is kept.
        """
        params = validate_params(params) if params is not None else self.params

        with self.lock:
            self.pending_params = params
            if not self.computing:
                self.computing = True
                thread = threading.Thread(target=self._compute_thread)
                thread.daemon = True
                thread.start()

    def _compute_thread(self):
        """Background thread: render until no request is pending."""
        finished = False
        try:
            while True:
                with self.lock:
                    params = self.pending_params
                    self.pending_params = None
                    if params is None:
                        self.computing = False
                        finished = True
                        return

                try:
                    result = self.render(params)
                except Exception as e:
                    # Queued requests still get served; callers see .error
                    with self.lock:
                        self.error = e
                    continue

                with self.lock:
                    self.last_result = result
                    self.error = None
                    self.result_ready = True
                    if self.pending_params is None:
                        self.computing = False
                        finished = True
                        return
        finally:
            if not finished:
                with self.lock:
                    self.computing = False

    def get_result(self):
        """
        Get the latest async result if ready.

        Returns:
            RenderResult once, the first time it is asked for after a
            render finishes; None otherwise.
        """
        with self.lock:
            if self.result_ready:
                self.result_ready = False
                return self.last_result
        return None

    def wait(self, timeout=None, poll_interval=0.005):
        """
        Block until the background render is done.

        Returns:
            The RenderResult, or None if the timeout expired first, the
            last render failed (see .error) or nothing was ever rendered.
        """
        deadline = None if timeout is None else time.perf_counter() + timeout
        while True:
            result = self.get_result()
            if result is not None:
                return result
            with self.lock:
                idle = not self.computing and self.pending_params is None
                if idle:
                    return None if self.error is not None else self.last_result
            if deadline is not None and time.perf_counter() > deadline:
                return None
            time.sleep(poll_interval)
