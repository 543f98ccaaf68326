"""
Incremental tiled renderer.

A render is split into fixed-size tiles that are painted one per tick,
so the host (a game loop, a GUI timer, a test) decides when work happens
and never blocks for longer than one tile.

The TileScheduler class handles:
- Validating render requests before anything is drawn
- Owning at most one active RenderSession per surface
- Superseding an in-progress session when a new render is requested
- Driving the session tick by tick, or to completion

Each RenderSession is a small state machine:
    IDLE -> RUNNING -> COMPLETE
    IDLE/RUNNING -> CANCELLED (explicit cancel or superseded)
"""

import enum
import logging
import math
import numbers
import time
import weakref
from collections import namedtuple

from .colormaps import DEFAULT_PALETTE, check_max_iter, color_for, get_palette
from .colors import average
from .compute import compute_tile, compute_tile_python, get_policy, policy_name
from .errors import InvalidRegion, InvalidSupersample, InvalidSurface, RenderError
from .settings import load_settings
from .surface import ArraySurface, surface_size


logger = logging.getLogger(__name__)

BACKENDS = {
    'jit': compute_tile,
    'python': compute_tile_python,
}

DEFAULT_TILE_DIVISIONS = (40, 20)


class SessionState(enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    CANCELLED = 'cancelled'
    COMPLETE = 'complete'


class RenderRegion(namedtuple('RenderRegion', ['x_min', 'x_max', 'y_min', 'y_max'])):
    """Rectangle of the complex plane to render."""

    __slots__ = ()

    def validate(self):
        for name, value in zip(self._fields, self):
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
                raise InvalidRegion(f"{name} must be a finite number, got {value!r}")
        if self.x_min >= self.x_max:
            raise InvalidRegion(f"x_min ({self.x_min}) must be less than x_max ({self.x_max})")
        if self.y_min >= self.y_max:
            raise InvalidRegion(f"y_min ({self.y_min}) must be less than y_max ({self.y_max})")
        return RenderRegion(*(float(value) for value in self))


def round_half_up(value):
    return int(math.floor(value + 0.5))


def tile_dimensions(width, height, divisions=DEFAULT_TILE_DIVISIONS):
    """
    Tile size for a surface: a fixed fraction of each dimension.

    Args:
        width, height: Surface size in pixels
        divisions: (tiles across, tiles down), default 40 x 20

    Returns:
        (tile_w, tile_h), each at least 1 pixel
    """
    across, down = divisions
    return max(1, round_half_up(width / across)), max(1, round_half_up(height / down))


class RenderSession:
    """
    Cursor state for one render of one surface.

    Created by TileScheduler.start(); callers normally only see it through
    its RenderHandle.
    """

    def __init__(self, surface, size, max_iter, region, palette, func_id,
                 backend='jit', supersample=1, tile_size=None,
                 on_progress=None, on_complete=None):
        self.surface = surface
        self.width, self.height = size
        self.max_iter = max_iter
        self.region = region
        self.palette = palette
        self.func_id = func_id
        self.backend = backend
        self.supersample = supersample
        self.on_progress = on_progress
        self.on_complete = on_complete

        # Complex plane units per pixel
        self.xf = (region.x_max - region.x_min) / self.width
        self.yf = (region.y_max - region.y_min) / self.height

        if tile_size is None:
            tile_size = tile_dimensions(self.width, self.height)
        self.tile_w, self.tile_h = tile_size
        self.tiles_total = (math.ceil(self.width / self.tile_w) *
                            math.ceil(self.height / self.tile_h))
        self.tiles_done = 0

        self.cursor_x = 0
        self.cursor_y = 0
        self.state = SessionState.IDLE
        self._started_at = None
        self._kernel = BACKENDS[backend]
        self.handle = RenderHandle(self)

    def begin(self):
        if self.state is not SessionState.IDLE:
            return
        self.state = SessionState.RUNNING
        self._started_at = time.perf_counter()
        logger.info(
            "Render started: %dx%d, max_iter=%d, %s, region=%s, tiles=%dx%d (%d)",
            self.width, self.height, self.max_iter, policy_name(self.func_id),
            tuple(self.region), self.tile_w, self.tile_h, self.tiles_total,
        )

    @property
    def progress(self):
        return self.tiles_done / self.tiles_total

    @property
    def done(self):
        return self.state in (SessionState.COMPLETE, SessionState.CANCELLED)

    def cancel(self):
        """Stop this session. Safe to call any number of times, in any state."""
        if self.state in (SessionState.IDLE, SessionState.RUNNING):
            logger.debug("Render cancelled after %d/%d tiles", self.tiles_done, self.tiles_total)
            self.state = SessionState.CANCELLED

    def tick(self):
        """
        Paint the tile under the cursor and advance.

        Returns:
            True if more ticks are needed, False once the session is
            finished (or was never running).
        """
        if self.state is not SessionState.RUNNING:
            return False

        self._paint_tile(self.cursor_x, self.cursor_y)
        self.tiles_done += 1

        self.cursor_x += self.tile_w
        if self.cursor_x >= self.width:
            self.cursor_x = 0
            self.cursor_y += self.tile_h
        if self.cursor_y >= self.height:
            self.state = SessionState.COMPLETE

        if self.on_progress is not None:
            self.on_progress(self.tiles_done, self.tiles_total)
        if self.state is SessionState.COMPLETE:
            logger.info("Render complete in %.3f seconds", time.perf_counter() - self._started_at)
            if self.on_complete is not None:
                self.on_complete(self.handle)
            return False
        # on_progress may have cancelled or superseded this session
        return self.state is SessionState.RUNNING

    def _paint_tile(self, x, y):
        # Tiles on the right and bottom edges are clipped to the surface
        w = min(self.tile_w, self.width - x)
        h = min(self.tile_h, self.height - y)
        self.surface.clear_rect(x, y, w, h)

        s = self.supersample
        counts, magnitudes = self._kernel(
            self.region.x_min, self.region.y_min, self.xf, self.yf,
            x, y, w, h, self.max_iter, self.func_id, s,
        )
        for row in range(h):
            run_start = 0
            run_color = None
            for col in range(w):
                if s == 1:
                    color = color_for(int(counts[row, col]), float(magnitudes[row, col]),
                                      self.max_iter, self.palette)
                else:
                    color = average([
                        color_for(int(counts[row * s + i, col * s + j]),
                                  float(magnitudes[row * s + i, col * s + j]),
                                  self.max_iter, self.palette)
                        for i in range(s) for j in range(s)
                    ])
                # Horizontal runs of one color are filled with a single rect
                if color != run_color:
                    if run_color is not None:
                        self.surface.fill_rect(x + run_start, y + row, col - run_start, 1, run_color)
                    run_start = col
                    run_color = color
            self.surface.fill_rect(x + run_start, y + row, w - run_start, 1, run_color)


class RenderHandle:
    """
    Caller-facing handle to a render session.

    Usage:
        handle = scheduler.start(200, -2.5, 1.0, -1.25, 1.25)
        while handle.tick():
            pass  # or tick from a timer / game loop
        handle.cancel()  # harmless once complete
    """

    def __init__(self, session):
        self._session = session

    @property
    def state(self):
        return self._session.state

    @property
    def done(self):
        return self._session.done

    @property
    def progress(self):
        return self._session.progress

    @property
    def region(self):
        return self._session.region

    def tick(self):
        return self._session.tick()

    def cancel(self):
        self._session.cancel()


class TileScheduler:
    """
    Runs tiled renders onto one surface, one session at a time.

    Usage:
        scheduler = TileScheduler(surface)
        scheduler.start(256, -2.5, 1.0, -1.25, 1.25)

        # In your game loop / timer callback:
        scheduler.tick()

    Starting a new render cancels the previous one, so tiles from an old
    view never land on top of a new one.

    Attributes:
        surface: The surface being painted
        settings: Defaults for palette, policy, backend, supersample, tiling
    """

    def __init__(self, surface, settings=None):
        self.surface = surface
        self.settings = settings if settings is not None else load_settings()
        self._session = None

    @property
    def active(self):
        """The handle of the running session, or None."""
        if self._session is not None and self._session.state is SessionState.RUNNING:
            return self._session.handle
        return None

    def _surface_size(self):
        try:
            width, height = surface_size(self.surface)
        except AttributeError:
            raise InvalidSurface("Surface must expose width/height or get_size()") from None
        if width <= 0 or height <= 0:
            raise InvalidSurface(f"Surface size must be positive, got {width}x{height}")
        return int(width), int(height)

    def start(self, max_iter, x_min, x_max, y_min, y_max, policy=None, palette=None,
              backend=None, supersample=None, tile_size=None,
              on_progress=None, on_complete=None):
        """
        Begin rendering a region, superseding any render in progress.

        Args:
            max_iter: Positive iteration budget
            x_min, x_max, y_min, y_max: Region of the complex plane
            policy: 'mandelbrot' or 'burning_ship' (or a FUNC_* id)
            palette: Palette name from colormaps.PALETTES
            backend: 'jit' (Numba) or 'python' (reference evaluator)
            supersample: Samples per pixel along each axis (>= 1)
            tile_size: (tile_w, tile_h); default derived from the surface size
            on_progress: Called as on_progress(tiles_done, tiles_total) each tick
            on_complete: Called as on_complete(handle) once the last tile is painted

        Returns:
            RenderHandle for the new session

        Raises:
            RenderError subclasses for invalid requests; the previous
            session is left untouched in that case.
        """
        settings = self.settings
        max_iter = check_max_iter(max_iter)
        region = RenderRegion(x_min, x_max, y_min, y_max).validate()
        func_id = get_policy(policy if policy is not None else settings['policy'])
        backend = backend if backend is not None else settings['backend']
        if backend not in BACKENDS:
            raise RenderError(f"Unknown backend {backend!r} (expected one of: {', '.join(BACKENDS)})")
        supersample = supersample if supersample is not None else settings['supersample']
        if isinstance(supersample, bool) or not isinstance(supersample, int) or supersample < 1:
            raise InvalidSupersample(f"supersample must be an integer >= 1, got {supersample!r}")
        size = self._surface_size()
        if tile_size is None:
            divisions = settings.get('tile_divisions', DEFAULT_TILE_DIVISIONS)
            if (not isinstance(divisions, (list, tuple)) or len(divisions) != 2 or
                    any(isinstance(d, bool) or not isinstance(d, int) or d < 1 for d in divisions)):
                raise RenderError(f"tile_divisions must be two positive integers, got {divisions!r}")
            tile_size = tile_dimensions(size[0], size[1], divisions)
        elif min(tile_size) < 1:
            raise RenderError(f"tile_size must be positive, got {tile_size!r}")
        colors = get_palette(palette or settings.get('palette', DEFAULT_PALETTE), max_iter)

        if self._session is not None and not self._session.done:
            logger.debug("Superseding render of %s", tuple(self._session.region))
            self._session.cancel()

        self._session = RenderSession(
            self.surface, size, max_iter, region, colors, func_id,
            backend=backend, supersample=supersample, tile_size=tuple(tile_size),
            on_progress=on_progress, on_complete=on_complete,
        )
        self._session.begin()
        return self._session.handle

    def tick(self):
        """Advance the active session by one tile. Returns True while work remains."""
        if self._session is None:
            return False
        return self._session.tick()

    def run_until_complete(self, max_ticks=None):
        """
        Tick until the active session finishes.

        Args:
            max_ticks: Optional limit; stop early after this many ticks

        Returns:
            Number of ticks performed
        """
        ticks = 0
        while self.active is not None:
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.tick()
            ticks += 1
        return ticks

    def cancel(self):
        if self._session is not None:
            self._session.cancel()


_schedulers = weakref.WeakKeyDictionary()


def get_scheduler(surface):
    """The TileScheduler bound to a surface, created on first use."""
    try:
        scheduler = _schedulers.get(surface)
        if scheduler is None:
            # The scheduler only holds a proxy so the entry dies with the surface
            scheduler = _schedulers[surface] = TileScheduler(weakref.proxy(surface))
    except TypeError:
        raise InvalidSurface(f"Cannot track renders for {type(surface).__name__} objects") from None
    return scheduler


def render(surface, max_iter, x_min, x_max, y_min, y_max, **kwargs):
    """
    Start a tiled render on a surface.

    Repeated calls for the same surface share one TileScheduler, so a new
    request supersedes the previous one. Tick the returned handle (or
    get_scheduler(surface)) to make progress.
    """
    return get_scheduler(surface).start(max_iter, x_min, x_max, y_min, y_max, **kwargs)


def render_to_array(width, height, max_iter, x_min, x_max, y_min, y_max, **kwargs):
    """
    Render synchronously into a new image.

    Returns:
        uint8 numpy array of shape (height, width, 3)
    """
    surface = ArraySurface(width, height)
    scheduler = TileScheduler(surface)
    scheduler.start(max_iter, x_min, x_max, y_min, y_max, **kwargs)
    scheduler.run_until_complete()
    return surface.to_array()
