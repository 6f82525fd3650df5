# visualization.py
"""
Hosts the particle effect in a Pygame window.

This module provides the collaborators the AnimationDriver talks to: the
drawing surface adapter, the frame scheduler, the one-time sprite
rasterisation, and the Visualizer that owns the window and turns Pygame
events into pointer clicks and resizes.
"""
import itertools
import logging
from typing import Any, Callable, Dict, Hashable, Optional, Sequence, Tuple, Union

import numpy as np
import pygame

from constants import (
    BACKGROUND_COLOR, DEFAULT_WINDOW_SIZE, FPS, FULLSCREEN, HEART_SPRITE_EXTENT,
    SPRITE_COLOR, WINDOW_TITLE
)
from heart import HeartCurve

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import AnimationDriver


# --- Data Contracts ---
#
# render_heart_sprite(size: int, color) -> pygame.Surface:
#   - Outputs: A size x size per-pixel-alpha surface with the heart outline
#     filled in color and everything else fully transparent.
#
# class PygameSurface:
#   - width, height: current size of the target surface in pixels.
#   - clear(self) -> None: Fills the target with the background colour.
#   - draw_sprite(self, sprite, x, y, width, height, opacity) -> None:
#     - Inputs: Top-left corner (x, y), target size, opacity in [0, 1].
#     - Side Effects: Blits a scaled, translucent copy of sprite.
#
# class FrameScheduler:
#   - schedule_next_frame(self, callback) -> int: Returns a cancel token.
#   - cancel(self, token) -> None: The callback will not run. Unknown or
#     already-run tokens are ignored.
#   - run_pending(self, timestamp: float) -> int:
#     - Side Effects: Runs every callback scheduled before this call.
#       Callbacks scheduled while running wait for the next frame. If one
#       raises, the callbacks not yet run stay scheduled.
#     - Outputs: Number of callbacks run.
#
# class Visualizer:
#   - run(self, driver: AnimationDriver, max_frames: Optional[int]) -> int:
#     - Side Effects: Pumps events and frames until the user quits, the
#       driver stops or max_frames is reached.
#     - Outputs: Number of frames presented.

ColorLike = Union[str, Sequence[int], pygame.Color]


def render_heart_sprite(size: int, color: ColorLike = SPRITE_COLOR) -> pygame.Surface:
    """
    Rasterises the heart outline into a square sprite.

    The curve spans about HEART_SPRITE_EXTENT units, which are mapped onto
    the sprite's pixel size with the y axis flipped.
    """
    outline = HeartCurve.trace()
    scale = size / HEART_SPRITE_EXTENT
    xs = size / 2 + outline[:, 0] * scale
    ys = size / 2 - outline[:, 1] * scale
    points = np.column_stack((xs, ys)).tolist()

    sprite = pygame.Surface((size, size), pygame.SRCALPHA)
    sprite.fill((0, 0, 0, 0))
    pygame.draw.polygon(sprite, color, points)
    logging.debug(f"Rendered {size}x{size} heart sprite from {len(points)} outline points.")
    return sprite


class PygameSurface:
    """
    Drawing surface adapter over a Pygame surface.
    """
    def __init__(self, target: pygame.Surface, background_color: ColorLike = BACKGROUND_COLOR):
        self.target = target
        self.background_color = background_color

    @property
    def width(self) -> int:
        return self.target.get_width()

    @property
    def height(self) -> int:
        return self.target.get_height()

    def retarget(self, target: pygame.Surface) -> None:
        """Switches to a new target, e.g. the display surface after a resize."""
        self.target = target
        logging.info(f"Drawing surface resized to {self.width}x{self.height}.")

    def clear(self) -> None:
        self.target.fill(self.background_color)

    def draw_sprite(
        self, sprite: pygame.Surface, x: float, y: float, width: float, height: float, opacity: float
    ) -> None:
        w, h = int(round(width)), int(round(height))
        alpha = int(round(255 * min(max(opacity, 0.0), 1.0)))
        # Nothing visible to draw.
        if w < 1 or h < 1 or alpha == 0:
            return
        scaled = pygame.transform.scale(sprite, (w, h))
        scaled.set_alpha(alpha)
        self.target.blit(scaled, (int(round(x)), int(round(y))))


class FrameScheduler:
    """
    Cooperative once-per-frame callback queue with cancellation.
    """
    def __init__(self):
        self._pending: Dict[int, Callable[[Optional[float]], Any]] = {}
        self._due: Dict[int, Callable[[Optional[float]], Any]] = {}
        self._tokens = itertools.count(1)

    def __len__(self) -> int:
        return len(self._pending) + len(self._due)

    def schedule_next_frame(self, callback: Callable[[Optional[float]], Any]) -> int:
        token = next(self._tokens)
        self._pending[token] = callback
        return token

    def cancel(self, token: Hashable) -> None:
        self._pending.pop(token, None)
        self._due.pop(token, None)

    def run_pending(self, timestamp: Optional[float]) -> int:
        """
        Runs the callbacks that were scheduled before this frame.

        If a callback raises, the ones that have not run yet stay scheduled
        ahead of anything added during this frame.
        """
        self._due, self._pending = self._pending, {}
        ran = 0
        try:
            while self._due:
                token = next(iter(self._due))
                callback = self._due.pop(token)
                callback(timestamp)
                ran += 1
        finally:
            if self._due:
                self._due.update(self._pending)
                self._pending = self._due
            self._due = {}
        return ran


class Visualizer:
    """
    Owns the Pygame window, its frame clock and the event loop.
    """
    def __init__(self, window_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.

        Args:
            window_params (Optional[Dict[str, Any]]): The `window` section of
                config.json. Missing keys fall back to constants.py.
        """
        params = window_params if window_params is not None else {}
        pygame.init()

        if params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            size = (display_info.current_w, display_info.current_h)
            screen = pygame.display.set_mode(size, pygame.FULLSCREEN)
        else:
            size = (
                int(params.get('width', DEFAULT_WINDOW_SIZE[0])),
                int(params.get('height', DEFAULT_WINDOW_SIZE[1])),
            )
            screen = pygame.display.set_mode(size, pygame.RESIZABLE)

        pygame.display.set_caption(params.get('title', WINDOW_TITLE))
        self.clock = pygame.time.Clock()
        self.fps = int(params.get('fps', FPS))

        background_color = self._parse_color(params.get('background_color'), BACKGROUND_COLOR, "background_color")
        self.sprite_color = self._parse_color(params.get('sprite_color'), SPRITE_COLOR, "sprite_color")

        self.surface = PygameSurface(screen, background_color)
        self.scheduler = FrameScheduler()

        logging.info(f"Visualizer initialized with Pygame display ({size[0]}x{size[1]}) at {self.fps} FPS.")

    @staticmethod
    def _parse_color(value: Optional[ColorLike], default: Tuple[int, int, int], name: str) -> pygame.Color:
        """Reads a colour from config, falling back to the default on bad input."""
        if value is None:
            return pygame.Color(default)
        try:
            return pygame.Color(tuple(value) if isinstance(value, list) else value)
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse {name} {value!r} from config: {e}. Falling back to {default}.")
            return pygame.Color(default)

    def create_sprite(self, size: int) -> pygame.Surface:
        """Renders the particle sprite in the display's pixel format."""
        return render_heart_sprite(size, self.sprite_color).convert_alpha()

    def handle_events(self, driver: "AnimationDriver") -> bool:
        """
        Dispatches pending Pygame events.

        Returns:
            bool: False if the user has quit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                driver.on_pointer_down(x, y)

            if event.type == pygame.VIDEORESIZE:
                self.surface.retarget(pygame.display.get_surface())

        return True

    def run(self, driver: "AnimationDriver", max_frames: Optional[int] = None) -> int:
        """
        Runs the frame loop until quit, driver stop or max_frames.

        Returns:
            int: Number of frames presented.
        """
        frames = 0
        while driver.running:
            if not self.handle_events(driver):
                break

            self.scheduler.run_pending(pygame.time.get_ticks() / 1000.0)
            pygame.display.flip()
            frames += 1

            if max_frames is not None and frames >= max_frames:
                logging.info(f"Reached max_frames ({max_frames}). Stopping animation.")
                break

            self.clock.tick(self.fps)
        return frames

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
