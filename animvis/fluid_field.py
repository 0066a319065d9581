import logging
import math

from animvis.curves import basis_path
from animvis.errors import ConfigurationError, TransientRenderSkip

logger = logging.getLogger(__name__)


class Obstacle:
    def __init__(self, cx, cy, radius):
        if radius <= 0:
            raise ConfigurationError(f"Obstacle radius must be positive, got {radius}")
        self.cx = cx
        self.cy = cy
        self.radius = radius

    def moved_to(self, cx, cy):
        return Obstacle(cx, cy, self.radius)


class SampleLine:
    def __init__(self, index, y_base):
        self.index = index
        self.y_base = y_base
        self.points = []  # last sampled frame


class FluidFieldRenderer:
    """
    Flow lines rippling past a circular obstacle.

    Each line is a traveling sine wave around its baseline. Near the
    obstacle the wave is damped by a Gaussian window and mirrored on either
    side of the obstacle's center, so the lines appear to part around it.
    """

    def __init__(self, width, height, obstacle=None, line_count=10):
        # Field constants
        self.amplitude = 6.0
        self.wavelength = 100.0
        self.speed = 150.0  # units per second
        self.x_step = 10.0

        self.width = width
        self.height = height

        # Obstacle position relative to the container, kept across resizes
        if obstacle is None:
            self._anchor = (1 / 2.5, 1 / 2)
            obstacle = Obstacle(width / 2.5, height / 2, 20)
        elif width > 0 and height > 0:
            self._anchor = (obstacle.cx / width, obstacle.cy / height)
        else:
            self._anchor = None
        self.obstacle = obstacle

        self.lines = []
        self.set_line_count(line_count)

    @property
    def ready(self):
        return self.width > 0 and self.height > 0

    def y_bases(self):
        return [line.y_base for line in self.lines]

    def _spacing(self, height, count):
        if count == 1:
            return [height / 2]
        spacing = height / (count - 1)
        return [i * spacing for i in range(count)]

    def set_line_count(self, line_count):
        if isinstance(line_count, bool) or not isinstance(line_count, int) or line_count <= 0:
            raise ConfigurationError(f"Line count must be a positive integer, got {line_count!r}")
        self.lines = [SampleLine(i, y) for i, y in enumerate(self._spacing(self.height, line_count))]

    def resize(self, width, height):
        if width <= 0 or height <= 0:
            logger.debug("Fluid container not laid out yet (%sx%s)", width, height)
            self.width, self.height = width, height
            return

        if self._anchor is None:
            self._anchor = (self.obstacle.cx / width, self.obstacle.cy / height)
        ax, ay = self._anchor
        obstacle = self.obstacle.moved_to(ax * width, ay * height)
        lines = [SampleLine(i, y) for i, y in enumerate(self._spacing(height, len(self.lines)))]

        self.width, self.height, self.obstacle, self.lines = width, height, obstacle, lines
        logger.debug("Fluid field resized to %sx%s", width, height)

    def displacement(self, x, y_base, t):
        obstacle = self.obstacle
        dist_x = x - obstacle.cx
        dist_y = y_base - obstacle.cy
        wave = self.amplitude * math.sin((2 * math.pi / self.wavelength) * (x - t * self.speed))

        if abs(dist_x) < obstacle.radius * 2:
            gauss = math.exp(-((dist_x / obstacle.radius) ** 2))
            return gauss * wave * (1 if dist_y > 0 else -1)
        return wave

    def sample_xs(self):
        count = int(self.width // self.x_step)
        return [i * self.x_step for i in range(count + 1)]

    def sample(self, t):
        """Returns one ``[(x, y), ...]`` sequence per line for time ``t`` in seconds."""
        if not self.ready:
            raise TransientRenderSkip(f"Fluid container is {self.width}x{self.height}")

        xs = self.sample_xs()
        for line in self.lines:
            line.points = [(x, line.y_base + self.displacement(x, line.y_base, t)) for x in xs]
        return [line.points for line in self.lines]

    def paths(self, t):
        return [basis_path(points) for points in self.sample(t)]
