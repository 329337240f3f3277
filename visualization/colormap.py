import math
from typing import NamedTuple

import numpy as np
from PIL import ImageColor

from core.errors import DomainError


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return to_hex(self)


class ColorStop(NamedTuple):
    offset: float
    color: RGB


def parse_color(color) -> RGB:
    """Accept an (r, g, b) triple or any color string Pillow understands."""
    if isinstance(color, str):
        rgb = ImageColor.getrgb(color)
        return RGB(*rgb[:3])
    r, g, b = color
    return RGB(int(r), int(g), int(b))


def to_hex(rgb) -> str:
    return '#' + ''.join(f"{int(c):02x}" for c in rgb[:3])


def _round_channel(c: float) -> int:
    # half-up, and never outside 0..255
    return int(min(max(math.floor(c + 0.5), 0), 255))


def make_stops(pairs) -> tuple:
    return tuple(ColorStop(float(offset), parse_color(color)) for offset, color in pairs)


DEFAULT_PRESSURE_STOPS = make_stops([
    (0.0, (0, 0, 255)),     # blue
    (0.33, (0, 255, 0)),    # green
    (0.66, (255, 255, 0)),  # yellow
    (1.0, (255, 0, 0)),     # red
])


def _as_stops(stops) -> list:
    return [s if isinstance(s, ColorStop) else ColorStop(float(s[0]), parse_color(s[1]))
            for s in stops]


def validate_stops(stops) -> tuple:
    stops = tuple(stops)
    if len(stops) < 2:
        raise DomainError(f"color ramp needs at least 2 stops, got {len(stops)}")
    if stops[0].offset != 0.0:
        raise DomainError(f"first color stop offset must be 0, got {stops[0].offset}")
    if stops[-1].offset != 1.0:
        raise DomainError(f"last color stop offset must be 1, got {stops[-1].offset}")
    for i, (s0, s1) in enumerate(zip(stops, stops[1:])):
        if not s1.offset > s0.offset:
            raise DomainError(
                f"color stop offsets must strictly increase: stop {i + 1} "
                f"({s1.offset}) does not follow stop {i} ({s0.offset})")
    return stops


def normalize(value: float, max_value: float) -> float:
    if max_value <= 0:
        return 0.0
    return min(max(value, 0.0), max_value) / max_value


def _ramp(t: float, stops) -> RGB:
    for start, end in zip(stops, stops[1:]):
        if start.offset <= t <= end.offset:
            local_t = (t - start.offset) / (end.offset - start.offset)
            return RGB(*(
                _round_channel(c0 * (1.0 - local_t) + c1 * local_t)
                for c0, c1 in zip(start.color, end.color)
            ))
    # floating error pushed t off the ramp
    return stops[0].color if t < stops[0].offset else stops[-1].color


def color_at(value: float, max_value: float, stops=DEFAULT_PRESSURE_STOPS) -> RGB:
    """Map a scalar in [0, max_value] through the gradient stops."""
    if stops is not DEFAULT_PRESSURE_STOPS:
        stops = validate_stops(_as_stops(stops))
    return _ramp(normalize(value, max_value), stops)


class ColorRamp:
    """Validated gradient. Bad stop lists fail here, not during a frame."""

    def __init__(self, stops=DEFAULT_PRESSURE_STOPS):
        self.stops = validate_stops(_as_stops(stops))
        self._offsets = np.array([s.offset for s in self.stops], dtype=np.float64)
        self._channels = np.array([s.color for s in self.stops], dtype=np.float64)

    def color_at(self, value: float, max_value: float) -> RGB:
        return _ramp(normalize(value, max_value), self.stops)

    def hex_at(self, value: float, max_value: float) -> str:
        return to_hex(self.color_at(value, max_value))

    def colors_for(self, values, max_value: float) -> np.ndarray:
        """Vectorized color_at. Returns (n, 3) uint8."""
        values = np.asarray(values, dtype=np.float64)
        if max_value <= 0:
            t = np.zeros_like(values)
        else:
            t = np.clip(values, 0.0, max_value) / max_value

        colors = np.empty(values.shape + (3,), dtype=np.float64)
        for ch in range(3):
            colors[..., ch] = np.interp(t, self._offsets, self._channels[:, ch])
        return np.clip(np.floor(colors + 0.5), 0, 255).astype(np.uint8)

    def gradient(self, steps: int) -> list:
        """Evenly sampled hex colors from bottom (offset 0) to top (offset 1)."""
        if steps < 2:
            raise DomainError(f"gradient needs at least 2 steps, got {steps}")
        return [to_hex(c) for c in self.colors_for(np.linspace(0.0, 1.0, steps), 1.0)]


DEFAULT_RAMP = ColorRamp()
