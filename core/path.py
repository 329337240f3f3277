from typing import NamedTuple

import numpy as np

from core.errors import warn_degenerate


class Point(NamedTuple):
    x: float
    y: float


ORIGIN = Point(0.0, 0.0)


def as_points(points) -> tuple:
    """Normalize an iterable of (x, y) pairs into a tuple of Points."""
    return tuple(Point(float(p[0]), float(p[1])) for p in points)


class PathSampler:
    """Arc-length parametrized lookup along a polyline.

    Segment and cumulative lengths are computed once per instance, so a path
    sampled by many markers in the same frame is measured only once.
    Degenerate paths are reported at construction and then resolve to a fixed
    sentinel point for every t; point_at never raises.
    """

    def __init__(self, points):
        self.points = as_points(points)
        self._sentinel = None

        if len(self.points) < 2:
            self._sentinel = self.points[0] if self.points else ORIGIN
            warn_degenerate(
                f"path has {len(self.points)} point(s), need at least 2")
            self.lengths = np.zeros(0, dtype=np.float64)
            self.cumulative = np.zeros(1, dtype=np.float64)
            self.total_length = 0.0
            return

        xy = np.array(self.points, dtype=np.float64)
        d = np.diff(xy, axis=0)
        self.lengths = np.hypot(d[:, 0], d[:, 1])
        # cumulative[i] is the distance travelled at the start of segment i
        self.cumulative = np.concatenate(([0.0], np.cumsum(self.lengths)))
        self.total_length = float(self.cumulative[-1])

        if self.total_length == 0.0:
            self._sentinel = self.points[0]
            warn_degenerate("path has zero length (all points coincide)")

    @property
    def is_degenerate(self) -> bool:
        return self._sentinel is not None

    def point_at(self, t: float) -> Point:
        if self._sentinel is not None:
            return self._sentinel

        target = t * self.total_length
        seg_ends = self.cumulative[1:]
        # earliest segment whose end reaches target; past the end -> last segment
        i = int(np.searchsorted(seg_ends, target, side='left'))
        i = min(i, len(self.lengths) - 1)

        seg_len = self.lengths[i]
        if seg_len == 0.0:
            local_t = 0.0
        else:
            local_t = min(max((target - self.cumulative[i]) / seg_len, 0.0), 1.0)

        p0 = self.points[i]
        p1 = self.points[i + 1]
        # weighted form keeps both endpoints exact
        return Point(
            float(p0.x * (1.0 - local_t) + p1.x * local_t),
            float(p0.y * (1.0 - local_t) + p1.y * local_t),
        )

    def sample(self, ts) -> list:
        return [self.point_at(t) for t in ts]


def point_at(path, t: float) -> Point:
    if isinstance(path, PathSampler):
        return path.point_at(t)
    return PathSampler(path).point_at(t)
