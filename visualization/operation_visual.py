"""
Per-component frame geometry.

Each visual turns supplied scalars (pressure, flow, piston position, spool
opening, force) into screen-space shapes and colors for one frame:
  - HydraulicLineVisual: pressure-colored pipe with flow markers
  - CylinderVisual: piston, chambers, rod and force arrow
  - SpoolVisual: servo valve spool lands
  - ColorBarVisual: value indicators on a vertical gauge
  - arrow_geometry: straight or quadratic arrow with head polygon
  - TimeSeriesVisual: history / progressive plot of a frame signal
"""
import math
from dataclasses import dataclass
from typing import Callable, Optional

from animation.flow import DEFAULT_FLOW, FlowAnimator, FlowConfig
from animation.timeline import sample_history, sample_progress
from core.errors import DomainError
from core.path import PathSampler, Point, as_points
from core.svg import path_data
from visualization.colormap import DEFAULT_RAMP, ColorRamp
from visualization.number_plane import NumberPlane, format_number


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


# ---------------------------------------------------------------------------
# Hydraulic line
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LineFrame:
    points: tuple
    path_d: str
    color: str
    markers: tuple


class HydraulicLineVisual:
    """A pipe whose fluid core is colored by pressure and carries flow markers."""

    def __init__(self, points, max_pressure: float = 300.0,
                 ramp: ColorRamp = DEFAULT_RAMP, flow: FlowConfig = DEFAULT_FLOW):
        if not max_pressure > 0:
            raise DomainError(f"max_pressure must be positive, got {max_pressure}")
        self.points = as_points(points)
        self.sampler = PathSampler(self.points)
        self.max_pressure = max_pressure
        self.ramp = ramp
        self.flow = FlowAnimator(self.sampler, flow)
        self.path_d = path_data(self.points)

    def frame(self, frame: int, pressure: float, flow: float) -> LineFrame:
        return LineFrame(
            points=self.points,
            path_d=self.path_d,
            color=self.ramp.hex_at(pressure, self.max_pressure),
            markers=tuple(self.flow.positions(frame, flow)),
        )


# ---------------------------------------------------------------------------
# Cylinder
# ---------------------------------------------------------------------------

# Cylinder drawing in its own 400x150 view box
CYL_VIEWBOX = (400.0, 150.0)
CYL_LENGTH = 200.0
CYL_DIAMETER = 150.0
CYL_X = 50.0
CYL_WALL = 6.0
ROD_DIAMETER = 80.0
ROD_LENGTH = 200.0
PISTON_WIDTH = 25.0

FORCE_HIDE_BELOW = 0.001
FORCE_BASE_LENGTH = 40.0
FORCE_BASE_WIDTH = 6.0


@dataclass(frozen=True)
class ForceArrow:
    start: Point
    shaft_end: Point
    head: tuple
    width: float


@dataclass(frozen=True)
class CylinderFrame:
    piston: Rect
    cap_chamber: Rect
    rod_chamber: Rect
    rod: Rect
    cap_color: str
    rod_color: str
    force_arrow: Optional[ForceArrow]


class CylinderVisual:
    def __init__(self, max_pressure: float = 300.0, force_scale: float = 80.0,
                 ramp: ColorRamp = DEFAULT_RAMP):
        if not max_pressure > 0:
            raise DomainError(f"max_pressure must be positive, got {max_pressure}")
        self.max_pressure = max_pressure
        self.force_scale = force_scale
        self.ramp = ramp

    @staticmethod
    def piston_x(position: float) -> float:
        """Left edge of the piston for a stroke position in [0, 1]."""
        lo = CYL_X + CYL_WALL
        hi = CYL_X + CYL_LENGTH - CYL_WALL - PISTON_WIDTH
        return lo + (hi - lo) * min(max(position, 0.0), 1.0)

    def force_arrow(self, piston_x: float, force: float) -> Optional[ForceArrow]:
        if abs(force) < FORCE_HIDE_BELOW:
            return None
        mag = abs(force)
        length = FORCE_BASE_LENGTH + mag * self.force_scale
        width = FORCE_BASE_WIDTH + mag * self.force_scale * 0.3
        head = width * 2.5
        cy = (CYL_VIEWBOX[1] - CYL_DIAMETER) / 2 + CYL_DIAMETER / 2

        if force > 0:
            # cap side, pushing toward the rod end
            end_x = piston_x - 10
            start_x = end_x - length
            pts = (Point(end_x, cy), Point(end_x - head, cy - head), Point(end_x - head, cy + head))
            shaft_end = end_x - head + 2
        else:
            end_x = piston_x + PISTON_WIDTH + 10
            start_x = end_x + length
            pts = (Point(end_x, cy), Point(end_x + head, cy - head), Point(end_x + head, cy + head))
            shaft_end = end_x + head - 2
        return ForceArrow(Point(start_x, cy), Point(shaft_end, cy), pts, width)

    def frame(self, position: float, cap_pressure: float, rod_pressure: float,
              force: float = 0.0) -> CylinderFrame:
        px = self.piston_x(position)
        top = (CYL_VIEWBOX[1] - CYL_DIAMETER) / 2
        rod_x = px + PISTON_WIDTH
        cyl_end = CYL_X + CYL_LENGTH
        return CylinderFrame(
            piston=Rect(px, top, PISTON_WIDTH, CYL_DIAMETER),
            cap_chamber=Rect(CYL_X, top, max(0.0, px - CYL_X), CYL_DIAMETER),
            rod_chamber=Rect(rod_x, top, max(0.0, cyl_end - rod_x), CYL_DIAMETER),
            rod=Rect(rod_x, (CYL_VIEWBOX[1] - ROD_DIAMETER) / 2, ROD_LENGTH, ROD_DIAMETER),
            cap_color=self.ramp.hex_at(cap_pressure, self.max_pressure),
            rod_color=self.ramp.hex_at(rod_pressure, self.max_pressure),
            force_arrow=self.force_arrow(px, force),
        )


# ---------------------------------------------------------------------------
# Servo valve spool
# ---------------------------------------------------------------------------

VALVE_VIEWBOX = (900.0, 260.0)
VALVE_BODY_PADDING = 10.0
SPOOL_TRAVEL = 0.8  # fraction of one chamber width at 100 % signal


@dataclass(frozen=True)
class SpoolFrame:
    spool: float
    offset: float
    lands: tuple  # (left, right) x extents per land


class SpoolVisual:
    """Spool signal in percent: -100 is P->B / A->T, +100 is P->A / B->T."""

    def __init__(self):
        self.body_w = VALVE_VIEWBOX[0] - 2 * VALVE_BODY_PADDING
        self.chamber_w = self.body_w / 9
        self.max_travel = self.chamber_w * SPOOL_TRAVEL

    def frame(self, spool: float) -> SpoolFrame:
        spool = min(max(spool, -100.0), 100.0)
        offset = spool / 100 * self.max_travel
        lands = []
        for base in (0.3, 0.7):
            center = VALVE_BODY_PADDING + self.body_w * base + offset
            lands.append((center - self.chamber_w / 2, center + self.chamber_w / 2))
        return SpoolFrame(spool, offset, tuple(lands))


# ---------------------------------------------------------------------------
# Color bar
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Indicator:
    y: float
    label_y: float
    text: str
    title: Optional[str]
    color: str


class ColorBarVisual:
    """Vertical gauge: 0 at the bottom, max_value at the top."""

    LABEL_HEIGHT = 44.0

    def __init__(self, height: float, max_value: float, ramp: ColorRamp = DEFAULT_RAMP):
        if not height > 0:
            raise DomainError(f"color bar height must be positive, got {height}")
        self.height = height
        self.max_value = max_value
        self.ramp = ramp

    def value_text(self, value: float) -> str:
        if self.max_value >= 1000:
            return str(int(math.floor(value + 0.5)))
        return f"{value:.1f}"

    def indicator(self, value: float, title: Optional[str] = None) -> Indicator:
        safe = min(max(value, 0.0), self.max_value) if self.max_value > 0 else 0.0
        t = safe / self.max_value if self.max_value > 0 else 0.0
        y = self.height - t * self.height
        half = self.LABEL_HEIGHT / 2
        label_y = min(max(y, half), self.height - half)
        return Indicator(y, label_y, self.value_text(safe), title,
                         self.ramp.hex_at(safe, self.max_value))

    def gradient(self, steps: int = 5) -> list:
        return self.ramp.gradient(steps)


# ---------------------------------------------------------------------------
# Arrows
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ArrowFrame:
    start: Point
    end: Point
    control: Optional[Point]
    angle: float
    head: tuple
    dash_offset: Optional[float]
    show_head: bool


ARROW_DASH_LENGTH = 1000.0


def arrow_geometry(start, end, control=None, arrow_size: float = 15.0,
                   progress: float = 1.0) -> ArrowFrame:
    """Arrow head follows the end tangent (the control leg for a quadratic)."""
    start, end = Point(*start), Point(*end)
    control = Point(*control) if control is not None else None
    tail = control if control is not None else start
    angle = math.atan2(end.y - tail.y, end.x - tail.x)

    c, s = math.cos(angle), math.sin(angle)
    local = ((0.0, 0.0), (-arrow_size, -arrow_size / 2),
             (-arrow_size * 0.8, 0.0), (-arrow_size, arrow_size / 2))
    head = tuple(Point(x * c - y * s + end.x, x * s + y * c + end.y) for x, y in local)

    dash_offset = ARROW_DASH_LENGTH * (1 - progress) if progress < 1 else None
    return ArrowFrame(start, end, control, angle, head, dash_offset, progress > 0.9)


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlotFrame:
    points: tuple
    head: Point
    head_value: float
    head_label: str


class TimeSeriesVisual:
    """Plot of value_at(frame) up to the current frame.

    mode 'history' keeps a sliding window ending at the current frame;
    mode 'progress' reveals the fixed span [0, total_frames] as frames pass.
    """

    def __init__(self, value_at: Callable[[int], float], width: float, height: float,
                 y_range=(0.0, 1.0), mode: str = 'history', window: int = 180,
                 total_frames: int = 600, step: int = 2, padding: float = 40.0,
                 precision: int = 2):
        if mode not in ('history', 'progress'):
            raise DomainError(f"unknown time series mode {mode!r}")
        self.value_at = value_at
        self.width, self.height = width, height
        self.y_range = y_range
        self.mode = mode
        self.window = window
        self.total_frames = total_frames
        self.step = step
        self.padding = padding
        self.precision = precision
        # fail fast on bad ranges / padding
        self.plane(0)

    def plane(self, frame: int) -> NumberPlane:
        if self.mode == 'history':
            x_range = (frame - self.window, frame)
        else:
            x_range = (0, self.total_frames)
        return NumberPlane(x_range, self.y_range, self.width, self.height, padding=self.padding)

    def samples(self, frame: int) -> tuple:
        if self.mode == 'history':
            return sample_history(self.value_at, frame, self.window, self.step)
        return sample_progress(self.value_at, frame, self.total_frames, self.step)

    def frame(self, frame: int) -> PlotFrame:
        plane = self.plane(frame)
        samples = self.samples(frame)
        points = tuple(plane.map_point(s) for s in samples)
        if self.mode == 'history':
            head_frame = frame
        else:
            head_frame = min(max(frame, 0), self.total_frames)
        value = float(self.value_at(head_frame))
        return PlotFrame(points, plane.map_point((head_frame, value)), value,
                         format_number(value, self.precision))
