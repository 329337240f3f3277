"""
Number plane: data ranges mapped onto a screen rectangle.

World Y grows upward, screen Y grows downward, so map_y inverts. Every
other piece of plot geometry (ticks, grid, axes, series) is derived from
map_x / map_y so the convention lives in exactly one place.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from core.errors import DomainError
from core.path import Point


logger = logging.getLogger(__name__)

TICK_TOLERANCE = 1e-9

DASH_ARRAYS = {
    'dashed': "10,5",
    'dotted': "2,4",
}


def nice_step(span: float, target_ticks: float = 5) -> float:
    """Human-friendly tick spacing: 1, 2, 5 or 10 times a power of ten."""
    if not math.isfinite(span) or span <= 0:
        raise DomainError(f"tick range must be positive and finite, got {span}")
    if not target_ticks > 0:
        raise DomainError(f"target tick count must be positive, got {target_ticks}")

    raw_step = span / target_ticks
    magnitude = 10.0 ** math.floor(math.log10(raw_step))
    normalized = raw_step / magnitude
    if normalized < 1.5:
        snapped = 1
    elif normalized < 3.5:
        snapped = 2
    elif normalized < 7.5:
        snapped = 5
    else:
        snapped = 10
    return snapped * magnitude


def ticks(vmin: float, vmax: float, step: float) -> list:
    """All k*step in [ceil(vmin/step)*step, vmax], ascending."""
    if not step > 0:
        raise DomainError(f"tick step must be positive, got {step}")
    k = math.ceil(vmin / step)
    values = []
    while True:
        v = k * step
        if v > vmax + TICK_TOLERANCE:
            break
        values.append(v + 0.0)  # -0.0 -> 0.0
        k += 1
    return values


def format_number(value: float, precision: int = 0) -> str:
    if abs(value) < 1e-10:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.{precision}f}"


def _check_range(name: str, rng) -> tuple:
    lo, hi = float(rng[0]), float(rng[1])
    if not lo < hi:
        raise DomainError(f"{name} min must be less than max (got {lo}, {hi})")
    return lo, hi


# ---------------------------------------------------------------------------
# Styling, one default object per concern
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GraphStyle:
    stroke_color: str = "#ffffff"
    stroke_width: float = 3
    stroke_type: str = "solid"   # solid | dashed | dotted | pointed
    opacity: float = 1.0

    @property
    def dash_array(self) -> Optional[str]:
        return DASH_ARRAYS.get(self.stroke_type)


@dataclass(frozen=True)
class AxisSpec:
    show_axis: bool = True
    axis_thickness: float = 3
    axis_color: str = "#ffffff"
    show_ticks: bool = True
    tick_length: float = 8
    tick_thickness: float = 2
    tick_step: Optional[float] = None
    tick_color: Optional[str] = None
    show_numbers: bool = True
    number_font_size: float = 16
    number_color: str = "#ffffff"
    number_precision: int = 0
    show_tip: bool = True
    tip_size: float = 10

    def __post_init__(self):
        if self.tick_step is not None and not self.tick_step > 0:
            raise DomainError(f"axis tick_step must be positive, got {self.tick_step}")


@dataclass(frozen=True)
class GridSpec:
    show_grid: bool = True
    major_step: Optional[float] = None
    x_major_step: Optional[float] = None
    y_major_step: Optional[float] = None
    major_color: str = "rgba(255,255,255,0.15)"
    major_thickness: float = 1
    opacity: float = 1.0
    stroke_dasharray: Optional[str] = None
    stroke_style: str = "solid"

    def __post_init__(self):
        for name in ('major_step', 'x_major_step', 'y_major_step'):
            step = getattr(self, name)
            if step is not None and not step > 0:
                raise DomainError(f"grid {name} must be positive, got {step}")

    @property
    def dash_array(self) -> Optional[str]:
        return self.stroke_dasharray or DASH_ARRAYS.get(self.stroke_style)


@dataclass(frozen=True)
class LabelOffsets:
    """Screen-space (dx, dy) nudges for the axis labels and the title."""
    x_label: tuple = (0.0, 0.0)
    y_label: tuple = (0.0, 0.0)
    title: tuple = (0.0, 0.0)


DEFAULT_GRAPH_STYLE = GraphStyle()
DEFAULT_AXIS = AxisSpec()
DEFAULT_GRID = GridSpec()
DEFAULT_LABEL_OFFSETS = LabelOffsets()


# ---------------------------------------------------------------------------
# Geometry records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Line:
    start: Point
    end: Point


@dataclass(frozen=True)
class Label:
    text: str
    position: Point
    anchor: str = "middle"


@dataclass(frozen=True)
class AxisGeometry:
    line: Line
    ticks: tuple
    labels: tuple
    tip: tuple  # triangle vertices, empty when hidden


@dataclass(frozen=True)
class SeriesGeometry:
    index: int
    points: tuple
    style: GraphStyle

    @property
    def markers(self) -> tuple:
        """Point markers, drawn only for the 'pointed' stroke type."""
        return self.points if self.style.stroke_type == "pointed" else ()


@dataclass(frozen=True)
class PlaneGeometry:
    grid_vertical: tuple
    grid_horizontal: tuple
    x_axis: Optional[AxisGeometry]
    y_axis: Optional[AxisGeometry]
    origin: Optional[Point]
    series: tuple
    labels: tuple = field(default_factory=tuple)


def _is_nested(x_values) -> bool:
    if len(x_values) == 0:
        return False
    first = x_values[0]
    return isinstance(first, (list, tuple, np.ndarray))


def series_x_for(x_values, index: int):
    """x sequence for series `index`: shared flat list or per-series lists."""
    if _is_nested(x_values):
        return x_values[index] if index < len(x_values) else []
    return x_values


class NumberPlane:
    """Maps x_range * y_range onto the rectangle (x, y, width, height) minus padding."""

    def __init__(self, x_range, y_range, width: float, height: float,
                 x: float = 0.0, y: float = 0.0, padding: float = 20.0,
                 grid: GridSpec = DEFAULT_GRID,
                 x_axis: AxisSpec = DEFAULT_AXIS,
                 y_axis: AxisSpec = DEFAULT_AXIS,
                 show_origin: bool = True,
                 x_label: Optional[str] = None,
                 y_label: Optional[str] = None,
                 title: Optional[str] = None,
                 show_title: bool = False,
                 label_offsets: LabelOffsets = DEFAULT_LABEL_OFFSETS):
        self.x_min, self.x_max = _check_range("x_range", x_range)
        self.y_min, self.y_max = _check_range("y_range", y_range)
        self.x_span = self.x_max - self.x_min
        self.y_span = self.y_max - self.y_min

        self.plot_x = x + padding
        self.plot_y = y + padding
        self.plot_w = width - 2 * padding
        self.plot_h = height - 2 * padding
        if not self.plot_w > 0 or not self.plot_h > 0:
            raise DomainError(
                f"padding {padding} leaves no plot area inside {width}x{height}")
        self.x, self.y = x, y
        self.width, self.height = width, height

        self.grid = grid
        self.x_axis = x_axis
        self.y_axis = y_axis
        self.show_origin = show_origin
        self.x_label = x_label
        self.y_label = y_label
        self.title = title
        self.show_title = show_title
        self.label_offsets = label_offsets

        self.x_step = x_axis.tick_step or nice_step(self.x_span, 8)
        self.y_step = y_axis.tick_step or nice_step(self.y_span, 5)
        self.x_grid_step = grid.x_major_step or grid.major_step or self.x_step
        self.y_grid_step = grid.y_major_step or grid.major_step or self.y_step

    # -- mapping -------------------------------------------------------------

    def map_x(self, value: float) -> float:
        return self.plot_x + (value - self.x_min) / self.x_span * self.plot_w

    def map_y(self, value: float) -> float:
        # screen y decreases as world y increases
        return self.plot_y + self.plot_h - (value - self.y_min) / self.y_span * self.plot_h

    def map_point(self, point) -> Point:
        return Point(self.map_x(point[0]), self.map_y(point[1]))

    def unmap_x(self, screen_x: float) -> float:
        return self.x_min + (screen_x - self.plot_x) / self.plot_w * self.x_span

    def unmap_y(self, screen_y: float) -> float:
        return self.y_min + (self.plot_y + self.plot_h - screen_y) / self.plot_h * self.y_span

    # -- ticks & axes --------------------------------------------------------

    def x_ticks(self) -> list:
        return ticks(self.x_min, self.x_max, self.x_step)

    def y_ticks(self) -> list:
        return ticks(self.y_min, self.y_max, self.y_step)

    def x_axis_screen_y(self) -> float:
        """Screen y of the horizontal axis; pinned to the nearest edge when 0 is out of range."""
        if self.y_min > 0:
            return self.map_y(self.y_min)
        if self.y_max < 0:
            return self.map_y(self.y_max)
        return self.map_y(0.0)

    def y_axis_screen_x(self) -> float:
        if self.x_min > 0:
            return self.map_x(self.x_min)
        if self.x_max < 0:
            return self.map_x(self.x_max)
        return self.map_x(0.0)

    def grid_lines(self) -> tuple:
        """(vertical, horizontal) grid lines; both empty when the grid is hidden."""
        if not self.grid.show_grid:
            return (), ()
        top, bottom = self.plot_y, self.plot_y + self.plot_h
        left, right = self.plot_x, self.plot_x + self.plot_w
        vertical = tuple(
            Line(Point(px, top), Point(px, bottom))
            for px in map(self.map_x, ticks(self.x_min, self.x_max, self.x_grid_step)))
        horizontal = tuple(
            Line(Point(left, py), Point(right, py))
            for py in map(self.map_y, ticks(self.y_min, self.y_max, self.y_grid_step)))
        return vertical, horizontal

    def _skip_label(self, value: float) -> bool:
        return self.show_origin and abs(value) < TICK_TOLERANCE

    def x_axis_geometry(self) -> Optional[AxisGeometry]:
        axis = self.x_axis
        if not axis.show_axis:
            return None
        ay = self.x_axis_screen_y()
        left, right = self.plot_x, self.plot_x + self.plot_w
        half = axis.tick_length / 2
        values = self.x_ticks()

        marks = ()
        if axis.show_ticks:
            marks = tuple(Line(Point(self.map_x(v), ay - half), Point(self.map_x(v), ay + half))
                          for v in values)
        labels = ()
        if axis.show_numbers:
            labels = tuple(
                Label(format_number(v, axis.number_precision), Point(self.map_x(v), ay + 25))
                for v in values if not self._skip_label(v))
        tip = ()
        if axis.show_tip:
            s = axis.tip_size
            tip = (Point(right, ay), Point(right - s, ay - s / 2), Point(right - s, ay + s / 2))
        return AxisGeometry(Line(Point(left, ay), Point(right, ay)), marks, labels, tip)

    def y_axis_geometry(self) -> Optional[AxisGeometry]:
        axis = self.y_axis
        if not axis.show_axis:
            return None
        ax = self.y_axis_screen_x()
        top, bottom = self.plot_y, self.plot_y + self.plot_h
        half = axis.tick_length / 2
        values = self.y_ticks()

        marks = ()
        if axis.show_ticks:
            marks = tuple(Line(Point(ax - half, self.map_y(v)), Point(ax + half, self.map_y(v)))
                          for v in values)
        labels = ()
        if axis.show_numbers:
            labels = tuple(
                Label(format_number(v, axis.number_precision),
                      Point(ax - 15, self.map_y(v) + 5), anchor="end")
                for v in values if not self._skip_label(v))
        tip = ()
        if axis.show_tip:
            s = axis.tip_size
            tip = (Point(ax, top), Point(ax - s / 2, top + s), Point(ax + s / 2, top + s))
        return AxisGeometry(Line(Point(ax, top), Point(ax, bottom)), marks, labels, tip)

    # -- series --------------------------------------------------------------

    def map_series(self, xs, ys) -> tuple:
        """Screen polyline for one series; the longer input is truncated."""
        n = min(len(xs), len(ys))
        return tuple(Point(self.map_x(xs[i]), self.map_y(ys[i])) for i in range(n))

    def series_geometry(self, x_values, y_values, styles=None) -> tuple:
        styles = styles or {}
        out = []
        for idx, ys in enumerate(y_values):
            pts = self.map_series(series_x_for(x_values, idx), ys)
            if len(pts) < 2:
                logger.debug("series %d has %d point(s), skipped", idx, len(pts))
                continue
            out.append(SeriesGeometry(idx, pts, styles.get(idx, DEFAULT_GRAPH_STYLE)))
        return tuple(out)

    def text_labels(self) -> tuple:
        labels = []
        off = self.label_offsets
        if self.x_label:
            dx, dy = off.x_label
            labels.append(Label(self.x_label,
                                Point(self.plot_x + self.plot_w - 10 + dx,
                                      self.x_axis_screen_y() - 10 + dy),
                                anchor="end"))
        if self.y_label:
            dx, dy = off.y_label
            labels.append(Label(self.y_label,
                                Point(self.y_axis_screen_x() + 10 + dx, self.plot_y + 20 + dy),
                                anchor="start"))
        # a title is opt-in, giving one is not enough
        if self.show_title and self.title:
            dx, dy = off.title
            labels.append(Label(self.title,
                                Point(self.x + self.width / 2 + dx, self.y + 30 + dy)))
        return tuple(labels)

    def geometry(self, x_values=(), y_values=(), styles=None) -> PlaneGeometry:
        vertical, horizontal = self.grid_lines()
        origin = self.map_point((0.0, 0.0)) if self.show_origin else None
        return PlaneGeometry(
            grid_vertical=vertical,
            grid_horizontal=horizontal,
            x_axis=self.x_axis_geometry(),
            y_axis=self.y_axis_geometry(),
            origin=origin,
            series=self.series_geometry(x_values, y_values, styles),
            labels=self.text_labels(),
        )
