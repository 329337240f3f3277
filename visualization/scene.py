import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from animation.flow import FlowConfig
from animation.timeline import FrameClock
from core.camera import CameraPath, CameraTransform, Viewport, transform_of
from core.path import Point
from core.svg import transform_attr
from hydraulics.parameters import SceneConfig
from hydraulics.signals import AxisSignals
from visualization.colormap import DEFAULT_RAMP, ColorRamp
from visualization.layout import (
    CYLINDER_POSITION, cylinder_ports, manhattan_route, valve_ports,
    world_to_screen,
)
from visualization.number_plane import AxisSpec, GridSpec, NumberPlane, PlaneGeometry
from visualization.operation_visual import (
    ColorBarVisual, CylinderFrame, CylinderVisual, HydraulicLineVisual, Indicator,
    LineFrame, PlotFrame, SpoolFrame, SpoolVisual, TimeSeriesVisual,
)


logger = logging.getLogger(__name__)

# Camera keyframes as fractions of the composition length:
# hold the full view, push in on the cylinder, hold, pull back out.
CAMERA_SCHEDULE = (
    (0.0, 'full'),
    (0.2, 'full'),
    (0.4, 'cylinder'),
    (0.6, 'cylinder'),
    (0.8, 'full'),
)
CYLINDER_ZOOM = 3.2

COLOR_BAR_HEIGHT = 600.0
BACKGROUND_GRID_STEP = 10
BACKGROUND_UNITS_PER_PX = 0.1


@dataclass(frozen=True)
class FrameGeometry:
    frame: int
    viewport: Viewport
    transform: CameraTransform
    transform_attr: str
    background: PlaneGeometry
    line_a: LineFrame
    line_b: LineFrame
    cylinder: CylinderFrame
    spool: SpoolFrame
    indicators: tuple
    plot: PlotFrame
    spool_plot: PlotFrame
    signals: dict

    def screen_to_world(self, point) -> Point:
        """Cursor readout through this frame's own camera transform."""
        return self.transform.invert(point)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


class HydraulicScene:
    """Valve, two pipes and a cylinder under a keyframed camera.

    All layout is fixed at construction; evaluate(frame) only reads it, so
    frames can be computed in any order, or in parallel, with identical output.
    """

    def __init__(self, config: SceneConfig = SceneConfig(),
                 signals: Optional[AxisSignals] = None,
                 ramp: ColorRamp = DEFAULT_RAMP,
                 camera_observer: Optional[Callable[[Viewport], None]] = None):
        self.config = config
        self.clock = FrameClock(config.fps, config.duration_in_frames)
        self.signals = signals or AxisSignals(config)
        self.ramp = ramp

        self.camera = CameraPath(config.scene_width, config.scene_height,
                                 maintain_aspect_ratio=config.maintain_aspect_ratio,
                                 zoom_multiplier=config.zoom_multiplier,
                                 observer=camera_observer)
        self._build_camera_path()
        self._build_lines()
        self._build_components()
        self._build_background()
        logger.info("scene built: %dx%d, %d frames @ %d fps",
                    config.scene_width, config.scene_height,
                    config.duration_in_frames, config.fps)

    def _to_screen(self, world) -> Point:
        return world_to_screen(world, self.config.scene_width, self.config.scene_height)

    def _build_camera_path(self):
        c = self.config
        full = Viewport(c.scene_width / 2, c.scene_height / 2, c.scene_width, c.scene_height)
        focus = self._to_screen(CYLINDER_POSITION)
        w = c.scene_width / CYLINDER_ZOOM
        zoomed = Viewport(focus.x, focus.y, w, w * c.scene_height / c.scene_width)
        states = {'full': full, 'cylinder': zoomed}

        seen = set()
        for fraction, name in CAMERA_SCHEDULE:
            frame = int(round(fraction * c.duration_in_frames))
            if frame in seen:
                continue
            seen.add(frame)
            self.camera.add_keyframe(frame, states[name], c.camera_easing)

    def _build_lines(self):
        c = self.config
        v_ports = valve_ports()
        c_ports = cylinder_ports()
        flow = FlowConfig(speed_constant=c.flow_speed, dot_count=c.dot_count,
                          max_flow=c.max_flow)
        route_a = [self._to_screen(p) for p in manhattan_route(v_ports['a'], c_ports['cap'])]
        route_b = [self._to_screen(p) for p in manhattan_route(v_ports['b'], c_ports['rod'])]
        self.line_a = HydraulicLineVisual(route_a, c.max_pressure, self.ramp, flow)
        self.line_b = HydraulicLineVisual(route_b, c.max_pressure, self.ramp, flow)

    def _build_components(self):
        c = self.config
        self.cylinder = CylinderVisual(c.max_pressure, ramp=self.ramp)
        self.spool = SpoolVisual()
        self.color_bar = ColorBarVisual(COLOR_BAR_HEIGHT, c.max_pressure, self.ramp)
        self.plot = TimeSeriesVisual(
            self.signals.piston_position, c.plot_width, c.plot_height,
            y_range=(0.0, 1.0), mode='progress',
            total_frames=c.duration_in_frames,
            step=max(1, c.duration_in_frames // 600),
        )
        self.spool_plot = TimeSeriesVisual(
            self.signals.spool, c.plot_width, c.plot_height,
            y_range=(-100.0, 100.0), mode='history', window=c.plot_window,
        )

    def _build_background(self):
        c = self.config
        self.background = NumberPlane(
            x_range=(0, c.scene_width * BACKGROUND_UNITS_PER_PX),
            y_range=(0, c.scene_height * BACKGROUND_UNITS_PER_PX),
            width=c.scene_width, height=c.scene_height, padding=0.0,
            grid=GridSpec(major_step=BACKGROUND_GRID_STEP, opacity=0.2),
            x_axis=AxisSpec(show_axis=False, show_numbers=False),
            y_axis=AxisSpec(show_axis=False, show_numbers=False),
            show_origin=False,
        )
        # static: same for every frame
        self._background_geometry = self.background.geometry()

    def evaluate(self, frame: int) -> FrameGeometry:
        c = self.config
        viewport = self.camera.evaluate(frame)
        transform = transform_of(viewport, c.scene_width, c.scene_height)
        s = self.signals.at(frame)

        indicators: tuple[Indicator, ...] = (
            self.color_bar.indicator(s['pressure_a'], "A"),
            self.color_bar.indicator(s['pressure_b'], "B"),
        )
        return FrameGeometry(
            frame=frame,
            viewport=viewport,
            transform=transform,
            transform_attr=transform_attr(transform),
            background=self._background_geometry,
            line_a=self.line_a.frame(frame, s['pressure_a'], s['flow_a']),
            line_b=self.line_b.frame(frame, s['pressure_b'], s['flow_b']),
            cylinder=self.cylinder.frame(s['piston_position'], s['pressure_a'],
                                         s['pressure_b'], s['force']),
            spool=self.spool.frame(s['spool']),
            indicators=indicators,
            plot=self.plot.frame(frame),
            spool_plot=self.spool_plot.frame(frame),
            signals=s,
        )

    def frames(self, start: int = 0, end: Optional[int] = None, step: int = 1):
        for f in self.clock.frames(start, end, step):
            yield self.evaluate(f)

