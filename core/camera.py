import logging
from dataclasses import dataclass
from typing import Callable, Optional

from animation.easing import DEFAULT_EASING, clamp01, eased_progress, get_easing, lerp
from core.errors import DomainError, warn_degenerate
from core.path import Point


logger = logging.getLogger(__name__)

# Floor for extents that extrapolation pushes to zero or below.
_MIN_EXTENT = 1e-9


@dataclass(frozen=True)
class Viewport:
    """Visible world rectangle, given by its center and size in world units."""
    center_x: float
    center_y: float
    width: float
    height: float

    def __post_init__(self):
        if not self.width > 0:
            raise DomainError(f"viewport width must be positive, got {self.width}")
        if not self.height > 0:
            raise DomainError(f"viewport height must be positive, got {self.height}")

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    def as_dict(self) -> dict:
        return {
            'center_x': self.center_x, 'center_y': self.center_y,
            'width': self.width, 'height': self.height,
        }


@dataclass(frozen=True)
class CameraTransition:
    start_frame: int
    end_frame: int
    initial: Viewport
    target: Viewport
    easing: str = DEFAULT_EASING
    maintain_aspect_ratio: bool = True
    clamp_frames: bool = True
    min_width: Optional[float] = None
    max_width: Optional[float] = None
    min_height: Optional[float] = None
    max_height: Optional[float] = None
    zoom_multiplier: float = 1.0

    def __post_init__(self):
        if self.start_frame > self.end_frame:
            raise DomainError(
                f"start_frame ({self.start_frame}) must not exceed end_frame ({self.end_frame})")
        if not self.zoom_multiplier > 0:
            raise DomainError(
                f"zoom_multiplier must be positive, got {self.zoom_multiplier}")
        for lo_name, hi_name in (('min_width', 'max_width'), ('min_height', 'max_height')):
            lo, hi = getattr(self, lo_name), getattr(self, hi_name)
            if lo is not None and lo <= 0:
                raise DomainError(f"{lo_name} must be positive, got {lo}")
            if lo is not None and hi is not None and lo > hi:
                raise DomainError(f"{lo_name} ({lo}) must not exceed {hi_name} ({hi})")
        get_easing(self.easing)


@dataclass(frozen=True)
class CameraTransform:
    """World-to-screen affine: screen = world * scale + translate."""
    scale: float
    translate_x: float
    translate_y: float

    def apply(self, point) -> Point:
        return Point(point[0] * self.scale + self.translate_x,
                     point[1] * self.scale + self.translate_y)

    def invert(self, point) -> Point:
        """Screen-to-world, the exact inverse of apply."""
        return Point((point[0] - self.translate_x) / self.scale,
                     (point[1] - self.translate_y) / self.scale)


def transition_progress(frame: float, transition: CameraTransition) -> float:
    start, end = transition.start_frame, transition.end_frame
    if end == start:
        return 0.0 if frame < start else 1.0
    raw = (frame - start) / (end - start)
    if transition.clamp_frames:
        raw = clamp01(raw)
    return eased_progress(raw, get_easing(transition.easing))


def viewport_at(frame: float, transition: CameraTransition,
                scene_width: float, scene_height: float) -> Viewport:
    """The camera viewport for a frame. Every consumer goes through here."""
    u = transition_progress(frame, transition)
    a, b = transition.initial, transition.target

    cx = lerp(a.center_x, b.center_x, u)
    cy = lerp(a.center_y, b.center_y, u)
    w = lerp(a.width, b.width, u)
    h = lerp(a.height, b.height, u)

    if transition.min_width is not None:
        w = max(w, transition.min_width)
    if transition.max_width is not None:
        w = min(w, transition.max_width)
    if transition.min_height is not None:
        h = max(h, transition.min_height)
    if transition.max_height is not None:
        h = min(h, transition.max_height)

    if transition.zoom_multiplier != 1:
        w /= transition.zoom_multiplier
        h /= transition.zoom_multiplier

    if transition.maintain_aspect_ratio:
        if scene_height == 0 or scene_width == 0:
            warn_degenerate(
                f"scene size {scene_width}x{scene_height} has a zero side, aspect ratio lock skipped")
        else:
            # width is the authority under aspect lock
            h = w / (scene_width / scene_height)

    if w <= 0 or h <= 0:
        warn_degenerate(f"extrapolated viewport collapsed to {w}x{h} at frame {frame}")
        w = max(w, _MIN_EXTENT)
        h = max(h, _MIN_EXTENT)

    return Viewport(float(cx), float(cy), float(w), float(h))


def transform_of(viewport: Viewport, scene_width: float, scene_height: float) -> CameraTransform:
    scale = scene_width / viewport.width
    return CameraTransform(
        scale=scale,
        translate_x=scene_width / 2 - viewport.center_x * scale,
        translate_y=scene_height / 2 - viewport.center_y * scale,
    )


def _check_scene(scene_width, scene_height):
    if not scene_width > 0:
        raise DomainError(f"scene width must be positive, got {scene_width}")
    if scene_height < 0:
        raise DomainError(f"scene height must not be negative, got {scene_height}")


class CameraController:
    """Frame-driven camera over a single transition.

    The optional observer receives the finalized viewport once per evaluate()
    call, so overlays can reuse it instead of re-deriving the interpolation.
    """

    def __init__(self, transition: CameraTransition, scene_width: float, scene_height: float,
                 observer: Optional[Callable[[Viewport], None]] = None):
        _check_scene(scene_width, scene_height)
        self.transition = transition
        self.scene_width = scene_width
        self.scene_height = scene_height
        self.observer = observer

    def viewport(self, frame: float) -> Viewport:
        return viewport_at(frame, self.transition, self.scene_width, self.scene_height)

    def evaluate(self, frame: float) -> Viewport:
        vp = self.viewport(frame)
        if self.observer is not None:
            self.observer(vp)
        return vp

    def transform(self, frame: float) -> CameraTransform:
        return transform_of(self.viewport(frame), self.scene_width, self.scene_height)

    def screen_to_world(self, frame: float, point) -> Point:
        return self.transform(frame).invert(point)


@dataclass(frozen=True)
class CameraKeyframe:
    frame: int
    viewport: Viewport
    easing: str = DEFAULT_EASING


class CameraPath:
    """Chain of keyframed viewports.

    Between two keyframes the camera follows a CameraTransition using the
    easing of the later keyframe. Before the first and after the last
    keyframe the boundary viewport holds.
    """

    def __init__(self, scene_width: float, scene_height: float,
                 maintain_aspect_ratio: bool = True, zoom_multiplier: float = 1.0,
                 observer: Optional[Callable[[Viewport], None]] = None):
        _check_scene(scene_width, scene_height)
        if not zoom_multiplier > 0:
            raise DomainError(f"zoom_multiplier must be positive, got {zoom_multiplier}")
        self.scene_width = scene_width
        self.scene_height = scene_height
        self.maintain_aspect_ratio = maintain_aspect_ratio
        self.zoom_multiplier = zoom_multiplier
        self.observer = observer
        self.keyframes: list[CameraKeyframe] = []
        self._transitions: list[CameraTransition] = []

    def add_keyframe(self, frame: int, viewport: Viewport, easing: str = DEFAULT_EASING):
        get_easing(easing)
        if any(k.frame == frame for k in self.keyframes):
            raise DomainError(f"duplicate camera keyframe at frame {frame}")
        self.keyframes.append(CameraKeyframe(frame, viewport, easing))
        self.keyframes.sort(key=lambda k: k.frame)
        self._transitions = [
            CameraTransition(
                start_frame=k0.frame, end_frame=k1.frame,
                initial=k0.viewport, target=k1.viewport,
                easing=k1.easing,
                maintain_aspect_ratio=self.maintain_aspect_ratio,
                zoom_multiplier=self.zoom_multiplier,
            )
            for k0, k1 in zip(self.keyframes, self.keyframes[1:])
        ]
        logger.debug("camera keyframe at frame %d (%d total)", frame, len(self.keyframes))
        return self

    def transition_for(self, frame: float) -> CameraTransition:
        if not self.keyframes:
            raise DomainError("camera path has no keyframes")
        if len(self.keyframes) == 1:
            k = self.keyframes[0]
            return CameraTransition(k.frame, k.frame, k.viewport, k.viewport,
                                    maintain_aspect_ratio=self.maintain_aspect_ratio,
                                    zoom_multiplier=self.zoom_multiplier)
        for tr in self._transitions:
            if frame <= tr.end_frame:
                return tr
        return self._transitions[-1]

    def viewport_at(self, frame: float) -> Viewport:
        return viewport_at(frame, self.transition_for(frame), self.scene_width, self.scene_height)

    def evaluate(self, frame: float) -> Viewport:
        vp = self.viewport_at(frame)
        if self.observer is not None:
            self.observer(vp)
        return vp

    def transform_at(self, frame: float) -> CameraTransform:
        return transform_of(self.viewport_at(frame), self.scene_width, self.scene_height)
