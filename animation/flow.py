import math
from dataclasses import dataclass
from typing import NamedTuple

from core.errors import DomainError
from core.path import PathSampler, Point


@dataclass(frozen=True)
class FlowConfig:
    # At |flow| == max_flow a marker covers the whole path in 1/speed_constant frames.
    speed_constant: float = 0.01
    epsilon: float = 0.01
    dot_count: int = 8
    max_flow: float = 100.0

    def __post_init__(self):
        if not self.max_flow > 0:
            raise DomainError(f"max_flow must be positive, got {self.max_flow}")
        if self.dot_count <= 0:
            raise DomainError(f"dot_count must be positive, got {self.dot_count}")
        if self.epsilon < 0:
            raise DomainError(f"flow epsilon must not be negative, got {self.epsilon}")


DEFAULT_FLOW = FlowConfig()


class FlowMarker(NamedTuple):
    t: float
    position: Point


def wrap01(x: float) -> float:
    """Map any real onto [0, 1)."""
    w = math.fmod(x, 1.0)
    if w < 0:
        w += 1.0
    if w >= 1.0:  # tiny negatives round up to exactly 1.0
        w = 0.0
    return w


def normalized_flow(flow: float, max_flow: float) -> float:
    return min(max(flow / max_flow, -1.0), 1.0)


def marker_params(frame: float, flow: float, max_flow: float, dot_count: int,
                  speed_constant: float = DEFAULT_FLOW.speed_constant,
                  epsilon: float = DEFAULT_FLOW.epsilon) -> list:
    """Path parameters of every marker; empty when the flow is effectively zero."""
    if abs(flow) < epsilon:
        return []
    speed = normalized_flow(flow, max_flow) * speed_constant
    return [wrap01(frame * speed + i / dot_count) for i in range(dot_count)]


class FlowAnimator:
    """Markers travelling along a pipe, direction and speed set by a signed flow."""

    def __init__(self, path, config: FlowConfig = DEFAULT_FLOW):
        self.sampler = path if isinstance(path, PathSampler) else PathSampler(path)
        self.config = config

    def markers(self, frame: float, flow: float) -> list:
        c = self.config
        ts = marker_params(frame, flow, c.max_flow, c.dot_count, c.speed_constant, c.epsilon)
        return [FlowMarker(t, self.sampler.point_at(t)) for t in ts]

    def positions(self, frame: float, flow: float) -> list:
        return [m.position for m in self.markers(frame, flow)]


def marker_positions(frame: float, path, flow: float,
                     max_flow: float = DEFAULT_FLOW.max_flow,
                     dot_count: int = DEFAULT_FLOW.dot_count) -> list:
    config = FlowConfig(max_flow=max_flow, dot_count=dot_count)
    return FlowAnimator(path, config).positions(frame, flow)
