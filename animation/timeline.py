from dataclasses import dataclass
from typing import Callable

from core.errors import DomainError


@dataclass(frozen=True)
class FrameClock:
    fps: int = 60
    duration_in_frames: int = 600

    def __post_init__(self):
        if self.fps <= 0:
            raise DomainError(f"fps must be positive, got {self.fps}")
        if self.duration_in_frames <= 0:
            raise DomainError(
                f"duration_in_frames must be positive, got {self.duration_in_frames}")

    @property
    def duration_seconds(self) -> float:
        return self.duration_in_frames / self.fps

    def to_seconds(self, frame: float) -> float:
        return frame / self.fps

    def to_frame(self, seconds: float) -> int:
        return int(round(seconds * self.fps))

    def frames(self, start: int = 0, end: int = None, step: int = 1) -> range:
        end = self.duration_in_frames if end is None else end
        return range(start, end, step)


def frame_progress(frame: float, start: float, end: float) -> float:
    """Clamped linear progress of frame through [start, end]."""
    if end == start:
        return 0.0 if frame < start else 1.0
    return min(max((frame - start) / (end - start), 0.0), 1.0)


def _check_step(step: int):
    if step <= 0:
        raise DomainError(f"sampling step must be positive, got {step}")


def sample_history(value_at: Callable[[int], float], frame: int,
                   window: int, step: int = 2) -> tuple:
    """(frame, value) samples of the sliding window [frame - window, frame].

    Frames before 0 are not sampled. Each call rebuilds the tuple from
    value_at alone, so any frame can be evaluated in any order.
    """
    _check_step(step)
    if window <= 0:
        raise DomainError(f"history window must be positive, got {window}")
    start = max(0, frame - window)
    return tuple((f, float(value_at(f))) for f in range(start, frame + 1, step))


def sample_progress(value_at: Callable[[int], float], frame: int,
                    total_frames: int, step: int = 1) -> tuple:
    """(frame, value) samples from 0 up to min(frame, total_frames).

    The head frame is always the last sample, even when step skips it.
    """
    _check_step(step)
    head = min(frame, total_frames)
    if head < 0:
        return ()
    samples = [(f, float(value_at(f))) for f in range(0, head + 1, step)]
    if head % step != 0:
        samples.append((head, float(value_at(head))))
    return tuple(samples)
