from dataclasses import dataclass

from animation.easing import DEFAULT_EASING, get_easing
from core.errors import DomainError


@dataclass(frozen=True)
class SceneConfig:
    scene_width: int = 1920
    scene_height: int = 1080
    fps: int = 60
    duration_in_frames: int = 600

    max_pressure: float = 300.0    # ramp top (red)
    max_flow: float = 100.0        # flow normalization
    dot_count: int = 8             # markers per pipe
    flow_speed: float = 0.01       # path fraction per frame at max flow

    camera_easing: str = DEFAULT_EASING
    maintain_aspect_ratio: bool = True
    zoom_multiplier: float = 1.0

    plot_width: float = 600.0
    plot_height: float = 400.0
    plot_window: int = 180         # history frames shown

    def __post_init__(self):
        if self.scene_width <= 0 or self.scene_height <= 0:
            raise DomainError(
                f"scene size must be positive, got {self.scene_width}x{self.scene_height}")
        if self.fps <= 0:
            raise DomainError(f"fps must be positive, got {self.fps}")
        if self.duration_in_frames <= 0:
            raise DomainError(
                f"duration_in_frames must be positive, got {self.duration_in_frames}")
        if self.max_pressure <= 0:
            raise DomainError(f"max_pressure must be positive, got {self.max_pressure}")
        if self.max_flow <= 0:
            raise DomainError(f"max_flow must be positive, got {self.max_flow}")
        if self.dot_count <= 0:
            raise DomainError(f"dot_count must be positive, got {self.dot_count}")
        if self.zoom_multiplier <= 0:
            raise DomainError(f"zoom_multiplier must be positive, got {self.zoom_multiplier}")
        if self.plot_window <= 0:
            raise DomainError(f"plot_window must be positive, got {self.plot_window}")
        get_easing(self.camera_easing)
