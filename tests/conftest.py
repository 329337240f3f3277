"""Shared fixtures for the hydraulic diagram geometry tests."""

import logging

import pytest

from core.camera import CameraTransition, Viewport
from core.logging_config import PACKAGES
from hydraulics.parameters import SceneConfig


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


@pytest.fixture
def straight_path():
    """Two points, 10 units along +x."""
    return [(0.0, 0.0), (10.0, 0.0)]


@pytest.fixture
def l_path():
    """3-4 right angle: total length 7, corner at t = 3/7."""
    return [(0.0, 0.0), (3.0, 0.0), (3.0, 4.0)]


# ---------------------------------------------------------------------------
# Camera
# ---------------------------------------------------------------------------


@pytest.fixture
def linear_transition() -> CameraTransition:
    """Linear, unlocked transition over frames 0..10."""
    return CameraTransition(
        start_frame=0, end_frame=10,
        initial=Viewport(0.0, 0.0, 100.0, 100.0),
        target=Viewport(50.0, 20.0, 200.0, 50.0),
        easing='linear',
        maintain_aspect_ratio=False,
    )


# ---------------------------------------------------------------------------
# Scene
# ---------------------------------------------------------------------------


@pytest.fixture
def short_config() -> SceneConfig:
    """A short composition so scene tests stay fast."""
    return SceneConfig(duration_in_frames=120)


@pytest.fixture
def restore_package_loggers():
    """Undo setup_logging side effects after a test."""
    yield
    for name in PACKAGES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
