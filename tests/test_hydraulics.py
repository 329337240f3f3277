"""Scene configuration and the supplied axis signals."""

import math

import pytest

from core.errors import DomainError
from hydraulics.parameters import SceneConfig
from hydraulics.signals import AxisSignals


class TestSceneConfig:
    def test_defaults(self):
        c = SceneConfig()
        assert (c.scene_width, c.scene_height) == (1920, 1080)
        assert c.max_pressure == 300.0
        assert c.dot_count == 8

    @pytest.mark.parametrize("kwargs", [
        {"scene_width": 0},
        {"fps": -1},
        {"duration_in_frames": 0},
        {"max_pressure": 0.0},
        {"max_flow": -5.0},
        {"dot_count": 0},
        {"zoom_multiplier": 0.0},
        {"plot_window": 0},
        {"camera_easing": "wobble"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(DomainError):
            SceneConfig(**kwargs)


class TestAxisSignals:
    @pytest.fixture
    def signals(self):
        return AxisSignals(SceneConfig())

    def test_rest_at_frame_zero(self, signals):
        s = signals.at(0)
        assert s == {
            'piston_position': 0.0, 'spool': 0.0, 'flow_a': 0.0, 'flow_b': -0.0,
            'force': 0.0, 'pressure_a': 0.0, 'pressure_b': 0.0,
        }

    def test_piston_ramp(self, signals):
        assert signals.piston_position(300) == pytest.approx(0.475)
        assert signals.piston_position(600) == pytest.approx(0.95)
        assert signals.piston_position(900) == pytest.approx(0.95)
        assert signals.piston_position(-10) == 0.0

    def test_flows_are_opposite(self, signals):
        for frame in (7, 40, 333):
            assert signals.flow_b(frame) == -signals.flow_a(frame)

    def test_spool_direction_picks_pressurized_port(self, signals):
        p_a, p_b = signals.port_pressures(30 * math.pi)
        assert p_a == pytest.approx(300.0)
        assert p_b == 0.0
        p_a, p_b = signals.port_pressures(90 * math.pi)
        assert p_a == 0.0
        assert p_b == pytest.approx(300.0)

    def test_custom_supply(self):
        signals = AxisSignals(SceneConfig(), supply_pressure=200.0, tank_pressure=5.0)
        p_a, p_b = signals.port_pressures(30 * math.pi)
        assert p_a == pytest.approx(200.0)
        assert p_b == 5.0
