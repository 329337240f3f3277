"""Supplied scalar drivers for the demo axis. No simulation happens here:
every value is a closed-form function of the frame index."""
import math

from hydraulics.parameters import SceneConfig


class AxisSignals:
    def __init__(self, config: SceneConfig, supply_pressure: float = None,
                 tank_pressure: float = 0.0, stroke_limit: float = 0.95):
        self.config = config
        self.supply_pressure = config.max_pressure if supply_pressure is None else supply_pressure
        self.tank_pressure = tank_pressure
        self.stroke_limit = stroke_limit

    def piston_position(self, frame: float) -> float:
        """Linear extension from 0 to stroke_limit over the composition."""
        total = self.config.duration_in_frames
        t = min(max(frame, 0), total) / total
        return t * self.stroke_limit

    def spool(self, frame: float) -> float:
        return math.sin(frame / 60) * 100

    def flow_a(self, frame: float) -> float:
        return math.sin(frame / 30) * self.config.max_flow

    def flow_b(self, frame: float) -> float:
        return -self.flow_a(frame)

    def force(self, frame: float) -> float:
        return math.sin(frame / 60)

    def port_pressures(self, frame: float) -> tuple:
        """(A, B) line pressures: the side the spool opens to supply rises."""
        opening = self.spool(frame) / 100
        span = self.supply_pressure - self.tank_pressure
        p_a = self.tank_pressure + span * max(opening, 0.0)
        p_b = self.tank_pressure + span * max(-opening, 0.0)
        return p_a, p_b

    def at(self, frame: float) -> dict:
        p_a, p_b = self.port_pressures(frame)
        return {
            'piston_position': self.piston_position(frame),
            'spool': self.spool(frame),
            'flow_a': self.flow_a(frame),
            'flow_b': self.flow_b(frame),
            'force': self.force(frame),
            'pressure_a': p_a,
            'pressure_b': p_b,
        }

