import math

import numpy as np

from core.path import Point


# Component footprints in scene pixels
VALVE_SIZE = (400.0, 260.0)
CYLINDER_SIZE = (500.0, 150.0)

# Port placement as fractions of component width (ports sit on one long edge)
VALVE_PORT_A_X = 0.3
VALVE_PORT_B_X = 0.7
CYLINDER_PORT_CAP_X = 0.2
CYLINDER_PORT_ROD_X = 0.8

# Default placement (world units, centered origin, Y up)
VALVE_POSITION = (-400.0, -300.0)
CYLINDER_POSITION = (400.0, 200.0)


def local_to_world(local, position, rotation: float = 0.0, scale=(1.0, 1.0)) -> Point:
    """Rotate (radians, CCW), then scale, then translate a component-local point."""
    c, s = math.cos(rotation), math.sin(rotation)
    x = local[0] * c - local[1] * s
    y = local[0] * s + local[1] * c
    return Point(x * scale[0] + position[0], y * scale[1] + position[1])


def world_to_screen(point, scene_width: float, scene_height: float) -> Point:
    """Centered Y-up world to top-left Y-down screen, 1 unit = 1 pixel."""
    return Point(scene_width / 2 + point[0], scene_height / 2 - point[1])


def valve_ports(position=VALVE_POSITION, rotation: float = 0.0, scale=(1.0, 1.0),
                size=VALVE_SIZE) -> dict:
    """World positions of valve ports A and B (top edge)."""
    w, h = size
    return {
        'a': local_to_world((w * VALVE_PORT_A_X - w / 2, h / 2), position, rotation, scale),
        'b': local_to_world((w * VALVE_PORT_B_X - w / 2, h / 2), position, rotation, scale),
    }


def cylinder_ports(position=CYLINDER_POSITION, rotation: float = 0.0, scale=(1.0, 1.0),
                   size=CYLINDER_SIZE) -> dict:
    """World positions of the cap-end and rod-end ports (bottom edge)."""
    w, h = size
    return {
        'cap': local_to_world((w * CYLINDER_PORT_CAP_X - w / 2, -h / 2), position, rotation, scale),
        'rod': local_to_world((w * CYLINDER_PORT_ROD_X - w / 2, -h / 2), position, rotation, scale),
    }


def manhattan_route(start, end) -> tuple:
    """Vertical, horizontal, vertical: 4 points meeting at the mid height."""
    mid_y = (start[1] + end[1]) / 2
    return (
        Point(float(start[0]), float(start[1])),
        Point(float(start[0]), mid_y),
        Point(float(end[0]), mid_y),
        Point(float(end[0]), float(end[1])),
    )


def bounds_of(points) -> tuple:
    """(min_x, min_y, max_x, max_y) of a point set."""
    xy = np.asarray(points, dtype=np.float64)
    return (float(xy[:, 0].min()), float(xy[:, 1].min()),
            float(xy[:, 0].max()), float(xy[:, 1].max()))
