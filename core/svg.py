"""
String serialization for the rendering boundary.

Geometry travels between modules as Point sequences; these helpers only
produce attribute strings for whatever draws the frame. Nothing parses
them back.
"""


def _num(v: float, digits: int) -> str:
    text = f"{v:.{digits}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text in ('-0', ''):
        text = '0'
    return text


def path_data(points, digits: int = 1, closed: bool = False) -> str:
    """'M x y L x y ...' for a polyline."""
    parts = []
    for i, (x, y) in enumerate(points):
        cmd = 'M' if i == 0 else 'L'
        parts.append(f"{cmd} {_num(x, digits)} {_num(y, digits)}")
    if closed and parts:
        parts.append('Z')
    return ' '.join(parts)


def quadratic_path_data(start, control, end, digits: int = 1) -> str:
    return (f"M {_num(start[0], digits)} {_num(start[1], digits)} "
            f"Q {_num(control[0], digits)} {_num(control[1], digits)} "
            f"{_num(end[0], digits)} {_num(end[1], digits)}")


def points_attr(points, digits: int = 1) -> str:
    """'x,y x,y ...' for polyline/polygon points attributes."""
    return ' '.join(f"{_num(x, digits)},{_num(y, digits)}" for x, y in points)


def transform_attr(transform, digits: int = 6) -> str:
    return (f"translate({_num(transform.translate_x, digits)} "
            f"{_num(transform.translate_y, digits)}) "
            f"scale({_num(transform.scale, digits)})")
