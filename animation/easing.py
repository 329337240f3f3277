import numpy as np

from core.errors import DomainError


def clamp01(t: float) -> float:
    return float(np.clip(t, 0.0, 1.0))


def linear(t: float) -> float:
    return float(t)


def ease_in_quad(t: float) -> float:
    return float(t * t)


def ease_out_quad(t: float) -> float:
    return float(1.0 - (1.0 - t) ** 2)


def ease_in_out_quad(t: float) -> float:
    """Quadratic in-out: 2t^2 on the first half, mirrored on the second."""
    if t < 0.5:
        return float(2.0 * t * t)
    return float(1.0 - 2.0 * (1.0 - t) ** 2)


def lerp(a, b, t: float):
    # exact at t=0 and t=1
    return a * (1.0 - t) + b * t


EASINGS = {
    'linear': linear,
    'easeIn': ease_in_quad,
    'easeOut': ease_out_quad,
    'easeInOut': ease_in_out_quad,
}

# snake_case spellings used by the config layer and CLI
_ALIASES = {
    'ease_in': 'easeIn',
    'ease_out': 'easeOut',
    'ease_in_out': 'easeInOut',
}

DEFAULT_EASING = 'easeInOut'


def get_easing(name: str):
    key = _ALIASES.get(name, name)
    try:
        return EASINGS[key]
    except KeyError:
        available = ", ".join(sorted(EASINGS))
        raise DomainError(
            f"Unknown easing {name!r}. Available easings: {available}") from None


def eased_progress(raw: float, easing) -> float:
    """Apply easing inside [0, 1]; outside it progress continues linearly."""
    if 0.0 <= raw <= 1.0:
        return easing(raw)
    return float(raw)
