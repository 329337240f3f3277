import logging
import warnings


logger = logging.getLogger(__name__)


class DomainError(ValueError):
    """Static configuration violates an invariant. Raised at construction time."""


class DegenerateInputWarning(UserWarning):
    """Per-frame input had no well-defined answer; a fallback value was used."""


def warn_degenerate(message: str, stacklevel: int = 3):
    logger.debug("degenerate input: %s", message)
    warnings.warn(message, DegenerateInputWarning, stacklevel=stacklevel)
