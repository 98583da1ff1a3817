import functools

from .utils import clamp_score


def clamped_metric(func):
    """
    A decorator for sub-metric scorers: the raw value is clamped into
    [0, 100] as soon as it is computed, before any weighting.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return clamp_score(func(*args, **kwargs))
    return wrapper
