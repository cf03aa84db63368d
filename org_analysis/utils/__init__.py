from .columns import METRIC_COLS

__all__ = [
    "METRIC_COLS",
]
