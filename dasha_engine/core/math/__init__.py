"""
Core math modules для dasha engine

Пропорциональное разбиение периодов и циклическая ротация порядка тел.
"""

# Subdivision
from dasha_engine.core.math.subdivision import (
    compute_subperiods,
    iter_rotation,
    rotate,
)

__all__ = [
    "compute_subperiods",
    "iter_rotation",
    "rotate",
]
