"""
Domain models and value objects.

Contains fundamental domain entities like Period, PeriodChildren, CycleDefinition
and the single years ⇄ instants conversion module.
"""

from dasha_engine.core.domain.cycle import BodyShare, CycleDefinition
from dasha_engine.core.domain.period import (
    LEVEL_NAMES,
    MAX_NESTING_DEPTH,
    ChildSource,
    Period,
    PeriodChildren,
    level_name,
)
from dasha_engine.core.domain.units import (
    DAYS_PER_YEAR,
    MICROSECONDS_PER_DAY,
    add_years,
    ensure_utc,
    timedelta_to_microseconds,
    timedelta_to_years,
    to_fraction,
    years_between,
    years_to_timedelta,
)

__all__ = [
    # Units module
    "DAYS_PER_YEAR",
    "MICROSECONDS_PER_DAY",
    "add_years",
    "ensure_utc",
    "timedelta_to_microseconds",
    "timedelta_to_years",
    "to_fraction",
    "years_between",
    "years_to_timedelta",
    # Period model
    "LEVEL_NAMES",
    "MAX_NESTING_DEPTH",
    "ChildSource",
    "Period",
    "PeriodChildren",
    "level_name",
    # Cycle model
    "BodyShare",
    "CycleDefinition",
]
