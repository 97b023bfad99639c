"""
Units — Конверсия years ⇄ calendar instants

Единственный допустимый способ преобразований между:
- duration_years (точная рациональная доля, Fraction)
- timedelta / datetime (календарные границы периодов)

ЗАПРЕЩЕНО переводить годы в даты в обход этого модуля: все уровни
вложенности обязаны использовать одну и ту же константу DAYS_PER_YEAR,
иначе границы соседних уровней расходятся (drift).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. DAYS_PER_YEAR = 365.25 (юлианский год), фиксирована для всего engine
2. Длительности хранятся как Fraction, в datetime переводятся только на границе
3. Округление до микросекунд (разрешение datetime) — round half-even
4. Все instants нормализуются в UTC
"""

import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from fractions import Fraction
from typing import Final, Union

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Юлианский год: 365.25 дня, представлен точно
DAYS_PER_YEAR: Final[Fraction] = Fraction(1461, 4)

SECONDS_PER_DAY: Final[int] = 86_400

MICROSECONDS_PER_DAY: Final[int] = SECONDS_PER_DAY * 1_000_000

YearsLike = Union[Fraction, int, str, Decimal, float]


# =============================================================================
# RATIONAL COERCION
# =============================================================================


def to_fraction(value: YearsLike) -> Fraction:
    """
    Приведение длительности к точному Fraction.

    float переводится через десятичное представление (str), чтобы
    3.3333 стал 33333/10000, а не двоичной аппроксимацией.

    Args:
        value: Fraction, int, Decimal, float или строка ("20", "7/3", "3.25")

    Returns:
        Fraction

    Raises:
        ValueError: NaN/Inf или нечисловая строка
        TypeError: bool или неподдерживаемый тип

    Examples:
        >>> to_fraction(20)
        Fraction(20, 1)
        >>> to_fraction("7/3")
        Fraction(7, 3)
        >>> to_fraction(3.25)
        Fraction(13, 4)
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a valid duration")

    if isinstance(value, Fraction):
        return value

    if isinstance(value, int):
        return Fraction(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Duration contains NaN/Inf: {value}")
        return Fraction(str(value))

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Duration contains NaN/Inf: {value}")
        return Fraction(value)

    if isinstance(value, str):
        try:
            return Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as e:
            raise ValueError(f"Invalid duration string: {value!r}") from e

    raise TypeError(f"Unsupported duration type: {type(value).__name__}")


# =============================================================================
# INSTANTS
# =============================================================================


def ensure_utc(instant: datetime) -> datetime:
    """
    Нормализация instant в UTC.

    Naive datetime интерпретируется как UTC (внешний сервис отдаёт UTC).
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def years_to_timedelta(
    years: Fraction,
    days_per_year: Fraction = DAYS_PER_YEAR,
) -> timedelta:
    """
    Конверсия: годы → timedelta.

    timedelta = round(years × days_per_year × MICROSECONDS_PER_DAY) мкс

    Examples:
        >>> years_to_timedelta(Fraction(1))
        datetime.timedelta(days=365, seconds=21600)
    """
    microseconds = round(to_fraction(years) * days_per_year * MICROSECONDS_PER_DAY)
    return timedelta(microseconds=microseconds)


def timedelta_to_microseconds(delta: timedelta) -> int:
    """Точная длина timedelta в микросекундах."""
    return (delta.days * SECONDS_PER_DAY + delta.seconds) * 1_000_000 + delta.microseconds


def timedelta_to_years(
    delta: timedelta,
    days_per_year: Fraction = DAYS_PER_YEAR,
) -> Fraction:
    """
    Конверсия: timedelta → годы (точно, без float).

    Обратная к years_to_timedelta с точностью до округления в 1 мкс.
    """
    return Fraction(timedelta_to_microseconds(delta)) / (days_per_year * MICROSECONDS_PER_DAY)


def add_years(
    instant: datetime,
    years: Fraction,
    days_per_year: Fraction = DAYS_PER_YEAR,
) -> datetime:
    """Сдвиг instant на years лет по единой конвенции DAYS_PER_YEAR."""
    return ensure_utc(instant) + years_to_timedelta(years, days_per_year)


def years_between(
    start: datetime,
    end: datetime,
    days_per_year: Fraction = DAYS_PER_YEAR,
) -> Fraction:
    """Длительность [start, end) в годах."""
    return timedelta_to_years(ensure_utc(end) - ensure_utc(start), days_per_year)
