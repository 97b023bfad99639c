"""
Subdivision — Пропорциональное разбиение периода на подпериоды

Модуль реализует два примитива:
- Cyclic Order Resolver: ротация канонического порядка так, чтобы он
  начинался с заданного тела и по кругу возвращался к предшествующему
- Subdivision Calculator: разбиение одного периода на упорядоченный
  список дочерних периодов (один дополнительный уровень вложенности)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Первый child начинается ровно в parent.start_instant
2. child[i+1].start_instant == child[i].end_instant (без разрывов и наложений)
3. Последний child заканчивается ровно в parent.end_instant
4. sum(child.duration_years) == parent.duration_years (точно, Fraction)
5. Разбиение начинается с собственного тела родителя
6. Чистая функция: одинаковый вход → идентичный выход

ФОРМУЛЫ:
    child_years_k = parent.duration_years × years_k / total_years
    cum_k = Σ_{j<k} years_j
    start_k = parent.start_instant + round(span_us × cum_k / total_years) мкс

span_us — фактическая длина [start_instant, end_instant] родителя в
микросекундах. Границы делят фактический span пропорционально долям:
если явный end_instant внешних данных расходится с duration_years,
расхождение распределяется по всем children, а не ложится на хвост.
Для согласованного родителя (end = start + duration) это совпадает с
to_timedelta(offset_k) с точностью до 1 мкс.

Границы отсчитываются от начала родителя (а не складываются child за
child), поэтому ошибка округления до микросекунд не накапливается.
Остаток уходит в длительность последнего child.
"""

import logging
from datetime import timedelta
from fractions import Fraction
from typing import Iterator

from dasha_engine.core.domain.cycle import BodyShare, CycleDefinition
from dasha_engine.core.domain.period import Period
from dasha_engine.core.domain.units import (
    DAYS_PER_YEAR,
    timedelta_to_microseconds,
    years_to_timedelta,
)
from dasha_engine.core.errors import DegeneratePeriodError

logger = logging.getLogger(__name__)


# =============================================================================
# CYCLIC ORDER RESOLVER
# =============================================================================


def iter_rotation(definition: CycleDefinition, start_body: str) -> Iterator[BodyShare]:
    """
    Итератор по порядку тел, начиная со start_body.

    index + modulo по фиксированному tuple, без копирования порядка.

    Raises:
        UnknownBodyError: start_body не входит в порядок системы
    """
    start = definition.index_of(start_body)
    size = definition.size
    for step in range(size):
        yield definition.order[(start + step) % size]


def rotate(definition: CycleDefinition, start_body: str) -> tuple[str, ...]:
    """
    Порядок тел, ротированный к start_body.

    Args:
        definition: Система периодов
        start_body: Тело, с которого начинается порядок

    Returns:
        Tuple тел: start_body, затем остальные в каноническом порядке
        с переходом через конец списка

    Raises:
        UnknownBodyError: start_body не входит в порядок системы

    Examples:
        >>> rotate(get_definition("vimshottari"), "Venus")
        ('Venus', 'Sun', 'Moon', 'Mars', 'Rahu', 'Jupiter', 'Saturn', 'Mercury', 'Ketu')
    """
    return tuple(share.body for share in iter_rotation(definition, start_body))


# =============================================================================
# SUBDIVISION CALCULATOR
# =============================================================================


def compute_subperiods(
    parent: Period,
    definition: CycleDefinition,
    days_per_year: Fraction = DAYS_PER_YEAR,
) -> tuple[Period, ...]:
    """
    Разбиение периода на подпериоды следующего уровня.

    Args:
        parent: Родительский период
        definition: Система периодов
        days_per_year: Конвенция года (default: DAYS_PER_YEAR)

    Returns:
        Tuple дочерних периодов (children=None), контигуально покрывающих
        [parent.start_instant, parent.end_instant]

    Raises:
        DegeneratePeriodError: parent.duration_years <= 0 или пустой span
        UnknownBodyError: тело родителя не входит в систему
    """
    if parent.duration_years <= 0:
        raise DegeneratePeriodError(parent.body, parent.duration_years)

    if parent.end_instant <= parent.start_instant:
        raise DegeneratePeriodError(
            parent.body,
            parent.duration_years,
            details=f"end_instant {parent.end_instant.isoformat()} <= start_instant",
        )

    span_us = timedelta_to_microseconds(parent.span)
    expected = years_to_timedelta(parent.duration_years, days_per_year)
    if abs(timedelta_to_microseconds(expected - parent.span)) > 1:
        logger.debug(
            "Span of %s period (%s) differs from duration_years=%s (%s); "
            "boundaries follow the span",
            parent.body,
            parent.span,
            parent.duration_years,
            expected,
        )

    shares = tuple(iter_rotation(definition, parent.body))
    last = len(shares) - 1

    children: list[Period] = []
    allocated = Fraction(0)
    cumulative = Fraction(0)
    cursor = parent.start_instant

    for i, share in enumerate(shares):
        cumulative += share.years
        if i == last:
            # Остаток: последний child заканчивается ровно в конце родителя
            years = parent.duration_years - allocated
            end = parent.end_instant
        else:
            years = parent.duration_years * share.years / definition.total_years
            offset_us = round(span_us * cumulative / definition.total_years)
            end = parent.start_instant + timedelta(microseconds=offset_us)

        children.append(
            Period(
                body=share.body,
                start_instant=cursor,
                duration_years=years,
                end_instant=end,
            )
        )
        allocated += years
        cursor = end

    logger.debug(
        "Subdivided %s period %s..%s into %d children (%s)",
        parent.body,
        parent.start_instant.isoformat(),
        parent.end_instant.isoformat(),
        len(children),
        definition.system,
    )
    return tuple(children)
