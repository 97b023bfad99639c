"""Общие fixtures для unit тестов dasha engine."""

from datetime import datetime, timezone

import pytest

from dasha_engine.core.domain import ChildSource, Period, PeriodChildren
from dasha_engine.core.math import compute_subperiods
from dasha_engine.registry import get_definition


@pytest.fixture
def vimshottari():
    """Определение Vimshottari (120 лет, 9 тел)."""
    return get_definition("vimshottari")


@pytest.fixture
def epoch() -> datetime:
    """Начало тестовых периодов."""
    return datetime(2000, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def venus_maha(epoch) -> Period:
    """Mahadasha Venus: 20 лет без вложенных уровней."""
    return Period.from_start("Venus", epoch, 20)


def make_external_tree(epoch: datetime, depth: int) -> tuple[Period, ...]:
    """
    Helper: внешнее дерево Vimshottari заданной глубины.

    Верхний уровень — 9 mahadasha от Ketu; каждый следующий уровень
    вычисляется и помечается как external (имитация ответа сервиса).
    """
    definition = get_definition("vimshottari")

    def build(period: Period, level: int) -> Period:
        if level >= depth:
            return period
        children = tuple(
            build(child, level + 1) for child in compute_subperiods(period, definition)
        )
        return period.with_children(children, ChildSource.EXTERNAL)

    roots = []
    cursor = epoch
    for share in definition.order:
        maha = Period.from_start(share.body, cursor, share.years)
        roots.append(build(maha, 1))
        cursor = maha.end_instant
    return tuple(roots)


@pytest.fixture
def external_tree_2_levels(epoch):
    """Внешнее дерево: mahadasha + antardasha."""
    return make_external_tree(epoch, depth=2)


@pytest.fixture
def external_tree_1_level(epoch):
    """Внешнее дерево: только mahadasha."""
    return make_external_tree(epoch, depth=1)


@pytest.fixture
def venus_only_sun_tree(epoch):
    """Внешнее дерево, где у Venus единственный child — Sun."""
    venus = Period.from_start("Venus", epoch, 20)
    sun = Period.from_start("Sun", epoch, 2)
    return (venus.model_copy(update={"children": PeriodChildren.external([sun])}),)
