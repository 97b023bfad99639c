"""
Dasha Service — публичный фасад engine

Операции для вызывающего кода (HTTP controllers, report generators):
- compute_children(parent, system) — один уровень разбиения с валидацией
- resolve_path(root_tree, selection_path, system) — traverse-then-synthesize
- load_external_tree(payload, system) — нормализация ответа внешнего сервиса

Фасад stateless: каждый вызов строит engine по определению системы из
registry. Кэширование результатов — ответственность вызывающего кода
(ключ: Period.cache_key(system)).
"""

from typing import Optional, Sequence, Union

from dasha_engine.core.contracts.external_tree import load_external_tree
from dasha_engine.core.domain.period import Period, PeriodChildren
from dasha_engine.registry.cycles import get_definition
from dasha_engine.traversal.engine import EngineConfig, HybridTraversalEngine, ResolvedPath

RootTree = Union[Sequence[Period], PeriodChildren]


def compute_children(
    parent: Period,
    system: str,
    config: Optional[EngineConfig] = None,
) -> tuple[Period, ...]:
    """
    Дочерние периоды parent на один уровень ниже.

    Args:
        parent: Родительский период
        system: Идентификатор системы периодов
        config: Конфигурация engine (опционально)

    Returns:
        Tuple дочерних периодов, начиная с тела родителя

    Raises:
        UnknownSystemError: неизвестная система
        UnknownBodyError: тело родителя не входит в систему
        DegeneratePeriodError: parent.duration_years <= 0
    """
    engine = HybridTraversalEngine(get_definition(system), config)
    return engine.subdivide(parent)


def resolve_path(
    root_tree: RootTree,
    selection_path: Sequence[str],
    system: str,
    include_children: bool = False,
    config: Optional[EngineConfig] = None,
) -> ResolvedPath:
    """
    Разрешение selection path по (частичному) внешнему дереву.

    Args:
        root_tree: Периоды верхнего уровня (внешние данные)
        selection_path: Тела по уровням
        system: Идентификатор системы периодов
        include_children: Вернуть список следующего уровня под терминальным периодом
        config: Конфигурация engine (опционально)

    Returns:
        ResolvedPath (period, source, ancestry, levels, children)

    Raises:
        UnknownSystemError, UnknownBodyError, InvalidDepthError,
        PathNotFoundError, DegeneratePeriodError
    """
    roots = root_tree.periods if isinstance(root_tree, PeriodChildren) else tuple(root_tree)
    engine = HybridTraversalEngine(get_definition(system), config)
    return engine.resolve(roots, selection_path, include_children=include_children)


__all__ = [
    "compute_children",
    "load_external_tree",
    "resolve_path",
]
