"""
Dasha Engine — иерархическое разбиение планетарных периодов.

Чистый stateless engine: обходит частичное дерево периодов внешнего
сервиса и локально вычисляет недостающие уровни вложенности.
"""

from dasha_engine.core.domain import ChildSource, Period, PeriodChildren
from dasha_engine.core.errors import (
    DashaEngineError,
    DegeneratePeriodError,
    ExternalTreeError,
    InvalidDepthError,
    PathNotFoundError,
    UnknownBodyError,
    UnknownSystemError,
)
from dasha_engine.registry import get_definition, list_systems
from dasha_engine.service import compute_children, load_external_tree, resolve_path
from dasha_engine.traversal import EngineConfig, ResolvedLevel, ResolvedPath

__all__ = [
    # Facade
    "compute_children",
    "resolve_path",
    "load_external_tree",
    # Registry
    "get_definition",
    "list_systems",
    # Models
    "ChildSource",
    "Period",
    "PeriodChildren",
    "EngineConfig",
    "ResolvedLevel",
    "ResolvedPath",
    # Errors
    "DashaEngineError",
    "DegeneratePeriodError",
    "ExternalTreeError",
    "InvalidDepthError",
    "PathNotFoundError",
    "UnknownBodyError",
    "UnknownSystemError",
]
