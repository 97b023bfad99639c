"""Hybrid Traversal Engine — разрешение selection path по частичному дереву

Внешний сервис отдаёт дерево периодов непредсказуемой глубины. Engine:
1. Идёт по внешнему дереву, пока на уровне есть данные (source: external)
2. С первого уровня без данных переключается на локальное вычисление через
   Subdivision Calculator (source: computed) и больше не возвращается к
   поиску внешних children
3. На терминальном уровне возвращает найденный период и, по запросу,
   список периодов следующего уровня

Политика монотонна: external* → computed*, без чередования.

"Закончились внешние children" — штатный случай (fallback).
"Тело отсутствует среди периодов уровня" — PathNotFoundError.
"""

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Sequence

from dasha_engine.core.domain.cycle import CycleDefinition
from dasha_engine.core.domain.period import ChildSource, Period, PeriodChildren, level_name
from dasha_engine.core.domain.units import DAYS_PER_YEAR
from dasha_engine.core.errors import PathNotFoundError
from dasha_engine.core.math.subdivision import compute_subperiods
from dasha_engine.traversal.path_validator import PathValidator

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Конфигурация traversal engine.

    - days_per_year: конвенция года для перевода лет в instants
    - max_depth: дополнительное ограничение глубины (None — по системе)
    """
    days_per_year: Fraction = DAYS_PER_YEAR
    max_depth: Optional[int] = None


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class ResolvedLevel:
    """Один разрешённый уровень пути."""

    depth: int  # 1-based
    period: Period
    source: ChildSource

    @property
    def level_name(self) -> str:
        return level_name(self.depth)


@dataclass(frozen=True)
class ResolvedPath:
    """Результат resolve: терминальный период, его предки и источники уровней."""

    period: Period
    source: ChildSource
    ancestry: tuple[Period, ...]
    levels: tuple[ResolvedLevel, ...]

    # Список следующего уровня (если запрошен)
    children: Optional[PeriodChildren] = None

    @property
    def depth(self) -> int:
        return len(self.levels)

    @property
    def handoff_depth(self) -> Optional[int]:
        """Первый уровень с source=computed (None — весь путь из внешних данных)."""
        for level in self.levels:
            if level.source is ChildSource.COMPUTED:
                return level.depth
        return None

    @property
    def sources(self) -> tuple[ChildSource, ...]:
        return tuple(level.source for level in self.levels)


# =============================================================================
# ENGINE
# =============================================================================


class HybridTraversalEngine:
    """Traverse-then-synthesize engine для одной системы периодов.

    Stateless: экземпляр можно разделять между потоками.
    """

    def __init__(self, definition: CycleDefinition, config: Optional[EngineConfig] = None):
        """
        Args:
            definition: система периодов
            config: конфигурация engine
        """
        self.definition = definition
        self.config = config or EngineConfig()
        self.validator = PathValidator(definition, max_depth=self.config.max_depth)

    def subdivide(self, parent: Period) -> tuple[Period, ...]:
        """Один уровень разбиения по конвенции года из config."""
        return compute_subperiods(parent, self.definition, self.config.days_per_year)

    def resolve(
        self,
        roots: Sequence[Period],
        path: Sequence[str],
        include_children: bool = False,
    ) -> ResolvedPath:
        """Разрешение selection path.

        Каждый период в результате несёт присоединённый уровень ниже себя
        (External или Computed), чтобы вызывающий код мог показать соседей
        на каждом уровне.

        Args:
            roots: периоды верхнего уровня (внешние данные)
            path: тела по уровням
            include_children: вернуть список следующего уровня под терминальным периодом

        Returns:
            ResolvedPath

        Raises:
            InvalidDepthError: длина пути вне допустимого диапазона
            UnknownBodyError: тело пути не входит в систему
            PathNotFoundError: тело отсутствует среди периодов уровня
            DegeneratePeriodError: требуется разбить период с длительностью <= 0
        """
        selection = self.validator.validate(path, include_children)
        target_depth = len(selection)

        nodes: tuple[Period, ...] = tuple(roots)
        source = ChildSource.EXTERNAL
        levels: list[ResolvedLevel] = []
        terminal_children: Optional[PeriodChildren] = None

        for depth, body in enumerate(selection, start=1):
            match = self._find(nodes, body)
            if match is None:
                raise PathNotFoundError(
                    level=depth,
                    body=body,
                    available=[p.body for p in nodes],
                    source=source.value,
                )

            is_terminal = depth == target_depth
            if is_terminal and not include_children:
                levels.append(ResolvedLevel(depth=depth, period=match, source=source))
                break

            if source is ChildSource.EXTERNAL and match.has_external_children:
                below = match.children
            else:
                if source is ChildSource.EXTERNAL:
                    logger.info(
                        "Traversing missing levels via calculation: "
                        "processed_depth=%d target_depth=%d parent=%s system=%s",
                        depth,
                        target_depth,
                        match.body,
                        self.definition.system,
                    )
                below = PeriodChildren.computed(self.subdivide(match))
                match = match.model_copy(update={"children": below})

            levels.append(ResolvedLevel(depth=depth, period=match, source=source))
            logger.debug(
                "Resolved %s %s (%s) at depth %d",
                level_name(depth),
                match.body,
                source.value,
                depth,
            )

            if is_terminal:
                terminal_children = below
                break

            nodes = below.periods
            source = below.source

        resolved = tuple(levels)
        return ResolvedPath(
            period=resolved[-1].period,
            source=resolved[-1].source,
            ancestry=tuple(level.period for level in resolved[:-1]),
            levels=resolved,
            children=terminal_children,
        )

    @staticmethod
    def _find(nodes: Sequence[Period], body: str) -> Optional[Period]:
        key = body.casefold()
        for node in nodes:
            if node.body.casefold() == key:
                return node
        return None
