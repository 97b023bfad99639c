"""
Period — Модель временного периода dasha

Immutable Pydantic модели:
- Period          — период одного тела (body, start, duration_years, end)
- PeriodChildren  — tagged variant вложенного уровня: External | Computed
- ChildSource     — происхождение вложенного уровня

Вложенность представлена единообразно через Period.children, вместо
набора опциональных полей (antardashas, sublevels, ...) внешнего сервиса.
Отсутствие данных ниже периода — children=None.

Модели никогда не мутируются: расширение дерева создаёт новый экземпляр
(Period.with_children).
"""

from datetime import datetime, timedelta
from enum import Enum
from fractions import Fraction
from typing import Final, Iterable, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from dasha_engine.core.domain.units import (
    DAYS_PER_YEAR,
    YearsLike,
    add_years,
    ensure_utc,
    to_fraction,
    years_between,
)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Максимальная глубина вложенности (maha → antar → pratyantar → sookshma → prana)
MAX_NESTING_DEPTH: Final[int] = 5

# Названия уровней (level 1 = верхний уровень цикла)
LEVEL_NAMES: Final[tuple[str, ...]] = (
    "mahadasha",
    "antardasha",
    "pratyantardasha",
    "sookshma",
    "prana",
)


def level_name(depth: int) -> str:
    """Название уровня по глубине (1-based); за пределами таблицы — 'level_N'."""
    if 1 <= depth <= len(LEVEL_NAMES):
        return LEVEL_NAMES[depth - 1]
    return f"level_{depth}"


# =============================================================================
# ENUMS
# =============================================================================


class ChildSource(str, Enum):
    """Происхождение вложенного уровня."""

    EXTERNAL = "external"
    COMPUTED = "computed"


# =============================================================================
# PERIOD MODEL
# =============================================================================


class Period(BaseModel):
    """
    Период одного тела.

    end_instant = start_instant + duration_years (через DAYS_PER_YEAR).
    Для внешних данных end_instant может быть передан явно и является
    авторитетной границей: последний child всегда заканчивается ровно в нём.

    Валидация знака длительности здесь не выполняется: период с
    duration_years <= 0 допустим как значение (повреждённые upstream данные),
    но не может быть разбит (DegeneratePeriodError в subdivision).
    """

    body: str = Field(..., min_length=1, description="Идентификатор тела (например, 'Venus')")
    start_instant: datetime = Field(..., description="Начало периода (UTC)")
    duration_years: Fraction = Field(..., description="Длительность в годах (точная)")
    end_instant: datetime = Field(..., description="Конец периода (UTC)")
    children: Optional["PeriodChildren"] = Field(
        None, description="Следующий уровень вложенности (None — нет данных)"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("duration_years", mode="before")
    @classmethod
    def coerce_duration(cls, v: YearsLike) -> Fraction:
        """Приведение длительности к Fraction (int/float/Decimal/str)."""
        try:
            return to_fraction(v)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @field_validator("start_instant", "end_instant")
    @classmethod
    def normalize_instant(cls, v: datetime) -> datetime:
        """Нормализация в UTC."""
        return ensure_utc(v)

    @field_serializer("duration_years", when_used="json")
    def serialize_duration(self, v: Fraction) -> str:
        return str(v)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_start(
        cls,
        body: str,
        start_instant: datetime,
        duration_years: YearsLike,
        days_per_year: Fraction = DAYS_PER_YEAR,
        children: Optional["PeriodChildren"] = None,
    ) -> "Period":
        """
        Период из начала и длительности.

        Args:
            body: Идентификатор тела
            start_instant: Начало периода
            duration_years: Длительность в годах
            days_per_year: Конвенция года (default: DAYS_PER_YEAR)
            children: Вложенный уровень (опционально)

        Returns:
            Period с end_instant, вычисленным по days_per_year
        """
        duration = to_fraction(duration_years)
        return cls(
            body=body,
            start_instant=start_instant,
            duration_years=duration,
            end_instant=add_years(start_instant, duration, days_per_year),
            children=children,
        )

    @classmethod
    def from_bounds(
        cls,
        body: str,
        start_instant: datetime,
        end_instant: datetime,
        days_per_year: Fraction = DAYS_PER_YEAR,
        children: Optional["PeriodChildren"] = None,
    ) -> "Period":
        """
        Период из границ (длительность неизвестна).

        duration_years выводится из (end - start) по той же конвенции года.
        """
        return cls(
            body=body,
            start_instant=start_instant,
            duration_years=years_between(start_instant, end_instant, days_per_year),
            end_instant=end_instant,
            children=children,
        )

    # -------------------------------------------------------------------------
    # Derived
    # -------------------------------------------------------------------------

    @property
    def span(self) -> timedelta:
        """Календарная длина периода."""
        return self.end_instant - self.start_instant

    @property
    def has_external_children(self) -> bool:
        """Есть ли непустой вложенный уровень от внешнего источника."""
        return self.children is not None and self.children.source is ChildSource.EXTERNAL

    def contains(self, instant: datetime) -> bool:
        """Попадает ли instant в [start, end)."""
        instant = ensure_utc(instant)
        return self.start_instant <= instant < self.end_instant

    def with_children(
        self, periods: Iterable["Period"], source: ChildSource
    ) -> "Period":
        """
        Новый Period с присоединённым вложенным уровнем.

        Исходный экземпляр не изменяется.
        """
        return self.model_copy(
            update={"children": PeriodChildren(source=source, periods=tuple(periods))}
        )

    def without_children(self) -> "Period":
        """Копия периода без вложенного уровня."""
        if self.children is None:
            return self
        return self.model_copy(update={"children": None})

    def cache_key(self, system: str) -> tuple:
        """
        Ключ мемоизации для кэша вызывающего кода.

        (system, body, start_instant, duration_years) однозначно определяет
        результат subdivision.
        """
        return (system, self.body, self.start_instant, self.duration_years)


# =============================================================================
# CHILDREN VARIANT
# =============================================================================


class PeriodChildren(BaseModel):
    """
    Вложенный уровень: tagged variant External | Computed.

    Пустой список не допускается — отсутствие данных выражается
    через Period.children = None.
    """

    source: ChildSource = Field(..., description="Происхождение уровня")
    periods: tuple[Period, ...] = Field(..., min_length=1, description="Периоды уровня по порядку")

    model_config = {"frozen": True}

    @classmethod
    def external(cls, periods: Iterable[Period]) -> "PeriodChildren":
        return cls(source=ChildSource.EXTERNAL, periods=tuple(periods))

    @classmethod
    def computed(cls, periods: Iterable[Period]) -> "PeriodChildren":
        return cls(source=ChildSource.COMPUTED, periods=tuple(periods))

    @property
    def bodies(self) -> tuple[str, ...]:
        return tuple(p.body for p in self.periods)

    def find(self, body: str) -> Optional[Period]:
        """Период по телу (case-insensitive) или None."""
        key = body.casefold()
        for period in self.periods:
            if period.body.casefold() == key:
                return period
        return None

    def __len__(self) -> int:
        return len(self.periods)


Period.model_rebuild()
