"""
CycleDefinition — Модель системы периодов

Immutable Pydantic модель, описывающая цикл периодов:
- total_years — полная длина цикла (например, 120 лет для Vimshottari)
- order — канонический порядок тел с их долями в годах
- max_depth — максимальная глубина вложенности для системы

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. sum(order[i].years) == total_years (точно, Fraction)
2. Каждая доля строго положительна
3. Тела уникальны
4. Порядок фиксирован: index тела вычисляется один раз (body → index)
"""

from fractions import Fraction
from typing import Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

from dasha_engine.core.domain.period import MAX_NESTING_DEPTH
from dasha_engine.core.domain.units import YearsLike, to_fraction
from dasha_engine.core.errors import UnknownBodyError


# =============================================================================
# BODY SHARE
# =============================================================================


class BodyShare(BaseModel):
    """Доля одного тела в цикле."""

    body: str = Field(..., min_length=1, description="Идентификатор тела")
    years: Fraction = Field(..., description="Доля тела в годах (точная)")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("years", mode="before")
    @classmethod
    def coerce_years(cls, v: YearsLike) -> Fraction:
        try:
            return to_fraction(v)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @field_validator("years")
    @classmethod
    def validate_positive(cls, v: Fraction) -> Fraction:
        if v <= 0:
            raise ValueError(f"Body share must be positive, got {v}")
        return v


# =============================================================================
# CYCLE DEFINITION
# =============================================================================


class CycleDefinition(BaseModel):
    """
    Определение системы периодов.

    Порядок тел хранится как неизменяемый tuple + индекс body → position,
    ротация выполняется арифметикой по модулю без поиска по массиву.
    """

    system: str = Field(..., min_length=1, description="Идентификатор системы")
    total_years: Fraction = Field(..., description="Полная длина цикла в годах")
    order: tuple[BodyShare, ...] = Field(..., min_length=1, description="Канонический порядок тел")
    max_depth: int = Field(
        MAX_NESTING_DEPTH, ge=1, description="Максимальная глубина вложенности"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    _index: dict[str, int] = PrivateAttr(default_factory=dict)
    _casefold_index: dict[str, str] = PrivateAttr(default_factory=dict)

    @field_validator("total_years", mode="before")
    @classmethod
    def coerce_total(cls, v: YearsLike) -> Fraction:
        try:
            return to_fraction(v)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @model_validator(mode="after")
    def validate_shares(self) -> "CycleDefinition":
        """Проверка уникальности тел и точного равенства суммы долей."""
        bodies = [share.body for share in self.order]
        folded = [body.casefold() for body in bodies]
        if len(set(folded)) != len(folded):
            raise ValueError(f"Duplicate bodies in order of {self.system!r}: {bodies}")

        total = sum((share.years for share in self.order), Fraction(0))
        if total != self.total_years:
            raise ValueError(
                f"Shares of {self.system!r} sum to {total}, expected {self.total_years}"
            )
        return self

    def model_post_init(self, __context) -> None:
        self._index = {share.body: i for i, share in enumerate(self.order)}
        self._casefold_index = {share.body.casefold(): share.body for share in self.order}

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def bodies(self) -> tuple[str, ...]:
        return tuple(share.body for share in self.order)

    @property
    def size(self) -> int:
        return len(self.order)

    def canonical_body(self, body: str) -> Optional[str]:
        """Каноническое имя тела (case-insensitive) или None."""
        if body in self._index:
            return body
        return self._casefold_index.get(body.strip().casefold())

    def resolve_body(self, body: str) -> str:
        """
        Каноническое имя тела.

        Raises:
            UnknownBodyError: тело не входит в порядок системы
        """
        canonical = self.canonical_body(body)
        if canonical is None:
            raise UnknownBodyError(body, self.system)
        return canonical

    def index_of(self, body: str) -> int:
        """Позиция тела в каноническом порядке."""
        return self._index[self.resolve_body(body)]

    def share_of(self, body: str) -> Fraction:
        """Доля тела в годах."""
        return self.order[self.index_of(body)].years

    def proportion_of(self, body: str) -> Fraction:
        """Доля тела относительно цикла: years / total_years."""
        return self.share_of(body) / self.total_years
