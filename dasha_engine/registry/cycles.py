"""
Cycle Registry — Таблицы систем периодов

Статические, неизменяемые определения всех поддерживаемых систем:
канонический порядок тел и доля каждого тела в годах.

Все доли — точные Fraction: ошибка округления не накапливается на пяти
уровнях вложенности.

Lookup идентификатора нечувствителен к регистру и разделителям:
"Tribhagi-40" ≡ "tribhagi_40" ≡ "tribhagi 40".
"""

from fractions import Fraction
from types import MappingProxyType
from typing import Final, Mapping

from dasha_engine.core.domain.cycle import BodyShare, CycleDefinition
from dasha_engine.core.errors import UnknownSystemError


# =============================================================================
# ТАБЛИЦЫ
# =============================================================================

# Vimshottari: 120 лет, 9 тел, порядок от Ketu
_VIMSHOTTARI: Final = (
    ("Ketu", 7),
    ("Venus", 20),
    ("Sun", 6),
    ("Moon", 10),
    ("Mars", 7),
    ("Rahu", 18),
    ("Jupiter", 16),
    ("Saturn", 19),
    ("Mercury", 17),
)

# (total_years, order)
_TABLES: Final[Mapping[str, tuple]] = MappingProxyType({
    "vimshottari": (120, _VIMSHOTTARI),
    # Ashtottari: 108 лет, 8 тел (без Ketu)
    "ashtottari": (108, (
        ("Sun", 6),
        ("Moon", 15),
        ("Mars", 8),
        ("Mercury", 17),
        ("Saturn", 10),
        ("Jupiter", 19),
        ("Rahu", 12),
        ("Venus", 21),
    )),
    # Tribhagi: треть каждого периода Vimshottari, цикл 40 лет
    "tribhagi": (40, tuple((body, Fraction(years, 3)) for body, years in _VIMSHOTTARI)),
    # Yogini: 36 лет, 8 йогини
    "yogini": (36, (
        ("Mangala", 1),
        ("Pingala", 2),
        ("Dhanya", 3),
        ("Bhramari", 4),
        ("Bhadrika", 5),
        ("Ulka", 6),
        ("Siddha", 7),
        ("Sankata", 8),
    )),
    "shodashottari": (116, (
        ("Sun", 11),
        ("Mars", 12),
        ("Jupiter", 13),
        ("Saturn", 14),
        ("Ketu", 15),
        ("Moon", 16),
        ("Mercury", 17),
        ("Venus", 18),
    )),
    "dwadashottari": (112, (
        ("Sun", 7),
        ("Jupiter", 9),
        ("Ketu", 11),
        ("Mercury", 13),
        ("Rahu", 15),
        ("Mars", 17),
        ("Saturn", 19),
        ("Moon", 21),
    )),
    "panchottari": (105, (
        ("Sun", 12),
        ("Moon", 13),
        ("Mars", 14),
        ("Mercury", 15),
        ("Saturn", 16),
        ("Jupiter", 17),
        ("Venus", 18),
    )),
    "shatabdika": (100, (
        ("Sun", 5),
        ("Moon", 5),
        ("Venus", 10),
        ("Mercury", 10),
        ("Jupiter", 20),
        ("Mars", 20),
        ("Saturn", 30),
    )),
    "chaturashiti_sama": (84, tuple(
        (body, 12)
        for body in ("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn")
    )),
    "dwisaptati_sama": (72, tuple(
        (body, 9)
        for body in ("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu")
    )),
    "shattrimsha_sama": (36, (
        ("Moon", 1),
        ("Sun", 2),
        ("Jupiter", 3),
        ("Mars", 4),
        ("Mercury", 5),
        ("Saturn", 6),
        ("Venus", 7),
        ("Rahu", 8),
    )),
    "shastihayani": (60, (
        ("Jupiter", 10),
        ("Sun", 10),
        ("Mars", 10),
        ("Moon", 6),
        ("Mercury", 6),
        ("Venus", 6),
        ("Saturn", 6),
        ("Rahu", 6),
    )),
})

# Альтернативные идентификаторы внешнего сервиса
_ALIASES: Final[Mapping[str, str]] = MappingProxyType({
    "tribhagi_40": "tribhagi",
    "chaturashiti": "chaturashiti_sama",
    "chaturshitisama": "chaturashiti_sama",
    "dwisaptati": "dwisaptati_sama",
    "dwisaptatisama": "dwisaptati_sama",
    "satabdika": "shatabdika",
    "shattrimshatsama": "shattrimsha_sama",
    "shattrimsha": "shattrimsha_sama",
})


def _build(system: str, total: int, order: tuple) -> CycleDefinition:
    return CycleDefinition(
        system=system,
        total_years=total,
        order=tuple(BodyShare(body=body, years=years) for body, years in order),
    )


# Собирается один раз при импорте; только чтение
_DEFINITIONS: Final[Mapping[str, CycleDefinition]] = MappingProxyType({
    system: _build(system, total, order) for system, (total, order) in _TABLES.items()
})


# =============================================================================
# LOOKUP
# =============================================================================


def normalize_system_id(system: str) -> str:
    """
    Нормализация идентификатора системы.

    Examples:
        >>> normalize_system_id("Tribhagi-40")
        'tribhagi'
        >>> normalize_system_id(" Vimshottari ")
        'vimshottari'
    """
    key = system.strip().lower().replace("-", "_").replace(" ", "_")
    return _ALIASES.get(key, key)


def get_definition(system: str) -> CycleDefinition:
    """
    Определение системы периодов.

    Args:
        system: Идентификатор системы (например, 'vimshottari')

    Returns:
        CycleDefinition

    Raises:
        UnknownSystemError: система не зарегистрирована
    """
    if not isinstance(system, str):
        raise UnknownSystemError(repr(system), list_systems())

    definition = _DEFINITIONS.get(normalize_system_id(system))
    if definition is None:
        raise UnknownSystemError(system, list_systems())
    return definition


def list_systems() -> tuple[str, ...]:
    """Идентификаторы всех поддерживаемых систем."""
    return tuple(_DEFINITIONS)
