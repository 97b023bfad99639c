"""
External Tree Adapter — нормализация payload внешнего сервиса

Внешний сервис отдаёт дерево периодов с нестабильными ключами:
- тело: 'planet' | 'lord' | 'body'
- начало: 'start_date' | 'start'; конец: 'end_date' | 'end'
- вложенный уровень: 'sublevels' | 'antardashas' | 'pratyantardashas' |
  'sookshmadashas' | 'pranadashas' | 'dasha_list' (проверяются по порядку)
- конверт ответа: список, либо 'dasha_list' | 'mahadashas' | 'data.*'

Угадывание ключей ограничено этим модулем: на выходе — Period с
вложенными уровнями PeriodChildren(source=external).
Решает первый присутствующий вложенный ключ: пустой список под ним
означает "данных нет" (children=None), следующие ключи не проверяются.
"""

from datetime import datetime
from fractions import Fraction
from typing import Any, Final, Mapping, Optional, Sequence

from jsonschema import ValidationError as SchemaValidationError
from pydantic import ValidationError

from dasha_engine.core.contracts.validators import ExternalPeriodValidator
from dasha_engine.core.domain.cycle import CycleDefinition
from dasha_engine.core.domain.period import Period, PeriodChildren
from dasha_engine.core.domain.units import DAYS_PER_YEAR
from dasha_engine.core.errors import ExternalTreeError
from dasha_engine.registry.cycles import get_definition


# =============================================================================
# КЛЮЧИ ВНЕШНЕГО ФОРМАТА
# =============================================================================

BODY_KEYS: Final[tuple[str, ...]] = ("planet", "lord", "body")

START_KEYS: Final[tuple[str, ...]] = ("start_date", "start")

END_KEYS: Final[tuple[str, ...]] = ("end_date", "end")

# Порядок проверки вложенных уровней
NESTED_KEYS: Final[tuple[str, ...]] = (
    "sublevels",
    "antardashas",
    "pratyantardashas",
    "sookshmadashas",
    "pranadashas",
    "dasha_list",
)

ENVELOPE_KEYS: Final[tuple[str, ...]] = ("dasha_list", "mahadashas")


# =============================================================================
# HELPERS
# =============================================================================


def _first(node: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = node.get(key)
        if value is not None:
            return value
    return None


def _parse_instant(value: str, path: Sequence) -> datetime:
    # datetime.fromisoformat до 3.11 не принимает суффикс 'Z'
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ExternalTreeError(f"Invalid instant {value!r}", path) from e


def extract_root_list(payload: Any) -> list:
    """
    Список периодов верхнего уровня из ответа внешнего сервиса.

    Args:
        payload: список узлов или конверт ответа (dict)

    Returns:
        Список узлов (может быть пустым)

    Raises:
        ExternalTreeError: payload не содержит списка периодов
    """
    if isinstance(payload, list):
        return payload

    if isinstance(payload, Mapping):
        for container in (payload, payload.get("data")):
            if not isinstance(container, Mapping):
                continue
            for key in ENVELOPE_KEYS:
                value = container.get(key)
                if isinstance(value, list):
                    return value

    raise ExternalTreeError(
        f"Payload does not contain a period list (expected one of {list(ENVELOPE_KEYS)})"
    )


# =============================================================================
# CONVERSION
# =============================================================================


def _to_period(
    node: Mapping[str, Any],
    definition: Optional[CycleDefinition],
    days_per_year: Fraction,
    path: tuple,
) -> Period:
    body = _first(node, BODY_KEYS)
    if definition is not None:
        body = definition.resolve_body(body)

    start = _parse_instant(_first(node, START_KEYS), path)
    end_raw = _first(node, END_KEYS)
    end = _parse_instant(end_raw, path) if end_raw is not None else None
    duration = node.get("duration_years")

    children = None
    for key in NESTED_KEYS:
        nested = node.get(key)
        if nested is None:
            continue
        # Первый присутствующий ключ решает, даже если список пуст
        if nested:
            children = PeriodChildren.external(
                _to_period(child, definition, days_per_year, path + (key, i))
                for i, child in enumerate(nested)
            )
        break

    try:
        if duration is None:
            return Period.from_bounds(body, start, end, days_per_year, children=children)
        if end is None:
            return Period.from_start(body, start, duration, days_per_year, children=children)
        return Period(
            body=body,
            start_instant=start,
            duration_years=duration,
            end_instant=end,
            children=children,
        )
    except (ValidationError, ValueError) as e:
        raise ExternalTreeError(f"Invalid period {body!r}: {e}", path) from e


def load_external_tree(
    payload: Any,
    system: Optional[str] = None,
    days_per_year: Fraction = DAYS_PER_YEAR,
    validator: Optional[ExternalPeriodValidator] = None,
) -> tuple[Period, ...]:
    """
    Нормализация дерева периодов внешнего сервиса.

    Args:
        payload: ответ внешнего сервиса (список узлов или конверт)
        system: система периодов; если задана, имена тел приводятся к
            каноническим (UnknownBodyError для неизвестных)
        days_per_year: конвенция года для недостающих end/duration
        validator: валидатор контракта (по умолчанию — новый)

    Returns:
        Tuple периодов верхнего уровня с External children

    Raises:
        ExternalTreeError: узел нарушает контракт external_period
        UnknownSystemError: неизвестная система
        UnknownBodyError: тело узла не входит в систему
    """
    definition = get_definition(system) if system is not None else None
    validator = validator or ExternalPeriodValidator()
    nodes = extract_root_list(payload)

    periods = []
    for i, node in enumerate(nodes):
        try:
            validator.validate(node)
        except SchemaValidationError as e:
            violations = validator.describe_errors(node)
            raise ExternalTreeError(
                f"External period violates contract: {e.message} "
                f"({len(violations)} violation(s) in node)",
                (i,) + tuple(e.absolute_path),
            ) from e
        periods.append(_to_period(node, definition, days_per_year, (i,)))

    return tuple(periods)
