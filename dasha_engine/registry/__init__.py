"""Registry — статические таблицы систем периодов."""

from .cycles import get_definition, list_systems, normalize_system_id

__all__ = [
    "get_definition",
    "list_systems",
    "normalize_system_id",
]
