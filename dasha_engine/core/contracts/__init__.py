"""
Контракт внешнего сервиса расчёта: JSON Schema узла дерева периодов и
адаптер payload → Period с External children.
"""

from .external_tree import extract_root_list, load_external_tree
from .validators import (
    ContractValidator,
    ExternalPeriodValidator,
    SchemaLoader,
    validate_external_period,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ExternalPeriodValidator",
    # Functions
    "validate_external_period",
    "extract_root_list",
    "load_external_tree",
]
