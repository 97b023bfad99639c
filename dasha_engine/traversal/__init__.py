"""Traversal — разрешение selection path по частичному дереву периодов.

- Path/Depth Validator: fail-fast проверка пути до обхода
- Hybrid Traversal Engine: external → computed, без чередования
"""

from .engine import (
    EngineConfig,
    HybridTraversalEngine,
    ResolvedLevel,
    ResolvedPath,
)
from .path_validator import PathValidator

__all__ = [
    "EngineConfig",
    "HybridTraversalEngine",
    "ResolvedLevel",
    "ResolvedPath",
    "PathValidator",
]
