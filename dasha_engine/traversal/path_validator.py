"""Path/Depth Validator — проверка selection path до traversal

Fail-fast проверки:
- длина пути в [1, max_depth]
- при запросе финального списка children: len(path) < max_depth
- каждое тело пути известно системе

Ошибка поднимается до начала traversal, а не глубоко в рекурсии.
"""

from typing import Optional, Sequence

from dasha_engine.core.domain.cycle import CycleDefinition
from dasha_engine.core.errors import InvalidDepthError


class PathValidator:
    """Валидатор selection path для одной системы периодов.

    Stateless: хранит только определение системы и эффективную глубину.
    """

    def __init__(self, definition: CycleDefinition, max_depth: Optional[int] = None):
        """
        Args:
            definition: система периодов
            max_depth: дополнительное ограничение глубины вызывающим кодом
                (не может превышать definition.max_depth)
        """
        self.definition = definition
        if max_depth is None:
            self.max_depth = definition.max_depth
        else:
            if max_depth < 1:
                raise InvalidDepthError(max_depth, definition.max_depth, "max_depth must be >= 1")
            self.max_depth = min(max_depth, definition.max_depth)

    def validate_depth(self, depth: int) -> int:
        """Проверка глубины: 1 <= depth <= max_depth."""
        if depth < 1:
            raise InvalidDepthError(depth, self.max_depth, "selection path is empty")
        if depth > self.max_depth:
            raise InvalidDepthError(depth, self.max_depth, "exceeds maximum nesting")
        return depth

    def validate(
        self, path: Sequence[str], include_children: bool = False
    ) -> tuple[str, ...]:
        """Проверка selection path.

        Args:
            path: тела по уровням, например ("Venus", "Venus", "Mercury")
            include_children: будет ли запрошен список следующего уровня

        Returns:
            Path с каноническими именами тел

        Raises:
            TypeError: path передан строкой, а не последовательностью тел
            InvalidDepthError: длина пути вне допустимого диапазона
            UnknownBodyError: тело пути не входит в систему
        """
        if isinstance(path, str):
            raise TypeError("selection path must be a sequence of bodies, not a string")

        depth = self.validate_depth(len(path))

        if include_children and depth + 1 > self.max_depth:
            raise InvalidDepthError(
                depth + 1, self.max_depth, "children requested below maximum nesting"
            )

        return tuple(self.definition.resolve_body(body) for body in path)
