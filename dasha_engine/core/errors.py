"""
Errors — Таксономия ошибок dasha engine

Все ошибки локальны для одного вызова вычисления:
- вычисление чистое и детерминированное, retry даёт ту же ошибку
- внутри engine ошибки не перехватываются и не подменяются fallback-значениями
- решение (показать пользователю / подставить default) принимает вызывающий код

Иерархия:
    DashaEngineError
    ├── UnknownSystemError     — система периодов отсутствует в registry
    ├── UnknownBodyError       — тело (планета) отсутствует в CycleDefinition
    ├── DegeneratePeriodError  — попытка разбить период с длительностью <= 0
    ├── InvalidDepthError      — запрошенная глубина вне допустимого диапазона
    ├── PathNotFoundError      — выбранная цепочка тел не существует в данных
    └── ExternalTreeError      — payload внешнего сервиса нарушает контракт
"""

from typing import Iterable, Optional


class DashaEngineError(Exception):
    """Базовое исключение engine."""
    pass


class UnknownSystemError(DashaEngineError):
    """
    Неизвестный идентификатор системы периодов.

    Всегда ошибка вызывающего кода или конфигурации — не retry.
    """

    def __init__(self, system: str, known: Iterable[str] = ()):
        self.system = system
        self.known = tuple(known)
        super().__init__(
            f"Unknown dasha system: {system!r}. "
            f"Known systems: {', '.join(self.known) or '-'}"
        )


class UnknownBodyError(DashaEngineError):
    """Тело не входит в порядок CycleDefinition."""

    def __init__(self, body: str, system: Optional[str] = None):
        self.body = body
        self.system = system
        where = f" in system {system!r}" if system else ""
        super().__init__(f"Unknown body {body!r}{where}")


class DegeneratePeriodError(DashaEngineError):
    """
    Период с неположительной длительностью не может быть разбит.

    Признак повреждённых upstream данных: не возвращаем пустой список,
    а пробрасываем ошибку.
    """

    def __init__(self, body: str, duration_years, details: str = ""):
        self.body = body
        self.duration_years = duration_years
        suffix = f" ({details})" if details else ""
        super().__init__(
            f"Cannot subdivide degenerate period: body={body!r}, "
            f"duration_years={duration_years}{suffix}"
        )


class InvalidDepthError(DashaEngineError):
    """Запрошенная глубина вложенности вне [1, max_depth]."""

    def __init__(self, depth: int, max_depth: int, reason: str = ""):
        self.depth = depth
        self.max_depth = max_depth
        suffix = f": {reason}" if reason else ""
        super().__init__(
            f"Invalid nesting depth {depth} (max_depth={max_depth}){suffix}"
        )


class PathNotFoundError(DashaEngineError):
    """
    Выбранная цепочка тел отсутствует в доступных данных.

    Отличается от "закончились внешние children" — тот случай штатный и
    обрабатывается переходом на локальное вычисление.
    """

    def __init__(
        self,
        level: int,
        body: str,
        available: Iterable[str] = (),
        source: str = "external",
    ):
        self.level = level
        self.body = body
        self.available = tuple(available)
        self.source = source
        super().__init__(
            f"Body {body!r} not found at level {level} ({source} data); "
            f"available: {list(self.available)}"
        )


class ExternalTreeError(DashaEngineError):
    """Payload внешнего сервиса не соответствует контракту external_period."""

    def __init__(self, message: str, path: Iterable = ()):
        self.path = tuple(path)
        location = "/".join(str(p) for p in self.path)
        super().__init__(f"{message} (at: /{location})" if location else message)
