"""
External Period Contract — JSON Schema validation

Ответ внешнего сервиса расчёта проверяется до нормализации в Period:
узел дерева (и все его вложенные уровни) должен соответствовать
schema/external_period.json (Draft 2020-12).

- SchemaLoader            — чтение и meta-validation схем из package data
- ContractValidator       — проверка payload против одной схемы
- ExternalPeriodValidator — контракт узла дерева периодов
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Чтение схем контрактов.

    Каждая схема читается один раз на экземпляр и проверяется
    Draft202012Validator.check_schema до первого использования.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = Path(schema_dir) if schema_dir is not None else SCHEMA_DIR
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени файла без '.json'.

        Raises:
            FileNotFoundError: файла схемы нет в schema_dir
            json.JSONDecodeError: файл не является JSON
            ValueError: схема не проходит meta-validation
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        path = self._schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Проверка payload против одной схемы контракта."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        """
        Args:
            schema_name: имя схемы (например, 'external_period')
            loader: источник схем; по умолчанию — схемы пакета
        """
        self.schema_name = schema_name
        self.schema = (loader or SchemaLoader()).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: наиболее релевантное нарушение контракта
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        """Все нарушения контракта, включая вложенные уровни."""
        return self.validator.iter_errors(data)

    def describe_errors(self, data: Any) -> list[str]:
        """
        Нарушения в виде строк '/path/to/node: message'.

        Сортировка по пути узла, чтобы отчёт был детерминированным.
        """
        errors = sorted(self.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
        return [
            f"/{'/'.join(str(p) for p in e.absolute_path)}: {e.message}" for e in errors
        ]


class ExternalPeriodValidator(ContractValidator):
    """
    Контракт узла дерева периодов внешнего сервиса.

    Узел обязан иметь тело (planet | lord | body), начало
    (start_date | start) и длительность или конец (duration_years |
    end_date | end). Вложенные уровни проверяются рекурсивно.
    """

    SCHEMA_NAME = "external_period"

    def __init__(self, loader: Optional[SchemaLoader] = None):
        super().__init__(self.SCHEMA_NAME, loader)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_external_period(data: Any) -> None:
    """
    Проверка одного узла external_period схемами пакета.

    Raises:
        ValidationError: узел нарушает контракт
    """
    ExternalPeriodValidator().validate(data)
