from dataclasses import fields
from typing import Any, Mapping, TypeVar

R = TypeVar("R")


def to_record(record_cls: type[R], row: Mapping[str, Any]) -> R:
    """Construye el dataclass ``record_cls`` con las columnas que comparte con la fila."""
    return record_cls(**{f.name: row[f.name] for f in fields(record_cls) if f.name in row})
