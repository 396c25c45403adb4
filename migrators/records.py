"""
Modelo de datos de la migración.

Todas las entidades son efímeras: se construyen en cada corrida y viven
solo durante la pasada. Nada se persiste desde aquí; el destino persiste
los agentes y grants como efecto secundario.
"""

import json
from typing import Any, NamedTuple, Tuple

import config


class LegacyAgentRecord(NamedTuple):
    """Una fila de la tabla legacy, con NULLs ya reemplazados por defaults."""

    name: str
    description: str = ""
    grantee_roles: Tuple[str, ...] = ()
    tools: Any = ()
    # Compartido entre instancias: los registros nunca se mutan
    tool_resources: Any = {}
    raw_instruction: str = ""
    sample_questions: Tuple[Any, ...] = ()


class GrantRequest(NamedTuple):
    object_path: str
    role: str
    privilege: str = config.GRANT_PRIVILEGE


def record_from_row(row: dict) -> LegacyAgentRecord:
    """
    Construye un LegacyAgentRecord desde una fila (dict columna → valor).

    Reglas por columna (ver config.LEGACY_COLUMNS):
    - Columna ausente o NULL → default de la columna ('' / [] / {})
    - Columnas semi-estructuradas que llegan como texto (Snowflake devuelve
      VARIANT/ARRAY como JSON) se decodifican. Si el texto no es JSON válido
      se conserva tal cual; transform() lo reporta como TransformError.
    - Secuencias ordenadas (grantee_roles, sample_questions) se congelan
      como tuplas.
    """
    values = {}
    for column, column_config in config.LEGACY_COLUMNS.items():
        value = row.get(column)

        if value is not None and column_config["semi_structured"]:
            value = _decode_semi_structured(value)

        if value is None:
            value = column_config["default"]()

        values[column_config["field"]] = value

    for field in ("grantee_roles", "sample_questions"):
        if isinstance(values[field], list):
            values[field] = tuple(values[field])

    return LegacyAgentRecord(**values)


def _decode_semi_structured(value):
    if not isinstance(value, str):
        return value
    if not value.strip():
        return None
    try:
        return json.loads(value)
    except ValueError:
        return value
