"""
Configuración centralizada para la migración de agentes legacy → Cortex Agents.

ARQUITECTURA:
- Origen: tabla relacional de agentes legacy (Snowflake por defecto,
  opcionalmente PostgreSQL).
- Destino: objetos AGENT nativos de Snowflake, creados desde un documento
  de especificación.

FLUJO DE MIGRACIÓN:
1. Leer todas las filas de LEGACY_TABLE (columnas en LEGACY_COLUMNS)
2. Transformar cada fila en una especificación canónica
3. CREATE AGENT en TARGET_DATABASE.TARGET_SCHEMA
4. GRANT USAGE a cada rol declarado en grantee_roles

USO DE LAS FUNCIONES HELPER:
    # Validar configuración antes de conectar
    missing = validate_config()
    if missing:
        print(f"Faltan variables: {missing}")

    # Obtener configuración de una columna legacy
    column = get_column_config('grantee_roles')
    column['field']      # 'grantee_roles'
    column['default']()  # []
"""

import os
from dotenv import load_dotenv

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)

# --- Configuración de Snowflake (Destino, y origen por defecto) ---
SNOWFLAKE_CONFIG = {
    "account": os.getenv("SNOWFLAKE_ACCOUNT") or "",
    "user": os.getenv("SNOWFLAKE_USER") or "",
    "password": os.getenv("SNOWFLAKE_PASSWORD") or "",
    "role": os.getenv("SNOWFLAKE_ROLE") or "",
    "warehouse": os.getenv("SNOWFLAKE_WAREHOUSE") or "",
    "database": os.getenv("SNOWFLAKE_DATABASE") or "",
    "schema": os.getenv("SNOWFLAKE_SCHEMA") or "",
}

# --- Configuración de PostgreSQL (Origen alternativo) ---
POSTGRES_CONFIG = {
    "dbname": os.getenv("POSTGRES_DB") or "",
    "user": os.getenv("POSTGRES_USER") or "",
    "password": os.getenv("POSTGRES_PASSWORD") or "",
    "host": os.getenv("POSTGRES_HOST") or "localhost",
    "port": os.getenv("POSTGRES_PORT") or "5432",
}

# --- Origen de los agentes legacy ---
# 'snowflake' o 'postgres'
LEGACY_SOURCE = (os.getenv("LEGACY_SOURCE") or "snowflake").lower()
LEGACY_TABLE = os.getenv("LEGACY_TABLE") or "LEGACY_AGENTS"

# --- Destino de los agentes nativos ---
TARGET_DATABASE = os.getenv("TARGET_DATABASE") or SNOWFLAKE_CONFIG["database"]
TARGET_SCHEMA = os.getenv("TARGET_SCHEMA") or SNOWFLAKE_CONFIG["schema"]

# --- Transformación ---
# Separa response_instruction en instrucción de respuesta y de orquestación
INSTRUCTION_DELIMITER = os.getenv("INSTRUCTION_DELIMITER") or "<<<ORCHESTRATION>>>"

# Valores fijos de esta versión (NO se leen del entorno)
ORCHESTRATION_MODEL = "auto"
GRANT_PRIVILEGE = "USAGE"

# --- Columnas de la tabla legacy ---
# Cada columna define:
# - field: Campo de LegacyAgentRecord que alimenta
# - default: Factory del valor cuando la columna viene NULL
# - semi_structured: True si puede llegar como texto JSON (VARIANT/ARRAY)
# - description: Descripción de negocio
# El orden de este dict es el orden del SELECT.

LEGACY_COLUMNS = {
    "agent_name": {
        "field": "name",
        "default": str,  # Obligatoria: si viene vacía falla al crear el agente
        "semi_structured": False,
        "description": "Nombre del agente, se usa literal como identificador destino",
    },
    "agent_description": {
        "field": "description",
        "default": str,
        "semi_structured": False,
        "description": "Descripción libre, termina como COMMENT del agente",
    },
    "grantee_roles": {
        "field": "grantee_roles",
        "default": list,
        "semi_structured": True,
        "description": "Roles que reciben USAGE sobre el agente creado",
    },
    "tools": {
        "field": "tools",
        "default": list,
        "semi_structured": True,
        "description": "Definición de herramientas (opaca, se copia tal cual)",
    },
    "tool_resources": {
        "field": "tool_resources",
        "default": dict,
        "semi_structured": True,
        "description": "Recursos por herramienta (opaco, se copia tal cual)",
    },
    "response_instruction": {
        "field": "raw_instruction",
        "default": str,
        "semi_structured": False,
        "description": "Instrucción de respuesta + orquestación separadas por INSTRUCTION_DELIMITER",
    },
    "sample_questions": {
        "field": "sample_questions",
        "default": list,
        "semi_structured": True,
        "description": "Preguntas de ejemplo con forma [{'text': ...}, ...]",
    },
}

# Variables sin las cuales no se puede ejecutar la migración
REQUIRED_SETTINGS = {
    "SNOWFLAKE_ACCOUNT": lambda: SNOWFLAKE_CONFIG["account"],
    "SNOWFLAKE_USER": lambda: SNOWFLAKE_CONFIG["user"],
    "TARGET_DATABASE": lambda: TARGET_DATABASE,
    "TARGET_SCHEMA": lambda: TARGET_SCHEMA,
}


# --- Funciones Helper ---


def get_column_config(column_name: str) -> dict:
    """
    Obtiene la configuración de una columna legacy por nombre.

    Args:
        column_name: Nombre de la columna en la tabla legacy (ej: 'tools')

    Returns:
        dict: Configuración con keys field, default, semi_structured, description

    Raises:
        KeyError: Si la columna no está configurada

    Ejemplo:
        >>> get_column_config('agent_description')['field']
        'description'
    """
    if column_name not in LEGACY_COLUMNS:
        available = ", ".join(LEGACY_COLUMNS.keys())
        raise KeyError(
            f"Columna '{column_name}' no está configurada.\n"
            f"Columnas disponibles: {available}"
        )
    return LEGACY_COLUMNS[column_name]


def get_legacy_columns() -> list:
    """Retorna las columnas legacy en el orden del SELECT."""
    return list(LEGACY_COLUMNS.keys())


def get_target_schema_path() -> str:
    """
    Retorna '<database>.<schema>' donde se crean los agentes.

    Ejemplo:
        >>> get_target_schema_path()
        'AI_DB.AGENTS'
    """
    return f"{TARGET_DATABASE}.{TARGET_SCHEMA}"


def validate_config() -> list:
    """
    Valida que las variables obligatorias estén definidas.

    Returns:
        list: Nombres de variables faltantes. Lista vacía si se puede proceder.
    """
    return [name for name, getter in REQUIRED_SETTINGS.items() if not getter()]
