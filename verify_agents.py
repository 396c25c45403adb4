"""
verify_agents.py - Verificación post-migración (solo lectura)

Lista los agentes del schema destino o describe uno en particular.
No forma parte del pipeline: es una ayuda para el operador.

Uso:
    python verify_agents.py                      # SHOW AGENTS
    python verify_agents.py "<nombre agente>"    # DESCRIBE AGENT

Ejemplo:
    python verify_agents.py "Demo Agent"
"""

import sys
import json

import config
from migrators.cortex_agents import quote_identifier


def _rows_as_dicts(cursor):
    columns = [desc[0].lower() for desc in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


def list_agents(cursor, schema_path=None):
    """
    Ejecuta SHOW AGENTS en el schema destino.

    Args:
        cursor: Cursor de Snowflake
        schema_path: '<database>.<schema>' (default: config.get_target_schema_path())

    Returns:
        list: Una fila por agente como dict (columnas en minúscula)
    """
    schema_path = schema_path or config.get_target_schema_path()
    cursor.execute(f"SHOW AGENTS IN SCHEMA {schema_path}")
    return _rows_as_dicts(cursor)


def describe_agent(cursor, object_path):
    """
    Ejecuta DESCRIBE AGENT sobre una ruta ya armada (<db>.<schema>."<name>").

    Returns:
        list: Filas de la descripción como dicts
    """
    cursor.execute(f"DESCRIBE AGENT {object_path}")
    return _rows_as_dicts(cursor)


def main():
    # Import local: solo el script necesita el driver para conectar
    from agentmigra import connect_to_snowflake

    conn, cursor = connect_to_snowflake()
    try:
        if len(sys.argv) > 1:
            object_path = f"{config.get_target_schema_path()}.{quote_identifier(sys.argv[1])}"
            print(f"🔍 DESCRIBE AGENT {object_path}")
            for row in describe_agent(cursor, object_path):
                print(json.dumps(row, indent=2, ensure_ascii=False, default=str))
        else:
            agents = list_agents(cursor)
            print(f"📋 {len(agents)} agentes en {config.get_target_schema_path()}")
            for agent in agents:
                print(f"   • {agent.get('name')} (owner: {agent.get('owner')})")
    finally:
        cursor.close()
        conn.close()


if __name__ == "__main__":
    main()
