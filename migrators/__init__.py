"""
Migradores para transformar agentes legacy en Snowflake Cortex Agents.

Cada migrador implementa la interfaz BaseMigrator y es instanciado por
agentmigra.py, que orquesta la corrida registro por registro.

Estructura:
    base.py: Clase abstracta BaseMigrator
    cortex_agents.py: Migrador tabla legacy → CREATE AGENT + GRANT USAGE
    records.py: LegacyAgentRecord, GrantRequest y construcción desde filas
    errors.py: Taxonomía de errores (fatales vs por registro / por grant)

Interfaz requerida (ver BaseMigrator):
    - extract_records(cursor)
    - transform(record)
    - get_target_path(record)
    - create_object(record, spec, cursor)
    - grant_access(record, object_path, cursor)
"""
