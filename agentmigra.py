r"""
Script principal de migración de agentes legacy a Snowflake Cortex Agents.

Arquitectura:
- agentmigra.py: Infraestructura genérica (conexiones, orquestación, reporte)
- migrators/*.py: Lógica específica (implementa BaseMigrator)
- config.py: Configuración centralizada (.env)

Flujo de ejecución:
1. Validar configuración obligatoria
2. Conectar a origen (Snowflake o PostgreSQL) y destino (Snowflake)
3. Extraer TODOS los registros legacy (fatal si falla)
4. Por cada registro, en orden de origen:
   transform → CREATE AGENT → GRANT USAGE por rol
5. Acumular un resultado por registro (nunca se aborta por un registro)
6. Imprimir reporte: exitosos, parciales y fallidos

Prerrequisitos:
- Parámetros / feature flags de agentes habilitados en la cuenta
- Rol activo con CREATE AGENT en el schema destino
- Tabla legacy accesible con SELECT

Uso:
    python agentmigra.py

    # Sin flags. Re-ejecutar SOLO los fallidos tras remediar:
    # un agente ya creado produce DuplicateObjectError.
"""

import sys
import io

import psycopg2
import snowflake.connector

import config
from migrators.base import BaseMigrator
from migrators.cortex_agents import CortexAgentsMigrator
from migrators.errors import CreationError, ExtractionError, GrantError, MigrationError

STATUS_SUCCESS = "success"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"


def connect_to_snowflake():
    """
    Establece conexión a Snowflake usando credenciales de config.py.

    Returns:
        tuple: (conexión, cursor) de snowflake.connector

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a Snowflake...")
        params = {key: value for key, value in config.SNOWFLAKE_CONFIG.items() if value}
        conn = snowflake.connector.connect(**params)
        cursor = conn.cursor()
        print("✅ Conexión a Snowflake exitosa")
        return conn, cursor
    except snowflake.connector.errors.Error as e:
        print(f"❌ Error de conexión a Snowflake", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def connect_to_postgres():
    """
    Establece conexión a PostgreSQL (origen alternativo de la tabla legacy).

    Returns:
        tuple: (conexión, cursor) de psycopg2

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a PostgreSQL...")
        conn = psycopg2.connect(**config.POSTGRES_CONFIG)
        cursor = conn.cursor()
        print("✅ Conexión a PostgreSQL exitosa")
        return conn, cursor
    except psycopg2.OperationalError as e:
        print(f"❌ Error de conexión a PostgreSQL", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def new_result(record):
    """Entrada de resultado vacía para un registro."""
    return {
        "record": record,
        "created": False,
        "object_path": None,
        "errors": [],
        "grants": [],
        "status": STATUS_FAILED,
    }


def resolve_status(result):
    """
    Clasifica un resultado:
    - success: agente creado y todos los grants OK
    - partial: agente creado, algún grant falló
    - failed: agente NO creado
    """
    if not result["created"]:
        return STATUS_FAILED
    if any(not grant["granted"] for grant in result["grants"]):
        return STATUS_PARTIAL
    return STATUS_SUCCESS


def migrate_record(migrator, record, target_cursor):
    """
    Procesa UN registro: transform → create → grants.

    Nunca lanza: los errores quedan en result['errors']. Un error inesperado
    (fuera de la taxonomía) se envuelve en CreationError o GrantError según
    el paso, para que un registro roto no aborte la corrida.
    """
    result = new_result(record)

    try:
        spec = migrator.transform(record)
        result["object_path"] = migrator.get_target_path(record)
        result["object_path"] = migrator.create_object(record, spec, target_cursor)
        result["created"] = True
    except MigrationError as e:
        result["errors"].append(e)
        result["status"] = resolve_status(result)
        return result
    except Exception as e:
        error = CreationError(
            f"Error inesperado ({type(e).__name__}): {e}",
            agent_name=getattr(record, "name", None),
        )
        error.__cause__ = e
        result["errors"].append(error)
        result["status"] = resolve_status(result)
        return result

    try:
        result["grants"] = migrator.grant_access(record, result["object_path"], target_cursor)
    except Exception as e:
        error = GrantError(
            f"Error inesperado en grants ({type(e).__name__}): {e}",
            agent_name=record.name,
        )
        error.__cause__ = e
        result["errors"].append(error)
        result["status"] = STATUS_PARTIAL
        return result

    result["errors"].extend(g["error"] for g in result["grants"] if g["error"])
    result["status"] = resolve_status(result)
    return result


def run_migration(source_cursor, target_cursor, migrator: BaseMigrator):
    """
    Orquesta la migración completa con un migrador dado.

    Esta función es la parte testeable del pipeline: recibe cursores ya
    abiertos y no toca config para conectar.

    Args:
        source_cursor: Cursor DB-API del origen (tabla legacy)
        target_cursor: Cursor DB-API del destino (Snowflake)
        migrator: Implementación de BaseMigrator

    Returns:
        list: Un dict por registro, en orden de origen:
            {'record', 'created', 'object_path', 'errors', 'grants', 'status'}

    Raises:
        ExtractionError: Si no se pudo leer el origen (fatal)
    """
    print(f"\n🚚 Extrayendo agentes legacy de '{getattr(migrator, 'table', '?')}'...")
    records = migrator.extract_records(source_cursor)
    total = len(records)

    if total == 0:
        print("⚠️  Advertencia: No se encontraron agentes legacy")
        return []

    print(f"   📊 Total de agentes: {total:,}")
    print(f"   🎯 Destino: {migrator.database}.{migrator.schema}")

    results = []
    for count, record in enumerate(records, 1):
        result = migrate_record(migrator, record, target_cursor)
        results.append(result)
        _print_record_progress(count, total, result)

    return results


def migrate_agents():
    """
    Punto de entrada sin argumentos: conecta, migra y retorna resultados.

    Returns:
        list: Resultados por registro (ver run_migration)

    Raises:
        ExtractionError: Si la lectura de la tabla legacy falla
        SystemExit: Si falta configuración o no se puede conectar
    """
    missing = config.validate_config()
    if missing:
        print(f"❌ Faltan variables de configuración: {', '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    target_conn, target_cursor = connect_to_snowflake()
    if config.LEGACY_SOURCE == "postgres":
        source_conn, source_cursor = connect_to_postgres()
    else:
        source_conn, source_cursor = target_conn, target_conn.cursor()

    try:
        return run_migration(source_cursor, target_cursor, CortexAgentsMigrator())
    finally:
        print("\n🔒 Cerrando conexiones...")
        source_cursor.close()
        target_cursor.close()
        if source_conn is not target_conn:
            source_conn.close()
        target_conn.close()
        print("✅ Conexiones cerradas correctamente")


# =============================================================================
# REPORTE
# =============================================================================


def summarize_results(results):
    """Cuenta resultados por estado: {'success': n, 'partial': n, 'failed': n}."""
    summary = {STATUS_SUCCESS: 0, STATUS_PARTIAL: 0, STATUS_FAILED: 0}
    for result in results:
        summary[result["status"]] += 1
    return summary


def get_failed_records(results):
    """Nombres de agentes que NO se crearon (candidatos a re-ejecución)."""
    return [r["record"].name for r in results if r["status"] == STATUS_FAILED]


def print_migration_report(results):
    """Imprime resumen y detalle de errores para el operador."""
    summary = summarize_results(results)

    print("\n" + "=" * 70)
    print("📊 REPORTE DE MIGRACIÓN")
    print("=" * 70)
    print(f"   ✅ Completos: {summary[STATUS_SUCCESS]}")
    print(f"   ⚠️  Parciales (grants fallidos): {summary[STATUS_PARTIAL]}")
    print(f"   ❌ Fallidos: {summary[STATUS_FAILED]}")

    for result in results:
        if not result["errors"]:
            continue
        print(f"\n   📦 {result['record'].name} ({result['status']})")
        for error in result["errors"]:
            print(f"      └─ {type(error).__name__}: {error}")

    failed = get_failed_records(results)
    if failed:
        print("\n   🔁 Re-ejecutar tras remediar: " + ", ".join(str(name) for name in failed))
    print("=" * 70)


def _print_record_progress(count, total, result):
    name = result["record"].name
    if result["status"] == STATUS_SUCCESS:
        print(f"   ✅ [{count}/{total}] {result['object_path']}")
    elif result["status"] == STATUS_PARTIAL:
        print(f"   ⚠️  [{count}/{total}] {result['object_path']} (grants con errores)")
    else:
        error = result["errors"][0] if result["errors"] else None
        kind = type(error).__name__ if error else "Error"
        print(f"   ❌ [{count}/{total}] {name}: {kind}")

    for grant in result["grants"]:
        mark = "✅" if grant["granted"] else "❌"
        print(f"      {mark} USAGE → {grant['role']}")


def main():
    """
    Función principal que coordina la corrida completa.

    Exit Codes:
        0: La corrida terminó (aunque haya registros fallidos, ver reporte)
        1: Error fatal (configuración, conexión o extracción)
    """
    print("=" * 70)
    print("🚀 MIGRACIÓN DE AGENTES LEGACY → SNOWFLAKE CORTEX AGENTS")
    print("=" * 70)
    print(f"📍 Origen: {config.LEGACY_SOURCE} ({config.LEGACY_TABLE})")
    print(f"📍 Destino: {config.get_target_schema_path()}")

    try:
        results = migrate_agents()
    except ExtractionError as e:
        print(f"\n❌ Error fatal de extracción: {e}", file=sys.stderr)
        sys.exit(1)

    print_migration_report(results)


if __name__ == "__main__":
    # Forzar UTF-8 en stdout/stderr para emojis en Windows
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8")
    main()
