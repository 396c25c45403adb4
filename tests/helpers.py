"""
Funciones helper compartidas para todos los tests.

Proporciona cursores DB-API falsos en memoria para que ningún test se
conecte a una base de datos real.
"""

import sys
import os
import json

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config

TEST_DATABASE = "AI_DB"
TEST_SCHEMA = "AGENTS"


class FakeDriverError(Exception):
    """Imita snowflake.connector.errors.ProgrammingError (msg + errno)."""

    def __init__(self, msg, errno=None):
        super().__init__(msg)
        self.errno = errno


class FakeCursor:
    """
    Cursor DB-API mínimo.

    Args:
        rows: Filas que retorna fetchall()
        columns: Nombres de columna para cursor.description
        failures: Lista de (fragmento, excepción). Si el fragmento aparece en
                  el SQL o es uno de los parámetros, execute() lanza la excepción.

    Todas las sentencias intentadas (incluso las que fallan) quedan en
    self.executed como tuplas (sql, params).
    """

    def __init__(self, rows=None, columns=None, failures=None):
        self.rows = rows or []
        self.description = [(name,) for name in columns] if columns else None
        self.failures = failures or []
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        for fragment, exc in self.failures:
            if fragment in sql or (params and fragment in params):
                raise exc

    def fetchall(self):
        return list(self.rows)

    def close(self):
        self.closed = True

    def statements(self, prefix):
        """Sentencias ejecutadas que empiezan con prefix (ej: 'GRANT')."""
        return [(sql, params) for sql, params in self.executed if sql.startswith(prefix)]


class PyformatCursor(FakeCursor):
    """
    Enlaza parámetros del lado del cliente como snowflake.connector
    (paramstyle 'pyformat'): `sql % params` con literales entre comillas.

    El SQL final queda en self.bound. Un '%' sin escapar en el SQL hace
    fallar el formateo igual que en el conector real.
    """

    def __init__(self, failures=None):
        super().__init__(failures=failures)
        self.bound = []

    def execute(self, sql, params=None):
        super().execute(sql, params)
        if params is not None:
            sql = sql % tuple(_quote_literal(p) for p in params)
        self.bound.append(sql)


def _quote_literal(value):
    return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"


class FakeSnowflakeTarget(FakeCursor):
    """
    Destino con estado: recuerda los agentes creados y lanza errno 2002
    si se intenta crear uno que ya existe.
    """

    def __init__(self, failures=None):
        super().__init__(failures=failures)
        self.agents = set()

    def execute(self, sql, params=None):
        super().execute(sql, params)
        if sql.startswith("CREATE AGENT "):
            path = sql[len("CREATE AGENT "):].split(" COMMENT", 1)[0]
            if path in self.agents:
                raise FakeDriverError(
                    f"SQL compilation error: Object '{path}' already exists.", errno=2002
                )
            self.agents.add(path)


def make_source_cursor(rows, upper_case=True):
    """
    Cursor origen con las columnas legacy en orden de config.

    Args:
        rows: Lista de dicts columna → valor (columnas ausentes = NULL)
        upper_case: Snowflake devuelve nombres de columna en MAYÚSCULAS
    """
    columns = config.get_legacy_columns()
    tuples = [tuple(row.get(column) for column in columns) for row in rows]
    names = [c.upper() for c in columns] if upper_case else columns
    return FakeCursor(rows=tuples, columns=names)


def legacy_row(name, roles=None, instruction=None, description=None,
               questions=None, tools=None, tool_resources=None):
    """Fila legacy como la devuelve Snowflake (semi-estructurados en JSON)."""
    return {
        "agent_name": name,
        "agent_description": description,
        "grantee_roles": json.dumps(roles) if roles is not None else None,
        "tools": json.dumps(tools) if tools is not None else None,
        "tool_resources": json.dumps(tool_resources) if tool_resources is not None else None,
        "response_instruction": instruction,
        "sample_questions": json.dumps(questions) if questions is not None else None,
    }


def make_migrator():
    from migrators.cortex_agents import CortexAgentsMigrator

    return CortexAgentsMigrator(database=TEST_DATABASE, schema=TEST_SCHEMA, table="LEGACY_AGENTS")


def run_suite(title, tests):
    """
    Ejecuta una lista de tests fuera de pytest y retorna la cantidad de fallos.

    Uso (al final de cada módulo de tests):
        if __name__ == "__main__":
            sys.exit(1 if run_suite("TRANSFORMACIÓN", TESTS) else 0)
    """
    print("=" * 70)
    print(f"🧪 TESTS: {title}")
    print("=" * 70)

    failed = 0
    for test_func in tests:
        try:
            test_func()
        except AssertionError as e:
            print(f"\n❌ FALLO: {test_func.__name__}")
            print(f"   {e}")
            failed += 1
        except Exception as e:
            print(f"\n❌ ERROR: {test_func.__name__}")
            print(f"   {type(e).__name__}: {e}")
            failed += 1

    print("\n" + "=" * 70)
    if failed == 0:
        print("✅ TODOS LOS TESTS PASARON")
    else:
        print(f"❌ {failed} TEST(S) FALLARON")
    print("=" * 70)
    return failed
