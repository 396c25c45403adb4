"""
Migrador de agentes legacy hacia Snowflake Cortex Agents.

Implementa la interfaz BaseMigrator para transformar filas de la tabla
legacy (config.LEGACY_TABLE) en objetos AGENT nativos dentro de
config.TARGET_DATABASE.config.TARGET_SCHEMA.

RESPONSABILIDAD:
- Extractor: SELECT de todas las filas, defaults para NULLs
- Transformer: response_instruction → instrucciones separadas + spec canónica
- Creator: CREATE AGENT ... FROM SPECIFICATION con parámetros enlazados
- Grant Propagator: GRANT USAGE ON AGENT por cada rol declarado

DECISIONES DE DISEÑO:
- Los valores de usuario (comment, profile, specification, rol) SIEMPRE se
  enlazan como parámetros. La ruta del agente es estructural: se arma con
  el nombre entre comillas dobles, nunca como parámetro.
- Una clave de 'instructions' solo existe si su valor no está vacío. La
  ausencia (no el string vacío) indica "no provisto" al parser destino.
- CREATE AGENT sin OR REPLACE / IF NOT EXISTS: un agente existente produce
  DuplicateObjectError. La migración NO es idempotente.
- Sin reintentos: cada sentencia se ejecuta exactamente una vez.

Uso (desde agentmigra.py):
    migrator = CortexAgentsMigrator(database='AI_DB', schema='AGENTS')

    records = migrator.extract_records(source_cursor)
    for record in records:
        spec = migrator.transform(record)
        path = migrator.create_object(record, spec, target_cursor)
        grants = migrator.grant_access(record, path, target_cursor)
"""

import json

import config
from .base import BaseMigrator
from .errors import (
    CreationError,
    DuplicateObjectError,
    ExtractionError,
    GrantError,
    TransformError,
    is_already_exists_error,
)
from .records import GrantRequest, record_from_row


def split_instruction(raw_instruction, delimiter=None):
    """
    Separa response_instruction en (respuesta, orquestación).

    Split posicional: se usan solo los segmentos [0] y [1]. Si el
    delimitador aparece más de una vez, los segmentos posteriores se
    DESCARTAN (comportamiento heredado del formato legacy).

    Casos:
        'A'                → ('A', '')
        'A<D>B'            → ('A', 'B')
        '<D>B'             → ('', 'B')
        'A<D>'             → ('A', '')
        'A<D>B<D>C'        → ('A', 'B')
        ''                 → ('', '')

    Los segmentos se devuelven tal cual, sin recortar espacios. Quien los
    use decide si un segmento solo con espacios cuenta como vacío.
    """
    if delimiter is None:
        delimiter = config.INSTRUCTION_DELIMITER
    if not raw_instruction:
        return "", ""

    parts = raw_instruction.split(delimiter)
    response = parts[0]
    orchestration = parts[1] if len(parts) > 1 else ""
    return response, orchestration


def quote_identifier(name):
    """
    Pone un identificador entre comillas dobles (siempre).

    Las comillas internas se duplican, según las reglas de Snowflake.

    Ejemplo:
        >>> quote_identifier('Demo Agent')
        '"Demo Agent"'
    """
    return '"' + name.replace('"', '""') + '"'


def escape_for_binding(sql_fragment):
    """
    Duplica los '%' de un fragmento estructural (ej: la ruta del agente).

    El conector de Snowflake enlaza parámetros del lado del cliente con
    `sql % params`: un '%' literal en el SQL debe ir como '%%'. Solo aplica
    a sentencias que se ejecutan CON parámetros.

    Ejemplo:
        >>> escape_for_binding('AI_DB.AGENTS."100% Ventas"')
        'AI_DB.AGENTS."100%% Ventas"'
    """
    return sql_fragment.replace("%", "%%")


class CortexAgentsMigrator(BaseMigrator):
    """
    Migrador específico para la tabla de agentes legacy.
    """

    def __init__(self, database=None, schema=None, table=None):
        super().__init__(
            database or config.TARGET_DATABASE,
            schema or config.TARGET_SCHEMA,
        )
        self.table = table or config.LEGACY_TABLE

    # =========================================================================
    # MÉTODOS PÚBLICOS - EXTRACCIÓN
    # =========================================================================

    def extract_records(self, cursor):
        """
        Lee todas las filas legacy y las convierte en LegacyAgentRecord.

        Cualquier error de lectura es FATAL (ExtractionError).
        """
        columns = ", ".join(config.get_legacy_columns())
        try:
            cursor.execute(f"SELECT {columns} FROM {self.table}")
            rows = cursor.fetchall()
            column_names = [desc[0].lower() for desc in cursor.description]
        except Exception as e:
            raise ExtractionError(
                f"No se pudo leer la tabla legacy '{self.table}': {e}"
            ) from e

        return [record_from_row(dict(zip(column_names, row))) for row in rows]

    # =========================================================================
    # MÉTODOS PÚBLICOS - TRANSFORMACIÓN
    # =========================================================================

    def transform(self, record):
        """
        Construye la especificación canónica de un registro.

        Estructura resultante:
            {
                'models': {'orchestration': 'auto'},
                'instructions': {           # claves opcionales
                    'response': str,
                    'orchestration': str,
                    'sample_questions': [{'question': str}, ...]
                },
                'tools': <copiado>,
                'tool_resources': <copiado>
            }
        """
        self._validate_shapes(record)

        response, orchestration = split_instruction(record.raw_instruction)
        questions = self._extract_sample_questions(record)

        instructions = {}
        if response.strip():
            instructions["response"] = response
        if orchestration.strip():
            instructions["orchestration"] = orchestration
        if questions:
            instructions["sample_questions"] = questions

        return {
            "models": {"orchestration": config.ORCHESTRATION_MODEL},
            "instructions": instructions,
            "tools": record.tools,
            "tool_resources": record.tool_resources,
        }

    def get_target_path(self, record):
        return f"{self.database}.{self.schema}.{quote_identifier(record.name)}"

    # =========================================================================
    # MÉTODOS PÚBLICOS - CREACIÓN Y GRANTS
    # =========================================================================

    def create_object(self, record, spec, cursor):
        """
        Ejecuta CREATE AGENT para el registro.

        Parámetros enlazados: comment (descripción), profile (JSON con
        display_name) y specification (JSON de la spec canónica).
        """
        if not record.name:
            raise CreationError("El registro no tiene agent_name", agent_name=record.name)

        object_path = self.get_target_path(record)

        try:
            profile = json.dumps({"display_name": record.name}, ensure_ascii=False)
            specification = json.dumps(spec, ensure_ascii=False, indent=2)
            cursor.execute(
                f"CREATE AGENT {escape_for_binding(object_path)} "
                "COMMENT = %s "
                "PROFILE = %s "
                "FROM SPECIFICATION %s",
                (record.description, profile, specification),
            )
        except Exception as e:
            if is_already_exists_error(e):
                raise DuplicateObjectError(
                    f"Ya existe un agente en {object_path}", agent_name=record.name
                ) from e
            raise CreationError(
                f"No se pudo crear {object_path}: {e}", agent_name=record.name
            ) from e

        return object_path

    def grant_access(self, record, object_path, cursor):
        """
        Ejecuta un GRANT USAGE por cada rol de grantee_roles.

        Un fallo (ej: rol inexistente) se registra como GrantError en la
        entrada del rol y se sigue con el resto.
        """
        outcomes = []
        for request in self.build_grant_requests(record, object_path):
            try:
                cursor.execute(
                    f"GRANT {request.privilege} ON AGENT {escape_for_binding(request.object_path)} "
                    "TO ROLE IDENTIFIER(%s)",
                    (request.role,),
                )
                outcomes.append({"role": request.role, "granted": True, "error": None})
            except Exception as e:
                error = GrantError(
                    f"No se pudo otorgar {request.privilege} a '{request.role}': {e}",
                    agent_name=record.name,
                    role=request.role,
                )
                error.__cause__ = e
                outcomes.append({"role": request.role, "granted": False, "error": error})
        return outcomes

    def build_grant_requests(self, record, object_path):
        return [GrantRequest(object_path, role) for role in record.grantee_roles]

    # =========================================================================
    # MÉTODOS PRIVADOS: TRANSFORMACIÓN
    # =========================================================================

    def _validate_shapes(self, record):
        """
        Chequea el tipo de los campos escalares y la forma de primer nivel
        de los blobs.

        El contenido interno de tools / tool_resources es opaco: lo valida
        Snowflake al crear el agente.
        """
        checks = [
            ("agent_name", record.name, str),
            ("agent_description", record.description, str),
            ("response_instruction", record.raw_instruction, str),
            ("grantee_roles", record.grantee_roles, (list, tuple)),
            ("sample_questions", record.sample_questions, (list, tuple)),
            ("tools", record.tools, (list, tuple, dict)),
            ("tool_resources", record.tool_resources, dict),
        ]
        for field, value, expected in checks:
            if not isinstance(value, expected):
                raise TransformError(
                    f"Campo '{field}' con forma inválida ({type(value).__name__})",
                    agent_name=record.name,
                )

    def _extract_sample_questions(self, record):
        """
        Proyecta [{'text': ...}] → [{'question': ...}].

        Acepta también strings sueltos. Preguntas vacías se omiten.
        """
        questions = []
        for item in record.sample_questions:
            if isinstance(item, dict):
                text = item.get("text")
            elif isinstance(item, str):
                text = item
            else:
                raise TransformError(
                    f"Pregunta de ejemplo con forma inválida ({type(item).__name__})",
                    agent_name=record.name,
                )
            if text:
                questions.append({"question": text})
        return questions
