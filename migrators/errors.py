"""
Taxonomía de errores de la migración de agentes.

Política de propagación:
- ExtractionError: FATAL. Sin datos de origen no se puede procesar nada,
  la corrida se aborta.
- TransformError, CreationError, DuplicateObjectError: por registro. Se
  adjuntan al resultado del registro y se saltan sus pasos restantes.
- GrantError: por grant. Se registra y NO bloquea los grants hermanos ni
  otros registros.

La excepción original del driver queda encadenada en __cause__.
"""

# Número de error de Snowflake para "Object '...' already exists."
SNOWFLAKE_ALREADY_EXISTS_ERRNO = 2002


class MigrationError(Exception):
    """Base de todos los errores de la migración."""

    def __init__(self, message, agent_name=None):
        super().__init__(message)
        self.agent_name = agent_name


class ExtractionError(MigrationError):
    """La lectura de la tabla legacy falló (privilegios, tabla inexistente...)."""


class TransformError(MigrationError):
    """Un campo del registro no tiene el tipo o la forma mínima esperada."""


class CreationError(MigrationError):
    """CREATE AGENT falló para un registro."""


class DuplicateObjectError(CreationError):
    """
    Ya existe un agente en la ruta destino.

    La migración NO es idempotente: re-ejecutarla sobre agentes ya creados
    produce este error por cada registro, hay que eliminar el agente previo.
    """


class GrantError(MigrationError):
    """GRANT USAGE falló para un rol concreto."""

    def __init__(self, message, agent_name=None, role=None):
        super().__init__(message, agent_name=agent_name)
        self.role = role


def is_already_exists_error(exc) -> bool:
    """
    Detecta si una excepción del driver corresponde a un objeto duplicado.

    Snowflake informa errno 2002; como respaldo se busca el texto del mensaje.
    """
    if getattr(exc, "errno", None) == SNOWFLAKE_ALREADY_EXISTS_ERRNO:
        return True
    return "already exists" in str(exc).lower()
