"""
Módulo base para migradores de agentes legacy → agentes nativos.

Define la interfaz común (contrato) que todo migrador debe implementar.
Esto permite que agentmigra.py orqueste la corrida sin conocer los
detalles de la tabla origen ni del objeto destino.

Patrón de diseño: Strategy Pattern
- agentmigra.py = Contexto (orquestador)
- BaseMigrator = Estrategia abstracta
- CortexAgentsMigrator = Estrategia concreta (Snowflake Cortex Agents)

Flujo de uso:
1. agentmigra.py instancia el migrador con database/schema destino
2. Llama a extract_records() UNA vez (fatal si falla)
3. Por cada registro, en orden de origen:
   a. transform() → especificación canónica
   b. get_target_path() → <database>.<schema>."<name>"
   c. create_object() → CREATE AGENT
   d. grant_access() → un GRANT por rol (solo si c. tuvo éxito)

Ejemplo de implementación:
    class MiMigrador(BaseMigrator):
        def extract_records(self, cursor):
            cursor.execute("SELECT ... FROM mi_tabla")
            return [construir_registro(row) for row in cursor.fetchall()]

        # ... implementar resto de métodos abstractos
"""

from abc import ABC, abstractmethod


class BaseMigrator(ABC):
    """
    Clase abstracta que define la interfaz para migradores de agentes.

    Attributes:
        database (str): Base de datos destino
        schema (str): Schema destino dentro de la base de datos
    """

    def __init__(self, database: str, schema: str):
        """
        Constructor base que almacena la ubicación destino.

        Args:
            database: Base de datos destino (ej: 'AI_DB')
            schema: Schema destino (ej: 'AGENTS')
        """
        self.database = database
        self.schema = schema

    @abstractmethod
    def extract_records(self, cursor) -> list:
        """
        Lee TODOS los registros legacy en orden de origen.

        Args:
            cursor: Cursor DB-API conectado al origen

        Returns:
            list: LegacyAgentRecord, uno por fila. Sin filtrar ni deduplicar.

        Raises:
            ExtractionError: Si la lectura falla. Aborta la corrida.
        """
        pass

    @abstractmethod
    def transform(self, record) -> dict:
        """
        Convierte un registro en su especificación canónica.

        Función pura: no toca la base de datos.

        Returns:
            dict: Especificación con keys models, instructions, tools,
                  tool_resources

        Raises:
            TransformError: Si un blob no tiene la forma mínima esperada
        """
        pass

    @abstractmethod
    def get_target_path(self, record) -> str:
        """
        Retorna la ruta destino del objeto: <database>.<schema>."<name>".

        El nombre SIEMPRE va entre comillas dobles.
        """
        pass

    @abstractmethod
    def create_object(self, record, spec: dict, cursor) -> str:
        """
        Crea el objeto destino a partir de la especificación.

        Args:
            record: LegacyAgentRecord de origen
            spec: Especificación retornada por transform()
            cursor: Cursor DB-API conectado al destino

        Returns:
            str: Ruta del objeto creado

        Raises:
            DuplicateObjectError: Si ya existe un objeto en la ruta
            CreationError: Cualquier otro fallo de creación
        """
        pass

    @abstractmethod
    def grant_access(self, record, object_path: str, cursor) -> list:
        """
        Otorga acceso al objeto recién creado, un grant por rol declarado.

        Cada grant es independiente: un fallo se registra y se continúa.

        Returns:
            list: Un dict por rol: {'role', 'granted', 'error'}
        """
        pass
