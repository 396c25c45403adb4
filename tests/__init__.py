"""
Suite de tests para la migración de agentes legacy → Cortex Agents.

Los tests NO se conectan a ninguna base de datos, solo validan:
- Sintaxis de código Python
- Implementación correcta de la interfaz BaseMigrator
- Extracción, transformación, creación y grants con cursores falsos
- Orquestación end-to-end y reporte
"""
