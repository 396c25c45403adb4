"""
Runner principal de tests.

Ejecuta todos los tests en orden lógico y reporta resultados consolidados.
Equivalente sin pytest de: pytest tests/

Uso:
    python tests/run_tests.py
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tests.helpers import run_suite
from tests.test_syntax import test_syntax
from tests import test_config
from tests import test_migrator_interface
from tests import test_extractor
from tests import test_transform
from tests import test_creation
from tests import test_pipeline
from tests import test_verify


def _module_tests(module):
    return [
        getattr(module, name)
        for name in dir(module)
        if name.startswith("test_") and callable(getattr(module, name))
    ]


def main():
    """
    Ejecuta suite completa de tests.

    Orden de ejecución:
    1. Sintaxis (si falla aquí, no tiene sentido continuar)
    2. Configuración e interfaz
    3. Componentes (extractor, transformer, creación y grants)
    4. Pipeline end-to-end y verificación
    """
    results = {}

    results["syntax"] = run_suite("SINTAXIS", [test_syntax]) == 0
    if not results["syntax"]:
        print("\n⚠️  Errores de sintaxis detectados. Corregir antes de continuar.")
        print_summary(results)
        return False

    suites = [
        ("config", test_config),
        ("interface", test_migrator_interface),
        ("extractor", test_extractor),
        ("transform", test_transform),
        ("creation", test_creation),
        ("pipeline", test_pipeline),
        ("verify", test_verify),
    ]
    for name, module in suites:
        results[name] = run_suite(name.upper(), _module_tests(module)) == 0

    print_summary(results)
    return all(results.values())


def print_summary(results):
    """Imprime resumen de resultados de tests."""
    print("\n" + "=" * 70)
    print("📊 RESUMEN DE TESTS")
    print("=" * 70)

    for test_name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"   {status}  {test_name.capitalize()}")

    print("=" * 70)

    if all(results.values()):
        print("✅ TODOS LOS TESTS PASARON - Sistema listo para migración")
    else:
        print("❌ HAY TESTS FALLANDO - Corregir antes de migrar")

    print("=" * 70)


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
