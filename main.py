"""Script de ejecución.

Por qué existe:
- Permite ejecutar `bwtool` con `python main.py ...` durante desarrollo, sin
  instalar el paquete (el código vive bajo `src/`).
- Mantiene un entrypoint simple además de los scripts de `pyproject.toml`.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    project_root = Path(__file__).resolve().parent
    src = project_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
