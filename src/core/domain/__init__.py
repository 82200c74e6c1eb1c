"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce subprocesses, CLI ni la estructura de una instalación
  de TIBCO: solo conceptos del problema.
"""
