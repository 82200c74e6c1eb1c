"""Adaptadores de infraestructura.

Por qué un paquete aparte:
- Aquí viven los detalles de I/O: binarios de TIBCO, ficheros temporales,
  scripts de los paquetes y plantillas Jinja2.
- El Core solo conoce contratos (`core.interfaces`) y modelos del dominio.
"""
