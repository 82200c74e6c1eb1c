"""Core: configuración, modelos, errores y servicios de instalación/scaffold."""
