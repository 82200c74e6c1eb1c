"""Servicios que orquestan instalaciones y paquetes stub."""
