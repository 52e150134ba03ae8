"""Modelos y entidades del dominio.

Aquí viven las estructuras de datos puras (Pydantic v2): transacciones,
resultados de validación y el reporte agregado de una ejecución. El dominio
no conoce HTTP, CLI ni ficheros.
"""
