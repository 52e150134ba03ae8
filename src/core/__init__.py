"""Núcleo: dominio, contratos, configuración y servicios."""
