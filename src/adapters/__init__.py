"""Adaptadores de I/O: validadores, carga de transacciones y exportación."""
