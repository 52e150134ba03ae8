"""Servicios del Core: comisiones, reintentos y el pipeline de transacciones."""
