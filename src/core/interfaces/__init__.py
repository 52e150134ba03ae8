"""Interfaces/abstracciones del Core.

Contratos (Protocol) que implementan las estrategias de comisión y los
validadores concretos en `adapters/`.
"""
