"""
Исключения пакета kpartition.

Все ошибки сообщаются вызывающему коду немедленно, без повторных попыток.
"""

from __future__ import annotations


class KMeansError(Exception):
    """Базовое исключение для ошибок кластеризации."""


class InvalidArgumentError(KMeansError, ValueError):
    """
    Некорректная конфигурация или некорректный вызов.

    Обнаруживается до начала любой работы, частичное состояние не создаётся.
    """


class ObserverFailureError(KMeansError):
    """Наблюдатель (plotter) сообщил об ошибке посреди прогона."""
