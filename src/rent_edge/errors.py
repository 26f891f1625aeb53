"""Exceptions raised by the scoring engine and its configuration layer."""

from __future__ import annotations


class ConfigError(ValueError):
    """Scoring configuration is unreadable or inconsistent."""


class EngineUnavailable(RuntimeError):
    """
    The scoring engine could not be instantiated.
    Callers treat this as "no score" rather than a user-facing error.
    """
