"""Typed environment readers for pokesync settings."""

from __future__ import annotations

import os


class ConfigurationError(RuntimeError):
    """A ``POKEAPI_*`` / ``POKESYNC_*`` / ``DATABASE_URI`` value could not be used."""


def _raw(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_str(name: str, default: str) -> str:
    """Return the environment variable, or ``default`` when unset or blank."""

    value = _raw(name)
    return default if value is None else value


def env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    value = _raw(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc
    _check_minimum(name, parsed, minimum)
    return parsed


def env_float(name: str, default: float, *, minimum: float | None = None) -> float:
    value = _raw(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    _check_minimum(name, parsed, minimum)
    return parsed


def _check_minimum(name: str, value: float, minimum: float | None) -> None:
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
