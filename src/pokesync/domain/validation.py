"""Explicit checks for caller input, applied before invoking the engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from pokesync.domain.errors import InputValidationError
from pokesync.domain.model import EDITABLE_FIELDS

if TYPE_CHECKING:
    from collections.abc import Mapping

MIN_NAME_LENGTH: Final[int] = 3

_STRING_FIELDS: Final[frozenset[str]] = frozenset({"name", "image_url", "description"})
_INT_FIELDS: Final[frozenset[str]] = frozenset({"price", "level", "upstream_id"})
_NULLABLE_FIELDS: Final[frozenset[str]] = frozenset({"image_url", "description", "upstream_id"})


def validate_key(key: str | int) -> str:
    """Return the upstream lookup key, lowercased and stripped."""

    value = str(key).strip().lower()
    if not value:
        raise InputValidationError("Key must not be empty")
    return value


def validate_count(value: int, *, name: str = "count", maximum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputValidationError(f"{name} must be an integer")
    if value <= 0:
        raise InputValidationError(f"{name} must be a positive integer, got {value}")
    if maximum is not None and value > maximum:
        raise InputValidationError(f"{name} must be <= {maximum}, got {value}")
    return value


def validate_offset(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InputValidationError(f"offset must be a non-negative integer, got {value!r}")
    return value


def validate_record_id(value: int) -> int:
    return validate_count(value, name="id")


def validate_partial(partial: Mapping[str, object]) -> dict[str, object]:
    """Check an update/create payload against the editable record fields."""

    unknown = set(partial).difference(EDITABLE_FIELDS)
    if unknown:
        raise InputValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

    for name, value in partial.items():
        if value is None:
            if name not in _NULLABLE_FIELDS:
                raise InputValidationError(f"{name} must not be null")
            continue
        if name in _STRING_FIELDS and not isinstance(value, str):
            raise InputValidationError(f"{name} must be a string")
        if name in _INT_FIELDS and (isinstance(value, bool) or not isinstance(value, int)):
            raise InputValidationError(f"{name} must be an integer")
        if name == "categories" and (
            not isinstance(value, list) or not all(isinstance(item, str) for item in value)  # pyright: ignore[reportUnknownVariableType]
        ):
            raise InputValidationError("categories must be a list of strings")

    name = partial.get("name")
    if isinstance(name, str) and len(name.strip()) < MIN_NAME_LENGTH:
        raise InputValidationError(f"name must have at least {MIN_NAME_LENGTH} characters")
    price = partial.get("price")
    if isinstance(price, int) and price < 1:
        raise InputValidationError("price must be a positive integer")

    return dict(partial)


def validate_new_record(fields: Mapping[str, object]) -> dict[str, object]:
    if "name" not in fields:
        raise InputValidationError("name is required")
    return validate_partial(fields)
